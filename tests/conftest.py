import json
import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from flagguess.config import Settings
from flagguess.core.rate_limit import limiter
from flagguess.database import create_db_engine, create_session_factory, init_db
from flagguess.game.difficulty import Difficulty
from flagguess.game.entities import Entity
from flagguess.game.sql_store import SqlStore
from flagguess.game.store import MemoryStore
from flagguess.main import create_app

COUNTRIES = [
    ("us", "United States", "easy"),
    ("fr", "France", "easy"),
    ("de", "Germany", "easy"),
    ("jp", "Japan", "easy"),
    ("br", "Brazil", "easy"),
    ("it", "Italy", "easy"),
    ("se", "Sweden", "medium"),
    ("no", "Norway", "medium"),
    ("ch", "Switzerland", "medium"),
    ("pt", "Portugal", "medium"),
    ("bt", "Bhutan", "hard"),
    ("np", "Nepal", "hard"),
    ("km", "Comoros", "hard"),
]


def make_entity(entity_id, name=None, difficulty="easy"):
    return Entity(
        id=entity_id,
        name=name or entity_id.upper(),
        image_ref=f"https://flagcdn.com/w320/{entity_id}.png",
        difficulty=Difficulty(difficulty),
    )


def make_pool(easy=0, medium=0, hard=0):
    pool = []
    for tier, size in (("easy", easy), ("medium", medium), ("hard", hard)):
        pool.extend(make_entity(f"{tier[0]}{i}", difficulty=tier) for i in range(size))
    return pool


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start=None):
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sql_store():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield SqlStore(create_session_factory(engine))
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def countries_file(tmp_path):
    path = tmp_path / "countries.json"
    records = [
        {"id": code, "name": name, "flag": f"https://flagcdn.com/w320/{code}.png", "difficulty": tier}
        for code, name, tier in COUNTRIES
    ]
    path.write_text(json.dumps({"countries": records}), encoding="utf-8")
    return path


@pytest.fixture
def app_settings(countries_file):
    return Settings(
        COUNTRIES_DATA_PATH=countries_file,
        STORE_BACKEND="memory",
        RATE_LIMIT_ENABLED=False,
        MAX_QUESTION_COUNT=20,
    )


@pytest.fixture(autouse=True)
def fresh_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def client(app_settings):
    app = create_app(app_settings, store=MemoryStore(), rng=random.Random(42))
    with TestClient(app) as test_client:
        yield test_client
