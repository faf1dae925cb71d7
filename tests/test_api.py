import random
import threading

import pytest
from fastapi.testclient import TestClient

from flagguess.config import Settings
from flagguess.dependencies import get_tracker
from flagguess.game.store import MemoryStore
from flagguess.main import create_app


def post_score(client, **overrides):
    payload = {"userId": "pi-user-1", "gameType": "flag", "difficulty": "easy", "score": 50}
    payload.update(overrides)
    return client.post("/api/scores", json=payload)


# ===== HEALTH & COUNTRIES =====

def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "OK"
    assert body["countriesLoaded"] == 13
    assert body["dataLoaded"] is True
    assert response.headers["X-Request-ID"]
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_list_countries(client):
    body = client.get("/api/countries").json()

    assert body["success"] is True
    assert body["total"] == 13
    assert set(body["data"][0]) == {"id", "name", "flag", "difficulty"}


def test_list_countries_by_difficulty(client):
    body = client.get("/api/countries", params={"difficulty": "medium"}).json()

    assert body["total"] == 4
    assert {c["difficulty"] for c in body["data"]} == {"medium"}


def test_list_countries_unknown_difficulty(client):
    response = client.get("/api/countries", params={"difficulty": "extreme"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_difficulties(client):
    body = client.get("/api/difficulties").json()

    assert [d["difficulty"] for d in body["data"]] == ["easy", "medium", "hard"]
    assert body["data"][0] == {"difficulty": "easy", "lives": 3, "questionsPerLevel": 10, "pointsPerAnswer": 10}


# ===== QUESTIONS =====

def test_questions(client):
    response = client.get("/api/questions/easy/5")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["difficulty"] == "easy"
    assert body["total"] == 5
    correct_ids = set()
    for number, question in enumerate(body["data"], start=1):
        option_ids = [o["id"] for o in question["options"]]
        assert question["id"] == number
        assert len(set(option_ids)) == 4
        assert question["correctAnswerId"] == question["country"]["id"]
        assert question["correctAnswerId"] in option_ids
        correct_ids.add(question["correctAnswerId"])
    assert len(correct_ids) == 5


def test_questions_stop_when_tier_exhausted(client):
    body = client.get("/api/questions/medium/10").json()

    assert body["total"] == 4


def test_questions_default_to_tier_level_size(client):
    body = client.get("/api/questions/easy").json()

    # Tier asks for 10 but only 6 easy countries exist
    assert body["total"] == 6


def test_questions_insufficient_pool(client):
    response = client.get("/api/questions/hard/5")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Not enough countries for difficulty 'hard' (3 available, 4 required)",
    }


@pytest.mark.parametrize("path", [
    "/api/questions/expert/5",
    "/api/questions/easy/0",
    "/api/questions/easy/abc",
    "/api/questions/easy/21",
])
def test_questions_invalid_input(client, path):
    response = client.get(path)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_pool_endpoints_unavailable_without_dataset(tmp_path):
    app_settings = Settings(COUNTRIES_DATA_PATH=tmp_path / "missing.json", RATE_LIMIT_ENABLED=False)
    app = create_app(app_settings, store=MemoryStore())

    with TestClient(app) as client:
        questions = client.get("/api/questions/easy/5")
        countries = client.get("/api/countries")
        health = client.get("/api/health")
        score = post_score(client)

    assert questions.status_code == 503
    assert questions.json()["success"] is False
    assert countries.status_code == 503
    assert health.status_code == 200
    assert health.json()["countriesLoaded"] == 0
    assert health.json()["dataLoaded"] is False
    assert score.status_code == 200


# ===== SCORES & PROGRESS =====

def test_submit_score(client):
    response = post_score(client, score=70, questionsAnswered=10, correctAnswers=7)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["newBestScore"] is True
    assert data["bestScore"] == 70
    assert data["unlockedLevels"] == ["easy", "medium"]
    assert data["scoreId"]


def test_submit_lower_score(client):
    post_score(client, score=70)

    data = post_score(client, score=20).json()["data"]

    assert data["newBestScore"] is False
    assert data["bestScore"] == 70


def test_submit_missing_fields(client):
    response = client.post("/api/scores", json={"userId": "pi-user-1", "difficulty": "easy"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing required fields: gameType, score"}


@pytest.mark.parametrize("overrides", [
    {"difficulty": "extreme"},
    {"score": -5},
    {"score": "lots"},
    {"correctAnswers": -1},
])
def test_submit_invalid_values(client, overrides):
    response = post_score(client, **overrides)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_progress_for_new_user(client):
    response = client.get("/api/users/stranger/progress")

    assert response.status_code == 200
    assert response.json()["data"] == {
        "highScores": {"easy": 0, "medium": 0, "hard": 0},
        "unlockedLevels": ["easy"],
        "recentScores": [],
        "totalGamesPlayed": 0,
    }


def test_progress_after_games(client):
    post_score(client, score=40, questionsAnswered=5, correctAnswers=4)
    post_score(client, score=60, difficulty="medium")
    post_score(client, score=500, gameType="capital")

    data = client.get("/api/users/pi-user-1/progress", params={"gameType": "flag"}).json()["data"]

    assert data["highScores"] == {"easy": 40, "medium": 60, "hard": 0}
    assert data["unlockedLevels"] == ["easy", "medium", "hard"]
    assert data["totalGamesPlayed"] == 2
    assert [s["score"] for s in data["recentScores"]] == [60, 40]
    assert data["recentScores"][1]["accuracy"] == 80.0
    assert data["recentScores"][1]["userId"] == "pi-user-1"


# ===== LEADERBOARD =====

def test_leaderboard(client):
    for user, score in (("A", 100), ("B", 90), ("C", 90), ("D", 80), ("E", 70)):
        post_score(client, userId=user, score=score)

    response = client.get("/api/leaderboard/flag/easy", params={"limit": 3})

    body = response.json()
    assert body["success"] is True
    assert body["gameType"] == "flag"
    assert body["difficulty"] == "easy"
    assert body["total"] == 3
    assert [(e["rank"], e["userId"], e["score"]) for e in body["data"]] == [(1, "A", 100), (2, "B", 90), (3, "C", 90)]


def test_leaderboard_one_entry_per_user(client):
    post_score(client, userId="A", score=100)
    post_score(client, userId="A", score=95)
    post_score(client, userId="B", score=90)
    post_score(client, userId="C", score=80)

    body = client.get("/api/leaderboard/flag/easy", params={"limit": 3}).json()

    assert [e["userId"] for e in body["data"]] == ["A", "B", "C"]


@pytest.mark.parametrize("path", [
    "/api/leaderboard/flag/easy?limit=0",
    "/api/leaderboard/flag/easy?limit=1000",
    "/api/leaderboard/flag/insane",
])
def test_leaderboard_invalid_input(client, path):
    assert client.get(path).status_code == 400


def test_concurrent_score_posts(client):
    barrier = threading.Barrier(2)
    statuses = []

    def submit(score):
        barrier.wait()
        statuses.append(post_score(client, score=score).status_code)

    threads = [threading.Thread(target=submit, args=(s,)) for s in (50, 60)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert statuses == [200, 200]
    data = client.get("/api/users/pi-user-1/progress").json()["data"]
    assert data["highScores"]["easy"] == 60


# ===== ERRORS & LIMITS =====

def test_unknown_route(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Route not found"}


def test_unexpected_errors_are_normalized(client):
    class BrokenTracker:
        def query_progress(self, user_id, game_type):
            raise RuntimeError("database password is hunter2")

    client.app.dependency_overrides[get_tracker] = lambda: BrokenTracker()
    try:
        response = client.get("/api/users/u1/progress")
    finally:
        client.app.dependency_overrides.clear()

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Internal server error"
    assert "hunter2" not in response.text




def test_numeric_user_id_is_accepted(client):
    response = post_score(client, userId=12345, score=40)

    assert response.status_code == 200
    data = client.get("/api/users/12345/progress").json()["data"]
    assert data["totalGamesPlayed"] == 1
    assert data["recentScores"][0]["userId"] == "12345"


def test_score_submission_rate_limited(app_settings):
    limited = app_settings.model_copy(update={"RATE_LIMIT_ENABLED": True, "SCORE_SUBMIT_RATE_LIMIT": "3/minute"})
    app = create_app(limited, store=MemoryStore(), rng=random.Random(1))

    with TestClient(app) as client:
        responses = [post_score(client, score=i) for i in range(4)]

    assert [r.status_code for r in responses] == [200, 200, 200, 429]
    assert responses[3].json()["success"] is False


def test_rate_limit_disabled_in_settings(client):
    statuses = [post_score(client, score=i).status_code for i in range(31)]

    assert statuses == [200] * 31


def test_leaderboard_limits_follow_app_settings(countries_file):
    app_settings = Settings(
        COUNTRIES_DATA_PATH=countries_file,
        RATE_LIMIT_ENABLED=False,
        DEFAULT_LEADERBOARD_LIMIT=2,
        MAX_LEADERBOARD_LIMIT=5,
    )
    app = create_app(app_settings, store=MemoryStore(), rng=random.Random(3))

    with TestClient(app) as client:
        for user, score in (("A", 40), ("B", 30), ("C", 20), ("D", 10)):
            post_score(client, userId=user, score=score)
        too_many = client.get("/api/leaderboard/flag/easy", params={"limit": 50})
        at_max = client.get("/api/leaderboard/flag/easy", params={"limit": 5})
        default = client.get("/api/leaderboard/flag/easy")

    assert too_many.status_code == 400
    assert too_many.json()["error"] == "Leaderboard limit must be at most 5"
    assert at_max.json()["total"] == 4
    assert [e["userId"] for e in default.json()["data"]] == ["A", "B"]
