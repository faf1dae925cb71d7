"""
FlagGuess API application factory.
"""
import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from flagguess import __version__
from flagguess.api import countries, health, scores
from flagguess.config import Settings, settings
from flagguess.core.exceptions import FlagGuessError
from flagguess.core.logging import configure_logging
from flagguess.core.rate_limit import configure_rate_limits, limiter
from flagguess.database import create_db_engine, create_session_factory, init_db
from flagguess.game.entities import EntityCatalog
from flagguess.game.questions import QuestionGenerator
from flagguess.game.sql_store import SqlStore
from flagguess.game.store import MemoryStore, ScoreStore
from flagguess.game.tracker import ProgressTracker
from flagguess.middleware import RequestContextMiddleware, SecurityHeadersMiddleware
from flagguess.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(error=message).model_dump(by_alias=True, exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    missing = [str(e["loc"][-1]) for e in errors if e.get("type") == "missing"]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    if not errors:
        return "Invalid request"
    first = errors[0]
    return f"Invalid {first['loc'][-1]}: {first['msg']}"


def register_exception_handlers(app: FastAPI):
    """Render every error as ``{"success": false, "error": ...}``."""

    @app.exception_handler(FlagGuessError)
    async def flagguess_error_handler(request: Request, exc: FlagGuessError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, _describe_validation_error(exc))

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'}")
        return _error(429, f"Rate limit exceeded: {exc.detail}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _error(404, "Route not found")
        return _error(exc.status_code, str(exc.detail))


def build_store(app_settings: Settings) -> ScoreStore:
    backend = app_settings.STORE_BACKEND.lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "sql":
        engine = create_db_engine(app_settings.DATABASE_URL)
        init_db(engine)
        return SqlStore(create_session_factory(engine))
    raise ValueError(f"Unknown STORE_BACKEND '{app_settings.STORE_BACKEND}' (expected 'memory' or 'sql')")


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[ScoreStore] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """
    Build the API with its services attached to ``app.state``.

    The countries dataset is read when the application starts up; until then
    (or if loading fails) country and question endpoints answer 503.
    """
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL)
    configure_rate_limits(app_settings)

    catalog = EntityCatalog(app_settings.COUNTRIES_DATA_PATH)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        catalog.load()
        logger.info(f"🎮 {app_settings.APP_NAME} ready ({app_settings.ENVIRONMENT}, {catalog.count} countries)")
        yield
        logger.info("Server shutting down")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Flag guessing trivia: questions, scores, progress and leaderboards",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.limiter = limiter
    app.state.catalog = catalog
    app.state.generator = QuestionGenerator(rng=rng, max_draw_attempts=app_settings.MAX_DRAW_ATTEMPTS)
    app.state.tracker = ProgressTracker(
        store if store is not None else build_store(app_settings),
        recent_limit=app_settings.RECENT_SCORES_LIMIT,
        dedup_before_limit=app_settings.LEADERBOARD_DEDUP_BEFORE_LIMIT,
    )

    # Last added runs first
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(countries.router, prefix="/api")
    app.include_router(scores.router, prefix="/api")
    app.include_router(health.router, prefix="/api")

    return app


app = create_app()


def run():
    """Serve the API with uvicorn using HOST and PORT from settings."""
    uvicorn.run("flagguess.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
