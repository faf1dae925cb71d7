"""
Application settings loaded from environment variables and an optional .env file.
"""
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Runtime configuration for the FlagGuess API."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "FlagGuess API"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Static dataset of guessable countries
    COUNTRIES_DATA_PATH: Path = PACKAGE_DIR / "data" / "countries.json"

    # Score storage: "memory" (process lifetime) or "sql" (SQLAlchemy URL below)
    STORE_BACKEND: str = "memory"
    DATABASE_URL: str = "sqlite://"

    # Question generation
    MAX_QUESTION_COUNT: int = 50
    MAX_DRAW_ATTEMPTS: int = 100

    # Progress / leaderboard
    RECENT_SCORES_LIMIT: int = 10
    DEFAULT_LEADERBOARD_LIMIT: int = 10
    MAX_LEADERBOARD_LIMIT: int = 100
    LEADERBOARD_DEDUP_BEFORE_LIMIT: bool = True

    # Rate limiting (slowapi syntax)
    RATE_LIMIT_ENABLED: bool = True
    SCORE_SUBMIT_RATE_LIMIT: str = "30/minute"

    CORS_ORIGINS: List[str] = ["*"]


settings = Settings()
