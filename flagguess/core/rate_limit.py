"""
Rate limiter shared by all routers.

Route decorators bind to the module-level limiter at import time, so the
settings of the app being built are applied through ``configure_rate_limits``.
Limits given as ``score_submit_limit`` are read on every request.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from flagguess.config import Settings, settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

_limits = {"score_submit": settings.SCORE_SUBMIT_RATE_LIMIT}


def configure_rate_limits(app_settings: Settings):
    """Apply an app's rate limit settings to the shared limiter."""
    limiter.enabled = app_settings.RATE_LIMIT_ENABLED
    _limits["score_submit"] = app_settings.SCORE_SUBMIT_RATE_LIMIT


def score_submit_limit() -> str:
    return _limits["score_submit"]
