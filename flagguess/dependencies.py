"""
FastAPI dependency providers for the services built at startup.
"""
from fastapi import Request

from flagguess.config import Settings
from flagguess.game.entities import EntityCatalog
from flagguess.game.questions import QuestionGenerator
from flagguess.game.tracker import ProgressTracker


def get_catalog(request: Request) -> EntityCatalog:
    return request.app.state.catalog


def get_generator(request: Request) -> QuestionGenerator:
    return request.app.state.generator


def get_tracker(request: Request) -> ProgressTracker:
    return request.app.state.tracker


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
