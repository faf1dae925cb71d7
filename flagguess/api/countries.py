"""
Country and question endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from flagguess.config import Settings
from flagguess.core.exceptions import ValidationError
from flagguess.dependencies import get_catalog, get_generator, get_settings
from flagguess.game.difficulty import DIFFICULTY_SETTINGS, TIERS, Difficulty
from flagguess.game.entities import EntityCatalog
from flagguess.game.questions import QuestionGenerator
from flagguess.schemas.country import (
    CountryListResponse,
    CountrySchema,
    DifficultyListResponse,
    DifficultySettingsSchema,
    QuestionListResponse,
    QuestionSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["countries"])


def _generate(catalog: EntityCatalog, generator: QuestionGenerator, difficulty: Difficulty, count: int,
              max_count: int):
    if count > max_count:
        raise ValidationError(f"At most {max_count} questions can be requested at once")

    questions = generator.generate(catalog.require(), difficulty, count)
    logger.info(f"Generated {len(questions)} {difficulty.value} questions (requested {count})")

    return QuestionListResponse(
        data=[QuestionSchema.from_question(q) for q in questions],
        difficulty=difficulty,
        total=len(questions),
    )


@router.get("/countries", response_model=CountryListResponse)
async def list_countries(
    difficulty: Optional[Difficulty] = Query(default=None),
    catalog: EntityCatalog = Depends(get_catalog),
):
    """
    List all countries, optionally filtered by difficulty tier.

    Returns 503 while the countries dataset is not loaded.
    """
    countries = catalog.filter(difficulty)
    return CountryListResponse(
        data=[CountrySchema.from_entity(c) for c in countries],
        total=len(countries),
    )


@router.get("/difficulties", response_model=DifficultyListResponse)
async def list_difficulties():
    """Lives, question count and points per answer for each tier, easiest first."""
    return DifficultyListResponse(
        data=[DifficultySettingsSchema.from_settings(DIFFICULTY_SETTINGS[tier]) for tier in TIERS]
    )


@router.get("/questions/{difficulty}", response_model=QuestionListResponse)
async def get_level_questions(
    difficulty: Difficulty,
    catalog: EntityCatalog = Depends(get_catalog),
    generator: QuestionGenerator = Depends(get_generator),
    app_settings: Settings = Depends(get_settings),
):
    """Generate a full level: as many questions as the tier's settings call for."""
    count = min(DIFFICULTY_SETTINGS[difficulty].questions_per_level, app_settings.MAX_QUESTION_COUNT)
    return _generate(catalog, generator, difficulty, count, app_settings.MAX_QUESTION_COUNT)


@router.get("/questions/{difficulty}/{count}", response_model=QuestionListResponse)
async def get_questions(
    difficulty: Difficulty,
    count: int = Path(..., ge=1),
    catalog: EntityCatalog = Depends(get_catalog),
    generator: QuestionGenerator = Depends(get_generator),
    app_settings: Settings = Depends(get_settings),
):
    """
    Generate multiple-choice questions for a difficulty tier.

    Each question has four options from the same tier and a correctAnswerId.
    Fewer than ``count`` questions come back when the tier runs out of
    unused countries.

    Args:
        difficulty: easy, medium or hard
        count: Number of questions requested (1 to MAX_QUESTION_COUNT)
    """
    return _generate(catalog, generator, difficulty, count, app_settings.MAX_QUESTION_COUNT)
