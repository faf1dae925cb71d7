"""
Country, question and difficulty response schemas.
"""
from typing import List

from flagguess.game.difficulty import Difficulty, DifficultySettings
from flagguess.game.entities import Entity
from flagguess.game.questions import Question
from flagguess.schemas.common import CamelModel


class CountrySchema(CamelModel):
    id: str
    name: str
    flag: str  # image URL
    difficulty: Difficulty

    @classmethod
    def from_entity(cls, entity: Entity) -> "CountrySchema":
        return cls(id=entity.id, name=entity.name, flag=entity.image_ref, difficulty=entity.difficulty)


class CountryListResponse(CamelModel):
    success: bool = True
    data: List[CountrySchema]
    total: int


class QuestionSchema(CamelModel):
    """One multiple-choice question; the answer is identified by id, not position."""

    id: int
    country: CountrySchema
    options: List[CountrySchema]
    correct_answer_id: str

    @classmethod
    def from_question(cls, question: Question) -> "QuestionSchema":
        return cls(
            id=question.number,
            country=CountrySchema.from_entity(question.correct),
            options=[CountrySchema.from_entity(e) for e in question.options],
            correct_answer_id=question.correct_answer_id,
        )


class QuestionListResponse(CamelModel):
    success: bool = True
    data: List[QuestionSchema]
    difficulty: Difficulty
    total: int


class DifficultySettingsSchema(CamelModel):
    difficulty: Difficulty
    lives: int
    questions_per_level: int
    points_per_answer: int

    @classmethod
    def from_settings(cls, tier_settings: DifficultySettings) -> "DifficultySettingsSchema":
        return cls(
            difficulty=tier_settings.difficulty,
            lives=tier_settings.lives,
            questions_per_level=tier_settings.questions_per_level,
            points_per_answer=tier_settings.points_per_answer,
        )


class DifficultyListResponse(CamelModel):
    success: bool = True
    data: List[DifficultySettingsSchema]
