"""
Score submission, progress and leaderboard schemas.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from flagguess.game.difficulty import Difficulty
from flagguess.game.records import (
    LeaderboardEntry,
    ProgressView,
    ScoreRecord,
    ScoreSubmission,
    SubmissionResult,
)
from flagguess.schemas.common import CamelModel


class ScoreSubmitRequest(CamelModel):
    """
    Score report sent when a game ends.

    Presence of userId, gameType, difficulty and score is checked by the
    tracker so every caller gets the same error message.
    """

    user_id: Optional[str] = None
    game_type: Optional[str] = None
    difficulty: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0)
    questions_answered: Optional[int] = Field(default=None, ge=0)
    correct_answers: Optional[int] = Field(default=None, ge=0)

    @field_validator("user_id", mode="before")
    @classmethod
    def numeric_user_id(cls, value):
        # Clients may send numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_submission(self) -> ScoreSubmission:
        return ScoreSubmission(
            user_id=self.user_id,
            game_type=self.game_type,
            difficulty=self.difficulty,
            score=self.score,
            questions_answered=self.questions_answered,
            correct_answers=self.correct_answers,
        )


class SubmissionResultSchema(CamelModel):
    score_id: str
    new_best_score: bool
    best_score: int
    unlocked_levels: List[str]

    @classmethod
    def from_result(cls, result: SubmissionResult) -> "SubmissionResultSchema":
        return cls(
            score_id=result.score_id,
            new_best_score=result.new_best_score,
            best_score=result.best_score,
            unlocked_levels=list(result.unlocked_levels),
        )


class SubmissionResponse(CamelModel):
    success: bool = True
    data: SubmissionResultSchema


class ScoreRecordSchema(CamelModel):
    score_id: str
    user_id: str
    game_type: str
    difficulty: Difficulty
    score: int
    questions_answered: int
    correct_answers: int
    accuracy: float
    timestamp: datetime

    @classmethod
    def from_record(cls, record: ScoreRecord) -> "ScoreRecordSchema":
        return cls(
            score_id=record.score_id,
            user_id=record.user_id,
            game_type=record.game_type,
            difficulty=record.difficulty,
            score=record.score,
            questions_answered=record.questions_answered,
            correct_answers=record.correct_answers,
            accuracy=record.accuracy,
            timestamp=record.timestamp,
        )


class ProgressSchema(CamelModel):
    high_scores: Dict[str, int]
    unlocked_levels: List[str]
    recent_scores: List[ScoreRecordSchema]
    total_games_played: int

    @classmethod
    def from_view(cls, view: ProgressView) -> "ProgressSchema":
        return cls(
            high_scores=dict(view.high_scores),
            unlocked_levels=list(view.unlocked_levels),
            recent_scores=[ScoreRecordSchema.from_record(r) for r in view.recent_scores],
            total_games_played=view.total_games_played,
        )


class ProgressResponse(CamelModel):
    success: bool = True
    data: ProgressSchema


class LeaderboardEntrySchema(CamelModel):
    rank: int
    user_id: str
    score: int
    accuracy: float
    timestamp: datetime

    @classmethod
    def from_entry(cls, entry: LeaderboardEntry) -> "LeaderboardEntrySchema":
        return cls(
            rank=entry.rank,
            user_id=entry.user_id,
            score=entry.score,
            accuracy=entry.accuracy,
            timestamp=entry.timestamp,
        )


class LeaderboardResponse(CamelModel):
    success: bool = True
    data: List[LeaderboardEntrySchema]
    game_type: str
    difficulty: Difficulty
    total: int
