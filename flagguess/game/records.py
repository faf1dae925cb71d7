"""
Score, progress and leaderboard records handled by the tracker and stores.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from flagguess.game.difficulty import Difficulty


def compute_accuracy(questions_answered: int, correct_answers: int) -> float:
    """Percentage of correct answers, 0 when nothing was answered."""
    if questions_answered > 0:
        return correct_answers / questions_answered * 100
    return 0.0


@dataclass
class ScoreSubmission:
    """Raw score report from a client; validated by the tracker."""

    user_id: Optional[str] = None
    game_type: Optional[str] = None
    difficulty: Optional[str] = None
    score: Optional[int] = None
    questions_answered: Optional[int] = None
    correct_answers: Optional[int] = None


@dataclass(frozen=True)
class ScoreRecord:
    score_id: str
    user_id: str
    game_type: str
    difficulty: Difficulty
    score: int
    questions_answered: int
    correct_answers: int
    timestamp: datetime

    @property
    def accuracy(self) -> float:
        return compute_accuracy(self.questions_answered, self.correct_answers)


@dataclass(frozen=True)
class ProgressRecord:
    """Best score for one (user, game, difficulty)."""

    user_id: str
    game_type: str
    difficulty: Difficulty
    best_score: int = 0


@dataclass(frozen=True)
class UnlockLedger:
    """Tiers a user may play for one game; always includes easy."""

    user_id: str
    game_type: str
    levels: Tuple[str, ...] = (Difficulty.EASY.value,)


@dataclass(frozen=True)
class SubmissionResult:
    score_id: str
    new_best_score: bool
    best_score: int
    unlocked_levels: List[str]


@dataclass(frozen=True)
class ProgressView:
    high_scores: Dict[str, int]
    unlocked_levels: List[str]
    recent_scores: List[ScoreRecord] = field(default_factory=list)
    total_games_played: int = 0


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    user_id: str
    score: int
    accuracy: float
    timestamp: datetime
