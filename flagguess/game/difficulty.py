"""
Difficulty tiers and their per-tier play settings.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from flagguess.core.exceptions import ValidationError


class Difficulty(str, Enum):
    """Ordered difficulty tiers: easy < medium < hard."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def rank(self) -> int:
        return TIERS.index(self)

    def next_tier(self) -> Optional["Difficulty"]:
        """Tier unlocked by a new best score at this tier (None for the last one)."""
        position = self.rank + 1
        return TIERS[position] if position < len(TIERS) else None


TIERS = tuple(Difficulty)


def parse_difficulty(value) -> Difficulty:
    """Coerce a raw value to a Difficulty, raising ValidationError if unknown."""
    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(d.value for d in TIERS)
        raise ValidationError(f"Unknown difficulty '{value}' (expected one of: {valid})")


def sort_tiers(levels) -> list:
    """Return tier names in tier order, without duplicates."""
    parsed = {parse_difficulty(level) for level in levels}
    return [d.value for d in TIERS if d in parsed]


@dataclass(frozen=True)
class DifficultySettings:
    """Client-side play rules for one tier."""

    difficulty: Difficulty
    lives: int
    questions_per_level: int
    points_per_answer: int


DIFFICULTY_SETTINGS: Dict[Difficulty, DifficultySettings] = {
    Difficulty.EASY: DifficultySettings(Difficulty.EASY, lives=3, questions_per_level=10, points_per_answer=10),
    Difficulty.MEDIUM: DifficultySettings(Difficulty.MEDIUM, lives=2, questions_per_level=15, points_per_answer=20),
    Difficulty.HARD: DifficultySettings(Difficulty.HARD, lives=1, questions_per_level=20, points_per_answer=50),
}
