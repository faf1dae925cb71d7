"""
Game core: entities, question generation and progress tracking.
"""
from flagguess.game.difficulty import DIFFICULTY_SETTINGS, TIERS, Difficulty, parse_difficulty
from flagguess.game.entities import Entity, EntityCatalog
from flagguess.game.questions import Question, QuestionGenerator, fisher_yates_shuffle
from flagguess.game.records import ScoreSubmission
from flagguess.game.store import MemoryStore, ScoreStore
from flagguess.game.tracker import ProgressTracker

__all__ = [
    "DIFFICULTY_SETTINGS",
    "TIERS",
    "Difficulty",
    "parse_difficulty",
    "Entity",
    "EntityCatalog",
    "Question",
    "QuestionGenerator",
    "fisher_yates_shuffle",
    "ScoreSubmission",
    "MemoryStore",
    "ScoreStore",
    "ProgressTracker",
]
