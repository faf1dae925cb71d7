"""
Database models package.
"""
from flagguess.models.score import Score
from flagguess.models.progress import Progress, Unlock

__all__ = ["Score", "Progress", "Unlock"]
