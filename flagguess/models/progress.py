"""
Progress database models: best scores and unlocked tiers per user.
"""
from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint
from datetime import datetime, timezone

from flagguess.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Progress(Base):
    """Best score for one (user, game type, difficulty)."""

    __tablename__ = "progress"
    __table_args__ = (UniqueConstraint("user_id", "game_type", "difficulty", name="uq_progress_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    game_type = Column(String, nullable=False)
    difficulty = Column(String(16), nullable=False)
    best_score = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Progress(user_id={self.user_id}, game_type={self.game_type}, difficulty={self.difficulty}, best_score={self.best_score})>"


class Unlock(Base):
    """Unlocked tiers for one (user, game type)."""

    __tablename__ = "unlocks"
    __table_args__ = (UniqueConstraint("user_id", "game_type", name="uq_unlock_key"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    game_type = Column(String, nullable=False)
    levels = Column(JSON, nullable=False)  # e.g. ["easy", "medium"]

    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Unlock(user_id={self.user_id}, game_type={self.game_type}, levels={self.levels})>"
