"""
Score database model: one row per submitted game result.
"""
from sqlalchemy import Column, DateTime, Integer, String

from flagguess.database import Base


class Score(Base):
    """Append-only record of a finished game."""

    __tablename__ = "scores"

    id = Column(Integer, primary_key=True, autoincrement=True)  # append order
    score_id = Column(String(64), unique=True, nullable=False)
    user_id = Column(String, nullable=False, index=True)
    game_type = Column(String, nullable=False, index=True)
    difficulty = Column(String(16), nullable=False, index=True)  # 'easy', 'medium', 'hard'

    score = Column(Integer, nullable=False)
    questions_answered = Column(Integer, nullable=False, default=0)
    correct_answers = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Score(score_id={self.score_id}, user_id={self.user_id}, game_type={self.game_type}, difficulty={self.difficulty}, score={self.score})>"
