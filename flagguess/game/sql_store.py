"""
SQLAlchemy-backed score store.
"""
import logging
from datetime import timezone
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from flagguess.game.difficulty import Difficulty
from flagguess.game.records import ProgressRecord, ScoreRecord, UnlockLedger
from flagguess.game.store import ScoreStore
from flagguess.models import Progress, Score, Unlock

logger = logging.getLogger(__name__)


def _to_record(row: Score) -> ScoreRecord:
    created_at = row.created_at
    # SQLite drops tzinfo on the way back
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return ScoreRecord(
        score_id=row.score_id,
        user_id=row.user_id,
        game_type=row.game_type,
        difficulty=Difficulty(row.difficulty),
        score=row.score,
        questions_answered=row.questions_answered,
        correct_answers=row.correct_answers,
        timestamp=created_at,
    )


class SqlStore(ScoreStore):
    """Store rows through a SQLAlchemy session factory, one transaction per call."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def append_score(self, record: ScoreRecord) -> None:
        with self.session_factory.begin() as db:
            db.add(Score(
                score_id=record.score_id,
                user_id=record.user_id,
                game_type=record.game_type,
                difficulty=Difficulty(record.difficulty).value,
                score=record.score,
                questions_answered=record.questions_answered,
                correct_answers=record.correct_answers,
                created_at=record.timestamp,
            ))

    def find_scores(self, user_id=None, game_type=None, difficulty=None) -> List[ScoreRecord]:
        with self.session_factory() as db:
            query = db.query(Score)
            if user_id is not None:
                query = query.filter(Score.user_id == user_id)
            if game_type is not None:
                query = query.filter(Score.game_type == game_type)
            if difficulty is not None:
                query = query.filter(Score.difficulty == Difficulty(difficulty).value)
            return [_to_record(row) for row in query.order_by(Score.id).all()]

    def get_progress(self, user_id, game_type, difficulty) -> Optional[ProgressRecord]:
        tier = Difficulty(difficulty)
        with self.session_factory() as db:
            row = db.query(Progress).filter(
                Progress.user_id == user_id,
                Progress.game_type == game_type,
                Progress.difficulty == tier.value,
            ).first()
            if not row:
                return None
            return ProgressRecord(user_id=row.user_id, game_type=row.game_type,
                                  difficulty=tier, best_score=row.best_score)

    def put_progress(self, record: ProgressRecord) -> None:
        tier = Difficulty(record.difficulty)
        with self.session_factory.begin() as db:
            row = db.query(Progress).filter(
                Progress.user_id == record.user_id,
                Progress.game_type == record.game_type,
                Progress.difficulty == tier.value,
            ).first()
            if row is None:
                row = Progress(user_id=record.user_id, game_type=record.game_type, difficulty=tier.value)
                db.add(row)
            row.best_score = record.best_score

    def get_unlocks(self, user_id, game_type) -> Optional[UnlockLedger]:
        with self.session_factory() as db:
            row = db.query(Unlock).filter(Unlock.user_id == user_id, Unlock.game_type == game_type).first()
            if not row:
                return None
            return UnlockLedger(user_id=row.user_id, game_type=row.game_type, levels=tuple(row.levels))

    def put_unlocks(self, ledger: UnlockLedger) -> None:
        with self.session_factory.begin() as db:
            row = db.query(Unlock).filter(
                Unlock.user_id == ledger.user_id,
                Unlock.game_type == ledger.game_type,
            ).first()
            if row is None:
                row = Unlock(user_id=ledger.user_id, game_type=ledger.game_type)
                db.add(row)
            row.levels = list(ledger.levels)
        logger.debug(f"Unlocks for {ledger.user_id}/{ledger.game_type}: {list(ledger.levels)}")
