"""
Score submission, progress and leaderboard aggregation.

Best scores are tracked per (user, game type, difficulty). A new best at a
tier unlocks the next tier in a single ledger per (user, game type).
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, Hashable, List, Optional

from flagguess.core.exceptions import ValidationError
from flagguess.game.difficulty import TIERS, Difficulty, parse_difficulty, sort_tiers
from flagguess.game.records import (
    LeaderboardEntry,
    ProgressRecord,
    ProgressView,
    ScoreRecord,
    ScoreSubmission,
    SubmissionResult,
    UnlockLedger,
)
from flagguess.game.store import ScoreStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("user_id", "game_type", "difficulty", "score")
FIELD_LABELS = {
    "user_id": "userId",
    "game_type": "gameType",
    "difficulty": "difficulty",
    "score": "score",
    "questions_answered": "questionsAnswered",
    "correct_answers": "correctAnswers",
}


class KeyedLocks:
    """
    One lock per key, created on first use.

    Locks are kept for the life of the tracker, so the map grows with the
    number of distinct keys seen.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}

    @contextmanager
    def hold(self, key: Hashable):
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            yield


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_id(value) -> str:
    return str(value).strip()


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _non_negative_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{FIELD_LABELS[name]} must be an integer")
    if value < 0:
        raise ValidationError(f"{FIELD_LABELS[name]} must not be negative")
    return value


class ProgressTracker:
    """
    Records scores and answers progress and leaderboard queries.

    Args:
        store: Backend holding scores, best scores and unlock ledgers
        recent_limit: Number of recent scores returned by query_progress
        dedup_before_limit: Leaderboard keeps each user's best score before
            truncating to the limit (False truncates the raw ranking first)
        clock: Returns the timestamp for new score records
    """

    def __init__(
        self,
        store: ScoreStore,
        recent_limit: int = 10,
        dedup_before_limit: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.recent_limit = recent_limit
        self.dedup_before_limit = dedup_before_limit
        self.clock = clock or _utcnow
        self._progress_locks = KeyedLocks()
        self._ledger_locks = KeyedLocks()

    # ===== SUBMISSION =====

    def submit(self, submission: ScoreSubmission) -> SubmissionResult:
        """
        Append a score record and update the best score and unlocked tiers.

        Raises:
            ValidationError: a required field is missing or a value is invalid
        """
        record = self._build_record(submission)
        self.store.append_score(record)

        key = (record.user_id, record.game_type, record.difficulty.value)
        with self._progress_locks.hold(key):
            current = self.store.get_progress(record.user_id, record.game_type, record.difficulty)
            best_before = current.best_score if current else 0

            new_best = record.score > best_before
            if new_best:
                self.store.put_progress(ProgressRecord(
                    user_id=record.user_id,
                    game_type=record.game_type,
                    difficulty=record.difficulty,
                    best_score=record.score,
                ))
                unlocked = self._unlock_after(record.user_id, record.game_type, record.difficulty)
            else:
                unlocked = self._read_unlocks(record.user_id, record.game_type)

        if new_best:
            logger.info(
                f"🏆 New best for {record.user_id} on {record.game_type}/{record.difficulty.value}: "
                f"{record.score} (was {best_before})"
            )

        return SubmissionResult(
            score_id=record.score_id,
            new_best_score=new_best,
            best_score=max(best_before, record.score),
            unlocked_levels=unlocked,
        )

    def _build_record(self, submission: ScoreSubmission) -> ScoreRecord:
        missing = [FIELD_LABELS[name] for name in REQUIRED_FIELDS if _is_missing(getattr(submission, name))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        questions_answered = submission.questions_answered or 0
        correct_answers = submission.correct_answers or 0

        return ScoreRecord(
            score_id=uuid.uuid4().hex,
            user_id=_normalize_id(submission.user_id),
            game_type=_normalize_id(submission.game_type),
            difficulty=parse_difficulty(submission.difficulty),
            score=_non_negative_int("score", submission.score),
            questions_answered=_non_negative_int("questions_answered", questions_answered),
            correct_answers=_non_negative_int("correct_answers", correct_answers),
            timestamp=self.clock(),
        )

    def _unlock_after(self, user_id: str, game_type: str, difficulty: Difficulty) -> List[str]:
        """Add the tier after ``difficulty`` to the ledger (idempotent); return the ledger."""
        with self._ledger_locks.hold((user_id, game_type)):
            levels = self._read_unlocks(user_id, game_type)
            next_tier = difficulty.next_tier()
            if next_tier is not None and next_tier.value not in levels:
                levels = sort_tiers(levels + [next_tier.value])
                self.store.put_unlocks(UnlockLedger(user_id=user_id, game_type=game_type, levels=tuple(levels)))
                logger.info(f"🔓 Unlocked {next_tier.value} for {user_id} on {game_type}")
            return levels

    def _read_unlocks(self, user_id: str, game_type: str) -> List[str]:
        ledger = self.store.get_unlocks(user_id, game_type)
        if ledger is None:
            return [Difficulty.EASY.value]
        return sort_tiers(list(ledger.levels) + [Difficulty.EASY.value])

    # ===== QUERIES =====

    def query_progress(self, user_id: str, game_type: str = "flag") -> ProgressView:
        """Best score per tier, unlocked tiers and the most recent scores for one user."""
        user_id = _normalize_id(user_id)
        game_type = _normalize_id(game_type)
        high_scores = {}
        for tier in TIERS:
            progress = self.store.get_progress(user_id, game_type, tier)
            high_scores[tier.value] = progress.best_score if progress else 0

        scores = self.store.find_scores(user_id=user_id, game_type=game_type)
        # Newest first; among equal timestamps the later submission wins
        recent = sorted(reversed(scores), key=lambda r: r.timestamp, reverse=True)[:self.recent_limit]

        return ProgressView(
            high_scores=high_scores,
            unlocked_levels=self._read_unlocks(user_id, game_type),
            recent_scores=recent,
            total_games_played=len(scores),
        )

    def query_leaderboard(self, game_type: str, difficulty, limit: int = 10) -> List[LeaderboardEntry]:
        """
        Rank users by score for one game type and tier.

        Ties keep submission order, so the earlier score ranks first.
        """
        game_type = _normalize_id(game_type)
        tier = parse_difficulty(difficulty)
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError(f"Leaderboard limit must be a positive integer, got {limit!r}")

        ranked = sorted(
            self.store.find_scores(game_type=game_type, difficulty=tier),
            key=lambda r: r.score,
            reverse=True,
        )
        if not self.dedup_before_limit:
            ranked = ranked[:limit]

        best_per_user: Dict[str, ScoreRecord] = {}
        for record in ranked:
            # ranked is already ordered, so the first record seen is the user's best
            best_per_user.setdefault(record.user_id, record)

        top = sorted(best_per_user.values(), key=lambda r: r.score, reverse=True)[:limit]
        return [
            LeaderboardEntry(
                rank=position,
                user_id=record.user_id,
                score=record.score,
                accuracy=record.accuracy,
                timestamp=record.timestamp,
            )
            for position, record in enumerate(top, start=1)
        ]
