"""
Storage interface for score records, best scores and unlock ledgers.
"""
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from flagguess.game.difficulty import Difficulty
from flagguess.game.records import ProgressRecord, ScoreRecord, UnlockLedger


class ScoreStore(ABC):
    """
    Backend used by the tracker.

    Score records are append-only. ``find_scores`` returns matches in append
    order. Read-modify-write sequences on progress and ledgers are serialized
    by the tracker, not by the store.
    """

    @abstractmethod
    def append_score(self, record: ScoreRecord) -> None:
        ...

    @abstractmethod
    def find_scores(self, user_id: Optional[str] = None, game_type: Optional[str] = None,
                    difficulty: Optional[str] = None) -> List[ScoreRecord]:
        ...

    @abstractmethod
    def get_progress(self, user_id: str, game_type: str, difficulty: str) -> Optional[ProgressRecord]:
        ...

    @abstractmethod
    def put_progress(self, record: ProgressRecord) -> None:
        ...

    @abstractmethod
    def get_unlocks(self, user_id: str, game_type: str) -> Optional[UnlockLedger]:
        ...

    @abstractmethod
    def put_unlocks(self, ledger: UnlockLedger) -> None:
        ...


class MemoryStore(ScoreStore):
    """Process-lifetime store backed by plain dicts and lists."""

    def __init__(self):
        self._lock = threading.Lock()
        self._scores: List[ScoreRecord] = []
        self._progress: Dict[Tuple[str, str, str], ProgressRecord] = {}
        self._unlocks: Dict[Tuple[str, str], UnlockLedger] = {}

    def append_score(self, record: ScoreRecord) -> None:
        with self._lock:
            self._scores.append(record)

    def find_scores(self, user_id=None, game_type=None, difficulty=None) -> List[ScoreRecord]:
        with self._lock:
            snapshot = list(self._scores)
        return [
            r for r in snapshot
            if (user_id is None or r.user_id == user_id)
            and (game_type is None or r.game_type == game_type)
            and (difficulty is None or r.difficulty == difficulty)
        ]

    def get_progress(self, user_id, game_type, difficulty) -> Optional[ProgressRecord]:
        with self._lock:
            return self._progress.get((user_id, game_type, Difficulty(difficulty).value))

    def put_progress(self, record: ProgressRecord) -> None:
        with self._lock:
            self._progress[(record.user_id, record.game_type, Difficulty(record.difficulty).value)] = record

    def get_unlocks(self, user_id, game_type) -> Optional[UnlockLedger]:
        with self._lock:
            return self._unlocks.get((user_id, game_type))

    def put_unlocks(self, ledger: UnlockLedger) -> None:
        with self._lock:
            self._unlocks[(ledger.user_id, ledger.game_type)] = ledger
