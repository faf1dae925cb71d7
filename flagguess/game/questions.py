"""
Multiple-choice question generation.

Each question has one correct entity and three distractors drawn from the
same difficulty tier. Correct answers never repeat within one generated set
while unused entities remain, and the options are shuffled uniformly.
"""
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, MutableSequence, Optional, Sequence, Set, Tuple

from flagguess.core.exceptions import InsufficientPoolError, ValidationError
from flagguess.game.difficulty import Difficulty, parse_difficulty
from flagguess.game.entities import Entity

logger = logging.getLogger(__name__)

OPTIONS_PER_QUESTION = 4
DISTRACTORS_PER_QUESTION = OPTIONS_PER_QUESTION - 1
DEFAULT_MAX_DRAW_ATTEMPTS = 100


@dataclass(frozen=True)
class Question:
    number: int
    correct: Entity
    options: Tuple[Entity, ...]

    @property
    def correct_answer_id(self) -> str:
        return self.correct.id


def fisher_yates_shuffle(items: MutableSequence, rng: random.Random) -> MutableSequence:
    """Shuffle ``items`` in place with the Fisher-Yates algorithm and return it."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


class QuestionGenerator:
    """
    Builds question sets from an entity pool.

    Args:
        rng: Source of randomness (seed it for reproducible sets)
        max_draw_attempts: Draws allowed per question before giving up on
            finding an unused correct answer
    """

    def __init__(self, rng: Optional[random.Random] = None, max_draw_attempts: int = DEFAULT_MAX_DRAW_ATTEMPTS):
        if max_draw_attempts < 1:
            raise ValueError("max_draw_attempts must be at least 1")
        self.rng = rng or random.Random()
        self.max_draw_attempts = max_draw_attempts

    def generate(self, pool: Sequence[Entity], difficulty, count: int) -> List[Question]:
        """
        Generate up to ``count`` questions for one difficulty tier.

        Fewer questions are returned when the tier runs out of unused
        correct answers.

        Raises:
            ValidationError: unknown difficulty or count below 1
            InsufficientPoolError: fewer than 4 entities at the tier
        """
        tier = parse_difficulty(difficulty)
        if not isinstance(count, int) or isinstance(count, bool) or count < 1:
            raise ValidationError(f"Question count must be a positive integer, got {count!r}")

        candidates = self._filter_pool(pool, tier)
        if len(candidates) < OPTIONS_PER_QUESTION:
            raise InsufficientPoolError(
                f"Not enough countries for difficulty '{tier.value}' "
                f"({len(candidates)} available, {OPTIONS_PER_QUESTION} required)"
            )

        used: Set[str] = set()
        questions: List[Question] = []

        while len(questions) < count and len(used) < len(candidates):
            correct = self._draw_unused(candidates, used)
            if correct is None:
                logger.warning(
                    f"Stopped after {len(questions)} of {count} {tier.value} questions: "
                    f"no unused country in {self.max_draw_attempts} draws"
                )
                break

            used.add(correct.id)
            options = [correct] + self._pick_distractors(candidates, correct, used)
            fisher_yates_shuffle(options, self.rng)

            questions.append(Question(number=len(questions) + 1, correct=correct, options=tuple(options)))

        logger.debug(f"Generated {len(questions)}/{count} {tier.value} questions from {len(candidates)} countries")
        return questions

    @staticmethod
    def _filter_pool(pool: Sequence[Entity], tier: Difficulty) -> List[Entity]:
        by_id: Dict[str, Entity] = {}
        for entity in pool:
            if entity.difficulty == tier and entity.id not in by_id:
                by_id[entity.id] = entity
        return list(by_id.values())

    def _draw_unused(self, candidates: List[Entity], used: Set[str]) -> Optional[Entity]:
        for _ in range(self.max_draw_attempts):
            candidate = self.rng.choice(candidates)
            if candidate.id not in used:
                return candidate
        return None

    def _pick_distractors(self, candidates: List[Entity], correct: Entity, used: Set[str]) -> List[Entity]:
        # Prefer countries not yet used in this set; near exhaustion allow reuse
        fresh = [e for e in candidates if e.id != correct.id and e.id not in used]
        if len(fresh) < DISTRACTORS_PER_QUESTION:
            fresh = [e for e in candidates if e.id != correct.id]
        return self.rng.sample(fresh, DISTRACTORS_PER_QUESTION)
