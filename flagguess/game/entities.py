"""
Guessable entities (countries) and the catalog that loads them at startup.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from flagguess.core.exceptions import DataUnavailableError, ValidationError
from flagguess.game.difficulty import Difficulty, parse_difficulty

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entity:
    """Immutable reference item shown as a flag and guessed by name."""

    id: str
    name: str
    image_ref: str
    difficulty: Difficulty


def entity_from_dict(raw: dict) -> Entity:
    """Build an Entity from one dataset record (``flag`` or ``imageRef`` holds the image)."""
    if not isinstance(raw, dict):
        raise ValidationError(f"Country record must be an object, got {type(raw).__name__}")

    image_ref = raw.get("flag") or raw.get("imageRef")
    if raw.get("id") in (None, "") or not raw.get("name") or not image_ref:
        raise ValidationError(f"Incomplete country record: {raw!r}")

    return Entity(
        id=str(raw["id"]),
        name=str(raw["name"]),
        image_ref=str(image_ref),
        difficulty=parse_difficulty(raw.get("difficulty")),
    )


class EntityCatalog:
    """
    Static collection of entities loaded once from a JSON file.

    A failed load leaves the catalog empty; pool-dependent operations then
    raise DataUnavailableError while the process keeps serving the rest.
    """

    def __init__(self, path: Optional[Path] = None, entities: Optional[List[Entity]] = None):
        self.path = Path(path) if path else None
        self._entities: List[Entity] = list(entities) if entities else []

    @property
    def count(self) -> int:
        return len(self._entities)

    @property
    def loaded(self) -> bool:
        return bool(self._entities)

    def load(self) -> int:
        """Read the dataset file; returns the number of entities loaded."""
        if self.path is None:
            logger.error("No countries dataset path configured")
            return 0

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"❌ Error loading countries data from {self.path}: {e}")
            logger.error("Question and country endpoints will be unavailable")
            self._entities = []
            return 0

        records = payload.get("countries", []) if isinstance(payload, dict) else payload
        entities = []
        seen_ids = set()
        for raw in records:
            try:
                entity = entity_from_dict(raw)
            except ValidationError as e:
                logger.warning(f"Skipping country record: {e.message}")
                continue
            if entity.id in seen_ids:
                logger.warning(f"Skipping duplicate country id {entity.id!r}")
                continue
            seen_ids.add(entity.id)
            entities.append(entity)

        self._entities = entities
        logger.info(f"🏳️ Loaded {len(entities)} countries from {self.path}")
        return len(entities)

    def require(self) -> List[Entity]:
        """All entities, or DataUnavailableError when the dataset is not loaded."""
        if not self._entities:
            raise DataUnavailableError("Countries data not loaded. Please check server logs.")
        return list(self._entities)

    def filter(self, difficulty=None) -> List[Entity]:
        entities = self.require()
        if difficulty is None:
            return entities
        tier = parse_difficulty(difficulty)
        return [e for e in entities if e.difficulty == tier]
