"""Key-value persistence for engine snapshots.

The surrounding application supplies any string-keyed store with
``get_kv``/``set_kv``. MemoryStore and FileStore are provided;
CivilizationStore maps engines to keys and envelopes to JSON text.
"""

from __future__ import annotations

import logging
import os
import random
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from civitas.heredity.engine import HeredityEngine
from civitas.ids import IdGenerator
from civitas.language.engine import LinguisticDriftEngine
from civitas.persistence.serializer import StateSerializer
from civitas.society.registry import SocialHierarchyRegistry

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String-keyed get/set storage."""

    def get_kv(self, key: str) -> str | None: ...

    def set_kv(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process dict-backed store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get_kv(self, key: str) -> str | None:
        return self._data.get(key)

    def set_kv(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)


class FileStore:
    """Directory-backed store: one JSON file per key, written atomically."""

    def __init__(self, directory: str = "data/civitas"):
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        # Percent-encoding keeps distinct keys on distinct files
        return self._dir / f"{quote(key, safe='')}.json"

    def get_kv(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_kv(self, key: str, value: str) -> None:
        """Atomic write: write to temp file, then rename."""
        path = self._path(key)
        temp_path = self._dir / f".{path.name}.tmp"
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(temp_path, path)
        finally:
            # Clean up temp file if it still exists
            if temp_path.exists():
                temp_path.unlink()


class CivilizationStore:
    """Save and load heredity, language and society state through a KeyValueStore."""

    SOCIETY_KEY = "society"

    def __init__(self, store: KeyValueStore, serializer: StateSerializer | None = None):
        self._store = store
        self._serializer = serializer or StateSerializer()

    @staticmethod
    def genetics_key(agent_id: str) -> str:
        return f"genetics:{agent_id}"

    @staticmethod
    def language_key(language_id: str) -> str:
        return f"language:{language_id}"

    def save_genetics(self, agent_id: str, engine: HeredityEngine) -> str:
        key = self.genetics_key(agent_id)
        self._store.set_kv(key, self._serializer.dumps(self._serializer.serialize_genetics(engine)))
        logger.info(f"Persisted genetics for {agent_id}")
        return key

    def load_genetics(
        self, agent_id: str, rng: random.Random | None = None, ids: IdGenerator | None = None
    ) -> HeredityEngine | None:
        text = self._store.get_kv(self.genetics_key(agent_id))
        if text is None:
            return None
        return self._serializer.deserialize_genetics(self._serializer.loads(text), rng=rng, ids=ids)

    def save_language(self, engine: LinguisticDriftEngine) -> str:
        key = self.language_key(engine.language.id)
        self._store.set_kv(key, self._serializer.dumps(self._serializer.serialize_language(engine)))
        logger.info(f"Persisted language {engine.language.id}")
        return key

    def load_language(
        self, language_id: str, rng: random.Random | None = None, ids: IdGenerator | None = None
    ) -> LinguisticDriftEngine | None:
        text = self._store.get_kv(self.language_key(language_id))
        if text is None:
            return None
        return self._serializer.deserialize_language(self._serializer.loads(text), rng=rng, ids=ids)

    def save_society(self, registry: SocialHierarchyRegistry) -> str:
        self._store.set_kv(
            self.SOCIETY_KEY, self._serializer.dumps(self._serializer.serialize_society(registry))
        )
        logger.info("Persisted society registry")
        return self.SOCIETY_KEY

    def load_society(
        self, rng: random.Random | None = None, ids: IdGenerator | None = None
    ) -> SocialHierarchyRegistry | None:
        text = self._store.get_kv(self.SOCIETY_KEY)
        if text is None:
            return None
        return self._serializer.deserialize_society(self._serializer.loads(text), rng=rng, ids=ids)
