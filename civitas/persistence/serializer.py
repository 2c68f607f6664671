"""State serialization: wrap engine exports in versioned envelopes.

Each envelope is ``{schema_version, kind, timestamp, data}`` where ``data``
is the engine's ``export_state()`` output. Older envelopes are migrated on
load; newer or mismatched envelopes are rejected.
"""

from __future__ import annotations

import json
import random
from datetime import UTC, datetime
from typing import Any

from civitas.errors import SerializationError
from civitas.heredity.engine import HeredityEngine
from civitas.ids import IdGenerator
from civitas.language.engine import LinguisticDriftEngine
from civitas.persistence.migration import SchemaMigration
from civitas.society.registry import SocialHierarchyRegistry

KINDS = ("genetics", "language", "society")


class StateSerializer:
    """Serialize and deserialize engine state."""

    SCHEMA_VERSION = 2

    def envelope(self, kind: str, data: dict) -> dict:
        """Wrap exported state in a versioned envelope."""
        if kind not in KINDS:
            raise SerializationError(f"Unknown snapshot kind: {kind}")
        return {
            "schema_version": self.SCHEMA_VERSION,
            "kind": kind,
            "timestamp": datetime.now(UTC).isoformat(),
            "data": data,
        }

    def unwrap(self, envelope: Any, kind: str) -> dict:
        """Validate an envelope, migrate it if old, and return its data.

        Raises:
            SerializationError: On a malformed, mismatched or newer envelope
        """
        if not isinstance(envelope, dict) or "data" not in envelope:
            raise SerializationError(f"Malformed {kind} snapshot")
        if envelope.get("kind") != kind:
            raise SerializationError(
                f"Expected a {kind} snapshot, got {envelope.get('kind')!r}"
            )

        version = SchemaMigration.get_version(envelope)
        if version > self.SCHEMA_VERSION:
            raise SerializationError(
                f"Snapshot schema v{version} is newer than supported v{self.SCHEMA_VERSION}"
            )
        if version < self.SCHEMA_VERSION:
            envelope = SchemaMigration.migrate(envelope)

        data: dict = envelope["data"]
        return data

    # --- Per-engine helpers ---

    def serialize_genetics(self, engine: HeredityEngine) -> dict:
        return self.envelope("genetics", engine.export_state())

    def deserialize_genetics(
        self, envelope: dict, rng: random.Random | None = None, ids: IdGenerator | None = None
    ) -> HeredityEngine:
        return HeredityEngine.import_state(self.unwrap(envelope, "genetics"), rng=rng, ids=ids)

    def serialize_language(self, engine: LinguisticDriftEngine) -> dict:
        return self.envelope("language", engine.export_state())

    def deserialize_language(
        self, envelope: dict, rng: random.Random | None = None, ids: IdGenerator | None = None
    ) -> LinguisticDriftEngine:
        return LinguisticDriftEngine.import_state(
            self.unwrap(envelope, "language"), rng=rng, ids=ids
        )

    def serialize_society(self, registry: SocialHierarchyRegistry) -> dict:
        return self.envelope("society", registry.export_state())

    def deserialize_society(
        self, envelope: dict, rng: random.Random | None = None, ids: IdGenerator | None = None
    ) -> SocialHierarchyRegistry:
        return SocialHierarchyRegistry.import_state(
            self.unwrap(envelope, "society"), rng=rng, ids=ids
        )

    # --- Text form ---

    @staticmethod
    def dumps(envelope: dict) -> str:
        return json.dumps(envelope, sort_keys=True)

    @staticmethod
    def loads(text: str) -> dict:
        envelope: dict = json.loads(text)
        return envelope
