"""Schema migration: handle version changes in snapshot format.

Version 1 snapshots stored a bare language record (no dialect records) and
a society without its event history or id counters. Version 2 is current.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class SchemaMigration:
    """Handle schema version changes in snapshot envelopes."""

    @staticmethod
    def migrate(envelope: dict) -> dict:
        """Migrate an envelope to the current schema version.

        Args:
            envelope: Snapshot envelope to migrate

        Returns:
            Migrated envelope at current schema version
        """
        version = SchemaMigration.get_version(envelope)

        # Migration chain
        if version == 1:
            envelope = SchemaMigration._migrate_1_to_2(envelope)
        # Future migrations:
        # if version == 2:
        #     envelope = SchemaMigration._migrate_2_to_3(envelope)

        return envelope

    @staticmethod
    def get_version(envelope: dict) -> int:
        """Extract schema version from an envelope (default 1)."""
        version = envelope.get("schema_version", 1)
        return int(version)

    @staticmethod
    def _migrate_1_to_2(envelope: dict) -> dict:
        """Migrate from schema v1 to v2.

        - language: wrap the bare record and add empty dialect records
        - society: add empty history and id counters
        """
        envelope["schema_version"] = 2
        kind = envelope.get("kind")
        data = envelope.get("data", {})

        if kind == "language" and "language" not in data:
            envelope["data"] = {"language": data, "dialect_records": {}}
        elif kind == "society":
            data.setdefault("history", [])
            data.setdefault("ids", {})

        logger.warning(f"Migrated {kind} snapshot from schema v1 to v2")
        return envelope
