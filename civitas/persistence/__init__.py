"""Persistence package: versioned snapshots and key-value storage.

Provides serialization, schema migration, and store adapters.
"""

from civitas.persistence.migration import SchemaMigration
from civitas.persistence.serializer import StateSerializer
from civitas.persistence.store import CivilizationStore, FileStore, KeyValueStore, MemoryStore

__all__ = [
    "CivilizationStore",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "SchemaMigration",
    "StateSerializer",
]
