"""Identifier generators.

Entities are keyed by ids drawn from an injected generator so that many
entities created in the same tick never collide.
"""

from __future__ import annotations

import uuid
from typing import Protocol


class IdGenerator(Protocol):
    """Produces unique string ids for a given prefix."""

    def next_id(self, prefix: str) -> str: ...

    def export_state(self) -> dict: ...

    def import_state(self, data: dict) -> None: ...


class SequentialIds:
    """Monotonic per-prefix counter: ``clan_0001``, ``clan_0002``, ..."""

    def __init__(self, width: int = 4):
        self.width = width
        self._counters: dict[str, int] = {}

    def next_id(self, prefix: str) -> str:
        value = self._counters.get(prefix, 0) + 1
        self._counters[prefix] = value
        return f"{prefix}_{value:0{self.width}d}"

    def observe(self, entity_id: str) -> None:
        """Advance the counter past an id issued elsewhere (e.g. restored state)."""
        prefix, _, suffix = entity_id.rpartition("_")
        if prefix and suffix.isdigit():
            self._counters[prefix] = max(self._counters.get(prefix, 0), int(suffix))

    def export_state(self) -> dict:
        return {"strategy": "sequential", "counters": dict(self._counters)}

    def import_state(self, data: dict) -> None:
        for prefix, value in data.get("counters", {}).items():
            self._counters[prefix] = max(self._counters.get(prefix, 0), int(value))


class ShortUuidIds:
    """Random ids: ``{prefix}_{8 hex chars}``."""

    def next_id(self, prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex[:8]}"

    def export_state(self) -> dict:
        return {"strategy": "uuid"}

    def import_state(self, data: dict) -> None:
        pass


def make_id_generator(strategy: str = "sequential") -> IdGenerator:
    """Build an id generator by config name."""
    if strategy == "uuid":
        return ShortUuidIds()
    return SequentialIds()
