"""Nested social organization: races, clans, tribes, and nations.

- Race / Clan / Tribe / Nation / Treaty: hierarchy entities
- SocialHierarchyRegistry: creation, membership, alliances, rivalries,
  treaties, dissolution, power scoring and agent hierarchy lookup
"""

from __future__ import annotations

from civitas.society.entities import (
    Clan,
    Nation,
    Province,
    Race,
    Territory,
    Treaty,
    TreatyType,
    Tribe,
)
from civitas.society.registry import AgentHierarchy, SocialHierarchyRegistry

__all__ = [
    "AgentHierarchy",
    "Clan",
    "Nation",
    "Province",
    "Race",
    "SocialHierarchyRegistry",
    "Territory",
    "Treaty",
    "TreatyType",
    "Tribe",
]
