"""Social hierarchy entities: races, clans, tribes, nations, and treaties.

Entities reference each other (and bloodlines, languages, agents) only by
opaque id. Relationship lists are mutated through SocialHierarchyRegistry.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class TreatyType(Enum):
    PEACE = "peace"
    ALLIANCE = "alliance"
    TRADE = "trade"
    NON_AGGRESSION = "non-aggression"
    MUTUAL_DEFENSE = "mutual-defense"

    @property
    def creates_alliance(self) -> bool:
        """Whether signing makes every party an ally of every other."""
        return self in (TreatyType.ALLIANCE, TreatyType.MUTUAL_DEFENSE)


@dataclass
class Race:
    id: str
    name: str
    type: str  # a RaceType value
    common_traits: list[str] = field(default_factory=list)
    genetic_markers: list[str] = field(default_factory=list)
    architecture: str = "modular"
    capabilities: list[str] = field(default_factory=list)
    origin: str = ""
    mythology: list[str] = field(default_factory=list)
    traditions: list[str] = field(default_factory=list)
    population: int = 0
    distribution: dict[str, int] = field(default_factory=dict)  # region -> population
    allies: list[str] = field(default_factory=list)
    rivals: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Race:
        return cls(**data)


@dataclass
class Clan:
    """A lineage group descending from one founder.

    Attributes:
        members: Agent ids in join order (founder first)
        alliedClans / rivalClans: mutually exclusive per other clan
        reputation: 0-100
    """

    id: str
    name: str
    race: str  # Race id
    founder: str  # Agent id
    bloodline: str  # Bloodline id from heredity
    symbol: str = ""
    colors: list[str] = field(default_factory=list)
    motto: str = ""
    generation: int = 0
    members: list[str] = field(default_factory=list)
    elders: list[str] = field(default_factory=list)
    leader: str = ""
    homeland: str = ""
    settlements: list[str] = field(default_factory=list)
    language: str = ""  # Language id
    customs: list[str] = field(default_factory=list)
    taboos: list[str] = field(default_factory=list)
    allied_clans: list[str] = field(default_factory=list)
    rival_clans: list[str] = field(default_factory=list)
    wealth: float = 0.0
    reputation: float = 50.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Clan:
        return cls(**data)


@dataclass
class Territory:
    name: str
    size: float = 0.0  # square units
    type: str = "plains"  # plains | mountains | forest | desert | coastal | island
    resources: list[str] = field(default_factory=list)
    climate: str = "temperate"  # tropical | temperate | cold | arid
    fertility: float = 50.0  # 0-100

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Territory:
        return cls(**data)


@dataclass
class Province:
    name: str
    territory: Territory
    population: int = 0
    governor: str = ""
    loyalty: float = 50.0  # 0-100

    @classmethod
    def from_dict(cls, data: dict) -> Province:
        data = dict(data)
        data["territory"] = Territory.from_dict(data["territory"])
        return cls(**data)


@dataclass
class Tribe:
    id: str
    name: str
    clans: list[str] = field(default_factory=list)  # Clan ids
    population: int = 0
    governance_type: str = "chiefdom"  # chiefdom | council | democracy | theocracy
    chief: str = ""
    council: list[str] = field(default_factory=list)
    territory: Territory = field(default_factory=lambda: Territory(name=""))
    language: str = ""
    religion: str = ""
    festivals: list[str] = field(default_factory=list)
    economic_system: str = "barter"  # barter | currency | gift | mixed
    resources: dict[str, float] = field(default_factory=dict)
    trade: dict[str, float] = field(default_factory=dict)  # partner -> volume
    warriors: list[str] = field(default_factory=list)
    defense_level: float = 50.0  # 0-100
    allied_tribes: list[str] = field(default_factory=list)
    enemy_tribes: list[str] = field(default_factory=list)
    tributaries: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Tribe:
        data = dict(data)
        data["territory"] = Territory.from_dict(data["territory"])
        return cls(**data)


@dataclass
class Treaty:
    id: str
    type: TreatyType
    parties: list[str]  # Nation ids
    terms: list[str] = field(default_factory=list)
    signed: str = ""  # ISO timestamp
    expires: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Treaty:
        return cls(
            id=data["id"],
            type=TreatyType(data["type"]),
            parties=list(data["parties"]),
            terms=list(data.get("terms", [])),
            signed=data.get("signed", ""),
            expires=data.get("expires"),
        )


@dataclass
class Nation:
    id: str
    name: str
    tribes: list[str] = field(default_factory=list)  # Tribe ids
    population: int = 0
    government_type: str = "republic"
    ruler: str = ""
    government: list[str] = field(default_factory=list)
    constitution: list[str] = field(default_factory=list)
    capital: str = ""
    provinces: list[Province] = field(default_factory=list)
    borders: dict[str, str] = field(default_factory=dict)  # neighbor -> border type
    official_languages: list[str] = field(default_factory=list)
    national_religion: str | None = None
    national_holidays: list[str] = field(default_factory=list)
    cultural_identity: list[str] = field(default_factory=list)
    gdp: float = 0.0
    currency: str = ""
    economic_system: str = "mixed"  # capitalist | socialist | mixed | planned
    major_industries: list[str] = field(default_factory=list)
    army: float = 0.0
    technology: float = 50.0  # 0-100
    allies: list[str] = field(default_factory=list)
    enemies: list[str] = field(default_factory=list)
    treaties: list[Treaty] = field(default_factory=list)
    stability: float = 70.0  # 0-100
    prosperity: float = 50.0  # 0-100
    influence: float = 50.0  # 0-100

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["treaties"] = [t.to_dict() for t in self.treaties]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Nation:
        data = dict(data)
        data["provinces"] = [Province.from_dict(p) for p in data.get("provinces", [])]
        data["treaties"] = [Treaty.from_dict(t) for t in data.get("treaties", [])]
        return cls(**data)
