"""Social hierarchy registry: Race <- Clan <- Tribe <- Nation.

The registry is the sole owner of all four entity maps. It handles
creation, membership, alliances and rivalries, treaties, dissolution,
power scoring, and agent hierarchy lookup. Bloodlines, languages and
agents are referenced by id only.
"""

from __future__ import annotations

import copy
import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TypeVar

from civitas.errors import NotFoundError, ValidationError
from civitas.heredity.genetics import RaceType
from civitas.ids import IdGenerator, SequentialIds, ShortUuidIds, make_id_generator
from civitas.society.entities import Clan, Nation, Race, Territory, Treaty, TreatyType, Tribe

if TYPE_CHECKING:
    from civitas.config import CivitasConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

CLAN_SYMBOLS: tuple[str, ...] = (
    "sword",
    "shield",
    "eagle",
    "wolf",
    "lion",
    "dragon",
    "star",
    "lightning",
    "flame",
    "diamond",
    "moon",
    "sun",
    "wave",
    "mountain",
    "pine",
    "blossom",
)

CLAN_COLORS: tuple[str, ...] = (
    "red",
    "blue",
    "green",
    "gold",
    "silver",
    "black",
    "white",
    "purple",
    "orange",
    "crimson",
    "azure",
)


@dataclass
class AgentHierarchy:
    """Where an agent sits in the social hierarchy; unresolved levels are None."""

    race: Race | None = None
    clan: Clan | None = None
    tribe: Tribe | None = None
    nation: Nation | None = None


def _relate(a: Any, b: Any, add_field: str, evict_field: str) -> None:
    """Symmetrically add a<->b to ``add_field`` and evict them from ``evict_field``."""
    for entity, other in ((a, b), (b, a)):
        related = getattr(entity, add_field)
        if other.id not in related:
            related.append(other.id)
        setattr(entity, evict_field, [i for i in getattr(entity, evict_field) if i != other.id])


class SocialHierarchyRegistry:
    """Owns races, clans, tribes and nations and their relationship graph.

    Mutators raise NotFoundError for unknown ids, except sign_treaty, which
    skips unresolved parties with a warning. Read accessors return deep
    copies; mutate only through the registry's operations.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
        clan_reputation: float = 50.0,
        tribe_defense_level: float = 50.0,
        nation_stability: float = 70.0,
        nation_prosperity: float = 50.0,
        nation_influence: float = 50.0,
        nation_technology: float = 50.0,
    ):
        self.rng = rng or random.Random()
        self.ids = ids or ShortUuidIds()
        self.clan_reputation = clan_reputation
        self.tribe_defense_level = tribe_defense_level
        self.nation_stability = nation_stability
        self.nation_prosperity = nation_prosperity
        self.nation_influence = nation_influence
        self.nation_technology = nation_technology

        self._races: dict[str, Race] = {}
        self._clans: dict[str, Clan] = {}
        self._tribes: dict[str, Tribe] = {}
        self._nations: dict[str, Nation] = {}
        self._history: list[dict] = []

    @classmethod
    def from_config(
        cls,
        config: CivitasConfig,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
    ) -> SocialHierarchyRegistry:
        """Build a registry with default scores taken from config."""
        return cls(
            rng=rng,
            ids=ids,
            clan_reputation=config.clan_reputation,
            tribe_defense_level=config.tribe_defense_level,
            nation_stability=config.nation_stability,
            nation_prosperity=config.nation_prosperity,
            nation_influence=config.nation_influence,
            nation_technology=config.nation_technology,
        )

    # =========================================================================
    # Factories
    # =========================================================================

    def create_race(
        self,
        name: str,
        race_type: RaceType | str,
        traits: list[str] | None = None,
        origin: str = "",
    ) -> Race:
        """Create a new race.

        Raises:
            ValidationError: If race_type is not a known race
        """
        try:
            type_value = RaceType(race_type).value
        except ValueError as err:
            raise ValidationError(f"Unknown race type: {race_type}") from err

        race = Race(
            id=self.ids.next_id("race"),
            name=name,
            type=type_value,
            common_traits=list(traits or []),
            origin=origin,
        )
        self._races[race.id] = race
        self._record("race_created", race_id=race.id, name=name)
        logger.info(f"Created race {race.id} ({name}, {type_value})")
        return copy.deepcopy(race)

    def create_clan(self, name: str, race: str, founder: str, bloodline: str) -> Clan:
        """Create a clan; the founder is its first member and leader."""
        clan = Clan(
            id=self.ids.next_id("clan"),
            name=name,
            race=race,
            founder=founder,
            bloodline=bloodline,
            symbol=self._generate_symbol(),
            colors=self._generate_colors(),
            members=[founder],
            leader=founder,
            reputation=self.clan_reputation,
        )
        self._clans[clan.id] = clan
        self._record("clan_created", clan_id=clan.id, name=name, founder=founder)
        logger.info(f"Created clan {clan.id} ({name}) founded by {founder}")
        return copy.deepcopy(clan)

    def create_tribe(
        self,
        name: str,
        clans: list[str],
        chief: str,
        territory: Territory | None = None,
    ) -> Tribe:
        """Create a tribe from existing clan ids.

        Raises:
            NotFoundError: If any clan id is unknown
        """
        for clan_id in clans:
            self._require(self._clans, "clan", clan_id)
        tribe = Tribe(
            id=self.ids.next_id("tribe"),
            name=name,
            clans=list(dict.fromkeys(clans)),
            chief=chief,
            territory=copy.deepcopy(territory) if territory else Territory(name=name),
            defense_level=self.tribe_defense_level,
        )
        self._tribes[tribe.id] = tribe
        self._record("tribe_created", tribe_id=tribe.id, name=name, clans=list(tribe.clans))
        logger.info(f"Created tribe {tribe.id} ({name}) with {len(tribe.clans)} clans")
        return copy.deepcopy(tribe)

    def create_nation(
        self,
        name: str,
        tribes: list[str],
        ruler: str,
        government_type: str = "republic",
        capital: str = "",
    ) -> Nation:
        """Create a nation from existing tribe ids.

        Raises:
            NotFoundError: If any tribe id is unknown
        """
        for tribe_id in tribes:
            self._require(self._tribes, "tribe", tribe_id)
        nation = Nation(
            id=self.ids.next_id("nation"),
            name=name,
            tribes=list(dict.fromkeys(tribes)),
            government_type=government_type,
            ruler=ruler,
            capital=capital,
            currency=f"{name} Credit",
            technology=self.nation_technology,
            stability=self.nation_stability,
            prosperity=self.nation_prosperity,
            influence=self.nation_influence,
        )
        self._nations[nation.id] = nation
        self._record("nation_created", nation_id=nation.id, name=name, tribes=list(nation.tribes))
        logger.info(f"Created nation {nation.id} ({name}, {government_type})")
        return copy.deepcopy(nation)

    def _generate_symbol(self) -> str:
        return self.rng.choice(CLAN_SYMBOLS)

    def _generate_colors(self) -> list[str]:
        primary, secondary = self.rng.sample(CLAN_COLORS, 2)
        return [primary, secondary]

    # =========================================================================
    # Lookup
    # =========================================================================

    @staticmethod
    def _require(entities: dict[str, T], kind: str, entity_id: str) -> T:
        entity = entities.get(entity_id)
        if entity is None:
            raise NotFoundError(kind, entity_id)
        return entity

    def get_race(self, race_id: str) -> Race | None:
        return copy.deepcopy(self._races.get(race_id))

    def get_clan(self, clan_id: str) -> Clan | None:
        return copy.deepcopy(self._clans.get(clan_id))

    def get_tribe(self, tribe_id: str) -> Tribe | None:
        return copy.deepcopy(self._tribes.get(tribe_id))

    def get_nation(self, nation_id: str) -> Nation | None:
        return copy.deepcopy(self._nations.get(nation_id))

    def require_race(self, race_id: str) -> Race:
        return copy.deepcopy(self._require(self._races, "race", race_id))

    def require_clan(self, clan_id: str) -> Clan:
        return copy.deepcopy(self._require(self._clans, "clan", clan_id))

    def require_tribe(self, tribe_id: str) -> Tribe:
        return copy.deepcopy(self._require(self._tribes, "tribe", tribe_id))

    def require_nation(self, nation_id: str) -> Nation:
        return copy.deepcopy(self._require(self._nations, "nation", nation_id))

    def races(self) -> list[Race]:
        return copy.deepcopy(list(self._races.values()))

    def clans(self) -> list[Clan]:
        return copy.deepcopy(list(self._clans.values()))

    def tribes(self) -> list[Tribe]:
        return copy.deepcopy(list(self._tribes.values()))

    def nations(self) -> list[Nation]:
        return copy.deepcopy(list(self._nations.values()))

    # =========================================================================
    # Membership and relations
    # =========================================================================

    def join_clan(self, agent_id: str, clan_id: str) -> bool:
        """Add an agent to a clan.

        Returns:
            True if newly added, False if already a member

        Raises:
            NotFoundError: If the clan does not exist
        """
        clan = self._require(self._clans, "clan", clan_id)
        if agent_id in clan.members:
            return False

        clan.members.append(agent_id)
        self._record("clan_joined", clan_id=clan_id, agent_id=agent_id)
        return True

    def form_clan_alliance(self, clan_a: str, clan_b: str) -> None:
        """Ally two clans, ending any rivalry between them."""
        a, b = self._pair(self._clans, "clan", clan_a, clan_b)
        _relate(a, b, "allied_clans", "rival_clans")
        self._record("clan_alliance", clans=[clan_a, clan_b])

    def declare_clan_rivalry(self, clan_a: str, clan_b: str) -> None:
        """Make two clans rivals, ending any alliance between them."""
        a, b = self._pair(self._clans, "clan", clan_a, clan_b)
        _relate(a, b, "rival_clans", "allied_clans")
        self._record("clan_rivalry", clans=[clan_a, clan_b])

    def form_tribe_alliance(self, tribe_a: str, tribe_b: str) -> None:
        a, b = self._pair(self._tribes, "tribe", tribe_a, tribe_b)
        _relate(a, b, "allied_tribes", "enemy_tribes")
        self._record("tribe_alliance", tribes=[tribe_a, tribe_b])

    def declare_tribe_enmity(self, tribe_a: str, tribe_b: str) -> None:
        a, b = self._pair(self._tribes, "tribe", tribe_a, tribe_b)
        _relate(a, b, "enemy_tribes", "allied_tribes")
        self._record("tribe_enmity", tribes=[tribe_a, tribe_b])

    def declare_nation_enmity(self, nation_a: str, nation_b: str) -> None:
        """Make two nations enemies, dropping them from each other's allies."""
        a, b = self._pair(self._nations, "nation", nation_a, nation_b)
        _relate(a, b, "enemies", "allies")
        self._record("nation_enmity", nations=[nation_a, nation_b])

    def add_clan_to_tribe(self, tribe_id: str, clan_id: str) -> None:
        tribe = self._require(self._tribes, "tribe", tribe_id)
        self._require(self._clans, "clan", clan_id)
        if clan_id not in tribe.clans:
            tribe.clans.append(clan_id)
            self._record("tribe_joined", tribe_id=tribe_id, clan_id=clan_id)

    def add_tribe_to_nation(self, nation_id: str, tribe_id: str) -> None:
        nation = self._require(self._nations, "nation", nation_id)
        self._require(self._tribes, "tribe", tribe_id)
        if tribe_id not in nation.tribes:
            nation.tribes.append(tribe_id)
            self._record("nation_joined", nation_id=nation_id, tribe_id=tribe_id)

    def _pair(self, entities: dict[str, T], kind: str, id_a: str, id_b: str) -> tuple[T, T]:
        if id_a == id_b:
            raise ValidationError(f"A {kind} cannot relate to itself: {id_a}")
        return self._require(entities, kind, id_a), self._require(entities, kind, id_b)

    # =========================================================================
    # Treaties
    # =========================================================================

    def sign_treaty(
        self,
        treaty_type: TreatyType | str,
        parties: list[str],
        terms: list[str] | None = None,
        expires: str | None = None,
    ) -> Treaty:
        """Sign a treaty between nations.

        Every resolvable party receives the treaty; alliance and
        mutual-defense treaties also make each party an ally of every other.
        Unknown parties are skipped with a warning.

        Raises:
            ValidationError: On an unknown treaty type or fewer than two parties
        """
        try:
            kind = TreatyType(treaty_type)
        except ValueError as err:
            raise ValidationError(f"Unknown treaty type: {treaty_type}") from err

        distinct = list(dict.fromkeys(parties))
        if len(distinct) < 2:
            raise ValidationError("A treaty needs at least two distinct parties")

        treaty = Treaty(
            id=self.ids.next_id("treaty"),
            type=kind,
            parties=distinct,
            terms=list(terms or []),
            signed=datetime.now(UTC).isoformat(),
            expires=expires,
        )

        for party_id in distinct:
            nation = self._nations.get(party_id)
            if nation is None:
                logger.warning(f"Treaty {treaty.id}: skipping unknown party {party_id}")
                continue

            nation.treaties.append(copy.deepcopy(treaty))
            if kind.creates_alliance:
                for other_id in distinct:
                    if other_id != party_id and other_id not in nation.allies:
                        nation.allies.append(other_id)
                nation.enemies = [e for e in nation.enemies if e not in distinct]

        self._record("treaty_signed", treaty_id=treaty.id, type=kind.value, parties=distinct)
        logger.info(f"Signed {kind.value} treaty {treaty.id} between {', '.join(distinct)}")
        return copy.deepcopy(treaty)

    # =========================================================================
    # Dissolution
    # =========================================================================

    def dissolve_clan(self, clan_id: str, reason: str = "") -> None:
        """Remove a clan and purge every reference to it.

        Raises:
            NotFoundError: If the clan does not exist
        """
        clan = self._require(self._clans, "clan", clan_id)

        for other in self._clans.values():
            other.allied_clans = [i for i in other.allied_clans if i != clan_id]
            other.rival_clans = [i for i in other.rival_clans if i != clan_id]
        for tribe in self._tribes.values():
            tribe.clans = [i for i in tribe.clans if i != clan_id]

        del self._clans[clan_id]
        self._record(
            "clan_dissolved",
            clan_id=clan_id,
            reason=reason,
            final_members=list(clan.members),
        )
        logger.info(f"Dissolved clan {clan_id} ({reason or 'no reason given'})")

    # =========================================================================
    # Queries
    # =========================================================================

    def calculate_clan_power(self, clan_id: str) -> float:
        """Weighted clan power; 0 for an unknown clan."""
        clan = self._clans.get(clan_id)
        if clan is None:
            return 0.0

        return (
            len(clan.members) * 10
            + clan.wealth * 0.1
            + clan.reputation
            + len(clan.settlements) * 20
            + len(clan.allied_clans) * 15
        )

    def calculate_nation_power(self, nation_id: str) -> float:
        """Weighted nation power; 0 for an unknown nation."""
        nation = self._nations.get(nation_id)
        if nation is None:
            return 0.0

        return (
            nation.population * 0.1
            + nation.gdp * 0.01
            + nation.army * 0.5
            + nation.technology
            + nation.influence
            + len(nation.allies) * 50
        )

    def get_agent_hierarchy(self, agent_id: str) -> AgentHierarchy:
        """Resolve an agent's clan, race, tribe and nation.

        Scans clans for membership, then the tribe holding that clan and
        the nation holding that tribe. Levels not found stay None.
        """
        hierarchy = AgentHierarchy()

        clan = next((c for c in self._clans.values() if agent_id in c.members), None)
        if clan is None:
            return hierarchy

        hierarchy.clan = copy.deepcopy(clan)
        hierarchy.race = copy.deepcopy(self._races.get(clan.race))

        tribe = next((t for t in self._tribes.values() if clan.id in t.clans), None)
        if tribe is None:
            return hierarchy
        hierarchy.tribe = copy.deepcopy(tribe)

        nation = next((n for n in self._nations.values() if tribe.id in n.tribes), None)
        hierarchy.nation = copy.deepcopy(nation)
        return hierarchy

    def get_civilization_summary(self) -> str:
        """Human-readable overview of every race, clan, tribe and nation."""
        lines = ["CIVILIZATION STATUS:", ""]

        lines.append(f"Races: {len(self._races)}")
        for race in self._races.values():
            lines.append(f"  - {race.name} ({race.type}): {race.population} agents")

        lines.append("")
        lines.append(f"Clans: {len(self._clans)}")
        for clan in self._clans.values():
            lines.append(f"  - {clan.name} [{clan.symbol}]: {len(clan.members)} members")

        lines.append("")
        lines.append(f"Tribes: {len(self._tribes)}")
        for tribe in self._tribes.values():
            lines.append(f"  - {tribe.name}: {tribe.population} population")

        lines.append("")
        lines.append(f"Nations: {len(self._nations)}")
        for nation in self._nations.values():
            lines.append(
                f"  - {nation.name} ({nation.government_type}): {nation.population} citizens"
            )

        return "\n".join(lines)

    def history(self) -> list[dict]:
        """Ordered record of registry events."""
        return copy.deepcopy(self._history)

    def _record(self, event: str, **details: Any) -> None:
        self._history.append({"event": event, **details})

    # =========================================================================
    # Persistence
    # =========================================================================

    def settings(self) -> dict:
        """Return the default scores new entities start with."""
        return {
            "clan_reputation": self.clan_reputation,
            "tribe_defense_level": self.tribe_defense_level,
            "nation_stability": self.nation_stability,
            "nation_prosperity": self.nation_prosperity,
            "nation_influence": self.nation_influence,
            "nation_technology": self.nation_technology,
        }

    def export_state(self) -> dict:
        """Export all entity maps, the event history and default scores as plain dicts."""
        return {
            "races": {key: r.to_dict() for key, r in self._races.items()},
            "clans": {key: c.to_dict() for key, c in self._clans.items()},
            "tribes": {key: t.to_dict() for key, t in self._tribes.items()},
            "nations": {key: n.to_dict() for key, n in self._nations.items()},
            "history": copy.deepcopy(self._history),
            "ids": self.ids.export_state(),
            "settings": self.settings(),
        }

    @classmethod
    def import_state(
        cls,
        data: dict,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
    ) -> SocialHierarchyRegistry:
        """Rebuild a registry from ``export_state`` output.

        Without an explicit ``ids`` the generator is rebuilt from the exported
        strategy, so sequential counters continue where they left off.
        """
        data = copy.deepcopy(data)
        if ids is None and data.get("ids"):
            ids = make_id_generator(data["ids"].get("strategy", "sequential"))
        registry = cls(rng=rng, ids=ids, **data.get("settings", {}))
        registry._races = {k: Race.from_dict(v) for k, v in data.get("races", {}).items()}
        registry._clans = {k: Clan.from_dict(v) for k, v in data.get("clans", {}).items()}
        registry._tribes = {k: Tribe.from_dict(v) for k, v in data.get("tribes", {}).items()}
        registry._nations = {k: Nation.from_dict(v) for k, v in data.get("nations", {}).items()}
        registry._history = list(data.get("history", []))

        registry.ids.import_state(data.get("ids", {}))
        if isinstance(registry.ids, SequentialIds):
            for entity_id in (
                *registry._races,
                *registry._clans,
                *registry._tribes,
                *registry._nations,
            ):
                registry.ids.observe(entity_id)
            for nation in registry._nations.values():
                for treaty in nation.treaties:
                    registry.ids.observe(treaty.id)

        return registry
