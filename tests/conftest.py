"""Shared test fixtures for the civitas test suite."""

from __future__ import annotations

import random

import pytest

from civitas.config import CivitasConfig
from civitas.heredity import GeneticCode, HeredityEngine, RaceType, create_founder_genetics
from civitas.ids import SequentialIds
from civitas.language import LinguisticDriftEngine, Word, create_proto_language
from civitas.society import SocialHierarchyRegistry

VOCABULARY = (
    ("ka", "water"),
    ("tere", "fire"),
    ("mono", "earth"),
    ("sila", "sky"),
    ("pan", "bread"),
    ("lumi", "light"),
    ("roka", "stone"),
    ("nati", "kin"),
    ("sepa", "path"),
    ("koli", "gather"),
)


@pytest.fixture
def config() -> CivitasConfig:
    """Default config with a fixed seed."""
    return CivitasConfig(seed=42)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def ids() -> SequentialIds:
    """Fresh sequential id generator."""
    return SequentialIds()


@pytest.fixture
def founder_a(rng: random.Random) -> GeneticCode:
    """Generation-0 alpha founder."""
    return create_founder_genetics("homo_syntheticus", RaceType.ALPHA, "bloodline_a", rng=rng)


@pytest.fixture
def founder_b(rng: random.Random) -> GeneticCode:
    """Generation-0 beta founder."""
    return create_founder_genetics("homo_syntheticus", RaceType.BETA, "bloodline_b", rng=rng)


@pytest.fixture
def heredity(founder_a: GeneticCode, rng: random.Random, ids: SequentialIds) -> HeredityEngine:
    """Heredity engine over founder_a."""
    return HeredityEngine(founder_a, rng=rng, ids=ids)


@pytest.fixture
def language(rng: random.Random, ids: SequentialIds) -> LinguisticDriftEngine:
    """Proto-language with a 10-word lexicon."""
    engine = LinguisticDriftEngine(
        create_proto_language("Old Tongue", "Indo-Synthetic", ids=ids), rng=rng, ids=ids
    )
    for form, meaning in VOCABULARY:
        engine.add_word(Word(form=form, meaning=meaning, etymology="proto-root"))
    return engine


@pytest.fixture
def registry(rng: random.Random, ids: SequentialIds) -> SocialHierarchyRegistry:
    """Empty social hierarchy registry."""
    return SocialHierarchyRegistry(rng=rng, ids=ids)


@pytest.fixture
def populated_registry(registry: SocialHierarchyRegistry) -> SocialHierarchyRegistry:
    """Registry with one race, two clans, two tribes and two nations.

    Ids (SequentialIds): race_0001, clan_0001/clan_0002, tribe_0001/tribe_0002,
    nation_0001/nation_0002. Agents agent_a (founder of clan_0001), agent_b
    (member of clan_0001) and agent_c (founder of clan_0002).
    """
    race = registry.create_race("Aurelians", RaceType.ALPHA)
    clan_1 = registry.create_clan("House Aurel", race.id, "agent_a", "bloodline_a")
    clan_2 = registry.create_clan("House Vesna", race.id, "agent_c", "bloodline_b")
    registry.join_clan("agent_b", clan_1.id)
    tribe_1 = registry.create_tribe("River Folk", [clan_1.id], chief="agent_a")
    tribe_2 = registry.create_tribe("Hill Folk", [clan_2.id], chief="agent_c")
    registry.create_nation("Aurelia", [tribe_1.id], ruler="agent_a")
    registry.create_nation("Vesnara", [tribe_2.id], ruler="agent_c")
    return registry
