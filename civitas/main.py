"""Entry point for the civitas demo: founders, a language, and a small society."""

from __future__ import annotations

import logging
import random
import sys

from civitas.config import CivitasConfig
from civitas.heredity import HeredityEngine, RaceType, create_founder_genetics
from civitas.ids import make_id_generator
from civitas.language import LinguisticDriftEngine, Word, create_proto_language
from civitas.persistence import CivilizationStore, FileStore
from civitas.renderer import CivilizationRenderer
from civitas.society import SocialHierarchyRegistry, Territory, TreatyType

logger = logging.getLogger(__name__)

SEED_VOCABULARY = (
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


def run(config: CivitasConfig, generations: int = 50, persist: bool = False) -> dict:
    """Run one demo civilization and return its engines.

    Args:
        config: Engine configuration (seed, rates, state_dir)
        generations: Generations of linguistic drift and breeding
        persist: Save all state to a FileStore under config.state_dir

    Returns:
        Dict with "founders", "offspring", "language" and "society"
    """
    rng = random.Random(config.seed)
    ids = make_id_generator(config.id_strategy)

    # Heredity: two founders and a line of descendants
    founder_a = HeredityEngine.from_config(
        create_founder_genetics(
            "homo_syntheticus",
            RaceType.ALPHA,
            "bloodline_aurel",
            rng=rng,
            trait_base=config.founder_trait_base,
            trait_jitter=config.founder_trait_jitter,
        ),
        config,
        rng=rng,
        ids=ids,
    )
    founder_b = HeredityEngine.from_config(
        create_founder_genetics(
            "homo_syntheticus",
            RaceType.BETA,
            "bloodline_vesna",
            rng=rng,
            trait_base=config.founder_trait_base,
            trait_jitter=config.founder_trait_jitter,
        ),
        config,
        rng=rng,
        ids=ids,
    )
    founder_a.apply_environmental_influence("scarcity", 85)
    founder_a.apply_cultural_imprinting("storytelling")

    offspring = HeredityEngine.from_config(founder_a.reproduce(founder_b), config, rng=rng, ids=ids)
    for _ in range(max(0, generations // 10 - 1)):
        offspring = HeredityEngine.from_config(
            offspring.reproduce(founder_b), config, rng=rng, ids=ids
        )

    # Language: a proto-language drifting over the run
    language = LinguisticDriftEngine.from_config(
        create_proto_language("Old Aurelic", "Indo-Synthetic", ids=ids), config, rng=rng, ids=ids
    )
    for form, meaning in SEED_VOCABULARY:
        language.add_word(Word(form=form, meaning=meaning, etymology="proto-root"))
    language.add_cultural_concept("shared memory", "kolimemo")
    language.evolve(generations)
    language.create_dialect("highlands", speakers=120)

    # Society: race -> clan -> tribe -> nation, plus a neighbour and a treaty
    society = SocialHierarchyRegistry.from_config(config, rng=rng, ids=ids)
    race = society.create_race("Aurelians", RaceType.ALPHA, traits=["curious"], origin="river delta")
    clan = society.create_clan("House Aurel", race.id, "agent_0001", "bloodline_aurel")
    society.join_clan("agent_0002", clan.id)
    rival = society.create_clan("House Vesna", race.id, "agent_0003", "bloodline_vesna")
    society.declare_clan_rivalry(clan.id, rival.id)

    tribe = society.create_tribe(
        "River Folk",
        [clan.id],
        chief="agent_0001",
        territory=Territory(name="Delta", size=400, type="coastal", resources=["fish", "reed"]),
    )
    hill_tribe = society.create_tribe("Hill Folk", [rival.id], chief="agent_0003")
    nation = society.create_nation("Aurelia", [tribe.id], ruler="agent_0001", capital="Deltagate")
    neighbour = society.create_nation("Vesnara", [hill_tribe.id], ruler="agent_0003")
    society.sign_treaty(TreatyType.ALLIANCE, [nation.id, neighbour.id], terms=["open borders"])

    if persist:
        store = CivilizationStore(FileStore(config.state_dir))
        store.save_genetics("agent_0001", founder_a)
        store.save_genetics("agent_0002", offspring)
        store.save_language(language)
        store.save_society(society)
        logger.info(f"Saved civilization state to {config.state_dir}")

    return {
        "founders": [founder_a, founder_b],
        "offspring": offspring,
        "language": language,
        "society": society,
    }


def main():
    """Run the demo."""
    config = CivitasConfig()

    # Parse CLI args
    generations = 50
    persist = False
    quiet = False

    for arg in sys.argv[1:]:
        if arg.startswith("--generations="):
            generations = int(arg.split("=")[1])
        elif arg.startswith("--seed="):
            config.seed = int(arg.split("=")[1])
        elif arg.startswith("--state-dir="):
            config.state_dir = arg.split("=", 1)[1]
            persist = True
        elif arg == "--quiet":
            quiet = True

    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    result = run(config, generations=generations, persist=persist)

    if quiet:
        return

    renderer = CivilizationRenderer()
    renderer.print_header(f"Civitas (seed={config.seed}, generations={generations})")
    for engine in result["founders"]:
        renderer.print_genetics(engine)
    renderer.print_genetics(result["offspring"], title="Latest descendant")
    renderer.print_language(result["language"])
    renderer.print_society(result["society"])


if __name__ == "__main__":
    main()
