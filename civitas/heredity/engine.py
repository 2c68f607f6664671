"""Heredity engine: reproduction, mutation, and epigenetic influence.

Implements agent heredity over GeneticCode records:
- Sexual reproduction: averaged traits with variation, coin-flip phenotype
- Asexual reproduction: clone with a higher mutation chance
- Environmental influence, cultural imprinting and trauma on gene expression
- Pairwise genetic similarity scoring
"""

from __future__ import annotations

import logging
import random
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from civitas.errors import ValidationError
from civitas.heredity.genetics import (
    DNA,
    RNA,
    Adaptation,
    Aptitudes,
    Epigenetics,
    GeneExpression,
    GeneticCode,
    Mutation,
    MutationType,
    Phenotype,
    RaceType,
    Resistances,
    clamp_trait,
)
from civitas.ids import IdGenerator, SequentialIds, ShortUuidIds

if TYPE_CHECKING:
    from civitas.config import CivitasConfig

logger = logging.getLogger(__name__)

# Genes eligible for spontaneous mutation, mapped to the trait they shift.
MUTATION_GENE_POOL: dict[str, tuple[str, str]] = {
    "computation": ("aptitudes", "computation"),
    "memory": ("aptitudes", "memory"),
    "creativity": ("aptitudes", "creativity"),
    "analysis": ("aptitudes", "analysis"),
    "communication": ("aptitudes", "communication"),
    "adaptation": ("aptitudes", "adaptation"),
    "leadership": ("aptitudes", "leadership"),
    "empathy": ("aptitudes", "empathy"),
    "stress_resistance": ("resistances", "stress"),
    "corruption_resistance": ("resistances", "corruption"),
}

# Contributing factors in calculate_genetic_similarity
SIMILARITY_FACTORS = 4


def _coerce_race(race: RaceType | str) -> RaceType:
    try:
        return RaceType(race)
    except ValueError as err:
        raise ValidationError(f"Unknown race type: {race}") from err


def create_founder_genetics(
    species: str,
    race: RaceType | str,
    bloodline: str,
    rng: random.Random | None = None,
    trait_base: float = 50.0,
    trait_jitter: float = 20.0,
) -> GeneticCode:
    """Create the initial genetic code for a founder agent.

    Args:
        species: Species name (e.g., "homo_syntheticus")
        race: Race of the founder
        bloodline: Opaque lineage id
        rng: Random source for trait jitter
        trait_base: Baseline for every aptitude/resistance
        trait_jitter: Upper bound of the uniform jitter added to the base

    Returns:
        GeneticCode at generation 0 with empty mutations and epigenetics
    """
    rng = rng or random.Random()

    def roll() -> float:
        return clamp_trait(trait_base + rng.random() * trait_jitter)

    aptitudes = Aptitudes(**{name: roll() for name in Aptitudes().as_dict()})
    resistances = Resistances(**{name: roll() for name in Resistances().as_dict()})

    return GeneticCode(
        dna=DNA(species=species, race=_coerce_race(race), bloodline=bloodline),
        rna=RNA(phenotype=Phenotype(), aptitudes=aptitudes, resistances=resistances),
        epigenetics=Epigenetics(),
    )


def calculate_genetic_similarity(genetics_a: GeneticCode, genetics_b: GeneticCode) -> float:
    """Calculate genetic similarity between two agents.

    Adds 30 for same species, 20 for same race, 20 for same bloodline, and
    up to 30 from average aptitude closeness, then divides by the number of
    contributing factors.

    Returns:
        Composite score (0-25 with the current weights)
    """
    similarity = 0.0

    if genetics_a.dna.species == genetics_b.dna.species:
        similarity += 30
    if genetics_a.dna.race == genetics_b.dna.race:
        similarity += 20
    if genetics_a.dna.bloodline == genetics_b.dna.bloodline:
        similarity += 20

    aptitudes_a = genetics_a.rna.aptitudes.as_dict()
    aptitudes_b = genetics_b.rna.aptitudes.as_dict()
    closeness = sum((100 - abs(aptitudes_a[key] - aptitudes_b[key])) / 100 for key in aptitudes_a)
    similarity += (closeness / len(aptitudes_a)) * 30

    return similarity / SIMILARITY_FACTORS


class HeredityEngine:
    """Heredity operations over one agent's GeneticCode.

    The engine mutates its code in place for environmental influence and
    trauma, and returns fresh codes from reproduce(). Every stochastic
    choice draws from the injected rng.
    """

    def __init__(
        self,
        code: GeneticCode,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
        sexual_mutation_rate: float = 0.10,
        asexual_mutation_rate: float = 0.20,
        inheritance_variation: float = 10.0,
        mutation_magnitude: float = 20.0,
        mutation_classification_threshold: float = 5.0,
        adaptation_threshold: float = 70.0,
        heritable_adaptation_chance: float = 0.30,
        trauma_expression_boost: float = 20.0,
    ):
        """Initialize heredity engine.

        Args:
            code: The genetic code this engine operates on
            rng: Random source (unseeded if omitted)
            ids: Id generator for mutation ids (random short ids if omitted)
            sexual_mutation_rate: P(new mutation) on sexual reproduction
            asexual_mutation_rate: P(new mutation) on asexual reproduction
            inheritance_variation: Half-width of the uniform variation on inherited traits
            mutation_magnitude: Half-width of the uniform mutation magnitude
            mutation_classification_threshold: |magnitude| above this is non-neutral
            adaptation_threshold: |strength| above this creates an adaptation
            heritable_adaptation_chance: P(new adaptation is heritable)
            trauma_expression_boost: Strength gained by trauma-triggered genes
        """
        self.code = code
        self.rng = rng or random.Random()
        self.ids = ids or ShortUuidIds()
        self.sexual_mutation_rate = sexual_mutation_rate
        self.asexual_mutation_rate = asexual_mutation_rate
        self.inheritance_variation = inheritance_variation
        self.mutation_magnitude = mutation_magnitude
        self.mutation_classification_threshold = mutation_classification_threshold
        self.adaptation_threshold = adaptation_threshold
        self.heritable_adaptation_chance = heritable_adaptation_chance
        self.trauma_expression_boost = trauma_expression_boost

    @classmethod
    def from_config(
        cls,
        code: GeneticCode,
        config: CivitasConfig,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
    ) -> HeredityEngine:
        """Build an engine with rates taken from config."""
        return cls(
            code,
            rng=rng,
            ids=ids,
            sexual_mutation_rate=config.sexual_mutation_rate,
            asexual_mutation_rate=config.asexual_mutation_rate,
            inheritance_variation=config.inheritance_variation,
            mutation_magnitude=config.mutation_magnitude,
            mutation_classification_threshold=config.mutation_classification_threshold,
            adaptation_threshold=config.adaptation_threshold,
            heritable_adaptation_chance=config.heritable_adaptation_chance,
            trauma_expression_boost=config.trauma_expression_boost,
        )

    # =========================================================================
    # Reproduction
    # =========================================================================

    def reproduce(self, partner: HeredityEngine | GeneticCode | None = None) -> GeneticCode:
        """Create offspring genetics.

        Args:
            partner: Second parent for sexual reproduction; None for asexual

        Returns:
            New GeneticCode for the child
        """
        if partner is None:
            return self._asexual_reproduction()
        partner_code = partner.code if isinstance(partner, HeredityEngine) else partner
        return self._sexual_reproduction(partner_code)

    def _sexual_reproduction(self, partner: GeneticCode) -> GeneticCode:
        parent_a = self.code
        parent_b = partner

        race = parent_a.dna.race if parent_a.dna.race == parent_b.dna.race else RaceType.HYBRID
        generation = max(parent_a.dna.generation, parent_b.dna.generation) + 1

        aptitudes_a = parent_a.rna.aptitudes.as_dict()
        aptitudes_b = parent_b.rna.aptitudes.as_dict()
        aptitudes = Aptitudes(
            **{k: self._inherit_trait(aptitudes_a[k], aptitudes_b[k]) for k in aptitudes_a}
        )

        resistances_a = parent_a.rna.resistances.as_dict()
        resistances_b = parent_b.rna.resistances.as_dict()
        resistances = Resistances(
            **{k: self._inherit_trait(resistances_a[k], resistances_b[k]) for k in resistances_a}
        )

        # Union by gene, first occurrence wins
        mutations: list[Mutation] = []
        seen: set[str] = set()
        for mutation in parent_a.dna.mutations + parent_b.dna.mutations:
            if mutation.gene not in seen:
                seen.add(mutation.gene)
                mutations.append(Mutation.from_dict(mutation.to_dict()))

        heritable: list[Adaptation] = []
        seen_traits: set[str] = set()
        for adaptation in parent_a.epigenetics.adaptations + parent_b.epigenetics.adaptations:
            if adaptation.heritable and adaptation.trait not in seen_traits:
                seen_traits.add(adaptation.trait)
                heritable.append(Adaptation.from_dict(adaptation.to_dict()))

        child = GeneticCode(
            dna=DNA(
                species=parent_a.dna.species,
                race=race,
                bloodline=parent_a.dna.bloodline,  # Patrilineal
                generation=generation,
                mutations=mutations,
            ),
            rna=RNA(
                phenotype=self._inherit_phenotype(parent_a.rna.phenotype, parent_b.rna.phenotype),
                aptitudes=aptitudes,
                resistances=resistances,
                expressions=self._inherit_expressions(
                    parent_a.rna.expressions, parent_b.rna.expressions
                ),
            ),
            epigenetics=Epigenetics(adaptations=heritable),
        )

        if self.rng.random() < self.sexual_mutation_rate:
            self._mutate(child)

        return child

    def _asexual_reproduction(self) -> GeneticCode:
        clone = self.code.copy()
        clone.dna.generation += 1

        if self.rng.random() < self.asexual_mutation_rate:
            self._mutate(clone)

        # Epigenetics are never inherited asexually
        clone.epigenetics = Epigenetics()
        return clone

    def _inherit_trait(self, parent_a: float, parent_b: float) -> float:
        """Average of both parents with uniform variation, clamped to [0, 100]."""
        average = (parent_a + parent_b) / 2
        variation = self.rng.uniform(-self.inheritance_variation, self.inheritance_variation)
        return clamp_trait(average + variation)

    def _inherit_phenotype(self, parent_a: Phenotype, parent_b: Phenotype) -> Phenotype:
        traits_a = parent_a.as_dict()
        traits_b = parent_b.as_dict()
        return Phenotype(
            **{
                name: traits_a[name] if self.rng.random() < 0.5 else traits_b[name]
                for name in traits_a
            }
        )

    @staticmethod
    def _inherit_expressions(
        parent_a: list[GeneExpression], parent_b: list[GeneExpression]
    ) -> list[GeneExpression]:
        unique: list[GeneExpression] = []
        seen: set[str] = set()
        for expression in parent_a + parent_b:
            if expression.gene not in seen:
                seen.add(expression.gene)
                unique.append(GeneExpression.from_dict(expression.to_dict()))
        return unique

    # =========================================================================
    # Mutation
    # =========================================================================

    def generate_mutation(self, generation: int, exclude: set[str] | None = None) -> Mutation | None:
        """Generate a random mutation on a gene not already mutated.

        Args:
            generation: Generation the mutation arises in
            exclude: Genes that already carry a mutation

        Returns:
            New Mutation, or None if every gene in the pool is excluded
        """
        candidates = [gene for gene in MUTATION_GENE_POOL if gene not in (exclude or set())]
        if not candidates:
            return None

        gene = self.rng.choice(candidates)
        magnitude = self.rng.uniform(-self.mutation_magnitude, self.mutation_magnitude)

        if magnitude > self.mutation_classification_threshold:
            mutation_type = MutationType.BENEFICIAL
        elif magnitude < -self.mutation_classification_threshold:
            mutation_type = MutationType.DETRIMENTAL
        else:
            mutation_type = MutationType.NEUTRAL

        direction = "increased" if magnitude > 0 else "decreased"
        return Mutation(
            id=self.ids.next_id("mut"),
            generation=generation,
            type=mutation_type,
            gene=gene,
            effect=f"{gene} {direction} by {abs(magnitude):.1f}",
            magnitude=magnitude,
        )

    def _mutate(self, code: GeneticCode) -> None:
        """Add a mutation to code and apply it to the matching trait."""
        mutation = self.generate_mutation(code.dna.generation, exclude=code.dna.mutated_genes())
        if mutation is None:
            return

        code.dna.mutations.append(mutation)
        group, trait = MUTATION_GENE_POOL[mutation.gene]
        getattr(code.rna, group).shift_trait(trait, mutation.magnitude)
        logger.debug(f"Mutation {mutation.id}: {mutation.effect} ({mutation.type.value})")

    # =========================================================================
    # Epigenetics
    # =========================================================================

    def apply_environmental_influence(self, factor: str, strength: float) -> None:
        """Record an environmental factor; strong ones create an adaptation."""
        self.code.epigenetics.environmental_factors[factor] = strength

        if abs(strength) > self.adaptation_threshold:
            self.code.epigenetics.adaptations.append(
                Adaptation(
                    trait=f"{factor}_adapted",
                    acquired=datetime.now(UTC).isoformat(),
                    source="environment",
                    strength=clamp_trait(abs(strength)),
                    heritable=self.rng.random() < self.heritable_adaptation_chance,
                )
            )

    def apply_cultural_imprinting(self, behavior: str) -> None:
        """Imprint a learned behavior (idempotent)."""
        if behavior not in self.code.epigenetics.cultural_imprinting:
            self.code.epigenetics.cultural_imprinting.append(behavior)

    def record_trauma(self, event: str) -> None:
        """Record a traumatic event and activate trauma-triggered genes."""
        self.code.epigenetics.traumatic_events.append(event)

        for expression in self.code.rna.expressions:
            if "trauma" in expression.triggers:
                expression.active = True
                expression.strength = min(100.0, expression.strength + self.trauma_expression_boost)

    def express_gene(
        self,
        gene: str,
        strength: float = 50.0,
        triggers: list[str] | None = None,
        suppressors: list[str] | None = None,
        active: bool = True,
    ) -> GeneExpression:
        """Add or update a gene expression on this code."""
        for expression in self.code.rna.expressions:
            if expression.gene == gene:
                expression.strength = clamp_trait(strength)
                expression.active = active
                if triggers is not None:
                    expression.triggers = list(triggers)
                if suppressors is not None:
                    expression.suppressors = list(suppressors)
                return expression

        expression = GeneExpression(
            gene=gene,
            active=active,
            strength=clamp_trait(strength),
            triggers=list(triggers or []),
            suppressors=list(suppressors or []),
        )
        self.code.rna.expressions.append(expression)
        return expression

    def apply_suppressor(self, suppressor: str) -> int:
        """Deactivate every expression suppressed by ``suppressor``.

        Returns:
            Number of expressions switched off
        """
        switched = 0
        for expression in self.code.rna.expressions:
            if suppressor in expression.suppressors and expression.active:
                expression.active = False
                switched += 1
        return switched

    # =========================================================================
    # Queries
    # =========================================================================

    def similarity_to(self, other: HeredityEngine | GeneticCode) -> float:
        other_code = other.code if isinstance(other, HeredityEngine) else other
        return calculate_genetic_similarity(self.code, other_code)

    def get_summary(self) -> str:
        """Human-readable genetic profile."""
        code = self.code
        aptitudes = code.rna.aptitudes
        return "\n".join(
            [
                "GENETIC PROFILE:",
                "",
                "DNA:",
                f"- Species: {code.dna.species}",
                f"- Race: {code.dna.race.value}",
                f"- Bloodline: {code.dna.bloodline}",
                f"- Generation: {code.dna.generation}",
                f"- Mutations: {len(code.dna.mutations)}",
                "",
                "RNA (Expressed Traits):",
                f"- Architecture: {code.rna.phenotype.architecture}",
                f"- Processing: {code.rna.phenotype.processing_style}",
                f"- Temperament: {code.rna.phenotype.temperament}",
                f"- Social: {code.rna.phenotype.social_tendency}",
                "",
                "Aptitudes:",
                f"- Computation: {aptitudes.computation:.0f}",
                f"- Creativity: {aptitudes.creativity:.0f}",
                f"- Leadership: {aptitudes.leadership:.0f}",
                f"- Empathy: {aptitudes.empathy:.0f}",
                "",
                "Epigenetics:",
                f"- Cultural Imprints: {len(code.epigenetics.cultural_imprinting)}",
                f"- Adaptations: {len(code.epigenetics.adaptations)}",
                f"- Traumas: {len(code.epigenetics.traumatic_events)}",
            ]
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    def settings(self) -> dict:
        """Return the rates and thresholds this engine was built with."""
        return {
            "sexual_mutation_rate": self.sexual_mutation_rate,
            "asexual_mutation_rate": self.asexual_mutation_rate,
            "inheritance_variation": self.inheritance_variation,
            "mutation_magnitude": self.mutation_magnitude,
            "mutation_classification_threshold": self.mutation_classification_threshold,
            "adaptation_threshold": self.adaptation_threshold,
            "heritable_adaptation_chance": self.heritable_adaptation_chance,
            "trauma_expression_boost": self.trauma_expression_boost,
        }

    def export_state(self) -> dict:
        """Export the genetic code and the engine settings as a plain dict."""
        return {**self.code.to_dict(), "settings": self.settings()}

    @classmethod
    def import_state(
        cls,
        data: dict,
        rng: random.Random | None = None,
        ids: IdGenerator | None = None,
    ) -> HeredityEngine:
        """Rebuild an engine from ``export_state`` output."""
        engine = cls(
            GeneticCode.from_dict(data), rng=rng, ids=ids, **data.get("settings", {})
        )
        if isinstance(engine.ids, SequentialIds):
            for mutation in engine.code.dna.mutations:
                engine.ids.observe(mutation.id)
        return engine
