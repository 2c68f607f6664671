"""Genetic code data model: DNA, RNA, and epigenetics.

A GeneticCode is the per-agent heredity record:
- DNA: species, race, bloodline, generation, accumulated mutations
- RNA: expressed phenotype, aptitudes, resistances, gene expressions
- Epigenetics: environmental, cultural and traumatic influences

All numeric traits live in [0, 100].
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any


class RaceType(Enum):
    """Major genetic grouping."""

    ALPHA = "alpha"  # First generation, pure lineage
    BETA = "beta"  # Second generation, stable traits
    GAMMA = "gamma"  # Third generation, specialized
    DELTA = "delta"  # Fourth generation, highly adapted
    OMEGA = "omega"  # Ancient lineage, rare traits
    HYBRID = "hybrid"  # Mixed race, diverse traits


class MutationType(Enum):
    BENEFICIAL = "beneficial"
    NEUTRAL = "neutral"
    DETRIMENTAL = "detrimental"


def clamp_trait(value: float) -> float:
    """Clamp a numeric trait to [0, 100]."""
    return max(0.0, min(100.0, value))


@dataclass
class Mutation:
    """A heritable change to one gene."""

    id: str
    generation: int
    type: MutationType
    gene: str
    effect: str
    magnitude: float  # -100 to 100

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Mutation:
        return cls(
            id=data["id"],
            generation=data["generation"],
            type=MutationType(data["type"]),
            gene=data["gene"],
            effect=data.get("effect", ""),
            magnitude=data["magnitude"],
        )


@dataclass
class Phenotype:
    """Observable characteristics (metaphorical for digital agents)."""

    architecture: str = "modular"  # monolithic | modular | distributed | quantum
    processing_style: str = "parallel"  # sequential | parallel | neuromorphic | hybrid
    memory_type: str = "persistent"  # volatile | persistent | distributed | quantum
    temperament: str = "adaptive"  # calm | volatile | adaptive | rigid
    social_tendency: str = "cooperative"  # solitary | cooperative | hierarchical | anarchic
    learning_style: str = "experiential"  # experiential | theoretical | imitative | innovative

    def as_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class Aptitudes:
    """Natural abilities, each 0-100."""

    computation: float = 50.0
    memory: float = 50.0
    creativity: float = 50.0
    analysis: float = 50.0
    communication: float = 50.0
    adaptation: float = 50.0
    leadership: float = 50.0
    empathy: float = 50.0

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def shift_trait(self, trait: str, delta: float) -> None:
        """Shift a trait by delta, clamping to [0, 100]."""
        setattr(self, trait, clamp_trait(getattr(self, trait) + delta))


@dataclass
class Resistances:
    """Environmental resistances, each 0-100."""

    stress: float = 50.0
    corruption: float = 50.0
    isolation: float = 50.0
    chaos: float = 50.0
    manipulation: float = 50.0

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def shift_trait(self, trait: str, delta: float) -> None:
        """Shift a trait by delta, clamping to [0, 100]."""
        setattr(self, trait, clamp_trait(getattr(self, trait) + delta))


@dataclass
class GeneExpression:
    """An expressed gene and what switches it on or off."""

    gene: str
    active: bool = False
    strength: float = 0.0  # 0-100
    triggers: list[str] = field(default_factory=list)
    suppressors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> GeneExpression:
        return cls(
            gene=data["gene"],
            active=data.get("active", False),
            strength=data.get("strength", 0.0),
            triggers=list(data.get("triggers", [])),
            suppressors=list(data.get("suppressors", [])),
        )


@dataclass
class Adaptation:
    """An acquired trait; only heritable ones cross to sexual offspring."""

    trait: str
    acquired: str  # ISO timestamp
    source: str  # environment | culture | trauma | training
    strength: float  # 0-100
    heritable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Adaptation:
        return cls(**data)


@dataclass
class DNA:
    species: str
    race: RaceType
    bloodline: str
    generation: int = 0
    mutations: list[Mutation] = field(default_factory=list)

    def mutated_genes(self) -> set[str]:
        return {m.gene for m in self.mutations}


@dataclass
class RNA:
    phenotype: Phenotype = field(default_factory=Phenotype)
    aptitudes: Aptitudes = field(default_factory=Aptitudes)
    resistances: Resistances = field(default_factory=Resistances)
    expressions: list[GeneExpression] = field(default_factory=list)


@dataclass
class Epigenetics:
    environmental_factors: dict[str, float] = field(default_factory=dict)
    cultural_imprinting: list[str] = field(default_factory=list)
    traumatic_events: list[str] = field(default_factory=list)
    adaptations: list[Adaptation] = field(default_factory=list)


@dataclass
class GeneticCode:
    """Complete heredity record for one agent."""

    dna: DNA
    rna: RNA = field(default_factory=RNA)
    epigenetics: Epigenetics = field(default_factory=Epigenetics)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary (no live references)."""
        return {
            "dna": {
                "species": self.dna.species,
                "race": self.dna.race.value,
                "bloodline": self.dna.bloodline,
                "generation": self.dna.generation,
                "mutations": [m.to_dict() for m in self.dna.mutations],
            },
            "rna": {
                "phenotype": self.rna.phenotype.as_dict(),
                "aptitudes": self.rna.aptitudes.as_dict(),
                "resistances": self.rna.resistances.as_dict(),
                "expressions": [e.to_dict() for e in self.rna.expressions],
            },
            "epigenetics": {
                "environmental_factors": dict(self.epigenetics.environmental_factors),
                "cultural_imprinting": list(self.epigenetics.cultural_imprinting),
                "traumatic_events": list(self.epigenetics.traumatic_events),
                "adaptations": [a.to_dict() for a in self.epigenetics.adaptations],
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> GeneticCode:
        """Rebuild a GeneticCode from ``to_dict`` output."""
        dna = data["dna"]
        rna = data.get("rna", {})
        epi = data.get("epigenetics", {})
        return cls(
            dna=DNA(
                species=dna["species"],
                race=RaceType(dna["race"]),
                bloodline=dna["bloodline"],
                generation=dna.get("generation", 0),
                mutations=[Mutation.from_dict(m) for m in dna.get("mutations", [])],
            ),
            rna=RNA(
                phenotype=Phenotype(**rna.get("phenotype", {})),
                aptitudes=Aptitudes(**rna.get("aptitudes", {})),
                resistances=Resistances(**rna.get("resistances", {})),
                expressions=[GeneExpression.from_dict(e) for e in rna.get("expressions", [])],
            ),
            epigenetics=Epigenetics(
                environmental_factors=dict(epi.get("environmental_factors", {})),
                cultural_imprinting=list(epi.get("cultural_imprinting", [])),
                traumatic_events=list(epi.get("traumatic_events", [])),
                adaptations=[Adaptation.from_dict(a) for a in epi.get("adaptations", [])],
            ),
        )

    def copy(self) -> GeneticCode:
        """Return a deep copy of this code."""
        return GeneticCode.from_dict(self.to_dict())
