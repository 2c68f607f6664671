"""Heredity: genetic codes, reproduction, and epigenetic influence.

- GeneticCode: DNA / RNA / epigenetics record for one agent
- HeredityEngine: reproduction, mutation, environmental influence, trauma
- create_founder_genetics: generation-0 codes for founder agents
- calculate_genetic_similarity: pairwise similarity score
"""

from __future__ import annotations

from civitas.heredity.engine import (
    MUTATION_GENE_POOL,
    HeredityEngine,
    calculate_genetic_similarity,
    create_founder_genetics,
)
from civitas.heredity.genetics import (
    Adaptation,
    Aptitudes,
    GeneExpression,
    GeneticCode,
    Mutation,
    MutationType,
    Phenotype,
    RaceType,
    Resistances,
)

__all__ = [
    "MUTATION_GENE_POOL",
    "Adaptation",
    "Aptitudes",
    "GeneExpression",
    "GeneticCode",
    "HeredityEngine",
    "Mutation",
    "MutationType",
    "Phenotype",
    "RaceType",
    "Resistances",
    "calculate_genetic_similarity",
    "create_founder_genetics",
]
