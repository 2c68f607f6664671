"""Configuration settings for the civitas engines.

Uses Pydantic Settings for validation and environment variable support.
All settings can be overridden via CIVITAS_* environment variables.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class CivitasConfig(BaseSettings):
    """Global configuration for heredity, language, and society engines."""

    # General
    seed: int = 42
    id_strategy: Literal["sequential", "uuid"] = "sequential"

    # Heredity
    sexual_mutation_rate: float = Field(default=0.10, ge=0.0, le=1.0)
    asexual_mutation_rate: float = Field(default=0.20, ge=0.0, le=1.0)
    inheritance_variation: float = 10.0  # +/- around the parental average
    mutation_magnitude: float = 20.0  # +/- range of a new mutation
    mutation_classification_threshold: float = 5.0
    founder_trait_base: float = 50.0
    founder_trait_jitter: float = 20.0
    adaptation_threshold: float = 70.0  # |strength| above this creates an adaptation
    heritable_adaptation_chance: float = Field(default=0.30, ge=0.0, le=1.0)
    trauma_expression_boost: float = 20.0

    # Language
    language_evolution_rate: float = Field(default=0.01, ge=0.0, le=1.0)
    archaic_frequency_penalty: float = 20.0
    loanword_frequency: float = 30.0
    cultural_word_frequency: float = 50.0
    dialect_phonetic_shifts: int = 3
    dialect_lexical_differences: int = 5

    # Society
    clan_reputation: float = 50.0
    tribe_defense_level: float = 50.0
    nation_stability: float = 70.0
    nation_prosperity: float = 50.0
    nation_influence: float = 50.0
    nation_technology: float = 50.0

    # Persistence
    state_dir: str = "data/civitas"

    model_config = {"env_prefix": "CIVITAS_"}
