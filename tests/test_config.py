"""Tests for CivitasConfig defaults, validation and environment overrides."""

from __future__ import annotations

import pydantic
import pytest

from civitas.config import CivitasConfig


class TestCivitasConfig:
    """Test configuration settings."""

    def test_defaults(self):
        config = CivitasConfig()
        assert config.seed == 42
        assert config.id_strategy == "sequential"
        assert config.sexual_mutation_rate == 0.10
        assert config.asexual_mutation_rate == 0.20
        assert config.language_evolution_rate == 0.01
        assert config.clan_reputation == 50
        assert config.nation_stability == 70
        assert config.state_dir == "data/civitas"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CIVITAS_SEED", "7")
        monkeypatch.setenv("CIVITAS_ID_STRATEGY", "uuid")
        monkeypatch.setenv("CIVITAS_LANGUAGE_EVOLUTION_RATE", "0.05")

        config = CivitasConfig()

        assert config.seed == 7
        assert config.id_strategy == "uuid"
        assert config.language_evolution_rate == 0.05

    def test_probability_bounds(self):
        with pytest.raises(pydantic.ValidationError):
            CivitasConfig(sexual_mutation_rate=1.5)

    def test_unknown_id_strategy(self):
        with pytest.raises(pydantic.ValidationError):
            CivitasConfig(id_strategy="timestamp")
