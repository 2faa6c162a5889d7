"""Tests for generation tuning values."""
import pytest

from mapforge.config import Settings
from mapforge.core.map_generation.tuning import GenerationTuning


class TestFromDict:
    """Tests for reading tuning from raw values."""

    def test_whole_float_string_for_int_field(self):
        tuning = GenerationTuning.from_dict({"corridor_wander_interval": "3.0"})
        assert tuning.corridor_wander_interval == 3
        assert isinstance(tuning.corridor_wander_interval, int)

    def test_fractional_value_for_int_field(self):
        with pytest.raises(ValueError, match="corridor_wander_interval"):
            GenerationTuning.from_dict({"corridor_wander_interval": "3.5"})

    def test_non_numeric_value(self):
        with pytest.raises(ValueError, match="not a number"):
            GenerationTuning.from_dict({"organic_wobble": "wobbly"})

    def test_float_field(self):
        tuning = GenerationTuning.from_dict({"corridor_wander_chance": "0.4", "placement_attempts": 12})
        assert tuning.corridor_wander_chance == 0.4
        assert tuning.placement_attempts == 12

    def test_unknown_keys_ignored(self):
        assert GenerationTuning.from_dict({"dragon_count": 9}) == GenerationTuning()


class TestFromSettings:
    """Tests for tuning built from settings and the environment."""

    def test_settings_limits(self):
        settings = Settings()
        settings.MAX_MAP_DIMENSION = 100
        settings.PLACEMENT_ATTEMPTS = 7
        tuning = GenerationTuning.from_settings(settings)
        assert tuning.max_map_dimension == 100
        assert tuning.placement_attempts == 7

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MAPGEN_CORRIDOR_WANDER_INTERVAL", "3.0")
        monkeypatch.setenv("MAPGEN_ORGANIC_WOBBLE", "0.5")
        tuning = GenerationTuning.from_settings(Settings())
        assert tuning.corridor_wander_interval == 3
        assert tuning.organic_wobble == 0.5

    def test_bad_environment_override(self, monkeypatch):
        monkeypatch.setenv("MAPGEN_PLACEMENT_ATTEMPTS", "many")
        with pytest.raises(ValueError, match="placement_attempts"):
            GenerationTuning.from_settings(Settings())
