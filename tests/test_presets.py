"""Tests for the named planet presets."""

import pytest

from src.world_generation.presets import PRESETS, get_preset, list_presets
from src.world_generation.world import WorldConfig


class TestPresets:
    """Test preset lookup and conversion."""

    def test_list_presets(self):
        names = list_presets()
        assert names == sorted(names)
        assert {"earth-like", "mars-like", "venus-like", "ice-planet", "ocean-world"} <= set(names)

    def test_get_preset(self):
        preset = get_preset("mars-like")
        assert preset.name == "Mars-like"
        assert preset.parameters.atmosphere_density == pytest.approx(0.01)

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match="earth-like"):
            get_preset("pluto-like")

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_to_config(self, name):
        config = PRESETS[name].to_config()
        assert isinstance(config, WorldConfig)
        assert config.parameters is PRESETS[name].parameters
        assert config.noise is PRESETS[name].noise
        assert config.height_map is None

    def test_to_config_overrides(self):
        config = get_preset("ice-planet").to_config(annual_average=True, day_of_year=10.0)
        assert config.annual_average is True
        assert config.day_of_year == 10.0

    def test_seeds_are_fixed(self):
        for preset in PRESETS.values():
            assert isinstance(preset.noise.seed, str)

    def test_venus_is_tidally_locked(self):
        assert get_preset("venus-like").parameters.rotation_period >= 1000
