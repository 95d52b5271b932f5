"""Named planet presets.

Each preset bundles planetary parameters with the noise settings that give
its terrain a characteristic look. Presets are plain configuration; callers
may pass their own PlanetParameters and NoiseConfig instead.
"""

from dataclasses import dataclass
from typing import Dict, List

from .planetary import PlanetParameters
from .terrain import NoiseConfig
from .world import WorldConfig


@dataclass(frozen=True)
class Preset:
    """A named planet configuration."""

    name: str
    description: str
    parameters: PlanetParameters
    noise: NoiseConfig

    def to_config(self, **overrides) -> WorldConfig:
        """World configuration for this preset.

        Args:
            **overrides: WorldConfig fields to set, e.g. annual_average=True

        Returns:
            WorldConfig using the preset's parameters and noise settings
        """
        return WorldConfig(parameters=self.parameters, noise=self.noise, **overrides)


PRESETS: Dict[str, Preset] = {
    "earth-like": Preset(
        name="Earth-like",
        description="Standard Earth-like planet with realistic climate",
        parameters=PlanetParameters(
            radius=6371000,
            solar_constant=1361,
            orbital_tilt=23.5,
            rotation_period=24,
            sea_level=0.5,
            atmosphere_density=1.0,
            grid_resolution=4,
        ),
        noise=NoiseConfig(
            seed="earth-seed",
            octaves=6,
            persistence=0.5,
            lacunarity=2.0,
            scale=1.0,
            redistribution_power=2.0,
        ),
    ),
    "mars-like": Preset(
        name="Mars-like",
        description="Cold, dry planet with thin atmosphere",
        parameters=PlanetParameters(
            radius=3389500,
            solar_constant=590,
            orbital_tilt=25.2,
            rotation_period=24.6,
            orbital_period=687,
            sea_level=0.3,
            atmosphere_density=0.01,
            grid_resolution=4,
        ),
        noise=NoiseConfig(
            seed="mars-seed",
            octaves=8,
            persistence=0.6,
            lacunarity=2.2,
            scale=1.2,
            redistribution_power=1.8,
        ),
    ),
    "venus-like": Preset(
        name="Venus-like",
        description="Hot, thick atmosphere with near-zero rotation rate",
        parameters=PlanetParameters(
            radius=6051800,
            solar_constant=2601,
            orbital_tilt=177.4,
            rotation_period=2802,
            orbital_period=225,
            sea_level=0.0,
            atmosphere_density=5.0,
            grid_resolution=3,
        ),
        noise=NoiseConfig(
            seed="venus-seed",
            octaves=5,
            persistence=0.4,
            lacunarity=2.0,
            scale=0.8,
            redistribution_power=1.5,
        ),
    ),
    "ice-planet": Preset(
        name="Ice Planet",
        description="Frozen world with distant star",
        parameters=PlanetParameters(
            radius=5000000,
            solar_constant=400,
            orbital_tilt=15.0,
            rotation_period=18,
            sea_level=0.7,
            atmosphere_density=0.5,
            grid_resolution=3,
        ),
        noise=NoiseConfig(
            seed="ice-planet",
            octaves=4,
            persistence=0.3,
            lacunarity=2.0,
            scale=1.0,
            redistribution_power=3.0,
        ),
    ),
    "ocean-world": Preset(
        name="Ocean World",
        description="Water-covered planet with archipelagos",
        parameters=PlanetParameters(
            radius=6371000,
            solar_constant=1361,
            orbital_tilt=23.5,
            rotation_period=24,
            sea_level=0.7,
            atmosphere_density=1.2,
            grid_resolution=4,
        ),
        noise=NoiseConfig(
            seed="ocean-world",
            octaves=6,
            persistence=0.4,
            lacunarity=2.0,
            scale=0.8,
            redistribution_power=1.5,
        ),
    ),
}


def list_presets() -> List[str]:
    """Names of the available presets."""
    return sorted(PRESETS)


def get_preset(name: str) -> Preset:
    """Look up a preset by name.

    Args:
        name: Preset name, e.g. "mars-like"

    Returns:
        The preset
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown preset '{name}'. Available presets: {', '.join(list_presets())}"
        ) from None
