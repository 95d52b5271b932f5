"""Shared fixtures for the PlanetForge test suite."""

import pytest

from src.utils.config import Configuration
from src.world_generation import NoiseConfig, PlanetParameters, World, WorldConfig


@pytest.fixture
def earth_parameters():
    """Earth-like parameters on a coarse grid."""
    return PlanetParameters(
        radius=6371000,
        solar_constant=1361,
        orbital_tilt=23.5,
        rotation_period=24,
        sea_level=0.5,
        atmosphere_density=1.0,
        grid_resolution=3,
    )


@pytest.fixture
def noise_config():
    """Fixed-seed noise settings."""
    return NoiseConfig(seed="planetforge-test", octaves=4)


@pytest.fixture
def settings():
    """Small chunks so every pass is split across several workers."""
    return Configuration(max_workers=2, chunk_size=64)


@pytest.fixture
def earth_world(earth_parameters, noise_config, settings):
    """A generated Earth-like world."""
    config = WorldConfig(parameters=earth_parameters, noise=noise_config)
    return World(config, settings).generate()
