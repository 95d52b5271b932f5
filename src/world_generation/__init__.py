"""
World generation package for PlanetForge.

This package contains modules for the spherical grid, terrain generation,
planetary systems, climate simulation, biome classification and the world
generation pipeline that ties them together.
"""

from .errors import ConfigurationError, GenerationCancelled
from .grid import GeodesicGrid, GridCell
from .planetary import PlanetParameters, PlanetarySystem
from .terrain import HeightMap, NoiseConfig, TerrainGenerator, sample_external_heightmap
from .climate import ClimateSample, ClimateSystem, NeighborSample
from .biome import BiomeClassifier, BiomeType
from .world import (
    CellRecord,
    TerrainSample,
    World,
    WorldConfig,
    WorldResult,
    WorldStatistics,
    generate_world,
)
from .presets import PRESETS, Preset, get_preset, list_presets

__all__ = [
    'ConfigurationError', 'GenerationCancelled',
    'GeodesicGrid', 'GridCell',
    'PlanetParameters', 'PlanetarySystem',
    'HeightMap', 'NoiseConfig', 'TerrainGenerator', 'sample_external_heightmap',
    'ClimateSample', 'ClimateSystem', 'NeighborSample',
    'BiomeClassifier', 'BiomeType',
    'CellRecord', 'TerrainSample', 'World', 'WorldConfig', 'WorldResult',
    'WorldStatistics', 'generate_world',
    'PRESETS', 'Preset', 'get_preset', 'list_presets',
]
