"""Biome classification module for PlanetForge.

Maps temperature, precipitation and altitude to one of twelve biomes with an
ordered decision table. Rows are evaluated top to bottom and the first match
wins, so the order encodes precedence: water and altitude are decided before
temperature, and temperature bands before precipitation.
"""

from enum import Enum
from typing import Dict

ALPINE_ALTITUDE_M = 4000.0


class BiomeType(str, Enum):
    """Biome labels."""

    OCEAN = "Ocean"
    ICE = "Ice"
    TUNDRA = "Tundra"
    TAIGA = "Taiga"
    TEMPERATE_FOREST = "Temperate Forest"
    TEMPERATE_GRASSLAND = "Temperate Grassland"
    DESERT = "Desert"
    SAVANNA = "Savanna"
    TROPICAL_RAINFOREST = "Tropical Rainforest"
    TROPICAL_SEASONAL_FOREST = "Tropical Seasonal Forest"
    ALPINE = "Alpine"
    SUBTROPICAL_DESERT = "Subtropical Desert"

    def __str__(self) -> str:
        return self.value


BIOME_COLORS: Dict[BiomeType, str] = {
    BiomeType.OCEAN: "#1e3a8a",
    BiomeType.ICE: "#f0f9ff",
    BiomeType.TUNDRA: "#bae6fd",
    BiomeType.TAIGA: "#10b981",
    BiomeType.TEMPERATE_FOREST: "#22c55e",
    BiomeType.TEMPERATE_GRASSLAND: "#84cc16",
    BiomeType.DESERT: "#fbbf24",
    BiomeType.SAVANNA: "#bef264",
    BiomeType.TROPICAL_RAINFOREST: "#065f46",
    BiomeType.TROPICAL_SEASONAL_FOREST: "#16a34a",
    BiomeType.ALPINE: "#94a3b8",
    BiomeType.SUBTROPICAL_DESERT: "#f59e0b",
}

BIOME_DESCRIPTIONS: Dict[BiomeType, str] = {
    BiomeType.OCEAN: "Deep water body",
    BiomeType.ICE: "Permanent ice and snow cover",
    BiomeType.TUNDRA: "Cold, treeless plain with permafrost",
    BiomeType.TAIGA: "Boreal coniferous forest",
    BiomeType.TEMPERATE_FOREST: "Deciduous and mixed forest",
    BiomeType.TEMPERATE_GRASSLAND: "Grasslands with moderate rainfall",
    BiomeType.DESERT: "Arid region with minimal precipitation",
    BiomeType.SAVANNA: "Tropical grassland with scattered trees",
    BiomeType.TROPICAL_RAINFOREST: "Dense, wet tropical forest",
    BiomeType.TROPICAL_SEASONAL_FOREST: "Tropical forest with dry season",
    BiomeType.ALPINE: "High mountain terrain",
    BiomeType.SUBTROPICAL_DESERT: "Hot, dry subtropical region",
}


class BiomeClassifier:
    """Classifies cells into biomes.

    Stateless: the result depends only on the three inputs, never on the
    biomes of adjacent cells.
    """

    def classify(self, temperature: float, precipitation: float,
                 altitude: float) -> BiomeType:
        """Classify a cell.

        Args:
            temperature: Temperature in °C
            precipitation: Precipitation in mm/year
            altitude: Height relative to sea level in meters (negative
                below sea level)

        Returns:
            The biome of the cell
        """
        if altitude < 0:
            return BiomeType.OCEAN

        if altitude > ALPINE_ALTITUDE_M:
            return BiomeType.ALPINE

        if temperature < -15:
            return BiomeType.ICE

        if temperature < 0:
            return BiomeType.TUNDRA

        if temperature < 10:
            if precipitation < 400:
                return BiomeType.TUNDRA
            return BiomeType.TAIGA

        if temperature < 20:
            if precipitation < 500:
                return BiomeType.TEMPERATE_GRASSLAND
            return BiomeType.TEMPERATE_FOREST

        if temperature < 25:
            if precipitation < 200:
                return BiomeType.SUBTROPICAL_DESERT
            if precipitation < 500:
                return BiomeType.TEMPERATE_GRASSLAND
            if precipitation < 1000:
                return BiomeType.TEMPERATE_FOREST
            return BiomeType.TROPICAL_SEASONAL_FOREST

        # Hot climates, banded by rainfall
        if precipitation < 250:
            return BiomeType.DESERT
        if precipitation < 500:
            return BiomeType.SUBTROPICAL_DESERT
        if precipitation < 1000:
            return BiomeType.SAVANNA
        if precipitation < 2000:
            return BiomeType.TROPICAL_SEASONAL_FOREST

        return BiomeType.TROPICAL_RAINFOREST

    @staticmethod
    def get_biome_color(biome: BiomeType) -> str:
        """Display color of a biome as a hex string."""
        return BIOME_COLORS[BiomeType(biome)]

    @staticmethod
    def get_biome_description(biome: BiomeType) -> str:
        """Short human-readable description of a biome."""
        return BIOME_DESCRIPTIONS[BiomeType(biome)]
