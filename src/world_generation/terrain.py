"""Terrain generation module for PlanetForge.

This module synthesizes a continuous elevation field over the sphere from
layered OpenSimplex noise, or samples an externally supplied heightmap
raster instead. Noise is sampled in 3D on the unit sphere so the field has no
seam at the antimeridian and no pinching at the poles.
"""

import zlib
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np
import structlog
from opensimplex import OpenSimplex

from .errors import ConfigurationError

logger = structlog.get_logger()

Seed = Union[int, str]


def seed_to_int(seed: Seed) -> int:
    """Convert a seed to the integer OpenSimplex expects.

    String seeds are hashed with CRC32, which is stable across processes
    and interpreter versions.

    Args:
        seed: Integer or string seed

    Returns:
        Integer seed
    """
    if isinstance(seed, str):
        return zlib.crc32(seed.encode("utf-8"))
    return int(seed)


@dataclass(frozen=True)
class NoiseConfig:
    """Settings of the layered noise elevation field.

    Attributes:
        seed: Integer or string seed. None draws a random seed, which is then
            stored on the config so the world can be reproduced.
        octaves: Number of noise layers
        persistence: Amplitude multiplier between successive layers
        lacunarity: Frequency multiplier between successive layers
        scale: Frequency of the first layer on the unit sphere
        redistribution_power: Exponent applied to the normalized elevation;
            values above 1 create more lowland and sharper peaks
    """

    seed: Optional[Seed] = None
    octaves: int = 6
    persistence: float = 0.5
    lacunarity: float = 2.0
    scale: float = 1.0
    redistribution_power: float = 2.0

    def __post_init__(self):
        if self.seed is None:
            object.__setattr__(self, "seed", int(np.random.randint(0, 1000000)))
        elif isinstance(self.seed, bool) or not isinstance(self.seed, (int, str)):
            raise ConfigurationError(f"Noise seed must be an int or str, got {self.seed!r}")

        if isinstance(self.octaves, bool) or not isinstance(self.octaves, int) or self.octaves < 1:
            raise ConfigurationError(f"octaves must be a positive integer, got {self.octaves!r}")
        for name in ("persistence", "lacunarity", "scale", "redistribution_power"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) \
                    or not np.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number, got {value!r}")


@dataclass(frozen=True, eq=False)
class HeightMap:
    """External elevation raster.

    Attributes:
        width: Number of columns (longitude samples)
        height: Number of rows (latitude samples, north first)
        data: Row-major elevation values normalized to [0, 1]
        min: Declared minimum of the source data
        max: Declared maximum of the source data
    """

    width: int
    height: int
    data: np.ndarray = field(repr=False)
    min: float = 0.0
    max: float = 1.0

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ConfigurationError(
                    f"Heightmap {name} must be an integer, got {value!r}"
                )
            object.__setattr__(self, name, int(value))

        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Heightmap dimensions must be positive, got {self.width}x{self.height}"
            )
        data = np.array(self.data, dtype=float).ravel()
        if data.size != self.width * self.height:
            raise ConfigurationError(
                f"Heightmap data has {data.size} values, expected "
                f"{self.width * self.height} for {self.width}x{self.height}"
            )
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HeightMap):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.min == other.min
            and self.max == other.max
            and np.array_equal(self.data, other.data)
        )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "HeightMap":
        """Build a heightmap from an arbitrary 2D array.

        Values are normalized to [0, 1] using the array's own min and max.

        Args:
            array: 2D array of shape (height, width)

        Returns:
            Normalized HeightMap
        """
        array = np.asarray(array, dtype=float)
        if array.ndim != 2:
            raise ConfigurationError(f"Heightmap array must be 2D, got shape {array.shape}")
        if array.size == 0:
            raise ConfigurationError("Heightmap array is empty")

        min_val = float(np.min(array))
        max_val = float(np.max(array))
        if max_val > min_val:
            normalized = (array - min_val) / (max_val - min_val)
        else:
            normalized = np.zeros_like(array)

        height, width = array.shape
        return cls(width=width, height=height, data=normalized, min=min_val, max=max_val)

    def as_array(self) -> np.ndarray:
        """Return the data as a (height, width) array."""
        return self.data.reshape(self.height, self.width)


def sample_external_heightmap(height_map: HeightMap, latitude: float,
                              longitude: float) -> float:
    """Nearest-sample lookup into an external heightmap.

    Longitude wraps around the raster; latitude is clamped to its top and
    bottom rows.

    Args:
        height_map: External raster
        latitude: Latitude in degrees (-90 to 90)
        longitude: Longitude in degrees (-180 to 180)

    Returns:
        Elevation in [0, 1]
    """
    width, height = height_map.width, height_map.height

    x = int(np.floor((longitude + 180.0) / 360.0 * width)) % width
    y = int(np.floor((90.0 - latitude) / 180.0 * height))
    y = min(max(y, 0), height - 1)

    value = float(height_map.data[y * width + x])
    if not np.isfinite(value):
        return 0.0
    return float(np.clip(value, 0.0, 1.0))


class TerrainGenerator:
    """Generates seed-reproducible elevation for any point on the sphere."""

    def __init__(self, config: Optional[NoiseConfig] = None):
        """Initialize the TerrainGenerator.

        Args:
            config: Noise settings, Earth-like defaults when omitted
        """
        self.config = config if config is not None else NoiseConfig()
        self.seed = seed_to_int(self.config.seed)
        self.noise_gen = OpenSimplex(seed=self.seed)

        # Sum of the layer amplitudes, used to keep fbm within [-1, 1]
        self.amplitude_sum = sum(
            self.config.persistence ** octave for octave in range(self.config.octaves)
        )

    @staticmethod
    def lat_lng_to_sphere(latitude: float, longitude: float,
                          radius: float = 1.0) -> np.ndarray:
        """Map a coordinate onto a sphere for noise sampling.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            radius: Sphere radius

        Returns:
            Array of shape (3,)
        """
        phi = np.radians(90.0 - latitude)
        theta = np.radians(longitude + 180.0)
        return np.array([
            radius * np.sin(phi) * np.cos(theta),
            radius * np.sin(phi) * np.sin(theta),
            radius * np.cos(phi),
        ])

    def fbm(self, x: float, y: float, z: float) -> float:
        """Fractal Brownian motion over OpenSimplex 3D noise.

        Args:
            x: X coordinate
            y: Y coordinate
            z: Z coordinate

        Returns:
            Noise value in range [-1, 1]
        """
        value = 0.0
        amplitude = 1.0
        frequency = self.config.scale

        for _ in range(self.config.octaves):
            value += self.noise_gen.noise3(
                x * frequency, y * frequency, z * frequency
            ) * amplitude
            amplitude *= self.config.persistence
            frequency *= self.config.lacunarity

        return value / self.amplitude_sum

    def elevation_at(self, latitude: float, longitude: float) -> float:
        """Elevation at a coordinate.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            longitude: Longitude in degrees (-180 to 180)

        Returns:
            Normalized elevation in [0, 1]
        """
        x, y, z = self.lat_lng_to_sphere(latitude, longitude)
        value = self.fbm(x, y, z)

        # Remap from [-1, 1] to [0, 1]
        value = float(np.clip((value + 1.0) / 2.0, 0.0, 1.0))

        # Redistribute to bias the histogram toward lowlands
        return value ** self.config.redistribution_power

    def generate_heightmap(self, width: int, height: int) -> HeightMap:
        """Sample the elevation field on an equirectangular raster.

        Args:
            width: Number of longitude samples
            height: Number of latitude samples

        Returns:
            HeightMap holding the sampled field and its min/max
        """
        if width <= 0 or height <= 0:
            raise ConfigurationError(
                f"Heightmap dimensions must be positive, got {width}x{height}"
            )

        logger.info("Generating heightmap", width=width, height=height, seed=self.seed)

        heightmap = np.zeros((height, width))
        for y in range(height):
            latitude = 90 - (y / height) * 180
            for x in range(width):
                longitude = (x / width) * 360 - 180
                heightmap[y, x] = self.elevation_at(latitude, longitude)

        return HeightMap(
            width=width,
            height=height,
            data=heightmap,
            min=float(np.min(heightmap)),
            max=float(np.max(heightmap)),
        )

    @staticmethod
    def save_heightmap(height_map: HeightMap, filename: str = "heightmap.npz") -> None:
        """Save a heightmap to a file.

        The raster is stored unchanged together with its declared min and
        max, so loading it back gives an identical HeightMap.

        Args:
            height_map: Heightmap to save
            filename: File to save the heightmap to
        """
        with open(filename, "wb") as f:
            np.savez(f, data=height_map.as_array(), min=height_map.min, max=height_map.max)
        logger.info("Heightmap saved", filename=filename)

    @staticmethod
    def load_heightmap(filename: str) -> HeightMap:
        """Load a heightmap from a file.

        Accepts archives written by save_heightmap, or a plain .npy array of
        shape (height, width) whose values are already normalized to [0, 1].
        Values are never rescaled.

        Args:
            filename: File to load the heightmap from

        Returns:
            Loaded heightmap
        """
        loaded = np.load(filename)
        if isinstance(loaded, np.ndarray):
            data = loaded
            min_val = float(np.min(data)) if data.size else 0.0
            max_val = float(np.max(data)) if data.size else 1.0
        else:
            with loaded:
                data = loaded["data"]
                min_val = float(loaded["min"])
                max_val = float(loaded["max"])

        if data.ndim != 2:
            raise ConfigurationError(f"Heightmap array must be 2D, got shape {data.shape}")

        height, width = data.shape
        height_map = HeightMap(width=width, height=height, data=data, min=min_val, max=max_val)
        logger.info(
            "Heightmap loaded",
            filename=filename,
            width=height_map.width,
            height=height_map.height,
        )
        return height_map
