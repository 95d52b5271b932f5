"""World generation pipeline for PlanetForge.

Builds the grid, then runs the per-cell simulation in passes separated by
barriers:

1. Elevation of every cell (noise field or external heightmap).
2. Distance to the nearest ocean cell, once the ocean mask is complete.
3. Temperature, precipitation, humidity and biome of every cell.
4. Wind of every cell, from the finished temperatures of its neighbors.

Work inside a pass is split into chunks and handed to a thread pool. Chunks
only read state finalized by earlier passes and results are reassembled in
grid order, so the output does not depend on the number of workers.
"""

import math
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog
import xarray as xr
from scipy.spatial import cKDTree

from ..utils.config import Configuration
from .biome import BiomeClassifier, BiomeType
from .climate import (
    ClimateSample,
    ClimateSystem,
    NeighborSample,
    WIND_MAX_NEIGHBORS,
    WIND_SEARCH_RADIUS_KM,
    altitude_m,
)
from .errors import ConfigurationError, GenerationCancelled
from .grid import CellId, GeodesicGrid, chord_length, chord_to_angle
from .planetary import PlanetParameters
from .terrain import HeightMap, NoiseConfig, TerrainGenerator, sample_external_heightmap

logger = structlog.get_logger()

# Land cells look for ocean within this radius
OCEAN_SEARCH_RADIUS_KM = 500.0

# Distance assumed for land cells with no ocean inside the search radius
NO_OCEAN_DISTANCE_KM = 1000.0


@dataclass(frozen=True)
class TerrainSample:
    """Terrain of one cell."""

    elevation: float


@dataclass(frozen=True)
class CellRecord:
    """Full simulation result for one cell."""

    cell_id: CellId
    latitude: float
    longitude: float
    terrain: TerrainSample
    climate: ClimateSample
    biome: BiomeType
    is_ocean: bool
    distance_to_ocean: float = 0.0

    @property
    def elevation(self) -> float:
        return self.terrain.elevation

    @property
    def temperature(self) -> float:
        return self.climate.temperature

    @property
    def precipitation(self) -> float:
        return self.climate.precipitation

    @property
    def humidity(self) -> float:
        return self.climate.humidity

    @property
    def wind_speed(self) -> float:
        return self.climate.wind_speed

    @property
    def wind_direction(self) -> float:
        return self.climate.wind_direction

    def to_dict(self) -> Dict[str, Any]:
        """Flat dictionary view of the record."""
        return {
            "cell_id": self.cell_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "elevation": self.elevation,
            "temperature": self.temperature,
            "precipitation": self.precipitation,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "wind_direction": self.wind_direction,
            "biome": self.biome.value,
            "is_ocean": self.is_ocean,
            "distance_to_ocean": self.distance_to_ocean,
        }


@dataclass(frozen=True)
class WorldStatistics:
    """Aggregate statistics over the cells of a world."""

    total_cells: int
    land_cells: int
    ocean_cells: int
    biome_distribution: Dict[str, int]
    average_temperature: float
    average_precipitation: float

    @classmethod
    def from_records(cls, records: Sequence[CellRecord]) -> "WorldStatistics":
        """Compute statistics from cell records.

        Args:
            records: Cells of a world

        Returns:
            WorldStatistics; averages are 0.0 for an empty collection
        """
        biome_distribution: Dict[str, int] = {}
        total_temp = 0.0
        total_precip = 0.0
        ocean_cells = 0

        for record in records:
            biome_distribution[record.biome.value] = biome_distribution.get(record.biome.value, 0) + 1
            total_temp += record.temperature
            total_precip += record.precipitation
            if record.is_ocean:
                ocean_cells += 1

        total = len(records)
        return cls(
            total_cells=total,
            land_cells=total - ocean_cells,
            ocean_cells=ocean_cells,
            biome_distribution=biome_distribution,
            average_temperature=total_temp / total if total else 0.0,
            average_precipitation=total_precip / total if total else 0.0,
        )


@dataclass(frozen=True)
class WorldConfig:
    """Everything a generation run needs, fully populated and validated.

    Attributes:
        parameters: Planetary parameters
        noise: Noise settings, ignored when a heightmap is supplied
        height_map: Optional external heightmap replacing the noise field
        annual_average: Average temperature and precipitation over the
            orbit instead of sampling a single day
        day_of_year: Day of the orbit sampled when annual_average is off
    """

    parameters: PlanetParameters = field(default_factory=PlanetParameters)
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    height_map: Optional[HeightMap] = None
    annual_average: bool = False
    day_of_year: float = 0.0

    def __post_init__(self):
        if not isinstance(self.parameters, PlanetParameters):
            raise ConfigurationError(
                f"parameters must be PlanetParameters, got {type(self.parameters).__name__}"
            )
        if not isinstance(self.noise, NoiseConfig):
            raise ConfigurationError(
                f"noise must be NoiseConfig, got {type(self.noise).__name__}"
            )
        if self.height_map is not None and not isinstance(self.height_map, HeightMap):
            raise ConfigurationError(
                f"height_map must be a HeightMap, got {type(self.height_map).__name__}"
            )
        if isinstance(self.day_of_year, bool) or not isinstance(self.day_of_year, (int, float)) \
                or not math.isfinite(self.day_of_year) or self.day_of_year < 0:
            raise ConfigurationError(
                f"day_of_year must be a non-negative number, got {self.day_of_year!r}"
            )


class WorldResult:
    """A finished world: the cell records plus lookups over them."""

    def __init__(self, grid: GeodesicGrid, records: Sequence[CellRecord],
                 config: WorldConfig):
        self._grid = grid
        self._records: Dict[CellId, CellRecord] = {record.cell_id: record for record in records}
        self.config = config

    @property
    def grid(self) -> GeodesicGrid:
        """The grid the world was generated on."""
        return self._grid

    @property
    def parameters(self) -> PlanetParameters:
        return self.config.parameters

    @property
    def cells(self) -> Tuple[CellRecord, ...]:
        """All cell records in grid order."""
        return tuple(self._records.values())

    @property
    def statistics(self) -> WorldStatistics:
        """Aggregate statistics, recomputed on every access."""
        return WorldStatistics.from_records(self.cells)

    def __len__(self) -> int:
        return len(self._records)

    def cell_by_id(self, cell_id: CellId) -> Optional[CellRecord]:
        """Record of a cell, or None if no cell has this id."""
        return self._records.get(cell_id)

    def cell_at(self, latitude: float, longitude: float) -> Optional[CellRecord]:
        """Record of the cell containing a coordinate.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            longitude: Longitude in degrees

        Returns:
            The cell record, or None for coordinates that are not on the
            sphere (latitude out of range or non-finite values)
        """
        try:
            cell_id = self._grid.locate(latitude, longitude)
        except ValueError:
            return None
        return self._records.get(cell_id)

    def to_feature_collection(self) -> Dict[str, Any]:
        """GeoJSON-style FeatureCollection with one Point per cell."""
        features = []
        for record in self._records.values():
            features.append({
                "type": "Feature",
                "properties": {
                    "cellId": record.cell_id,
                    "elevation": record.elevation,
                    "temperature": record.temperature,
                    "precipitation": record.precipitation,
                    "humidity": record.humidity,
                    "windSpeed": record.wind_speed,
                    "windDirection": record.wind_direction,
                    "biome": record.biome.value,
                    "isOcean": record.is_ocean,
                },
                "geometry": {
                    "type": "Point",
                    "coordinates": [record.longitude, record.latitude],
                },
            })

        return {
            "type": "FeatureCollection",
            "features": features,
        }

    def to_dataset(self) -> xr.Dataset:
        """The world as an xarray Dataset over a ``cell`` dimension."""
        records = self.cells

        def column(name: str) -> np.ndarray:
            return np.array([getattr(record, name) for record in records])

        dataset = xr.Dataset(
            data_vars={
                "elevation": ("cell", column("elevation")),
                "temperature": ("cell", column("temperature")),
                "precipitation": ("cell", column("precipitation")),
                "humidity": ("cell", column("humidity")),
                "wind_speed": ("cell", column("wind_speed")),
                "wind_direction": ("cell", column("wind_direction")),
                "is_ocean": ("cell", column("is_ocean")),
                "distance_to_ocean": ("cell", column("distance_to_ocean")),
                "biome": ("cell", np.array([record.biome.value for record in records])),
            },
            coords={
                "cell": [record.cell_id for record in records],
                "lat": ("cell", column("latitude")),
                "lon": ("cell", column("longitude")),
            },
            attrs=self.parameters.to_dict(),
        )

        dataset.elevation.attrs["units"] = "1"
        dataset.temperature.attrs["units"] = "degC"
        dataset.precipitation.attrs["units"] = "mm/year"
        dataset.humidity.attrs["units"] = "percent"
        dataset.wind_speed.attrs["units"] = "m/s"
        dataset.wind_direction.attrs["units"] = "degree"
        dataset.distance_to_ocean.attrs["units"] = "km"

        return dataset


class World:
    """Generation pipeline for one world.

    Every call to generate builds its own grid and cell records, so an
    instance keeps no state between runs.
    """

    def __init__(self, config: Optional[WorldConfig] = None,
                 settings: Optional[Configuration] = None):
        """Initialize the pipeline.

        Args:
            config: What to generate, Earth-like defaults when omitted
            settings: Worker pool settings, read from the environment when omitted
        """
        self.config = config if config is not None else WorldConfig()
        self.settings = settings if settings is not None else Configuration()

        parameters = self.config.parameters
        self.terrain = TerrainGenerator(self.config.noise)
        self.climate = ClimateSystem(parameters)
        self.biome_classifier = BiomeClassifier()
        self.planet_radius_km = parameters.radius / 1000.0

    def generate(self, cancel_event: Optional[threading.Event] = None) -> WorldResult:
        """Run every pass and return the finished world.

        Args:
            cancel_event: Optional event; when set, generation stops at the
                next barrier between passes

        Returns:
            The generated world
        """
        parameters = self.config.parameters
        grid = GeodesicGrid(parameters.grid_resolution)
        cells = grid.cells

        logger.info(
            "Generating world",
            cells=len(cells),
            resolution=parameters.grid_resolution,
            external_heightmap=self.config.height_map is not None,
            seed=self.terrain.seed,
        )

        with ThreadPoolExecutor(max_workers=self.settings.max_workers,
                                thread_name_prefix="world_gen") as executor:
            self._check_cancelled(cancel_event, "elevation")
            elevations = np.array(self._map_cells(
                executor,
                lambda start, stop: self._elevation_chunk(grid, start, stop),
                len(cells),
            ))
            ocean_mask = elevations < parameters.sea_level

            self._check_cancelled(cancel_event, "ocean distance")
            distances = self._distance_to_ocean(grid, ocean_mask)

            self._check_cancelled(cancel_event, "climate")
            first_pass = tuple(self._map_cells(
                executor,
                lambda start, stop: self._climate_chunk(
                    grid, start, stop, elevations, ocean_mask, distances
                ),
                len(cells),
            ))
            logger.info("Calculated climate", land=int((~ocean_mask).sum()), ocean=int(ocean_mask.sum()))

            self._check_cancelled(cancel_event, "wind")
            temperatures = np.array([record.temperature for record in first_pass])
            records = self._map_cells(
                executor,
                lambda start, stop: self._wind_chunk(grid, start, stop, first_pass, temperatures),
                len(cells),
            )
            logger.info("Calculated winds")

        result = WorldResult(grid, records, self.config)
        logger.info("World generation complete", cells=len(result))
        return result

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event], next_pass: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("World generation cancelled", next_pass=next_pass)
            raise GenerationCancelled(f"Generation cancelled before the {next_pass} pass")

    def _map_cells(self, executor: ThreadPoolExecutor,
                   work: Callable[[int, int], List[Any]], count: int) -> List[Any]:
        """Run a chunked function over all cell indices, keeping grid order."""
        chunk_size = self.settings.chunk_size
        bounds = [(start, min(start + chunk_size, count)) for start in range(0, count, chunk_size)]

        results: List[Any] = []
        for chunk in executor.map(lambda bound: work(*bound), bounds):
            results.extend(chunk)
        return results

    def _elevation_chunk(self, grid: GeodesicGrid, start: int, stop: int) -> List[float]:
        height_map = self.config.height_map
        elevations = []
        for cell in grid.cells[start:stop]:
            if height_map is not None:
                elevation = sample_external_heightmap(height_map, cell.latitude, cell.longitude)
            else:
                elevation = self.terrain.elevation_at(cell.latitude, cell.longitude)
            elevations.append(elevation)
        return elevations

    def _distance_to_ocean(self, grid: GeodesicGrid, ocean_mask: np.ndarray) -> np.ndarray:
        """Great-circle distance from every cell to the nearest ocean cell.

        Ocean cells are at distance 0. Land cells with no ocean cell inside
        OCEAN_SEARCH_RADIUS_KM get NO_OCEAN_DISTANCE_KM.
        """
        distances = np.zeros(len(ocean_mask))
        land_mask = ~ocean_mask
        if not land_mask.any():
            return distances
        if not ocean_mask.any():
            distances[land_mask] = NO_OCEAN_DISTANCE_KM
            return distances

        tree = cKDTree(grid.points[ocean_mask])
        search_angle = OCEAN_SEARCH_RADIUS_KM / self.planet_radius_km
        chords, _ = tree.query(
            grid.points[land_mask], k=1,
            distance_upper_bound=chord_length(search_angle),
        )

        land_distances = np.full(chords.shape, NO_OCEAN_DISTANCE_KM)
        found = np.isfinite(chords)
        land_distances[found] = chord_to_angle(chords[found]) * self.planet_radius_km
        distances[land_mask] = land_distances
        return distances

    def _climate_chunk(self, grid: GeodesicGrid, start: int, stop: int,
                       elevations: np.ndarray, ocean_mask: np.ndarray, distances: np.ndarray) -> List[CellRecord]:
        sea_level = self.config.parameters.sea_level
        records = []
        for index in range(start, stop):
            cell = grid.cells[index]
            elevation = float(elevations[index])
            distance = float(distances[index])

            if self.config.annual_average:
                climate = self.climate.calculate_annual_climate(
                    cell.latitude, cell.longitude, elevation, distance
                )
            else:
                climate = self.climate.calculate_climate(
                    cell.latitude, cell.longitude, elevation, distance,
                    day_of_year=self.config.day_of_year,
                )

            biome = self.biome_classifier.classify(
                climate.temperature,
                climate.precipitation,
                altitude_m(elevation, sea_level),
            )

            records.append(CellRecord(
                cell_id=cell.cell_id,
                latitude=cell.latitude,
                longitude=cell.longitude,
                terrain=TerrainSample(elevation=elevation),
                climate=climate,
                biome=biome,
                is_ocean=bool(ocean_mask[index]),
                distance_to_ocean=distance,
            ))
        return records

    def _wind_chunk(self, grid: GeodesicGrid, start: int, stop: int,
                    first_pass: Tuple[CellRecord, ...], temperatures: np.ndarray) -> List[CellRecord]:
        search_angle = WIND_SEARCH_RADIUS_KM / self.planet_radius_km
        records = []
        for record in first_pass[start:stop]:
            nearby = grid.cells_within(
                record.latitude, record.longitude,
                angular_radius=search_angle,
                limit=WIND_MAX_NEIGHBORS,
                exclude=record.cell_id,
            )
            neighbors = [
                NeighborSample(
                    latitude=cell.latitude,
                    longitude=cell.longitude,
                    temperature=float(temperatures[grid.index_of(cell.cell_id)]),
                )
                for cell, _ in nearby
            ]

            wind_speed, wind_direction = self.climate.calculate_wind(
                record.latitude, record.longitude,
                record.temperature, record.elevation,
                neighbors,
            )
            records.append(replace(
                record,
                climate=ClimateSystem.with_wind(record.climate, wind_speed, wind_direction),
            ))
        return records


def generate_world(parameters: Optional[PlanetParameters] = None,
                   noise: Optional[NoiseConfig] = None,
                   height_map: Optional[HeightMap] = None,
                   annual_average: bool = False,
                   day_of_year: float = 0.0,
                   settings: Optional[Configuration] = None,
                   cancel_event: Optional[threading.Event] = None) -> WorldResult:
    """Generate a world in one call.

    Args:
        parameters: Planetary parameters, Earth-like defaults when omitted
        noise: Noise settings for the elevation field
        height_map: External heightmap used instead of the noise field
        annual_average: Average climate over the orbit
        day_of_year: Day of the orbit sampled when annual_average is off
        settings: Worker pool settings
        cancel_event: Optional cancellation event checked between passes

    Returns:
        The generated world
    """
    config = WorldConfig(
        parameters=parameters if parameters is not None else PlanetParameters(),
        noise=noise if noise is not None else NoiseConfig(),
        height_map=height_map,
        annual_average=annual_average,
        day_of_year=day_of_year,
    )
    return World(config, settings).generate(cancel_event)
