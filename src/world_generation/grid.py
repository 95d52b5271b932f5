"""Spatial grid module for PlanetForge.

Partitions the sphere into cells using a geodesic icosahedral grid: an
icosahedron whose faces are repeatedly split into four, with every vertex
projected back onto the unit sphere. Each vertex is the center of one cell
(hexagonal, or pentagonal at the twelve original icosahedron corners), so
the cells cover the whole sphere with no seams at the poles or the
antimeridian.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np
import structlog
from scipy.spatial import cKDTree

from .errors import ConfigurationError

logger = structlog.get_logger()

MIN_RESOLUTION = 0
MAX_RESOLUTION = 8

# Cell identifiers are opaque to the simulation; only the grid parses them
CellId = str


@dataclass(frozen=True)
class GridCell:
    """One cell of the grid.

    Attributes:
        cell_id: Opaque, hashable identifier
        latitude: Latitude of the cell center in degrees (-90 to 90)
        longitude: Longitude of the cell center in degrees (-180 to 180)
        neighbors: Identifiers of the adjacent cells
    """

    cell_id: CellId
    latitude: float
    longitude: float
    neighbors: Tuple[CellId, ...]


def lat_lng_to_unit_vector(latitude: float, longitude: float) -> np.ndarray:
    """Convert a latitude/longitude pair to a point on the unit sphere.

    Args:
        latitude: Latitude in degrees
        longitude: Longitude in degrees

    Returns:
        Array of shape (3,) with the x, y, z coordinates
    """
    lat = np.radians(latitude)
    lng = np.radians(longitude)
    return np.array([
        np.cos(lat) * np.cos(lng),
        np.cos(lat) * np.sin(lng),
        np.sin(lat),
    ])


def normalize_longitude(longitude: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    return ((longitude + 180.0) % 360.0) - 180.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float,
                 radius_km: float) -> float:
    """Great-circle distance between two points.

    Args:
        lat1: Latitude of the first point in degrees
        lng1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lng2: Longitude of the second point in degrees
        radius_km: Sphere radius in kilometers

    Returns:
        Distance in kilometers
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    return radius_km * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def chord_length(angle: float) -> float:
    """Straight-line distance between two unit vectors separated by an angle."""
    return 2.0 * math.sin(min(angle, math.pi) / 2.0)


def chord_to_angle(chord: np.ndarray) -> np.ndarray:
    """Inverse of chord_length for arrays of chord distances."""
    return 2.0 * np.arcsin(np.clip(chord / 2.0, 0.0, 1.0))


def _icosahedron() -> Tuple[np.ndarray, List[Tuple[int, int, int]]]:
    """Vertices and faces of a unit icosahedron."""
    phi = (1 + math.sqrt(5)) / 2
    vertices = np.array([
        [-1, phi, 0], [1, phi, 0], [-1, -phi, 0], [1, -phi, 0],
        [0, -1, phi], [0, 1, phi], [0, -1, -phi], [0, 1, -phi],
        [phi, 0, -1], [phi, 0, 1], [-phi, 0, -1], [-phi, 0, 1],
    ], dtype=float)
    vertices /= np.linalg.norm(vertices, axis=1)[:, np.newaxis]

    faces = [
        (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
        (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
        (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
        (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
    ]
    return vertices, faces


def _subdivide(vertices: List[np.ndarray],
               faces: List[Tuple[int, int, int]]) -> List[Tuple[int, int, int]]:
    """Split every triangle into four, appending midpoints to vertices."""
    midpoint_cache: Dict[Tuple[int, int], int] = {}

    def midpoint(a: int, b: int) -> int:
        key = (a, b) if a < b else (b, a)
        index = midpoint_cache.get(key)
        if index is None:
            point = vertices[a] + vertices[b]
            vertices.append(point / np.linalg.norm(point))
            index = len(vertices) - 1
            midpoint_cache[key] = index
        return index

    new_faces = []
    for a, b, c in faces:
        ab = midpoint(a, b)
        bc = midpoint(b, c)
        ca = midpoint(c, a)
        new_faces.extend([(a, ab, ca), (b, bc, ab), (c, ca, bc), (ab, bc, ca)])
    return new_faces


class GeodesicGrid:
    """Geodesic grid covering the whole sphere.

    The grid is built once and is read-only afterwards, so it can be shared
    by any number of concurrent readers.
    """

    def __init__(self, resolution: int = 4):
        """Build the grid.

        Args:
            resolution: Number of icosahedron subdivisions. The grid has
                10 * 4**resolution + 2 cells.
        """
        if isinstance(resolution, bool) or not isinstance(resolution, int):
            raise ConfigurationError(
                f"Grid resolution must be an integer, got {resolution!r}"
            )
        if not MIN_RESOLUTION <= resolution <= MAX_RESOLUTION:
            raise ConfigurationError(
                f"Grid resolution must be between {MIN_RESOLUTION} and "
                f"{MAX_RESOLUTION}, got {resolution}"
            )

        self.resolution = resolution
        self._build()

        logger.info(
            "Built geodesic grid",
            resolution=resolution,
            cells=len(self.cells),
        )

    @staticmethod
    def expected_cell_count(resolution: int) -> int:
        """Number of cells a grid of the given resolution contains."""
        return 10 * 4 ** resolution + 2

    def _build(self) -> None:
        """Generate cell centers, identifiers and adjacency."""
        base_vertices, faces = _icosahedron()
        vertices = [vertex for vertex in base_vertices]
        for _ in range(self.resolution):
            faces = _subdivide(vertices, faces)

        self.points = np.array(vertices)
        self.cell_ids: List[CellId] = [
            f"g{self.resolution}-{index:x}" for index in range(len(vertices))
        ]
        self._index_by_id = {cell_id: index for index, cell_id in enumerate(self.cell_ids)}

        adjacency: List[set] = [set() for _ in range(len(vertices))]
        for a, b, c in faces:
            adjacency[a].update((b, c))
            adjacency[b].update((a, c))
            adjacency[c].update((a, b))

        latitudes = np.degrees(np.arcsin(np.clip(self.points[:, 2], -1.0, 1.0)))
        longitudes = np.degrees(np.arctan2(self.points[:, 1], self.points[:, 0]))
        longitudes = ((longitudes + 180.0) % 360.0) - 180.0
        self.latitudes = latitudes
        self.longitudes = longitudes

        self.cells: List[GridCell] = []
        for index, cell_id in enumerate(self.cell_ids):
            self.cells.append(GridCell(
                cell_id=cell_id,
                latitude=float(latitudes[index]),
                longitude=float(longitudes[index]),
                neighbors=tuple(self.cell_ids[n] for n in sorted(adjacency[index])),
            ))

        self._tree = cKDTree(self.points)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self):
        return iter(self.cells)

    def __contains__(self, cell_id) -> bool:
        return cell_id in self._index_by_id

    def index_of(self, cell_id: CellId) -> int:
        """Position of a cell in grid order."""
        return self._index_by_id[cell_id]

    def get_cell(self, cell_id: CellId) -> Optional[GridCell]:
        """Get a cell by identifier, or None if the id is unknown."""
        index = self._index_by_id.get(cell_id)
        if index is None:
            return None
        return self.cells[index]

    def get_neighbors(self, cell_id: CellId) -> List[GridCell]:
        """Get the cells adjacent to a cell."""
        cell = self.get_cell(cell_id)
        if cell is None:
            return []
        return [self.cells[self._index_by_id[n]] for n in cell.neighbors]

    def locate(self, latitude: float, longitude: float) -> CellId:
        """Find the cell containing a coordinate.

        A coordinate belongs to the cell whose center is nearest on the
        sphere, which is the same rule that defines the cells.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            longitude: Longitude in degrees, wrapped if outside [-180, 180)

        Returns:
            Identifier of the containing cell
        """
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise ValueError(f"Coordinate ({latitude}, {longitude}) is not finite")
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f"Latitude {latitude} is outside [-90, 90]")

        point = lat_lng_to_unit_vector(latitude, normalize_longitude(longitude))
        _, index = self._tree.query(point)
        return self.cell_ids[int(index)]

    def cells_within(self, latitude: float, longitude: float,
                     angular_radius: float, limit: int,
                     exclude: Optional[CellId] = None) -> List[Tuple[GridCell, float]]:
        """Find the nearest cells within a great-circle radius.

        Args:
            latitude: Latitude of the search center in degrees
            longitude: Longitude of the search center in degrees
            angular_radius: Search radius in radians
            limit: Maximum number of cells to return
            exclude: Optional cell to leave out (usually the center cell)

        Returns:
            List of (cell, angular distance in radians), nearest first
        """
        if limit <= 0 or angular_radius <= 0:
            return []

        point = lat_lng_to_unit_vector(latitude, normalize_longitude(longitude))
        k = min(len(self.cells), limit + (1 if exclude is not None else 0))
        distances, indices = self._tree.query(
            point, k=k, distance_upper_bound=chord_length(angular_radius)
        )
        distances = np.atleast_1d(distances)
        indices = np.atleast_1d(indices)

        found = []
        for chord, index in zip(distances, indices):
            if not np.isfinite(chord):
                # Missing neighbors are reported with infinite distance
                break
            cell = self.cells[int(index)]
            if cell.cell_id == exclude:
                continue
            found.append((cell, float(chord_to_angle(chord))))
            if len(found) == limit:
                break
        return found
