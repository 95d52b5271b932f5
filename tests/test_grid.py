"""Tests for the geodesic spatial grid."""

import math
from collections import Counter

import numpy as np
import pytest

from src.world_generation.errors import ConfigurationError
from src.world_generation.grid import (
    GeodesicGrid,
    MAX_RESOLUTION,
    haversine_km,
    normalize_longitude,
)


@pytest.fixture(scope="module")
def grid():
    return GeodesicGrid(3)


class TestGridConstruction:
    """Test building grids."""

    @pytest.mark.parametrize("resolution", [0, 1, 2, 3])
    def test_cell_count(self, resolution):
        grid = GeodesicGrid(resolution)
        assert len(grid) == GeodesicGrid.expected_cell_count(resolution)
        assert len({cell.cell_id for cell in grid}) == len(grid)

    @pytest.mark.parametrize("resolution", [-1, MAX_RESOLUTION + 1, 2.5, True, "3"])
    def test_invalid_resolution(self, resolution):
        with pytest.raises(ConfigurationError):
            GeodesicGrid(resolution)

    def test_coordinates_in_range(self, grid):
        for cell in grid:
            assert -90.0 <= cell.latitude <= 90.0
            assert -180.0 <= cell.longitude < 180.0

    def test_pentagons_and_hexagons(self, grid):
        degree_counts = Counter(len(cell.neighbors) for cell in grid)
        assert degree_counts[5] == 12
        assert degree_counts[6] == len(grid) - 12

    def test_adjacency_is_symmetric(self, grid):
        for cell in grid:
            for neighbor_id in cell.neighbors:
                assert cell.cell_id in grid.get_cell(neighbor_id).neighbors

    def test_get_neighbors(self, grid):
        cell = grid.cells[20]
        neighbors = grid.get_neighbors(cell.cell_id)
        assert [n.cell_id for n in neighbors] == list(cell.neighbors)
        assert grid.get_neighbors("not-a-cell") == []
        assert grid.get_cell("not-a-cell") is None

    def test_neighbors_are_close(self, grid):
        # Adjacent centers at resolution 3 are roughly 1000 km apart on Earth
        for cell in grid.cells[:50]:
            for neighbor in grid.get_neighbors(cell.cell_id):
                distance = haversine_km(
                    cell.latitude, cell.longitude,
                    neighbor.latitude, neighbor.longitude, 6371.0,
                )
                assert 500 < distance < 1500


class TestLocate:
    """Test point-to-cell lookup."""

    def test_cell_centers_locate_to_themselves(self, grid):
        for cell in grid:
            assert grid.locate(cell.latitude, cell.longitude) == cell.cell_id

    def test_locate_is_total(self, grid):
        for latitude in np.linspace(-90, 90, 37):
            for longitude in np.linspace(-180, 180, 73):
                assert grid.locate(float(latitude), float(longitude)) in grid

    def test_longitude_wraps(self, grid):
        assert grid.locate(10.0, 190.0) == grid.locate(10.0, -170.0)
        assert grid.locate(-35.0, 180.0) == grid.locate(-35.0, -180.0)

    @pytest.mark.parametrize("latitude, longitude", [
        (91.0, 0.0),
        (-90.5, 10.0),
        (float("nan"), 0.0),
        (0.0, float("inf")),
    ])
    def test_illegal_coordinates(self, grid, latitude, longitude):
        with pytest.raises(ValueError):
            grid.locate(latitude, longitude)


class TestCellsWithin:
    """Test radius queries."""

    def test_excludes_center_and_sorts(self, grid):
        cell = grid.cells[100]
        found = grid.cells_within(
            cell.latitude, cell.longitude,
            angular_radius=math.radians(30), limit=8, exclude=cell.cell_id,
        )
        assert len(found) == 8
        assert cell.cell_id not in [c.cell_id for c, _ in found]
        distances = [distance for _, distance in found]
        assert distances == sorted(distances)
        assert all(distance <= math.radians(30) for distance in distances)

    def test_nothing_in_range(self, grid):
        cell = grid.cells[0]
        found = grid.cells_within(
            cell.latitude, cell.longitude,
            angular_radius=math.radians(1), limit=8, exclude=cell.cell_id,
        )
        assert found == []

    def test_non_positive_limit(self, grid):
        assert grid.cells_within(0.0, 0.0, math.radians(30), limit=0) == []


class TestGeometryHelpers:
    """Test coordinate helpers."""

    def test_haversine_quarter_circle(self):
        radius = 6371.0
        distance = haversine_km(0.0, 0.0, 0.0, 90.0, radius)
        assert distance == pytest.approx(math.pi * radius / 2)

    def test_haversine_zero(self):
        assert haversine_km(12.0, 34.0, 12.0, 34.0, 6371.0) == 0.0

    @pytest.mark.parametrize("longitude, expected", [
        (0.0, 0.0),
        (180.0, -180.0),
        (190.0, -170.0),
        (-190.0, 170.0),
        (540.0, -180.0),
    ])
    def test_normalize_longitude(self, longitude, expected):
        assert normalize_longitude(longitude) == pytest.approx(expected)
