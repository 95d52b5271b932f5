"""Tests for world visualization."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from src.utils.visualization import FIELD_COLORMAPS, Visualizer  # noqa: E402


@pytest.fixture
def visualizer(earth_world):
    yield Visualizer(earth_world)
    plt.close("all")


class TestVisualizer:
    """Test plots of a generated world."""

    def test_biomes(self, visualizer, earth_world):
        fig, ax = plt.subplots()
        points = visualizer.visualize_biomes(ax=ax)
        assert len(points.get_offsets()) == len(earth_world)
        assert ax.get_legend() is not None

    def test_biomes_without_legend(self, visualizer):
        fig, ax = plt.subplots()
        visualizer.visualize_biomes(ax=ax, legend=False)
        assert ax.get_legend() is None

    @pytest.mark.parametrize("field", sorted(FIELD_COLORMAPS))
    def test_fields(self, visualizer, field):
        fig, ax = plt.subplots()
        visualizer.visualize_field(field, ax=ax)
        assert ax.get_title() == FIELD_COLORMAPS[field][1]

    def test_unknown_field(self, visualizer):
        with pytest.raises(ValueError, match="pressure"):
            visualizer.visualize_field("pressure")

    def test_wind(self, visualizer, earth_world):
        fig, ax = plt.subplots()
        quiver = visualizer.visualize_wind(ax=ax, density=2)
        assert quiver.N == len(earth_world.cells[::2])

    def test_all(self, visualizer):
        fig = visualizer.visualize_all()
        assert len(fig.axes) >= 4
