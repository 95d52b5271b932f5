"""Visualization helpers for generated worlds.

Cells are drawn as points on an equirectangular longitude/latitude plot,
colored by biome or by a scalar field.
"""

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Patch

from ..world_generation.biome import BIOME_COLORS, BiomeType

FIELD_COLORMAPS = {
    "elevation": ("terrain", "Elevation (normalized)"),
    "temperature": ("coolwarm", "Temperature (°C)"),
    "precipitation": ("Blues", "Precipitation (mm/year)"),
    "humidity": ("YlGnBu", "Humidity (%)"),
    "wind_speed": ("viridis", "Wind speed (m/s)"),
    "distance_to_ocean": ("magma", "Distance to ocean (km)"),
}


class Visualizer:
    """Draws maps of a WorldResult with matplotlib."""

    def __init__(self, world, point_size: float = 8.0):
        """Initialize the Visualizer.

        Args:
            world: WorldResult to draw
            point_size: Marker size of one cell
        """
        self.world = world
        self.point_size = point_size

        cells = world.cells
        self.latitudes = np.array([cell.latitude for cell in cells])
        self.longitudes = np.array([cell.longitude for cell in cells])

    @staticmethod
    def _prepare_axis(ax, title: str):
        if ax is None:
            plt.figure(figsize=(12, 6))
            ax = plt.gca()

        ax.set_xlim(-180, 180)
        ax.set_ylim(-90, 90)
        ax.grid(linestyle=":", color="gray", alpha=0.5)
        ax.set_title(title)
        ax.set_xlabel("Longitude")
        ax.set_ylabel("Latitude")
        return ax

    def visualize_biomes(self, ax=None, title: str = "Biomes", legend: bool = True):
        """Plot the biome of every cell.

        Args:
            ax: Optional matplotlib axis for plotting
            title: Title for the plot
            legend: Whether to add a legend of the biomes present

        Returns:
            Matplotlib PathCollection
        """
        ax = self._prepare_axis(ax, title)

        biomes = [cell.biome for cell in self.world.cells]
        colors = [BIOME_COLORS[biome] for biome in biomes]
        points = ax.scatter(
            self.longitudes, self.latitudes, c=colors,
            s=self.point_size, marker="h", linewidths=0,
        )

        if legend:
            present_set = set(biomes)
            present = [biome for biome in BiomeType if biome in present_set]
            handles = [
                Patch(facecolor=BIOME_COLORS[biome], edgecolor="gray", label=biome.value)
                for biome in present
            ]
            ax.legend(handles=handles, loc="lower left", fontsize="small")

        return points

    def visualize_field(self, field: str = "temperature", ax=None, title: str = None):
        """Plot a scalar field of every cell.

        Args:
            field: One of the keys of FIELD_COLORMAPS
            ax: Optional matplotlib axis for plotting
            title: Title for the plot, derived from the field when omitted

        Returns:
            Matplotlib PathCollection
        """
        if field not in FIELD_COLORMAPS:
            raise ValueError(
                f"Unknown field '{field}', expected one of {', '.join(FIELD_COLORMAPS)}"
            )
        cmap, label = FIELD_COLORMAPS[field]
        ax = self._prepare_axis(ax, title or label)

        values = np.array([getattr(cell, field) for cell in self.world.cells])
        points = ax.scatter(
            self.longitudes, self.latitudes, c=values, cmap=cmap,
            s=self.point_size, marker="h", linewidths=0,
        )
        plt.colorbar(points, ax=ax, label=label)
        return points

    def visualize_wind(self, ax=None, title: str = "Wind Patterns", density: int = 1):
        """Plot wind vectors.

        Args:
            ax: Optional matplotlib axis for plotting
            title: Title for the plot
            density: Draw every n-th cell

        Returns:
            Matplotlib Quiver
        """
        ax = self._prepare_axis(ax, title)

        cells = self.world.cells[::max(1, density)]
        direction = np.radians([cell.wind_direction for cell in cells])
        speed = np.array([cell.wind_speed for cell in cells])

        # Direction is measured clockwise from north toward where the wind blows
        u = speed * np.sin(direction)
        v = speed * np.cos(direction)

        return ax.quiver(
            [cell.longitude for cell in cells],
            [cell.latitude for cell in cells],
            u, v, speed, cmap="viridis",
        )

    def visualize_all(self, figsize=(15, 10)):
        """Biomes, temperature, precipitation and wind on one figure.

        Returns:
            The matplotlib Figure
        """
        fig, axes = plt.subplots(2, 2, figsize=figsize)
        self.visualize_biomes(ax=axes[0, 0])
        self.visualize_field("temperature", ax=axes[0, 1])
        self.visualize_field("precipitation", ax=axes[1, 0])
        self.visualize_wind(ax=axes[1, 1], density=4)
        fig.tight_layout()
        return fig
