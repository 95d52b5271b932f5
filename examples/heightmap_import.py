#!/usr/bin/env python3
"""Example script to generate a world from an external heightmap.

The raster here is sampled from the noise field and round-tripped through a
.npz archive, which keeps its values and declared min/max unchanged. Any
other 2D array can be turned into a raster with HeightMap.from_array, which
normalizes it with its own min and max.
"""

import argparse

import matplotlib.pyplot as plt

from src.utils import Visualizer
from src.world_generation import (
    NoiseConfig,
    PlanetParameters,
    TerrainGenerator,
    generate_world,
)


def create_heightmap(width, height, seed, filename):
    """Sample the noise field into a raster and save it.

    Args:
        width: Number of longitude samples
        height: Number of latitude samples
        seed: Noise seed
        filename: File to save the raster to

    Returns:
        The sampled HeightMap
    """
    print("\n=== Sampling Heightmap ===")
    generator = TerrainGenerator(NoiseConfig(seed=seed, octaves=6))
    height_map = generator.generate_heightmap(width, height)
    print(f"Raster: {height_map.width}x{height_map.height}, "
          f"range {height_map.min:.3f} to {height_map.max:.3f}")

    TerrainGenerator.save_heightmap(height_map, filename)
    return height_map


def main():
    """Main function to demonstrate heightmap import."""
    parser = argparse.ArgumentParser(description="Generate a world from a heightmap file.")
    parser.add_argument("--input", help="Existing heightmap to load (.npz archive or normalized .npy array)")
    parser.add_argument("--output", default="heightmap.npz",
                        help="Where to save the sampled heightmap")
    parser.add_argument("--seed", default="heightmap-demo", help="Noise seed")
    parser.add_argument("--resolution", type=int, default=4, help="Grid resolution")
    args = parser.parse_args()

    if args.input:
        height_map = TerrainGenerator.load_heightmap(args.input)
    else:
        create_heightmap(256, 128, args.seed, args.output)
        height_map = TerrainGenerator.load_heightmap(args.output)

    parameters = PlanetParameters(sea_level=0.4, grid_resolution=args.resolution)
    world = generate_world(parameters, height_map=height_map)

    stats = world.statistics
    print(f"\nOcean coverage: {stats.ocean_cells / stats.total_cells:.1%}")

    plt.imshow(height_map.as_array(), cmap="terrain", extent=(-180, 180, -90, 90))
    plt.title("Imported Heightmap")
    plt.colorbar(label="Elevation (normalized)")

    visualizer = Visualizer(world)
    visualizer.visualize_biomes(title="Biomes from Heightmap")
    plt.show()

    print("\nHeightmap import complete!")


if __name__ == "__main__":
    main()
