#!/usr/bin/env python3
"""Example script to generate a world from a preset.

This script shows how to pick one of the named planet presets, generate the
world, print its statistics and optionally export and plot it.
"""

import argparse
import json
from dataclasses import replace

import matplotlib.pyplot as plt

from src.utils import Configuration, Visualizer, configure_logging
from src.world_generation import (
    BiomeClassifier,
    World,
    get_preset,
    list_presets,
)


def build_config(preset_name, seed=None, resolution=None, annual_average=False):
    """Build a world configuration from a preset.

    Args:
        preset_name: Name of the preset, e.g. "earth-like"
        seed: Optional seed replacing the preset's seed
        resolution: Optional grid resolution replacing the preset's
        annual_average: Whether to average the climate over the orbit

    Returns:
        WorldConfig ready for the pipeline
    """
    preset = get_preset(preset_name)
    print(f"\n=== {preset.name} ===")
    print(preset.description)

    config = preset.to_config(annual_average=annual_average)

    # Overrides produce validated copies of the frozen configs
    if resolution is not None:
        config = replace(config, parameters=replace(config.parameters, grid_resolution=resolution))
    if seed is not None:
        config = replace(config, noise=replace(config.noise, seed=seed))

    return config


def display_world_statistics(world):
    """Print summary statistics of a generated world.

    Args:
        world: WorldResult to describe
    """
    stats = world.statistics

    print("\n=== World Statistics ===")
    print(f"Total cells: {stats.total_cells}")
    print(f"Land cells: {stats.land_cells} ({stats.land_cells / stats.total_cells:.1%})")
    print(f"Ocean cells: {stats.ocean_cells} ({stats.ocean_cells / stats.total_cells:.1%})")
    print(f"Average temperature: {stats.average_temperature:.1f}°C")
    print(f"Average precipitation: {stats.average_precipitation:.0f} mm/year")

    print("\nBiome distribution:")
    for biome, count in sorted(stats.biome_distribution.items(), key=lambda item: -item[1]):
        description = BiomeClassifier.get_biome_description(biome)
        print(f"  {biome:<26} {count:>6}  {description}")


def main():
    """Main function to demonstrate world generation."""
    parser = argparse.ArgumentParser(description="Generate a world from a preset.")
    parser.add_argument("preset", nargs="?", default="earth-like", choices=list_presets(),
                        help="Planet preset")
    parser.add_argument("--seed", help="Seed replacing the preset's seed")
    parser.add_argument("--resolution", type=int, help="Grid resolution (0-8)")
    parser.add_argument("--annual", action="store_true",
                        help="Average the climate over one orbit")
    parser.add_argument("--geojson", help="Write the cells as a GeoJSON file")
    parser.add_argument("--quick", action="store_true", help="Skip the visualization")
    args = parser.parse_args()

    settings = Configuration()
    configure_logging(settings)

    config = build_config(args.preset, args.seed, args.resolution, args.annual)
    world = World(config, settings).generate()

    display_world_statistics(world)

    if args.geojson:
        with open(args.geojson, "w") as f:
            json.dump(world.to_feature_collection(), f)
        print(f"\nCells written to {args.geojson}")

    if not args.quick:
        Visualizer(world).visualize_all()
        plt.show()

    print("\nWorld generation complete!")


if __name__ == "__main__":
    main()
