#!/usr/bin/env python3
"""Example script to compare a rotating planet with its tidally locked twin.

This script shows how to describe a planet with a plain dictionary, inspect
its solar geometry and generate worlds for both rotation regimes.
"""

from dataclasses import replace

import matplotlib.pyplot as plt

from src.utils import Visualizer
from src.world_generation import (
    ClimateSystem,
    NoiseConfig,
    PlanetParameters,
    PlanetarySystem,
    generate_world,
)

CUSTOM_PLANET = {
    "radius": 4200000,
    "solar_constant": 1100,
    "orbital_tilt": 28.0,
    "rotation_period": 32.0,
    "orbital_period": 310.0,
    "sea_level": 0.45,
    "atmosphere_density": 1.3,
    "grid_resolution": 3,
}


def demonstrate_insolation(parameters, longitudes=(0, 45, 90, 135, 180)):
    """Print insolation and temperature along the equator.

    Args:
        parameters: PlanetParameters of the planet
        longitudes: Longitudes to sample
    """
    planetary = PlanetarySystem(parameters)
    climate = ClimateSystem(parameters)

    regime = "tidally locked" if planetary.is_tidally_locked else "rotating"
    print(f"\n--- Equator of the {regime} planet ---")
    for longitude in longitudes:
        insolation = planetary.insolation(0.0, longitude)
        temperature = climate.calculate_temperature(0.0, longitude, parameters.sea_level)
        print(f"  lng {longitude:>4}°: {insolation:7.1f} W/m²  {temperature:6.1f}°C")


def demonstrate_seasonal_cycle(parameters, latitude=45.0, steps=4):
    """Print the temperature at a latitude through the year.

    Args:
        parameters: PlanetParameters of the planet
        latitude: Latitude to sample
        steps: Number of samples across the orbit
    """
    planetary = PlanetarySystem(parameters)
    climate = ClimateSystem(parameters)

    print(f"\n--- Seasons at {latitude}° ---")
    for day in planetary.sample_days(steps):
        season = planetary.get_season(day)
        temperature = climate.calculate_temperature(latitude, 0.0, parameters.sea_level, day)
        print(f"  day {day:6.1f} ({season:<6}): {temperature:6.1f}°C")


def main():
    """Main function to demonstrate custom planets."""
    print("\n=== Custom Planet ===")

    rotating = PlanetParameters.from_dict(CUSTOM_PLANET)
    locked = replace(rotating, rotation_period=5000.0)

    print(f"Planet radius: {rotating.radius / 1000:.1f} km")
    print(f"Day length: {rotating.rotation_period} hours")
    print(f"Year length: {rotating.orbital_period} days")

    demonstrate_insolation(rotating)
    demonstrate_seasonal_cycle(rotating)
    demonstrate_insolation(locked)

    noise = NoiseConfig(seed="custom-planet", octaves=5)
    fig, axes = plt.subplots(1, 2, figsize=(16, 5))
    for ax, parameters, title in ((axes[0], rotating, "Rotating"),
                                  (axes[1], locked, "Tidally locked")):
        world = generate_world(parameters, noise, annual_average=True)
        stats = world.statistics
        print(f"\n{title}: {stats.land_cells} land cells, "
              f"average temperature {stats.average_temperature:.1f}°C")
        Visualizer(world).visualize_biomes(ax=ax, title=f"{title} planet")

    fig.tight_layout()
    plt.show()

    print("Simulation complete.")


if __name__ == "__main__":
    main()
