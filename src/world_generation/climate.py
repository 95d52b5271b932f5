"""Climate simulation module for PlanetForge.

This module computes the steady-state climate of a single cell: temperature
from insolation and the Stefan-Boltzmann relation, latitude-banded
precipitation with orographic, thermal and maritime effects, humidity, and
surface wind from the temperature gradient toward neighboring cells.

Temperature, precipitation and humidity only need a cell's own position and
elevation. Wind needs the temperatures of the neighboring cells, which is why
the world pipeline computes it in a second pass.
"""

import math
from dataclasses import dataclass, replace
from typing import Sequence, Tuple

import numpy as np

from .planetary import PlanetParameters, PlanetarySystem

STEFAN_BOLTZMANN = 5.67e-8  # W/(m²·K⁴)
ALBEDO = 0.3
KELVIN_OFFSET = 273.15

LAPSE_RATE_C_PER_KM = 6.5

# Greenhouse warming (°C) per unit of atmosphere density
GREENHOUSE_C_PER_DENSITY = 45.0

# Meters represented by the full normalized elevation range
ELEVATION_SCALE_M = 10000.0

# Precipitation model
OROGRAPHIC_MM_PER_KM = 200.0
MOISTURE_CAPACITY_MM = 500.0
MOISTURE_MIN_TEMP_C = -10.0
MOISTURE_MAX_TEMP_C = 30.0
OCEAN_PROXIMITY_MM = 500.0
OCEAN_PROXIMITY_DECAY_KM = 1000.0

# Humidity model
HUMIDITY_SATURATION_PRECIP_MM = 2000.0

# Wind model
WIND_SEARCH_RADIUS_KM = 500.0
WIND_MAX_NEIGHBORS = 8
CORIOLIS_STRENGTH = 100.0
MIN_WIND_SPEED = 1.0
MAX_WIND_SPEED = 50.0

# Used when a cell has no neighbors in range or the gradient is not finite
DEFAULT_WIND_SPEED = 5.0
DEFAULT_WIND_DIRECTION = 90.0

ANNUAL_SAMPLES = 12


def altitude_m(elevation: float, sea_level: float) -> float:
    """Height relative to sea level in meters.

    Args:
        elevation: Normalized elevation (0-1)
        sea_level: Normalized sea level (0-1)

    Returns:
        Altitude in meters, negative below sea level
    """
    return (elevation - sea_level) * ELEVATION_SCALE_M


@dataclass(frozen=True)
class ClimateSample:
    """Climate of one cell.

    Wind fields are zero until the wind pass has run.
    """

    temperature: float
    precipitation: float
    humidity: float
    wind_speed: float = 0.0
    wind_direction: float = 0.0


@dataclass(frozen=True)
class NeighborSample:
    """What the wind step needs to know about a neighboring cell."""

    latitude: float
    longitude: float
    temperature: float


class ClimateSystem:
    """Computes climate for cells of a planet.

    Every method is a pure function of its arguments and the planetary
    parameters, so one instance can be shared by concurrent workers.
    """

    def __init__(self, parameters: PlanetParameters):
        """Initialize the ClimateSystem.

        Args:
            parameters: Planetary parameters of the run
        """
        self.parameters = parameters
        self.planetary = PlanetarySystem(parameters)

    @property
    def is_tidally_locked(self) -> bool:
        """Whether the planet keeps one face toward its star."""
        return self.planetary.is_tidally_locked

    def insolation_to_temperature(self, insolation: float) -> float:
        """Effective blackbody temperature for an insolation.

        Args:
            insolation: Insolation in W/m²

        Returns:
            Temperature in °C
        """
        effective_insolation = max(0.0, insolation) * (1 - ALBEDO)
        effective_temp = (effective_insolation / (4 * STEFAN_BOLTZMANN)) ** 0.25
        return effective_temp - KELVIN_OFFSET

    def calculate_temperature(self, latitude: float, longitude: float,
                              elevation: float, day_of_year: float = 0.0) -> float:
        """Surface temperature of a point.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            longitude: Longitude in degrees (-180 to 180)
            elevation: Normalized elevation (0-1)
            day_of_year: Day within the orbital period

        Returns:
            Temperature in °C
        """
        insolation = self.planetary.insolation(latitude, longitude, day_of_year)
        base_temp = self.insolation_to_temperature(insolation)

        # Lapse rate applies to land above sea level; the ocean surface sits at 0 m
        elevation_km = max(0.0, altitude_m(elevation, self.parameters.sea_level)) / 1000.0
        temp_adjustment = -LAPSE_RATE_C_PER_KM * elevation_km

        atmospheric_effect = self.parameters.atmosphere_density * GREENHOUSE_C_PER_DENSITY

        return base_temp + temp_adjustment + atmospheric_effect

    @staticmethod
    def base_rainfall(latitude: float) -> float:
        """Zonal rainfall in mm/year, wettest at the equator."""
        abs_lat = abs(latitude)

        if abs_lat < 10:
            return 2500.0
        elif abs_lat < 30:
            return 1500.0 - (abs_lat - 10) * 50
        elif abs_lat < 60:
            return 500.0 + (abs_lat - 30) * 10
        else:
            return 300.0

    def calculate_precipitation(self, latitude: float, elevation: float,
                                temperature: float,
                                distance_to_ocean: float = 0.0) -> float:
        """Annual precipitation of a point.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            elevation: Normalized elevation (0-1)
            temperature: Temperature in °C
            distance_to_ocean: Distance to the nearest ocean cell in km

        Returns:
            Precipitation in mm/year (never negative)
        """
        base = self.base_rainfall(latitude)

        # Air forced over high ground drops more rain
        elevation_km = max(0.0, altitude_m(elevation, self.parameters.sea_level)) / 1000.0
        orographic_lift = elevation_km * OROGRAPHIC_MM_PER_KM

        # Warmer air holds more moisture
        temp_factor = (temperature - MOISTURE_MIN_TEMP_C) / (MOISTURE_MAX_TEMP_C - MOISTURE_MIN_TEMP_C)
        temp_effect = float(np.clip(temp_factor, 0.0, 1.0)) * MOISTURE_CAPACITY_MM

        ocean_effect = math.exp(-max(0.0, distance_to_ocean) / OCEAN_PROXIMITY_DECAY_KM) * OCEAN_PROXIMITY_MM

        total = base + orographic_lift + temp_effect + ocean_effect
        if not math.isfinite(total):
            return base
        return max(0.0, total)

    @staticmethod
    def calculate_humidity(temperature: float, precipitation: float) -> float:
        """Relative humidity from temperature and precipitation.

        Args:
            temperature: Temperature in °C
            precipitation: Precipitation in mm/year

        Returns:
            Humidity in percent (0-100)
        """
        temp_factor = np.clip(
            (temperature - MOISTURE_MIN_TEMP_C) / (MOISTURE_MAX_TEMP_C - MOISTURE_MIN_TEMP_C),
            0.0, 1.0,
        )
        precip_factor = np.clip(precipitation / HUMIDITY_SATURATION_PRECIP_MM, 0.0, 1.0)
        return float(100.0 * temp_factor * precip_factor)

    def calculate_climate(self, latitude: float, longitude: float,
                          elevation: float, distance_to_ocean: float = 0.0,
                          day_of_year: float = 0.0) -> ClimateSample:
        """Point-in-time climate of a cell, without wind.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            longitude: Longitude in degrees (-180 to 180)
            elevation: Normalized elevation (0-1)
            distance_to_ocean: Distance to the nearest ocean cell in km
            day_of_year: Day within the orbital period

        Returns:
            ClimateSample with wind fields zeroed
        """
        temperature = self.calculate_temperature(latitude, longitude, elevation, day_of_year)
        precipitation = self.calculate_precipitation(
            latitude, elevation, temperature, distance_to_ocean
        )
        humidity = self.calculate_humidity(temperature, precipitation)

        return ClimateSample(
            temperature=temperature,
            precipitation=precipitation,
            humidity=humidity,
        )

    def get_average_annual_temperature(self, latitude: float, longitude: float,
                                       elevation: float) -> float:
        """Temperature averaged over evenly spaced days of the orbit."""
        days = self.planetary.sample_days(ANNUAL_SAMPLES)
        total = sum(
            self.calculate_temperature(latitude, longitude, elevation, day) for day in days
        )
        return total / len(days)

    def get_average_annual_precipitation(self, latitude: float, longitude: float,
                                         elevation: float,
                                         distance_to_ocean: float = 0.0) -> float:
        """Precipitation averaged over evenly spaced days of the orbit."""
        days = self.planetary.sample_days(ANNUAL_SAMPLES)
        total = 0.0
        for day in days:
            temperature = self.calculate_temperature(latitude, longitude, elevation, day)
            total += self.calculate_precipitation(
                latitude, elevation, temperature, distance_to_ocean
            )
        return total / len(days)

    def calculate_annual_climate(self, latitude: float, longitude: float,
                                 elevation: float,
                                 distance_to_ocean: float = 0.0) -> ClimateSample:
        """Climate averaged over one orbit, without wind."""
        temperature = self.get_average_annual_temperature(latitude, longitude, elevation)
        precipitation = self.get_average_annual_precipitation(
            latitude, longitude, elevation, distance_to_ocean
        )
        humidity = self.calculate_humidity(temperature, precipitation)

        return ClimateSample(
            temperature=temperature,
            precipitation=precipitation,
            humidity=humidity,
        )

    @staticmethod
    def prevailing_wind(latitude: float) -> float:
        """East-west component of the zonal circulation in m/s.

        Negative values are easterlies (blowing toward the west).
        """
        abs_lat = abs(latitude)

        if abs_lat < 30:
            # Trade winds
            return -3.0
        elif abs_lat < 60:
            # Westerlies
            return 5.0
        else:
            # Polar easterlies
            return -2.0

    def calculate_wind(self, latitude: float, longitude: float,
                       temperature: float, elevation: float,
                       neighbors: Sequence[NeighborSample]) -> Tuple[float, float]:
        """Surface wind of a cell from the temperature of its neighbors.

        Cold air sits under high pressure, so the temperature difference to
        each neighbor stands in for the pressure gradient.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            longitude: Longitude in degrees (-180 to 180)
            temperature: Temperature of the cell in °C
            elevation: Normalized elevation of the cell (0-1)
            neighbors: Nearby cells with their temperatures

        Returns:
            Tuple of (wind speed in m/s, direction in degrees the wind
            blows toward, 0-360)
        """
        if not neighbors:
            return DEFAULT_WIND_SPEED, DEFAULT_WIND_DIRECTION

        gradient_ns = 0.0
        gradient_ew = 0.0
        for neighbor in neighbors:
            temp_diff = temperature - neighbor.temperature
            lat_diff = latitude - neighbor.latitude
            lng_diff = ((longitude - neighbor.longitude + 180.0) % 360.0) - 180.0

            gradient_ns += temp_diff * np.sign(lat_diff)
            gradient_ew += temp_diff * np.sign(lng_diff)

        wind_ns = gradient_ns / len(neighbors)
        wind_ew = gradient_ew / len(neighbors)

        if not self.is_tidally_locked:
            # f = 2Ω·sin(φ), Ω in rad/hour; deflects right in the north, left in the south
            omega = 2 * np.pi / self.parameters.rotation_period
            coriolis_parameter = 2 * omega * np.sin(np.radians(latitude))
            coriolis_strength = abs(coriolis_parameter) * CORIOLIS_STRENGTH
            hemisphere = np.sign(latitude)

            wind_ew += coriolis_strength * hemisphere * wind_ns
            wind_ns -= coriolis_strength * hemisphere * wind_ew * 0.5

        wind_ew += self.prevailing_wind(latitude)

        height = max(0.0, altitude_m(elevation, self.parameters.sea_level))
        elevation_factor = 1 + (height / ELEVATION_SCALE_M) * 0.5

        wind_speed = math.sqrt(wind_ew ** 2 + wind_ns ** 2) * elevation_factor
        if not (math.isfinite(wind_speed) and math.isfinite(wind_ew) and math.isfinite(wind_ns)):
            return DEFAULT_WIND_SPEED, DEFAULT_WIND_DIRECTION

        wind_direction = (math.degrees(math.atan2(wind_ew, wind_ns)) + 360.0) % 360.0

        return (
            float(np.clip(wind_speed, MIN_WIND_SPEED, MAX_WIND_SPEED)),
            float(wind_direction),
        )

    @staticmethod
    def with_wind(sample: ClimateSample, wind_speed: float,
                  wind_direction: float) -> ClimateSample:
        """Copy of a climate sample with wind filled in."""
        return replace(sample, wind_speed=wind_speed, wind_direction=wind_direction)
