"""Planetary systems module for PlanetForge.

This module holds the planetary parameters of a generation run and the solar
geometry derived from them: axial tilt, rotation, orbital phase and the
insolation reaching any point of the surface. Both rotating planets and
tidally locked planets (one face permanently toward the star) are supported.
"""

import math
from dataclasses import dataclass, fields
from typing import Any, List, Mapping

import numpy as np

from .errors import ConfigurationError
from .grid import MAX_RESOLUTION, MIN_RESOLUTION

# Rotation periods (hours) at or above this value are treated as tidally locked
TIDAL_LOCK_THRESHOLD_HOURS = 1000.0

# Longitude of the point that permanently faces the star on a locked planet
SUBSTELLAR_LONGITUDE = 0.0

# Ambient insolation (W/m²) per unit of atmosphere density on the dark side
AMBIENT_INSOLATION_PER_DENSITY = 5.0

# Fraction of the solar constant an atmosphere of density 1.0 can carry
# through the night on a fast-rotating planet
NIGHT_HEAT_RETENTION = 0.3

# Rotation period (hours) at which night heat retention falls to zero
REFERENCE_DAY_HOURS = 24.0


@dataclass(frozen=True)
class PlanetParameters:
    """Immutable planetary parameters for one generation run.

    Attributes:
        radius: Planet radius in meters
        solar_constant: Stellar flux at the top of the atmosphere (W/m²)
        orbital_tilt: Axial tilt in degrees
        rotation_period: Sidereal day in hours (>= 1000 means tidally locked)
        orbital_period: Year length in days
        sea_level: Normalized elevation threshold below which a cell is ocean
        atmosphere_density: Atmosphere density relative to Earth (1.0)
        grid_resolution: Subdivision level of the geodesic grid
        time_of_day: Planet-wide clock in hours (0-24), rotating planets only
    """

    radius: float = 6371000.0
    solar_constant: float = 1361.0
    orbital_tilt: float = 23.5
    rotation_period: float = 24.0
    orbital_period: float = 365.0
    sea_level: float = 0.5
    atmosphere_density: float = 1.0
    grid_resolution: int = 4
    time_of_day: float = 12.0

    def __post_init__(self):
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(
                    f"Parameter '{field.name}' must be a number, got {value!r}"
                )
            if not math.isfinite(value):
                raise ConfigurationError(
                    f"Parameter '{field.name}' must be finite, got {value!r}"
                )

        if self.radius <= 0:
            raise ConfigurationError(f"radius must be positive, got {self.radius}")
        if self.solar_constant < 0:
            raise ConfigurationError(
                f"solar_constant must be non-negative, got {self.solar_constant}"
            )
        if self.rotation_period <= 0:
            raise ConfigurationError(
                f"rotation_period must be positive, got {self.rotation_period}"
            )
        if self.orbital_period <= 0:
            raise ConfigurationError(
                f"orbital_period must be positive, got {self.orbital_period}"
            )
        if not 0.0 <= self.sea_level <= 1.0:
            raise ConfigurationError(
                f"sea_level must be within [0, 1], got {self.sea_level}"
            )
        if self.atmosphere_density < 0:
            raise ConfigurationError(
                f"atmosphere_density must be non-negative, got {self.atmosphere_density}"
            )
        if not 0.0 <= self.time_of_day <= 24.0:
            raise ConfigurationError(
                f"time_of_day must be within [0, 24], got {self.time_of_day}"
            )
        if int(self.grid_resolution) != self.grid_resolution:
            raise ConfigurationError(
                f"grid_resolution must be an integer, got {self.grid_resolution}"
            )
        if not MIN_RESOLUTION <= self.grid_resolution <= MAX_RESOLUTION:
            raise ConfigurationError(
                f"grid_resolution must be between {MIN_RESOLUTION} and "
                f"{MAX_RESOLUTION}, got {self.grid_resolution}"
            )
        object.__setattr__(self, "grid_resolution", int(self.grid_resolution))

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "PlanetParameters":
        """Build parameters from a mapping, rejecting unknown keys.

        Keys that are absent take the Earth-like defaults.

        Args:
            values: Mapping of parameter name to value

        Returns:
            Validated PlanetParameters
        """
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(f"Unknown planet parameters: {', '.join(unknown)}")
        return cls(**dict(values))

    def to_dict(self) -> dict:
        """Return the parameters as a plain dictionary."""
        return {field.name: getattr(self, field.name) for field in fields(self)}


class PlanetarySystem:
    """Solar geometry for a planet described by PlanetParameters.

    Computes declination, hour angle and insolation for rotating planets and
    the fixed day/night hemispheres of tidally locked planets.
    """

    def __init__(self, parameters: PlanetParameters):
        """Initialize the PlanetarySystem.

        Args:
            parameters: Planetary parameters of the run
        """
        self.parameters = parameters
        self.axial_tilt = np.radians(parameters.orbital_tilt)
        self.planet_radius_km = parameters.radius / 1000.0

    @property
    def is_tidally_locked(self) -> bool:
        """Whether the planet keeps one face toward its star."""
        return self.parameters.rotation_period >= TIDAL_LOCK_THRESHOLD_HOURS

    @property
    def minimum_ambient_insolation(self) -> float:
        """Insolation floor carried to the dark side of a locked planet."""
        return self.parameters.atmosphere_density * AMBIENT_INSOLATION_PER_DENSITY

    @property
    def nighttime_insolation(self) -> float:
        """Heat retained through the night on a rotating planet.

        Grows with atmosphere density and with rotation speed; planets whose
        day is at least REFERENCE_DAY_HOURS long retain nothing.
        """
        rotation_dampening = min(
            1.0, self.parameters.rotation_period / REFERENCE_DAY_HOURS
        )
        retention = (
            self.parameters.atmosphere_density
            * NIGHT_HEAT_RETENTION
            * (1.0 - rotation_dampening)
        )
        return self.parameters.solar_constant * retention

    def solar_declination(self, day_of_year: float = 0.0) -> float:
        """Calculate the solar declination for a day of the orbit.

        Args:
            day_of_year: Day within the orbital period

        Returns:
            Declination in radians
        """
        seasonal_angle = 2 * np.pi * (day_of_year / self.parameters.orbital_period)
        return float(self.axial_tilt * np.sin(seasonal_angle))

    def hour_angle(self) -> float:
        """Hour angle of the sun in radians (0 at noon, ±π at midnight)."""
        return float((self.parameters.time_of_day - 12.0) / 12.0 * np.pi)

    def sin_solar_elevation(self, latitude: float, day_of_year: float = 0.0) -> float:
        """Sine of the sun's elevation angle at a latitude.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            day_of_year: Day within the orbital period

        Returns:
            Sine of the solar elevation, clipped to [-1, 1]
        """
        lat_rad = np.radians(latitude)
        declination = self.solar_declination(day_of_year)
        value = (
            np.sin(lat_rad) * np.sin(declination)
            + np.cos(lat_rad) * np.cos(declination) * np.cos(self.hour_angle())
        )
        return float(np.clip(value, -1.0, 1.0))

    def insolation(self, latitude: float, longitude: float,
                   day_of_year: float = 0.0) -> float:
        """Calculate the insolation reaching a point on the surface.

        Args:
            latitude: Latitude in degrees (-90 to 90)
            longitude: Longitude in degrees (-180 to 180)
            day_of_year: Day within the orbital period (rotating planets only)

        Returns:
            Insolation in W/m²
        """
        if self.is_tidally_locked:
            return self._locked_insolation(latitude, longitude)
        return self._rotating_insolation(latitude, day_of_year)

    def _locked_insolation(self, latitude: float, longitude: float) -> float:
        """Insolation on a tidally locked planet."""
        angular_distance = abs(longitude - SUBSTELLAR_LONGITUDE) % 360.0
        angular_distance = min(angular_distance, 360.0 - angular_distance)

        facing = np.cos(np.radians(angular_distance)) * np.cos(np.radians(latitude))
        insolation = self.parameters.solar_constant * max(0.0, float(facing))

        # Atmospheric circulation carries a little heat to the dark side
        return max(insolation, self.minimum_ambient_insolation)

    def _rotating_insolation(self, latitude: float, day_of_year: float) -> float:
        """Insolation on a rotating planet."""
        sin_elevation = self.sin_solar_elevation(latitude, day_of_year)
        if sin_elevation <= 0:
            return self.nighttime_insolation
        return self.parameters.solar_constant * sin_elevation

    def sample_days(self, samples: int = 12) -> List[float]:
        """Evenly spaced days across one orbital period.

        Args:
            samples: Number of sample points

        Returns:
            List of days of the year
        """
        return [
            month * self.parameters.orbital_period / samples
            for month in range(samples)
        ]

    def get_season(self, day_of_year: float) -> str:
        """Get the northern-hemisphere season for a day of the orbit.

        Args:
            day_of_year: Day within the orbital period

        Returns:
            String name of the season
        """
        year_position = (day_of_year % self.parameters.orbital_period) / self.parameters.orbital_period

        if year_position < 0.25:
            return "Spring"
        elif year_position < 0.5:
            return "Summer"
        elif year_position < 0.75:
            return "Fall"
        else:
            return "Winter"
