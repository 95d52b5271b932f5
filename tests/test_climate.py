"""Tests for the climate model."""

import math

import pytest

from src.world_generation.biome import BiomeClassifier, BiomeType
from src.world_generation.climate import (
    ClimateSample,
    ClimateSystem,
    DEFAULT_WIND_DIRECTION,
    DEFAULT_WIND_SPEED,
    MAX_WIND_SPEED,
    NeighborSample,
    altitude_m,
)
from src.world_generation.planetary import PlanetParameters


@pytest.fixture
def climate(earth_parameters):
    return ClimateSystem(earth_parameters)


@pytest.fixture
def locked_climate(earth_parameters):
    parameters = PlanetParameters(**{**earth_parameters.to_dict(), "rotation_period": 2802})
    return ClimateSystem(parameters)


class TestTidalLock:
    """Test the tidal lock property."""

    def test_rotating_and_locked(self, climate, locked_climate):
        assert not climate.is_tidally_locked
        assert locked_climate.is_tidally_locked

    def test_documented(self):
        assert ClimateSystem.is_tidally_locked.__doc__


class TestTemperature:
    """Test temperature from insolation."""

    def test_equator_at_noon(self, climate):
        temperature = climate.calculate_temperature(0.0, 0.0, 0.5)
        assert 20.0 <= temperature <= 35.0
        assert temperature == pytest.approx(26.43, abs=0.05)

        biome = BiomeClassifier().classify(
            temperature,
            climate.calculate_precipitation(0.0, 0.5, temperature),
            altitude_m(0.5, 0.5),
        )
        assert biome not in (BiomeType.ICE, BiomeType.TUNDRA, BiomeType.ALPINE)

    def test_pole(self, climate):
        temperature = climate.calculate_temperature(90.0, 0.0, 0.5)
        assert temperature < -100.0

        biome = BiomeClassifier().classify(
            temperature,
            climate.calculate_precipitation(90.0, 0.5, temperature),
            altitude_m(0.5, 0.5),
        )
        assert biome in (BiomeType.ICE, BiomeType.TUNDRA, BiomeType.ALPINE, BiomeType.OCEAN)

    def test_lapse_rate(self, climate):
        # Sea level is 0.5; 0.6 is 1000 m above it
        lowland = climate.calculate_temperature(0.0, 0.0, 0.5)
        highland = climate.calculate_temperature(0.0, 0.0, 0.6)
        assert lowland - highland == pytest.approx(6.5)

    def test_no_lapse_rate_below_sea_level(self, climate):
        seabed = climate.calculate_temperature(0.0, 0.0, 0.1)
        surface = climate.calculate_temperature(0.0, 0.0, 0.5)
        assert seabed == pytest.approx(surface)

    def test_greenhouse_offset(self, earth_parameters):
        thin = ClimateSystem(PlanetParameters(**{**earth_parameters.to_dict(), "atmosphere_density": 0.0}))
        thick = ClimateSystem(PlanetParameters(**{**earth_parameters.to_dict(), "atmosphere_density": 2.0}))
        difference = thick.calculate_temperature(0.0, 0.0, 0.5) - thin.calculate_temperature(0.0, 0.0, 0.5)
        assert difference == pytest.approx(90.0)

    def test_locked_antisolar_point(self, locked_climate):
        insolation = locked_climate.planetary.insolation(0.0, 180.0)
        assert insolation == pytest.approx(locked_climate.planetary.minimum_ambient_insolation)
        assert insolation > 0.0

        temperature = locked_climate.calculate_temperature(0.0, 180.0, 0.5)
        assert math.isfinite(temperature)
        assert temperature < locked_climate.calculate_temperature(0.0, 0.0, 0.5)

    def test_locked_ignores_time_of_day(self, earth_parameters):
        morning = ClimateSystem(PlanetParameters(
            **{**earth_parameters.to_dict(), "rotation_period": 5000, "time_of_day": 6.0}
        ))
        evening = ClimateSystem(PlanetParameters(
            **{**earth_parameters.to_dict(), "rotation_period": 5000, "time_of_day": 18.0}
        ))
        assert morning.calculate_temperature(20.0, 40.0, 0.5) == evening.calculate_temperature(20.0, 40.0, 0.5)

    def test_annual_average(self, climate):
        days = climate.planetary.sample_days(12)
        expected = sum(climate.calculate_temperature(45.0, 0.0, 0.5, day) for day in days) / 12
        assert climate.get_average_annual_temperature(45.0, 0.0, 0.5) == pytest.approx(expected)

    def test_annual_climate(self, climate):
        sample = climate.calculate_annual_climate(30.0, 0.0, 0.6, distance_to_ocean=200.0)
        assert sample.precipitation >= 0.0
        assert 0.0 <= sample.humidity <= 100.0
        assert sample.wind_speed == 0.0
        assert sample.wind_direction == 0.0


class TestPrecipitation:
    """Test precipitation and humidity."""

    @pytest.mark.parametrize("latitude, expected", [
        (0.0, 2500.0),
        (20.0, 1000.0),
        (-45.0, 650.0),
        (75.0, 300.0),
    ])
    def test_base_rainfall(self, latitude, expected):
        assert ClimateSystem.base_rainfall(latitude) == pytest.approx(expected)

    def test_all_effects(self, climate):
        # Equatorial coast at sea level, hot enough for full moisture capacity
        assert climate.calculate_precipitation(0.0, 0.5, 30.0, 0.0) == pytest.approx(3500.0)

    def test_orographic_lift(self, climate):
        low = climate.calculate_precipitation(45.0, 0.5, 15.0, 0.0)
        high = climate.calculate_precipitation(45.0, 0.7, 15.0, 0.0)
        assert high - low == pytest.approx(400.0)

    def test_ocean_proximity_decays(self, climate):
        coast = climate.calculate_precipitation(45.0, 0.55, 15.0, 0.0)
        inland = climate.calculate_precipitation(45.0, 0.55, 15.0, 1000.0)
        assert coast - inland == pytest.approx(500.0 * (1 - math.exp(-1)))

    def test_never_negative(self, climate):
        for temperature in (-250.0, -40.0, 0.0, 60.0):
            for latitude in (-89.0, -30.0, 0.0, 65.0):
                assert climate.calculate_precipitation(latitude, 0.0, temperature, 5000.0) >= 0.0

    @pytest.mark.parametrize("temperature, precipitation, expected", [
        (30.0, 3500.0, 100.0),
        (-10.0, 3000.0, 0.0),
        (10.0, 1000.0, 25.0),
        (50.0, 0.0, 0.0),
    ])
    def test_humidity(self, temperature, precipitation, expected):
        assert ClimateSystem.calculate_humidity(temperature, precipitation) == pytest.approx(expected)

    def test_climate_sample(self, climate):
        sample = climate.calculate_climate(0.0, 0.0, 0.5)
        assert isinstance(sample, ClimateSample)
        assert sample.temperature == climate.calculate_temperature(0.0, 0.0, 0.5)
        assert sample.wind_speed == 0.0


class TestWind:
    """Test wind from neighbor temperature gradients."""

    def test_no_neighbors_uses_default(self, climate):
        assert climate.calculate_wind(45.0, 0.0, 15.0, 0.4, []) == (
            DEFAULT_WIND_SPEED, DEFAULT_WIND_DIRECTION
        )

    def test_westerlies_without_gradient(self, climate):
        neighbors = [
            NeighborSample(46.0, 0.0, 15.0),
            NeighborSample(44.0, 1.0, 15.0),
        ]
        speed, direction = climate.calculate_wind(45.0, 0.0, 15.0, 0.4, neighbors)
        assert speed == pytest.approx(5.0)
        assert direction == pytest.approx(90.0)

    def test_trade_winds_without_gradient(self, climate):
        neighbors = [NeighborSample(11.0, 0.0, 25.0)]
        speed, direction = climate.calculate_wind(10.0, 0.0, 25.0, 0.4, neighbors)
        assert speed == pytest.approx(3.0)
        assert direction == pytest.approx(270.0)

    def test_gradient_on_locked_planet(self, locked_climate):
        # Colder air to the north; no Coriolis deflection on a locked planet
        neighbors = [NeighborSample(46.0, 0.0, 5.0)]
        speed, direction = locked_climate.calculate_wind(45.0, 0.0, 15.0, 0.4, neighbors)
        assert speed == pytest.approx(math.sqrt(125.0))
        assert direction == pytest.approx(math.degrees(math.atan2(5.0, -10.0)))

    def test_gradient_across_antimeridian(self, locked_climate):
        neighbors = [NeighborSample(45.0, -179.0, 5.0)]
        speed, direction = locked_climate.calculate_wind(45.0, 179.0, 15.0, 0.4, neighbors)
        assert speed == pytest.approx(5.0)
        assert direction == pytest.approx(270.0)

    def test_coriolis_changes_result(self, climate, locked_climate):
        neighbors = [NeighborSample(46.0, 0.0, 5.0)]
        rotating = climate.calculate_wind(45.0, 0.0, 15.0, 0.4, neighbors)
        locked = locked_climate.calculate_wind(45.0, 0.0, 15.0, 0.4, neighbors)
        assert rotating != locked

    def test_elevation_multiplier(self, locked_climate):
        neighbors = [NeighborSample(45.0, 1.0, 15.0)]
        low, _ = locked_climate.calculate_wind(45.0, 0.0, 15.0, 0.5, neighbors)
        # 0.9 is 4000 m above sea level
        high, _ = locked_climate.calculate_wind(45.0, 0.0, 15.0, 0.9, neighbors)
        assert high == pytest.approx(low * 1.2)

    def test_speed_is_clamped(self, climate):
        hot = [NeighborSample(46.0, 1.0, -500.0)]
        speed, direction = climate.calculate_wind(45.0, 0.0, 500.0, 0.4, hot)
        assert speed == MAX_WIND_SPEED
        assert 0.0 <= direction < 360.0

        calm = [NeighborSample(1.0, 0.0, 20.0)]
        speed, _ = climate.calculate_wind(0.0, 0.0, 20.0, 0.4, calm)
        assert speed >= 1.0

    def test_non_finite_falls_back_to_default(self, climate):
        neighbors = [NeighborSample(46.0, 0.0, float("nan"))]
        assert climate.calculate_wind(45.0, 0.0, 15.0, 0.4, neighbors) == (
            DEFAULT_WIND_SPEED, DEFAULT_WIND_DIRECTION
        )

    def test_with_wind_copies(self):
        sample = ClimateSample(temperature=10.0, precipitation=800.0, humidity=40.0)
        windy = ClimateSystem.with_wind(sample, 7.0, 180.0)
        assert windy.wind_speed == 7.0
        assert windy.wind_direction == 180.0
        assert windy.temperature == sample.temperature
        assert sample.wind_speed == 0.0
