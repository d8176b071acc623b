"""
Shared pytest fixtures for ATIS report tests.
"""

import math

import pytest
import structlog

from src.aviation.station import Airfield, Position, StaticMode, Station
from src.aviation.weather import StaticWeather, StaticWeatherProvider, Wind


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration a test (e.g. the CLI) installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def kutaisi_airfield():
    return Airfield(
        name="Kutaisi",
        position=Position(x=0.0, y=0.0, alt=0.0),
        runways=("04", "22"),
    )


@pytest.fixture
def kutaisi_weather():
    return StaticWeather(
        wind=Wind(speed=5.0, dir=math.radians(330.0)),
        temperature=22.0,
        pressure=101500.0,
    )


@pytest.fixture
def kutaisi(kutaisi_airfield, kutaisi_weather):
    """Kutaisi ATIS with static weather: 330 degrees at 5 m/s, 22 C, 101500 Pa."""
    return Station(
        name="Kutaisi",
        atis_freq=251_000_000,
        traffic_freq=249_500_000,
        airfield=kutaisi_airfield,
        weather_kind=StaticMode(kutaisi_weather),
        weather_provider=StaticWeatherProvider(kutaisi_weather),
    )
