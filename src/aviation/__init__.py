"""Aviation utilities (deterministic ATIS report generation)."""

from .runway import select_active_runway
from .speech import PHONETIC_ALPHABET, information_letter, pronounce_number
from .station import Airfield, DynamicMode, Position, StaticMode, Station, Voice
from .weather import (
    Clouds,
    DynamicWeather,
    Precipitation,
    StaticWeather,
    StaticWeatherProvider,
    WeatherInfo,
    WeatherProvider,
    WeatherUnavailableError,
    Wind,
)

__all__ = [
    "Airfield",
    "Clouds",
    "DynamicMode",
    "DynamicWeather",
    "PHONETIC_ALPHABET",
    "Position",
    "Precipitation",
    "StaticMode",
    "StaticWeather",
    "StaticWeatherProvider",
    "Station",
    "Voice",
    "WeatherInfo",
    "WeatherProvider",
    "WeatherUnavailableError",
    "Wind",
    "information_letter",
    "pronounce_number",
    "select_active_runway",
]
