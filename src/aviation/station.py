from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

import structlog

from .runway import select_active_runway
from .speech import format_number, information_letter, pronounce_number, round_half_away
from .weather import StaticWeather, WeatherInfo, WeatherProvider


logger = structlog.get_logger(__name__)

MS_TO_KNOTS = 1.94384
PA_TO_INHG = 0.0002953


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0
    alt: float = 0.0


@dataclass(frozen=True)
class Airfield:
    name: str
    position: Position = field(default_factory=Position)
    runways: Tuple[str, ...] = ()


class Voice(str, Enum):
    """TTS voice a station broadcasts with. Not interpreted here."""

    STANDARD_A = "standard_a"
    STANDARD_B = "standard_b"
    STANDARD_C = "standard_c"
    STANDARD_D = "standard_d"
    WAVENET_A = "wavenet_a"
    WAVENET_B = "wavenet_b"
    WAVENET_C = "wavenet_c"
    WAVENET_D = "wavenet_d"


@dataclass(frozen=True)
class StaticMode:
    """Wind and clouds come from operator configuration."""

    weather: StaticWeather = field(default_factory=StaticWeather)


@dataclass(frozen=True)
class DynamicMode:
    """Everything comes from the weather provider."""


WeatherKind = Union[StaticMode, DynamicMode]


@dataclass(frozen=True)
class Station:
    name: str
    atis_freq: int  # Hz
    airfield: Airfield
    weather_provider: WeatherProvider
    weather_kind: WeatherKind = field(default_factory=DynamicMode)
    traffic_freq: Optional[int] = None  # Hz
    voice: Voice = Voice.STANDARD_C

    def get_current_weather(self) -> WeatherInfo:
        pos = self.airfield.position
        info = self.weather_provider.get_at(pos.x, pos.y, 0.0)  # at ground level

        if isinstance(self.weather_kind, StaticMode):
            info = info.with_wind(self.weather_kind.weather.wind)
        return info

    def get_active_runway(self, wind_dir_deg: float) -> Optional[str]:
        return select_active_runway(wind_dir_deg, self.airfield.runways)

    def generate_report(self, report_nr: int) -> str:
        """Compose the ATIS text for the ``report_nr``-th broadcast.

        Raises ``WeatherUnavailableError`` when the provider fails; a missing
        active runway only drops the runway line.
        """
        letter = information_letter(report_nr)
        weather = self.get_current_weather()
        wind_dir_deg = math.degrees(weather.wind_dir) % 360.0

        parts: List[str] = [f"This is {self.name} information {letter}"]

        rwy = self.get_active_runway(wind_dir_deg)
        if rwy is not None:
            parts.append(f"Runway in use is {pronounce_number(rwy)}")
        else:
            logger.error("Could not find active runway", station=self.name, wind_dir=wind_dir_deg)

        wind_dir = f"{format_number(round_half_away(wind_dir_deg)):0>3}"
        parts.append(
            "Wind {} at {} knots".format(
                pronounce_number(wind_dir),
                pronounce_number(round_half_away(weather.wind_speed * MS_TO_KNOTS)),
            )
        )

        if isinstance(self.weather_kind, StaticMode):
            parts.append(self.weather_kind.weather.get_clouds_report())

        parts.append(
            "Temperature {} celcius, ALTIMETER {}".format(
                pronounce_number(round_half_away(weather.temperature, 1)),
                pronounce_number(round_half_away(weather.pressure * PA_TO_INHG, 2)),
            )
        )

        if self.traffic_freq is not None:
            parts.append(
                f"Traffic frequency {pronounce_number(round_half_away(self.traffic_freq / 1_000_000, 3))}"
            )

        parts.append(f"REMARKS {pronounce_number(round_half_away(weather.pressure / 100))} hectopascal")
        parts.append(f"End information {letter}")

        return "".join(f"{part}. " for part in parts)
