"""Weather state consumed by the ATIS composer.

A station reads its weather from a ``WeatherProvider``. Providers either return
operator-configured values (``StaticWeatherProvider``) or sample a live source
(``DynamicWeather``). Every provider failure surfaces as
``WeatherUnavailableError``.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from .speech import pronounce_number


class WeatherUnavailableError(RuntimeError):
    """Raised when no weather can be obtained for a position."""


@dataclass(frozen=True)
class Wind:
    speed: float = 0.0  # m/s
    dir: float = 0.0  # radians, direction the wind blows from

    @classmethod
    def from_degrees(cls, dir_deg: float, speed: float) -> "Wind":
        return cls(speed=float(speed), dir=math.radians(dir_deg))


@dataclass(frozen=True)
class WeatherInfo:
    wind_speed: float  # m/s
    wind_dir: float  # radians
    temperature: float  # celsius
    pressure: float  # Pa

    def with_wind(self, wind: Wind) -> "WeatherInfo":
        return replace(self, wind_speed=wind.speed, wind_dir=wind.dir)


class Precipitation(str, Enum):
    NONE = "none"
    RAIN = "rain"
    THUNDERSTORM = "thunderstorm"


# Density is on a 0-10 scale.
_CLOUD_COVER = (
    (2, "few"),
    (5, "scattered"),
    (8, "broken"),
    (10, "overcast"),
)


@dataclass(frozen=True)
class Clouds:
    base: int = 0  # feet
    density: int = 0  # 0-10
    thickness: int = 0  # feet
    precipitation: Precipitation = Precipitation.NONE

    @property
    def cover(self) -> Optional[str]:
        if self.density <= 0:
            return None
        for upper, word in _CLOUD_COVER:
            if self.density <= upper:
                return word
        return "overcast"


@dataclass(frozen=True)
class StaticWeather:
    wind: Wind = Wind()
    clouds: Optional[Clouds] = None
    visibility: int = 0  # metres
    temperature: float = 15.0
    pressure: float = 101325.0

    def get_clouds_report(self) -> str:
        """Visibility and cloud fragment, without the closing period."""
        report = f"Visibility {pronounce_number(self.visibility)}"
        clouds = self.clouds
        if clouds is None or clouds.cover is None:
            return report
        report += f". Cloud conditions {clouds.cover}, cloud base {pronounce_number(clouds.base)} feet"
        if clouds.precipitation is not Precipitation.NONE:
            report += f", {clouds.precipitation.value}"
        return report


class WeatherProvider(ABC):
    """Source of weather at a position (x, y on the horizontal plane, alt vertical)."""

    @abstractmethod
    def get_at(self, x: float, y: float, alt: float) -> WeatherInfo:
        """Return current weather or raise ``WeatherUnavailableError``."""


class StaticWeatherProvider(WeatherProvider):
    """Returns the same operator-configured weather everywhere."""

    def __init__(self, weather: StaticWeather):
        self.weather = weather

    def get_at(self, x: float, y: float, alt: float) -> WeatherInfo:
        w = self.weather
        return WeatherInfo(
            wind_speed=w.wind.speed,
            wind_dir=w.wind.dir,
            temperature=w.temperature,
            pressure=w.pressure,
        )


Sampler = Callable[[float, float, float], Mapping[str, Any]]

_REQUIRED_FIELDS = ("wind_speed", "wind_dir", "temperature", "pressure")


class DynamicWeather(WeatherProvider):
    """Samples weather from a live source, e.g. a running simulation.

    ``sampler(x, y, alt)`` returns a mapping with ``wind_speed`` (m/s),
    ``wind_dir`` (radians), ``temperature`` (celsius) and ``pressure`` (Pa).
    No retries or timeouts are applied here; that belongs to the sampler.
    """

    def __init__(self, sampler: Sampler):
        self._sampler = sampler

    def get_at(self, x: float, y: float, alt: float) -> WeatherInfo:
        try:
            raw = self._sampler(x, y, alt)
        except Exception as exc:
            raise WeatherUnavailableError(f"Failed to sample weather at ({x}, {y}, {alt}): {exc}") from exc

        if not isinstance(raw, Mapping):
            raise WeatherUnavailableError(f"Weather sample is not a mapping: {type(raw).__name__}")

        values = {}
        for key in _REQUIRED_FIELDS:
            try:
                val = float(raw[key])
            except KeyError:
                raise WeatherUnavailableError(f"Weather sample is missing {key!r}") from None
            except (TypeError, ValueError) as exc:
                raise WeatherUnavailableError(f"Weather sample has invalid {key!r}: {raw[key]!r}") from exc
            if not math.isfinite(val):
                raise WeatherUnavailableError(f"Weather sample has non-finite {key!r}: {val!r}")
            values[key] = val
        return WeatherInfo(**values)
