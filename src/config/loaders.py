"""
Station list loading.

This module handles:
- Path resolution (relative to absolute)
- YAML file loading with shell-style environment variable expansion
- Operator-local ``*.local.yaml`` overrides
- Building ``Station`` objects from the parsed configuration
"""

import math
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from src.aviation.station import Airfield, DynamicMode, Position, StaticMode, Station, Voice
from src.aviation.weather import (
    Clouds,
    DynamicWeather,
    Precipitation,
    Sampler,
    StaticWeather,
    StaticWeatherProvider,
    WeatherProvider,
    Wind,
)
from src.logging_config import get_logger


logger = get_logger("config.loaders")

# Project root directory (parent of src/)
_PROJ_DIR = Path(__file__).parent.parent.parent.resolve()

# Pattern to match ${VAR:-default} or ${VAR:=default} shell-style syntax
_ENV_VAR_PATTERN = re.compile(r'\$\{([^}:]+)(:-|:=)?([^}]*)?\}')


class ConfigValidationError(Exception):
    """Raised when the station configuration is invalid."""
    pass


def _expand_env_vars_with_defaults(text: str) -> str:
    """
    Expand ${VAR}, ${VAR:-default}, ${VAR:=default} and $VAR references.

    Unset variables without a default are left untouched.
    """
    def replace_match(match):
        var_name = match.group(1)
        operator = match.group(2)
        default_value = match.group(3) or ""

        env_value = os.environ.get(var_name)

        if operator in (":-", ":="):
            if env_value is None or env_value == "":
                return default_value
            return env_value
        return env_value if env_value is not None else match.group(0)

    result = _ENV_VAR_PATTERN.sub(replace_match, text)
    return os.path.expandvars(result)


def resolve_config_path(path: str) -> str:
    """Resolve a relative configuration path against the project root."""
    if not os.path.isabs(path):
        return os.path.join(_PROJ_DIR, path)
    return path


def load_yaml_with_env_expansion(path: str) -> dict:
    """
    Load a YAML file after expanding environment variable references.

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config_str = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    try:
        config_data = yaml.safe_load(_expand_env_vars_with_defaults(config_str))
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Error parsing YAML configuration: {e}")

    return config_data if config_data is not None else {}


def deep_merge_dicts(base: dict, override: dict) -> dict:
    """
    Recursively deep-merge *override* into a copy of *base*.

    A key explicitly set to None in *override* is removed from the result.
    Lists and scalars in *override* replace the base value.
    """
    merged = dict(base)
    for key, override_val in override.items():
        if override_val is None:
            merged.pop(key, None)
            continue
        base_val = merged.get(key)
        if isinstance(base_val, dict) and isinstance(override_val, dict):
            merged[key] = deep_merge_dicts(base_val, override_val)
        else:
            merged[key] = override_val
    return merged


def load_yaml_with_local_override(path: str) -> dict:
    """
    Load ``stations.yaml`` and deep-merge a sibling ``stations.local.yaml`` if present.
    """
    base_data = load_yaml_with_env_expansion(path)

    stem, ext = os.path.splitext(path)
    local_path = f"{stem}.local{ext}"

    if not os.path.isfile(local_path):
        return base_data

    try:
        local_data = load_yaml_with_env_expansion(local_path)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning(
            "Failed to load local config override; using base config only",
            local_path=local_path,
            error=str(exc),
        )
        return base_data

    if not isinstance(local_data, dict):
        logger.warning("Local config override is not a mapping; ignoring", local_path=local_path)
        return base_data

    logger.info("Merging operator local config override", local_path=local_path)
    return deep_merge_dicts(base_data, local_data)


def _number(value: Any, what: str, errors: List[str], default: Optional[float] = None) -> Optional[float]:
    if value is None:
        if default is None:
            errors.append(f"{what} is required")
        return default
    try:
        num = float(value)
    except (TypeError, ValueError):
        errors.append(f"{what} must be a number, got {value!r}")
        return default
    if not math.isfinite(num):
        errors.append(f"{what} must be finite, got {value!r}")
        return default
    return num


def _runway_id(value: Any) -> str:
    # YAML reads 04 as the int 4
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:02d}"
    return str(value).strip()


def _parse_static_weather(raw: Any, where: str, errors: List[str]) -> StaticWeather:
    if raw is None:
        return StaticWeather()
    if not isinstance(raw, dict):
        errors.append(f"{where}.static_weather must be a mapping")
        return StaticWeather()

    wind_raw = raw.get("wind") or {}
    if not isinstance(wind_raw, dict):
        errors.append(f"{where}.static_weather.wind must be a mapping")
        wind_raw = {}
    wind = Wind.from_degrees(
        _number(wind_raw.get("dir"), f"{where}.static_weather.wind.dir", errors, 0.0),
        _number(wind_raw.get("speed"), f"{where}.static_weather.wind.speed", errors, 0.0),
    )

    clouds: Optional[Clouds] = None
    clouds_raw = raw.get("clouds")
    if isinstance(clouds_raw, dict):
        precip_raw = str(clouds_raw.get("precipitation") or "none").strip().lower()
        try:
            precipitation = Precipitation(precip_raw)
        except ValueError:
            errors.append(f"{where}.static_weather.clouds.precipitation must be one of "
                          f"{[p.value for p in Precipitation]}, got {precip_raw!r}")
            precipitation = Precipitation.NONE
        clouds = Clouds(
            base=int(_number(clouds_raw.get("base"), f"{where}.static_weather.clouds.base", errors, 0.0)),
            density=int(_number(clouds_raw.get("density"), f"{where}.static_weather.clouds.density", errors, 0.0)),
            thickness=int(_number(clouds_raw.get("thickness"), f"{where}.static_weather.clouds.thickness", errors, 0.0)),
            precipitation=precipitation,
        )
    elif clouds_raw is not None:
        errors.append(f"{where}.static_weather.clouds must be a mapping")

    defaults = StaticWeather()
    return StaticWeather(
        wind=wind,
        clouds=clouds,
        visibility=int(_number(raw.get("visibility"), f"{where}.static_weather.visibility", errors, 0.0)),
        temperature=_number(raw.get("temperature"), f"{where}.static_weather.temperature", errors, defaults.temperature),
        pressure=_number(raw.get("pressure"), f"{where}.static_weather.pressure", errors, defaults.pressure),
    )


def _parse_station(raw: Any, where: str, sampler: Optional[Sampler], errors: List[str]) -> Optional[Station]:
    if not isinstance(raw, dict):
        errors.append(f"{where} must be a mapping")
        return None

    name = str(raw.get("name") or "").strip()
    if not name:
        errors.append(f"{where}.name is required")

    atis_freq = _number(raw.get("atis_freq"), f"{where}.atis_freq", errors)
    traffic_freq = None
    if raw.get("traffic_freq") is not None:
        traffic_freq = _number(raw.get("traffic_freq"), f"{where}.traffic_freq", errors)

    voice_raw = str(raw.get("voice") or Voice.STANDARD_C.value).strip().lower()
    try:
        voice = Voice(voice_raw)
    except ValueError:
        errors.append(f"{where}.voice must be one of {[v.value for v in Voice]}, got {voice_raw!r}")
        voice = Voice.STANDARD_C

    airfield_raw = raw.get("airfield")
    if not isinstance(airfield_raw, dict):
        errors.append(f"{where}.airfield must be a mapping")
        airfield_raw = {}
    pos_raw = airfield_raw.get("position") or {}
    if not isinstance(pos_raw, dict):
        errors.append(f"{where}.airfield.position must be a mapping")
        pos_raw = {}
    runways_raw = airfield_raw.get("runways") or []
    if not isinstance(runways_raw, list):
        errors.append(f"{where}.airfield.runways must be a list")
        runways_raw = []
    airfield = Airfield(
        name=str(airfield_raw.get("name") or name),
        position=Position(
            x=_number(pos_raw.get("x"), f"{where}.airfield.position.x", errors, 0.0),
            y=_number(pos_raw.get("y"), f"{where}.airfield.position.y", errors, 0.0),
            alt=_number(pos_raw.get("alt"), f"{where}.airfield.position.alt", errors, 0.0),
        ),
        runways=tuple(_runway_id(r) for r in runways_raw),
    )

    mode = str(raw.get("weather") or "static").strip().lower()
    static_weather = _parse_static_weather(raw.get("static_weather"), where, errors)
    provider: Optional[WeatherProvider] = None
    if mode == "static":
        weather_kind = StaticMode(static_weather)
        provider = StaticWeatherProvider(static_weather)
    elif mode == "dynamic":
        weather_kind = DynamicMode()
        if sampler is None:
            errors.append(f"{where}: dynamic weather needs a live weather sampler")
        else:
            provider = DynamicWeather(sampler)
    else:
        errors.append(f"{where}.weather must be 'static' or 'dynamic', got {mode!r}")
        return None

    if provider is None or atis_freq is None or not name:
        return None

    return Station(
        name=name,
        atis_freq=int(atis_freq),
        airfield=airfield,
        weather_provider=provider,
        weather_kind=weather_kind,
        traffic_freq=int(traffic_freq) if traffic_freq is not None else None,
        voice=voice,
    )


def build_stations(config_data: Dict[str, Any], *, sampler: Optional[Sampler] = None) -> List[Station]:
    """
    Build stations from a parsed configuration mapping.

    Raises:
        ConfigValidationError: Listing every problem found
    """
    stations_raw = config_data.get("stations") if isinstance(config_data, dict) else None
    if not isinstance(stations_raw, list):
        raise ConfigValidationError("Configuration must contain a 'stations' list")

    errors: List[str] = []
    stations: List[Station] = []
    for idx, raw in enumerate(stations_raw):
        station = _parse_station(raw, f"stations[{idx}]", sampler, errors)
        if station is not None:
            stations.append(station)

    if errors:
        raise ConfigValidationError("Invalid station configuration:\n  - " + "\n  - ".join(errors))

    logger.debug("Loaded stations", count=len(stations), names=[s.name for s in stations])
    return stations


def load_stations(path: str, *, sampler: Optional[Sampler] = None) -> List[Station]:
    """Load and validate the station list at ``path`` (relative paths resolve against the project root)."""
    return build_stations(load_yaml_with_local_override(resolve_config_path(path)), sampler=sampler)
