from __future__ import annotations

import math

import pytest
from structlog.testing import capture_logs

from src.aviation.station import Airfield, DynamicMode, Position, StaticMode, Station
from src.aviation.weather import DynamicWeather, StaticWeather, WeatherUnavailableError, Wind


KUTAISI_REPORT = (
    "This is Kutaisi information Alpha. "
    "Runway in use is 0 4. "
    "Wind 3 3 0 at 1 0 knots. "
    "Visibility 0. "
    "Temperature 2 2 celcius, ALTIMETER 2 NINER DECIMAL NINER 7. "
    "Traffic frequency 2 4 NINER DECIMAL 5. "
    "REMARKS 1 0 1 5 hectopascal. "
    "End information Alpha. "
)


def _sampler(wind_dir_deg=180.0, wind_speed=0.0, temperature=-5.5, pressure=100000.0):
    calls = []

    def sample(x, y, alt):
        calls.append((x, y, alt))
        return {
            "wind_speed": wind_speed,
            "wind_dir": math.radians(wind_dir_deg),
            "temperature": temperature,
            "pressure": pressure,
        }

    sample.calls = calls
    return sample


def test_generate_report_kutaisi(kutaisi) -> None:
    assert kutaisi.generate_report(26) == KUTAISI_REPORT


def test_report_is_deterministic(kutaisi) -> None:
    assert kutaisi.generate_report(3) == kutaisi.generate_report(3)


def test_information_letter_follows_report_number(kutaisi) -> None:
    report = kutaisi.generate_report(25)
    assert report.startswith("This is Kutaisi information Zulu. ")
    assert report.endswith("End information Zulu. ")


def test_dynamic_report_has_no_cloud_line() -> None:
    sampler = _sampler()
    station = Station(
        name="Senaki",
        atis_freq=132_000_000,
        airfield=Airfield(name="Senaki", position=Position(x=10.0, y=20.0, alt=13.0), runways=("04", "22")),
        weather_kind=DynamicMode(),
        weather_provider=DynamicWeather(sampler),
    )
    assert station.generate_report(1) == (
        "This is Senaki information Bravo. "
        "Runway in use is 2 2. "
        "Wind 1 8 0 at 0 knots. "
        "Temperature - 5 DECIMAL 5 celcius, ALTIMETER 2 NINER DECIMAL 5 3. "
        "REMARKS 1 0 0 0 hectopascal. "
        "End information Bravo. "
    )
    # sampled at ground level
    assert sampler.calls == [(10.0, 20.0, 0.0)]


def test_static_mode_overrides_wind_from_dynamic_source(kutaisi_airfield) -> None:
    static = StaticWeather(wind=Wind.from_degrees(330.0, 5.0))
    station = Station(
        name="Kutaisi",
        atis_freq=251_000_000,
        airfield=kutaisi_airfield,
        weather_kind=StaticMode(static),
        weather_provider=DynamicWeather(_sampler(wind_dir_deg=90.0, wind_speed=20.0, temperature=30.0)),
    )
    weather = station.get_current_weather()
    assert weather.wind_speed == 5.0
    assert weather.wind_dir == pytest.approx(math.radians(330.0))
    assert weather.temperature == 30.0

    report = station.generate_report(0)
    assert "Runway in use is 0 4. Wind 3 3 0 at 1 0 knots. Visibility 0. Temperature 3 0 celcius" in report


def test_wind_direction_is_zero_padded(kutaisi_airfield) -> None:
    static = StaticWeather(wind=Wind.from_degrees(5.0, 0.0))
    station = Station(
        name="Kutaisi",
        atis_freq=251_000_000,
        airfield=kutaisi_airfield,
        weather_kind=StaticMode(static),
        weather_provider=DynamicWeather(_sampler()),
    )
    assert "Wind 0 0 5 at 0 knots. " in station.generate_report(0)


def test_missing_runway_is_logged_and_line_omitted(kutaisi_weather) -> None:
    station = Station(
        name="Batumi",
        atis_freq=260_000_000,
        airfield=Airfield(name="Batumi", runways=("XX",)),
        weather_kind=StaticMode(kutaisi_weather),
        weather_provider=DynamicWeather(_sampler()),
    )
    with capture_logs() as logs:
        report = station.generate_report(0)

    assert "Runway in use" not in report
    assert report.startswith("This is Batumi information Alpha. Wind 3 3 0 at 1 0 knots. ")
    events = [e["event"] for e in logs]
    assert "Error parsing runway" in events
    assert "Could not find active runway" in events


def test_weather_failure_aborts_report(kutaisi_airfield) -> None:
    def broken(x, y, alt):
        raise ConnectionError("simulation not running")

    station = Station(
        name="Kutaisi",
        atis_freq=251_000_000,
        airfield=kutaisi_airfield,
        weather_kind=StaticMode(),
        weather_provider=DynamicWeather(broken),
    )
    with pytest.raises(WeatherUnavailableError) as exc_info:
        station.generate_report(0)
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_traffic_frequency_line_only_when_configured(kutaisi) -> None:
    from dataclasses import replace

    without = replace(kutaisi, traffic_freq=None)
    assert "Traffic frequency" not in without.generate_report(0)
    assert "Traffic frequency 2 4 NINER DECIMAL 5. " in kutaisi.generate_report(0)


def test_non_ascii_runway_does_not_fail_report() -> None:
    station = Station(
        name="Kutaisi",
        atis_freq=251_000_000,
        airfield=Airfield(name="Kutaisi", runways=("０４", "22")),
        weather_kind=StaticMode(StaticWeather(wind=Wind.from_degrees(40.0, 5.0))),
        weather_provider=DynamicWeather(_sampler()),
    )
    with capture_logs() as logs:
        report = station.generate_report(0)

    assert "Runway in use" not in report
    assert "Error parsing runway" in [e["event"] for e in logs]
