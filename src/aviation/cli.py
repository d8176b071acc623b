from __future__ import annotations

import argparse
import sys
from typing import List, Optional

import yaml

from src.aviation.weather import WeatherUnavailableError
from src.config.loaders import ConfigValidationError, load_stations
from src.logging_config import configure_logging, get_logger


logger = get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print deterministic ATIS reports for configured stations.")
    parser.add_argument("--config", required=True, help="Path to the stations YAML file")
    parser.add_argument("--station", action="append", default=None, help="Only report this station (repeatable)")
    parser.add_argument("--report-nr", type=int, default=0, help="Report sequence number (selects the information letter)")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default WARNING)")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    args = parser.parse_args(argv)

    configure_logging(args.log_level, json_logs=args.json_logs)

    try:
        stations = load_stations(args.config)
    except (FileNotFoundError, yaml.YAMLError, ConfigValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.station:
        wanted = {s.strip().lower() for s in args.station}
        stations = [s for s in stations if s.name.lower() in wanted]
        if not stations:
            print(f"error: no station named {', '.join(args.station)}", file=sys.stderr)
            return 1

    for station in stations:
        try:
            report = station.generate_report(args.report_nr)
        except WeatherUnavailableError as exc:
            logger.error("Weather unavailable", station=station.name, error=str(exc))
            print(f"error: {station.name}: {exc}", file=sys.stderr)
            return 1
        logger.info("Generated report", station=station.name, report_nr=args.report_nr)
        print(report.rstrip())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
