from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import structlog


logger = structlog.get_logger(__name__)

# Runways within this angle of the wind are usable (headwind component >= 0).
MAX_WIND_ANGLE_DEG = 90.0


def runway_heading(identifier: str) -> Optional[float]:
    """Heading in degrees for a runway designator, e.g. ``"04" -> 40.0``.

    Returns None when the designator is not a plain number.
    """
    text = str(identifier).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    try:
        return int(text) * 10.0  # e.g. 04 to 040
    except ValueError:
        return None


def angular_distance(a_deg: float, b_deg: float) -> float:
    phi = abs(a_deg - b_deg) % 360.0
    return 360.0 - phi if phi > 180.0 else phi


def _parse_runways(runways: Iterable[str]) -> List[Tuple[str, float]]:
    parsed: List[Tuple[str, float]] = []
    for rwy in runways:
        heading = runway_heading(rwy)
        if heading is None:
            logger.error("Error parsing runway", runway=rwy)
            continue
        parsed.append((rwy, heading))
    return parsed


def select_active_runway(wind_dir_deg: float, runways: Iterable[str]) -> Optional[str]:
    """Pick the runway in use for a wind blowing from ``wind_dir_deg``.

    The first runway, in declaration order, within 90 degrees of the wind wins.
    This is not the runway most closely aligned with the wind; declaration order
    decides between several acceptable runways.
    """
    for rwy, heading in _parse_runways(runways):
        if angular_distance(wind_dir_deg, heading) <= MAX_WIND_ANGLE_DEG:
            return rwy
    return None
