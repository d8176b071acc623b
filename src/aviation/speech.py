from __future__ import annotations

import math
from typing import Tuple, Union


Number = Union[int, float, str]

# Digits that are spoken differently on the radio.
_SPOKEN_OVERRIDES = {
    "9": "NINER",
    ".": "DECIMAL",
}

# Characters passed through as their own token.
_PASSTHROUGH = frozenset("0123456789+-")

PHONETIC_ALPHABET: Tuple[str, ...] = (
    "Alpha",
    "Bravo",
    "Charlie",
    "Delta",
    "Echo",
    "Foxtrot",
    "Golf",
    "Hotel",
    "India",
    "Juliett",
    "Kilo",
    "Lima",
    "Mike",
    "November",
    "Oscar",
    "Papa",
    "Quebec",
    "Romeo",
    "Sierra",
    "Tango",
    "Uniform",
    "Victor",
    "Whiskey",
    "X-ray",
    "Yankee",
    "Zulu",
)


def information_letter(report_nr: int) -> str:
    return PHONETIC_ALPHABET[report_nr % len(PHONETIC_ALPHABET)]


def round_half_away(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimal places, halves away from zero.

    Python's ``round`` uses banker's rounding (``round(0.5) == 0``), which would
    make e.g. a 2.5 knot wind read "2" instead of "3".
    """
    factor = 10 ** digits
    return math.copysign(math.floor(abs(value) * factor + 0.5), value) / factor


def format_number(value: Number) -> str:
    """Stringify a number the way it is read out.

    Integral floats lose their fractional part (``22.0 -> "22"``), other floats
    use the shortest representation that round-trips (``29.97 -> "29.97"``).
    Strings are assumed to be preformatted by the caller.
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot pronounce non-finite number: {value!r}")
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(int(value))


def pronounce_number(value: Number) -> str:
    """Spell a number out digit by digit, e.g. ``29.97 -> "2 NINER DECIMAL NINER 7"``."""
    text = format_number(value)
    tokens = []
    for ch in text:
        if ch == " ":
            continue
        if ch in _SPOKEN_OVERRIDES:
            tokens.append(_SPOKEN_OVERRIDES[ch])
        elif ch in _PASSTHROUGH:
            tokens.append(ch)
        else:
            raise ValueError(f"Cannot pronounce {value!r}: unexpected character {ch!r}")
    return " ".join(tokens)
