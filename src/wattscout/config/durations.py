"""Go-style duration strings ("300ms", "1m30s") to seconds and back."""

from __future__ import annotations

import re

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str | float | int) -> float:
    """Return the duration in seconds.

    Plain numbers are taken as seconds. Strings must be one or more
    ``<number><unit>`` components, or a bare ``"0"``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    text = value.strip()
    if text == "0":
        return 0.0
    if not text:
        raise ValueError("Invalid duration: empty string")

    total = 0.0
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        number, unit = match.groups()
        total += float(number) * _UNITS[unit]
        position = match.end()
    return total


def format_duration(seconds: float) -> str:
    text = f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{text or '0'}s"
