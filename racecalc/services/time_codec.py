"""Conversions between (h, m, s) components, total seconds and HH:MM:SS."""

from __future__ import annotations

import math
import re

_LEADING_INT = re.compile(r"[+-]?\d+")


def time_to_seconds(hours: int, minutes: int, seconds: int) -> int:
    """Total seconds for a time given as components. No range checking."""
    return hours * 3600 + minutes * 60 + seconds


def format_time(total_seconds: float) -> str:
    """Format seconds as a zero-padded 'HH:MM:SS' string.

    Fractional seconds are floored. Hours are never truncated, so 100+
    hours render with three digits.
    """
    total = math.floor(total_seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def parse_time_input(value: object, default_value: int = 0) -> int:
    """Parse a raw form value as a base-10 integer, or return the default.

    Leading whitespace and a leading sign are accepted, and parsing stops at
    the first non-digit, so '12abc' reads as 12.
    """
    if isinstance(value, bool):
        return default_value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default_value
    match = _LEADING_INT.match(str(value or "").strip())
    if match is None:
        return default_value
    return int(match.group())


def clamp_value(value, minimum, maximum):
    return max(minimum, min(maximum, value))
