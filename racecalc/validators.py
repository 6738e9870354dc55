"""Validation of the race-time form inputs.

Checks are independent and all of them run, so the caller can show every
problem at once. Messages are user-facing strings; an empty list means the
inputs are valid.
"""

from __future__ import annotations

import math
from typing import Optional

from racecalc.services.time_codec import time_to_seconds

# Minimum plausible times for each distance (in seconds)
MIN_TIMES: dict[str, int] = {
    "1500": 180,  # 3 minutes
    "Mile": 200,  # 3:20
    "5K": 600,    # 10 minutes
    "10K": 1200,  # 20 minutes
    "15K": 2100,  # 35 minutes
    "HM": 2700,   # 45 minutes
    "M": 5400,    # 1:30:00
}

MISSING_DISTANCE = "Please select a recent race distance"
HOURS_RANGE = "Hours must be between 0 and 23"
MINUTES_RANGE = "Minutes must be between 0 and 59"
SECONDS_RANGE = "Seconds must be between 0 and 59"
ZERO_TIME = "Please enter a valid time"


def coerce_number(value: object) -> Optional[float]:
    """Return a finite number for numeric input, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _in_range(value: Optional[float], low: int, high: int) -> bool:
    return value is not None and low <= value <= high


def validate_inputs(hours, minutes, seconds, distance: Optional[str]) -> list[str]:
    """Validate time components and the chosen distance.

    Returns the list of error messages in a fixed order: distance, hours,
    minutes, seconds, then total-time checks. The total-time checks only run
    when all three components are numbers.
    """
    errors: list[str] = []

    if not distance:
        errors.append(MISSING_DISTANCE)

    h, m, s = coerce_number(hours), coerce_number(minutes), coerce_number(seconds)
    if not _in_range(h, 0, 23):
        errors.append(HOURS_RANGE)
    if not _in_range(m, 0, 59):
        errors.append(MINUTES_RANGE)
    if not _in_range(s, 0, 59):
        errors.append(SECONDS_RANGE)

    if h is not None and m is not None and s is not None:
        total_seconds = time_to_seconds(h, m, s)
        if total_seconds == 0:
            errors.append(ZERO_TIME)
        elif distance in MIN_TIMES and total_seconds < MIN_TIMES[distance]:
            errors.append(f"Time seems too short for {distance}. Please check your input.")

    return errors
