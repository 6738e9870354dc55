"""Supported race distances.

The canonical catalog is ordered by nominal length and drives both the
distance picker and the order of generated predictions. The 3000m and
2-mile keys are legacy extensions that only appear when explicitly asked
for.
"""

from __future__ import annotations

# VO2max percentages based on Daniels' tables, in canonical order
PERCENT_VDOT: dict[str, float] = {
    "1500": 0.98,
    "Mile": 0.97,
    "5K": 0.95,
    "10K": 0.92,
    "15K": 0.90,
    "HM": 0.88,
    "M": 0.84,
}

LEGACY_PERCENT_VDOT: dict[str, float] = {
    "3000": 0.96,
    "2-mile": 0.96,
}

# Nominal race distances in metres
DISTANCE_METRES: dict[str, float] = {
    "1500": 1500,
    "Mile": 1609.344,
    "3000": 3000,
    "2-mile": 3218.688,
    "5K": 5000,
    "10K": 10000,
    "15K": 15000,
    "HM": 21097.5,
    "M": 42195,
}

DISTANCE_LABELS: dict[str, str] = {
    "1500": "1500m",
    "Mile": "Mile",
    "3000": "3000m",
    "2-mile": "2 Mile",
    "5K": "5K",
    "10K": "10K",
    "15K": "15K",
    "HM": "Half Marathon",
    "M": "Marathon",
}


def get_supported_distances(include_legacy: bool = False) -> list[str]:
    """Return distance keys in nominal-length order."""
    keys = list(PERCENT_VDOT)
    if include_legacy:
        keys.extend(LEGACY_PERCENT_VDOT)
    return sorted(keys, key=DISTANCE_METRES.__getitem__)


def is_valid_distance(distance: object, include_legacy: bool = False) -> bool:
    if not isinstance(distance, str):
        return False
    if distance in PERCENT_VDOT:
        return True
    return include_legacy and distance in LEGACY_PERCENT_VDOT


def distance_label(distance: str) -> str:
    """Human-readable label for a distance key, falling back to the key."""
    return DISTANCE_LABELS.get(distance, distance)
