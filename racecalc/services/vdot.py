"""VDOT resolution and time interpolation over the Daniels reference table.

VDOT is a measure of running ability derived from race performances
(Daniels' Running Formula). A race time for one distance is matched to a
table tier, and that tier (or a fractional point between two tiers) is
projected onto any other distance.

Two resolution strategies exist and are never mixed:

- nearest: the integer tier whose time is closest to the observed one.
  This is the default and what the predictor uses.
- fractional: the observed time is placed between its two bracketing tiers
  and a proportional, non-integer VDOT is returned.

Every function takes the table explicitly; passing ``None`` (table not yet
loaded) fails fast with ``DataNotLoadedError``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Optional, Union

from racecalc.errors import BeyondScopeError, DataNotLoadedError, UnknownDistanceError
from racecalc.services.time_codec import format_time

TableLike = Mapping[int, Mapping[str, float]]

STRATEGY_NEAREST = "nearest"
STRATEGY_FRACTIONAL = "fractional"
STRATEGIES = (STRATEGY_NEAREST, STRATEGY_FRACTIONAL)


def _require_table(table: Optional[TableLike]) -> TableLike:
    if not table:
        raise DataNotLoadedError()
    return table


def _tier_time(table: TableLike, vdot: int, distance: str) -> float:
    try:
        row = table[vdot]
    except KeyError:
        raise BeyondScopeError(
            f"No tier {vdot} in table (tiers {min(table)}-{max(table)}).",
            distance=distance,
            time_seconds=0,
            floor_seconds=0,
            max_vdot=max(table),
        ) from None
    try:
        return row[distance]
    except KeyError:
        raise UnknownDistanceError(distance) from None


def _check_scope(table: TableLike, distance: str, time_in_seconds: float) -> list[int]:
    """Return the tiers carrying ``distance`` in ascending order.

    Tiers may carry a subset of the distances; those without it are skipped.
    Enforces the fastest-tier ceiling.
    """
    vdot_values = sorted(v for v in table if distance in table[v])
    if not vdot_values:
        raise UnknownDistanceError(distance)
    highest_vdot = vdot_values[-1]
    fastest_possible = _tier_time(table, highest_vdot, distance)
    if time_in_seconds < fastest_possible:
        raise BeyondScopeError(
            f"Time of {format_time(time_in_seconds)} is beyond the scope of our predictions "
            f"(faster than VDOT {highest_vdot}). The fastest time we can predict for is "
            f"{format_time(fastest_possible)} for {distance}.",
            distance=distance,
            time_seconds=time_in_seconds,
            floor_seconds=fastest_possible,
            max_vdot=highest_vdot,
        )
    return vdot_values


def calculate_vdot(table: Optional[TableLike], distance: str, time_in_seconds: float) -> int:
    """Return the integer VDOT tier whose time for ``distance`` is closest.

    Raises BeyondScopeError when the time is faster than the fastest tier;
    this is a hard ceiling, not a clamp. Times slower than the slowest tier
    resolve to the slowest tier. On an exact tie between two tiers the lower
    (slower) tier wins.
    """
    table = _require_table(table)
    best_vdot = None
    smallest_diff = math.inf
    for vdot in _check_scope(table, distance, time_in_seconds):
        diff = abs(_tier_time(table, vdot, distance) - time_in_seconds)
        if diff < smallest_diff:
            smallest_diff = diff
            best_vdot = vdot
    return best_vdot


def calculate_fractional_vdot(table: Optional[TableLike], distance: str, time_in_seconds: float) -> Union[int, float]:
    """Return a proportional VDOT between the two tiers bracketing the time.

    Exact tier matches return the integer tier. Times slower than the
    slowest tier return the slowest tier.
    """
    table = _require_table(table)
    vdot_values = _check_scope(table, distance, time_in_seconds)
    if time_in_seconds >= _tier_time(table, vdot_values[0], distance):
        return vdot_values[0]
    for lower, upper in zip(vdot_values, vdot_values[1:]):
        lower_time = _tier_time(table, lower, distance)
        upper_time = _tier_time(table, upper, distance)
        if time_in_seconds == upper_time:
            return upper
        if upper_time < time_in_seconds < lower_time:
            ratio = (lower_time - time_in_seconds) / (lower_time - upper_time)
            return lower + ratio * (upper - lower)
    # Only reachable when the time equals the fastest tier exactly
    return vdot_values[-1]


def resolve_vdot(table: Optional[TableLike], distance: str, time_in_seconds: float, strategy: str = STRATEGY_NEAREST) -> Union[int, float]:
    """Resolve a VDOT with the named strategy ('nearest' or 'fractional')."""
    if strategy == STRATEGY_NEAREST:
        return calculate_vdot(table, distance, time_in_seconds)
    if strategy == STRATEGY_FRACTIONAL:
        return calculate_fractional_vdot(table, distance, time_in_seconds)
    raise ValueError(f"Unknown VDOT strategy: {strategy}. Use one of {list(STRATEGIES)}")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def interpolate_time(table: Optional[TableLike], vdot: float, target_distance: str):
    """Predicted time in seconds for ``target_distance`` at a (fractional) VDOT.

    Whole-number VDOTs return the table value untouched. Otherwise the time
    is linearly interpolated between the floor and ceiling tiers and rounded
    half-up, so it always lies between the two tier times.
    """
    table = _require_table(table)
    lower_vdot = math.floor(vdot)
    upper_vdot = math.ceil(vdot)
    if lower_vdot == upper_vdot:
        return _tier_time(table, lower_vdot, target_distance)

    lower_time = _tier_time(table, lower_vdot, target_distance)
    upper_time = _tier_time(table, upper_vdot, target_distance)
    ratio = vdot - lower_vdot
    return _round_half_up(lower_time - (lower_time - upper_time) * ratio)
