"""Race time prediction from a single known performance.

A recent race result is resolved to a VDOT tier and projected onto every
other supported distance via the reference table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from racecalc.errors import PredictionError
from racecalc.services.analytics import EventTracker
from racecalc.services.distances import get_supported_distances
from racecalc.services.time_codec import format_time, time_to_seconds
from racecalc.services.vdot import STRATEGY_NEAREST, TableLike, interpolate_time, resolve_vdot
from racecalc.validators import coerce_number, validate_inputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PredictionRecord:
    """Predicted finish time for one target distance."""
    distance: str
    time: str
    seconds: int


@dataclass(frozen=True)
class PredictionOutcome:
    """Result of one predict cycle, returned by value.

    Exactly one of ``predictions`` or ``errors`` is populated.
    ``error_category`` is None on success, otherwise 'validation',
    'vdot_exceeded' or 'data_unavailable'.
    """
    distance: Optional[str]
    time_seconds: Optional[float] = None
    vdot: Optional[Union[int, float]] = None
    predictions: tuple[PredictionRecord, ...] = ()
    errors: tuple[str, ...] = ()
    error_category: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_category is None


def generate_predictions(
    table: Optional[TableLike],
    vdot: Union[int, float],
    exclude_distance: Optional[str],
    *,
    include_legacy: bool = False,
) -> list[PredictionRecord]:
    """Predict times for every catalog distance except ``exclude_distance``.

    Records follow the catalog's fixed order.
    """
    predictions = []
    for distance in get_supported_distances(include_legacy):
        if distance == exclude_distance:
            continue
        predicted_seconds = interpolate_time(table, vdot, distance)
        predictions.append(PredictionRecord(
            distance=distance,
            time=format_time(predicted_seconds),
            seconds=int(predicted_seconds),
        ))
    return predictions


def _total_seconds(hours, minutes, seconds) -> Union[int, float]:
    total = time_to_seconds(coerce_number(hours), coerce_number(minutes), coerce_number(seconds))
    return int(total) if float(total).is_integer() else total


def predict_race_times(
    table: Optional[TableLike],
    hours,
    minutes,
    seconds,
    distance: Optional[str],
    *,
    strategy: str = STRATEGY_NEAREST,
    include_legacy: bool = False,
    tracker: Optional[EventTracker] = None,
) -> PredictionOutcome:
    """Run validate -> resolve -> predict for one race result.

    Never raises for expected conditions: validation problems, out-of-scope
    times and a missing table are all reported on the returned outcome.
    """
    errors = validate_inputs(hours, minutes, seconds, distance)
    if errors:
        logger.info("Prediction rejected by validation: %s", errors)
        if tracker is not None:
            tracker.track_error("validation", "; ".join(errors))
        return PredictionOutcome(distance=distance, errors=tuple(errors), error_category="validation")

    total_seconds = _total_seconds(hours, minutes, seconds)
    try:
        vdot = resolve_vdot(table, distance, total_seconds, strategy)
        predictions = generate_predictions(table, vdot, distance, include_legacy=include_legacy)
    except PredictionError as e:
        logger.warning("Prediction failed: category=%s distance=%s error=%s", e.category, distance, e.message)
        if tracker is not None:
            tracker.track_error(e.category, e.message)
        return PredictionOutcome(
            distance=distance,
            time_seconds=total_seconds,
            errors=(e.message,),
            error_category=e.category,
        )

    logger.info("Prediction computed: distance=%s time=%s vdot=%s", distance, format_time(total_seconds), vdot)
    if tracker is not None:
        tracker.track_calculation(distance, total_seconds, vdot)
        tracker.track_results_view(distance, predictions)
    return PredictionOutcome(
        distance=distance,
        time_seconds=total_seconds,
        vdot=vdot,
        predictions=tuple(predictions),
    )
