"""Input-layer helpers for the predictor form.

Raw text from the stopwatch fields is parsed (and optionally clamped to the
field's range) here, before anything reaches the validator. Results are
shaped into the DataFrame the page renders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd

from racecalc.services.distances import distance_label
from racecalc.services.race_predictor import PredictionOutcome, PredictionRecord
from racecalc.services.time_codec import clamp_value, format_time, parse_time_input

FIELD_RANGES = {"hours": (0, 23), "minutes": (0, 59), "seconds": (0, 59)}


@dataclass(frozen=True)
class TimeFields:
    hours: int = 0
    minutes: int = 0
    seconds: int = 0


def read_time_fields(raw_hours: object, raw_minutes: object, raw_seconds: object, clamp: bool = True) -> TimeFields:
    """Parse the three stopwatch inputs; blank or junk input reads as 0."""
    values = {
        "hours": parse_time_input(raw_hours),
        "minutes": parse_time_input(raw_minutes),
        "seconds": parse_time_input(raw_seconds),
    }
    if clamp:
        values = {name: clamp_value(v, *FIELD_RANGES[name]) for name, v in values.items()}
    return TimeFields(**values)


def predictions_frame(predictions: Iterable[PredictionRecord]) -> pd.DataFrame:
    """Tabulate predictions as distance / predicted time / seconds columns."""
    rows = [
        {"distance": distance_label(p.distance), "predicted_time": p.time, "seconds": p.seconds}
        for p in predictions
    ]
    return pd.DataFrame(rows, columns=["distance", "predicted_time", "seconds"])


def results_summary(outcome: PredictionOutcome) -> Optional[tuple[str, str]]:
    """Headline and VDOT line for a successful outcome, else None."""
    if not outcome.ok or outcome.time_seconds is None:
        return None
    headline = f"Based on your {distance_label(outcome.distance)} time of {format_time(outcome.time_seconds)}"
    return headline, f"Your VDOT: {float(outcome.vdot):.1f}"
