"""Prediction error types.

Every failure the prediction pipeline can raise derives from
``PredictionError`` and carries a ``category`` that the pipeline and the
event tracker report:

- data_unavailable: the reference table is missing or failed to load
- vdot_exceeded: the observed time is faster than the fastest table tier
- validation: a distance the table does not carry was requested

Input validation problems are not exceptions; see ``racecalc.validators``.
"""

from __future__ import annotations


class PredictionError(RuntimeError):
    """Base class for pipeline failures.

    Attributes:
        category: Error category reported to callers and telemetry.
    """

    category = "prediction"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DataNotLoadedError(PredictionError):
    """Raised when the VDOT reference table is absent or unreadable."""

    category = "data_unavailable"

    def __init__(self, message: str = "VDOT data not loaded"):
        super().__init__(message)


class BeyondScopeError(PredictionError):
    """Raised when a performance is faster than the fastest table tier.

    Attributes:
        distance: Distance key of the offending performance.
        time_seconds: The observed time.
        floor_seconds: The fastest time the table carries for ``distance``.
        max_vdot: The fastest tier in the table.
    """

    category = "vdot_exceeded"

    def __init__(self, message: str, *, distance: str, time_seconds: float, floor_seconds: float, max_vdot: int):
        self.distance = distance
        self.time_seconds = time_seconds
        self.floor_seconds = floor_seconds
        self.max_vdot = max_vdot
        super().__init__(message)


class UnknownDistanceError(PredictionError):
    """Raised when a distance key is not present in the reference table."""

    category = "validation"

    def __init__(self, distance: object):
        self.distance = distance
        super().__init__(f"Unknown distance: {distance!r}")
