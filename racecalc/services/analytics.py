"""Event tracking for predictor interactions.

Events are fire-and-forget: a tracker fans each event out to its sinks and
never raises, so an unavailable telemetry backend cannot break a
calculation. The default sink writes events to the log; a Google Analytics 4
Measurement Protocol sink is added when a measurement id and API secret are
configured.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Optional
from uuid import uuid4

import httpx
from pydantic import BaseModel, Field

from racecalc.config import Settings

logger = logging.getLogger(__name__)

GA4_COLLECT_URL = "https://www.google-analytics.com/mp/collect"

VALID_EVENTS = {
    "select_distance",
    "calculate_prediction",
    "calculation_error",
    "form_reset",
    "back_to_form",
    "view_predictions",
}


class AnalyticsEvent(BaseModel):
    name: str = Field(min_length=1, max_length=40)
    params: dict[str, Any] = Field(default_factory=dict)


EventSink = Callable[[AnalyticsEvent], None]


def log_sink(event: AnalyticsEvent) -> None:
    """Write the event to the application log."""
    logger.info("Analytics event: %s", event.name, extra={"ctx_event": event.name, "ctx_params": event.params})


class GA4Sink:
    """Send events to GA4 through the Measurement Protocol."""

    def __init__(self, measurement_id: str, api_secret: str, client_id: Optional[str] = None, timeout: float = 2.0, client: Optional[httpx.Client] = None):
        self.measurement_id = measurement_id
        self.api_secret = api_secret
        self.client_id = client_id or uuid4().hex
        self._client = client or httpx.Client(timeout=timeout)

    def payload(self, event: AnalyticsEvent) -> dict[str, Any]:
        return {"client_id": self.client_id, "events": [{"name": event.name, "params": event.params}]}

    def __call__(self, event: AnalyticsEvent) -> None:
        resp = self._client.post(
            GA4_COLLECT_URL,
            params={"measurement_id": self.measurement_id, "api_secret": self.api_secret},
            json=self.payload(event),
        )
        resp.raise_for_status()

    def close(self) -> None:
        self._client.close()


class EventTracker:
    """Dispatch named events to every registered sink."""

    def __init__(self, sinks: Optional[Iterable[EventSink]] = None, enabled: bool = True, debug: bool = False):
        self.sinks: list[EventSink] = list(sinks) if sinks is not None else [log_sink]
        self.enabled = enabled
        self.debug = debug

    def track(self, event_name: str, **params: Any) -> bool:
        """Send an event to all sinks. Returns True if at least one accepted it."""
        if not self.enabled:
            return False
        if event_name not in VALID_EVENTS:
            logger.warning("Dropping unknown analytics event: %s", event_name)
            return False
        event = AnalyticsEvent(name=event_name, params=params)
        delivered = 0
        for sink in self.sinks:
            try:
                sink(event)
                delivered += 1
            except Exception as e:
                logger.warning("Analytics delivery failed: event=%s sink=%s error=%s", event_name, getattr(sink, "__name__", type(sink).__name__), e)
        if self.debug:
            logger.debug("Analytics event: %s %s delivered=%d", event_name, params, delivered)
        return delivered > 0

    def track_distance_selection(self, distance: str) -> bool:
        return self.track("select_distance", event_category="engagement", event_label=distance, distance=distance)

    def track_calculation(self, distance: str, time_in_seconds: float, vdot: float) -> bool:
        return self.track(
            "calculate_prediction",
            event_category="conversion",
            event_label=distance,
            distance=distance,
            time_seconds=time_in_seconds,
            vdot=vdot,
        )

    def track_error(self, error_type: str, error_message: str) -> bool:
        """Record a calculation error ('validation', 'vdot_exceeded', 'data_unavailable')."""
        return self.track(
            "calculation_error",
            event_category="error",
            event_label=error_type,
            error_type=error_type,
            error_message=error_message,
        )

    def track_reset(self) -> bool:
        return self.track("form_reset", event_category="engagement", event_label="reset_button")

    def track_back_to_form(self) -> bool:
        return self.track("back_to_form", event_category="engagement", event_label="back_button")

    def track_results_view(self, input_distance: str, predictions: list) -> bool:
        return self.track(
            "view_predictions",
            event_category="engagement",
            event_label=input_distance,
            input_distance=input_distance,
            predictions_count=len(predictions),
        )


def build_tracker(settings: Settings) -> EventTracker:
    """Tracker wired from settings: log sink always, GA4 when configured."""
    sinks: list[EventSink] = [log_sink]
    if settings.ga_configured:
        sinks.append(GA4Sink(settings.ga_measurement_id, settings.ga_api_secret, timeout=settings.analytics_timeout_s))
    return EventTracker(sinks=sinks, enabled=settings.analytics_enabled, debug=settings.analytics_debug)
