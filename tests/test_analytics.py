"""Tests for predictor event tracking."""

from __future__ import annotations

import json
import logging

import httpx
import pytest
from pydantic import ValidationError

from racecalc.config import Settings
from racecalc.services.analytics import (
    GA4_COLLECT_URL,
    AnalyticsEvent,
    EventTracker,
    GA4Sink,
    VALID_EVENTS,
    build_tracker,
    log_sink,
)


def _tracker(**kwargs):
    events = []
    return EventTracker(sinks=[events.append], **kwargs), events


def test_track_delivers_to_sink():
    tracker, events = _tracker()
    assert tracker.track("form_reset", event_label="reset_button") is True
    assert len(events) == 1
    assert events[0].name == "form_reset"
    assert events[0].params == {"event_label": "reset_button"}


def test_unknown_event_dropped(caplog):
    tracker, events = _tracker()
    with caplog.at_level(logging.WARNING, logger="racecalc.services.analytics"):
        assert tracker.track("page_scroll") is False
    assert events == []
    assert "page_scroll" in caplog.text


def test_disabled_tracker_sends_nothing():
    tracker, events = _tracker(enabled=False)
    assert tracker.track_reset() is False
    assert events == []


def test_failing_sink_is_contained(caplog):
    def broken(event):
        raise ConnectionError("offline")

    events = []
    tracker = EventTracker(sinks=[broken, events.append])
    with caplog.at_level(logging.WARNING, logger="racecalc.services.analytics"):
        assert tracker.track_back_to_form() is True
    assert len(events) == 1
    assert "broken" in caplog.text


def test_all_sinks_failing_returns_false():
    def broken(event):
        raise RuntimeError("boom")

    assert EventTracker(sinks=[broken]).track_reset() is False


def test_default_sink_is_log_sink():
    assert EventTracker().sinks == [log_sink]


def test_helper_payloads():
    tracker, events = _tracker()
    tracker.track_distance_selection("HM")
    tracker.track_calculation("5K", 1200, 50)
    tracker.track_error("vdot_exceeded", "too fast")
    tracker.track_results_view("5K", [1, 2, 3])
    names = [e.name for e in events]
    assert names == ["select_distance", "calculate_prediction", "calculation_error", "view_predictions"]
    assert events[0].params["distance"] == "HM"
    assert events[1].params == {
        "event_category": "conversion",
        "event_label": "5K",
        "distance": "5K",
        "time_seconds": 1200,
        "vdot": 50,
    }
    assert events[2].params["error_type"] == "vdot_exceeded"
    assert events[2].params["event_category"] == "error"
    assert events[3].params["predictions_count"] == 3


def test_every_helper_uses_a_known_event():
    tracker, events = _tracker()
    tracker.track_distance_selection("5K")
    tracker.track_calculation("5K", 1200, 50)
    tracker.track_error("validation", "x")
    tracker.track_reset()
    tracker.track_back_to_form()
    tracker.track_results_view("5K", [])
    assert {e.name for e in events} == VALID_EVENTS


def test_event_name_length_enforced():
    with pytest.raises(ValidationError):
        AnalyticsEvent(name="")
    with pytest.raises(ValidationError):
        AnalyticsEvent(name="x" * 41)


def test_log_sink_writes_context(caplog):
    with caplog.at_level(logging.INFO, logger="racecalc.services.analytics"):
        log_sink(AnalyticsEvent(name="form_reset", params={"event_label": "reset_button"}))
    record = caplog.records[-1]
    assert record.ctx_event == "form_reset"
    assert record.ctx_params == {"event_label": "reset_button"}


# --- GA4 ---

def test_ga4_sink_posts_measurement_protocol_payload():
    captured = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(204)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    sink = GA4Sink("G-TEST", "secret", client_id="client-1", client=client)
    sink(AnalyticsEvent(name="form_reset", params={"event_label": "reset_button"}))
    sink.close()

    request = captured[0]
    assert request.method == "POST"
    assert str(request.url).startswith(GA4_COLLECT_URL)
    assert request.url.params["measurement_id"] == "G-TEST"
    assert request.url.params["api_secret"] == "secret"
    assert json.loads(request.content) == {
        "client_id": "client-1",
        "events": [{"name": "form_reset", "params": {"event_label": "reset_button"}}],
    }


def test_ga4_sink_generates_client_id():
    sink = GA4Sink("G-TEST", "secret", client=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(204))))
    assert sink.client_id
    assert sink.payload(AnalyticsEvent(name="form_reset"))["client_id"] == sink.client_id
    sink.close()


def test_ga4_http_error_contained_by_tracker():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
    sink = GA4Sink("G-TEST", "secret", client=client)
    tracker = EventTracker(sinks=[sink])
    assert tracker.track_reset() is False
    sink.close()


# --- build_tracker ---

def test_build_tracker_log_only():
    tracker = build_tracker(Settings())
    assert tracker.sinks == [log_sink]
    assert tracker.enabled is True


def test_build_tracker_with_ga4():
    settings = Settings(ga_measurement_id="G-TEST", ga_api_secret="secret", analytics_timeout_s=1.0)
    tracker = build_tracker(settings)
    assert len(tracker.sinks) == 2
    assert isinstance(tracker.sinks[1], GA4Sink)
    assert tracker.sinks[1].measurement_id == "G-TEST"
    tracker.sinks[1].close()


def test_build_tracker_respects_flags():
    tracker = build_tracker(Settings(analytics_enabled=False, analytics_debug=True))
    assert tracker.enabled is False
    assert tracker.debug is True
