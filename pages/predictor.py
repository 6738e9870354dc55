from __future__ import annotations

import logging
import time
from typing import Optional

import streamlit as st

from racecalc.config import Settings
from racecalc.forms import predictions_frame, read_time_fields, results_summary
from racecalc.services.analytics import EventTracker
from racecalc.services.distances import distance_label, get_supported_distances
from racecalc.services.race_predictor import PredictionOutcome, predict_race_times
from racecalc.services.vdot_table import VdotTable

logger = logging.getLogger(__name__)

_TIME_KEYS = ("hours_raw", "minutes_raw", "seconds_raw")


def _show_form() -> None:
    st.session_state.view = "form"


def _reset_form(tracker: EventTracker) -> None:
    for key in _TIME_KEYS:
        st.session_state[key] = ""
    st.session_state.pop("outcome", None)
    st.session_state.pop("form_errors", None)
    tracker.track_reset()
    _show_form()


def _on_distance_change(tracker: EventTracker) -> None:
    distance = st.session_state.get("distance")
    if distance:
        tracker.track_distance_selection(distance)


def _on_back(tracker: EventTracker) -> None:
    tracker.track_back_to_form()
    _show_form()


def race_form(table: Optional[VdotTable], settings: Settings, tracker: EventTracker) -> None:
    st.header("Race Predictor")
    st.caption("Enter a recent race result to predict your times at other distances.")

    distances = get_supported_distances(settings.include_legacy_distances)
    st.radio(
        "Recent race distance",
        distances,
        index=None,
        key="distance",
        format_func=distance_label,
        horizontal=True,
        on_change=_on_distance_change,
        args=(tracker,),
    )

    col_h, col_m, col_s = st.columns(3)
    col_h.text_input("Hours", key="hours_raw", max_chars=2, placeholder="00")
    col_m.text_input("Minutes", key="minutes_raw", max_chars=2, placeholder="00")
    col_s.text_input("Seconds", key="seconds_raw", max_chars=2, placeholder="00")

    col_calc, col_reset = st.columns(2)
    calculate = col_calc.button("Calculate", type="primary", disabled=table is None, width="stretch")
    col_reset.button("Reset", on_click=_reset_form, args=(tracker,), width="stretch")

    for message in st.session_state.get("form_errors", []):
        st.error(message)

    if calculate:
        fields = read_time_fields(
            st.session_state.get("hours_raw"),
            st.session_state.get("minutes_raw"),
            st.session_state.get("seconds_raw"),
        )
        outcome = predict_race_times(
            table,
            fields.hours,
            fields.minutes,
            fields.seconds,
            st.session_state.get("distance"),
            strategy=settings.vdot_strategy,
            include_legacy=settings.include_legacy_distances,
            tracker=tracker,
        )
        if not outcome.ok:
            st.session_state.form_errors = list(outcome.errors)
            st.rerun()
        st.session_state.pop("form_errors", None)
        if settings.results_delay_ms > 0:
            with st.spinner("Calculating your predictions..."):
                time.sleep(settings.results_delay_ms / 1000.0)
        st.session_state.outcome = outcome
        st.session_state.view = "results"
        st.rerun()


def race_results(outcome: PredictionOutcome, tracker: EventTracker) -> None:
    summary = results_summary(outcome)
    st.header("Race Predictions")
    if summary:
        headline, vdot_line = summary
        st.write(headline)
        st.subheader(vdot_line)
    st.dataframe(predictions_frame(outcome.predictions), hide_index=True, width="stretch")
    st.button("Back", on_click=_on_back, args=(tracker,))


def predictor_page(table: Optional[VdotTable], settings: Settings, tracker: EventTracker) -> None:
    view = st.session_state.get("view", "form")
    outcome = st.session_state.get("outcome")
    if view == "results" and outcome is not None:
        race_results(outcome, tracker)
    else:
        race_form(table, settings, tracker)
