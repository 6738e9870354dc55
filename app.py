from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from pages.predictor import predictor_page
from racecalc.config import get_settings
from racecalc.errors import DataNotLoadedError
from racecalc.logging_config import setup_logging
from racecalc.services.analytics import EventTracker, build_tracker
from racecalc.services.vdot_table import VdotTable, load_vdot_table

st.set_page_config(page_title="Race Predictor", layout="centered")

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@st.cache_resource
def _cached_table(path: str) -> VdotTable:
    # Failed loads raise and are not cached, so a refresh retries from scratch
    return load_vdot_table(path or None)


@st.cache_resource
def _cached_tracker() -> EventTracker:
    return build_tracker(settings)


def reference_table() -> Optional[VdotTable]:
    try:
        return _cached_table(settings.vdot_table_path)
    except DataNotLoadedError as e:
        logger.error("Reference table unavailable: %s", e.message)
        st.error(e.message)
        return None


def main() -> None:
    table = reference_table()
    predictor_page(table, settings, _cached_tracker())


main()
