"""Application configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from racecalc.services.vdot import STRATEGIES, STRATEGY_NEAREST

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"

    # Reference table and prediction behaviour
    vdot_table_path: str = ""
    vdot_strategy: str = "nearest"
    include_legacy_distances: bool = False
    results_delay_ms: int = 0

    # Analytics
    analytics_enabled: bool = True
    analytics_debug: bool = False
    ga_measurement_id: str = ""
    ga_api_secret: str = ""
    analytics_timeout_s: float = 2.0

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def ga_configured(self) -> bool:
        return bool(self.ga_measurement_id and self.ga_api_secret)


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
        "analytics_debug": True,
        "results_delay_ms": 0,
    },
    "staging": {
        "log_level": "INFO",
        "analytics_debug": False,
        "results_delay_ms": 500,
    },
    "production": {
        "log_level": "WARNING",
        "analytics_debug": False,
        "results_delay_ms": 2000,
    },
}

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _vdot_strategy() -> str:
    strategy = os.getenv("VDOT_STRATEGY", STRATEGY_NEAREST).strip().lower()
    if strategy not in STRATEGIES:
        logger.warning("Unknown VDOT_STRATEGY %r, using %r", strategy, STRATEGY_NEAREST)
        return STRATEGY_NEAREST
    return strategy


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        vdot_table_path=os.getenv("VDOT_TABLE_PATH", ""),
        vdot_strategy=_vdot_strategy(),
        include_legacy_distances=_env_flag("INCLUDE_LEGACY_DISTANCES", False),
        results_delay_ms=int(os.getenv("RESULTS_DELAY_MS", str(profile.get("results_delay_ms", 0)))),
        analytics_enabled=_env_flag("ANALYTICS_ENABLED", True),
        analytics_debug=_env_flag("ANALYTICS_DEBUG", profile.get("analytics_debug", False)),
        ga_measurement_id=os.getenv("GA_MEASUREMENT_ID", ""),
        ga_api_secret=os.getenv("GA_API_SECRET", ""),
        analytics_timeout_s=float(os.getenv("ANALYTICS_TIMEOUT_S", "2.0")),
    )
