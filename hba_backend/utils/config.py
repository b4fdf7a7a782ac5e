"""Process-wide configuration loaded once from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str

    # HTTP server
    api_host: str
    api_port: int
    open_browser: bool

    # Hold lifecycle
    hold_duration_seconds: int
    hold_extension_seconds: int
    sweep_interval_seconds: float
    sweeper_enabled: bool

    # Search
    recent_searches_limit: int
    recent_search_max_age_days: int
    popular_hotels_limit: int
    destination_suggestions_limit: int
    weekend_price_multiplier: float
    peak_season_price_multiplier: float
    peak_season_months: tuple[int, ...]

    # Notifications
    notifications_enabled: bool
    email_sender: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once; tests derive variants with dataclasses.replace."""
    return Settings(
        app_name=os.getenv("HBA_APP_NAME", "HBA Reservation Hold Service"),
        app_version=os.getenv("HBA_APP_VERSION", "1.0.0"),
        log_level=os.getenv("HBA_LOG_LEVEL", "INFO"),
        api_host=os.getenv("HBA_API_HOST", "127.0.0.1"),
        api_port=_env_int("HBA_API_PORT", 8000),
        open_browser=_env_bool("HBA_OPEN_BROWSER", True),
        hold_duration_seconds=_env_int("HBA_HOLD_DURATION_SECONDS", 600),
        hold_extension_seconds=_env_int("HBA_HOLD_EXTENSION_SECONDS", 300),
        sweep_interval_seconds=_env_float("HBA_SWEEP_INTERVAL_SECONDS", 60.0),
        sweeper_enabled=_env_bool("HBA_SWEEPER_ENABLED", True),
        recent_searches_limit=_env_int("HBA_RECENT_SEARCHES_LIMIT", 5),
        recent_search_max_age_days=_env_int("HBA_RECENT_SEARCH_MAX_AGE_DAYS", 30),
        popular_hotels_limit=_env_int("HBA_POPULAR_HOTELS_LIMIT", 3),
        destination_suggestions_limit=_env_int("HBA_DESTINATION_SUGGESTIONS_LIMIT", 5),
        weekend_price_multiplier=_env_float("HBA_WEEKEND_PRICE_MULTIPLIER", 1.2),
        peak_season_price_multiplier=_env_float("HBA_PEAK_SEASON_PRICE_MULTIPLIER", 1.3),
        peak_season_months=(6, 7, 8, 9),
        notifications_enabled=_env_bool("HBA_NOTIFICATIONS_ENABLED", True),
        email_sender=os.getenv("HBA_EMAIL_SENDER", "noreply@hba-hotels.example"),
    )
