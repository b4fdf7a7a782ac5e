"""Domain-level validation rules for holds and stays."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


# Upper bound for a single extension request; repeated extensions stay uncapped.
MAX_EXTENSION_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class HoldConfig:
    hold_duration_seconds: int
    hold_extension_seconds: int
    sweep_interval_seconds: float


def validate_hold_config(config: HoldConfig) -> None:
    if config.hold_duration_seconds <= 0:
        raise ValueError("hold_duration_seconds must be > 0")
    if config.hold_extension_seconds <= 0:
        raise ValueError("hold_extension_seconds must be > 0")
    if config.hold_extension_seconds > MAX_EXTENSION_SECONDS:
        raise ValueError(f"hold_extension_seconds must be <= {MAX_EXTENSION_SECONDS}")
    if config.sweep_interval_seconds <= 0:
        raise ValueError("sweep_interval_seconds must be > 0")


def validate_stay(check_in: date, check_out: date, guest_count: int) -> None:
    """Raise ValueError for a stay no room can be held or booked for."""
    if check_out <= check_in:
        raise ValueError("check_out must be after check_in")
    if guest_count < 1:
        raise ValueError("guest_count must be >= 1")
