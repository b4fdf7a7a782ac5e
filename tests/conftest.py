from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from hba_backend.domain.models import Hotel, RoomType
from hba_backend.repository.catalog_repository import CatalogRepository
from hba_backend.utils.config import get_settings


class ManualClock:
    """Clock that only moves when a test advances it."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 5, 20, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def settings():
    get_settings.cache_clear()
    return replace(
        get_settings(),
        hold_duration_seconds=600,
        hold_extension_seconds=300,
        sweep_interval_seconds=60.0,
        sweeper_enabled=False,
        notifications_enabled=True,
    )


@pytest.fixture
def scenario_catalog() -> CatalogRepository:
    hotels = [
        Hotel(
            hotel_id="hotel-1",
            name="Grand City Hotel",
            description="City centre hotel",
            location="New York, New York",
            rating=4.5,
            price=200,
            amenities=("Free WiFi", "Pool", "Gym"),
            room_types=(
                RoomType("room-A", "Standard Room", "Queen bed", 200, 2),
                RoomType("room-B", "Family Suite", "Two bedrooms", 350, 4),
            ),
        ),
        Hotel(
            hotel_id="hotel-2",
            name="Seaside Resort",
            description="Beachfront resort",
            location="Miami, Florida",
            rating=4.8,
            price=300,
            amenities=("Beachfront", "Spa"),
            room_types=(RoomType("room-A", "Ocean Room", "Ocean view", 300, 2),),
        ),
    ]
    return CatalogRepository(hotels=hotels)
