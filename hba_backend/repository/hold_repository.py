"""In-memory storage for reservation holds and confirmed bookings."""

from __future__ import annotations

from datetime import datetime
from threading import RLock
from typing import Optional

from hba_backend.domain.models import Booking, Hold
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)


class HoldStore:
    """Authoritative mapping from hold id to hold record.

    A hold counts as active iff ``expires_at > now``; every reader goes
    through ``all_active``/``expired`` so the sweeper and the availability
    check never disagree. Compound read-modify-write sequences must run
    under ``lock``.
    """

    def __init__(self) -> None:
        self._holds: dict[str, Hold] = {}
        self.lock = RLock()

    def put(self, hold: Hold) -> None:
        with self.lock:
            self._holds[hold.hold_id] = hold

    def get(self, hold_id: str) -> Optional[Hold]:
        with self.lock:
            return self._holds.get(hold_id)

    def remove(self, hold_id: str) -> bool:
        with self.lock:
            return self._holds.pop(hold_id, None) is not None

    def all_active(self, now: datetime) -> list[Hold]:
        with self.lock:
            return [hold for hold in self._holds.values() if hold.is_active(now)]

    def expired(self, now: datetime) -> list[Hold]:
        with self.lock:
            return [hold for hold in self._holds.values() if not hold.is_active(now)]

    def count(self) -> int:
        with self.lock:
            return len(self._holds)


class BookingRepository:
    """Keeps confirmed bookings for lookup after the hold is gone."""

    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = RLock()

    def save(self, booking: Booking) -> None:
        with self._lock:
            self._bookings[booking.booking_id] = booking
        logger.info("Booking stored: %s", booking.booking_id)

    def get(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            return self._bookings.get(booking_id)

    def list_all(self) -> list[Booking]:
        with self._lock:
            return sorted(self._bookings.values(), key=lambda item: item.created_at)

    def count(self) -> int:
        with self._lock:
            return len(self._bookings)
