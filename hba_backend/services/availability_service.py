"""Availability oracle: decides whether a room type may be held right now."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from hba_backend.repository.hold_repository import HoldStore
from hba_backend.utils.clock import Clock, utc_now


class AvailabilityOracle:
    """Answers from the store's active view at call time.

    Expired-but-unswept holds never block a room, so correctness does not
    depend on how recently the sweeper ran. Exclusivity is per room type
    only; the requested dates are not compared.
    """

    def __init__(self, store: HoldStore, clock: Optional[Clock] = None) -> None:
        self._store = store
        self._clock = clock or utc_now

    def is_available(
        self,
        hotel_id: str,
        room_type_id: str,
        now: Optional[datetime] = None,
    ) -> bool:
        current = now or self._clock()
        return not any(
            hold.hotel_id == hotel_id and hold.room_type_id == room_type_id
            for hold in self._store.all_active(current)
        )

    def held_room_types(self, now: Optional[datetime] = None) -> set[tuple[str, str]]:
        current = now or self._clock()
        return {
            (hold.hotel_id, hold.room_type_id)
            for hold in self._store.all_active(current)
        }
