"""Reservation hold lifecycle: create, extend, release, query and consume."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, Optional
from uuid import uuid4

from hba_backend.domain.constraints import (
    MAX_EXTENSION_SECONDS,
    HoldConfig,
    validate_hold_config,
    validate_stay,
)
from hba_backend.domain.models import (
    Booking,
    BookingCandidate,
    BookingStatus,
    EvictionNotice,
    Hold,
)
from hba_backend.repository.catalog_repository import CatalogRepository
from hba_backend.repository.hold_repository import BookingRepository, HoldStore
from hba_backend.services.availability_service import AvailabilityOracle
from hba_backend.utils.clock import Clock, utc_now
from hba_backend.utils.config import Settings, get_settings
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)

EvictionListener = Callable[[EvictionNotice], None]


class HoldError(Exception):
    """Base failure for hold lifecycle operations."""


class HoldValidationError(HoldError):
    """Raised when caller input can never produce a valid hold."""


class RoomNotFoundError(HoldValidationError):
    """Raised when the hotel or room type is not in the catalog."""


class RoomUnavailableError(HoldError):
    """Raised when the room type is currently held by someone else."""


class HoldNotFoundError(HoldError):
    """Raised when no active hold exists for the given id."""


class HoldExpiredError(HoldNotFoundError):
    """Raised when the hold existed but its deadline has passed.

    ``notice`` describes the eviction performed when the lapse was observed.
    """

    def __init__(self, message: str, notice: Optional[EvictionNotice] = None) -> None:
        super().__init__(message)
        self.notice = notice


class HoldMismatchError(HoldError):
    """Raised when a booking does not match the parameters that were held."""


def hold_config_from_settings(settings: Settings) -> HoldConfig:
    return HoldConfig(
        hold_duration_seconds=settings.hold_duration_seconds,
        hold_extension_seconds=settings.hold_extension_seconds,
        sweep_interval_seconds=settings.sweep_interval_seconds,
    )


def _generate_hold_id() -> str:
    return uuid4().hex


def _generate_holder_id() -> str:
    return f"user_{uuid4().hex[:9]}"


def _generate_booking_id() -> str:
    return f"booking-{uuid4().hex[:12]}"


class HoldLifecycleService:
    """Owns every transition of a hold.

    State per id: absent -> held -> (extended)* -> released | consumed | expired.
    All check-then-mutate sequences run under the store lock, which the
    sweeper shares.
    """

    def __init__(
        self,
        store: Optional[HoldStore] = None,
        oracle: Optional[AvailabilityOracle] = None,
        catalog: Optional[CatalogRepository] = None,
        bookings: Optional[BookingRepository] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._config = hold_config_from_settings(self._settings)
        validate_hold_config(self._config)
        self._clock = clock or utc_now
        self._store = store or HoldStore()
        self._oracle = oracle or AvailabilityOracle(self._store, clock=self._clock)
        self._catalog = catalog
        self._bookings = bookings
        self._eviction_listeners: list[EvictionListener] = []

    @property
    def store(self) -> HoldStore:
        return self._store

    @property
    def oracle(self) -> AvailabilityOracle:
        return self._oracle

    def add_eviction_listener(self, listener: EvictionListener) -> None:
        """Receive a notice whenever an operation finds and evicts a lapsed hold."""
        self._eviction_listeners.append(listener)

    def _publish_eviction(self, notice: Optional[EvictionNotice]) -> None:
        if notice is None:
            return
        for listener in list(self._eviction_listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception("Eviction listener failed for hold %s", notice.hold_id)

    def _validate_room(self, hotel_id: str, room_type_id: str) -> None:
        if self._catalog is None:
            return
        if self._catalog.get_hotel(hotel_id) is None:
            raise RoomNotFoundError(f"Hotel '{hotel_id}' not found")
        if not self._catalog.room_exists(hotel_id, room_type_id):
            raise RoomNotFoundError(
                f"Room type '{room_type_id}' not found at hotel '{hotel_id}'"
            )

    def _require_active(self, hold_id: str, now: datetime) -> Hold:
        """Return the active hold or evict the lapsed record and raise.

        Caller must hold the store lock.
        """
        hold = self._store.get(hold_id)
        if hold is None:
            raise HoldNotFoundError(f"Hold '{hold_id}' not found")
        if not hold.is_active(now):
            self._store.remove(hold_id)
            logger.info("Hold %s observed expired at %s; evicted", hold_id, now.isoformat())
            notice = EvictionNotice(
                hold_id=hold.hold_id,
                hotel_id=hold.hotel_id,
                room_type_id=hold.room_type_id,
                expired_at=hold.expires_at,
                evicted_at=now,
            )
            raise HoldExpiredError(f"Hold '{hold_id}' has expired", notice=notice)
        return hold

    def create_hold(
        self,
        hotel_id: str,
        room_type_id: str,
        check_in: date,
        check_out: date,
        guest_count: int,
        total_price: float,
    ) -> Hold:
        try:
            validate_stay(check_in, check_out, guest_count)
        except ValueError as exc:
            raise HoldValidationError(str(exc)) from exc
        if total_price < 0:
            raise HoldValidationError("total_price must be >= 0")
        self._validate_room(hotel_id, room_type_id)

        with self._store.lock:
            now = self._clock()
            if not self._oracle.is_available(hotel_id, room_type_id, now=now):
                raise RoomUnavailableError(
                    f"Room type '{room_type_id}' at hotel '{hotel_id}' is no longer available"
                )
            hold = Hold(
                hold_id=_generate_hold_id(),
                hotel_id=hotel_id,
                room_type_id=room_type_id,
                holder_id=_generate_holder_id(),
                check_in=check_in,
                check_out=check_out,
                guest_count=guest_count,
                total_price=float(total_price),
                created_at=now,
                expires_at=now + timedelta(seconds=self._config.hold_duration_seconds),
            )
            self._store.put(hold)

        logger.info(
            "Hold created: %s for %s/%s, expires at %s",
            hold.hold_id,
            hotel_id,
            room_type_id,
            hold.expires_at.isoformat(),
        )
        return hold

    def extend_hold(self, hold_id: str, additional_seconds: Optional[int] = None) -> Hold:
        seconds = (
            self._config.hold_extension_seconds
            if additional_seconds is None
            else additional_seconds
        )
        if seconds <= 0:
            raise HoldValidationError("additional_seconds must be > 0")
        if seconds > MAX_EXTENSION_SECONDS:
            raise HoldValidationError(
                f"additional_seconds must be <= {MAX_EXTENSION_SECONDS}"
            )

        try:
            with self._store.lock:
                hold = self._require_active(hold_id, self._clock())
                try:
                    new_deadline = hold.expires_at + timedelta(seconds=seconds)
                except OverflowError as exc:
                    raise HoldValidationError(
                        f"Hold '{hold_id}' cannot be extended past {hold.expires_at.isoformat()}"
                    ) from exc
                extended = replace(hold, expires_at=new_deadline)
                self._store.put(extended)
        except HoldExpiredError as exc:
            self._publish_eviction(exc.notice)
            raise

        logger.info("Hold extended: %s until %s", hold_id, extended.expires_at.isoformat())
        return extended

    def release_hold(self, hold_id: str) -> bool:
        released = self._store.remove(hold_id)
        if released:
            logger.info("Hold released: %s", hold_id)
        else:
            logger.warning("Attempted to release non-existent hold: %s", hold_id)
        return released

    def get_hold(self, hold_id: str, now: Optional[datetime] = None) -> Optional[Hold]:
        hold = self._store.get(hold_id)
        if hold is None or not hold.is_active(now or self._clock()):
            return None
        return hold

    def query_remaining(self, hold_id: str, now: Optional[datetime] = None) -> int:
        hold = self._store.get(hold_id)
        if hold is None:
            return 0
        return hold.remaining_seconds(now or self._clock())

    def is_available(self, hotel_id: str, room_type_id: str) -> bool:
        return self._oracle.is_available(hotel_id, room_type_id)

    def consume_hold(self, hold_id: str, candidate: BookingCandidate) -> Booking:
        try:
            booking = self._consume_locked(hold_id, candidate)
        except HoldExpiredError as exc:
            self._publish_eviction(exc.notice)
            raise
        logger.info("Booking %s confirmed; hold %s consumed", booking.booking_id, hold_id)
        return booking

    def _consume_locked(self, hold_id: str, candidate: BookingCandidate) -> Booking:
        with self._store.lock:
            now = self._clock()
            hold = self._require_active(hold_id, now)
            mismatched = [
                name
                for name, held_value, proposed_value in (
                    ("hotel_id", hold.hotel_id, candidate.hotel_id),
                    ("room_type_id", hold.room_type_id, candidate.room_type_id),
                    ("check_in", hold.check_in, candidate.check_in),
                    ("check_out", hold.check_out, candidate.check_out),
                    ("guest_count", hold.guest_count, candidate.guest_count),
                )
                if held_value != proposed_value
            ]
            if mismatched:
                raise HoldMismatchError(
                    "Booking details do not match the hold: " + ", ".join(mismatched)
                )

            booking = Booking(
                booking_id=_generate_booking_id(),
                hotel_id=hold.hotel_id,
                room_type_id=hold.room_type_id,
                check_in=hold.check_in,
                check_out=hold.check_out,
                guest_count=hold.guest_count,
                total_price=hold.total_price,
                status=BookingStatus.CONFIRMED,
                created_at=now,
                hold_id=hold.hold_id,
            )
            self._store.remove(hold_id)
            if self._bookings is not None:
                self._bookings.save(booking)
        return booking

    def create_direct_booking(self, candidate: BookingCandidate) -> Booking:
        """Confirm a booking that never went through a hold."""
        try:
            validate_stay(candidate.check_in, candidate.check_out, candidate.guest_count)
        except ValueError as exc:
            raise HoldValidationError(str(exc)) from exc
        if candidate.total_price < 0:
            raise HoldValidationError("total_price must be >= 0")
        self._validate_room(candidate.hotel_id, candidate.room_type_id)

        with self._store.lock:
            now = self._clock()
            if not self._oracle.is_available(candidate.hotel_id, candidate.room_type_id, now=now):
                raise RoomUnavailableError(
                    f"Room type '{candidate.room_type_id}' at hotel "
                    f"'{candidate.hotel_id}' is currently held"
                )
            booking = Booking(
                booking_id=_generate_booking_id(),
                hotel_id=candidate.hotel_id,
                room_type_id=candidate.room_type_id,
                check_in=candidate.check_in,
                check_out=candidate.check_out,
                guest_count=candidate.guest_count,
                total_price=float(candidate.total_price),
                status=BookingStatus.CONFIRMED,
                created_at=now,
            )
            if self._bookings is not None:
                self._bookings.save(booking)
        logger.info("Booking %s confirmed without hold", booking.booking_id)
        return booking
