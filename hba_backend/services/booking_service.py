"""Booking flow orchestration: confirm a stay, then notify the guest."""

from __future__ import annotations

from typing import Optional

from hba_backend.domain.models import Booking, BookingCandidate
from hba_backend.repository.catalog_repository import CatalogRepository
from hba_backend.repository.hold_repository import BookingRepository
from hba_backend.services.hold_service import HoldLifecycleService
from hba_backend.services.notification_service import EmailNotificationService, GuestContact
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)


class BookingNotFoundError(Exception):
    """Raised when a booking id is unknown."""


class BookingService:
    """Confirms bookings through the hold lifecycle.

    A candidate carrying ``hold_id`` must be consumed from that hold; one
    without is booked directly. The confirmation email runs after the
    booking is stored and its outcome only affects the returned flag.
    """

    def __init__(
        self,
        hold_service: HoldLifecycleService,
        bookings: BookingRepository,
        catalog: CatalogRepository,
        notifications: Optional[EmailNotificationService] = None,
    ) -> None:
        self._hold_service = hold_service
        self._bookings = bookings
        self._catalog = catalog
        self._notifications = notifications or EmailNotificationService()

    def create_booking(
        self,
        candidate: BookingCandidate,
        guest: Optional[GuestContact] = None,
    ) -> tuple[Booking, bool]:
        if candidate.hold_id:
            booking = self._hold_service.consume_hold(candidate.hold_id, candidate)
        else:
            booking = self._hold_service.create_direct_booking(candidate)

        notified = False
        if guest is not None:
            notified = self._notify(booking, guest)
        return booking, notified

    def _notify(self, booking: Booking, guest: GuestContact) -> bool:
        hotel = self._catalog.get_hotel(booking.hotel_id)
        room = self._catalog.get_room_type(booking.hotel_id, booking.room_type_id)
        if hotel is None or room is None:
            logger.warning(
                "Skipping confirmation for %s: %s/%s not in catalog",
                booking.booking_id,
                booking.hotel_id,
                booking.room_type_id,
            )
            return False
        try:
            return self._notifications.send_booking_confirmation(booking, hotel, room, guest)
        except Exception:
            logger.exception("Confirmation email failed for %s", booking.booking_id)
            return False

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking '{booking_id}' not found")
        return booking

    def list_bookings(self) -> list[Booking]:
        return self._bookings.list_all()
