"""Booking confirmation email stub.

Nothing leaves the process: the rendered message is written to the log.
Callers treat the return value as advisory; a failed notification never
undoes a booking.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from hba_backend.domain.models import Booking, Hotel, RoomType
from hba_backend.utils.config import Settings, get_settings
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)

_RULE = "-" * 60


@dataclass(frozen=True)
class GuestContact:
    name: str
    email: str
    phone: str
    special_requests: Optional[str] = None


def format_price(amount: float) -> str:
    return f"${amount:,.2f}"


def format_date(value: date) -> str:
    return value.strftime("%A, %B %d, %Y").replace(" 0", " ")


def calculate_nights(check_in: date, check_out: date) -> int:
    return abs((check_out - check_in).days)


def render_booking_confirmation(
    booking: Booking,
    hotel: Hotel,
    room: RoomType,
    guest: GuestContact,
) -> str:
    nights = calculate_nights(booking.check_in, booking.check_out)
    lines = [
        _RULE,
        f"BOOKING CONFIRMATION - {booking.booking_id.upper()}",
        _RULE,
        "",
        f"Dear {guest.name},",
        "",
        "Thank you for your booking! Your reservation has been confirmed.",
        "",
        "BOOKING DETAILS",
        f"Hotel: {hotel.name}",
        f"Location: {hotel.location}",
        f"Rating: {hotel.rating}/5 stars",
        "",
        "ROOM DETAILS",
        f"Room Type: {room.name}",
        f"Capacity: {room.capacity} guests",
        f"Room Rate: {format_price(room.price)} per night",
        "",
        "STAY DETAILS",
        f"Check-in: {format_date(booking.check_in)}",
        f"Check-out: {format_date(booking.check_out)}",
        f"Nights: {nights}",
        f"Guests: {booking.guest_count}",
        "",
        "PRICING BREAKDOWN",
        f"Room Rate: {format_price(room.price)} x {nights} nights",
        f"Total Amount: {format_price(booking.total_price)}",
        f"Status: {booking.status.value.upper()}",
        "",
        "GUEST INFORMATION",
        f"Email: {guest.email}",
        f"Phone: {guest.phone}",
    ]
    if guest.special_requests:
        lines.append(f"Special Requests: {guest.special_requests}")
    lines.extend(["", "HOTEL AMENITIES"])
    lines.extend(f"- {amenity}" for amenity in hotel.amenities)
    lines.extend(
        [
            "",
            f"Thank you for choosing {hotel.name}!",
            "The Hotel Booking Team",
            _RULE,
        ]
    )
    return "\n".join(lines)


class EmailNotificationService:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def send_booking_confirmation(
        self,
        booking: Booking,
        hotel: Hotel,
        room: RoomType,
        guest: GuestContact,
    ) -> bool:
        if not self._settings.notifications_enabled:
            logger.info("Notifications disabled; skipping confirmation for %s", booking.booking_id)
            return False
        try:
            content = render_booking_confirmation(booking, hotel, room, guest)
            self._deliver(
                recipient=guest.email,
                subject=f"Booking Confirmation - {booking.booking_id.upper()}",
                body=content,
            )
        except Exception:
            logger.exception("Failed to send booking confirmation for %s", booking.booking_id)
            return False
        logger.info("Booking confirmation sent to %s", guest.email)
        return True

    def _deliver(self, *, recipient: str, subject: str, body: str) -> None:
        logger.info(
            "Email from %s to %s | %s\n%s",
            self._settings.email_sender,
            recipient,
            subject,
            body,
        )
