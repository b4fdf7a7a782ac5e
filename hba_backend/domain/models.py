"""Domain models for the hotel catalog, reservation holds and bookings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class SortOption(str, Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING_DESC = "rating-desc"
    RATING_ASC = "rating-asc"
    NAME_ASC = "name-asc"
    POPULARITY_DESC = "popularity-desc"


@dataclass(frozen=True)
class RoomType:
    room_type_id: str
    name: str
    description: str
    price: int
    capacity: int
    status: RoomStatus = RoomStatus.AVAILABLE


@dataclass(frozen=True)
class Hotel:
    hotel_id: str
    name: str
    description: str
    location: str
    rating: float
    price: int
    amenities: tuple[str, ...]
    room_types: tuple[RoomType, ...]

    def room_type(self, room_type_id: str) -> Optional[RoomType]:
        for room in self.room_types:
            if room.room_type_id == room_type_id:
                return room
        return None


@dataclass(frozen=True)
class Hold:
    """Temporary exclusive claim on a room type.

    Only ``expires_at`` ever changes, and only by replacing the record in the
    store with a later deadline.
    """

    hold_id: str
    hotel_id: str
    room_type_id: str
    holder_id: str
    check_in: date
    check_out: date
    guest_count: int
    total_price: float
    created_at: datetime
    expires_at: datetime

    def is_active(self, now: datetime) -> bool:
        return self.expires_at > now

    def remaining_seconds(self, now: datetime) -> int:
        remaining = (self.expires_at - now).total_seconds()
        if remaining <= 0:
            return 0
        return int(remaining)


@dataclass(frozen=True)
class BookingCandidate:
    """Booking parameters proposed by the booking flow."""

    hotel_id: str
    room_type_id: str
    check_in: date
    check_out: date
    guest_count: int
    total_price: float
    hold_id: Optional[str] = None


@dataclass(frozen=True)
class Booking:
    booking_id: str
    hotel_id: str
    room_type_id: str
    check_in: date
    check_out: date
    guest_count: int
    total_price: float
    status: BookingStatus
    created_at: datetime
    hold_id: Optional[str] = None

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


@dataclass(frozen=True)
class EvictionNotice:
    hold_id: str
    hotel_id: str
    room_type_id: str
    expired_at: datetime
    evicted_at: datetime


@dataclass(frozen=True)
class SearchFilters:
    price_range: Optional[tuple[int, int]] = None
    amenities: tuple[str, ...] = ()
    min_rating: Optional[float] = None


@dataclass(frozen=True)
class SearchParams:
    location: str
    check_in: Optional[date]
    check_out: Optional[date]
    guests: int
    filters: SearchFilters = field(default_factory=SearchFilters)


@dataclass(frozen=True)
class RecentSearch:
    search_id: str
    location: str
    check_in: Optional[date]
    check_out: Optional[date]
    guests: int
    searched_at: datetime


@dataclass(frozen=True)
class DestinationSuggestion:
    destination_id: str
    name: str
    country: str
    popularity_score: int
