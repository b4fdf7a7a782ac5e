"""Hotel search: location/guest/price/rating/amenity filtering, pricing and sorting."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from threading import RLock
from typing import Optional
from uuid import uuid4

from hba_backend.domain.models import (
    DestinationSuggestion,
    Hotel,
    RecentSearch,
    RoomStatus,
    SearchParams,
    SortOption,
)
from hba_backend.repository.catalog_repository import CatalogRepository
from hba_backend.services.availability_service import AvailabilityOracle
from hba_backend.utils.clock import Clock, utc_now
from hba_backend.utils.config import Settings, get_settings
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)


STATE_ABBREVIATIONS: dict[str, tuple[str, ...]] = {
    "california": ("ca", "calif"),
    "florida": ("fl", "fla"),
    "new york": ("ny",),
    "nevada": ("nv", "nev"),
    "massachusetts": ("ma", "mass"),
    "illinois": ("il", "ill"),
    "colorado": ("co", "colo"),
    "hawaii": ("hi",),
}


class HotelNotFoundError(Exception):
    """Raised when a hotel id is not in the catalog."""


class SearchValidationError(Exception):
    """Raised when search parameters are inconsistent."""


def matches_location(hotel_location: str, query: str) -> bool:
    search_term = query.lower().strip()
    if not search_term:
        return True
    location = hotel_location.lower()
    parts = [part.strip() for part in location.split(",")]
    if search_term in location:
        return True
    if any(search_term in part or part in search_term for part in parts):
        return True
    for full_name, abbreviations in STATE_ABBREVIATIONS.items():
        if full_name in location and (search_term in abbreviations or search_term == full_name):
            return True
    return False


def matches_amenities(hotel_amenities: tuple[str, ...], required: tuple[str, ...]) -> bool:
    lowered = [amenity.lower() for amenity in hotel_amenities]
    for wanted in required:
        needle = wanted.lower()
        if not any(needle in amenity or amenity in needle for amenity in lowered):
            return False
    return True


def price_multiplier(check_in: date, settings: Settings) -> float:
    multiplier = 1.0
    if check_in.weekday() >= 5:
        multiplier *= settings.weekend_price_multiplier
    if check_in.month in settings.peak_season_months:
        multiplier *= settings.peak_season_price_multiplier
    return multiplier


def adjust_prices_for_dates(hotels: list[Hotel], check_in: date, settings: Settings) -> list[Hotel]:
    multiplier = price_multiplier(check_in, settings)
    if multiplier == 1.0:
        return list(hotels)
    return [
        replace(
            hotel,
            price=int(round(hotel.price * multiplier)),
            room_types=tuple(
                replace(room, price=int(round(room.price * multiplier)))
                for room in hotel.room_types
            ),
        )
        for hotel in hotels
    ]


def sort_hotels(hotels: list[Hotel], sort_by: SortOption) -> list[Hotel]:
    if sort_by is SortOption.PRICE_ASC:
        return sorted(hotels, key=lambda hotel: hotel.price)
    if sort_by is SortOption.PRICE_DESC:
        return sorted(hotels, key=lambda hotel: hotel.price, reverse=True)
    if sort_by is SortOption.RATING_ASC:
        return sorted(hotels, key=lambda hotel: hotel.rating)
    if sort_by is SortOption.NAME_ASC:
        return sorted(hotels, key=lambda hotel: hotel.name.lower())
    if sort_by is SortOption.POPULARITY_DESC:
        return sorted(
            hotels,
            key=lambda hotel: hotel.rating * len(hotel.amenities),
            reverse=True,
        )
    return sorted(hotels, key=lambda hotel: hotel.rating, reverse=True)


class HotelSearchService:
    """Filters the catalog for a guest query.

    A hotel only appears when at least one room type seats the party, is
    marked available in the catalog and is not currently held.
    """

    def __init__(
        self,
        catalog: Optional[CatalogRepository] = None,
        oracle: Optional[AvailabilityOracle] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._catalog = catalog or CatalogRepository()
        self._oracle = oracle
        self._clock = clock or utc_now
        self._lock = RLock()
        self._recent_searches: list[RecentSearch] = []

    def _has_bookable_room(self, hotel: Hotel, guests: int, held: set[tuple[str, str]]) -> bool:
        for room in hotel.room_types:
            if room.capacity < guests or room.status is not RoomStatus.AVAILABLE:
                continue
            if (hotel.hotel_id, room.room_type_id) not in held:
                return True
        return False

    def _matches(self, hotel: Hotel, params: SearchParams, held: set[tuple[str, str]]) -> bool:
        if params.location and not matches_location(hotel.location, params.location):
            return False
        if not self._has_bookable_room(hotel, params.guests, held):
            return False
        filters = params.filters
        if filters.price_range is not None:
            min_price, max_price = filters.price_range
            if hotel.price < min_price or hotel.price > max_price:
                return False
        if filters.min_rating and hotel.rating < filters.min_rating:
            return False
        if filters.amenities and not matches_amenities(hotel.amenities, filters.amenities):
            return False
        return True

    def search(
        self,
        params: SearchParams,
        sort_by: SortOption = SortOption.RATING_DESC,
    ) -> list[Hotel]:
        if params.guests < 1:
            raise SearchValidationError("guests must be >= 1")
        if params.check_in and params.check_out and params.check_out <= params.check_in:
            raise SearchValidationError("check_out must be after check_in")

        self.record_search(params)
        # One snapshot per query so every hotel is judged against the same instant.
        held = self._oracle.held_room_types() if self._oracle is not None else set()
        results = [hotel for hotel in self._catalog.list_hotels() if self._matches(hotel, params, held)]
        if params.check_in and params.check_out:
            results = adjust_prices_for_dates(results, params.check_in, self._settings)
        results = sort_hotels(results, sort_by)
        logger.info(
            "Search location=%r guests=%d sort=%s returned %d hotels",
            params.location,
            params.guests,
            sort_by.value,
            len(results),
        )
        return results

    def record_search(self, params: SearchParams) -> RecentSearch:
        entry = RecentSearch(
            search_id=uuid4().hex[:9],
            location=params.location,
            check_in=params.check_in,
            check_out=params.check_out,
            guests=params.guests,
            searched_at=self._clock(),
        )
        with self._lock:
            remaining = [
                search
                for search in self._recent_searches
                if not (
                    search.location == entry.location
                    and search.check_in == entry.check_in
                    and search.check_out == entry.check_out
                    and search.guests == entry.guests
                )
            ]
            self._recent_searches = [entry, *remaining][: self._settings.recent_searches_limit]
        return entry

    def recent_searches(self) -> list[RecentSearch]:
        cutoff = self._clock() - timedelta(days=self._settings.recent_search_max_age_days)
        with self._lock:
            self._recent_searches = [
                search for search in self._recent_searches if search.searched_at > cutoff
            ]
            return list(self._recent_searches)

    def clear_recent_searches(self) -> None:
        with self._lock:
            self._recent_searches = []

    def destination_suggestions(self, query: str) -> list[DestinationSuggestion]:
        needle = query.strip().lower()
        if not needle:
            return []
        matches = [
            destination
            for destination in self._catalog.list_destinations()
            if needle in destination.name.lower() or needle in destination.country.lower()
        ]
        matches.sort(key=lambda destination: destination.popularity_score, reverse=True)
        return matches[: self._settings.destination_suggestions_limit]

    def available_cities(self) -> list[str]:
        cities: list[str] = []
        for hotel in self._catalog.list_hotels():
            city = hotel.location.split(",")[0].strip()
            if city not in cities:
                cities.append(city)
        return cities

    def popular_hotels(self, limit: Optional[int] = None) -> list[Hotel]:
        count = self._settings.popular_hotels_limit if limit is None else limit
        ranked = sorted(self._catalog.list_hotels(), key=lambda hotel: hotel.rating, reverse=True)
        return ranked[:count]

    def get_hotel_details(self, hotel_id: str) -> Hotel:
        hotel = self._catalog.get_hotel(hotel_id)
        if hotel is None:
            raise HotelNotFoundError(f"Hotel with ID {hotel_id} not found")
        return hotel
