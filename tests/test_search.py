from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

import pytest

from hba_backend.domain.models import SearchFilters, SearchParams, SortOption
from hba_backend.repository.catalog_repository import CatalogRepository
from hba_backend.repository.hold_repository import HoldStore
from hba_backend.services.availability_service import AvailabilityOracle
from hba_backend.services.hold_service import HoldLifecycleService
from hba_backend.services.search_service import (
    HotelNotFoundError,
    HotelSearchService,
    SearchValidationError,
    matches_location,
)


# 2025-03-04 is a Tuesday outside peak season, so prices stay at catalog rates.
OFF_PEAK_WEEKDAY = date(2025, 3, 4)


def _build(settings, clock, catalog=None):
    catalog = catalog or CatalogRepository()
    store = HoldStore()
    oracle = AvailabilityOracle(store, clock=clock)
    holds = HoldLifecycleService(
        store=store,
        oracle=oracle,
        catalog=catalog,
        settings=settings,
        clock=clock,
    )
    search = HotelSearchService(catalog=catalog, oracle=oracle, settings=settings, clock=clock)
    return search, holds


def _params(location: str = "", guests: int = 2, check_in=OFF_PEAK_WEEKDAY, nights: int = 2, **filters):
    return SearchParams(
        location=location,
        check_in=check_in,
        check_out=check_in + timedelta(days=nights) if check_in else None,
        guests=guests,
        filters=SearchFilters(**filters),
    )


@pytest.mark.parametrize(
    ("location", "query", "expected"),
    [
        ("Miami, Florida", "miami", True),
        ("Miami, Florida", "FL", True),
        ("Miami, Florida", "florida", True),
        ("Aspen, Colorado", "colo", True),
        ("Boston, Massachusetts", "mass", True),
        ("Chicago, Illinois", "Denver", False),
        ("Las Vegas, Nevada", "hawaii", False),
        ("Las Vegas, Nevada", "", True),
    ],
)
def test_matches_location(location, query, expected):
    assert matches_location(location, query) is expected


def test_search_by_state_and_default_rating_sort(settings, clock):
    search, _ = _build(settings, clock)
    results = search.search(_params("Florida"))
    assert [hotel.hotel_id for hotel in results] == ["hotel-9", "hotel-2"]


def test_guest_capacity_filters_hotels(settings, clock):
    search, _ = _build(settings, clock)
    results = search.search(_params(guests=7))
    assert [hotel.hotel_id for hotel in results] == ["hotel-9"]


def test_held_only_fitting_room_removes_hotel(settings, clock):
    search, holds = _build(settings, clock)
    holds.create_hold("hotel-9", "presidential-1", OFF_PEAK_WEEKDAY, OFF_PEAK_WEEKDAY + timedelta(days=2), 7, 2598)

    assert search.search(_params(guests=7)) == []
    # Smaller parties still see the hotel through its other room type.
    assert "hotel-9" in [hotel.hotel_id for hotel in search.search(_params(guests=2))]


def test_held_room_reappears_once_hold_lapses(settings, clock):
    search, holds = _build(settings, clock)
    holds.create_hold("hotel-3", "basic-room-2", OFF_PEAK_WEEKDAY, OFF_PEAK_WEEKDAY + timedelta(days=1), 2, 249)
    assert search.search(_params("Aspen")) == []

    clock.advance(settings.hold_duration_seconds)
    assert [hotel.hotel_id for hotel in search.search(_params("Aspen"))] == ["hotel-3"]


def test_price_rating_and_amenity_filters(settings, clock):
    search, _ = _build(settings, clock)

    priced = search.search(_params(price_range=(100, 200)))
    assert {hotel.hotel_id for hotel in priced} == {"hotel-1", "hotel-4", "hotel-8"}

    rated = search.search(_params(min_rating=4.7))
    assert {hotel.hotel_id for hotel in rated} == {"hotel-2", "hotel-5", "hotel-9"}

    spa_beach = search.search(_params(amenities=("spa", "beachfront")))
    assert {hotel.hotel_id for hotel in spa_beach} == {"hotel-2", "hotel-5", "hotel-7", "hotel-9"}


def test_weekend_peak_season_pricing(settings, clock):
    search, _ = _build(settings, clock)
    # 2025-07-05 is a Saturday in peak season: 1.2 * 1.3 = 1.56.
    results = search.search(_params("Las Vegas", check_in=date(2025, 7, 5)))

    assert len(results) == 1
    vegas = results[0]
    assert vegas.price == round(129 * 1.56)
    assert vegas.room_types[0].price == round(129 * 1.56)
    assert vegas.room_types[1].price == round(299 * 1.56)


def test_no_price_adjustment_without_dates(settings, clock):
    search, _ = _build(settings, clock)
    results = search.search(_params("Las Vegas", check_in=None))
    assert results[0].price == 129


@pytest.mark.parametrize(
    ("sort_by", "expected_first"),
    [
        (SortOption.PRICE_ASC, "hotel-8"),
        (SortOption.PRICE_DESC, "hotel-9"),
        (SortOption.RATING_ASC, "hotel-8"),
        (SortOption.RATING_DESC, "hotel-9"),
        (SortOption.NAME_ASC, "hotel-6"),
        (SortOption.POPULARITY_DESC, "hotel-9"),
    ],
)
def test_sort_options(settings, clock, sort_by, expected_first):
    search, _ = _build(settings, clock)
    results = search.search(_params(), sort_by=sort_by)
    assert len(results) == 10
    assert results[0].hotel_id == expected_first


def test_search_rejects_inverted_dates(settings, clock):
    search, _ = _build(settings, clock)
    with pytest.raises(SearchValidationError):
        search.search(_params(nights=0))


def test_recent_searches_dedupe_cap_and_age(settings, clock):
    search, _ = _build(settings, clock)
    for city in ["Miami", "Aspen", "Chicago", "Boston", "Maui", "Malibu"]:
        search.search(_params(city))
    search.search(_params("Aspen"))

    recent = [item.location for item in search.recent_searches()]
    assert recent == ["Aspen", "Malibu", "Maui", "Boston", "Chicago"]

    clock.advance(timedelta(days=31).total_seconds())
    assert search.recent_searches() == []


def test_destination_suggestions_and_cities(settings, clock):
    search, _ = _build(settings, clock)

    suggestions = search.destination_suggestions("new")
    assert [item.destination_id for item in suggestions] == ["new-york", "new-york-state"]
    assert len(search.destination_suggestions("united")) == settings.destination_suggestions_limit
    assert search.destination_suggestions("  ") == []

    cities = search.available_cities()
    assert cities[0] == "New York"
    assert len(cities) == 10


def test_popular_hotels_and_details(settings, clock):
    search, _ = _build(settings, clock)
    assert [hotel.hotel_id for hotel in search.popular_hotels()] == ["hotel-9", "hotel-2", "hotel-5"]
    assert search.get_hotel_details("hotel-4").name == "Metropolitan Business Center"
    with pytest.raises(HotelNotFoundError):
        search.get_hotel_details("hotel-404")


def test_recent_search_limit_follows_settings(settings, clock):
    search, _ = _build(replace(settings, recent_searches_limit=2), clock)
    for city in ["Miami", "Aspen", "Chicago"]:
        search.search(_params(city))
    assert [item.location for item in search.recent_searches()] == ["Chicago", "Aspen"]
