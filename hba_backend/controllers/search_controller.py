"""HTTP controller layer for hotel search and catalog lookups."""

from __future__ import annotations

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator

from hba_backend.controllers.dependencies import get_search_service
from hba_backend.domain.models import Hotel, SearchFilters, SearchParams, SortOption
from hba_backend.services.search_service import (
    HotelNotFoundError,
    HotelSearchService,
    SearchValidationError,
)


router = APIRouter(tags=["search"])


class SearchFiltersRequest(BaseModel):
    price_range: tuple[int, int] | None = None
    amenities: list[str] = Field(default_factory=list)
    min_rating: float | None = Field(default=None, ge=0.0, le=5.0)

    @field_validator("price_range")
    @classmethod
    def validate_price_range(cls, value: tuple[int, int] | None) -> tuple[int, int] | None:
        if value is None:
            return None
        low, high = value
        if low < 0 or high < low:
            raise ValueError("price_range must be [min, max] with 0 <= min <= max")
        return value


class SearchRequest(BaseModel):
    location: str = ""
    check_in: date | None = None
    check_out: date | None = None
    guests: int = Field(default=1, ge=1)
    filters: SearchFiltersRequest = Field(default_factory=SearchFiltersRequest)
    sort_by: SortOption = SortOption.RATING_DESC


class RoomTypeResponse(BaseModel):
    room_type_id: str
    name: str
    description: str
    price: int = Field(ge=0)
    capacity: int = Field(ge=1)
    status: str


class HotelResponse(BaseModel):
    hotel_id: str
    name: str
    description: str
    location: str
    rating: float = Field(ge=0.0, le=5.0)
    price: int = Field(ge=0)
    amenities: list[str]
    room_types: list[RoomTypeResponse]


class SearchResponse(BaseModel):
    hotels: list[HotelResponse]
    total: int = Field(ge=0)


class DestinationResponse(BaseModel):
    destination_id: str
    name: str
    country: str
    popularity_score: int


class RecentSearchResponse(BaseModel):
    search_id: str
    location: str
    check_in: date | None
    check_out: date | None
    guests: int
    searched_at: datetime


def to_hotel_response(hotel: Hotel) -> HotelResponse:
    return HotelResponse(
        hotel_id=hotel.hotel_id,
        name=hotel.name,
        description=hotel.description,
        location=hotel.location,
        rating=hotel.rating,
        price=hotel.price,
        amenities=list(hotel.amenities),
        room_types=[
            RoomTypeResponse(
                room_type_id=room.room_type_id,
                name=room.name,
                description=room.description,
                price=room.price,
                capacity=room.capacity,
                status=room.status.value,
            )
            for room in hotel.room_types
        ],
    )


@router.post("/search", response_model=SearchResponse)
async def search_hotels(
    payload: SearchRequest,
    service: HotelSearchService = Depends(get_search_service),
) -> SearchResponse:
    params = SearchParams(
        location=payload.location,
        check_in=payload.check_in,
        check_out=payload.check_out,
        guests=payload.guests,
        filters=SearchFilters(
            price_range=payload.filters.price_range,
            amenities=tuple(payload.filters.amenities),
            min_rating=payload.filters.min_rating,
        ),
    )
    try:
        hotels = service.search(params, sort_by=payload.sort_by)
    except SearchValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return SearchResponse(
        hotels=[to_hotel_response(hotel) for hotel in hotels],
        total=len(hotels),
    )


@router.get("/hotels/popular", response_model=list[HotelResponse])
async def popular_hotels(
    limit: int | None = Query(default=None, ge=1, le=10),
    service: HotelSearchService = Depends(get_search_service),
) -> list[HotelResponse]:
    return [to_hotel_response(hotel) for hotel in service.popular_hotels(limit=limit)]


@router.get("/hotels/{hotel_id}", response_model=HotelResponse)
async def hotel_details(
    hotel_id: str,
    service: HotelSearchService = Depends(get_search_service),
) -> HotelResponse:
    try:
        hotel = service.get_hotel_details(hotel_id)
    except HotelNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return to_hotel_response(hotel)


@router.get("/cities", response_model=list[str])
async def available_cities(
    service: HotelSearchService = Depends(get_search_service),
) -> list[str]:
    return service.available_cities()


@router.get("/destinations", response_model=list[DestinationResponse])
async def destination_suggestions(
    q: str = Query(default="", max_length=100),
    service: HotelSearchService = Depends(get_search_service),
) -> list[DestinationResponse]:
    return [
        DestinationResponse(
            destination_id=item.destination_id,
            name=item.name,
            country=item.country,
            popularity_score=item.popularity_score,
        )
        for item in service.destination_suggestions(q)
    ]


@router.get("/recent_searches", response_model=list[RecentSearchResponse])
async def recent_searches(
    service: HotelSearchService = Depends(get_search_service),
) -> list[RecentSearchResponse]:
    return [
        RecentSearchResponse(
            search_id=item.search_id,
            location=item.location,
            check_in=item.check_in,
            check_out=item.check_out,
            guests=item.guests,
            searched_at=item.searched_at,
        )
        for item in service.recent_searches()
    ]


@router.delete("/recent_searches", status_code=status.HTTP_204_NO_CONTENT)
async def clear_recent_searches(
    service: HotelSearchService = Depends(get_search_service),
) -> None:
    service.clear_recent_searches()
