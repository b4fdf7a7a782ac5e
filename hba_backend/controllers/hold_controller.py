"""HTTP controller layer for reservation holds and room availability."""

from __future__ import annotations

from datetime import date, datetime
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator

from hba_backend.controllers.dependencies import get_hold_service
from hba_backend.domain.constraints import MAX_EXTENSION_SECONDS
from hba_backend.domain.models import Booking, BookingCandidate, Hold
from hba_backend.services.hold_service import (
    HoldExpiredError,
    HoldLifecycleService,
    HoldMismatchError,
    HoldNotFoundError,
    HoldValidationError,
    RoomNotFoundError,
    RoomUnavailableError,
)
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["holds"])


class CreateHoldRequest(BaseModel):
    """Input DTO validated before entering service layer."""

    hotel_id: str = Field(min_length=1)
    room_type_id: str = Field(min_length=1)
    check_in: date
    check_out: date
    guest_count: int = Field(ge=1)
    total_price: float = Field(ge=0.0)

    @model_validator(mode="after")
    def validate_date_range(self) -> "CreateHoldRequest":
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class ExtendHoldRequest(BaseModel):
    additional_seconds: int | None = Field(default=None, gt=0, le=MAX_EXTENSION_SECONDS)


class HoldResponse(BaseModel):
    hold_id: str
    hotel_id: str
    room_type_id: str
    holder_id: str
    check_in: date
    check_out: date
    guest_count: int = Field(ge=1)
    total_price: float = Field(ge=0.0)
    created_at: datetime
    expires_at: datetime
    remaining_seconds: int = Field(ge=0)


class ReleaseHoldResponse(BaseModel):
    hold_id: str
    released: bool


class RemainingResponse(BaseModel):
    hold_id: str
    remaining_seconds: int = Field(ge=0)


class AvailabilityResponse(BaseModel):
    hotel_id: str
    room_type_id: str
    available: bool


class ConsumeHoldRequest(BaseModel):
    hotel_id: str = Field(min_length=1)
    room_type_id: str = Field(min_length=1)
    check_in: date
    check_out: date
    guest_count: int = Field(ge=1)
    total_price: float = Field(default=0.0, ge=0.0)


class BookingResponse(BaseModel):
    booking_id: str
    hotel_id: str
    room_type_id: str
    check_in: date
    check_out: date
    guest_count: int
    total_price: float
    status: str
    created_at: datetime
    hold_id: str | None = None
    nights: int = Field(ge=0)


def to_hold_response(hold: Hold, service: HoldLifecycleService) -> HoldResponse:
    return HoldResponse(
        hold_id=hold.hold_id,
        hotel_id=hold.hotel_id,
        room_type_id=hold.room_type_id,
        holder_id=hold.holder_id,
        check_in=hold.check_in,
        check_out=hold.check_out,
        guest_count=hold.guest_count,
        total_price=hold.total_price,
        created_at=hold.created_at,
        expires_at=hold.expires_at,
        remaining_seconds=service.query_remaining(hold.hold_id),
    )


def to_booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        booking_id=booking.booking_id,
        hotel_id=booking.hotel_id,
        room_type_id=booking.room_type_id,
        check_in=booking.check_in,
        check_out=booking.check_out,
        guest_count=booking.guest_count,
        total_price=booking.total_price,
        status=booking.status.value,
        created_at=booking.created_at,
        hold_id=booking.hold_id,
        nights=booking.nights,
    )


def raise_for_hold_error(exc: Exception) -> NoReturn:
    """Translate a lifecycle failure into the matching HTTP status."""
    if isinstance(exc, RoomNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, HoldValidationError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, (RoomUnavailableError, HoldMismatchError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, HoldExpiredError):
        code = status.HTTP_410_GONE
    elif isinstance(exc, HoldNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    else:
        raise exc
    raise HTTPException(status_code=code, detail=str(exc)) from exc


@router.post(
    "/holds",
    response_model=HoldResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_hold(
    payload: CreateHoldRequest,
    service: HoldLifecycleService = Depends(get_hold_service),
) -> HoldResponse:
    try:
        hold = service.create_hold(
            hotel_id=payload.hotel_id,
            room_type_id=payload.room_type_id,
            check_in=payload.check_in,
            check_out=payload.check_out,
            guest_count=payload.guest_count,
            total_price=payload.total_price,
        )
    except (HoldValidationError, RoomUnavailableError) as exc:
        raise_for_hold_error(exc)
    return to_hold_response(hold, service)


@router.get("/holds/{hold_id}", response_model=HoldResponse)
async def get_hold(
    hold_id: str,
    service: HoldLifecycleService = Depends(get_hold_service),
) -> HoldResponse:
    hold = service.get_hold(hold_id)
    if hold is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Hold '{hold_id}' not found or has expired",
        )
    return to_hold_response(hold, service)


@router.post("/holds/{hold_id}/extend", response_model=HoldResponse)
async def extend_hold(
    hold_id: str,
    payload: ExtendHoldRequest | None = None,
    service: HoldLifecycleService = Depends(get_hold_service),
) -> HoldResponse:
    additional_seconds = payload.additional_seconds if payload is not None else None
    try:
        hold = service.extend_hold(hold_id, additional_seconds=additional_seconds)
    except (HoldValidationError, HoldNotFoundError) as exc:
        raise_for_hold_error(exc)
    return to_hold_response(hold, service)


@router.delete("/holds/{hold_id}", response_model=ReleaseHoldResponse)
async def release_hold(
    hold_id: str,
    service: HoldLifecycleService = Depends(get_hold_service),
) -> ReleaseHoldResponse:
    return ReleaseHoldResponse(hold_id=hold_id, released=service.release_hold(hold_id))


@router.get("/holds/{hold_id}/remaining", response_model=RemainingResponse)
async def query_remaining(
    hold_id: str,
    service: HoldLifecycleService = Depends(get_hold_service),
) -> RemainingResponse:
    return RemainingResponse(hold_id=hold_id, remaining_seconds=service.query_remaining(hold_id))


@router.post("/holds/{hold_id}/consume", response_model=BookingResponse)
async def consume_hold(
    hold_id: str,
    payload: ConsumeHoldRequest,
    service: HoldLifecycleService = Depends(get_hold_service),
) -> BookingResponse:
    candidate = BookingCandidate(
        hotel_id=payload.hotel_id,
        room_type_id=payload.room_type_id,
        check_in=payload.check_in,
        check_out=payload.check_out,
        guest_count=payload.guest_count,
        total_price=payload.total_price,
        hold_id=hold_id,
    )
    try:
        booking = service.consume_hold(hold_id, candidate)
    except (HoldNotFoundError, HoldMismatchError) as exc:
        raise_for_hold_error(exc)
    return to_booking_response(booking)


@router.get(
    "/availability/{hotel_id}/{room_type_id}",
    response_model=AvailabilityResponse,
)
async def is_available(
    hotel_id: str,
    room_type_id: str,
    service: HoldLifecycleService = Depends(get_hold_service),
) -> AvailabilityResponse:
    return AvailabilityResponse(
        hotel_id=hotel_id,
        room_type_id=room_type_id,
        available=service.is_available(hotel_id, room_type_id),
    )
