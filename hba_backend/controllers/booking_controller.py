"""HTTP controller layer for confirmed bookings."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator, model_validator

from hba_backend.controllers.dependencies import get_booking_service
from hba_backend.controllers.hold_controller import (
    BookingResponse,
    raise_for_hold_error,
    to_booking_response,
)
from hba_backend.domain.models import BookingCandidate
from hba_backend.services.booking_service import BookingNotFoundError, BookingService
from hba_backend.services.hold_service import (
    HoldMismatchError,
    HoldNotFoundError,
    HoldValidationError,
    RoomUnavailableError,
)
from hba_backend.services.notification_service import GuestContact


router = APIRouter(tags=["bookings"])


class GuestContactRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    phone: str = Field(min_length=1)
    special_requests: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower().strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        digits = "".join(char for char in value if char.isdigit())
        if len(digits) != 10:
            raise ValueError("phone must contain exactly 10 digits")
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"


class CreateBookingRequest(BaseModel):
    hotel_id: str = Field(min_length=1)
    room_type_id: str = Field(min_length=1)
    check_in: date
    check_out: date
    guest_count: int = Field(ge=1)
    total_price: float = Field(ge=0.0)
    hold_id: str | None = None
    guest: GuestContactRequest | None = None

    @model_validator(mode="after")
    def validate_date_range(self) -> "CreateBookingRequest":
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class CreateBookingResponse(BaseModel):
    booking: BookingResponse
    confirmation_sent: bool


@router.post(
    "/bookings",
    response_model=CreateBookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    service: BookingService = Depends(get_booking_service),
) -> CreateBookingResponse:
    candidate = BookingCandidate(
        hotel_id=payload.hotel_id,
        room_type_id=payload.room_type_id,
        check_in=payload.check_in,
        check_out=payload.check_out,
        guest_count=payload.guest_count,
        total_price=payload.total_price,
        hold_id=payload.hold_id,
    )
    guest = None
    if payload.guest is not None:
        guest = GuestContact(
            name=payload.guest.name,
            email=payload.guest.email,
            phone=payload.guest.phone,
            special_requests=payload.guest.special_requests,
        )
    try:
        booking, notified = service.create_booking(candidate, guest=guest)
    except (
        HoldValidationError,
        RoomUnavailableError,
        HoldNotFoundError,
        HoldMismatchError,
    ) as exc:
        raise_for_hold_error(exc)
    return CreateBookingResponse(
        booking=to_booking_response(booking),
        confirmation_sent=notified,
    )


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = service.get_booking(booking_id)
    except BookingNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    return to_booking_response(booking)
