"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from hba_backend.services.booking_service import BookingService
from hba_backend.services.hold_service import HoldLifecycleService
from hba_backend.services.search_service import HotelSearchService


def _require_state(request: Request, attribute: str, label: str):
    service = getattr(request.app.state, attribute, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{label} is not initialized",
        )
    return service


def get_hold_service(request: Request) -> HoldLifecycleService:
    return _require_state(request, "hold_service", "Hold service")


def get_booking_service(request: Request) -> BookingService:
    return _require_state(request, "booking_service", "Booking service")


def get_search_service(request: Request) -> HotelSearchService:
    return _require_state(request, "search_service", "Search service")
