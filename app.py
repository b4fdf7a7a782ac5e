"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the hold store, lifecycle services and routers, and ties the
expiry sweeper to the application lifespan.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from hba_backend.controllers.booking_controller import router as booking_router
from hba_backend.controllers.hold_controller import router as hold_router
from hba_backend.controllers.search_controller import router as search_router
from hba_backend.repository.catalog_repository import CatalogRepository
from hba_backend.repository.hold_repository import BookingRepository, HoldStore
from hba_backend.services.availability_service import AvailabilityOracle
from hba_backend.services.booking_service import BookingService
from hba_backend.services.hold_service import HoldLifecycleService
from hba_backend.services.notification_service import EmailNotificationService
from hba_backend.services.search_service import HotelSearchService
from hba_backend.services.sweeper_service import ExpirySweeper
from hba_backend.utils.clock import Clock, utc_now
from hba_backend.utils.config import Settings, get_settings
from hba_backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[CatalogRepository] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every component is constructed here and handed its collaborators; the
    hold store is shared by the lifecycle service, the availability oracle
    and the sweeper so all three agree on what is held.
    """
    settings = settings or get_settings()
    clock = clock or utc_now

    # --- Repositories (in-memory, process-local) ---
    catalog = catalog or CatalogRepository()
    store = HoldStore()
    bookings = BookingRepository()

    # --- Services ---
    oracle = AvailabilityOracle(store, clock=clock)
    hold_service = HoldLifecycleService(
        store=store,
        oracle=oracle,
        catalog=catalog,
        bookings=bookings,
        settings=settings,
        clock=clock,
    )
    sweeper = ExpirySweeper(store, settings=settings, clock=clock)
    hold_service.add_eviction_listener(sweeper.publish)
    search_service = HotelSearchService(
        catalog=catalog,
        oracle=oracle,
        settings=settings,
        clock=clock,
    )
    booking_service = BookingService(
        hold_service=hold_service,
        bookings=bookings,
        catalog=catalog,
        notifications=EmailNotificationService(settings=settings),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run the expiry sweeper for as long as the app serves requests."""
        if settings.sweeper_enabled:
            sweeper.start()
        logger.info("Startup complete, hold service ready")
        yield
        sweeper.stop()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # --- Routers ---
    app.include_router(hold_router)
    app.include_router(booking_router)
    app.include_router(search_router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str | int]:
        return {"status": "ok", "active_holds": len(store.all_active(clock()))}

    # --- Inject services into app.state for dependency resolution ---
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.hold_store = store
    app.state.hold_service = hold_service
    app.state.sweeper = sweeper
    app.state.search_service = search_service
    app.state.booking_service = booking_service

    return app


# Module-level app object for uvicorn
app = create_app()
