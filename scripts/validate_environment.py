#!/usr/bin/env python3
"""Validate local HBA hold service environment readiness."""

from __future__ import annotations

import importlib
import sys
from dataclasses import replace
from datetime import date, timedelta
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hba_backend.domain.models import BookingCandidate
from hba_backend.repository.catalog_repository import CatalogRepository
from hba_backend.repository.hold_repository import BookingRepository, HoldStore
from hba_backend.services.hold_service import HoldLifecycleService, RoomUnavailableError
from hba_backend.services.sweeper_service import ExpirySweeper
from hba_backend.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1: Python version >= 3.11
    if sys.version_info >= (3, 11):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.11",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable with versions
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("pandas", "pandas"),
        ("requests", "requests"),
        ("streamlit", "streamlit"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    try:
        from importlib.metadata import version
    except Exception:  # pragma: no cover
        version = None  # type: ignore[assignment]
    for module_name, dist_name in package_specs:
        try:
            module = importlib.import_module(module_name)
            if version is not None:
                _ = version(dist_name)
            else:
                _ = getattr(module, "__version__", "unknown")
        except Exception as exc:  # pragma: no cover - runtime guard
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    settings = replace(get_settings(), notifications_enabled=False)

    # CHECK 3: Catalog load
    catalog = CatalogRepository()
    hotel_count = len(catalog.list_hotels())
    ok, line = _print_result(
        "Catalog",
        hotel_count > 0,
        f": {hotel_count} hotels" if hotel_count > 0 else "no hotels loaded",
    )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 4: Hold create / exclusivity / release cycle
    store = HoldStore()
    service = HoldLifecycleService(
        store=store,
        catalog=catalog,
        bookings=BookingRepository(),
        settings=settings,
    )
    check_in = date.today() + timedelta(days=14)
    check_out = check_in + timedelta(days=2)
    try:
        hold = service.create_hold("hotel-1", "basic-room-1", check_in, check_out, 2, 398.0)
        try:
            service.create_hold("hotel-1", "basic-room-1", check_in, check_out, 2, 398.0)
            raise RuntimeError("second hold on the same room type succeeded")
        except RoomUnavailableError:
            pass
        if not service.release_hold(hold.hold_id) or service.release_hold(hold.hold_id):
            raise RuntimeError("release was not idempotent")
        ok, line = _print_result("Hold lifecycle", True)
    except Exception as exc:
        ok, line = _print_result("Hold lifecycle", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 5: Consume hold into booking
    try:
        hold = service.create_hold("hotel-2", "middle-room-1", check_in, check_out, 2, 598.0)
        booking = service.consume_hold(
            hold.hold_id,
            BookingCandidate(
                hotel_id="hotel-2",
                room_type_id="middle-room-1",
                check_in=check_in,
                check_out=check_out,
                guest_count=2,
                total_price=598.0,
                hold_id=hold.hold_id,
            ),
        )
        if service.query_remaining(hold.hold_id) != 0:
            raise RuntimeError("consumed hold still has remaining time")
        ok, line = _print_result("Hold consumption", True, f": {booking.booking_id}")
    except Exception as exc:
        ok, line = _print_result("Hold consumption", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 6: Sweeper tick
    try:
        evicted = ExpirySweeper(store, settings=settings).sweep()
        ok, line = _print_result("Expiry sweep", True, f": {len(evicted)} evicted")
    except Exception as exc:
        ok, line = _print_result("Expiry sweep", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" HBA Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
