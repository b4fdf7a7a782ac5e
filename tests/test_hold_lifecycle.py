from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

import pytest

from hba_backend.domain.constraints import MAX_EXTENSION_SECONDS
from hba_backend.domain.models import BookingCandidate, BookingStatus
from hba_backend.repository.hold_repository import BookingRepository, HoldStore
from hba_backend.services.hold_service import (
    HoldExpiredError,
    HoldLifecycleService,
    HoldMismatchError,
    HoldNotFoundError,
    HoldValidationError,
    RoomNotFoundError,
    RoomUnavailableError,
)
from hba_backend.services.sweeper_service import ExpirySweeper


CHECK_IN = date(2025, 6, 1)
CHECK_OUT = date(2025, 6, 3)


def _build_service(settings, clock, catalog=None, bookings=None) -> HoldLifecycleService:
    return HoldLifecycleService(
        store=HoldStore(),
        catalog=catalog,
        bookings=bookings,
        settings=settings,
        clock=clock,
    )


def _create(service: HoldLifecycleService, room_type_id: str = "room-A", guests: int = 2):
    return service.create_hold("hotel-1", room_type_id, CHECK_IN, CHECK_OUT, guests, 400)


def _candidate(hold_id: str, **overrides) -> BookingCandidate:
    values = {
        "hotel_id": "hotel-1",
        "room_type_id": "room-A",
        "check_in": CHECK_IN,
        "check_out": CHECK_OUT,
        "guest_count": 2,
        "total_price": 400,
        "hold_id": hold_id,
    }
    values.update(overrides)
    return BookingCandidate(**values)


def test_create_hold_scenario_expires_after_sweep(settings, clock, scenario_catalog):
    service = _build_service(settings, clock, catalog=scenario_catalog)
    sweeper = ExpirySweeper(service.store, settings=settings, clock=clock)

    hold = service.create_hold("hotel-1", "room-A", CHECK_IN, CHECK_OUT, 2, 400)

    assert hold.expires_at == clock.now + timedelta(seconds=600)
    assert hold.created_at == clock.now
    assert hold.holder_id.startswith("user_")
    assert hold.total_price == 400.0
    assert service.is_available("hotel-1", "room-A") is False

    clock.advance(601)
    evicted = sweeper.sweep()

    assert [notice.hold_id for notice in evicted] == [hold.hold_id]
    assert service.is_available("hotel-1", "room-A") is True
    assert service.query_remaining(hold.hold_id) == 0


def test_second_hold_on_same_room_type_is_unavailable(settings, clock):
    service = _build_service(settings, clock)
    _create(service)

    with pytest.raises(RoomUnavailableError):
        _create(service)


def test_exclusivity_ignores_dates(settings, clock):
    service = _build_service(settings, clock)
    _create(service)

    with pytest.raises(RoomUnavailableError):
        service.create_hold("hotel-1", "room-A", date(2025, 9, 1), date(2025, 9, 5), 1, 800)


def test_holds_on_different_room_types_coexist(settings, clock):
    service = _build_service(settings, clock)
    first = _create(service, room_type_id="room-A")
    second = _create(service, room_type_id="room-B")

    assert first.hold_id != second.hold_id
    # Same room type id under another hotel is a different resource.
    service.create_hold("hotel-2", "room-A", CHECK_IN, CHECK_OUT, 2, 300)


def test_expired_unswept_hold_does_not_block_new_hold(settings, clock):
    service = _build_service(settings, clock)
    stale = _create(service)
    clock.advance(600)

    fresh = _create(service)

    assert fresh.hold_id != stale.hold_id
    assert service.query_remaining(stale.hold_id) == 0


@pytest.mark.parametrize(
    ("check_in", "check_out", "guests"),
    [
        (CHECK_IN, CHECK_IN, 2),
        (CHECK_OUT, CHECK_IN, 2),
        (CHECK_IN, CHECK_OUT, 0),
    ],
)
def test_create_hold_rejects_invalid_input(settings, clock, check_in, check_out, guests):
    service = _build_service(settings, clock)
    with pytest.raises(HoldValidationError):
        service.create_hold("hotel-1", "room-A", check_in, check_out, guests, 400)
    assert service.store.count() == 0


def test_create_hold_rejects_negative_price(settings, clock):
    service = _build_service(settings, clock)
    with pytest.raises(HoldValidationError):
        service.create_hold("hotel-1", "room-A", CHECK_IN, CHECK_OUT, 2, -1)


def test_create_hold_rejects_room_missing_from_catalog(settings, clock, scenario_catalog):
    service = _build_service(settings, clock, catalog=scenario_catalog)
    with pytest.raises(RoomNotFoundError):
        service.create_hold("hotel-1", "room-Z", CHECK_IN, CHECK_OUT, 2, 400)
    with pytest.raises(RoomNotFoundError):
        service.create_hold("hotel-404", "room-A", CHECK_IN, CHECK_OUT, 2, 400)


def test_release_is_idempotent(settings, clock):
    service = _build_service(settings, clock)
    hold = _create(service)

    assert service.release_hold(hold.hold_id) is True
    assert service.release_hold(hold.hold_id) is False
    assert service.is_available("hotel-1", "room-A") is True


def test_release_after_sweep_reports_already_released(settings, clock):
    service = _build_service(settings, clock)
    sweeper = ExpirySweeper(service.store, settings=settings, clock=clock)
    hold = _create(service)
    clock.advance(700)
    sweeper.sweep()

    assert service.release_hold(hold.hold_id) is False


def test_extend_moves_deadline_forward(settings, clock):
    service = _build_service(settings, clock)
    hold = _create(service)
    clock.advance(100)
    before = service.query_remaining(hold.hold_id)

    extended = service.extend_hold(hold.hold_id)

    assert extended.expires_at == hold.expires_at + timedelta(seconds=300)
    assert service.query_remaining(hold.hold_id) == before + 300
    assert service.get_hold(hold.hold_id) == extended


def test_extend_accepts_custom_amount_and_repeats_without_cap(settings, clock):
    service = _build_service(settings, clock)
    hold = _create(service)

    for _ in range(5):
        hold = service.extend_hold(hold.hold_id, additional_seconds=3600)

    assert service.query_remaining(hold.hold_id) == 600 + 5 * 3600


def test_extend_rejects_non_positive_amount(settings, clock):
    service = _build_service(settings, clock)
    hold = _create(service)
    with pytest.raises(HoldValidationError):
        service.extend_hold(hold.hold_id, additional_seconds=0)


def test_extend_rejects_amount_above_single_request_bound(settings, clock):
    service = _build_service(settings, clock)
    hold = _create(service)

    with pytest.raises(HoldValidationError):
        service.extend_hold(hold.hold_id, additional_seconds=10**12)
    assert service.get_hold(hold.hold_id) == hold

    extended = service.extend_hold(hold.hold_id, additional_seconds=MAX_EXTENSION_SECONDS)
    assert extended.expires_at == hold.expires_at + timedelta(seconds=MAX_EXTENSION_SECONDS)


def test_extend_past_latest_representable_deadline_is_validation_error(settings, clock):
    service = _build_service(settings, clock)
    far_deadline = datetime.max.replace(tzinfo=timezone.utc) - timedelta(seconds=10)
    hold = replace(_create(service), expires_at=far_deadline)
    service.store.put(hold)

    with pytest.raises(HoldValidationError):
        service.extend_hold(hold.hold_id)
    assert service.store.get(hold.hold_id).expires_at == far_deadline


def test_observed_expiry_publishes_eviction_notice(settings, clock):
    service = _build_service(settings, clock)
    notices = []
    service.add_eviction_listener(notices.append)
    extend_target = _create(service, room_type_id="room-A")
    consume_target = _create(service, room_type_id="room-B")
    clock.advance(600)

    with pytest.raises(HoldExpiredError):
        service.extend_hold(extend_target.hold_id)
    with pytest.raises(HoldExpiredError):
        service.consume_hold(
            consume_target.hold_id,
            _candidate(consume_target.hold_id, room_type_id="room-B"),
        )

    assert [notice.hold_id for notice in notices] == [extend_target.hold_id, consume_target.hold_id]
    assert notices[0].expired_at == extend_target.expires_at
    assert notices[0].evicted_at == clock.now

    # An already evicted hold is simply unknown and publishes nothing more.
    with pytest.raises(HoldNotFoundError):
        service.extend_hold(extend_target.hold_id)
    assert len(notices) == 2


def test_observed_expiry_reaches_sweeper_listeners(settings, clock):
    service = _build_service(settings, clock)
    sweeper = ExpirySweeper(service.store, settings=settings, clock=clock)
    service.add_eviction_listener(sweeper.publish)
    received = []
    sweeper.add_listener(received.append)
    hold = _create(service)
    clock.advance(601)

    with pytest.raises(HoldExpiredError):
        service.extend_hold(hold.hold_id)

    assert [notice.hold_id for notice in received] == [hold.hold_id]
    assert sweeper.sweep() == []
    assert len(received) == 1


def test_extend_unknown_hold_is_not_found(settings, clock):
    service = _build_service(settings, clock)
    with pytest.raises(HoldNotFoundError):
        service.extend_hold("missing")


def test_extend_expired_unswept_hold_is_not_resurrected(settings, clock):
    service = _build_service(settings, clock)
    hold = _create(service)
    clock.advance(600)

    with pytest.raises(HoldExpiredError):
        service.extend_hold(hold.hold_id)

    assert service.store.get(hold.hold_id) is None
    with pytest.raises(HoldNotFoundError):
        service.extend_hold(hold.hold_id)


def test_query_remaining_never_raises(settings, clock):
    service = _build_service(settings, clock)
    assert service.query_remaining("missing") == 0

    hold = _create(service)
    assert service.query_remaining(hold.hold_id) == 600
    clock.advance(250)
    assert service.query_remaining(hold.hold_id) == 350
    clock.advance(10_000)
    assert service.query_remaining(hold.hold_id) == 0


def test_get_hold_hides_expired_records(settings, clock):
    service = _build_service(settings, clock)
    hold = _create(service)
    assert service.get_hold(hold.hold_id) == hold
    clock.advance(600)
    assert service.get_hold(hold.hold_id) is None


def test_consume_creates_confirmed_booking_and_removes_hold(settings, clock):
    bookings = BookingRepository()
    service = _build_service(settings, clock, bookings=bookings)
    hold = _create(service)

    booking = service.consume_hold(hold.hold_id, _candidate(hold.hold_id, total_price=1))

    assert booking.status is BookingStatus.CONFIRMED
    assert booking.hold_id == hold.hold_id
    assert booking.total_price == 400.0
    assert booking.nights == 2
    assert bookings.get(booking.booking_id) == booking
    assert service.query_remaining(hold.hold_id) == 0
    assert service.is_available("hotel-1", "room-A") is True
    with pytest.raises(HoldNotFoundError):
        service.consume_hold(hold.hold_id, _candidate(hold.hold_id))


@pytest.mark.parametrize(
    "overrides",
    [
        {"guest_count": 3},
        {"hotel_id": "hotel-2"},
        {"room_type_id": "room-B"},
        {"check_in": date(2025, 5, 31)},
        {"check_out": date(2025, 6, 4)},
    ],
)
def test_consume_mismatch_leaves_hold_untouched(settings, clock, overrides):
    service = _build_service(settings, clock)
    hold = _create(service)

    with pytest.raises(HoldMismatchError):
        service.consume_hold(hold.hold_id, _candidate(hold.hold_id, **overrides))

    assert service.get_hold(hold.hold_id) == hold
    assert service.store.get(hold.hold_id).expires_at == hold.expires_at


def test_consume_expired_hold_fails(settings, clock):
    service = _build_service(settings, clock)
    hold = _create(service)
    clock.advance(601)

    with pytest.raises(HoldExpiredError):
        service.consume_hold(hold.hold_id, _candidate(hold.hold_id))


def test_direct_booking_respects_active_hold(settings, clock):
    bookings = BookingRepository()
    service = _build_service(settings, clock, bookings=bookings)
    hold = _create(service)

    with pytest.raises(RoomUnavailableError):
        service.create_direct_booking(_candidate(None))

    service.release_hold(hold.hold_id)
    booking = service.create_direct_booking(_candidate(None))
    assert booking.hold_id is None
    assert bookings.count() == 1
