"""
RentalService against a migrated in-memory SQLite database: persistence,
one-time discounts, optimistic locking and notices.
"""

from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from rental_lifecycle.db.connection import get_connection
from rental_lifecycle.db.migrations import apply_migrations
from rental_lifecycle.domain.models import CarSnapshot, RentalStatus
from rental_lifecycle.repositories.discount_repo import DiscountRepository
from rental_lifecycle.repositories.rental_repo import RentalRepository
from rental_lifecycle.services.errors import (
    ActorNotPermittedError,
    AlreadyReviewedError,
    DiscountAlreadyUsedError,
    IllegalTransitionError,
    NotFoundError,
    StaleRentalError,
)
from rental_lifecycle.services.rental_service import RentalService

PICK_UP = datetime(2024, 6, 1, 10, 0)
RETURN = datetime(2024, 6, 4, 10, 0)


@pytest.fixture
def notices():
    return []


@pytest.fixture
def service(connection, summer_discount, notices):
    DiscountRepository(connection).create(summer_discount)
    DiscountRepository(connection).create(
        replace(summer_discount, code="WELCOME10", discount_percentage=Decimal("10"), is_one_time=True)
    )
    connection.commit()
    return RentalService(connection, listeners=[notices.append])


def book(service, car, now, **kwargs):
    return service.book(car, "renter-1", PICK_UP, RETURN, now=now, **kwargs)


def test_booking_is_persisted(service, car, now):
    rental = book(service, car, now, discount_code="SUMMER20")
    stored = service.get_rental(rental.id)
    assert stored == rental
    assert stored.version == 1
    assert stored.final_amount == Decimal("2400")
    assert stored.discount.code == "SUMMER20"
    assert stored.pick_up_date == PICK_UP


def test_booking_announces_to_owner(service, car, now, notices):
    rental = book(service, car, now)
    assert len(notices) == 1
    assert notices[0].rental_id == rental.id
    assert notices[0].recipient_ids == ("owner-1",)
    assert "BMW X5 (2022)" in notices[0].body


def test_one_time_discount_only_once_per_renter(service, car, now):
    book(service, car, now, discount_code="WELCOME10")
    with pytest.raises(DiscountAlreadyUsedError):
        book(service, car, now, discount_code="WELCOME10")
    other = service.book(car, "renter-2", PICK_UP, RETURN, now=now, discount_code="WELCOME10")
    assert other.discount_amount == Decimal("300")
    assert len(service.rentals_for_renter("renter-1")) == 1


def test_reusable_discount_can_be_used_again(service, car, now):
    book(service, car, now, discount_code="SUMMER20")
    book(service, car, now, discount_code="SUMMER20")
    assert len(service.rentals_for_renter("renter-1")) == 2


def test_full_lifecycle(service, car, now, notices):
    rental = book(service, car, now)
    steps = [RentalStatus.CONFIRMED, RentalStatus.ACTIVE, RentalStatus.RETURNED]
    for offset, status in enumerate(steps, start=1):
        rental = service.change_status(
            rental.id, status, actor_id="owner-1", now=now + timedelta(hours=offset)
        )
        assert rental.status == status
    assert rental.version == 4
    assert rental.updated_at == now + timedelta(hours=3)
    assert notices[-1].recipient_ids == ("renter-1",)
    assert notices[-1].data["status"] == "Returned"

    reviewed = service.mark_reviewed(rental.id, reviewer_id="renter-1")
    assert reviewed.has_review is True
    assert service.get_rental(rental.id).has_review is True
    with pytest.raises(AlreadyReviewedError):
        service.mark_reviewed(rental.id, reviewer_id="renter-1")


def test_admin_can_confirm_any_rental(service, car, now):
    rental = book(service, car, now)
    updated = service.change_status(rental.id, "Confirmed", actor_id="admin-9", is_admin=True, now=now)
    assert updated.status == RentalStatus.CONFIRMED


def test_renter_cancels_pending_booking(service, car, now):
    rental = book(service, car, now)
    canceled = service.cancel_booking(rental.id, renter_id="renter-1", now=now)
    assert canceled.status == RentalStatus.CANCELED
    with pytest.raises(IllegalTransitionError):
        service.change_status(rental.id, RentalStatus.CONFIRMED, actor_id="owner-1", now=now)


def test_stranger_cannot_change_status(service, car, now):
    rental = book(service, car, now)
    with pytest.raises(ActorNotPermittedError):
        service.change_status(rental.id, RentalStatus.CANCELED, actor_id="renter-2", now=now)
    assert service.get_rental(rental.id).status == RentalStatus.PENDING


def test_only_renter_can_review(service, car, now):
    rental = book(service, car, now)
    with pytest.raises(ActorNotPermittedError):
        service.mark_reviewed(rental.id, reviewer_id="owner-1")


def test_outdated_screen_gets_stale_error(service, car, now):
    rental = book(service, car, now)
    service.change_status(rental.id, RentalStatus.CONFIRMED, actor_id="owner-1", now=now)
    with pytest.raises(StaleRentalError):
        service.change_status(
            rental.id,
            RentalStatus.CANCELED,
            actor_id="renter-1",
            now=now,
            expected_version=rental.version,
        )


def test_concurrent_writers_only_one_wins(connection, car, now):
    service = RentalService(connection)
    rental = book(service, car, now)
    repo = RentalRepository(connection)
    first = replace(rental, status=RentalStatus.CONFIRMED, updated_at=now)
    second = replace(rental, status=RentalStatus.CANCELED, updated_at=now)
    repo.save(first)
    with pytest.raises(StaleRentalError):
        repo.save(second)
    assert repo.get_by_id(rental.id).status == RentalStatus.CONFIRMED


def test_unknown_rental(service, connection, car, now):
    with pytest.raises(NotFoundError):
        service.change_status("missing", RentalStatus.CONFIRMED, actor_id="owner-1", now=now)
    ghost = replace(book(service, car, now), id="missing")
    with pytest.raises(NotFoundError):
        RentalRepository(connection).save(ghost)


def test_failing_listener_does_not_undo_write(connection, car, now, caplog):
    def broken(notice):
        raise RuntimeError("push service down")

    service = RentalService(connection, listeners=[broken])
    rental = book(service, car, now)
    assert service.get_rental(rental.id).status == RentalStatus.PENDING
    assert "listener failed" in caplog.text


def test_listings(service, car, now):
    other_car = CarSnapshot(id="car-2", owner_id="owner-2", price_per_day=Decimal("750"))
    book(service, car, now)
    service.book(other_car, "renter-2", PICK_UP, RETURN, now=now + timedelta(minutes=1))
    assert [r.renter_id for r in service.rentals_for_owner("owner-2")] == ["renter-2"]
    assert len(service.rentals_for_car("car-1")) == 1
    assert len(service.rentals_for_renter("renter-2")) == 1


def test_one_time_discount_race_between_connections(tmp_path, summer_discount, car, now):
    db_path = tmp_path / "rentals.db"
    first = get_connection(db_path)
    second = get_connection(db_path)
    try:
        apply_migrations(first)
        DiscountRepository(first).create(replace(summer_discount, code="ONCE", is_one_time=True))
        first.commit()
        service_a = RentalService(first)
        service_b = RentalService(second)

        real_check = service_a._rentals.has_used_discount

        def check_then_lose_race(renter_id, code):
            used = real_check(renter_id, code)
            book(service_b, car, now, discount_code="ONCE")
            return used

        service_a._rentals.has_used_discount = check_then_lose_race
        with pytest.raises(DiscountAlreadyUsedError):
            book(service_a, car, now, discount_code="ONCE")

        count = first.execute(
            "SELECT COUNT(*) FROM rentals WHERE renter_id = ? AND discount_code = ?",
            ("renter-1", "ONCE"),
        ).fetchone()[0]
        assert count == 1
    finally:
        first.close()
        second.close()


def test_store_rejects_second_use_of_one_time_code(service, connection, car, now):
    rental = book(service, car, now, discount_code="WELCOME10")
    with pytest.raises(DiscountAlreadyUsedError):
        RentalRepository(connection).create(replace(rental, id="copy"))
    connection.rollback()
    assert len(service.rentals_for_renter("renter-1")) == 1
