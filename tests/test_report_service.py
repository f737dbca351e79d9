from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from rental_lifecycle.domain.models import CarSnapshot, RentalStatus
from rental_lifecycle.services.rental_service import RentalService
from rental_lifecycle.services.report_service import ReportService


def _walk(service, rental, target, now):
    path = [RentalStatus.CONFIRMED, RentalStatus.ACTIVE, RentalStatus.RETURNED]
    if target == RentalStatus.CANCELED:
        path = [RentalStatus.CANCELED]
    elif target in path:
        path = path[: path.index(target) + 1]
    else:
        path = []
    for status in path:
        rental = service.change_status(rental.id, status, actor_id=rental.owner_id, now=now)
    return rental


@pytest.fixture
def seeded(connection, now):
    service = RentalService(connection)
    cars = {
        "car-a": CarSnapshot(id="car-a", owner_id="owner-1", price_per_day=Decimal("1000")),
        "car-b": CarSnapshot(id="car-b", owner_id="owner-2", price_per_day=Decimal("500")),
    }
    plan = [
        ("car-a", datetime(2024, 5, 3), 2, RentalStatus.RETURNED),
        ("car-a", datetime(2024, 5, 20), 1, RentalStatus.RETURNED),
        ("car-b", datetime(2024, 6, 2), 4, RentalStatus.RETURNED),
        ("car-b", datetime(2024, 6, 10), 3, RentalStatus.ACTIVE),
        ("car-a", datetime(2024, 6, 12), 1, RentalStatus.CANCELED),
        ("car-b", datetime(2024, 7, 1), 2, RentalStatus.PENDING),
    ]
    for index, (car_id, pick_up, days, target) in enumerate(plan):
        rental = service.book(
            cars[car_id],
            f"renter-{index}",
            pick_up,
            pick_up + timedelta(days=days),
            now=now,
        )
        _walk(service, rental, target, now)
    return ReportService(connection)


def test_status_counts(seeded):
    counts = seeded.status_counts()
    assert counts == {
        RentalStatus.PENDING: 1,
        RentalStatus.CONFIRMED: 0,
        RentalStatus.ACTIVE: 1,
        RentalStatus.RETURNED: 3,
        RentalStatus.CANCELED: 1,
    }


def test_status_counts_on_empty_store(connection):
    assert set(ReportService(connection).status_counts().values()) == {0}


def test_monthly_income_only_counts_returned_rentals(seeded):
    report = seeded.monthly_income()
    assert [row.month for row in report] == ["2024-05", "2024-06"]
    may, june = report
    assert may.revenue == Decimal("3000")
    assert may.rentals_count == 2
    assert may.estimated_income == Decimal("450.00")
    assert june.revenue == Decimal("2000")
    assert june.estimated_income == Decimal("300.00")


def test_monthly_income_range(seeded):
    report = seeded.monthly_income(start=datetime(2024, 6, 1))
    assert [row.month for row in report] == ["2024-06"]


def test_custom_commission_rate(connection, seeded):
    report = ReportService(connection, commission_rate=Decimal("0.10")).monthly_income()
    assert report[0].estimated_income == Decimal("300.00")


def test_top_cars(seeded):
    ranked = seeded.top_cars()
    assert [(car.car_id, car.rentals_count) for car in ranked] == [("car-a", 2), ("car-b", 1)]
    assert len(seeded.top_cars(limit=1)) == 1
