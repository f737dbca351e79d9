import sys
import pathlib
from datetime import datetime
from decimal import Decimal

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

import pytest  # noqa: E402

from rental_lifecycle.db.connection import get_connection  # noqa: E402
from rental_lifecycle.db.migrations import apply_migrations  # noqa: E402
from rental_lifecycle.domain.models import (  # noqa: E402
    CarSnapshot,
    Discount,
    PaymentMethod,
    PaymentStatus,
    Rental,
    RentalStatus,
)


@pytest.fixture
def now():
    return datetime(2024, 5, 20, 9, 0)


@pytest.fixture
def car():
    return CarSnapshot(
        id="car-1",
        owner_id="owner-1",
        price_per_day=Decimal("1000"),
        brand="BMW",
        model="X5",
        year=2022,
        pick_up_location="Taguig City",
    )


@pytest.fixture
def summer_discount():
    return Discount(
        id=None,
        code="SUMMER20",
        discount_percentage=Decimal("20"),
        is_one_time=False,
        start_date=datetime(2024, 5, 1),
        end_date=datetime(2024, 6, 30, 23, 59),
    )


@pytest.fixture
def connection():
    conn = get_connection(":memory:")
    apply_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def make_rental(now):
    """Build a rental in any status without going through booking."""

    def _make(status=RentalStatus.PENDING, **overrides):
        values = dict(
            id="rental-1",
            car_id="car-1",
            renter_id="renter-1",
            owner_id="owner-1",
            pick_up_date=datetime(2024, 6, 1, 10, 0),
            return_date=datetime(2024, 6, 4, 10, 0),
            status=status,
            payment_method=PaymentMethod.CASH,
            payment_status=PaymentStatus.PENDING,
            price_per_day=Decimal("1000"),
            rental_days=3,
            original_amount=Decimal("3000"),
            discount_amount=Decimal("0"),
            final_amount=Decimal("3000"),
            created_at=now,
            updated_at=now,
        )
        values.update(overrides)
        return Rental(**values)

    return _make
