"""SQLite row mappers for domain models."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from rental_lifecycle.domain.models import (
    AppliedDiscount,
    Discount,
    PaymentMethod,
    PaymentStatus,
    Rental,
    RentalStatus,
)


def _row_value(row: sqlite3.Row, key: str) -> Any:
    return row[key] if key in row.keys() else None


def _to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _from_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _to_text(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def discount_from_row(row: sqlite3.Row) -> Discount:
    return Discount(
        id=_row_value(row, "id"),
        code=row["code"],
        discount_percentage=Decimal(row["discount_percentage"]),
        is_one_time=bool(row["is_one_time"]),
        description=_row_value(row, "description"),
        start_date=datetime.fromisoformat(row["start_date"]),
        end_date=_from_iso(_row_value(row, "end_date")),
        created_at=_from_iso(_row_value(row, "created_at")),
        updated_at=_from_iso(_row_value(row, "updated_at")),
    )


def discount_to_record(discount: Discount) -> Dict[str, Any]:
    return {
        "id": discount.id,
        "code": discount.code,
        "discount_percentage": str(discount.discount_percentage),
        "is_one_time": int(discount.is_one_time),
        "description": discount.description,
        "start_date": discount.start_date.isoformat(),
        "end_date": _to_iso(discount.end_date),
        "created_at": _to_iso(discount.created_at),
        "updated_at": _to_iso(discount.updated_at),
    }


def rental_from_row(row: sqlite3.Row) -> Rental:
    applied = None
    code = _row_value(row, "discount_code")
    if code:
        applied = AppliedDiscount(
            code=code,
            discount_percentage=Decimal(row["discount_percentage"]),
            discount_amount=Decimal(row["discount_amount"]),
            is_one_time=bool(_row_value(row, "discount_is_one_time") or 0),
        )
    return Rental(
        id=row["id"],
        car_id=row["car_id"],
        renter_id=row["renter_id"],
        owner_id=row["owner_id"],
        pick_up_date=datetime.fromisoformat(row["pick_up_date"]),
        return_date=datetime.fromisoformat(row["return_date"]),
        status=RentalStatus(row["status"]),
        payment_method=PaymentMethod(row["payment_method"]),
        payment_status=PaymentStatus(row["payment_status"]),
        price_per_day=Decimal(row["price_per_day"]),
        rental_days=int(row["rental_days"]),
        original_amount=Decimal(row["original_amount"]),
        discount_amount=Decimal(row["discount_amount"]),
        final_amount=Decimal(row["final_amount"]),
        discount=applied,
        created_at=_from_iso(_row_value(row, "created_at")),
        updated_at=_from_iso(_row_value(row, "updated_at")),
        has_review=bool(_row_value(row, "has_review") or 0),
        version=int(_row_value(row, "version") or 1),
    )


def rental_to_record(rental: Rental) -> Dict[str, Any]:
    applied = rental.discount
    return {
        "id": rental.id,
        "car_id": rental.car_id,
        "renter_id": rental.renter_id,
        "owner_id": rental.owner_id,
        "pick_up_date": rental.pick_up_date.isoformat(),
        "return_date": rental.return_date.isoformat(),
        "status": rental.status.value,
        "payment_method": rental.payment_method.value,
        "payment_status": rental.payment_status.value,
        "price_per_day": str(rental.price_per_day),
        "rental_days": rental.rental_days,
        "original_amount": str(rental.original_amount),
        "discount_amount": str(rental.discount_amount),
        "final_amount": str(rental.final_amount),
        "discount_code": applied.code if applied else None,
        "discount_percentage": _to_text(applied.discount_percentage) if applied else None,
        "discount_is_one_time": int(applied.is_one_time) if applied else 0,
        "has_review": int(rental.has_review),
        "version": rental.version,
        "created_at": _to_iso(rental.created_at),
        "updated_at": _to_iso(rental.updated_at),
    }
