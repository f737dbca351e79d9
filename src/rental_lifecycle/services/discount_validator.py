"""Discount code applicability checks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from rental_lifecycle.domain.models import Discount
from rental_lifecycle.services.errors import (
    DiscountExpiredError,
    DiscountInvalidError,
    DiscountNotYetValidError,
)
from rental_lifecycle.services.pricing import ensure_comparable, parse_percentage


@dataclass(frozen=True, slots=True)
class DiscountCheck:
    """A discount that passed validation at a given moment.

    ``is_one_time`` tells the caller it must check the renter's usage history
    before accepting the booking; the validator itself never looks at it.
    """

    code: str
    discount_percentage: Decimal
    is_one_time: bool
    checked_at: datetime


def _format_day(value: datetime) -> str:
    return value.strftime("%Y-%m-%d")


def check_shape(discount: Optional[Discount]) -> Decimal:
    """Reject missing or malformed discounts; return the parsed percentage."""
    if discount is None:
        raise DiscountInvalidError("Discount code not found.")
    if not (discount.code or "").strip():
        raise DiscountInvalidError("Discount code is empty.")
    percentage = parse_percentage(discount.discount_percentage)
    ensure_comparable(discount.start_date, discount.end_date)
    if discount.end_date is not None and discount.end_date <= discount.start_date:
        raise DiscountInvalidError("Discount end date must be after its start date.")
    return percentage


def validate(discount: Optional[Discount], at: datetime) -> DiscountCheck:
    """Check that ``discount`` can be applied at ``at``."""
    percentage = check_shape(discount)
    ensure_comparable(at, discount.start_date)
    if at < discount.start_date:
        raise DiscountNotYetValidError(
            f"This discount code is not valid until {_format_day(discount.start_date)}."
        )
    if discount.end_date is not None and at > discount.end_date:
        raise DiscountExpiredError(
            f"This discount code expired on {_format_day(discount.end_date)}."
        )
    return DiscountCheck(
        code=discount.code,
        discount_percentage=percentage,
        is_one_time=bool(discount.is_one_time),
        checked_at=at,
    )
