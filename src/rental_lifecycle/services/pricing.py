"""Rental pricing rules.

Every amount shown to a renter or stored on a rental comes from
``compute_pricing``. Amounts are ``Decimal``; the discount amount is rounded
half-up to cents, everything else is kept exact.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Protocol

from rental_lifecycle.domain.models import PricingBreakdown
from rental_lifecycle.services.errors import (
    DiscountInvalidError,
    InvalidDateRangeError,
    InvalidPriceError,
    MixedTimezoneError,
)

ONE_DAY = timedelta(days=1)
CENTS = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


class HasDiscountPercentage(Protocol):
    discount_percentage: Decimal


def to_decimal(value: object) -> Decimal:
    """Convert ints, strings, floats and Decimals to Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1").
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"Unsupported amount: {value!r}")
    if isinstance(value, (int, str)):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    raise InvalidOperation(f"Unsupported amount: {value!r}")


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def rental_days(pick_up_date: datetime, return_date: datetime) -> int:
    """Whole days charged for a range; partial days count as a full day.

    Returns at least 1, even for equal or inverted dates.
    """
    whole, remainder = divmod(return_date - pick_up_date, ONE_DAY)
    days = whole + (1 if remainder else 0)
    return max(1, days)


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def ensure_comparable(*values: Optional[datetime]) -> None:
    """Reject a mix of naive and timezone-aware datetimes; ``None`` is skipped."""
    if len({_is_aware(value) for value in values if value is not None}) > 1:
        raise MixedTimezoneError()


def ensure_date_range(pick_up_date: datetime, return_date: datetime) -> None:
    ensure_comparable(pick_up_date, return_date)
    if return_date <= pick_up_date:
        raise InvalidDateRangeError()


def parse_price(price_per_day: object) -> Decimal:
    try:
        price = to_decimal(price_per_day)
    except (InvalidOperation, ValueError) as exc:
        raise InvalidPriceError() from exc
    if not price.is_finite() or price < ZERO:
        raise InvalidPriceError()
    return price


def parse_percentage(discount_percentage: object) -> Decimal:
    try:
        percentage = to_decimal(discount_percentage)
    except (InvalidOperation, ValueError) as exc:
        raise DiscountInvalidError("Discount percentage must be a number.") from exc
    if not percentage.is_finite() or not ZERO < percentage <= HUNDRED:
        raise DiscountInvalidError(
            "Discount percentage must be greater than 0 and at most 100."
        )
    return percentage


def discount_amount_for(original_amount: Decimal, discount_percentage: object) -> Decimal:
    percentage = parse_percentage(discount_percentage)
    amount = round_money(original_amount * percentage / HUNDRED)
    return min(amount, original_amount)


def compute_pricing(
    pick_up_date: datetime,
    return_date: datetime,
    price_per_day: object,
    discount: Optional[HasDiscountPercentage] = None,
) -> PricingBreakdown:
    """Compute days, base amount, discount and final amount for a booking."""
    ensure_date_range(pick_up_date, return_date)
    price = parse_price(price_per_day)
    days = rental_days(pick_up_date, return_date)
    original_amount = price * days

    if discount is None:
        discount_amount = ZERO
    else:
        discount_amount = discount_amount_for(
            original_amount, discount.discount_percentage
        )

    return PricingBreakdown(
        rental_days=days,
        original_amount=original_amount,
        discount_amount=discount_amount,
        final_amount=original_amount - discount_amount,
    )
