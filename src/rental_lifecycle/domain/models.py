"""Domain dataclasses and enums."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class RentalStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    ACTIVE = "Active"
    RETURNED = "Returned"
    CANCELED = "Canceled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({RentalStatus.RETURNED, RentalStatus.CANCELED})


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    REFUNDED = "Refunded"


class PaymentMethod(str, Enum):
    GCASH = "GCash"
    CASH = "Cash"
    CREDIT_CARD = "Credit Card"


class ActorRole(str, Enum):
    RENTER = "renter"
    OWNER = "owner"
    ADMIN = "admin"


@dataclass(slots=True)
class CarSnapshot:
    """Car listing values copied into a booking at the time it is made."""

    id: str
    owner_id: str
    price_per_day: Decimal
    is_active: bool = True
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    pick_up_location: Optional[str] = None

    @property
    def label(self) -> str:
        name = " ".join(part for part in (self.brand, self.model) if part)
        if not name:
            return f"Car {self.id}"
        return f"{name} ({self.year})" if self.year else name


@dataclass(slots=True)
class Discount:
    id: Optional[int]
    code: str
    discount_percentage: Decimal
    is_one_time: bool
    start_date: datetime
    end_date: Optional[datetime]
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class AppliedDiscount:
    """Discount reference stored on a rental once the code was accepted."""

    code: str
    discount_percentage: Decimal
    discount_amount: Decimal
    is_one_time: bool = False


@dataclass(frozen=True, slots=True)
class PricingBreakdown:
    rental_days: int
    original_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal


@dataclass(slots=True)
class Rental:
    id: str
    car_id: str
    renter_id: str
    owner_id: str
    pick_up_date: datetime
    return_date: datetime
    status: RentalStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    price_per_day: Decimal
    rental_days: int
    original_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    discount: Optional[AppliedDiscount] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    has_review: bool = False
    version: int = 1

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
