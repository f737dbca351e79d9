"""Domain models for the rental lifecycle."""

from rental_lifecycle.domain.models import (
    TERMINAL_STATUSES,
    ActorRole,
    AppliedDiscount,
    CarSnapshot,
    Discount,
    PaymentMethod,
    PaymentStatus,
    PricingBreakdown,
    Rental,
    RentalStatus,
)

__all__ = [
    "ActorRole",
    "AppliedDiscount",
    "CarSnapshot",
    "Discount",
    "PaymentMethod",
    "PaymentStatus",
    "PricingBreakdown",
    "Rental",
    "RentalStatus",
    "TERMINAL_STATUSES",
]
