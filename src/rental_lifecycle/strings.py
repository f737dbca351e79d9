"""Centralized user-facing texts for rental statuses."""

from __future__ import annotations

from rental_lifecycle.domain.models import RentalStatus
from rental_lifecycle.version import __company__

BRAND = __company__

STATUS_DESCRIPTIONS: dict[RentalStatus, str] = {
    RentalStatus.PENDING: "Rental request is awaiting the owner's approval.",
    RentalStatus.CONFIRMED: (
        "The rental has been approved, but the car has not been picked up yet."
    ),
    RentalStatus.ACTIVE: "The car has been picked up and is currently in use.",
    RentalStatus.RETURNED: "The car has been returned and rental is completed.",
    RentalStatus.CANCELED: "The rental has been canceled.",
}

OWNER_GUIDANCE: dict[RentalStatus, str] = {
    RentalStatus.PENDING: "You can either confirm or cancel this rental request.",
    RentalStatus.CONFIRMED: (
        "Once the renter has picked up the car, mark the status as Active."
    ),
    RentalStatus.ACTIVE: "When the car is returned, mark the status as Returned.",
    RentalStatus.RETURNED: "This rental has been completed.",
    RentalStatus.CANCELED: "This rental has been canceled.",
}

ACTION_LABELS: dict[RentalStatus, str] = {
    RentalStatus.CONFIRMED: "Confirm Rental",
    RentalStatus.CANCELED: "Cancel Rental",
    RentalStatus.ACTIVE: "Mark as Active (Picked Up)",
    RentalStatus.RETURNED: "Mark as Returned",
}


def status_description(status: RentalStatus | str) -> str:
    return STATUS_DESCRIPTIONS.get(RentalStatus(status), "")


def owner_guidance(status: RentalStatus | str) -> str:
    return OWNER_GUIDANCE.get(RentalStatus(status), "")


def action_label(status: RentalStatus | str) -> str:
    normalized = RentalStatus(status)
    return ACTION_LABELS.get(normalized, normalized.value)
