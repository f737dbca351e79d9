"""Rental change notices handed to the push-notification layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from rental_lifecycle.domain.models import Rental, RentalStatus
from rental_lifecycle.strings import BRAND, owner_guidance, status_description

NOTICE_TYPE_RENTAL_UPDATE = "rentalUpdate"
NOTICE_TYPE_NEW_BOOKING = "newBooking"


@dataclass(frozen=True)
class RentalNotice:
    """Push payload describing a rental that was just written."""

    rental_id: str
    status: RentalStatus
    recipient_ids: tuple[str, ...]
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)


NoticeListener = Callable[[RentalNotice], None]


def build_rental_notice(
    rental: Rental, car_label: Optional[str] = None
) -> RentalNotice:
    """Describe ``rental`` for the renter and the owner.

    A freshly booked (Pending) rental is announced to the owner; any other
    status goes to the renter.
    """
    car = car_label or f"car {rental.car_id}"
    data: dict[str, Any] = {
        "rentalId": rental.id,
        "status": rental.status.value,
        "type": NOTICE_TYPE_RENTAL_UPDATE,
    }
    if rental.status == RentalStatus.PENDING:
        data["type"] = NOTICE_TYPE_NEW_BOOKING
        return RentalNotice(
            rental_id=rental.id,
            status=rental.status,
            recipient_ids=(rental.owner_id,),
            title=f"{BRAND} New Booking Request",
            body=(
                f"Your {car} was requested from "
                f"{rental.pick_up_date:%Y-%m-%d} to {rental.return_date:%Y-%m-%d}. "
                f"{owner_guidance(rental.status)}"
            ),
            data=data,
        )
    return RentalNotice(
        rental_id=rental.id,
        status=rental.status,
        recipient_ids=(rental.renter_id,),
        title=f"{BRAND} Rental Status Update",
        body=(
            f"Your rental for {car} has been updated to: {rental.status.value}. "
            f"{status_description(rental.status)}"
        ),
        data=data,
    )
