"""Booking and status-change orchestration for rentals."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from rental_lifecycle.domain.models import (
    ActorRole,
    AppliedDiscount,
    CarSnapshot,
    Discount,
    PaymentMethod,
    PaymentStatus,
    Rental,
    RentalStatus,
)
from rental_lifecycle.logging_config import get_logger
from rental_lifecycle.services import discount_validator, pricing, state_machine
from rental_lifecycle.services.errors import (
    ActorNotPermittedError,
    AlreadyReviewedError,
    CarInactiveError,
    DiscountInvalidError,
    NotReturnedError,
    ValidationError,
)
from rental_lifecycle.strings import action_label

DiscountLookup = Callable[[str], Optional[Discount]]


def _no_discounts(code: str) -> Optional[Discount]:
    return None


def _new_rental_id() -> str:
    return uuid.uuid4().hex


def _coerce_payment_method(method: str | PaymentMethod) -> PaymentMethod:
    if isinstance(method, PaymentMethod):
        return method
    try:
        return PaymentMethod(method)
    except ValueError as exc:
        raise ValidationError(f"Unsupported payment method: {method!r}.") from exc


class RentalLifecycleService:
    """Validates booking requests and status changes, returning new rentals.

    The service does no I/O: discounts are resolved through ``discount_lookup``
    and the caller persists whatever it returns.
    """

    def __init__(
        self,
        discount_lookup: DiscountLookup = _no_discounts,
        id_factory: Callable[[], str] = _new_rental_id,
    ) -> None:
        self._discount_lookup = discount_lookup
        self._id_factory = id_factory
        self._logger = get_logger(self.__class__.__name__)

    def create_booking(
        self,
        car: CarSnapshot,
        renter_id: str,
        pick_up_date: datetime,
        return_date: datetime,
        discount_code: Optional[str] = None,
        *,
        now: datetime,
        payment_method: str | PaymentMethod = PaymentMethod.GCASH,
    ) -> Rental:
        pricing.ensure_date_range(pick_up_date, return_date)
        if not car.is_active:
            raise CarInactiveError()

        check = None
        if discount_code is not None:
            check = self._check_discount(discount_code, now)

        breakdown = pricing.compute_pricing(
            pick_up_date, return_date, car.price_per_day, check
        )
        applied = None
        if check is not None:
            applied = AppliedDiscount(
                code=check.code,
                discount_percentage=check.discount_percentage,
                discount_amount=breakdown.discount_amount,
                is_one_time=check.is_one_time,
            )

        rental = Rental(
            id=self._id_factory(),
            car_id=car.id,
            renter_id=renter_id,
            owner_id=car.owner_id,
            pick_up_date=pick_up_date,
            return_date=return_date,
            status=RentalStatus.PENDING,
            payment_method=_coerce_payment_method(payment_method),
            payment_status=PaymentStatus.PENDING,
            price_per_day=pricing.parse_price(car.price_per_day),
            rental_days=breakdown.rental_days,
            original_amount=breakdown.original_amount,
            discount_amount=breakdown.discount_amount,
            final_amount=breakdown.final_amount,
            discount=applied,
            created_at=now,
            updated_at=now,
            has_review=False,
        )
        self._logger.info(
            "Booking %s created for car %s (%s days, final %s)",
            rental.id,
            car.id,
            rental.rental_days,
            rental.final_amount,
        )
        return rental

    def _check_discount(
        self, discount_code: str, now: datetime
    ) -> discount_validator.DiscountCheck:
        code = discount_code.strip()
        if not code:
            raise DiscountInvalidError("Please enter a discount code.")
        discount = self._discount_lookup(code)
        if discount is None:
            raise DiscountInvalidError("Discount code not found.")
        return discount_validator.validate(discount, now)

    def request_status_change(
        self,
        rental: Rental,
        requested_status: str | RentalStatus,
        actor_role: str | ActorRole,
        now: datetime,
    ) -> Rental:
        updated = state_machine.transition(rental, requested_status, actor_role, now)
        self._logger.info(
            "Rental %s moved from %s to %s by %s",
            rental.id,
            rental.status.value,
            updated.status.value,
            state_machine.coerce_role(actor_role).value,
        )
        return updated

    def mark_reviewed(self, rental: Rental) -> Rental:
        if rental.status != RentalStatus.RETURNED:
            raise NotReturnedError()
        if rental.has_review:
            raise AlreadyReviewedError()
        return replace(rental, has_review=True)

    def available_actions(
        self, rental: Rental, actor_role: str | ActorRole
    ) -> list[tuple[RentalStatus, str]]:
        """Status changes ``actor_role`` may request now, with their button labels."""
        return [
            (target, action_label(target))
            for target in state_machine.allowed_targets(rental.status, actor_role)
        ]

    def role_for(
        self, rental: Rental, user_id: Optional[str], *, is_admin: bool = False
    ) -> ActorRole:
        """Resolve the role a session user plays for ``rental``."""
        if is_admin:
            return ActorRole.ADMIN
        if user_id is not None and user_id == rental.owner_id:
            return ActorRole.OWNER
        if user_id is not None and user_id == rental.renter_id:
            return ActorRole.RENTER
        raise ActorNotPermittedError("You are not a party to this rental.")
