"""Rental service: runs lifecycle rules against the SQLite store."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Iterable, Optional

from rental_lifecycle.db.connection import transaction
from rental_lifecycle.domain.models import (
    CarSnapshot,
    PaymentMethod,
    Rental,
    RentalStatus,
)
from rental_lifecycle.logging_config import get_logger
from rental_lifecycle.repositories.discount_repo import DiscountRepository
from rental_lifecycle.repositories.rental_repo import RentalRepository
from rental_lifecycle.services.errors import (
    ActorNotPermittedError,
    DiscountAlreadyUsedError,
    NotFoundError,
    StaleRentalError,
    TransitionError,
)
from rental_lifecycle.services.lifecycle_service import RentalLifecycleService
from rental_lifecycle.services.notifications import (
    NoticeListener,
    build_rental_notice,
)


class RentalService:
    """Service for booking and updating stored rentals.

    Each call loads the latest stored rental, applies the lifecycle rules and
    writes the result back with a version check. A ``StaleRentalError`` means
    the caller must reload and decide again; nothing is retried here.
    """

    def __init__(
        self,
        connection: sqlite3.Connection,
        listeners: Iterable[NoticeListener] = (),
        lifecycle: Optional[RentalLifecycleService] = None,
    ) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._rentals = RentalRepository(connection)
        self._discounts = DiscountRepository(connection)
        self._lifecycle = lifecycle or RentalLifecycleService(
            discount_lookup=self._discounts.get_by_code
        )
        self._listeners: list[NoticeListener] = list(listeners)
        self._logger = get_logger(self.__class__.__name__)

    def add_listener(self, listener: NoticeListener) -> None:
        self._listeners.append(listener)

    def book(
        self,
        car: CarSnapshot,
        renter_id: str,
        pick_up_date: datetime,
        return_date: datetime,
        *,
        now: datetime,
        discount_code: Optional[str] = None,
        payment_method: str | PaymentMethod = PaymentMethod.GCASH,
    ) -> Rental:
        rental = self._lifecycle.create_booking(
            car,
            renter_id,
            pick_up_date,
            return_date,
            discount_code,
            now=now,
            payment_method=payment_method,
        )
        applied = rental.discount
        with transaction(self._connection):
            if (
                applied is not None
                and applied.is_one_time
                and self._rentals.has_used_discount(renter_id, applied.code)
            ):
                self._logger.info(
                    "One-time discount %s already used by renter %s",
                    applied.code,
                    renter_id,
                )
                raise DiscountAlreadyUsedError()
            saved = self._rentals.create(rental)
        self._notify(saved, car.label)
        return saved

    def get_rental(self, rental_id: str) -> Rental:
        rental = self._rentals.get_by_id(rental_id)
        if rental is None:
            raise NotFoundError(f"Rental {rental_id} not found.")
        return rental

    def change_status(
        self,
        rental_id: str,
        requested_status: str | RentalStatus,
        *,
        actor_id: Optional[str],
        now: datetime,
        is_admin: bool = False,
        expected_version: Optional[int] = None,
        car_label: Optional[str] = None,
    ) -> Rental:
        """Move a stored rental to ``requested_status`` on behalf of ``actor_id``.

        ``expected_version`` is the version the caller's screen was showing;
        when given, a newer stored rental is reported as stale instead of
        being judged against data the user never saw.
        """
        rental = self.get_rental(rental_id)
        if expected_version is not None and rental.version != expected_version:
            raise StaleRentalError()
        try:
            role = self._lifecycle.role_for(rental, actor_id, is_admin=is_admin)
            updated = self._lifecycle.request_status_change(
                rental, requested_status, role, now
            )
        except TransitionError as exc:
            self._logger.info(
                "Status change rejected for rental %s (%s): %s",
                rental_id,
                exc.code,
                exc.message,
            )
            raise
        with transaction(self._connection):
            saved = self._rentals.save(updated)
        self._notify(saved, car_label)
        return saved

    def cancel_booking(
        self, rental_id: str, *, renter_id: str, now: datetime
    ) -> Rental:
        return self.change_status(
            rental_id, RentalStatus.CANCELED, actor_id=renter_id, now=now
        )

    def mark_reviewed(self, rental_id: str, *, reviewer_id: str) -> Rental:
        rental = self.get_rental(rental_id)
        if reviewer_id != rental.renter_id:
            raise ActorNotPermittedError("Only the renter can review this rental.")
        reviewed = self._lifecycle.mark_reviewed(rental)
        with transaction(self._connection):
            return self._rentals.save(reviewed)

    def rentals_for_renter(self, renter_id: str) -> list[Rental]:
        return self._rentals.list_by_renter(renter_id)

    def rentals_for_owner(self, owner_id: str) -> list[Rental]:
        return self._rentals.list_by_owner(owner_id)

    def rentals_for_car(self, car_id: str) -> list[Rental]:
        return self._rentals.list_by_car(car_id)

    def _notify(self, rental: Rental, car_label: Optional[str]) -> None:
        if not self._listeners:
            return
        notice = build_rental_notice(rental, car_label)
        for listener in self._listeners:
            try:
                listener(notice)
            except Exception:
                self._logger.exception(
                    "Rental notice listener failed for rental %s", rental.id
                )
