"""Repository for rental persistence."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from typing import Optional

from rental_lifecycle.domain.models import Rental, RentalStatus
from rental_lifecycle.logging_config import get_logger
from rental_lifecycle.repositories.mappers import rental_from_row, rental_to_record
from rental_lifecycle.services.errors import (
    DiscountAlreadyUsedError,
    NotFoundError,
    StaleRentalError,
)

_COLUMNS = (
    "id",
    "car_id",
    "renter_id",
    "owner_id",
    "pick_up_date",
    "return_date",
    "status",
    "payment_method",
    "payment_status",
    "price_per_day",
    "rental_days",
    "original_amount",
    "discount_amount",
    "final_amount",
    "discount_code",
    "discount_percentage",
    "discount_is_one_time",
    "has_review",
    "version",
    "created_at",
    "updated_at",
)

_MUTABLE_COLUMNS = ("status", "payment_status", "has_review", "updated_at")


class RentalRepository:
    """Data access for rentals.

    Writes are guarded by the ``version`` column: ``save`` only succeeds when
    the stored version still matches the one the caller loaded.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def create(self, rental: Rental) -> Rental:
        record = rental_to_record(replace(rental, version=1))
        placeholders = ", ".join("?" for _ in _COLUMNS)
        try:
            self._connection.execute(
                f"INSERT INTO rentals ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(record[column] for column in _COLUMNS),
            )
        except sqlite3.IntegrityError as exc:
            if rental.discount is not None and "discount_code" in str(exc):
                raise DiscountAlreadyUsedError() from exc
            self._logger.exception("Failed to create rental id=%s", rental.id)
            raise
        except Exception:
            self._logger.exception("Failed to create rental id=%s", rental.id)
            raise
        return replace(rental, version=1)

    def get_by_id(self, rental_id: str) -> Optional[Rental]:
        try:
            row = self._connection.execute(
                "SELECT * FROM rentals WHERE id = ?",
                (rental_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to fetch rental id=%s", rental_id)
            raise
        return rental_from_row(row) if row else None

    def save(self, rental: Rental) -> Rental:
        """Persist lifecycle fields if nobody else wrote since ``rental`` was read.

        Pricing columns are never rewritten after booking.
        """
        record = rental_to_record(rental)
        assignments = ", ".join(f"{column} = ?" for column in _MUTABLE_COLUMNS)
        try:
            cursor = self._connection.execute(
                f"""
                UPDATE rentals
                SET {assignments}, version = version + 1
                WHERE id = ? AND version = ?
                """,
                (
                    *(record[column] for column in _MUTABLE_COLUMNS),
                    rental.id,
                    rental.version,
                ),
            )
        except Exception:
            self._logger.exception("Failed to update rental id=%s", rental.id)
            raise
        if cursor.rowcount == 0:
            if self.get_by_id(rental.id) is None:
                raise NotFoundError(f"Rental {rental.id} not found.")
            self._logger.warning(
                "Stale write rejected for rental id=%s version=%s",
                rental.id,
                rental.version,
            )
            raise StaleRentalError()
        return replace(rental, version=rental.version + 1)

    def _list(self, where: str = "", params: tuple = ()) -> list[Rental]:
        query = "SELECT * FROM rentals"
        if where:
            query += f" WHERE {where}"
        query += " ORDER BY created_at DESC, id"
        try:
            rows = self._connection.execute(query, params).fetchall()
        except Exception:
            self._logger.exception("Failed to list rentals where=%s", where or "-")
            raise
        return [rental_from_row(row) for row in rows]

    def list_by_renter(self, renter_id: str) -> list[Rental]:
        return self._list("renter_id = ?", (renter_id,))

    def list_by_owner(self, owner_id: str) -> list[Rental]:
        return self._list("owner_id = ?", (owner_id,))

    def list_by_car(self, car_id: str) -> list[Rental]:
        return self._list("car_id = ?", (car_id,))

    def list_all(self, status: str | RentalStatus | None = None) -> list[Rental]:
        if status is None:
            return self._list()
        return self._list("status = ?", (RentalStatus(status).value,))

    def has_used_discount(self, renter_id: str, code: str) -> bool:
        try:
            row = self._connection.execute(
                """
                SELECT 1
                FROM rentals
                WHERE renter_id = ?
                  AND discount_code = ?
                LIMIT 1
                """,
                (renter_id, code),
            ).fetchone()
        except Exception:
            self._logger.exception(
                "Failed to check discount usage renter_id=%s", renter_id
            )
            raise
        return row is not None
