"""Repository for discount code persistence."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from typing import Optional

from rental_lifecycle.domain.models import Discount
from rental_lifecycle.logging_config import get_logger
from rental_lifecycle.repositories.mappers import discount_from_row, discount_to_record
from rental_lifecycle.services.errors import DuplicateDiscountCodeError

_COLUMNS = (
    "code",
    "discount_percentage",
    "is_one_time",
    "description",
    "start_date",
    "end_date",
    "created_at",
    "updated_at",
)


class DiscountRepository:
    """Data access for discount codes."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def create(self, discount: Discount) -> Discount:
        record = discount_to_record(discount)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        try:
            cursor = self._connection.execute(
                f"INSERT INTO discounts ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(record[column] for column in _COLUMNS),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateDiscountCodeError() from exc
        except Exception:
            self._logger.exception("Failed to create discount code=%s", discount.code)
            raise
        return replace(discount, id=int(cursor.lastrowid))

    def get_by_id(self, discount_id: int) -> Optional[Discount]:
        try:
            row = self._connection.execute(
                "SELECT * FROM discounts WHERE id = ?",
                (discount_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to fetch discount id=%s", discount_id)
            raise
        return discount_from_row(row) if row else None

    def get_by_code(self, code: str) -> Optional[Discount]:
        try:
            row = self._connection.execute(
                "SELECT * FROM discounts WHERE code = ?",
                (code,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to fetch discount code=%s", code)
            raise
        return discount_from_row(row) if row else None

    def list_all(self) -> list[Discount]:
        try:
            rows = self._connection.execute(
                "SELECT * FROM discounts ORDER BY start_date DESC, id"
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list discounts")
            raise
        return [discount_from_row(row) for row in rows]

    def update(self, discount: Discount) -> bool:
        record = discount_to_record(discount)
        assignments = ", ".join(f"{column} = ?" for column in _COLUMNS)
        try:
            cursor = self._connection.execute(
                f"UPDATE discounts SET {assignments} WHERE id = ?",
                (*(record[column] for column in _COLUMNS), discount.id),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateDiscountCodeError() from exc
        except Exception:
            self._logger.exception("Failed to update discount id=%s", discount.id)
            raise
        return cursor.rowcount > 0

    def delete(self, discount_id: int) -> bool:
        try:
            cursor = self._connection.execute(
                "DELETE FROM discounts WHERE id = ?",
                (discount_id,),
            )
        except Exception:
            self._logger.exception("Failed to delete discount id=%s", discount_id)
            raise
        return cursor.rowcount > 0
