"""Discount code administration."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import datetime
from typing import Optional

from rental_lifecycle.db.connection import transaction
from rental_lifecycle.domain.models import Discount
from rental_lifecycle.logging_config import get_logger
from rental_lifecycle.repositories.discount_repo import DiscountRepository
from rental_lifecycle.services import discount_validator
from rental_lifecycle.services.errors import (
    DiscountError,
    DiscountInvalidError,
    NotFoundError,
    ValidationError,
)

_UNSET = object()

_TRUE_TEXT = {"1", "true", "yes", "y"}
_FALSE_TEXT = {"0", "false", "no", "n", ""}


def _parse_flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
    raise ValidationError(f"Invalid one-time flag: {value!r}.")


class DiscountService:
    """Service for creating, editing and looking up discount codes."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._repo = DiscountRepository(connection)
        self._logger = get_logger(self.__class__.__name__)

    def list_discounts(self) -> list[Discount]:
        return self._repo.list_all()

    def get_discount(self, discount_id: int) -> Discount:
        discount = self._repo.get_by_id(discount_id)
        if discount is None:
            raise NotFoundError("Discount not found.")
        return discount

    def find_valid(self, code: str, at: datetime) -> discount_validator.DiscountCheck:
        """Resolve ``code`` and check it can be applied at ``at``."""
        normalized = (code or "").strip()
        if not normalized:
            raise DiscountInvalidError("Please enter a discount code.")
        return discount_validator.validate(self._repo.get_by_code(normalized), at)

    def create_discount(
        self,
        code: str,
        discount_percentage: object,
        start_date: datetime,
        end_date: Optional[datetime],
        *,
        now: datetime,
        is_one_time: bool = False,
        description: Optional[str] = None,
    ) -> Discount:
        discount = Discount(
            id=None,
            code=(code or "").strip(),
            discount_percentage=discount_percentage,
            is_one_time=_parse_flag(is_one_time),
            start_date=start_date,
            end_date=end_date,
            description=description,
            created_at=now,
            updated_at=now,
        )
        discount = self._validated(discount)
        with transaction(self._connection):
            created = self._repo.create(discount)
        self._logger.info(
            "Discount %s created (%s%% off)", created.code, created.discount_percentage
        )
        return created

    def update_discount(
        self,
        discount_id: int,
        *,
        now: datetime,
        code: object = _UNSET,
        discount_percentage: object = _UNSET,
        start_date: object = _UNSET,
        end_date: object = _UNSET,
        is_one_time: object = _UNSET,
        description: object = _UNSET,
    ) -> Discount:
        """Change only the fields that were passed."""
        current = self.get_discount(discount_id)
        changes = {
            name: value
            for name, value in (
                ("code", code),
                ("discount_percentage", discount_percentage),
                ("start_date", start_date),
                ("end_date", end_date),
                ("is_one_time", is_one_time),
                ("description", description),
            )
            if value is not _UNSET
        }
        if "code" in changes:
            changes["code"] = (changes["code"] or "").strip()
        if "is_one_time" in changes:
            changes["is_one_time"] = _parse_flag(changes["is_one_time"])
        updated = self._validated(replace(current, updated_at=now, **changes))
        with transaction(self._connection):
            if not self._repo.update(updated):
                raise NotFoundError("Discount not found.")
        self._logger.info("Discount %s updated", updated.code)
        return updated

    def delete_discount(self, discount_id: int) -> None:
        with transaction(self._connection):
            if not self._repo.delete(discount_id):
                raise NotFoundError("Discount not found.")
        self._logger.info("Discount id=%s deleted", discount_id)

    def _validated(self, discount: Discount) -> Discount:
        if not isinstance(discount.start_date, datetime):
            raise ValidationError("Start date is required.")
        if discount.end_date is not None and not isinstance(discount.end_date, datetime):
            raise ValidationError("End date must be a date.")
        try:
            percentage = discount_validator.check_shape(discount)
        except DiscountError as exc:
            raise ValidationError(exc.message) from exc
        return replace(discount, discount_percentage=percentage)
