"""Rental statistics and income reports."""

from __future__ import annotations

import sqlite3
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from rental_lifecycle.config import PLATFORM_COMMISSION_RATE, TOP_CARS_LIMIT
from rental_lifecycle.domain.models import RentalStatus
from rental_lifecycle.repositories.rental_repo import RentalRepository
from rental_lifecycle.services.pricing import round_money


@dataclass(frozen=True)
class MonthlyIncome:
    month: str
    revenue: Decimal
    estimated_income: Decimal
    rentals_count: int


@dataclass(frozen=True)
class RankedCar:
    car_id: str
    rentals_count: int


class ReportService:
    """Aggregates over stored rentals for the admin dashboard."""

    def __init__(
        self,
        connection: sqlite3.Connection,
        commission_rate: Decimal = PLATFORM_COMMISSION_RATE,
    ) -> None:
        self._repo = RentalRepository(connection)
        self._commission_rate = commission_rate

    def status_counts(self) -> dict[RentalStatus, int]:
        counts = Counter(rental.status for rental in self._repo.list_all())
        return {status: counts.get(status, 0) for status in RentalStatus}

    def monthly_income(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[MonthlyIncome]:
        """Revenue of returned rentals per pick-up month, oldest first."""
        revenue: dict[str, Decimal] = {}
        counts: Counter[str] = Counter()
        for rental in self._repo.list_all(RentalStatus.RETURNED):
            if start is not None and rental.pick_up_date < start:
                continue
            if end is not None and rental.pick_up_date > end:
                continue
            month = rental.pick_up_date.strftime("%Y-%m")
            revenue[month] = revenue.get(month, Decimal("0")) + rental.final_amount
            counts[month] += 1
        return [
            MonthlyIncome(
                month=month,
                revenue=revenue[month],
                estimated_income=round_money(revenue[month] * self._commission_rate),
                rentals_count=counts[month],
            )
            for month in sorted(revenue)
        ]

    def top_cars(self, limit: int = TOP_CARS_LIMIT) -> list[RankedCar]:
        counts = Counter(
            rental.car_id for rental in self._repo.list_all(RentalStatus.RETURNED)
        )
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [RankedCar(car_id=car_id, rentals_count=count) for car_id, count in ranked[:limit]]
