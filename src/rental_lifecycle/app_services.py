"""Service container handed to the presentation layer."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

from rental_lifecycle.config import AppConfig
from rental_lifecycle.domain.models import CarSnapshot, Rental
from rental_lifecycle.services.discount_service import DiscountService
from rental_lifecycle.services.lifecycle_service import RentalLifecycleService
from rental_lifecycle.services.rental_service import RentalService
from rental_lifecycle.services.report_service import ReportService
from rental_lifecycle.utils.pdf_generator import generate_booking_receipt


@dataclass(frozen=True)
class AppServices:
    """Shared services for dependency injection."""

    connection: sqlite3.Connection
    config: AppConfig
    receipts_dir: Path
    lifecycle: RentalLifecycleService
    rental_service: RentalService
    discount_service: DiscountService
    report_service: ReportService

    def write_receipt(self, rental: Rental, car: CarSnapshot) -> Path:
        """Render the booking receipt for ``rental`` into the receipts folder."""
        return generate_booking_receipt(
            rental,
            car,
            self.receipts_dir / f"booking_{rental.id}.pdf",
            issuer=self.config.receipt_issuer,
            currency_symbol=self.config.currency_symbol,
        )

    def close(self) -> None:
        self.connection.close()
