"""Application bootstrap."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from rental_lifecycle.app_services import AppServices
from rental_lifecycle.config import load_app_config
from rental_lifecycle.db.connection import get_connection
from rental_lifecycle.db.migrations import apply_migrations
from rental_lifecycle.logging_config import configure_logging, get_logger
from rental_lifecycle.paths import (
    get_config_path,
    get_db_path,
    get_logs_dir,
    get_receipts_dir,
)
from rental_lifecycle.repositories.discount_repo import DiscountRepository
from rental_lifecycle.services.discount_service import DiscountService
from rental_lifecycle.services.lifecycle_service import RentalLifecycleService
from rental_lifecycle.services.notifications import NoticeListener
from rental_lifecycle.services.rental_service import RentalService
from rental_lifecycle.services.report_service import ReportService


def bootstrap(
    database_path: Optional[Path | str] = None,
    *,
    config_path: Optional[Path] = None,
    receipts_dir: Optional[Path] = None,
    listeners: Iterable[NoticeListener] = (),
    configure: bool = True,
) -> AppServices:
    """Open the database, apply migrations and wire the services."""
    if configure:
        configure_logging(get_logs_dir())
    logger = get_logger(__name__)

    config = load_app_config(config_path or get_config_path())
    connection = get_connection(database_path or get_db_path())
    schema_version = apply_migrations(connection)

    lifecycle = RentalLifecycleService(
        discount_lookup=DiscountRepository(connection).get_by_code
    )
    services = AppServices(
        connection=connection,
        config=config,
        receipts_dir=receipts_dir or get_receipts_dir(),
        lifecycle=lifecycle,
        rental_service=RentalService(connection, listeners, lifecycle=lifecycle),
        discount_service=DiscountService(connection),
        report_service=ReportService(connection, config.commission_rate),
    )
    logger.info("Starting %s (schema v%s)", config.app_name, schema_version)
    return services


def main() -> int:
    """Prepare the data folder and print a rental status summary."""
    services = bootstrap()
    try:
        for status, count in services.report_service.status_counts().items():
            print(f"{status.value:<10} {count}")
    finally:
        services.close()
    return 0
