"""Database migrations for SQLite schema versioning."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from rental_lifecycle.db.connection import transaction
from rental_lifecycle.logging_config import get_logger


@dataclass(frozen=True)
class Migration:
    version: int
    script: str


MIGRATIONS: list[Migration] = [
    Migration(
        version=1,
        script="""
        CREATE TABLE IF NOT EXISTS discounts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            code TEXT NOT NULL UNIQUE,
            discount_percentage TEXT NOT NULL,
            is_one_time INTEGER NOT NULL DEFAULT 0,
            description TEXT,
            start_date TEXT NOT NULL,
            end_date TEXT,
            created_at TEXT,
            updated_at TEXT
        );

        CREATE TABLE IF NOT EXISTS rentals (
            id TEXT PRIMARY KEY,
            car_id TEXT NOT NULL,
            renter_id TEXT NOT NULL,
            owner_id TEXT NOT NULL,
            pick_up_date TEXT NOT NULL,
            return_date TEXT NOT NULL,
            status TEXT NOT NULL CHECK (
                status IN ('Pending', 'Confirmed', 'Active', 'Returned', 'Canceled')
            ),
            payment_method TEXT NOT NULL,
            payment_status TEXT NOT NULL,
            price_per_day TEXT NOT NULL,
            rental_days INTEGER NOT NULL,
            original_amount TEXT NOT NULL,
            discount_amount TEXT NOT NULL DEFAULT '0',
            final_amount TEXT NOT NULL,
            discount_code TEXT,
            discount_percentage TEXT,
            discount_is_one_time INTEGER NOT NULL DEFAULT 0,
            has_review INTEGER NOT NULL DEFAULT 0,
            version INTEGER NOT NULL DEFAULT 1,
            created_at TEXT,
            updated_at TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_rentals_renter_id ON rentals(renter_id);
        CREATE INDEX IF NOT EXISTS idx_rentals_owner_id ON rentals(owner_id);
        CREATE INDEX IF NOT EXISTS idx_rentals_car_id ON rentals(car_id);
        CREATE INDEX IF NOT EXISTS idx_rentals_status ON rentals(status);
        """,
    ),
    Migration(
        version=2,
        script="""
        CREATE INDEX IF NOT EXISTS idx_rentals_renter_discount
            ON rentals(renter_id, discount_code);
        """,
    ),
    Migration(
        version=3,
        script="""
        CREATE UNIQUE INDEX IF NOT EXISTS uq_rentals_one_time_discount
            ON rentals(renter_id, discount_code)
            WHERE discount_is_one_time = 1;
        """,
    ),
]

LATEST_VERSION = MIGRATIONS[-1].version


def _fetch_schema_version(connection: sqlite3.Connection) -> int:
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS app_meta (
            schema_version INTEGER NOT NULL
        );
        """
    )
    row = connection.execute(
        "SELECT schema_version FROM app_meta LIMIT 1"
    ).fetchone()
    if row is None:
        connection.execute("INSERT INTO app_meta (schema_version) VALUES (0)")
        return 0
    return int(row[0])


def get_schema_version(connection: sqlite3.Connection) -> int:
    with transaction(connection):
        return _fetch_schema_version(connection)


def apply_migrations(connection: sqlite3.Connection) -> int:
    """Apply pending migrations and return the resulting schema version."""
    logger = get_logger("migrations")
    current_version = get_schema_version(connection)

    for migration in MIGRATIONS:
        if migration.version <= current_version:
            continue
        with transaction(connection):
            for statement in migration.script.split(";"):
                if statement.strip():
                    connection.execute(statement)
            connection.execute(
                "UPDATE app_meta SET schema_version = ?",
                (migration.version,),
            )
        logger.info("Applied migration v%s", migration.version)
        current_version = migration.version
    return current_version
