"""Application configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path

from rental_lifecycle.utils.config_store import load_config_data
from rental_lifecycle.version import __app_name__, __company__

APP_NAME = __app_name__
APP_DATA_DIRNAME = "CarRental"
HOME_ENV_VAR = "RENTAL_LIFECYCLE_HOME"
DB_FILENAME = "rentals.db"
LOGS_DIRNAME = "logs"
LOG_FILENAME = "app.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3
RECEIPTS_DIRNAME = "receipts"
CONFIG_FILENAME = "config.json"

CURRENCY_SYMBOL = "₱"
PLATFORM_COMMISSION_RATE = Decimal("0.15")
TOP_CARS_LIMIT = 3


@dataclass(frozen=True)
class ReceiptIssuerInfo:
    """Issuer information printed on booking receipts."""

    name: str
    email: str
    phone: str


RECEIPT_ISSUER = ReceiptIssuerInfo(
    name="BMW Rentals",
    email="bookings@bmwrentals.local",
    phone="+63 900 000 0000",
)


@dataclass(frozen=True)
class AppConfig:
    """Static configuration values, optionally overridden by config.json."""

    app_name: str = APP_NAME
    organization_name: str = __company__
    currency_symbol: str = CURRENCY_SYMBOL
    commission_rate: Decimal = PLATFORM_COMMISSION_RATE
    receipt_issuer: ReceiptIssuerInfo = field(default=RECEIPT_ISSUER)


def load_app_config(config_path: Path) -> AppConfig:
    """Build an AppConfig from defaults plus any overrides in config_path."""
    config = AppConfig()
    data = load_config_data(config_path)

    currency_symbol = data.get("currency_symbol")
    if isinstance(currency_symbol, str) and currency_symbol.strip():
        config = replace(config, currency_symbol=currency_symbol.strip())

    raw_rate = data.get("commission_rate")
    if raw_rate is not None:
        try:
            rate = Decimal(str(raw_rate))
        except InvalidOperation:
            rate = None
        if rate is not None and rate.is_finite() and 0 <= rate <= 1:
            config = replace(config, commission_rate=rate)

    issuer = data.get("receipt_issuer")
    if isinstance(issuer, dict):
        config = replace(
            config,
            receipt_issuer=ReceiptIssuerInfo(
                name=str(issuer.get("name") or RECEIPT_ISSUER.name),
                email=str(issuer.get("email") or RECEIPT_ISSUER.email),
                phone=str(issuer.get("phone") or RECEIPT_ISSUER.phone),
            ),
        )
    return config
