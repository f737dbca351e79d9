"""Repositories for data access."""

from rental_lifecycle.repositories.discount_repo import DiscountRepository
from rental_lifecycle.repositories.mappers import (
    discount_from_row,
    discount_to_record,
    rental_from_row,
    rental_to_record,
)
from rental_lifecycle.repositories.rental_repo import RentalRepository

__all__ = [
    "discount_from_row",
    "discount_to_record",
    "DiscountRepository",
    "rental_from_row",
    "rental_to_record",
    "RentalRepository",
]
