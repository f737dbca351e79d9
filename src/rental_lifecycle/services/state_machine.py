"""Rental status transitions and who may perform them."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from types import MappingProxyType

from rental_lifecycle.domain.models import ActorRole, Rental, RentalStatus
from rental_lifecycle.services.errors import (
    ActorNotPermittedError,
    IllegalTransitionError,
)

_STAFF = frozenset({ActorRole.OWNER, ActorRole.ADMIN})

TRANSITIONS = MappingProxyType(
    {
        (RentalStatus.PENDING, RentalStatus.CONFIRMED): _STAFF,
        (RentalStatus.PENDING, RentalStatus.CANCELED): _STAFF | {ActorRole.RENTER},
        (RentalStatus.CONFIRMED, RentalStatus.ACTIVE): _STAFF,
        (RentalStatus.ACTIVE, RentalStatus.RETURNED): _STAFF,
    }
)


def coerce_status(status: str | RentalStatus) -> RentalStatus:
    if isinstance(status, RentalStatus):
        return status
    try:
        return RentalStatus(status)
    except ValueError as exc:
        raise IllegalTransitionError(f"Unknown rental status: {status!r}.") from exc


def coerce_role(role: str | ActorRole) -> ActorRole:
    if isinstance(role, ActorRole):
        return role
    try:
        return ActorRole(str(role).strip().lower())
    except ValueError as exc:
        raise ActorNotPermittedError(f"Unknown actor role: {role!r}.") from exc


def can_transition(
    current: str | RentalStatus,
    requested: str | RentalStatus,
    actor_role: str | ActorRole,
) -> bool:
    try:
        allowed = TRANSITIONS.get((coerce_status(current), coerce_status(requested)))
        role = coerce_role(actor_role)
    except (IllegalTransitionError, ActorNotPermittedError):
        return False
    return allowed is not None and role in allowed


def allowed_targets(
    current: str | RentalStatus, actor_role: str | ActorRole
) -> tuple[RentalStatus, ...]:
    """Statuses ``actor_role`` may move a rental to from ``current``."""
    return tuple(
        target
        for target in RentalStatus
        if can_transition(current, target, actor_role)
    )


def transition(
    rental: Rental,
    requested: str | RentalStatus,
    actor_role: str | ActorRole,
    now: datetime,
) -> Rental:
    """Return a copy of ``rental`` moved to ``requested``.

    Only ``status`` and ``updated_at`` change; pricing stays as booked.
    """
    target = coerce_status(requested)
    current = rental.status
    if target == current:
        raise IllegalTransitionError(f"Rental is already {current.value}.")
    if current.is_terminal:
        raise IllegalTransitionError(
            f"A {current.value} rental cannot change status."
        )
    allowed = TRANSITIONS.get((current, target))
    if allowed is None:
        raise IllegalTransitionError(
            f"Cannot change status from {current.value} to {target.value}."
        )
    role = coerce_role(actor_role)
    if role not in allowed:
        raise ActorNotPermittedError(
            f"A {role.value} cannot change status from {current.value} to {target.value}."
        )
    return replace(rental, status=target, updated_at=now)
