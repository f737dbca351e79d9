"""
Transition table coverage: every (status, requested status, role) triple is
either in the permitted table and succeeds, or fails.
"""

from datetime import datetime
from itertools import product

import pytest

from rental_lifecycle.domain.models import ActorRole, RentalStatus
from rental_lifecycle.services import state_machine
from rental_lifecycle.services.errors import (
    ActorNotPermittedError,
    IllegalTransitionError,
    TransitionError,
)

LATER = datetime(2024, 6, 2, 8, 30)

PERMITTED = {
    (RentalStatus.PENDING, RentalStatus.CONFIRMED, ActorRole.OWNER),
    (RentalStatus.PENDING, RentalStatus.CONFIRMED, ActorRole.ADMIN),
    (RentalStatus.PENDING, RentalStatus.CANCELED, ActorRole.OWNER),
    (RentalStatus.PENDING, RentalStatus.CANCELED, ActorRole.ADMIN),
    (RentalStatus.PENDING, RentalStatus.CANCELED, ActorRole.RENTER),
    (RentalStatus.CONFIRMED, RentalStatus.ACTIVE, ActorRole.OWNER),
    (RentalStatus.CONFIRMED, RentalStatus.ACTIVE, ActorRole.ADMIN),
    (RentalStatus.ACTIVE, RentalStatus.RETURNED, ActorRole.OWNER),
    (RentalStatus.ACTIVE, RentalStatus.RETURNED, ActorRole.ADMIN),
}

ALL_TRIPLES = list(product(RentalStatus, RentalStatus, ActorRole))


@pytest.mark.parametrize("current,requested,role", ALL_TRIPLES)
def test_transition_totality(make_rental, current, requested, role):
    rental = make_rental(current)
    if (current, requested, role) in PERMITTED:
        assert state_machine.can_transition(current, requested, role)
        updated = state_machine.transition(rental, requested, role, LATER)
        assert updated.status == requested
        assert updated.updated_at == LATER
    else:
        assert not state_machine.can_transition(current, requested, role)
        with pytest.raises(TransitionError):
            state_machine.transition(rental, requested, role, LATER)


@pytest.mark.parametrize("terminal", [RentalStatus.RETURNED, RentalStatus.CANCELED])
@pytest.mark.parametrize("requested", list(RentalStatus))
@pytest.mark.parametrize("role", list(ActorRole))
def test_terminal_rentals_never_move(make_rental, terminal, requested, role):
    with pytest.raises(IllegalTransitionError):
        state_machine.transition(make_rental(terminal), requested, role, LATER)


def test_same_status_is_illegal_even_for_admin(make_rental):
    with pytest.raises(IllegalTransitionError):
        state_machine.transition(
            make_rental(RentalStatus.PENDING), RentalStatus.PENDING, ActorRole.ADMIN, LATER
        )


def test_skipping_a_stage_is_illegal(make_rental):
    with pytest.raises(IllegalTransitionError):
        state_machine.transition(
            make_rental(RentalStatus.PENDING), RentalStatus.ACTIVE, ActorRole.OWNER, LATER
        )


def test_renter_cannot_cancel_after_confirmation(make_rental):
    with pytest.raises(IllegalTransitionError):
        state_machine.transition(
            make_rental(RentalStatus.CONFIRMED), RentalStatus.CANCELED, ActorRole.RENTER, LATER
        )


def test_renter_cannot_confirm(make_rental):
    with pytest.raises(ActorNotPermittedError):
        state_machine.transition(
            make_rental(RentalStatus.PENDING), RentalStatus.CONFIRMED, ActorRole.RENTER, LATER
        )


def test_transition_only_touches_status_and_updated_at(make_rental):
    rental = make_rental(RentalStatus.PENDING)
    updated = state_machine.transition(rental, "Confirmed", "owner", LATER)
    assert updated is not rental
    assert rental.status == RentalStatus.PENDING
    assert updated.final_amount == rental.final_amount
    assert updated.price_per_day == rental.price_per_day
    assert updated.created_at == rental.created_at
    assert updated.version == rental.version


def test_string_inputs_are_coerced(make_rental):
    updated = state_machine.transition(make_rental(RentalStatus.ACTIVE), "Returned", " Admin ", LATER)
    assert updated.status == RentalStatus.RETURNED


def test_unknown_status_and_role(make_rental):
    with pytest.raises(IllegalTransitionError):
        state_machine.transition(make_rental(), "Lost", ActorRole.OWNER, LATER)
    with pytest.raises(ActorNotPermittedError):
        state_machine.transition(make_rental(), RentalStatus.CONFIRMED, "mechanic", LATER)
    assert not state_machine.can_transition("Pending", "Confirmed", "mechanic")


def test_allowed_targets():
    assert state_machine.allowed_targets(RentalStatus.PENDING, ActorRole.OWNER) == (
        RentalStatus.CONFIRMED,
        RentalStatus.CANCELED,
    )
    assert state_machine.allowed_targets(RentalStatus.PENDING, ActorRole.RENTER) == (
        RentalStatus.CANCELED,
    )
    assert state_machine.allowed_targets(RentalStatus.CONFIRMED, ActorRole.RENTER) == ()
    assert state_machine.allowed_targets(RentalStatus.RETURNED, ActorRole.ADMIN) == ()
