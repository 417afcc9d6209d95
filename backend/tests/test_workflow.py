"""
Tests for the pure booking and event status machines.
"""

import pytest

from usherhire.core.exceptions import InvalidInputError, UnauthorizedError
from usherhire.models.enums import BookingStatus, EventStatus
from usherhire.services.workflow import (
    ActorRole,
    TERMINAL_BOOKING_STATUSES,
    allowed_transitions,
    check_booking_transition,
    check_event_transition,
    parse_booking_status,
    resolve_actor_role,
)


def test_planner_moves_pending_to_decision_or_cancel():
    assert allowed_transitions(BookingStatus.PENDING, ActorRole.PLANNER) == {
        BookingStatus.ACCEPTED,
        BookingStatus.REJECTED,
        BookingStatus.CANCELLED,
    }


def test_planner_completes_accepted():
    assert BookingStatus.COMPLETED in allowed_transitions(BookingStatus.ACCEPTED, ActorRole.PLANNER)


def test_usher_may_only_cancel():
    for current in (BookingStatus.PENDING, BookingStatus.ACCEPTED):
        assert allowed_transitions(current, ActorRole.USHER) == {BookingStatus.CANCELLED}


@pytest.mark.parametrize("terminal", sorted(TERMINAL_BOOKING_STATUSES))
def test_terminal_statuses_have_no_exits(terminal):
    for role in ActorRole:
        assert allowed_transitions(terminal, role) == frozenset()


def test_nothing_returns_to_pending():
    for current in BookingStatus:
        for role in ActorRole:
            assert BookingStatus.PENDING not in allowed_transitions(current, role)


def test_usher_accepting_is_a_permission_error():
    with pytest.raises(UnauthorizedError):
        check_booking_transition(BookingStatus.PENDING, BookingStatus.ACCEPTED, ActorRole.USHER)


def test_skipping_acceptance_is_invalid():
    with pytest.raises(InvalidInputError):
        check_booking_transition(BookingStatus.PENDING, BookingStatus.COMPLETED, ActorRole.PLANNER)


def test_unknown_status_is_invalid_input():
    with pytest.raises(InvalidInputError) as exc:
        parse_booking_status("approved")
    assert exc.value.status_code == 400


def test_resolve_actor_role():
    assert resolve_actor_role("p", "u", "p") == ActorRole.PLANNER
    assert resolve_actor_role("u", "u", "p") == ActorRole.USHER
    assert resolve_actor_role("x", "u", "p") is None


def test_event_graph():
    check_event_transition(EventStatus.DRAFT, EventStatus.PUBLISHED)
    check_event_transition(EventStatus.PUBLISHED, EventStatus.COMPLETED)
    check_event_transition(EventStatus.DRAFT, EventStatus.CANCELLED)
    with pytest.raises(InvalidInputError):
        check_event_transition(EventStatus.DRAFT, EventStatus.COMPLETED)
    with pytest.raises(InvalidInputError):
        check_event_transition(EventStatus.PUBLISHED, EventStatus.DRAFT)
    with pytest.raises(InvalidInputError):
        check_event_transition(EventStatus.CANCELLED, EventStatus.PUBLISHED)
