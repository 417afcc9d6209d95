"""
Booking and event status machines.

BOOKING LIFECYCLE
=================

            accept            complete
  pending ----------> accepted ----------> completed
     |                   |
     | reject            | cancel (either party)
     v                   v
  rejected           cancelled  <---- cancel (either party) from pending

Who may move a booking:
  - planner (owner of the parent event): accept, reject, complete, cancel
  - usher (applicant): cancel only

Cancellation is allowed while the booking is still live (pending or accepted).
Rejected, completed and cancelled bookings are terminal, and nothing ever
returns to pending.

EVENT LIFECYCLE
===============

  draft -> published -> completed
    |          |
    +----------+-----> cancelled

Only the event's planner moves an event.

Everything in this module is pure: callers load the rows, ask what is
allowed, and perform the write themselves.
"""

import enum
from typing import Optional

from usherhire.core.exceptions import InvalidInputError, UnauthorizedError
from usherhire.models.enums import BookingStatus, EventStatus


class ActorRole(str, enum.Enum):
    PLANNER = "planner"
    USHER = "usher"


_BOOKING_TRANSITIONS: dict[ActorRole, dict[BookingStatus, frozenset[BookingStatus]]] = {
    ActorRole.PLANNER: {
        BookingStatus.PENDING: frozenset(
            {BookingStatus.ACCEPTED, BookingStatus.REJECTED, BookingStatus.CANCELLED}
        ),
        BookingStatus.ACCEPTED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    },
    ActorRole.USHER: {
        BookingStatus.PENDING: frozenset({BookingStatus.CANCELLED}),
        BookingStatus.ACCEPTED: frozenset({BookingStatus.CANCELLED}),
    },
}

_EVENT_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.DRAFT: frozenset({EventStatus.PUBLISHED, EventStatus.CANCELLED}),
    EventStatus.PUBLISHED: frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED}),
}

TERMINAL_BOOKING_STATUSES = frozenset(
    {BookingStatus.REJECTED, BookingStatus.COMPLETED, BookingStatus.CANCELLED}
)


def parse_booking_status(value: str) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in BookingStatus)
        raise InvalidInputError(f"Invalid booking status '{value}'. Expected one of: {allowed}")


def parse_event_status(value: str) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in EventStatus)
        raise InvalidInputError(f"Invalid event status '{value}'. Expected one of: {allowed}")


def allowed_transitions(current: BookingStatus, role: ActorRole) -> frozenset[BookingStatus]:
    """Statuses ``role`` may move a booking to from ``current``."""
    return _BOOKING_TRANSITIONS[role].get(current, frozenset())


def resolve_actor_role(actor_id, usher_id, planner_id) -> Optional[ActorRole]:
    """The actor's role on one booking, or None when they are not a party to it."""
    if actor_id == planner_id:
        return ActorRole.PLANNER
    if actor_id == usher_id:
        return ActorRole.USHER
    return None


def check_booking_transition(current: BookingStatus, target: BookingStatus, role: ActorRole) -> None:
    """
    Raise unless ``role`` may move a booking from ``current`` to ``target``.

    A target some other role could reach is a permission problem
    (UnauthorizedError); a target nobody can reach is an invalid transition.
    """
    if target in allowed_transitions(current, role):
        return

    reachable_by_anyone = any(target in allowed_transitions(current, r) for r in ActorRole)
    if reachable_by_anyone:
        raise UnauthorizedError(
            f"Only the {_other_role(role).value} can move this booking from {current.value} to {target.value}"
        )
    raise InvalidInputError(f"Cannot move booking from {current.value} to {target.value}")


def check_event_transition(current: EventStatus, target: EventStatus) -> None:
    if target not in _EVENT_TRANSITIONS.get(current, frozenset()):
        raise InvalidInputError(f"Cannot move event from {current.value} to {target.value}")


def _other_role(role: ActorRole) -> ActorRole:
    return ActorRole.USHER if role == ActorRole.PLANNER else ActorRole.PLANNER
