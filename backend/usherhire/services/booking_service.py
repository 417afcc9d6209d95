"""
Booking service: ushers apply to events, planners move applications along.

CONSISTENCY STRATEGY
====================

Duplicate applications:
  Apply checks for an existing (event_id, usher_id) row first so the common
  case gets a clear 409. Two simultaneous Apply calls can both pass that
  check; the unique constraint uq_booking_event_usher then rejects the second
  INSERT and it is reported as the same 409. Exactly one row survives.

Status changes:
  The transition is validated against the status we read, and the UPDATE is
  conditional on that status still being current:

    UPDATE bookings SET status = :target
    WHERE id = :booking_id AND status = :current

  Zero rows affected means another request moved the booking first. We
  surface that as a conflict instead of retrying, so a booking can never be
  completed twice.

Side effects:
  accepted -> completed bumps usher_profiles.total_events with an in-database
  increment (total_events = total_events + 1) in the same transaction as the
  status write. Either both land or neither does.
"""

import uuid
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.models.booking import Booking
from usherhire.models.event import Event
from usherhire.models.user import Profile
from usherhire.models.usher_profile import UsherProfile
from usherhire.models.enums import BookingStatus, EventStatus, UserType
from usherhire.core.exceptions import ConflictError, InvalidInputError, NotFoundError, UnauthorizedError
from usherhire.core.metrics import (
    record_application,
    record_transition,
    record_transition_refusal,
    workflow_latency,
)
from usherhire.services.event_service import get_event, get_owned_event
from usherhire.services.profile_service import require_profile_type
from usherhire.services.workflow import check_booking_transition, parse_booking_status, resolve_actor_role
from usherhire.core.logging import get_logger

logger = get_logger(__name__)


async def find_booking_id(db: AsyncSession, event_id: uuid.UUID, usher_id: uuid.UUID) -> Optional[uuid.UUID]:
    result = await db.execute(
        select(Booking.id).where(Booking.event_id == event_id, Booking.usher_id == usher_id)
    )
    return result.scalar_one_or_none()


async def apply_to_event(
    db: AsyncSession,
    usher_id: uuid.UUID,
    event_id: uuid.UUID,
    notes: Optional[str] = None,
) -> Booking:
    """Create a pending application for a published event."""
    with workflow_latency.labels(operation="apply").time():
        try:
            await require_profile_type(db, usher_id, UserType.USHER, "apply for events")
        except UnauthorizedError:
            record_application("refused")
            raise

        event = await get_event(db, event_id)
        if event.status != EventStatus.PUBLISHED.value:
            record_application("refused")
            logger.warning("apply_refused", event_id=str(event_id), usher_id=str(usher_id), event_status=event.status)
            raise InvalidInputError("Apply failed: event is not open for applications")

        if await find_booking_id(db, event_id, usher_id):
            record_application("conflict")
            logger.warning("apply_conflict", event_id=str(event_id), usher_id=str(usher_id), reason="existing_booking")
            raise ConflictError("Apply failed: you have already applied for this event")

        booking = Booking(
            event_id=event_id,
            usher_id=usher_id,
            status=BookingStatus.PENDING.value,
            notes=notes or None,
        )
        db.add(booking)
        try:
            await db.flush()
        except IntegrityError:
            # Lost the race to a concurrent Apply for the same pair
            await db.rollback()
            record_application("conflict")
            logger.warning("apply_conflict", event_id=str(event_id), usher_id=str(usher_id), reason="unique_violation")
            raise ConflictError("Apply failed: you have already applied for this event")

        await db.refresh(booking)

    record_application("applied")
    logger.info("booking_applied", booking_id=str(booking.id), event_id=str(event_id), usher_id=str(usher_id))
    return booking


async def get_booking_with_event(db: AsyncSession, booking_id: uuid.UUID) -> tuple[Booking, Event]:
    result = await db.execute(
        select(Booking, Event)
        .join(Event, Event.id == Booking.event_id)
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    row = result.one_or_none()
    if not row:
        raise NotFoundError(f"Booking {booking_id} not found")
    return row[0], row[1]


async def transition_booking(
    db: AsyncSession,
    booking_id: uuid.UUID,
    actor_id: uuid.UUID,
    new_status: str,
) -> Booking:
    """
    Move a booking to ``new_status`` on behalf of ``actor_id``.

    Raises InvalidInputError for an unknown status or a transition no one may
    make, UnauthorizedError when the actor is not a party or lacks the role,
    ConflictError when the booking changed underneath us.
    """
    with workflow_latency.labels(operation="transition").time():
        target = parse_booking_status(new_status)
        booking, event = await get_booking_with_event(db, booking_id)

        role = resolve_actor_role(actor_id, booking.usher_id, event.planner_id)
        if role is None:
            record_transition_refusal("unauthorized")
            logger.warning("transition_refused", booking_id=str(booking_id), actor_id=str(actor_id), reason="not_a_party")
            raise UnauthorizedError("Update failed: you are not a party to this booking")

        current = BookingStatus(booking.status)
        try:
            check_booking_transition(current, target, role)
        except UnauthorizedError:
            record_transition_refusal("unauthorized")
            raise
        except InvalidInputError:
            record_transition_refusal("invalid")
            logger.warning(
                "transition_refused",
                booking_id=str(booking_id),
                from_status=current.value,
                to_status=target.value,
                reason="invalid_transition",
            )
            raise

        result = await db.execute(
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == current.value)
            .values(status=target.value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            record_transition_refusal("conflict")
            logger.warning("transition_conflict", booking_id=str(booking_id), expected_status=current.value)
            raise ConflictError("Update failed: booking was changed by someone else. Reload and try again.")

        if current == BookingStatus.ACCEPTED and target == BookingStatus.COMPLETED:
            await _increment_total_events(db, booking.usher_id)

        booking, _ = await get_booking_with_event(db, booking_id)

    record_transition(target.value)
    logger.info(
        "booking_transitioned",
        booking_id=str(booking_id),
        actor_role=role.value,
        from_status=current.value,
        to_status=target.value,
    )
    return booking


async def _increment_total_events(db: AsyncSession, usher_id: uuid.UUID) -> None:
    result = await db.execute(
        update(UsherProfile)
        .where(UsherProfile.user_id == usher_id)
        .values(total_events=UsherProfile.total_events + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError(f"Usher profile for {usher_id} not found")
    logger.info("usher_total_events_incremented", usher_id=str(usher_id))


async def list_event_applications(
    db: AsyncSession,
    event_id: uuid.UUID,
    actor_id: uuid.UUID,
) -> list[tuple[Booking, Profile, Optional[UsherProfile]]]:
    """Applications to one event with the applicants' profiles. Planner-owner only."""
    await get_owned_event(db, event_id, actor_id, "view its applications")

    result = await db.execute(
        select(Booking, Profile, UsherProfile)
        .join(Profile, Profile.id == Booking.usher_id)
        .outerjoin(UsherProfile, UsherProfile.user_id == Booking.usher_id)
        .where(Booking.event_id == event_id)
        .order_by(Booking.applied_at.asc())
        .execution_options(populate_existing=True)
    )
    return [(b, p, u) for b, p, u in result.all()]
