"""
Dashboard aggregators.

The folds at the top of this module are pure: they take rows already fetched
for one request and return numbers. Nothing is cached or stored; every
dashboard load recomputes from fresh rows. The loaders at the bottom fetch
those rows.
"""

import enum
import uuid
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from usherhire.models.booking import Booking
from usherhire.models.event import Event
from usherhire.models.enums import BookingStatus, EventStatus
from usherhire.models.user import Profile
from usherhire.models.usher_profile import UsherProfile

ACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.PENDING.value, BookingStatus.ACCEPTED.value})

PROFILE_COMPLETENESS_FIELDS = 8


class EventView(str, enum.Enum):
    ALL = "all"
    UPCOMING = "upcoming"
    PAST = "past"
    DRAFT = "draft"


def is_upcoming(event, today: date) -> bool:
    return event.event_date >= today and event.status != EventStatus.CANCELLED.value


def filter_events(events: Iterable, view: EventView, today: date) -> list:
    if view == EventView.UPCOMING:
        return [e for e in events if is_upcoming(e, today)]
    if view == EventView.PAST:
        return [e for e in events if e.event_date < today or e.status == EventStatus.COMPLETED.value]
    if view == EventView.DRAFT:
        return [e for e in events if e.status == EventStatus.DRAFT.value]
    return list(events)


def planner_summary(events: Iterable, bookings: Iterable, today: date) -> dict:
    """Counts for a planner: ``bookings`` are all bookings across their events."""
    events = list(events)
    bookings = list(bookings)
    return {
        "total_events": len(events),
        "upcoming_events": sum(1 for e in events if is_upcoming(e, today)),
        "active_bookings": sum(1 for b in bookings if b.status in ACTIVE_BOOKING_STATUSES),
        "accepted_bookings": sum(1 for b in bookings if b.status == BookingStatus.ACCEPTED.value),
    }


def usher_summary(usher_profile, bookings: Iterable) -> dict:
    """
    Earnings and counts for an usher. Each booking must carry its parent
    ``event``; earnings are the pay rates of completed bookings.
    """
    bookings = list(bookings)
    earnings = sum(
        float(b.event.pay_rate or 0) for b in bookings if b.status == BookingStatus.COMPLETED.value
    )
    return {
        "total_earnings": round(earnings, 2),
        "events_completed": usher_profile.total_events,
        "average_rating": usher_profile.rating,
        "upcoming_bookings": sum(1 for b in bookings if b.status in ACTIVE_BOOKING_STATUSES),
    }


def profile_completeness(profile, usher_profile) -> int:
    """Percentage of the eight profile fields an usher has filled in."""
    checks = (
        bool(profile.full_name),
        bool(profile.phone),
        bool(profile.avatar_url),
        bool(usher_profile.bio),
        bool(usher_profile.hourly_rate),
        (usher_profile.experience_years or 0) > 0,
        bool(usher_profile.skills),
        bool(usher_profile.availability),
    )
    return round(sum(checks) / PROFILE_COMPLETENESS_FIELDS * 100)


async def load_planner_dashboard(
    db: AsyncSession,
    planner_id: uuid.UUID,
    view: EventView = EventView.ALL,
    today: Optional[date] = None,
) -> dict:
    today = today or date.today()
    events = list(
        (
            await db.execute(
                select(Event)
                .where(Event.planner_id == planner_id)
                .order_by(Event.event_date.desc())
            )
        ).scalars().all()
    )
    event_ids = [e.id for e in events]
    bookings = []
    if event_ids:
        bookings = list(
            (await db.execute(select(Booking).where(Booking.event_id.in_(event_ids)))).scalars().all()
        )

    return {
        "summary": planner_summary(events, bookings, today),
        "events": filter_events(events, view, today),
    }


async def load_usher_bookings(db: AsyncSession, usher_id: uuid.UUID) -> list[Booking]:
    """An usher's bookings, newest first, each with its event loaded."""
    result = await db.execute(
        select(Booking)
        .where(Booking.usher_id == usher_id)
        .options(selectinload(Booking.event))
        .execution_options(populate_existing=True)
        .order_by(Booking.created_at.desc())
    )
    return list(result.scalars().all())


async def fetch_open_events(db: AsyncSession, limit: int, today: date) -> list[Event]:
    """Published events from ``today`` on, soonest first."""
    result = await db.execute(
        select(Event)
        .where(Event.status == EventStatus.PUBLISHED.value, Event.event_date >= today)
        .order_by(Event.event_date.asc(), Event.start_time.asc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def load_usher_dashboard(
    db: AsyncSession,
    profile: Profile,
    usher_profile: UsherProfile,
    open_events_limit: int,
    today: Optional[date] = None,
) -> dict:
    today = today or date.today()
    bookings = await load_usher_bookings(db, profile.id)
    return {
        "summary": usher_summary(usher_profile, bookings),
        "profile_completeness": profile_completeness(profile, usher_profile),
        "bookings": bookings,
        "open_events": await fetch_open_events(db, open_events_limit, today),
    }
