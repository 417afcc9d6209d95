"""
Event service: posting, lookups, listings and the planner-driven status graph.
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.db.session import run_after_commit
from usherhire.models.event import Event
from usherhire.models.enums import EventStatus, UserType
from usherhire.schemas.event import EventCreate, EventResponse
from usherhire.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from usherhire.core.metrics import record_event_transition
from usherhire.services import cache_service
from usherhire.services.dashboard import EventView, fetch_open_events, filter_events
from usherhire.services.profile_service import require_profile_type
from usherhire.services.workflow import check_event_transition, parse_event_status
from usherhire.core.logging import get_logger

logger = get_logger(__name__)


async def create_event(db: AsyncSession, actor_id: uuid.UUID, event_data: EventCreate) -> Event:
    """Post a new event as a draft."""
    await require_profile_type(db, actor_id, UserType.PLANNER, "post events")

    event = Event(
        planner_id=actor_id,
        title=event_data.title,
        description=event_data.description,
        venue_address=event_data.venue_address,
        event_date=event_data.event_date,
        start_time=event_data.start_time,
        end_time=event_data.end_time,
        ushers_needed=event_data.ushers_needed,
        pay_rate=event_data.pay_rate,
        requirements=event_data.requirements or None,
        dress_code=event_data.dress_code or None,
        status=EventStatus.DRAFT.value,
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)

    await cache_service.invalidate_open_events()
    run_after_commit(db, cache_service.invalidate_open_events)
    logger.info("event_created", event_id=str(event.id), planner_id=str(actor_id), title=event.title)
    return event


async def get_event(db: AsyncSession, event_id: uuid.UUID) -> Event:
    result = await db.execute(select(Event).where(Event.id == event_id))
    event = result.scalar_one_or_none()

    if not event:
        raise NotFoundError(f"Event {event_id} not found")
    return event


async def get_owned_event(db: AsyncSession, event_id: uuid.UUID, actor_id: uuid.UUID, action: str) -> Event:
    event = await get_event(db, event_id)
    if event.planner_id != actor_id:
        logger.warning("event_access_refused", event_id=str(event_id), actor_id=str(actor_id), action=action)
        raise UnauthorizedError(f"Only the event's planner can {action}")
    return event


async def list_planner_events(
    db: AsyncSession,
    actor_id: uuid.UUID,
    view: EventView = EventView.ALL,
    today: Optional[date] = None,
) -> list[Event]:
    result = await db.execute(
        select(Event)
        .where(Event.planner_id == actor_id)
        .order_by(Event.event_date.desc(), Event.start_time.desc())
    )
    return filter_events(list(result.scalars().all()), view, today or date.today())


async def list_open_events(db: AsyncSession, limit: int, today: Optional[date] = None) -> tuple[list[dict], bool]:
    """
    Open events as response dicts, served from Redis when possible.
    Returns (events, cached).
    """
    today = today or date.today()
    cached = await cache_service.get_cached_open_events(limit, today.isoformat())
    if cached is not None:
        return cached, True

    events = await fetch_open_events(db, limit, today)
    payload = [EventResponse.model_validate(e).model_dump(mode="json") for e in events]
    await cache_service.set_cached_open_events(limit, today.isoformat(), payload)
    return payload, False


async def transition_event(db: AsyncSession, event_id: uuid.UUID, actor_id: uuid.UUID, new_status: str) -> Event:
    """
    Move an event along draft -> published -> completed, or to cancelled.
    The write is conditional on the status that was checked.
    """
    target = parse_event_status(new_status)
    event = await get_owned_event(db, event_id, actor_id, "change its status")
    current = EventStatus(event.status)
    check_event_transition(current, target)

    result = await db.execute(
        update(Event)
        .where(Event.id == event_id, Event.status == current.value)
        .values(status=target.value)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise ConflictError("Event status changed concurrently. Reload and try again.")

    event = (
        await db.execute(
            select(Event).where(Event.id == event_id).execution_options(populate_existing=True)
        )
    ).scalar_one()

    await cache_service.invalidate_open_events()
    run_after_commit(db, cache_service.invalidate_open_events)
    record_event_transition(target.value)
    logger.info(
        "event_transitioned",
        event_id=str(event_id),
        from_status=current.value,
        to_status=target.value,
    )
    return event
