"""
Event endpoints. The open-events listing is served from Redis when cached.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.db.session import get_db
from usherhire.schemas.event import EventCreate, EventResponse, EventListResponse, EventStatusUpdate
from usherhire.schemas.booking import ApplicationResponse
from usherhire.services.event_service import (
    create_event,
    get_event,
    list_open_events,
    list_planner_events,
    transition_event,
)
from usherhire.services.booking_service import list_event_applications
from usherhire.services.dashboard import EventView
from usherhire.core.config import get_settings
from usherhire.core.security import get_current_user_id
from usherhire.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()
router = APIRouter(prefix="/events", tags=["Events"])


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Post a new event as a draft. Planners only."""
    return await create_event(db, user_id, event_data)


@router.get("/", response_model=EventListResponse)
async def list_open_events_endpoint(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Published events from today on, soonest first."""
    events, cached = await list_open_events(db, limit or settings.OPEN_EVENTS_LIMIT)
    if cached:
        logger.info("open_events_cache_hit", count=len(events))
    return EventListResponse(events=events, total=len(events), cached=cached)


@router.get("/mine", response_model=list[EventResponse])
async def list_my_events(
    view: EventView = Query(EventView.ALL),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """The caller's own events, optionally narrowed to upcoming, past or draft."""
    return await list_planner_events(db, user_id, view)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(
    event_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await get_event(db, event_id)


@router.post("/{event_id}/status", response_model=EventResponse)
async def transition_event_endpoint(
    event_id: uuid.UUID,
    body: EventStatusUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Publish, complete or cancel an event. Owner only."""
    return await transition_event(db, event_id, user_id, body.status)


@router.get("/{event_id}/applications", response_model=list[ApplicationResponse])
async def list_applications_endpoint(
    event_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Applications to the caller's event, with each applicant's profile."""
    rows = await list_event_applications(db, event_id, user_id)
    return [{"booking": b, "profile": p, "usher_profile": u} for b, p, u in rows]
