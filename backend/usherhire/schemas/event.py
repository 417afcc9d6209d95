"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import date, datetime, time
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from usherhire.models.enums import EventStatus


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    venue_address: str = Field(..., min_length=1, max_length=500)
    event_date: date
    start_time: time
    end_time: time
    ushers_needed: int = Field(1, ge=1)
    pay_rate: float = Field(0, ge=0)
    requirements: Optional[str] = None
    dress_code: Optional[str] = Field(None, max_length=255)


class EventResponse(BaseModel):
    id: UUID
    planner_id: UUID
    title: str
    description: Optional[str]
    venue_address: str
    event_date: date
    start_time: time
    end_time: time
    ushers_needed: int
    pay_rate: float
    status: EventStatus
    requirements: Optional[str]
    dress_code: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventStatusUpdate(BaseModel):
    status: str


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
    cached: bool = False
