"""
Dashboard response shapes.
"""

from pydantic import BaseModel

from usherhire.schemas.booking import BookingWithEvent
from usherhire.schemas.event import EventResponse


class PlannerSummary(BaseModel):
    total_events: int
    upcoming_events: int
    active_bookings: int
    accepted_bookings: int


class UsherSummary(BaseModel):
    total_earnings: float
    events_completed: int
    average_rating: float
    upcoming_bookings: int


class PlannerDashboard(BaseModel):
    summary: PlannerSummary
    events: list[EventResponse]


class UsherDashboard(BaseModel):
    summary: UsherSummary
    profile_completeness: int
    bookings: list[BookingWithEvent]
    open_events: list[EventResponse]
