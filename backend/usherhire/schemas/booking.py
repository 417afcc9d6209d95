"""
Pydantic schemas for bookings and reviews.
"""

from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

from usherhire.models.enums import BookingStatus
from usherhire.schemas.event import EventResponse
from usherhire.schemas.user import ProfileResponse, UsherProfileResponse


class BookingCreate(BaseModel):
    event_id: UUID
    notes: Optional[str] = Field(None, max_length=2000)


class BookingResponse(BaseModel):
    id: UUID
    event_id: UUID
    usher_id: UUID
    status: BookingStatus
    notes: Optional[str]
    applied_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingWithEvent(BookingResponse):
    event: EventResponse


class BookingStatusUpdate(BaseModel):
    # Left as a plain string: unknown values are a workflow error, not a schema error
    status: str


class ApplicationResponse(BaseModel):
    booking: BookingResponse
    profile: ProfileResponse
    usher_profile: Optional[UsherProfileResponse]


class ReviewCreate(BaseModel):
    # Fractional ratings reach the service and are refused there as invalid input
    rating: Union[int, float]
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    id: UUID
    booking_id: UUID
    reviewer_id: UUID
    reviewee_id: UUID
    rating: int
    comment: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}
