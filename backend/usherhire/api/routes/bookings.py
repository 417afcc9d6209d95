"""
Booking endpoints: apply, move through the lifecycle, rate.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.db.session import get_db
from usherhire.schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingWithEvent,
    ReviewCreate,
    ReviewResponse,
)
from usherhire.services.booking_service import apply_to_event, transition_booking
from usherhire.services.review_service import submit_review
from usherhire.services.dashboard import load_usher_bookings
from usherhire.core.security import get_current_user_id

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def apply_endpoint(
    booking_data: BookingCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Apply to a published event.

    One application per usher per event: a repeat returns 409, and so does
    the loser of two simultaneous applications.
    """
    return await apply_to_event(db, user_id, booking_data.event_id, booking_data.notes)


@router.get("/", response_model=list[BookingWithEvent])
async def list_my_bookings(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """The caller's applications, newest first, with their events."""
    return await load_usher_bookings(db, user_id)


@router.post("/{booking_id}/status", response_model=BookingResponse)
async def transition_endpoint(
    booking_id: uuid.UUID,
    body: BookingStatusUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Accept, reject, complete or cancel a booking."""
    return await transition_booking(db, booking_id, user_id, body.status)


@router.post("/{booking_id}/review", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def review_endpoint(
    booking_id: uuid.UUID,
    body: ReviewCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Rate the usher on a completed booking. Once per booking."""
    return await submit_review(db, booking_id, user_id, body.rating, body.comment)
