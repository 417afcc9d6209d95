"""
Review service: one planner rating per completed booking, and the usher's
aggregate rating derived from all of them.

The aggregate is recomputed inside the database in the same transaction as
the review insert:

    UPDATE usher_profiles
    SET rating = (SELECT round(avg(rating), 2) FROM reviews WHERE reviewee_id = :usher)
    WHERE user_id = :usher

so two reviews landing at once cannot overwrite each other's mean with a
stale one.
"""

import uuid
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.models.review import Review
from usherhire.models.usher_profile import UsherProfile
from usherhire.models.enums import BookingStatus
from usherhire.core.exceptions import ConflictError, InvalidInputError, NotFoundError, UnauthorizedError
from usherhire.core.metrics import reviews_submitted, workflow_latency
from usherhire.services.booking_service import get_booking_with_event
from usherhire.core.logging import get_logger

logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


async def find_review_id(db: AsyncSession, booking_id: uuid.UUID) -> Optional[uuid.UUID]:
    result = await db.execute(select(Review.id).where(Review.booking_id == booking_id))
    return result.scalar_one_or_none()


async def submit_review(
    db: AsyncSession,
    booking_id: uuid.UUID,
    reviewer_id: uuid.UUID,
    rating: int,
    comment: Optional[str] = None,
) -> Review:
    """Record the planner's rating for a completed booking and refresh the usher's mean."""
    with workflow_latency.labels(operation="review").time():
        if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidInputError(f"Rating failed: rating must be between {MIN_RATING} and {MAX_RATING}")

        booking, event = await get_booking_with_event(db, booking_id)

        if event.planner_id != reviewer_id:
            logger.warning("review_refused", booking_id=str(booking_id), reviewer_id=str(reviewer_id), reason="not_planner")
            raise UnauthorizedError("Rating failed: only the event's planner can rate this booking")

        if booking.status != BookingStatus.COMPLETED.value:
            raise InvalidInputError("Rating failed: only completed bookings can be rated")

        if await find_review_id(db, booking_id):
            logger.warning("review_conflict", booking_id=str(booking_id), reason="existing_review")
            raise ConflictError("Rating failed: this booking has already been rated")

        review = Review(
            booking_id=booking_id,
            reviewer_id=reviewer_id,
            reviewee_id=booking.usher_id,
            rating=rating,
            comment=comment or None,
        )
        db.add(review)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning("review_conflict", booking_id=str(booking_id), reason="unique_violation")
            raise ConflictError("Rating failed: this booking has already been rated")

        await db.refresh(review)
        new_rating = await recompute_usher_rating(db, booking.usher_id)

    reviews_submitted.inc()
    logger.info(
        "review_submitted",
        review_id=str(review.id),
        booking_id=str(booking_id),
        reviewee_id=str(booking.usher_id),
        rating=rating,
        usher_rating=new_rating,
    )
    return review


async def recompute_usher_rating(db: AsyncSession, usher_id: uuid.UUID) -> float:
    """Set the usher's rating to the two-decimal mean of all their reviews."""
    mean_rating = (
        select(func.round(func.avg(Review.rating), 2))
        .where(Review.reviewee_id == usher_id)
        .scalar_subquery()
    )
    result = await db.execute(
        update(UsherProfile)
        .where(UsherProfile.user_id == usher_id)
        .values(rating=func.coalesce(mean_rating, 0))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError(f"Usher profile for {usher_id} not found")

    rating = (
        await db.execute(
            select(UsherProfile.rating)
            .where(UsherProfile.user_id == usher_id)
            .execution_options(populate_existing=True)
        )
    ).scalar_one()
    logger.info("usher_rating_recomputed", usher_id=str(usher_id), rating=rating)
    return rating


async def list_usher_reviews(db: AsyncSession, usher_id: uuid.UUID) -> list[Review]:
    result = await db.execute(
        select(Review)
        .where(Review.reviewee_id == usher_id)
        .order_by(Review.created_at.desc())
    )
    return list(result.scalars().all())
