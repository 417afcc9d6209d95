"""
Review: a planner's rating of an usher for one completed booking.
Immutable once written; the unique booking_id enforces one per booking.
"""

import uuid

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, CheckConstraint, Uuid, func
from sqlalchemy.orm import relationship

from usherhire.db.base import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id"), unique=True, nullable=False)
    reviewer_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False)
    reviewee_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    booking = relationship("Booking", back_populates="review")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<Review(booking={self.booking_id}, reviewee={self.reviewee_id}, rating={self.rating})>"
