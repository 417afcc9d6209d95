"""
Usher extension record.

``rating`` and ``total_events`` are derived counters: only the booking
workflow writes them, never the usher's own profile edits.
"""

import uuid

from sqlalchemy import Column, Integer, String, Float, Text, JSON, ForeignKey, CheckConstraint, Index, Uuid

from usherhire.db.base import Base, TimestampMixin
from usherhire.models.enums import AvailabilityStatus, check_in


class UsherProfile(Base, TimestampMixin):
    __tablename__ = "usher_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), unique=True, nullable=False)
    hourly_rate = Column(Float, nullable=True)
    experience_years = Column(Integer, nullable=False, default=0)
    skills = Column(JSON, nullable=False, default=list)
    availability = Column(JSON, nullable=False, default=dict)
    availability_status = Column(String(20), nullable=False, default=AvailabilityStatus.AVAILABLE.value)
    rating = Column(Float, nullable=False, default=0)
    total_events = Column(Integer, nullable=False, default=0)
    bio = Column(Text, nullable=True)
    certifications = Column(JSON, nullable=True)

    __table_args__ = (
        CheckConstraint("experience_years >= 0", name="check_usher_experience_non_negative"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_usher_rating_range"),
        CheckConstraint("total_events >= 0", name="check_usher_total_events_non_negative"),
        CheckConstraint(
            check_in("availability_status", AvailabilityStatus),
            name="check_usher_availability_status",
        ),
        # Usher directory is sorted by rating
        Index("ix_usher_profiles_rating", "rating"),
    )

    def __repr__(self) -> str:
        return f"<UsherProfile(user={self.user_id}, rating={self.rating}, events={self.total_events})>"
