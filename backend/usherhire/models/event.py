"""
Event posted by a planner.

Key design decisions:
- New events start as drafts; the planner publishes them explicitly
- Index on `event_date` for the open-events listing and dashboard windows
- Composite (status, event_date) index covers "published events from today on"
"""

import uuid

from sqlalchemy import Column, Integer, String, Float, Text, Date, Time, ForeignKey, Index, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from usherhire.db.base import Base, TimestampMixin
from usherhire.models.enums import EventStatus, check_in


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    planner_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    venue_address = Column(String(500), nullable=False)
    event_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    ushers_needed = Column(Integer, nullable=False, default=1)
    pay_rate = Column(Float, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=EventStatus.DRAFT.value)
    requirements = Column(Text, nullable=True)
    dress_code = Column(String(255), nullable=True)

    bookings = relationship("Booking", back_populates="event")

    __table_args__ = (
        CheckConstraint("ushers_needed >= 1", name="check_event_ushers_needed_positive"),
        CheckConstraint("pay_rate >= 0", name="check_event_pay_rate_non_negative"),
        CheckConstraint(check_in("status", EventStatus), name="check_event_status"),
        Index("ix_events_event_date", "event_date"),
        Index("ix_events_status_date", "status", "event_date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, status={self.status})>"
