"""
Booking: an usher's application to work an event.

Key design decisions:
- Unique constraint on (event_id, usher_id): one application per usher per
  event even when two Apply calls race past the existence check
- Status is never deleted back to pending; terminal rows are kept for history
"""

import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Uuid, func
from sqlalchemy.orm import relationship

from usherhire.db.base import Base, TimestampMixin
from usherhire.models.enums import BookingStatus, check_in


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid, ForeignKey("events.id"), nullable=False, index=True)
    usher_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    notes = Column(Text, nullable=True)
    applied_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    event = relationship("Event", back_populates="bookings")
    review = relationship("Review", back_populates="booking", uselist=False)

    __table_args__ = (
        UniqueConstraint("event_id", "usher_id", name="uq_booking_event_usher"),
        CheckConstraint(check_in("status", BookingStatus), name="check_booking_status"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, usher={self.usher_id}, status={self.status})>"
