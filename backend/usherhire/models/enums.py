"""
Enumerated column values. Stored as plain strings with CHECK constraints.
"""

import enum


class UserType(str, enum.Enum):
    USHER = "usher"
    PLANNER = "planner"


class AvailabilityStatus(str, enum.Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    UNAVAILABLE = "unavailable"


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def check_in(column: str, enum_cls: type[enum.Enum]) -> str:
    """SQL fragment restricting ``column`` to the values of ``enum_cls``."""
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"
