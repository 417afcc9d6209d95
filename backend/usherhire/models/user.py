"""
Identity records.

``User`` holds credentials and plays the identity provider's part;
``Profile`` is the marketplace identity and shares its primary key.
"""

import uuid

from sqlalchemy import Column, String, Boolean, ForeignKey, CheckConstraint, Uuid

from usherhire.db.base import Base, TimestampMixin
from usherhire.models.enums import UserType, check_in


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class Profile(Base, TimestampMixin):
    __tablename__ = "profiles"

    id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    # Fixed at signup
    user_type = Column(String(20), nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    avatar_url = Column(String(1024), nullable=True)

    __table_args__ = (
        CheckConstraint(check_in("user_type", UserType), name="check_profile_user_type"),
    )

    @property
    def is_usher(self) -> bool:
        return self.user_type == UserType.USHER.value

    @property
    def is_planner(self) -> bool:
        return self.user_type == UserType.PLANNER.value

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, type={self.user_type})>"
