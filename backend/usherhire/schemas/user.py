"""
Pydantic schemas for accounts and profiles.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from usherhire.models.enums import AvailabilityStatus, UserType


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=255)
    user_type: UserType
    phone: Optional[str] = Field(None, max_length=50)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: UUID


class CurrentUser(BaseModel):
    id: UUID
    email: str


class ProfileResponse(BaseModel):
    id: UUID
    user_type: UserType
    full_name: str
    email: str
    phone: Optional[str]
    avatar_url: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    avatar_url: Optional[str] = Field(None, max_length=1024)

    # user_type, email and id are fixed
    model_config = {"extra": "forbid"}


class UsherProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    hourly_rate: Optional[float]
    experience_years: int
    skills: list[str]
    availability: dict[str, Any]
    availability_status: AvailabilityStatus
    rating: float
    total_events: int
    bio: Optional[str]
    certifications: Optional[list[str]]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UsherProfileUpdate(BaseModel):
    hourly_rate: Optional[float] = Field(None, ge=0)
    experience_years: Optional[int] = Field(None, ge=0)
    skills: Optional[list[str]] = None
    availability: Optional[dict[str, Any]] = None
    availability_status: Optional[AvailabilityStatus] = None
    bio: Optional[str] = Field(None, max_length=2000)
    certifications: Optional[list[str]] = None

    # rating and total_events belong to the booking workflow
    model_config = {"extra": "forbid"}


class UsherDetail(BaseModel):
    profile: ProfileResponse
    usher_profile: UsherProfileResponse
