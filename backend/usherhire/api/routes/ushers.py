"""
Usher directory and usher profile endpoints.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.db.session import get_db
from usherhire.models.enums import AvailabilityStatus
from usherhire.schemas.user import UsherDetail, UsherProfileResponse, UsherProfileUpdate
from usherhire.schemas.booking import ReviewResponse
from usherhire.services.profile_service import (
    get_usher_detail,
    get_usher_profile,
    search_ushers,
    update_usher_profile,
)
from usherhire.services.review_service import list_usher_reviews
from usherhire.core.security import get_current_user_id

router = APIRouter(prefix="/ushers", tags=["Ushers"])


@router.get("/", response_model=list[UsherDetail])
async def list_ushers(
    search: Optional[str] = Query(None, max_length=100),
    availability_status: Optional[AvailabilityStatus] = Query(None),
    min_rating: float = Query(0, ge=0, le=5),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Browse ushers, best rated first."""
    rows = await search_ushers(db, search, availability_status, min_rating)
    return [{"profile": p, "usher_profile": u} for p, u in rows]


@router.get("/me", response_model=UsherProfileResponse)
async def read_own_usher_profile(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await get_usher_profile(db, user_id)


@router.patch("/me", response_model=UsherProfileResponse)
async def update_own_usher_profile(
    patch: UsherProfileUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Update rate, experience, skills, availability, bio or certifications."""
    return await update_usher_profile(db, user_id, patch)


@router.get("/{usher_id}", response_model=UsherDetail)
async def read_usher(
    usher_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    profile, usher_profile = await get_usher_detail(db, usher_id)
    return {"profile": profile, "usher_profile": usher_profile}


@router.get("/{usher_id}/reviews", response_model=list[ReviewResponse])
async def read_usher_reviews(
    usher_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await list_usher_reviews(db, usher_id)
