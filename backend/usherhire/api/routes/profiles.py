"""
Profile endpoints. Edits always target the caller's own profile.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.db.session import get_db
from usherhire.schemas.user import ProfileResponse, ProfileUpdate
from usherhire.services.profile_service import get_profile, update_profile
from usherhire.core.security import get_current_user_id

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/me", response_model=ProfileResponse)
async def read_own_profile(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await get_profile(db, user_id)


@router.patch("/me", response_model=ProfileResponse)
async def update_own_profile(
    patch: ProfileUpdate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Update name, phone or avatar. Account type and email are fixed."""
    return await update_profile(db, user_id, patch)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def read_profile(
    profile_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await get_profile(db, profile_id)
