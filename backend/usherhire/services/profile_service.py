"""
Profile reads and owner-only edits, plus the usher directory search.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.models.user import Profile
from usherhire.models.usher_profile import UsherProfile
from usherhire.models.enums import AvailabilityStatus, UserType
from usherhire.schemas.user import ProfileUpdate, UsherProfileUpdate
from usherhire.core.exceptions import NotFoundError, UnauthorizedError
from usherhire.core.logging import get_logger

logger = get_logger(__name__)


async def get_profile(db: AsyncSession, user_id: uuid.UUID) -> Profile:
    result = await db.execute(select(Profile).where(Profile.id == user_id))
    profile = result.scalar_one_or_none()
    if not profile:
        raise NotFoundError(f"Profile {user_id} not found")
    return profile


async def get_usher_profile(db: AsyncSession, user_id: uuid.UUID) -> UsherProfile:
    result = await db.execute(
        select(UsherProfile)
        .where(UsherProfile.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    usher_profile = result.scalar_one_or_none()
    if not usher_profile:
        raise NotFoundError(f"Usher profile for {user_id} not found")
    return usher_profile


async def require_profile_type(db: AsyncSession, actor_id: uuid.UUID, user_type: UserType, action: str) -> Profile:
    """Load the actor's profile and refuse unless it has ``user_type``."""
    result = await db.execute(select(Profile).where(Profile.id == actor_id))
    profile = result.scalar_one_or_none()
    if not profile or profile.user_type != user_type.value:
        logger.warning("role_refused", actor_id=str(actor_id), required=user_type.value, action=action)
        raise UnauthorizedError(f"Only {user_type.value}s can {action}")
    return profile


async def update_profile(db: AsyncSession, actor_id: uuid.UUID, patch: ProfileUpdate) -> Profile:
    profile = await get_profile(db, actor_id)

    for field, value in patch.model_dump(exclude_unset=True).items():
        if field == "full_name" and not value:
            continue
        setattr(profile, field, value or None)

    await db.flush()
    await db.refresh(profile)
    logger.info("profile_updated", user_id=str(actor_id))
    return profile


async def update_usher_profile(db: AsyncSession, actor_id: uuid.UUID, patch: UsherProfileUpdate) -> UsherProfile:
    await require_profile_type(db, actor_id, UserType.USHER, "edit an usher profile")
    usher_profile = await get_usher_profile(db, actor_id)

    changes = patch.model_dump(exclude_unset=True)
    if "skills" in changes and changes["skills"] is not None:
        changes["skills"] = [s.strip() for s in changes["skills"] if s and s.strip()]
    if "certifications" in changes and changes["certifications"] is not None:
        changes["certifications"] = [c.strip() for c in changes["certifications"] if c and c.strip()]
    if "availability_status" in changes and changes["availability_status"] is not None:
        changes["availability_status"] = changes["availability_status"].value

    for field, value in changes.items():
        if value is None and field in ("experience_years", "skills", "availability", "availability_status"):
            # Non-nullable columns keep their value when cleared
            continue
        setattr(usher_profile, field, value)

    await db.flush()
    await db.refresh(usher_profile)
    logger.info("usher_profile_updated", user_id=str(actor_id), fields=sorted(changes))
    return usher_profile


async def get_usher_detail(db: AsyncSession, usher_id: uuid.UUID) -> tuple[Profile, UsherProfile]:
    profile = await get_profile(db, usher_id)
    if profile.user_type != UserType.USHER.value:
        raise NotFoundError(f"Usher {usher_id} not found")
    return profile, await get_usher_profile(db, usher_id)


def _matches_search(profile: Profile, usher_profile: UsherProfile, term: str) -> bool:
    term = term.lower()
    if profile.full_name and term in profile.full_name.lower():
        return True
    if usher_profile.bio and term in usher_profile.bio.lower():
        return True
    return any(term in skill.lower() for skill in usher_profile.skills or [])


async def search_ushers(
    db: AsyncSession,
    search: Optional[str] = None,
    availability_status: Optional[AvailabilityStatus] = None,
    min_rating: float = 0,
) -> list[tuple[Profile, UsherProfile]]:
    """
    Usher directory, best rated first.
    Availability and rating filter in SQL; the free-text term also matches
    inside the skills JSON list, so it is applied to the fetched rows.
    """
    query = (
        select(Profile, UsherProfile)
        .join(UsherProfile, UsherProfile.user_id == Profile.id)
        .where(Profile.user_type == UserType.USHER.value)
        .order_by(UsherProfile.rating.desc(), Profile.full_name.asc())
    )
    if availability_status is not None:
        query = query.where(UsherProfile.availability_status == availability_status.value)
    if min_rating > 0:
        query = query.where(UsherProfile.rating >= min_rating)

    rows = [(p, u) for p, u in (await db.execute(query)).all()]
    if search and search.strip():
        rows = [(p, u) for p, u in rows if _matches_search(p, u, search.strip())]
    return rows
