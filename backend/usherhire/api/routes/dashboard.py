"""
Dashboard endpoints. Summaries are recomputed from fresh rows on every call.
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from usherhire.db.session import get_db
from usherhire.models.enums import UserType
from usherhire.schemas.dashboard import PlannerDashboard, UsherDashboard
from usherhire.services.dashboard import EventView, load_planner_dashboard, load_usher_dashboard
from usherhire.services.profile_service import get_usher_profile, require_profile_type
from usherhire.core.config import get_settings
from usherhire.core.security import get_current_user_id

settings = get_settings()
router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/planner", response_model=PlannerDashboard)
async def planner_dashboard(
    view: EventView = Query(EventView.ALL),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await require_profile_type(db, user_id, UserType.PLANNER, "view the planner dashboard")
    return await load_planner_dashboard(db, user_id, view)


@router.get("/usher", response_model=UsherDashboard)
async def usher_dashboard(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    profile = await require_profile_type(db, user_id, UserType.USHER, "view the usher dashboard")
    usher_profile = await get_usher_profile(db, user_id)
    return await load_usher_dashboard(db, profile, usher_profile, settings.OPEN_EVENTS_LIMIT)
