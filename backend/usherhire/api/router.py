"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from usherhire.api.routes import auth, profiles, ushers, events, bookings, dashboard

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(profiles.router)
api_router.include_router(ushers.router)
api_router.include_router(events.router)
api_router.include_router(bookings.router)
api_router.include_router(dashboard.router)
