from usherhire.schemas.user import (
    SignUpRequest, SignInRequest, Token, CurrentUser,
    ProfileResponse, ProfileUpdate, UsherProfileResponse, UsherProfileUpdate, UsherDetail,
)
from usherhire.schemas.event import EventCreate, EventResponse, EventStatusUpdate, EventListResponse
from usherhire.schemas.booking import (
    BookingCreate, BookingResponse, BookingWithEvent, BookingStatusUpdate,
    ApplicationResponse, ReviewCreate, ReviewResponse,
)
from usherhire.schemas.dashboard import PlannerSummary, UsherSummary, PlannerDashboard, UsherDashboard

__all__ = [
    "SignUpRequest", "SignInRequest", "Token", "CurrentUser",
    "ProfileResponse", "ProfileUpdate", "UsherProfileResponse", "UsherProfileUpdate", "UsherDetail",
    "EventCreate", "EventResponse", "EventStatusUpdate", "EventListResponse",
    "BookingCreate", "BookingResponse", "BookingWithEvent", "BookingStatusUpdate",
    "ApplicationResponse", "ReviewCreate", "ReviewResponse",
    "PlannerSummary", "UsherSummary", "PlannerDashboard", "UsherDashboard",
]
