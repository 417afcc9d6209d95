from usherhire.models.user import User, Profile
from usherhire.models.usher_profile import UsherProfile
from usherhire.models.event import Event
from usherhire.models.booking import Booking
from usherhire.models.review import Review

__all__ = ["User", "Profile", "UsherProfile", "Event", "Booking", "Review"]
