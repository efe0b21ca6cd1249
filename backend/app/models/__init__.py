"""Database models package."""

from app.models.profile import Profile
from app.models.activity import Activity, ACTIVITY_TYPES

__all__ = [
    "Profile",
    "Activity",
    "ACTIVITY_TYPES",
]
