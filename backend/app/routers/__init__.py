"""Routers package."""

from app.routers.activities import router as activities_router
from app.routers.auth import router as auth_router
from app.routers.profile import router as profile_router
from app.routers.reports import router as reports_router
from app.routers.suggestion import router as suggestion_router

__all__ = [
    "activities_router",
    "auth_router",
    "profile_router",
    "reports_router",
    "suggestion_router",
]
