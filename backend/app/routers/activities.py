"""Activities API router."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Literal, Optional
from datetime import datetime

from app.database import get_db
from app.schemas import (
    ActivityCreate,
    ActivityPage,
    ActivityResponse,
    ActivityUpdate,
)
from app.routers.auth import get_current_identity
from app.services.activity_service import ActivityService
from app.services.auth_service import Identity

router = APIRouter(tags=["activities"])


@router.get("/activities", response_model=ActivityPage)
def list_activities(
    search: str = "",
    sport: Literal["all", "run", "ride"] = "all",
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """List the caller's activities, newest first, with filters."""
    items, total = ActivityService(db).list_activities(
        identity.user_id,
        search=search,
        sport=sport,
        date_from=date_from,
        date_to=date_to,
        page=page,
        page_size=page_size,
    )
    return ActivityPage(
        items=[ActivityResponse.model_validate(a) for a in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/activity", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
def create_activity(
    activity_data: ActivityCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Log a new activity and fold it into the profile stats."""
    return ActivityService(db).create(identity.user_id, activity_data)


@router.get("/activity/{activity_id}", response_model=ActivityResponse)
def get_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Get a single activity by ID."""
    return ActivityService(db).get(identity.user_id, activity_id)


@router.patch("/activity/{activity_id}", response_model=ActivityResponse)
def update_activity(
    activity_id: int,
    patch: ActivityUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Edit an activity; profile stats are corrected in the same transaction."""
    return ActivityService(db).update(identity.user_id, activity_id, patch)


@router.delete("/activity/{activity_id}")
def delete_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Soft delete an activity."""
    activity = ActivityService(db).delete(identity.user_id, activity_id)
    return {"ok": True, "id": activity.id}
