"""Profile API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import StoreError
from app.schemas import ProfileResponse, ProfileUpdate
from app.routers.auth import get_current_identity
from app.services.auth_service import Identity
from app.services.report_service import ReportService, build_profile_response
from app.services.stats_service import StatsReconciler
from app.services.stores import ProfileStore

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Profile with all-time stats."""
    return ReportService(db).profile_summary(identity.user_id)


@router.put("", response_model=ProfileResponse)
def upsert_profile(
    profile_data: ProfileUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Create or update the caller's profile (name and bio)."""
    try:
        profile = ProfileStore(db).upsert(
            identity.user_id,
            email=identity.email,
            full_name=profile_data.full_name,
            bio=profile_data.bio,
        )
        db.commit()
    except StoreError:
        db.rollback()
        raise
    db.refresh(profile)
    return build_profile_response(profile)


@router.post("/stats/rebuild", response_model=ProfileResponse)
def rebuild_stats(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Recompute all-time stats from scratch."""
    try:
        profile = StatsReconciler(db).reconcile(identity.user_id)
        db.commit()
    except StoreError:
        db.rollback()
        raise
    db.refresh(profile)
    return build_profile_response(profile)
