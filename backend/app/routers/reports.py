"""Dashboard and weekly report router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas import DashboardResponse, WeeklyReport
from app.routers.auth import get_current_identity
from app.services.auth_service import Identity
from app.services.report_service import ReportService

router = APIRouter(tags=["reports"])


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """Recent activities and this week's totals."""
    return ReportService(db).dashboard(identity.user_id)


@router.get("/reports/weekly", response_model=WeeklyReport)
def get_weekly_report(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    """This week's report compared with last week."""
    return ReportService(db).weekly_report(identity.user_id)
