"""Pydantic schemas for API request/response validation."""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime


ActivityType = Literal["run", "ride"]


# ============== Activity Schemas ==============

class ActivityCreate(BaseModel):
    type: ActivityType
    distance_km: float = Field(..., ge=0, allow_inf_nan=False)
    duration_min: float = Field(..., ge=1, allow_inf_nan=False)
    notes: Optional[str] = Field(None, max_length=500)
    title: str = Field(..., min_length=1, max_length=100)


class ActivityUpdate(BaseModel):
    """Partial patch; only the fields sent are applied."""
    type: Optional[ActivityType] = None
    distance_km: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    duration_min: Optional[float] = Field(None, ge=1, allow_inf_nan=False)
    notes: Optional[str] = Field(None, max_length=500)
    title: Optional[str] = Field(None, min_length=1, max_length=100)


class ActivityResponse(BaseModel):
    id: int
    user_id: str
    type: str
    title: str
    notes: Optional[str] = None
    distance_km: float
    duration_min: float
    created_at: datetime

    class Config:
        from_attributes = True


class ActivityPage(BaseModel):
    items: List[ActivityResponse]
    total: int
    page: int
    page_size: int


# ============== Profile Schemas ==============

class ProfileStats(BaseModel):
    """All-time rolling statistics."""
    total_activities: int
    total_distance: float  # km
    total_duration: float  # minutes
    avg_speed: float  # km/h
    longest_run: float  # km


class ProfileResponse(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    member_since: Optional[datetime] = None
    all_time_stats: ProfileStats


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = Field(None, max_length=1000)


# ============== Dashboard Schemas ==============

class DashboardSummary(BaseModel):
    """Current week (Monday to now)."""
    total_distance: float  # km
    total_time: float  # hours
    top_sport: Optional[str] = None


class DashboardResponse(BaseModel):
    recent: List[ActivityResponse]
    summary: DashboardSummary


# ============== Weekly Report Schemas ==============

class DateRange(BaseModel):
    start: datetime
    end: datetime


class ReportMetrics(BaseModel):
    total_distance: float = 0
    total_activities: int = 0
    avg_distance: float = 0
    avg_speed: float = 0
    avg_duration: float = 0
    longest_distance: float = 0
    longest_duration: float = 0


class GoalProgress(BaseModel):
    current: float
    goal: float


class ReportActivity(BaseModel):
    id: int
    title: str
    type: str
    date: datetime
    distance: float
    duration: float
    speed: float


class ReportInsights(BaseModel):
    most_active_day: str
    fastest_activity: str
    consistency: str


class WeekComparison(BaseModel):
    distance_change_percent: float
    activities_change_count: int
    avg_speed_change: float
    avg_duration_change: float


class WeeklyReport(BaseModel):
    report_id: str
    user_id: str
    date_range: DateRange
    summary_metrics: ReportMetrics
    goal_progress: GoalProgress
    weekly_activities: List[ReportActivity]
    insights: ReportInsights
    comparison_to_last_week: WeekComparison


# ============== Suggestion Schemas ==============

class SuggestionRequest(BaseModel):
    horizon_days: Optional[int] = Field(None, ge=1, le=365)


class SuggestionTotals(BaseModel):
    distance: float = 0
    duration: float = 0
    activities: int = 0


class SuggestionAverages(BaseModel):
    distance: float = 0
    duration: float = 0


class SuggestionInputs(BaseModel):
    totals: SuggestionTotals
    averages: SuggestionAverages


class SuggestionResponse(BaseModel):
    suggestion: Optional[str] = None
    rationale: Optional[str] = None
    inputs: SuggestionInputs
