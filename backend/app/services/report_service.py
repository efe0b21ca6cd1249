"""Dashboard, weekly report and profile summaries."""

import uuid
from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import Activity, Profile
from app.schemas import (
    ActivityResponse,
    DashboardResponse,
    DashboardSummary,
    DateRange,
    GoalProgress,
    ProfileResponse,
    ProfileStats,
    ReportActivity,
    ReportInsights,
    ReportMetrics,
    WeekComparison,
    WeeklyReport,
)
from app.services.stats_service import activity_speed
from app.services.stores import ActivityStore, ProfileStore


def week_start(moment: datetime) -> datetime:
    """Monday 00:00 of the week containing ``moment``."""
    monday = moment - timedelta(days=moment.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def compute_week_stats(activities: List[Activity]) -> ReportMetrics:
    """Summary metrics for a set of activities."""
    if not activities:
        return ReportMetrics()

    total_distance = sum(a.distance_km or 0 for a in activities)
    total_duration = sum(a.duration_min or 0 for a in activities)
    count = len(activities)

    return ReportMetrics(
        total_distance=round(total_distance, 2),
        total_activities=count,
        avg_distance=round(total_distance / count, 2),
        avg_speed=round(activity_speed(total_distance, total_duration), 2),
        avg_duration=round(total_duration / count, 2),
        longest_distance=max(a.distance_km or 0 for a in activities),
        longest_duration=max(a.duration_min or 0 for a in activities),
    )


class ReportService:
    """Read-only views over a user's activities and profile."""

    def __init__(self, db: Session):
        self.db = db
        self.activities = ActivityStore(db)
        self.profiles = ProfileStore(db)
        self.settings = get_settings()

    def dashboard(self, user_id: str, now: Optional[datetime] = None) -> DashboardResponse:
        """Three most recent activities and this week's running totals."""
        now = now or datetime.utcnow()
        recent = self.activities.recent(user_id, limit=3)
        weekly = self.activities.between(user_id, week_start(now), now)

        tally = Counter(a.type for a in weekly)
        top_sport = None
        if tally["run"] != tally["ride"]:
            top_sport = "run" if tally["run"] > tally["ride"] else "ride"

        summary = DashboardSummary(
            total_distance=round(sum(a.distance_km or 0 for a in weekly), 2),
            total_time=round(sum(a.duration_min or 0 for a in weekly) / 60, 2),
            top_sport=top_sport,
        )
        return DashboardResponse(
            recent=[ActivityResponse.model_validate(a) for a in recent],
            summary=summary,
        )

    def weekly_report(self, user_id: str, now: Optional[datetime] = None) -> WeeklyReport:
        """This week (Mon-Sun) compared with the previous one."""
        now = now or datetime.utcnow()
        this_start = week_start(now)
        this_end = this_start + timedelta(days=7) - timedelta(microseconds=1)
        last_start = this_start - timedelta(days=7)
        last_end = this_start - timedelta(microseconds=1)

        current_week = self.activities.between(user_id, this_start, this_end)
        last_week = self.activities.between(user_id, last_start, last_end)

        this_stats = compute_week_stats(current_week)
        last_stats = compute_week_stats(last_week)

        rows = [
            ReportActivity(
                id=a.id,
                title=a.title,
                type=a.type,
                date=a.created_at,
                distance=a.distance_km,
                duration=a.duration_min,
                speed=round(a.speed_kmh, 2),
            )
            for a in current_week
        ]

        if current_week:
            day_counts = Counter(a.created_at.strftime("%A") for a in current_week)
            most_active_day = day_counts.most_common(1)[0][0]
            fastest_activity = max(rows, key=lambda r: r.speed).title
        else:
            most_active_day = "N/A"
            fastest_activity = "N/A"

        if last_stats.total_distance > 0:
            distance_change = round(
                (this_stats.total_distance - last_stats.total_distance) / last_stats.total_distance * 100, 2
            )
        else:
            distance_change = 100.0

        return WeeklyReport(
            report_id=str(uuid.uuid4()),
            user_id=user_id,
            date_range=DateRange(start=this_start, end=this_end),
            summary_metrics=this_stats,
            goal_progress=GoalProgress(
                current=this_stats.total_distance,
                goal=self.settings.weekly_goal_km,
            ),
            weekly_activities=rows,
            insights=ReportInsights(
                most_active_day=most_active_day,
                fastest_activity=fastest_activity,
                consistency=f"{this_stats.total_activities} activities this week",
            ),
            comparison_to_last_week=WeekComparison(
                distance_change_percent=distance_change,
                activities_change_count=this_stats.total_activities - last_stats.total_activities,
                avg_speed_change=round(this_stats.avg_speed - last_stats.avg_speed, 2),
                avg_duration_change=round(this_stats.avg_duration - last_stats.avg_duration, 2),
            ),
        )

    def profile_summary(self, user_id: str) -> ProfileResponse:
        profile = self.profiles.get(user_id)
        return build_profile_response(profile)


def build_profile_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        name=profile.full_name,
        email=profile.email,
        bio=profile.bio,
        member_since=profile.created_at,
        all_time_stats=ProfileStats(
            total_activities=profile.total_activities or 0,
            total_distance=profile.total_distance or 0,
            total_duration=profile.total_time or 0,
            avg_speed=profile.avg_speed or 0,
            longest_run=profile.longest_run or 0,
        ),
    )
