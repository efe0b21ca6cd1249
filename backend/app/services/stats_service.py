"""Profile statistics reconciler.

Keeps a profile's rolling aggregate (total distance, total time, activity
count, average speed, longest run) in step with the user's non-deleted
activities. Creates are applied incrementally. Updates and deletes apply
distance/time deltas and fall back to a full scan for the values that cannot
be corrected from a delta (longest run when the longest activity shrinks or
goes away, average speed whenever a speed term changes).

The reconciler only flushes; committing is left to the caller so the
activity write and the profile write land together.
"""

import logging
from typing import Dict, Iterable

from sqlalchemy.orm import Session

from app.models import Activity, Profile
from app.services.stores import ActivityStore, ProfileStore

logger = logging.getLogger(__name__)

DISTANCE_PLACES = 2
TIME_PLACES = 1


def round_distance(value: float) -> float:
    return round(value or 0, DISTANCE_PLACES)


def round_time(value: float) -> float:
    return round(value or 0, TIME_PLACES)


def activity_speed(distance_km: float, duration_min: float) -> float:
    """Speed in km/h, 0 when there is no duration."""
    if not duration_min or duration_min <= 0:
        return 0.0
    return (distance_km or 0) / (duration_min / 60)


def scan_longest_run(activities: Iterable[Activity]) -> float:
    return max((a.distance_km or 0 for a in activities), default=0.0)


def scan_avg_speed(activities: Iterable[Activity]) -> float:
    """Mean of per-activity speeds over activities with a positive duration."""
    speeds = [
        activity_speed(a.distance_km, a.duration_min)
        for a in activities
        if a.duration_min and a.duration_min > 0
    ]
    if not speeds:
        return 0.0
    return sum(speeds) / len(speeds)


class StatsReconciler:
    """Applies activity mutations to the owner's profile aggregate."""

    def __init__(self, db: Session):
        self.db = db
        self.activities = ActivityStore(db)
        self.profiles = ProfileStore(db)

    def on_create(self, activity: Activity) -> Profile:
        """Fold a newly created activity into the aggregate."""
        profile = self.profiles.get(activity.user_id)

        distance = activity.distance_km or 0
        duration = activity.duration_min or 0
        old_count = profile.total_activities or 0
        old_avg = profile.avg_speed or 0
        new_count = old_count + 1

        fields = {
            "total_activities": new_count,
            "total_time": (profile.total_time or 0) + duration,
            "total_distance": (profile.total_distance or 0) + distance,
            "longest_run": max(profile.longest_run or 0, distance),
            "avg_speed": (old_avg * old_count + activity_speed(distance, duration)) / new_count,
        }
        return self._write(activity.user_id, fields)

    def on_update(self, activity: Activity, old_distance: float, old_duration: float) -> Profile:
        """Apply an edit; ``activity`` already carries the new values."""
        profile = self.profiles.get(activity.user_id)

        new_distance = activity.distance_km or 0
        new_duration = activity.duration_min or 0
        distance_diff = new_distance - (old_distance or 0)
        duration_diff = new_duration - (old_duration or 0)

        fields = {
            "total_distance": (profile.total_distance or 0) + distance_diff,
            "total_time": (profile.total_time or 0) + duration_diff,
        }

        current_longest = profile.longest_run or 0
        was_longest = round_distance(old_distance) >= round_distance(current_longest)
        if new_distance > current_longest:
            fields["longest_run"] = new_distance
        elif was_longest and distance_diff < 0:
            logger.debug("Longest run of %s shrank, rescanning", activity.user_id)
            fields["longest_run"] = scan_longest_run(self.activities.select(activity.user_id))

        if distance_diff or duration_diff:
            logger.debug("Speed term changed for %s, rescanning average", activity.user_id)
            fields["avg_speed"] = scan_avg_speed(self.activities.select(activity.user_id))

        return self._write(activity.user_id, fields)

    def on_delete(self, activity: Activity) -> Profile:
        """Remove a soft-deleted activity from the aggregate."""
        profile = self.profiles.get(activity.user_id)
        remaining = self.activities.select(activity.user_id)

        distance = activity.distance_km or 0
        fields = {
            "total_distance": (profile.total_distance or 0) - distance,
            "total_time": (profile.total_time or 0) - (activity.duration_min or 0),
            "avg_speed": scan_avg_speed(remaining),
            "total_activities": len(remaining),
        }
        if round_distance(distance) >= round_distance(profile.longest_run):
            logger.debug("Longest run of %s deleted, rescanning", activity.user_id)
            fields["longest_run"] = scan_longest_run(remaining)

        return self._write(activity.user_id, fields)

    def reconcile(self, user_id: str) -> Profile:
        """Rebuild every aggregate field from the non-deleted activity set.

        Idempotent; safe to call from any mutation path or as a repair.
        """
        activities = self.activities.select(user_id)
        fields = {
            "total_distance": sum(a.distance_km or 0 for a in activities),
            "total_time": sum(a.duration_min or 0 for a in activities),
            "total_activities": len(activities),
            "longest_run": scan_longest_run(activities),
            "avg_speed": scan_avg_speed(activities),
        }
        # NotFound surfaces here when the profile row is missing
        self.profiles.get(user_id)
        logger.info("Reconciled stats for %s over %d activities", user_id, len(activities))
        return self._write(user_id, fields)

    def _write(self, user_id: str, fields: Dict[str, float]) -> Profile:
        rounded = dict(fields)
        for key in ("total_distance", "avg_speed", "longest_run"):
            if key in rounded:
                rounded[key] = round_distance(rounded[key])
        if "total_time" in rounded:
            rounded["total_time"] = round_time(rounded["total_time"])
        return self.profiles.update(user_id, rounded)
