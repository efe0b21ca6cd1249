"""Rebuild rolling stats for every profile from its non-deleted activities."""
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.database import SessionLocal
from app.models import Profile
from app.services.stats_service import StatsReconciler


def rebuild_profile_stats():
    """Reconcile every profile, committing one profile at a time."""
    db = SessionLocal()
    try:
        reconciler = StatsReconciler(db)
        profile_ids = [row.id for row in db.query(Profile.id).all()]
        print(f"Rebuilding stats for {len(profile_ids)} profiles")

        for i, profile_id in enumerate(profile_ids):
            before = db.query(Profile).filter(Profile.id == profile_id).first()
            old_distance = before.total_distance
            profile = reconciler.reconcile(profile_id)
            db.commit()
            print(
                f"  [{i+1}/{len(profile_ids)}] {profile_id}: "
                f"{profile.total_activities} activities, "
                f"{old_distance} -> {profile.total_distance} km"
            )

        print("Rebuild complete!")
    finally:
        db.close()


if __name__ == "__main__":
    rebuild_profile_stats()
