"""Activity service - every activity mutation goes through here."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import AppError, StoreError
from app.models import Activity
from app.schemas import ActivityCreate, ActivityUpdate
from app.services.stats_service import StatsReconciler, round_distance, round_time
from app.services.stores import ActivityStore

logger = logging.getLogger(__name__)

# Columns that cannot be cleared by a patch
REQUIRED_FIELDS = ("type", "title", "distance_km", "duration_min")


class ActivityService:
    """Creates, edits and soft-deletes activities together with the profile aggregate.

    The activity write and the profile write share one transaction: either both
    are committed or the session is rolled back.
    """

    def __init__(self, db: Session):
        self.db = db
        self.store = ActivityStore(db)
        self.reconciler = StatsReconciler(db)

    @contextmanager
    def _transaction(self, action: str, user_id: str):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Rolled back %s for %s: %s", action, user_id, e)
            raise StoreError(f"Store failure during {action}") from e
        except AppError as e:
            self.db.rollback()
            logger.warning("Rolled back %s for %s: %s", action, user_id, e.message)
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Rolled back %s for %s", action, user_id)
            raise

    def create(self, user_id: str, data: ActivityCreate) -> Activity:
        fields = data.model_dump()
        fields["distance_km"] = round_distance(fields["distance_km"])
        fields["duration_min"] = round_time(fields["duration_min"])

        with self._transaction("activity create", user_id):
            activity = self.store.insert(user_id, fields)
            self.reconciler.on_create(activity)

        self.db.refresh(activity)
        logger.info("Created activity %s for %s", activity.id, user_id)
        return activity

    def update(self, user_id: str, activity_id: int, data: ActivityUpdate) -> Activity:
        patch = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in REQUIRED_FIELDS
        }
        if "distance_km" in patch:
            patch["distance_km"] = round_distance(patch["distance_km"])
        if "duration_min" in patch:
            patch["duration_min"] = round_time(patch["duration_min"])

        with self._transaction("activity update", user_id):
            current = self.store.get(activity_id, user_id)
            old_distance = current.distance_km
            old_duration = current.duration_min
            activity = self.store.update(activity_id, user_id, patch)
            self.reconciler.on_update(activity, old_distance, old_duration)

        self.db.refresh(activity)
        logger.info("Updated activity %s for %s (%s)", activity_id, user_id, ", ".join(patch) or "no changes")
        return activity

    def delete(self, user_id: str, activity_id: int) -> Activity:
        """Soft delete. An already-deleted activity is NotFound."""
        with self._transaction("activity delete", user_id):
            activity = self.store.update(activity_id, user_id, {"deleted": True})
            self.reconciler.on_delete(activity)

        logger.info("Deleted activity %s for %s", activity_id, user_id)
        return activity

    def get(self, user_id: str, activity_id: int) -> Activity:
        return self.store.get(activity_id, user_id)

    def list_activities(
        self,
        user_id: str,
        search: str = "",
        sport: str = "all",
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Activity], int]:
        return self.store.query(
            user_id,
            search=search,
            sport=sport,
            date_from=date_from,
            date_to=date_to,
            page=page,
            page_size=page_size,
        )
