"""Activity and profile stores over a SQLAlchemy session.

The stores never commit; the caller owns the transaction. Driver errors are
re-raised as ``StoreError`` so the HTTP boundary sees one failure kind.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import NotFound, StoreError
from app.models import Activity, Profile

logger = logging.getLogger(__name__)


@contextmanager
def _store_call(action: str):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Store failure during %s: %s", action, e)
        raise StoreError(f"Store failure during {action}") from e


class ActivityStore:
    """Persisted activity rows."""

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, user_id: str):
        return self.db.query(Activity).filter(
            Activity.user_id == user_id,
            Activity.deleted == False,  # noqa: E712
        )

    def insert(self, user_id: str, fields: Dict[str, Any]) -> Activity:
        """Insert a new activity and flush so it gets an id."""
        with _store_call("activity insert"):
            activity = Activity(user_id=user_id, deleted=False, **fields)
            self.db.add(activity)
            self.db.flush()
            return activity

    def get(self, activity_id: int, user_id: str) -> Activity:
        """Fetch a non-deleted activity owned by ``user_id``."""
        with _store_call("activity read"):
            activity = self._owned(user_id).filter(Activity.id == activity_id).first()
        if not activity:
            raise NotFound("Activity not found")
        return activity

    def update(self, activity_id: int, user_id: str, patch: Dict[str, Any]) -> Activity:
        """Apply ``patch`` to a non-deleted activity owned by ``user_id``."""
        activity = self.get(activity_id, user_id)
        with _store_call("activity update"):
            for field, value in patch.items():
                setattr(activity, field, value)
            self.db.flush()
        return activity

    def select(self, user_id: str) -> List[Activity]:
        """All non-deleted activities of a user (full-scan source)."""
        with _store_call("activity scan"):
            return self._owned(user_id).all()

    def between(self, user_id: str, start: datetime, end: datetime) -> List[Activity]:
        """Non-deleted activities created within [start, end], oldest first."""
        with _store_call("activity window read"):
            return (
                self._owned(user_id)
                .filter(Activity.created_at >= start, Activity.created_at <= end)
                .order_by(Activity.created_at.asc())
                .all()
            )

    def recent(self, user_id: str, limit: int = 3) -> List[Activity]:
        with _store_call("activity read"):
            return (
                self._owned(user_id)
                .order_by(Activity.created_at.desc(), Activity.id.desc())
                .limit(limit)
                .all()
            )

    def query(
        self,
        user_id: str,
        search: str = "",
        sport: str = "all",
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Activity], int]:
        """Filtered, newest-first page of activities plus the filtered total."""
        query = self._owned(user_id)

        if search:
            # Literal substring match; LIKE wildcards in the text are escaped
            escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            query = query.filter(Activity.title.ilike(f"%{escaped}%", escape="\\"))

        if sport and sport != "all":
            query = query.filter(Activity.type == sport)

        if date_from:
            query = query.filter(Activity.created_at >= date_from)

        if date_to:
            query = query.filter(Activity.created_at <= date_to)

        with _store_call("activity listing"):
            total = query.count()
            items = (
                query.order_by(Activity.created_at.desc(), Activity.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            )
        return items, total


class ProfileStore:
    """Persisted per-user profile rows carrying the rolling aggregate."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Profile:
        with _store_call("profile read"):
            profile = self.db.query(Profile).filter(Profile.id == user_id).first()
        if not profile:
            raise NotFound("Profile not found")
        return profile

    def update(self, user_id: str, fields: Dict[str, Any]) -> Profile:
        profile = self.get(user_id)
        with _store_call("profile update"):
            for field, value in fields.items():
                setattr(profile, field, value)
            self.db.flush()
        return profile

    def upsert(
        self,
        user_id: str,
        email: Optional[str] = None,
        full_name: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> Profile:
        """Create the profile row if missing, then set identity fields."""
        with _store_call("profile upsert"):
            profile = self.db.query(Profile).filter(Profile.id == user_id).first()
            if not profile:
                profile = Profile(
                    id=user_id,
                    total_distance=0,
                    total_time=0,
                    total_activities=0,
                    avg_speed=0,
                    longest_run=0,
                )
                self.db.add(profile)
                logger.info("Created profile for user %s", user_id)
            if email is not None:
                profile.email = email
            profile.full_name = full_name
            profile.bio = bio
            self.db.flush()
            return profile
