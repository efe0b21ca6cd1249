"""Activity model for manually logged runs and rides."""

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from app.database import Base


ACTIVITY_TYPES = ("run", "ride")


class Activity(Base):
    """A single run or ride. Soft-deleted, never removed."""

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), ForeignKey("profiles.id"), nullable=False, index=True)

    type = Column(String(10), nullable=False)  # "run" or "ride"
    title = Column(String(100), nullable=False)
    notes = Column(String(500), nullable=True)

    # Metrics
    distance_km = Column(Float, default=0, nullable=False)
    duration_min = Column(Float, default=1, nullable=False)

    deleted = Column(Boolean, default=False, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    profile = relationship("Profile", back_populates="activities")

    @property
    def speed_kmh(self) -> float:
        """Average speed in km/h, 0 when there is no duration."""
        if not self.duration_min or self.duration_min <= 0:
            return 0.0
        return (self.distance_km or 0) / (self.duration_min / 60)

    def __repr__(self):
        return f"<Activity {self.title} ({self.type}) - {self.distance_km} km>"
