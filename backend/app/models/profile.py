"""Profile model: identity fields plus rolling activity statistics."""

from sqlalchemy import Column, String, Float, Integer, DateTime, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from app.database import Base


class Profile(Base):
    """One row per user, keyed by the identity provider's user id."""

    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True, index=True)
    email = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)

    # Rolling aggregate, maintained by StatsReconciler
    total_distance = Column(Float, default=0, nullable=False)  # km
    total_time = Column(Float, default=0, nullable=False)  # minutes
    total_activities = Column(Integer, default=0, nullable=False)
    avg_speed = Column(Float, default=0, nullable=False)  # km/h
    longest_run = Column(Float, default=0, nullable=False)  # km

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    activities = relationship("Activity", back_populates="profile")

    def __repr__(self):
        return f"<Profile {self.id} - {self.total_activities} activities, {self.total_distance} km>"
