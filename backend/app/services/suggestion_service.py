"""Workout suggestion service - summarises recent training and asks Gemini."""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import SuggestionUnavailable
from app.models import Activity
from app.schemas import (
    SuggestionAverages,
    SuggestionInputs,
    SuggestionResponse,
    SuggestionTotals,
)
from app.services.llm_service import LLMService
from app.services.stores import ActivityStore

logger = logging.getLogger(__name__)


def format_pace(duration_min: float, distance_km: float) -> Optional[str]:
    """Pace as ``m:ss min/km``, None without distance."""
    if not distance_km:
        return None
    pace = duration_min / distance_km
    minutes = int(pace)
    seconds = round((pace - minutes) * 60)
    if seconds == 60:
        minutes, seconds = minutes + 1, 0
    return f"{minutes}:{seconds:02d} min/km"


def build_prompt(activities: List[Activity], horizon_days: int) -> str:
    runs = [a for a in activities if a.type == "run"]
    rides = [a for a in activities if a.type == "ride"]
    total_distance = round(sum(a.distance_km or 0 for a in activities), 2)
    run_pace = format_pace(
        sum(a.duration_min or 0 for a in runs),
        sum(a.distance_km or 0 for a in runs),
    )

    lines = [
        "You are a helpful running and cycling coach. Based on the following summary of "
        f"my last {horizon_days} days of activity, please provide a workout suggestion for today.",
        "",
        "My recent activity:",
        f"- Total Runs: {len(runs)}",
        f"- Total Rides: {len(rides)}",
        f"- Total Distance: {total_distance} km",
    ]
    if run_pace:
        lines.append(f"- Average Pace (running): {run_pace}")
    lines += [
        "",
        'Return a JSON object with a single top-level key: "response". Its value must be an object with:',
        '1. "workoutPhrase": a short workout phrase (e.g. "Recovery 3 km @ easy pace" or "30 min tempo ride").',
        '2. "rationale": a brief explanation for the suggestion.',
    ]
    return "\n".join(lines)


class SuggestionService:
    """Builds the coaching prompt and shapes the model's answer."""

    def __init__(self, db: Session, llm_service: Optional[LLMService] = None):
        self.db = db
        self.activities = ActivityStore(db)
        self.llm_service = llm_service or LLMService()
        self.settings = get_settings()

    async def suggest(
        self,
        user_id: str,
        horizon_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> SuggestionResponse:
        horizon_days = horizon_days or self.settings.suggestion_horizon_days
        now = now or datetime.utcnow()
        activities = self.activities.between(user_id, now - timedelta(days=horizon_days), now)

        if not activities:
            return SuggestionResponse(
                inputs=SuggestionInputs(totals=SuggestionTotals(), averages=SuggestionAverages())
            )

        total_distance = sum(a.distance_km or 0 for a in activities)
        total_duration = sum(a.duration_min or 0 for a in activities)
        count = len(activities)
        inputs = SuggestionInputs(
            totals=SuggestionTotals(
                distance=round(total_distance, 2),
                duration=round(total_duration, 1),
                activities=count,
            ),
            averages=SuggestionAverages(
                distance=round(total_distance / count, 2),
                duration=round(total_duration / count, 1),
            ),
        )

        data = await self.llm_service.suggest_workout(build_prompt(activities, horizon_days))
        body = data.get("response", data) if isinstance(data, dict) else {}
        phrase = (body.get("workoutPhrase") or body.get("suggestion")) if isinstance(body, dict) else None
        if not phrase:
            logger.warning("No usable suggestion returned for %s", user_id)
            raise SuggestionUnavailable("No suggestion returned from Gemini.")

        logger.info("Generated suggestion for %s from %d activities", user_id, count)
        return SuggestionResponse(
            suggestion=phrase,
            rationale=body.get("rationale"),
            inputs=inputs,
        )
