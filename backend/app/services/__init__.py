"""Services package."""

from app.services.activity_service import ActivityService
from app.services.llm_service import LLMService, GeminiProvider
from app.services.report_service import ReportService
from app.services.stats_service import StatsReconciler
from app.services.suggestion_service import SuggestionService

__all__ = [
    "ActivityService",
    "LLMService",
    "GeminiProvider",
    "ReportService",
    "StatsReconciler",
    "SuggestionService",
]
