"""AI workout suggestion router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas import SuggestionRequest, SuggestionResponse
from app.routers.auth import get_current_identity
from app.services.auth_service import Identity
from app.services.suggestion_service import SuggestionService

router = APIRouter(prefix="/suggestion", tags=["suggestion"])


def get_suggestion_service(db: Session = Depends(get_db)) -> SuggestionService:
    return SuggestionService(db)


@router.post("", response_model=SuggestionResponse)
async def get_suggestion(
    request: SuggestionRequest,
    identity: Identity = Depends(get_current_identity),
    service: SuggestionService = Depends(get_suggestion_service),
):
    """Suggest today's workout from the last ``horizon_days`` of activity."""
    return await service.suggest(identity.user_id, request.horizon_days)
