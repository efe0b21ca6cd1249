"""Identity router and request dependencies."""

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional

from app.database import get_db
from app.models import Profile
from app.services.auth_service import AuthService, Identity

router = APIRouter(prefix="/auth", tags=["auth"])

bearer_scheme = HTTPBearer(auto_error=False)


# ============== Schemas ==============

class ProfileBrief(BaseModel):
    id: str
    full_name: Optional[str] = None
    bio: Optional[str] = None

    class Config:
        from_attributes = True


class MeResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    profile: Optional[ProfileBrief] = None


# ============== Dependencies ==============

def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """Resolve the caller from the bearer token; raises Unauthorized."""
    token = credentials.credentials if credentials else None
    return AuthService().resolve(token)


# ============== Endpoints ==============

@router.get("/me", response_model=MeResponse)
def get_me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Current identity and its profile row, if one exists yet."""
    profile = db.query(Profile).filter(Profile.id == identity.user_id).first()
    return MeResponse(
        user_id=identity.user_id,
        email=identity.email or (profile.email if profile else None),
        profile=ProfileBrief.model_validate(profile) if profile else None,
    )
