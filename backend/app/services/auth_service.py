"""Identity resolution for tokens issued by the external auth provider."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError

from app.config import get_settings
from app.errors import Unauthorized


ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days


@dataclass
class Identity:
    user_id: str
    email: Optional[str] = None


class AuthService:
    """Verifies bearer tokens. Sign-up and login live with the identity provider."""

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        settings = get_settings()
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token (local development and tests)."""
        to_encode = data.copy()
        expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """Decode and validate a JWT token."""
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_aud": False},
            )
        except JWTError:
            return None

    def resolve(self, token: Optional[str]) -> Identity:
        """Turn a bearer token into an identity, or raise Unauthorized."""
        if not token:
            raise Unauthorized("No active session.")

        payload = self.decode_token(token)
        if not payload or not payload.get("sub"):
            raise Unauthorized("Invalid or expired token.")

        return Identity(user_id=str(payload["sub"]), email=payload.get("email"))
