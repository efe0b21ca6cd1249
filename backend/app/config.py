"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./stravalite.db"

    # Identity tokens (issued by the external auth provider)
    jwt_secret: str = "dev-secret-key-change-in-prod"
    jwt_algorithm: str = "HS256"

    # Gemini AI
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # Frontend
    frontend_url: str = "http://localhost:3000"

    # Reports
    weekly_goal_km: float = 50.0
    suggestion_horizon_days: int = 28

    # App settings
    app_name: str = "Strava-Lite"
    debug: bool = True
    log_dir: str = "logs"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
