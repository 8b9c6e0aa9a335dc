"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./eventhub.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"
    IDENTITY_HEADER: str = "X-User-Id"
    DEFAULT_PROFILE_NAME: str = "Anonymous User"
    TRENDS_TIMEZONE: str = "UTC"
    TRENDS_MAX_DAYS: int = 366

    class Config:
        env_file = ".env"


settings = Settings()
