import os
from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Literal


def _default_database_url() -> str:
    return "postgresql://{user}:{password}@{host}:{port}/{name}".format(
        user=os.getenv("DB_USER", "postgres"),
        password=os.getenv("DB_PASSWORD", "postgres"),
        host=os.getenv("DB_HOST", "localhost"),
        port=os.getenv("DB_PORT", "5432"),
        name=os.getenv("DB_NAME", "learning_log"),
    )


class Settings(BaseSettings):
    """Learning Log API settings, read from the environment and .env."""
    DEBUG: bool = False

    # Origins of the web client
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Firebase Admin SDK
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_SERVICE_ACCOUNT_JSON: str = "./firebase-service-account.json"

    # Database; DATABASE_URL wins over the DB_* parts
    DATABASE_URL: str = _default_database_url()

    # Redis backs the rate limiter
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    # Rate limits (slowapi syntax)
    RATE_LIMIT_DEFAULT: str = "1000/hour"
    RATE_LIMIT_WRITE: str = "100/hour"
    RATE_LIMIT_IMPORT: str = "10/hour"

    # Streaks
    STREAK_POLICY: Literal["rolling_window", "calendar_day"] = "rolling_window"
    STREAK_WINDOW_HOURS: int = Field(32, gt=0)
    MAX_STREAK_LOOKBACK: int = Field(1000, gt=0)

    # Social
    NOTIFICATIONS_LIMIT: int = 50
    USER_SEARCH_LIMIT: int = 20

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

# Content types a log can be recorded against
CONTENT_TYPES = ("book", "podcast", "article", "course", "video", "other")
