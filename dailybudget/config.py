"""Application configuration management."""
from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    PROJECT_NAME: str = "Daily Budget Push"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = Field("INFO", description="Minimum level for the loguru sink")

    HMAC_SECRET: str = Field(
        "", description="Server-wide secret backing subscription bearer tokens"
    )

    VAPID_PUBLIC_KEY: str = ""
    VAPID_PRIVATE_KEY: str = ""
    VAPID_SUBJECT: str = Field(
        "mailto:example@example.com", description="Contact URI sent in VAPID claims"
    )

    DEFAULT_TIMEZONE: str = Field("Europe/Berlin", description="IANA zone used when none is stored")
    DEFAULT_SCHEDULE: List[str] = Field(
        default_factory=lambda: ["09:00", "20:00"],
        description="Reminder times used when neither subscription nor budget carry one",
    )
    MAX_SCHEDULE_ENTRIES: int = Field(6, ge=1)

    STORE_BACKEND: Literal["database", "redis"] = Field(
        "database", description="Key-value backend holding subscriptions and budgets"
    )
    DATABASE_URL: str = Field(
        "sqlite:///./dailybudget.db",
        description="SQLAlchemy database URL for the database blob store",
    )
    REDIS_URL: AnyUrl = Field(
        "redis://localhost:6379/0", description="Redis connection string for store and Celery"
    )
    STORE_BATCH_SIZE: int = Field(200, ge=1, description="Page size when enumerating a store")

    CELERY_BROKER_URL: Optional[AnyUrl] = None
    CELERY_RESULT_BACKEND: Optional[AnyUrl] = None

    BACKEND_CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost", "http://localhost:3000"],
        description="Allowed CORS origins",
    )

    PUSH_TIMEOUT_SECONDS: float = Field(5.0, description="Timeout for a single push-service call")
    PUSH_TTL_SECONDS: int = Field(3600, ge=0, description="How long the push service may hold a message")
    SWEEP_MAX_WORKERS: int = Field(8, ge=1, description="Concurrent sends per reminder sweep")
    REMINDER_DEDUPE_ENABLED: bool = Field(
        True, description="Record a per-day delivery marker so overlapping sweeps send once"
    )
    DELIVERY_MARKER_TTL_HOURS: int = Field(48, ge=1)
    PRUNE_EXPIRED_SUBSCRIPTIONS: bool = Field(
        False, description="Delete subscriptions the push service reports as gone (404/410)"
    )

    CURRENCY: str = Field("EUR", description="ISO currency code used in reminder texts")
    NOTIFICATION_ICON: str = "/assets/DailyBudget_icon_48x48.png"

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


settings = get_settings()
