# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration: all env-driven, read once at import.
"""
import os
from typing import List


def _csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "ops-logbook")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8080"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "").strip()
    EVENTS_TABLE: str = os.getenv("EVENTS_TABLE", "groupscholar_ops_logbook.events")

    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "4"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))
    DB_POOL_MAX_IDLE: int = int(os.getenv("DB_POOL_MAX_IDLE", "60"))
    REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "4.0"))

    LIST_LIMIT: int = int(os.getenv("LIST_LIMIT", "200"))

    CORS_ORIGINS: List[str] = _csv(os.getenv("CORS_ORIGINS", "*"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
