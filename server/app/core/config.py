from __future__ import annotations
"""server/app/core/config.py
~~~~~~~~~~~~~~~~~~~~~~~~
Paramètres (pydantic-settings).
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql+psycopg://postgres:postgres@db:5432/telemetry"
    DB_CONNECT_TIMEOUT: int = 5
    AUTO_CREATE_SCHEMA: bool = False
    REDIS_URL: str = "redis://redis:6379/0"
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: Optional[str] = None

    # Analyse ECG
    ECG_SAMPLING_RATE_HZ: float = Field(250.0, gt=0)
    ECG_PEAK_THRESHOLD_RATIO: float = Field(0.6, gt=0, le=1)
    HEART_RATE_MIN_BPM: int = 30
    HEART_RATE_MAX_BPM: int = 220

    # Écritures (saga d'ingestion)
    STORE_RETRY_ATTEMPTS: int = Field(3, ge=1)
    STORE_RETRY_BACKOFF_SECONDS: float = Field(0.1, ge=0)
    DEFER_FAILED_WRITES: bool = True

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

settings = Settings()
