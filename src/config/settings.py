"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. **Environment variables**, e.g. AUTO_APPROVAL_THRESHOLD=90
#   2. **.env file**: key=value lines in the project root .env file
#
# Field ``auto_approval_threshold`` maps to env var
# ``AUTO_APPROVAL_THRESHOLD`` (case-insensitive match).
#
# Defaults below apply when neither source sets a value.  The YAML file
# read by ``src.config.loader`` sits between these defaults and the
# environment; see ``load_settings``.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Review engine settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Ingestion ===
    # Candidates scoring at or above this skip human review.
    auto_approval_threshold: int = Field(default=85, ge=0, le=100)
    auto_approval_enabled: bool = True
    preview_max_chars: int = Field(default=200, ge=20, le=200)
    words_per_minute: int = Field(default=200, ge=1)

    # === Bulk operations ===
    bulk_concurrency: int = Field(default=5, ge=1)
    # Pause between chunks, in seconds, to spare downstream systems.
    bulk_backoff_seconds: float = Field(default=1.0, ge=0.0)
    # Caller-boundary cap; the bulk processor itself accepts any size.
    max_bulk_items: int = Field(default=50, ge=1)

    # === Health ===
    health_warning_pending: int = Field(default=100, ge=0)
    health_critical_pending: int = Field(default=200, ge=0)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
