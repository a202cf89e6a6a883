"""
SiteCraft configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Editor
    AUTOSAVE_DELAY_SECONDS: float = float(os.environ.get("AUTOSAVE_DELAY_SECONDS", "2.0"))
    HISTORY_LIMIT: int = int(os.environ.get("HISTORY_LIMIT", "0"))  # 0 = unbounded

    # AI generation
    ANTHROPIC_API_KEY: str = os.environ.get("ANTHROPIC_API_KEY", "")
    AI_MODEL: str = os.environ.get("AI_MODEL", "claude-sonnet-4-20250514")
    AI_MAX_TOKENS: int = int(os.environ.get("AI_MAX_TOKENS", "8192"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


# Singleton instance
settings = Settings()

if settings.ENVIRONMENT == "production" and not settings.ANTHROPIC_API_KEY:
    raise RuntimeError("ANTHROPIC_API_KEY environment variable is required")
