"""
config.py

Centralized configuration management using pydantic-settings.
All modules must import settings from this file.
Direct os.getenv() calls are prohibited elsewhere.
"""

import sys

import structlog
from pydantic import ValidationError
from pydantic_settings import BaseSettings

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """Application-wide settings loaded from the environment or .env file."""

    # Supabase (database + realtime)
    supabase_url: str
    supabase_service_role_key: str
    realtime_channel_name: str = "cloudrun_notifications"

    # Gmail delegation
    user_to_impersonate: str
    google_application_credentials: str | None = None

    # HTTP server
    port: int = 8080

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


def load_settings(env_file: str | None = ".env") -> Settings:
    """
    Build the Settings object or terminate the process.

    Missing required values are fatal: the service never starts degraded.
    """
    try:
        return Settings(_env_file=env_file)
    except ValidationError as exc:
        missing = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
        logger.error("configuration_missing", fields=missing)
        sys.exit(1)


settings = load_settings()
