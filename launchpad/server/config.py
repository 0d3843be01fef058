# launchpad/server/config.py

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from launchpad.core.constants import DEFAULT_PORT

logger = logging.getLogger(__name__)

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ServiceSettings(BaseSettings):
    """Service process configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @field_validator("port", mode="before")
    @classmethod
    def fallback_to_default_port(cls, value):
        """Absent, unparseable or out-of-range PORT falls back to the default."""
        try:
            port = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid PORT {value!r}, using {DEFAULT_PORT}")
            return DEFAULT_PORT

        if not 1 <= port <= 65535:
            logger.warning(f"PORT {port} out of range, using {DEFAULT_PORT}")
            return DEFAULT_PORT

        return port

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            logger.warning(f"Unknown LOG_LEVEL {value!r}, using INFO")
            return "INFO"
        return level


def get_settings() -> ServiceSettings:
    """Read settings once at startup."""
    return ServiceSettings()
