"""
Parser Service Configuration Module

Centralized configuration with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseSettings):
    """
    Parser service configuration with validation.

    All settings can be overridden via environment variables prefixed
    with ``PARSER_`` (e.g. ``PARSER_MAX_UPLOAD_BYTES``).
    """

    model_config = SettingsConfigDict(env_prefix="PARSER_", env_file=".env", extra="ignore")

    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        le=100 * 1024 * 1024,
        description="Largest accepted upload in bytes (1KB-100MB)"
    )
    max_concurrent_extractions: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Maximum concurrent PDF extractions (1-32)"
    )
    max_pages: int = Field(
        default=30,
        ge=1,
        le=500,
        description="Pages read from each PDF (1-500)"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return v.upper()


@lru_cache()
def get_settings() -> ParserSettings:
    """Get cached settings instance."""
    return ParserSettings()


settings = get_settings()
