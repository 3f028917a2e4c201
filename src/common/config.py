"""
Configuration loader for Resume Studio.

Loads all settings from environment variables (.env file).
Validates required settings and provides type-safe access.
"""

import os
from typing import List, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """
    Centralized configuration for the generation API, workflow and CLI.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== Completion provider =====
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_BASE_URL: Optional[str] = os.getenv("OPENAI_BASE_URL") or None
    GENERATION_MODEL: str = os.getenv("GENERATION_MODEL", "gpt-4o-mini")
    GENERATION_TEMPERATURE: float = float(os.getenv("GENERATION_TEMPERATURE", "0.7"))

    # ===== History store (MongoDB) =====
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    HISTORY_DATABASE: str = os.getenv("HISTORY_DATABASE", "resume_studio")
    HISTORY_COLLECTION: str = os.getenv("HISTORY_COLLECTION", "generation_history")
    # Anonymous sessions keep only the most recent entries in memory
    HISTORY_LOCAL_LIMIT: int = int(os.getenv("HISTORY_LOCAL_LIMIT", "20"))

    # ===== Auth provider (Supabase) =====
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    OAUTH_PROVIDER: str = os.getenv("OAUTH_PROVIDER", "github")
    # Public site URL used as the OAuth redirect target
    SITE_URL: str = os.getenv("SITE_URL", "")

    # ===== Service URLs =====
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:5000")
    PARSER_SERVICE_URL: str = os.getenv("PARSER_SERVICE_URL", "http://localhost:8001")
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))

    # ===== Logging =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "simple")

    @classmethod
    def missing_settings(cls, include_history: bool = False, include_auth: bool = False) -> List[str]:
        """Names of required settings that are empty."""
        required_settings = {
            "OPENAI_API_KEY": cls.OPENAI_API_KEY,
        }

        if include_history:
            required_settings["MONGODB_URI"] = cls.MONGODB_URI

        if include_auth:
            required_settings.update({
                "SUPABASE_URL": cls.SUPABASE_URL,
                "SUPABASE_ANON_KEY": cls.SUPABASE_ANON_KEY,
            })

        return [name for name, value in required_settings.items() if not value]

    @classmethod
    def validate(cls, include_history: bool = False, include_auth: bool = False) -> None:
        """
        Validate that all required configuration is present.
        Raises ValueError if critical settings are missing.
        """
        missing = cls.missing_settings(include_history, include_auth)
        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Please check your .env file."
            )

        if not 0.0 <= cls.GENERATION_TEMPERATURE <= 2.0:
            raise ValueError(
                f"GENERATION_TEMPERATURE must be between 0 and 2, got {cls.GENERATION_TEMPERATURE}"
            )

        if cls.HISTORY_LOCAL_LIMIT < 1:
            raise ValueError("HISTORY_LOCAL_LIMIT must be at least 1")

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  Completion provider: OpenAI {'✓' if cls.OPENAI_API_KEY else '✗ Missing'} ({cls.GENERATION_MODEL} @ {cls.GENERATION_TEMPERATURE})
  History store: {'✓ MongoDB' if cls.MONGODB_URI else '✗ Local only'}
  Auth provider: {'✓ Supabase' if cls.SUPABASE_URL and cls.SUPABASE_ANON_KEY else '✗ Disabled'}
  Generation API: {cls.API_BASE_URL}
  Parser service: {cls.PARSER_SERVICE_URL}
        """.strip()
