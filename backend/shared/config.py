"""
Centralized configuration for the Tally backend.

All settings are loaded from environment variables with sensible defaults.
Application settings use the TALLY_ prefix; vendor API keys are read under
their conventional names (ANTHROPIC_API_KEY, OPENAI_API_KEY, ...).
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TALLY_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Tally API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Analysis
    analysis_models: list[str] = [
        "openai/o4-mini",
        "anthropic/claude-sonnet-4-20250514",
    ]
    max_images: int = Field(default=8, ge=1)
    max_file_size_bytes: int = 10 * 1024 * 1024
    model_timeout_seconds: float = Field(default=120.0, gt=0)

    # LLM Provider API Keys
    anthropic_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("TALLY_ANTHROPIC_API_KEY", "ANTHROPIC_API_KEY"),
    )
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("TALLY_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    google_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("TALLY_GOOGLE_API_KEY", "GOOGLE_API_KEY"),
    )
    xai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("TALLY_XAI_API_KEY", "XAI_API_KEY"),
    )
    openrouter_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("TALLY_OPENROUTER_API_KEY", "OPENROUTER_API_KEY"),
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
