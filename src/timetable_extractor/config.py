"""Configuration management for Timetable Extractor.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
Backends receive a ``Settings`` instance explicitly; the normalization core
never reads configuration.
"""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the TIMETABLE_ prefix (e.g., TIMETABLE_OLLAMA_HOST).
    """

    model_config = SettingsConfigDict(
        env_prefix="TIMETABLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_provider: str = Field(
        default="ollama",
        description="Extraction backend used when none is requested (ollama, gemini)",
    )

    # Ollama Configuration
    ollama_host: str | None = Field(
        default="http://localhost:11434",
        description="Ollama API host URL",
    )
    ollama_model: str = Field(
        default="llama3.2-vision",
        description="Ollama model used for extraction; must be vision-capable for images",
    )
    ollama_timeout: int = Field(
        default=120,
        description="Timeout for Ollama API requests in seconds",
    )

    # Gemini Configuration
    gemini_api_key: SecretStr | None = Field(
        default=None,
        description="Google Gemini API key",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model used for extraction",
    )

    # Extraction Configuration
    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Sampling temperature passed to the backend",
    )
    max_prompt_chars: int = Field(
        default=20_000,
        description="Maximum number of source text characters embedded in a prompt",
    )
    enforce_time_order: bool = Field(
        default=True,
        description="Drop timeblocks whose end time is not later than their start time",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
