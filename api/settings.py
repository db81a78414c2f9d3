"""
Application settings using pydantic-settings for type-safe configuration.

Service-level environment variables live here. Analysis parameters live in
reslife.config; the settings below only seed it at startup.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars not defined here
        case_sensitive=False,
    )

    # === CORS Configuration ===
    # Note: Use str type for env var parsing, convert to list via property
    allowed_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="ALLOWED_ORIGINS",
        description="Allowed CORS origins (comma-separated)",
    )

    # === Analysis defaults ===
    default_min_strength: float | None = Field(
        default=None,
        ge=0.0,
        description="Seeds graph.min_strength when set; requests can still override it",
    )
    reslife_config_file: str | None = Field(
        default=None,
        description="JSON file of analysis config overrides",
    )

    # === Logging ===
    log_level: str = Field(
        default="INFO",
        description="Log level: TRACE, DEBUG or INFO",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins string into list."""
        return [origin.strip() for origin in self.allowed_origins_str.split(",") if origin.strip()]

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log_level."""
        v = v.upper()
        if v not in ("TRACE", "DEBUG", "INFO"):
            raise ValueError(f"Invalid LOG_LEVEL: {v}. Must be 'TRACE', 'DEBUG' or 'INFO'")
        return v

    def config_overrides(self) -> dict[str, float]:
        """Analysis config keys seeded from settings"""
        overrides: dict[str, float] = {}
        if self.default_min_strength is not None:
            overrides["graph.min_strength"] = self.default_min_strength
        return overrides


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the application.
    """
    return Settings()
