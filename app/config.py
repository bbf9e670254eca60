# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.UPSTREAM_API_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Identity Provider (Supabase Auth)
    # -------------------------------------------------------------------------
    # Required - sign in, sign up and password reset all go through it

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    # -------------------------------------------------------------------------
    # Auth Proxy
    # -------------------------------------------------------------------------

    AUTH_MODE: Literal["mock", "upstream"] = Field(
        default="mock",
        description="mock: fabricate auth results locally; upstream: forward to the backend API"
    )

    UPSTREAM_API_URL: str = Field(
        default="http://localhost:8080/api",
        description="Base URL of the backend API that owns user accounts"
    )

    UPSTREAM_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Timeout for a single upstream request"
    )

    PASSWORD_RESET_REDIRECT_URL: str = Field(
        default="http://localhost:8000/auth/reset-password-callback",
        description="Where the password reset email link sends the user"
    )

    # -------------------------------------------------------------------------
    # Browser State
    # -------------------------------------------------------------------------

    AUTH_TOKEN_KEY: str = Field(
        default="authToken",
        min_length=1,
        description="Cookie name the auth token is stored under"
    )

    REMEMBER_ME_DAYS: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Lifetime of the auth token cookie when 'Remember me' is checked"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    SITE_NAME: str = Field(
        default="3legant",
        description="Storefront name shown on the auth pages"
    )

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://shop.example" -> ["http://localhost:3000", "https://shop.example"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def upstream_base_url(self) -> str:
        """UPSTREAM_API_URL without a trailing slash."""
        return self.UPSTREAM_API_URL.rstrip("/")

    @property
    def remember_me_seconds(self) -> int:
        return self.REMEMBER_ME_DAYS * 24 * 60 * 60

    @property
    def is_upstream_mode(self) -> bool:
        return self.AUTH_MODE == "upstream"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
