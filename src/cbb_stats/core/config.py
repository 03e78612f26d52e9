"""
Configuration management for CBB Stats API.

Uses Pydantic settings for type-safe configuration with environment variable support.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import ComparisonScope


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    For nested settings, use double underscore: CORS__ALLOW_ORIGINS="http://localhost:3000"
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # ==========================================================================
    # Application Metadata
    # ==========================================================================
    app_name: str = "CBB Stats API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", description="development, staging, production")

    # ==========================================================================
    # Database Configuration
    # ==========================================================================
    database_url: Optional[str] = Field(
        default=None,
        description="PostgreSQL connection string",
    )
    database_pool_size: int = Field(default=10, ge=1, le=50)
    database_pool_timeout: int = Field(default=30, ge=5, le=120)

    @computed_field
    @property
    def db_url(self) -> str:
        """Get the effective database URL."""
        return self.database_url or ""

    # ==========================================================================
    # API Configuration
    # ==========================================================================
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_docs_url: str = "/docs"
    api_redoc_url: str = "/redoc"

    # ==========================================================================
    # CORS Configuration
    # ==========================================================================
    cors_allow_origins: list[str] = Field(
        default=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        description="Allowed CORS origins. Set to ['*'] for development.",
    )
    cors_allow_methods: list[str] = ["GET", "HEAD", "OPTIONS"]
    cors_allow_headers: list[str] = ["Accept", "Accept-Encoding", "Content-Type"]
    cors_allow_credentials: bool = False
    cors_expose_headers: list[str] = ["X-Process-Time"]

    # ==========================================================================
    # Stats Configuration
    # ==========================================================================
    current_season: int = 2026
    default_last_n_days: int = Field(default=30, ge=1, description="Rolling window when the client omits one")
    default_comparison_scope: ComparisonScope = Field(
        default=ComparisonScope.team, description="Percentile population when the client omits one"
    )
    percentile_precision: int = Field(default=1, ge=0, le=6, description="Decimal places on pct_ fields")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
