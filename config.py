"""
Configuration module for the Clinic Workflow App.
Loads settings from environment variables and an optional .env file.
"""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_host: str = Field(
        default="0.0.0.0",
        alias="APP_HOST",
        description="Host to bind the application"
    )
    app_port: int = Field(
        default=8000,
        alias="APP_PORT",
        description="Port to bind the application"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    # Billing
    default_tax_rate: Decimal = Field(
        default=Decimal("0.12"),
        ge=0,
        le=1,
        alias="DEFAULT_TAX_RATE",
        description="Tax rate applied when an invoice request does not carry one"
    )

    # Data Store Configuration
    store_backend: str = Field(
        default="memory",
        alias="STORE_BACKEND",
        description="Repository backend: 'memory' or 'cosmos' (see shared/cosmos_config.py)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
settings = Settings()
