"""
Configuration management using Pydantic Settings.
Loads environment variables from .env file with validation.
"""

from pathlib import Path
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # Logging
    log_level: str = Field(default="INFO")

    # Quote generation
    quote_validity_days: int = Field(
        default=30,
        description="Number of days a generated quote remains valid"
    )
    quote_generation_delay_seconds: float = Field(
        default=1.5,
        description="Simulated provider response time for quote generation"
    )

    # Workflow timings
    representative_matching_delay_seconds: float = Field(
        default=2.0,
        description="How long the representative matching screen is shown"
    )
    post_submit_generation_delay_seconds: float = Field(
        default=3.0,
        description="Delay between the thank-you screen and quote generation"
    )
    auto_generate_quotes_on_submit: bool = Field(
        default=False,
        description="Generate quotes automatically after the intake form is submitted"
    )

    # Optional cover limits (home, buildings and contents)
    optional_cover_min: float = Field(default=10000)
    optional_cover_max: float = Field(default=100000)

    # Purchase notification (email edge function)
    notification_url: Optional[str] = Field(
        default=None,
        description="Endpoint of the send-quote-email function"
    )
    notification_api_key: Optional[str] = Field(
        default=None,
        description="Bearer token for the notification endpoint"
    )
    notification_timeout_seconds: float = Field(default=10.0)
    notification_max_attempts: int = Field(default=3)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
