"""
Configuration Management

Pydantic-settings based configuration for the schedule sync workflow.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Literal

from botocore.config import Config
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with SCHEDULE_SYNC_ and are case-insensitive.
    Example: SCHEDULE_SYNC_CANONICAL_BUCKET=my-bucket
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULE_SYNC_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Notification addressing
    recipient: str = Field(
        default="Schedule Owner <owner@example.com>",
        description="Mailbox that receives reminders, reports and confirmations",
    )
    sender: str = Field(
        default="Schedule Sync <noreply@example.com>",
        description="From address for outbound emails (must be SES verified)",
    )

    # Canonical file location
    canonical_bucket: str = Field(
        default="schedule-sync-output",
        description="S3 bucket holding the latest validated schedule",
    )
    canonical_key: str = Field(
        default="current.csv",
        description="S3 key of the latest validated schedule",
    )
    attachment_content_type: str = Field(
        default="text/csv; charset=utf-8",
        description="Content type used for CSV attachments and uploads",
    )
    notify_on_missing_attachment: bool = Field(
        default=True,
        description="Send a notice when an inbound email carries no attachment",
    )

    # SES Configuration
    ses_configuration_set: str | None = Field(
        default=None,
        description="SES configuration set for tracking",
    )
    ses_endpoint_url: str | None = Field(
        default=None,
        description="SES endpoint URL (for local development)",
    )

    # S3 Configuration
    s3_endpoint_url: str | None = Field(
        default=None,
        description="S3 endpoint URL (for local development)",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="eu-west-1",
        description="AWS region",
    )
    connect_timeout: int = Field(
        default=10,
        ge=1,
        description="Seconds to establish an AWS connection",
    )
    read_timeout: int = Field(
        default=60,
        ge=1,
        description="Seconds to wait for an AWS response",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def is_local(self) -> bool:
        """Detect if running in local mode."""
        return self.environment == "development"

    @property
    def botocore_config(self) -> Config:
        """Single-attempt client config; the invoking runtime owns retries."""
        return Config(
            retries={"max_attempts": 1, "mode": "standard"},
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
        )

    @property
    def s3_config(self) -> dict:
        """S3 client configuration."""
        config = {"region_name": self.aws_region, "config": self.botocore_config}
        if self.s3_endpoint_url:
            config["endpoint_url"] = self.s3_endpoint_url
        return config

    @property
    def ses_config(self) -> dict:
        """SES client configuration."""
        config = {"region_name": self.aws_region, "config": self.botocore_config}
        if self.ses_endpoint_url:
            config["endpoint_url"] = self.ses_endpoint_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call Settings.model_validate({}) in tests to override.
    """
    return Settings()
