"""
Module: settings.py
Description: Client configuration using pydantic-settings.

Loads SQS client settings from SQS_POLLER_* environment variables with
validation and defaults. Supports .env files for local development.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SQS poller settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SQS_POLLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log renderer (json or console)")

    # AWS settings
    aws_region: str = Field(default="us-east-1", description="AWS region")
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom SQS endpoint (LocalStack, moto server, ElasticMQ)"
    )
    aws_access_key_id: Optional[str] = Field(default=None, description="AWS access key id")
    aws_secret_access_key: Optional[str] = Field(default=None, description="AWS secret access key")
    aws_session_token: Optional[str] = Field(default=None, description="AWS session token")

    # Polling defaults
    default_max_messages: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Messages requested per receive call"
    )
    default_wait_time_seconds: int = Field(
        default=0,
        ge=0,
        le=20,
        description="Long polling wait per receive call (0 = short poll)"
    )

    # Receive retry settings
    receive_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a failing receive call before giving up"
    )
    receive_retry_multiplier: float = Field(
        default=1.0,
        ge=0,
        description="Exponential backoff multiplier in seconds"
    )
    receive_retry_max_wait: float = Field(
        default=20.0,
        ge=0,
        description="Upper bound for a single backoff wait in seconds"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is a supported renderer."""
        if v.lower() not in ('json', 'console'):
            raise ValueError("log_format must be one of: json, console")
        return v.lower()

    @field_validator('endpoint_url')
    @classmethod
    def validate_endpoint_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate custom endpoint is an HTTP/HTTPS URL."""
        if v is None or v == "":
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError("endpoint_url must be a valid HTTP/HTTPS URL")
        return v

    def client_options(self) -> dict:
        """Keyword arguments for the aioboto3 session and SQS client."""
        options = {
            'region_name': self.aws_region,
            'endpoint_url': self.endpoint_url,
            'aws_access_key_id': self.aws_access_key_id,
            'aws_secret_access_key': self.aws_secret_access_key,
            'aws_session_token': self.aws_session_token,
        }
        return {k: v for k, v in options.items() if v is not None}


# Global settings instance
settings = Settings()
