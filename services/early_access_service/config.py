"""Configuration settings for the Early Access Service.

This module provides configuration management following the SecureServiceSettings
pattern. Environment variables are prefixed with 'EARLY_ACCESS_' for service
isolation; the Resend API key is also accepted as plain RESEND_API_KEY.
"""

from __future__ import annotations

from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import AliasChoices, Field, SecretStr, model_validator
from pydantic_settings import SettingsConfigDict
from tiktrend_service_libs.config import SecureServiceSettings

# Load .env file from repository root, regardless of current working directory
load_dotenv(find_dotenv(".env"))

SERVICE_NAME = "early_access_service"


class Settings(SecureServiceSettings):
    """Configuration settings for the Early Access Service."""

    model_config = SettingsConfigDict(env_prefix="EARLY_ACCESS_", extra="ignore")

    SERVICE_NAME: str = SERVICE_NAME

    # HTTP server configuration
    HTTP_HOST: str = Field(default="0.0.0.0", description="HTTP server host")
    HTTP_PORT: int = Field(default=8000, description="HTTP server port")

    # Logging configuration
    LOG_LEVEL: str = "INFO"

    # CORS headers sent with every response of the public endpoints
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_HEADERS: str = "authorization, x-client-info, apikey, content-type"

    # Email provider configuration
    EMAIL_PROVIDER: Literal["resend", "smtp", "mock"] = "resend"
    RESEND_API_KEY: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("EARLY_ACCESS_RESEND_API_KEY", "RESEND_API_KEY"),
    )
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_SEND_TIMEOUT_SECONDS: float = Field(
        default=5.0, gt=0, description="Upper bound for a single provider send"
    )

    # SMTP Configuration
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: SecretStr | None = None
    SMTP_USE_TLS: bool = True

    # Mock provider settings (for testing)
    MOCK_PROVIDER_FAILURE_RATE: float = 0.0
    MOCK_PROVIDER_HISTORY_SIZE: int = Field(default=1000, ge=1)

    # Sender and operator addresses
    FROM_EMAIL: str = "onboarding@resend.dev"
    FROM_NAME: str = "TikTrend AI"
    OPERATOR_EMAIL: str = "tiktrendai@gmail.com"

    # Template configuration
    TEMPLATE_PATH: str = "templates"

    # Rate limiting configuration
    RATE_LIMIT_BACKEND: Literal["memory", "redis"] = "memory"
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=3, ge=1)
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=60, ge=1)
    HOOK_RATE_LIMIT_MAX_REQUESTS: int = Field(default=10, ge=1)
    REDIS_URL: str = "redis://localhost:6379/0"

    # Client identification. When the proxy header is not trusted the socket
    # peer address is used instead.
    TRUST_PROXY_HEADER: bool = True
    FORWARDED_FOR_HEADER: str = "X-Forwarded-For"
    UNIDENTIFIED_CLIENT_ID: str = "unknown"

    # Hook generator proxy
    HOOK_GENERATOR_URL: str = "https://hookgeneratorapi-production.up.railway.app/api/generate"
    HOOK_GENERATOR_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    @model_validator(mode="after")
    def _require_provider_credentials(self) -> "Settings":
        """Fail at startup, not per request, when provider secrets are missing."""
        if self.EMAIL_PROVIDER == "resend" and (
            self.RESEND_API_KEY is None or not self.RESEND_API_KEY.get_secret_value().strip()
        ):
            raise ValueError(
                "Resend provider requires RESEND_API_KEY (or EARLY_ACCESS_RESEND_API_KEY)"
            )
        if self.EMAIL_PROVIDER == "smtp" and (
            not self.SMTP_USERNAME or self.SMTP_PASSWORD is None
        ):
            raise ValueError(
                "SMTP provider requires EARLY_ACCESS_SMTP_USERNAME and "
                "EARLY_ACCESS_SMTP_PASSWORD environment variables to be set"
            )
        return self

    @property
    def sender(self) -> str:
        """Formatted From header value, e.g. 'TikTrend AI <onboarding@resend.dev>'."""
        return f"{self.FROM_NAME} <{self.FROM_EMAIL}>"
