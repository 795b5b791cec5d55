"""Unit tests for Early Access Service configuration loading."""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError
from tiktrend_service_libs.config import Environment
from tiktrend_service_libs.error_handling import TikTrendError

from services.early_access_service.config import SERVICE_NAME, Settings
from services.early_access_service.validation import validate_signup


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        settings = Settings(EMAIL_PROVIDER="mock")

        assert settings.RATE_LIMIT_MAX_REQUESTS == 3
        assert settings.RATE_LIMIT_WINDOW_SECONDS == 60
        assert settings.OPERATOR_EMAIL == "tiktrendai@gmail.com"
        assert settings.sender == "TikTrend AI <onboarding@resend.dev>"
        assert settings.CORS_ALLOW_ORIGIN == "*"
        assert settings.CORS_ALLOW_HEADERS == "authorization, x-client-info, apikey, content-type"
        assert settings.ENVIRONMENT == Environment.DEVELOPMENT

    def test_reads_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EARLY_ACCESS_EMAIL_PROVIDER", "mock")
        monkeypatch.setenv("EARLY_ACCESS_RATE_LIMIT_MAX_REQUESTS", "5")
        monkeypatch.setenv("EARLY_ACCESS_OPERATOR_EMAIL", "ops@example.com")

        settings = Settings()

        assert settings.RATE_LIMIT_MAX_REQUESTS == 5
        assert settings.OPERATOR_EMAIL == "ops@example.com"

    def test_unprefixed_resend_key_is_accepted(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("EARLY_ACCESS_RESEND_API_KEY", raising=False)
        monkeypatch.setenv("EARLY_ACCESS_EMAIL_PROVIDER", "resend")
        monkeypatch.setenv("RESEND_API_KEY", "re_live_key")

        settings = Settings()

        assert settings.RESEND_API_KEY is not None
        assert settings.RESEND_API_KEY.get_secret_value() == "re_live_key"

    def test_resend_without_key_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("RESEND_API_KEY", raising=False)
        monkeypatch.delenv("EARLY_ACCESS_RESEND_API_KEY", raising=False)

        with pytest.raises(ValidationError, match="RESEND_API_KEY"):
            Settings(EMAIL_PROVIDER="resend")

    def test_smtp_without_credentials_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("EARLY_ACCESS_SMTP_USERNAME", raising=False)
        monkeypatch.delenv("EARLY_ACCESS_SMTP_PASSWORD", raising=False)

        with pytest.raises(ValidationError, match="SMTP"):
            Settings(EMAIL_PROVIDER="smtp")

    @pytest.mark.parametrize("field", ["RATE_LIMIT_MAX_REQUESTS", "RATE_LIMIT_WINDOW_SECONDS"])
    def test_non_positive_limits_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            Settings(EMAIL_PROVIDER="mock", **{field: 0})

    def test_secret_not_in_repr(self) -> None:
        settings = Settings(EMAIL_PROVIDER="resend", RESEND_API_KEY="re_live_key")

        assert "re_live_key" not in repr(settings)

    def test_error_details_carry_the_configured_service_name(self) -> None:
        settings = Settings(EMAIL_PROVIDER="mock")

        with pytest.raises(TikTrendError) as exc_info:
            validate_signup({"name": ""}, uuid4())

        assert settings.SERVICE_NAME == SERVICE_NAME == "early_access_service"
        assert exc_info.value.error_detail.service == settings.SERVICE_NAME
