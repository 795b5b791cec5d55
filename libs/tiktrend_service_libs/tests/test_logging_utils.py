"""Tests for logging_utils processors and request context binding."""

from typing import Any

import pytest
from structlog.contextvars import clear_contextvars, get_contextvars

from tiktrend_service_libs.logging_utils import (
    add_service_context,
    bind_request_context,
    configure_service_logging,
    create_service_logger,
)


class TestAddServiceContext:
    """Tests for the add_service_context processor."""

    def test_adds_service_name_and_environment_from_env(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SERVICE_NAME", "early_access_service")
        monkeypatch.setenv("ENVIRONMENT", "production")
        event_dict: dict[str, Any] = {"message": "test message"}

        result = add_service_context(None, "", event_dict)

        assert result["service.name"] == "early_access_service"
        assert result["deployment.environment"] == "production"

    def test_preserves_existing_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICE_NAME", "early_access_service")
        event_dict: dict[str, Any] = {
            "message": "test message",
            "correlation_id": "abc-123",
            "level": "info",
        }

        result = add_service_context(None, "info", event_dict)

        assert result["message"] == "test message"
        assert result["correlation_id"] == "abc-123"
        assert result["level"] == "info"

    def test_defaults_when_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SERVICE_NAME", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        result = add_service_context(None, "", {})

        assert result["service.name"] == "unknown"
        assert result["deployment.environment"] == "development"


class TestBindRequestContext:
    def teardown_method(self) -> None:
        clear_contextvars()

    def test_binds_correlation_id_and_extra_fields(self) -> None:
        bind_request_context("c0ffee", endpoint="early_access")

        context = get_contextvars()
        assert context["correlation_id"] == "c0ffee"
        assert context["endpoint"] == "early_access"

    def test_clears_previous_request_context(self) -> None:
        bind_request_context("first", client="10.0.0.1")
        bind_request_context("second")

        context = get_contextvars()
        assert context == {"correlation_id": "second"}


class TestConfigureServiceLogging:
    def test_file_logging_creates_parent_directory(
        self, tmp_path: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SERVICE_NAME", "early_access_service")
        monkeypatch.setenv("ENVIRONMENT", "testing")
        log_file = tmp_path / "nested" / "service.log"

        configure_service_logging(
            "early_access_service",
            environment="testing",
            log_to_file=True,
            log_file_path=str(log_file),
        )

        assert log_file.parent.is_dir()

    def test_create_service_logger_binds_name(self) -> None:
        logger = create_service_logger("early_access_service.test")

        assert logger is not None
