"""Tests for the structured error factories."""

from __future__ import annotations

from uuid import uuid4

import pytest

from tiktrend_service_libs.error_handling import (
    EarlyAccessErrorCode,
    ErrorCode,
    TikTrendError,
    create_error_detail,
    raise_connection_error,
    raise_delivery_failure,
    raise_external_service_error,
    raise_invalid_response,
    raise_parsing_error,
    raise_rate_limit_error,
    raise_timeout_error,
    raise_validation_error,
)


class TestErrorFactories:
    def test_validation_error_carries_field_and_context(self) -> None:
        correlation_id = uuid4()

        with pytest.raises(TikTrendError) as exc_info:
            raise_validation_error(
                service="early_access_service",
                operation="validate_signup",
                field="email",
                message="Invalid SignupRequest: email",
                correlation_id=correlation_id,
                invalid_fields=["email"],
            )

        detail = exc_info.value.error_detail
        assert detail.error_code == ErrorCode.VALIDATION_ERROR
        assert detail.correlation_id == correlation_id
        assert detail.details == {"field": "email", "invalid_fields": ["email"]}
        assert "value" not in detail.details

    def test_delivery_failure_uses_service_specific_code(self) -> None:
        with pytest.raises(TikTrendError) as exc_info:
            raise_delivery_failure(
                service="early_access_service",
                operation="notify",
                recipient_role="operator",
                message="Resend rejected message",
                correlation_id=uuid4(),
                provider="resend",
            )

        error = exc_info.value
        assert error.error_detail.error_code == EarlyAccessErrorCode.DELIVERY_FAILURE
        assert error.error_code == "DELIVERY_FAILURE"
        assert error.error_detail.details["recipient_role"] == "operator"
        assert str(error) == "[DELIVERY_FAILURE] Resend rejected message"

    @pytest.mark.parametrize(
        "factory, kwargs, expected_code",
        [
            (raise_parsing_error, {"parse_target": "request_body"}, ErrorCode.PARSING_ERROR),
            (
                raise_external_service_error,
                {"external_service": "hook_generator_api"},
                ErrorCode.EXTERNAL_SERVICE_ERROR,
            ),
            (raise_timeout_error, {"timeout_seconds": 5.0}, ErrorCode.TIMEOUT),
            (
                raise_connection_error,
                {"target": "https://example.test"},
                ErrorCode.CONNECTION_ERROR,
            ),
            (raise_invalid_response, {}, ErrorCode.INVALID_RESPONSE),
            (raise_rate_limit_error, {"limit": 3, "window_seconds": 60}, ErrorCode.RATE_LIMIT),
        ],
    )
    def test_factories_map_to_error_codes(
        self, factory: object, kwargs: dict[str, object], expected_code: ErrorCode
    ) -> None:
        with pytest.raises(TikTrendError) as exc_info:
            factory(  # type: ignore[operator]
                service="early_access_service",
                operation="op",
                message="failure",
                correlation_id=uuid4(),
                **kwargs,
            )

        assert exc_info.value.error_detail.error_code == expected_code
        for key, value in kwargs.items():
            assert exc_info.value.error_detail.details[key] == value

    def test_to_log_context_flattens_detail(self) -> None:
        correlation_id = uuid4()
        error = TikTrendError(
            create_error_detail(
                error_code=ErrorCode.TIMEOUT,
                message="provider timed out",
                service="early_access_service",
                operation="notify",
                correlation_id=correlation_id,
                details={"timeout_seconds": 5.0},
            )
        )

        context = error.to_log_context()

        assert context["error_code"] == "TIMEOUT"
        assert context["correlation_id"] == str(correlation_id)
        assert context["operation"] == "notify"
        assert context["details"] == {"timeout_seconds": 5.0}
