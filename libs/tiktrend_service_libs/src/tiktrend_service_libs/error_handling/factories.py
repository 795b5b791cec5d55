"""
Factory functions for raising structured TikTrend errors.

Every factory builds an ErrorDetail with the matching error code and raises a
TikTrendError. Additional keyword arguments land in ``ErrorDetail.details``.
"""

from __future__ import annotations

from typing import Any, NoReturn
from uuid import UUID

from tiktrend_service_libs.error_handling.error_detail import ErrorDetail
from tiktrend_service_libs.error_handling.error_enums import EarlyAccessErrorCode, ErrorCode
from tiktrend_service_libs.error_handling.tiktrend_error import TikTrendError


def create_error_detail(
    error_code: ErrorCode | EarlyAccessErrorCode,
    message: str,
    service: str,
    operation: str,
    correlation_id: UUID,
    details: dict[str, Any] | None = None,
) -> ErrorDetail:
    """Build an ErrorDetail without raising."""
    return ErrorDetail(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id,
        service=service,
        operation=operation,
        details=details or {},
    )


def _raise(
    error_code: ErrorCode | EarlyAccessErrorCode,
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID,
    details: dict[str, Any],
) -> NoReturn:
    raise TikTrendError(
        create_error_detail(
            error_code=error_code,
            message=message,
            service=service,
            operation=operation,
            correlation_id=correlation_id,
            details=details,
        )
    )


# =============================================================================
# Generic Error Factories
# =============================================================================


def raise_validation_error(
    service: str,
    operation: str,
    field: str,
    message: str,
    correlation_id: UUID,
    value: Any = None,
    **additional_context: Any,
) -> NoReturn:
    """Raise a VALIDATION_ERROR for a single field (or the whole payload)."""
    details: dict[str, Any] = {"field": field}
    if value is not None:
        details["value"] = value
    details.update(additional_context)
    _raise(ErrorCode.VALIDATION_ERROR, service, operation, message, correlation_id, details)


def raise_parsing_error(
    service: str,
    operation: str,
    parse_target: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    details = {"parse_target": parse_target, **additional_context}
    _raise(ErrorCode.PARSING_ERROR, service, operation, message, correlation_id, details)


# =============================================================================
# External Service Error Factories
# =============================================================================


def raise_external_service_error(
    service: str,
    operation: str,
    external_service: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    details = {"external_service": external_service, **additional_context}
    _raise(ErrorCode.EXTERNAL_SERVICE_ERROR, service, operation, message, correlation_id, details)


def raise_timeout_error(
    service: str,
    operation: str,
    timeout_seconds: float,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    details = {"timeout_seconds": timeout_seconds, **additional_context}
    _raise(ErrorCode.TIMEOUT, service, operation, message, correlation_id, details)


def raise_connection_error(
    service: str,
    operation: str,
    target: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    details = {"target": target, **additional_context}
    _raise(ErrorCode.CONNECTION_ERROR, service, operation, message, correlation_id, details)


def raise_invalid_response(
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    _raise(
        ErrorCode.INVALID_RESPONSE, service, operation, message, correlation_id, additional_context
    )


def raise_rate_limit_error(
    service: str,
    operation: str,
    limit: int,
    window_seconds: int,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    details = {"limit": limit, "window_seconds": window_seconds, **additional_context}
    _raise(ErrorCode.RATE_LIMIT, service, operation, message, correlation_id, details)


# =============================================================================
# Early Access Service Error Factories
# =============================================================================


def raise_delivery_failure(
    service: str,
    operation: str,
    recipient_role: str,
    message: str,
    correlation_id: UUID,
    **additional_context: Any,
) -> NoReturn:
    """Raise DELIVERY_FAILURE when an email provider rejects or fails a send."""
    details = {"recipient_role": recipient_role, **additional_context}
    _raise(
        EarlyAccessErrorCode.DELIVERY_FAILURE, service, operation, message, correlation_id, details
    )
