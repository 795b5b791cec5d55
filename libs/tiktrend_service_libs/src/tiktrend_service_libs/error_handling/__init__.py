"""Error handling utilities for TikTrend services."""

from tiktrend_service_libs.error_handling.error_detail import ErrorDetail
from tiktrend_service_libs.error_handling.error_enums import EarlyAccessErrorCode, ErrorCode
from tiktrend_service_libs.error_handling.factories import (
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
from tiktrend_service_libs.error_handling.tiktrend_error import TikTrendError

__all__ = [
    "EarlyAccessErrorCode",
    "ErrorCode",
    "ErrorDetail",
    "TikTrendError",
    "create_error_detail",
    "raise_connection_error",
    "raise_delivery_failure",
    "raise_external_service_error",
    "raise_invalid_response",
    "raise_parsing_error",
    "raise_rate_limit_error",
    "raise_timeout_error",
    "raise_validation_error",
]
