"""
Centralized error code definitions.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"

    # Generic external service errors (can be used by any service)
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    PARSING_ERROR = "PARSING_ERROR"


class EarlyAccessErrorCode(str, Enum):
    """
    Business logic specific error codes for the early access service.

    Note: Common failures use the generic ErrorCode enum (RATE_LIMIT,
    VALIDATION_ERROR, TIMEOUT, PARSING_ERROR, etc.)
    """

    DELIVERY_FAILURE = "DELIVERY_FAILURE"
