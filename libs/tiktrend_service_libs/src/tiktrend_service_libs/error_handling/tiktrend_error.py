"""Core exception class for structured error handling."""

from __future__ import annotations

from typing import Any

from tiktrend_service_libs.error_handling.error_detail import ErrorDetail


class TikTrendError(Exception):
    """Exception wrapping an ErrorDetail.

    Raised through the factory functions rather than constructed directly, so
    every failure carries a code, the originating service/operation and a
    correlation ID.
    """

    def __init__(self, error_detail: ErrorDetail) -> None:
        super().__init__(error_detail.message)
        self.error_detail = error_detail

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.error_detail.message}"

    @property
    def correlation_id(self) -> str:
        return str(self.error_detail.correlation_id)

    @property
    def error_code(self) -> str:
        return self.error_detail.error_code.value

    @property
    def service(self) -> str:
        return self.error_detail.service

    @property
    def operation(self) -> str:
        return self.error_detail.operation

    def to_log_context(self) -> dict[str, Any]:
        """Flatten the error for structured log fields."""
        return {
            "error_code": self.error_code,
            "error_message": self.error_detail.message,
            "correlation_id": self.correlation_id,
            "service": self.service,
            "operation": self.operation,
            "details": self.error_detail.details,
        }
