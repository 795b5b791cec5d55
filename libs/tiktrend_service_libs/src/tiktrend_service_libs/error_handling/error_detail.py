"""Structured error payload shared by every TikTrend service error."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tiktrend_service_libs.error_handling.error_enums import EarlyAccessErrorCode, ErrorCode


class ErrorDetail(BaseModel):
    """Immutable description of a failure, safe to log in full.

    Never serialise this model into a client-facing response: ``details`` and
    ``stack_trace`` may carry provider internals.
    """

    model_config = ConfigDict(frozen=True)

    error_code: ErrorCode | EarlyAccessErrorCode
    message: str
    correlation_id: UUID
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    service: str
    operation: str
    details: dict[str, Any] = Field(default_factory=dict)
    stack_trace: str | None = None
