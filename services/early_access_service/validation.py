"""Schema validation for untrusted request bodies.

Pure functions: no I/O, no shared state. A failure raises a
VALIDATION_ERROR TikTrendError listing the offending field names only, so
submitted values never reach the logs.
"""

from __future__ import annotations

from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError
from tiktrend_service_libs.error_handling import raise_validation_error

from services.early_access_service.api.schemas import HookGenerationRequest, SignupRequest
from services.early_access_service.config import SERVICE_NAME

ModelT = TypeVar("ModelT", bound=BaseModel)


def _invalid_fields(error: ValidationError) -> list[str]:
    fields = {".".join(str(part) for part in err["loc"]) or "body" for err in error.errors()}
    return sorted(fields)


def _validate(
    model: type[ModelT], payload: Any, operation: str, correlation_id: UUID
) -> ModelT:
    if not isinstance(payload, dict):
        raise_validation_error(
            service=SERVICE_NAME,
            operation=operation,
            field="body",
            message="Request body must be a JSON object",
            correlation_id=correlation_id,
            received_type=type(payload).__name__,
        )

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        fields = _invalid_fields(e)
        raise_validation_error(
            service=SERVICE_NAME,
            operation=operation,
            field=fields[0],
            message=f"Invalid {model.__name__}: {', '.join(fields)}",
            correlation_id=correlation_id,
            invalid_fields=fields,
        )


def validate_signup(payload: Any, correlation_id: UUID) -> SignupRequest:
    """Validate a parsed signup body and return the trimmed SignupRequest."""
    return _validate(SignupRequest, payload, "validate_signup", correlation_id)


def validate_hook_request(payload: Any, correlation_id: UUID) -> HookGenerationRequest:
    """Validate a parsed hook generation body."""
    return _validate(HookGenerationRequest, payload, "validate_hook_request", correlation_id)
