"""Request utility functions for Early Access Service API routes.

Provides:
- Correlation ID extraction and generation
- Client identifier resolution for rate limiting
- JSON body parsing that maps malformed bodies to PARSING_ERROR
- The fixed JSON responses and CORS headers of the public endpoints
"""

from __future__ import annotations

import uuid
from typing import Any
from uuid import UUID

from quart import Response, jsonify, request
from tiktrend_service_libs.error_handling import raise_parsing_error
from tiktrend_service_libs.logging_utils import create_service_logger
from werkzeug.exceptions import BadRequest

from services.early_access_service.api.schemas import ApiMessageResponse
from services.early_access_service.config import SERVICE_NAME, Settings

logger = create_service_logger("early_access_service.api.request_utils")

RATE_LIMITED_MESSAGE = "Too many requests. Please try again later."
INVALID_INPUT_MESSAGE = "Invalid input data."
SIGNUP_ACCEPTED_MESSAGE = "Early access request submitted successfully"
INTERNAL_ERROR_MESSAGE = (
    "An error occurred while processing your request. Please try again later."
)
MISSING_TOPIC_MESSAGE = "Please enter a topic."
HOOK_FAILURE_MESSAGE = "Failed to generate hooks. Please try again."


def extract_correlation_id() -> UUID:
    """Extract correlation ID from request headers or generate new one."""
    correlation_header = request.headers.get("X-Correlation-ID")
    if correlation_header:
        try:
            return UUID(correlation_header)
        except ValueError:
            logger.warning(
                f"Invalid correlation ID format in header: {correlation_header}, generating new one"
            )
    return uuid.uuid4()


def resolve_client_identifier(settings: Settings) -> str:
    """Identify the caller for rate limiting.

    With TRUST_PROXY_HEADER the first entry of the forwarded-for header is
    used; otherwise the socket peer address. Requests that cannot be
    identified all share the UNIDENTIFIED_CLIENT_ID bucket.
    """
    if settings.TRUST_PROXY_HEADER:
        forwarded_for = request.headers.get(settings.FORWARDED_FOR_HEADER, "")
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip
        logger.warning(
            f"Missing {settings.FORWARDED_FOR_HEADER} header, "
            f"rate limiting under '{settings.UNIDENTIFIED_CLIENT_ID}'"
        )
        return settings.UNIDENTIFIED_CLIENT_ID

    return request.remote_addr or settings.UNIDENTIFIED_CLIENT_ID


async def parse_json_body(operation: str, correlation_id: UUID) -> Any:
    """Parse the request body as JSON regardless of Content-Type.

    Raises:
        TikTrendError: PARSING_ERROR if the body is not valid JSON
    """
    try:
        return await request.get_json(force=True)
    except BadRequest as e:
        raise_parsing_error(
            service=SERVICE_NAME,
            operation=operation,
            parse_target="request_body",
            message=f"Request body is not valid JSON: {e.description}",
            correlation_id=correlation_id,
        )


def cors_headers(settings: Settings) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.CORS_ALLOW_ORIGIN,
        "Access-Control-Allow-Headers": settings.CORS_ALLOW_HEADERS,
    }


def preflight_response(settings: Settings) -> tuple[Response, int]:
    """Empty 200 carrying only the CORS headers."""
    return Response("", status=200, headers=cors_headers(settings)), 200


def json_response(
    settings: Settings, body: dict[str, Any], status_code: int
) -> tuple[Response, int]:
    response = jsonify(body)
    for name, value in cors_headers(settings).items():
        response.headers[name] = value
    return response, status_code


def message_response(
    settings: Settings, success: bool, message: str, status_code: int
) -> tuple[Response, int]:
    body = ApiMessageResponse(success=success, message=message)
    return json_response(settings, body.model_dump(), status_code)
