"""Hook generator proxy route.

Forwards a topic to the third-party hook generator so the landing page
does not call it directly. Shares the intake endpoint's rate limiter under
its own action key.
"""

from __future__ import annotations

from dishka import FromDishka
from quart import Blueprint, Response, request
from quart_dishka import inject
from tiktrend_service_libs.error_handling import (
    ErrorCode,
    TikTrendError,
    raise_rate_limit_error,
)
from tiktrend_service_libs.logging_utils import bind_request_context, create_service_logger

from services.early_access_service.api.request_utils import (
    HOOK_FAILURE_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    MISSING_TOPIC_MESSAGE,
    RATE_LIMITED_MESSAGE,
    extract_correlation_id,
    json_response,
    message_response,
    parse_json_body,
    preflight_response,
    resolve_client_identifier,
)
from services.early_access_service.api.schemas import HookGenerationResponse
from services.early_access_service.config import Settings
from services.early_access_service.metrics import get_metrics
from services.early_access_service.protocols import HookGeneratorClientProtocol
from services.early_access_service.rate_limiter import (
    FixedWindowRateLimiter,
    create_rate_limit_key,
)
from services.early_access_service.validation import validate_hook_request

hooks_bp = Blueprint("hooks", __name__)
logger = create_service_logger("early_access_service.api.hook_routes")

HOOKS_ACTION = "hooks"

UPSTREAM_ERROR_CODES = {
    ErrorCode.EXTERNAL_SERVICE_ERROR,
    ErrorCode.INVALID_RESPONSE,
    ErrorCode.CONNECTION_ERROR,
    ErrorCode.TIMEOUT,
}


def _count_hook_request(outcome: str) -> None:
    counter = get_metrics().get("hook_requests_total")
    if counter:
        counter.labels(outcome=outcome).inc()


@hooks_bp.route("/api/hooks", methods=["POST", "OPTIONS"])
@inject
async def generate_hooks(
    settings: FromDishka[Settings],
    limiter: FromDishka[FixedWindowRateLimiter],
    hook_client: FromDishka[HookGeneratorClientProtocol],
) -> tuple[Response, int]:
    """Generate TikTok hooks for a topic via the upstream generator."""
    if request.method == "OPTIONS":
        return preflight_response(settings)

    correlation_id = extract_correlation_id()
    bind_request_context(str(correlation_id), endpoint="hooks")

    try:
        client_id = resolve_client_identifier(settings)
        decision = await limiter.hit(
            create_rate_limit_key(HOOKS_ACTION, client_id),
            limit=settings.HOOK_RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
        if not decision.allowed:
            raise_rate_limit_error(
                service=settings.SERVICE_NAME,
                operation="generate_hooks",
                limit=decision.limit,
                window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
                message="Hook generation rate limit exceeded",
                correlation_id=correlation_id,
                action=HOOKS_ACTION,
            )

        payload = await parse_json_body("generate_hooks", correlation_id)
        hook_request = validate_hook_request(payload, correlation_id)
        hooks = await hook_client.generate_hooks(hook_request.topic, correlation_id)

    except TikTrendError as e:
        code = e.error_detail.error_code
        if code == ErrorCode.RATE_LIMIT:
            _count_hook_request("rate_limited")
            rejections = get_metrics().get("rate_limit_rejections_total")
            if rejections:
                rejections.labels(action=HOOKS_ACTION).inc()
            return message_response(settings, False, RATE_LIMITED_MESSAGE, 429)

        if code in (ErrorCode.VALIDATION_ERROR, ErrorCode.PARSING_ERROR):
            _count_hook_request("invalid")
            return message_response(settings, False, MISSING_TOPIC_MESSAGE, 400)

        if code in UPSTREAM_ERROR_CODES:
            logger.warning(
                f"Hook generation failed: {e.error_detail.message}",
                extra=e.to_log_context(),
            )
            _count_hook_request("upstream_error")
            return message_response(settings, False, HOOK_FAILURE_MESSAGE, 502)

        logger.error(f"Hook generation failed: {e.error_detail.message}", extra=e.to_log_context())
        _count_hook_request("failed")
        return message_response(settings, False, INTERNAL_ERROR_MESSAGE, 500)

    except Exception as e:
        logger.error(
            f"Unexpected error during hook generation: {e}",
            exc_info=True,
            extra={"correlation_id": str(correlation_id)},
        )
        _count_hook_request("failed")
        return message_response(settings, False, INTERNAL_ERROR_MESSAGE, 500)

    _count_hook_request("success")
    return json_response(settings, HookGenerationResponse(hooks=hooks).model_dump(), 200)
