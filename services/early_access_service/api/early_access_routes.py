"""Early access intake route.

Pipeline: preflight short-circuit, rate limit, JSON parse, validation,
notification. A failing stage short-circuits and later stages never run.
Every response carries the CORS headers and one of the fixed messages;
error details only go to the logs.
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
    INTERNAL_ERROR_MESSAGE,
    INVALID_INPUT_MESSAGE,
    RATE_LIMITED_MESSAGE,
    SIGNUP_ACCEPTED_MESSAGE,
    extract_correlation_id,
    message_response,
    parse_json_body,
    preflight_response,
    resolve_client_identifier,
)
from services.early_access_service.config import Settings
from services.early_access_service.metrics import get_metrics
from services.early_access_service.notifier import SignupNotifier
from services.early_access_service.rate_limiter import (
    FixedWindowRateLimiter,
    create_rate_limit_key,
)
from services.early_access_service.validation import validate_signup

bp = Blueprint("early_access", __name__)
logger = create_service_logger("early_access_service.api.early_access_routes")

SIGNUP_ACTION = "signup"


def _count_signup(outcome: str) -> None:
    counter = get_metrics().get("signups_total")
    if counter:
        counter.labels(outcome=outcome).inc()


@bp.route("/api/early-access", methods=["POST", "OPTIONS"])
@bp.route("/functions/v1/send-early-access", methods=["POST", "OPTIONS"])
@inject
async def submit_early_access(
    settings: FromDishka[Settings],
    limiter: FromDishka[FixedWindowRateLimiter],
    notifier: FromDishka[SignupNotifier],
) -> tuple[Response, int]:
    """Accept an early access signup and send both notification emails."""
    if request.method == "OPTIONS":
        return preflight_response(settings)

    correlation_id = extract_correlation_id()
    bind_request_context(str(correlation_id), endpoint="early_access")

    try:
        client_id = resolve_client_identifier(settings)
        decision = await limiter.hit(
            create_rate_limit_key(SIGNUP_ACTION, client_id),
            limit=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
        if not decision.allowed:
            raise_rate_limit_error(
                service=settings.SERVICE_NAME,
                operation="submit_early_access",
                limit=decision.limit,
                window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
                message="Signup rate limit exceeded",
                correlation_id=correlation_id,
                action=SIGNUP_ACTION,
            )

        payload = await parse_json_body("submit_early_access", correlation_id)
        signup = validate_signup(payload, correlation_id)
        await notifier.notify(signup, correlation_id)

    except TikTrendError as e:
        if e.error_detail.error_code == ErrorCode.RATE_LIMIT:
            _count_signup("rate_limited")
            rejections = get_metrics().get("rate_limit_rejections_total")
            if rejections:
                rejections.labels(action=SIGNUP_ACTION).inc()
            return message_response(settings, False, RATE_LIMITED_MESSAGE, 429)

        if e.error_detail.error_code == ErrorCode.VALIDATION_ERROR:
            logger.info(
                f"Rejected invalid signup: {e.error_detail.message}",
                extra={"correlation_id": e.correlation_id, "error_code": e.error_code},
            )
            _count_signup("invalid")
            return message_response(settings, False, INVALID_INPUT_MESSAGE, 400)

        logger.error(f"Signup failed: {e.error_detail.message}", extra=e.to_log_context())
        _count_signup("failed")
        return message_response(settings, False, INTERNAL_ERROR_MESSAGE, 500)

    except Exception as e:
        logger.error(
            f"Unexpected error during signup: {e}",
            exc_info=True,
            extra={"correlation_id": str(correlation_id)},
        )
        _count_signup("failed")
        return message_response(settings, False, INTERNAL_ERROR_MESSAGE, 500)

    _count_signup("accepted")
    logger.info(
        "Early access request accepted",
        extra={
            "correlation_id": str(correlation_id),
            "email_domain": signup.email.rpartition("@")[2],
            "beta_access": signup.beta_access,
        },
    )
    return message_response(settings, True, SIGNUP_ACCEPTED_MESSAGE, 200)
