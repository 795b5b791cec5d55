"""Health and metrics routes for the Early Access Service."""

from __future__ import annotations

import uuid

from dishka import FromDishka
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from quart import Blueprint, Response, jsonify
from quart_dishka import inject
from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.config import Settings

logger = create_service_logger("early_access_service.api.health")
health_bp = Blueprint("health", __name__)


@health_bp.get("/healthz")
@inject
async def health_check(settings: FromDishka[Settings]) -> Response:
    """Health check endpoint for Kubernetes/Docker."""
    return jsonify(
        {
            "service": settings.SERVICE_NAME,
            "status": "healthy",
            "environment": settings.ENVIRONMENT.value,
            "checks": {
                "email_provider": settings.EMAIL_PROVIDER,
                "rate_limit_backend": settings.RATE_LIMIT_BACKEND,
            },
        }
    )


@health_bp.get("/metrics")
@inject
async def metrics(registry: FromDishka[CollectorRegistry]) -> Response:
    """Prometheus metrics endpoint."""
    correlation_id = uuid.uuid4()

    try:
        metrics_data = generate_latest(registry)
        response = Response(metrics_data, content_type=CONTENT_TYPE_LATEST)
        response.headers["X-Correlation-ID"] = str(correlation_id)
        return response
    except Exception as e:
        logger.error(
            f"Error generating metrics: {e}",
            extra={"correlation_id": str(correlation_id)},
            exc_info=True,
        )
        return Response("Error generating metrics", status=500)
