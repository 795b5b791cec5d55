"""Startup and shutdown setup for the Early Access Service."""

from __future__ import annotations

from dishka import AsyncContainer
from tiktrend_service_libs.logging_utils import create_service_logger
from tiktrend_service_libs.quart_app import TikTrendApp

from services.early_access_service.config import Settings
from services.early_access_service.notifier import OPERATOR_TEMPLATE, SUBMITTER_TEMPLATE
from services.early_access_service.protocols import (
    EmailProvider,
    RateLimitStore,
    TemplateRenderer,
)

logger = create_service_logger("early_access_service.startup_setup")


async def initialize_services(
    app: TikTrendApp, settings: Settings, container: AsyncContainer
) -> None:
    """Resolve APP-scoped dependencies so misconfiguration fails before serving.

    Resolving the rate limit store opens and pings Redis when that backend is
    selected; both notification templates must be present.
    """
    try:
        renderer = await container.get(TemplateRenderer)
        for template_id in (OPERATOR_TEMPLATE, SUBMITTER_TEMPLATE):
            if not await renderer.template_exists(template_id):
                raise RuntimeError(f"Email template missing: {template_id}")

        await container.get(RateLimitStore)
        email_provider = await container.get(EmailProvider)

        logger.info(
            "Early Access Service initialized successfully",
            extra={
                "email_provider": email_provider.get_provider_name(),
                "rate_limit_backend": settings.RATE_LIMIT_BACKEND,
                "environment": settings.ENVIRONMENT.value,
            },
        )
    except Exception as e:
        logger.critical(f"Failed to initialize Early Access Service: {e}", exc_info=True)
        raise


async def shutdown_services(app: TikTrendApp) -> None:
    """Close the container, which closes the HTTP client and Redis store."""
    try:
        await app.container.close()
        logger.info("Early Access Service shutdown tasks completed")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}", exc_info=True)
