"""Quart application for the Early Access Service.

Serves the early access intake endpoint, the hook generator proxy and the
standard health/metrics endpoints. Run with
``python -m services.early_access_service.app``.
"""

from __future__ import annotations

import asyncio

from dishka import make_async_container
from quart import Response
from quart_dishka import QuartDishka
from tiktrend_service_libs.logging_utils import (
    configure_service_logging,
    create_service_logger,
)
from tiktrend_service_libs.metrics_middleware import setup_request_metrics_middleware
from tiktrend_service_libs.quart_app import TikTrendApp
from werkzeug.exceptions import HTTPException

from services.early_access_service.api.early_access_routes import bp as early_access_bp
from services.early_access_service.api.health_routes import health_bp
from services.early_access_service.api.hook_routes import hooks_bp
from services.early_access_service.api.request_utils import (
    INTERNAL_ERROR_MESSAGE,
    message_response,
)
from services.early_access_service.config import Settings
from services.early_access_service.di import CoreProvider, ImplementationProvider, ServiceProvider
from services.early_access_service.metrics import get_metrics
from services.early_access_service.protocols import Clock
from services.early_access_service.startup_setup import initialize_services, shutdown_services

logger = create_service_logger("early_access_service.app")


def create_app(settings: Settings | None = None, clock: Clock | None = None) -> TikTrendApp:
    """Create and configure the Quart application.

    Args:
        settings: Optional settings override for testing
        clock: Optional time source for the rate limiter (testing)

    Returns:
        Configured Quart application
    """
    if settings is None:
        settings = Settings()

    configure_service_logging(
        settings.SERVICE_NAME,
        environment=settings.ENVIRONMENT.value,
        log_level=settings.LOG_LEVEL,
    )

    app = TikTrendApp(__name__)
    app.config.update(
        {
            "TESTING": False,
            "DEBUG": settings.LOG_LEVEL == "DEBUG",
        },
    )

    app.container = make_async_container(
        CoreProvider(settings=settings, clock=clock),
        ImplementationProvider(),
        ServiceProvider(),
    )
    app.extensions["metrics"] = get_metrics()

    # Setup dependency injection
    QuartDishka(app=app, container=app.container)

    setup_request_metrics_middleware(app, settings.SERVICE_NAME)

    app.register_blueprint(health_bp)
    app.register_blueprint(early_access_bp)
    app.register_blueprint(hooks_bp)

    @app.before_serving
    async def startup() -> None:
        await initialize_services(app, settings, app.container)
        logger.info("Early Access Service started successfully")
        logger.info("Intake endpoint: /api/early-access")
        logger.info("Health endpoint: /healthz")
        logger.info("Metrics endpoint: /metrics")

    @app.after_serving
    async def cleanup() -> None:
        await shutdown_services(app)

    @app.errorhandler(Exception)
    async def handle_exception(e: Exception) -> tuple[Response, int]:
        """Global exception handler; clients only ever see the generic message."""
        if isinstance(e, HTTPException):
            return message_response(settings, False, e.name, e.code or 500)
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return message_response(settings, False, INTERNAL_ERROR_MESSAGE, 500)

    return app


# For direct execution
if __name__ == "__main__":
    import hypercorn.asyncio
    from hypercorn.config import Config

    settings = Settings()
    app = create_app(settings)

    config = Config()
    config.bind = [f"{settings.HTTP_HOST}:{settings.HTTP_PORT}"]
    config.loglevel = settings.LOG_LEVEL.lower()

    asyncio.run(hypercorn.asyncio.serve(app, config))
