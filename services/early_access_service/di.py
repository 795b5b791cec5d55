"""Dependency injection providers for the Early Access Service.

This module provides Dishka container configuration. Everything is
APP-scoped: the service is stateless per request apart from the rate limit
store, and the HTTP and Redis connections are shared and closed on shutdown.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator

import httpx
from dishka import Provider, Scope, provide
from prometheus_client import REGISTRY, CollectorRegistry

from services.early_access_service.config import Settings
from services.early_access_service.metrics import get_metrics
from services.early_access_service.notifier import SignupNotifier
from services.early_access_service.protocols import (
    Clock,
    EmailProvider,
    HookGeneratorClientProtocol,
    RateLimitStore,
    TemplateRenderer,
)
from services.early_access_service.rate_limiter import FixedWindowRateLimiter


class CoreProvider(Provider):
    """Core infrastructure providers with proper scoping."""

    scope = Scope.APP

    def __init__(self, settings: Settings | None = None, clock: Clock | None = None):
        super().__init__()
        self._settings = settings
        self._clock = clock

    @provide
    def provide_settings(self) -> Settings:
        """Provide service settings as singleton."""
        return self._settings or Settings()

    @provide
    def provide_clock(self) -> Clock:
        return self._clock or time.time

    @provide
    def provide_metrics_registry(self) -> CollectorRegistry:
        """Provide Prometheus metrics registry."""
        return REGISTRY

    @provide
    async def provide_http_client(self, settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
        """Shared outbound HTTP client for the email and hook generator APIs."""
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(settings.HOOK_GENERATOR_TIMEOUT_SECONDS),
            headers={"User-Agent": f"{settings.SERVICE_NAME}/1.0"},
        ) as client:
            yield client


class ImplementationProvider(Provider):
    """Implementation providers for protocol contracts."""

    @provide(scope=Scope.APP)
    async def provide_rate_limit_store(
        self, settings: Settings, clock: Clock
    ) -> AsyncIterator[RateLimitStore]:
        """Provide the rate limit store selected by RATE_LIMIT_BACKEND."""
        if settings.RATE_LIMIT_BACKEND == "redis":
            from services.early_access_service.implementations.rate_limit_store_redis_impl import (
                RedisRateLimitStore,
            )

            redis_store = RedisRateLimitStore.from_url(settings.REDIS_URL)
            await redis_store.start()
            try:
                yield redis_store
            finally:
                await redis_store.stop()
        else:
            from services.early_access_service.implementations.rate_limit_store_memory_impl import (
                InMemoryRateLimitStore,
            )

            yield InMemoryRateLimitStore(clock=clock)

    @provide(scope=Scope.APP)
    def provide_template_renderer(self, settings: Settings) -> TemplateRenderer:
        """Provide template renderer implementation."""
        from services.early_access_service.implementations.template_renderer_impl import (
            JinjaTemplateRenderer,
        )

        return JinjaTemplateRenderer(settings.TEMPLATE_PATH)

    @provide(scope=Scope.APP)
    def provide_email_provider(
        self, settings: Settings, http_client: httpx.AsyncClient
    ) -> EmailProvider:
        """Provide email provider implementation based on configuration."""
        if settings.EMAIL_PROVIDER == "mock":
            from services.early_access_service.implementations.provider_mock_impl import (
                MockEmailProvider,
            )

            return MockEmailProvider(settings)

        elif settings.EMAIL_PROVIDER == "smtp":
            from services.early_access_service.implementations.provider_smtp_impl import (
                SMTPEmailProvider,
            )

            return SMTPEmailProvider(settings)

        from services.early_access_service.implementations.provider_resend_impl import (
            ResendEmailProvider,
        )

        return ResendEmailProvider(settings, http_client)

    @provide(scope=Scope.APP)
    def provide_hook_generator_client(
        self, settings: Settings, http_client: httpx.AsyncClient
    ) -> HookGeneratorClientProtocol:
        from services.early_access_service.implementations.hook_generator_client_impl import (
            HttpHookGeneratorClient,
        )

        return HttpHookGeneratorClient(http_client, settings)


class ServiceProvider(Provider):
    """Service-specific providers for business logic components."""

    @provide(scope=Scope.APP)
    def provide_rate_limiter(self, store: RateLimitStore, clock: Clock) -> FixedWindowRateLimiter:
        return FixedWindowRateLimiter(store, clock=clock)

    @provide(scope=Scope.APP)
    def provide_signup_notifier(
        self,
        template_renderer: TemplateRenderer,
        email_provider: EmailProvider,
        settings: Settings,
    ) -> SignupNotifier:
        """Provide the two-step signup notification workflow."""
        return SignupNotifier(template_renderer, email_provider, settings, metrics=get_metrics())
