"""HTTP client for the third-party TikTok hook generator API."""

from __future__ import annotations

from uuid import UUID

import httpx
from tiktrend_service_libs.error_handling import (
    raise_connection_error,
    raise_external_service_error,
    raise_invalid_response,
    raise_timeout_error,
)
from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.config import Settings
from services.early_access_service.protocols import HookGeneratorClientProtocol

logger = create_service_logger("early_access_service.hook_generator_client")

EXTERNAL_SERVICE = "hook_generator_api"


class HttpHookGeneratorClient(HookGeneratorClientProtocol):
    """Forwards topics to the hook generator and validates its answer."""

    def __init__(self, http_client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = http_client
        self.settings = settings

    async def generate_hooks(self, topic: str, correlation_id: UUID) -> list[str]:
        url = self.settings.HOOK_GENERATOR_URL
        timeout = self.settings.HOOK_GENERATOR_TIMEOUT_SECONDS

        try:
            response = await self._client.post(
                url,
                json={"Topic": topic},
                headers={"X-Correlation-ID": str(correlation_id)},
                timeout=timeout,
            )
        except httpx.TimeoutException:
            raise_timeout_error(
                service=self.settings.SERVICE_NAME,
                operation="generate_hooks",
                timeout_seconds=timeout,
                message="Hook generator did not respond in time",
                correlation_id=correlation_id,
                external_service=EXTERNAL_SERVICE,
            )
        except httpx.HTTPError as e:
            raise_connection_error(
                service=self.settings.SERVICE_NAME,
                operation="generate_hooks",
                target=url,
                message=f"Hook generator request failed: {e}",
                correlation_id=correlation_id,
            )

        if response.is_error:
            raise_external_service_error(
                service=self.settings.SERVICE_NAME,
                operation="generate_hooks",
                external_service=EXTERNAL_SERVICE,
                message=f"Hook generator returned HTTP {response.status_code}",
                correlation_id=correlation_id,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            body = None

        hooks = body.get("hooks") if isinstance(body, dict) else None
        if not isinstance(hooks, list) or not all(isinstance(hook, str) for hook in hooks):
            raise_invalid_response(
                service=self.settings.SERVICE_NAME,
                operation="generate_hooks",
                message="Hook generator response has no 'hooks' list of strings",
                correlation_id=correlation_id,
                external_service=EXTERNAL_SERVICE,
            )

        logger.info(
            "Hooks generated",
            extra={"correlation_id": str(correlation_id), "hook_count": len(hooks)},
        )
        return hooks
