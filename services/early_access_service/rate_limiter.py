"""Fixed-window rate limiting for the public endpoints.

Each client identifier gets ``limit`` accepted requests per window. The
window starts with the client's first request and is reset in bulk once it
has elapsed, so bursts straddling a window edge can reach twice the nominal
rate.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import NamedTuple

from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.protocols import RateLimitRecord, RateLimitStore

logger = create_service_logger("early_access_service.rate_limiter")


class RateLimitDecision(NamedTuple):
    """Outcome of a single rate limit check."""

    allowed: bool
    count: int
    limit: int
    reset_at: float


class FixedWindowRateLimiter:
    """Fixed-window counter over an injectable RateLimitStore."""

    def __init__(self, store: RateLimitStore, clock: Callable[[], float] = time.time) -> None:
        self.store = store
        self.clock = clock

    async def hit(self, key: str, limit: int, window_seconds: int) -> RateLimitDecision:
        """Count one request for ``key`` and decide whether it is admitted.

        Args:
            key: The rate limit key (see create_rate_limit_key)
            limit: Maximum number of accepted requests per window
            window_seconds: Window length in seconds

        Returns:
            RateLimitDecision; a rejected request does not change the count
        """
        async with self.store.lock(key):
            now = self.clock()
            record = await self.store.get(key)

            if record is None or now > record.reset_at:
                record = RateLimitRecord(count=1, reset_at=now + window_seconds)
                await self.store.set(key, record)
                return RateLimitDecision(True, record.count, limit, record.reset_at)

            if record.count < limit:
                count = await self.store.increment(key)
                return RateLimitDecision(True, count, limit, record.reset_at)

        logger.warning(
            "Rate limit exceeded",
            extra={"key": key, "current_count": record.count, "limit": limit},
        )
        return RateLimitDecision(False, record.count, limit, record.reset_at)


def create_rate_limit_key(action: str, identifier: str, namespace: str = "early_access") -> str:
    """
    Create a standardized rate limit key.

    Args:
        action: The action being rate limited (e.g., "signup", "hooks")
        identifier: The client identifier (e.g., IP address)
        namespace: The namespace for the key (default: "early_access")

    Returns:
        Formatted rate limit key
    """
    # Replace special characters to avoid Redis key issues
    safe_identifier = identifier.replace(":", "_").replace(" ", "")
    return f"{namespace}:rate_limit:{action}:{safe_identifier}"
