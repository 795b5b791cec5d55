"""In-process rate limit store.

Counters live in a dict owned by the process, so a restart clears them and
several instances do not share them. Use the Redis store for multi-instance
deployments.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.protocols import RateLimitRecord, RateLimitStore

logger = create_service_logger("early_access_service.rate_limit_store.memory")


class InMemoryRateLimitStore(RateLimitStore):
    """Dict-backed RateLimitStore.

    None of the operations suspend, so a single asyncio.Lock shared by all
    keys serialises check-then-increment without measurable contention.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        sweep_threshold: int = 10_000,
    ) -> None:
        """
        Args:
            clock: Time source used to decide which records have expired
            sweep_threshold: Number of stored keys above which expired records
                are dropped on the next write
        """
        self._records: dict[str, RateLimitRecord] = {}
        self._lock = asyncio.Lock()
        self._clock = clock
        self._sweep_threshold = sweep_threshold

    async def get(self, key: str) -> RateLimitRecord | None:
        return self._records.get(key)

    async def set(self, key: str, record: RateLimitRecord) -> None:
        self._records[key] = record
        if len(self._records) > self._sweep_threshold:
            self._sweep_expired()

    async def increment(self, key: str) -> int:
        record = self._records.get(key)
        if record is None:
            raise KeyError(f"No rate limit record for key '{key}'")
        updated = record._replace(count=record.count + 1)
        self._records[key] = updated
        return updated.count

    def lock(self, key: str) -> asyncio.Lock:
        return self._lock

    def __len__(self) -> int:
        return len(self._records)

    def _sweep_expired(self) -> None:
        now = self._clock()
        expired = [key for key, record in self._records.items() if now > record.reset_at]
        for key in expired:
            del self._records[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired rate limit records")
