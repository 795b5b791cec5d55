"""Shared fixtures for Early Access Service tests."""

from __future__ import annotations

from typing import Any

import pytest

from services.early_access_service.config import Settings
from services.early_access_service.tests.fakes import OPERATOR_EMAIL, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    """Mock-provider settings with the default limits."""
    return Settings(
        EMAIL_PROVIDER="mock",
        OPERATOR_EMAIL=OPERATOR_EMAIL,
        RATE_LIMIT_BACKEND="memory",
        RATE_LIMIT_MAX_REQUESTS=3,
        RATE_LIMIT_WINDOW_SECONDS=60,
        TRUST_PROXY_HEADER=True,
        EMAIL_SEND_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def valid_signup_payload() -> dict[str, Any]:
    return {"name": "Ava", "email": "ava@example.com", "niche": "fitness", "betaAccess": True}
