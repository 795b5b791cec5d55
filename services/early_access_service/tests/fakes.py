"""Test doubles shared across Early Access Service tests."""

from __future__ import annotations


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


OPERATOR_EMAIL = "ops@tiktrend.test"
