"""Protocol definitions for Early Access Service dependency injection.

This module defines behavioral contracts used by the DI container to provide
implementations following the Repository and Strategy patterns.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, NamedTuple, Protocol
from uuid import UUID


class EmailSendResult(NamedTuple):
    """Result of sending an email through a provider."""

    success: bool
    provider_message_id: str | None = None
    error_message: str | None = None


class RenderedTemplate(NamedTuple):
    """Result of rendering an email template."""

    subject: str
    html_content: str
    text_content: str | None = None


class RateLimitRecord(NamedTuple):
    """Fixed-window counter state for one client identifier."""

    count: int
    reset_at: float  # epoch seconds


class Clock(Protocol):
    """Time source returning epoch seconds (time.time in production)."""

    def __call__(self) -> float: ...


class EmailProvider(Protocol):
    """Protocol for transactional email providers (Resend, SMTP, mock)."""

    async def send_email(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
        from_email: str | None = None,
        from_name: str | None = None,
    ) -> EmailSendResult:
        """Send an email through the provider.

        Args:
            to: Recipient email address
            subject: Email subject line
            html_content: HTML email content
            text_content: Plain text email content (optional)
            from_email: Sender email address
            from_name: Sender display name

        Returns:
            EmailSendResult with success status and provider details

        Raises:
            TimeoutError: If the provider did not answer in time
        """
        ...

    def get_provider_name(self) -> str:
        """Get the provider name for tracking purposes."""
        ...


class TemplateRenderer(Protocol):
    """Protocol for email template rendering engines."""

    async def render(
        self,
        template_id: str,
        variables: dict[str, Any],
    ) -> RenderedTemplate:
        """Render an email template with variables.

        Every string variable is HTML-escaped before interpolation.

        Args:
            template_id: Identifier for the template to render
            variables: Variables to substitute in the template

        Returns:
            RenderedTemplate with subject and content
        """
        ...

    async def template_exists(self, template_id: str) -> bool:
        """Check if a template exists."""
        ...


class RateLimitStore(Protocol):
    """Storage for fixed-window rate limit records.

    ``lock`` must be held around any read-modify-write of a key so that two
    concurrent requests for the same client cannot both be admitted past the
    limit.
    """

    async def get(self, key: str) -> RateLimitRecord | None:
        """Return the record for ``key`` or None if there is none."""
        ...

    async def set(self, key: str, record: RateLimitRecord) -> None:
        """Create or replace the record for ``key``."""
        ...

    async def increment(self, key: str) -> int:
        """Increment the count for an existing record and return the new count."""
        ...

    def lock(self, key: str) -> AbstractAsyncContextManager[Any]:
        """Exclusive lock for ``key``."""
        ...


class HookGeneratorClientProtocol(Protocol):
    """Protocol for the third-party TikTok hook generator API."""

    async def generate_hooks(self, topic: str, correlation_id: UUID) -> list[str]:
        """Generate hooks for a topic.

        Raises:
            TikTrendError: EXTERNAL_SERVICE_ERROR, TIMEOUT, CONNECTION_ERROR or
                INVALID_RESPONSE when the upstream API misbehaves
        """
        ...
