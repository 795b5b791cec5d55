"""Mock email provider for development and testing.

Records every message instead of sending it. Failures are simulated at
MOCK_PROVIDER_FAILURE_RATE (0.0 by default, so tests stay deterministic).
Only the latest MOCK_PROVIDER_HISTORY_SIZE messages are kept.
"""

from __future__ import annotations

import random
from collections import deque
from datetime import UTC, datetime
from typing import Any

from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.config import Settings
from services.early_access_service.protocols import EmailProvider, EmailSendResult

logger = create_service_logger("early_access_service.provider_mock")


class MockEmailProvider(EmailProvider):
    """Mock email provider that simulates sending emails."""

    def __init__(self, settings: Settings, rng: random.Random | None = None):
        self.settings = settings
        self._rng = rng or random.Random()
        self._sent_emails: deque[dict[str, Any]] = deque(
            maxlen=settings.MOCK_PROVIDER_HISTORY_SIZE
        )
        self._send_count = 0

    async def send_email(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
        from_email: str | None = None,
        from_name: str | None = None,
    ) -> EmailSendResult:
        """Record the message and report success unless a failure is simulated."""
        from_email = from_email or self.settings.FROM_EMAIL
        from_name = from_name or self.settings.FROM_NAME

        self._send_count += 1
        mock_message_id = f"mock_{self._send_count:06d}"

        self._sent_emails.append(
            {
                "to": to,
                "from_email": from_email,
                "from_name": from_name,
                "subject": subject,
                "html_content": html_content,
                "text_content": text_content,
                "sent_at": datetime.now(UTC),
                "provider_message_id": mock_message_id,
            }
        )

        if self._rng.random() < self.settings.MOCK_PROVIDER_FAILURE_RATE:
            error_message = "Mock provider: Simulated delivery failure"
            logger.warning(f"Mock email send failed: {error_message}")
            return EmailSendResult(
                success=False,
                provider_message_id=None,
                error_message=error_message,
            )

        logger.info(
            "Mock email sent successfully",
            extra={"subject": subject, "provider_message_id": mock_message_id},
        )
        return EmailSendResult(
            success=True,
            provider_message_id=mock_message_id,
            error_message=None,
        )

    def get_provider_name(self) -> str:
        return "mock"

    def get_sent_emails(self) -> list[dict[str, Any]]:
        """Get list of sent emails for testing/inspection."""
        return list(self._sent_emails)

    def clear_sent_emails(self) -> None:
        self._sent_emails.clear()
