"""Resend email provider for production email delivery.

Sends messages through the Resend HTTP API using a shared httpx.AsyncClient.
HTTP error statuses and transport failures are reported as unsuccessful
EmailSendResults; a transport timeout is re-raised as TimeoutError so the
caller can tell it apart from a rejection.
"""

from __future__ import annotations

import httpx
from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.config import Settings
from services.early_access_service.protocols import EmailProvider, EmailSendResult

logger = create_service_logger("early_access_service.provider_resend")


class ResendEmailProvider(EmailProvider):
    """Email provider backed by the Resend REST API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        if settings.RESEND_API_KEY is None:
            raise ValueError("Resend provider requires RESEND_API_KEY")
        self.settings = settings
        self.http_client = http_client
        self._api_key = settings.RESEND_API_KEY.get_secret_value()

    async def send_email(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
        from_email: str | None = None,
        from_name: str | None = None,
    ) -> EmailSendResult:
        """Send one message through Resend."""
        from_email = from_email or self.settings.FROM_EMAIL
        from_name = from_name or self.settings.FROM_NAME

        payload: dict[str, object] = {
            "from": f"{from_name} <{from_email}>",
            "to": [to],
            "subject": subject,
            "html": html_content,
        }
        if text_content:
            payload["text"] = text_content

        try:
            response = await self.http_client.post(
                self.settings.RESEND_API_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self.settings.EMAIL_SEND_TIMEOUT_SECONDS,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Resend request timed out: {e}")
            raise TimeoutError(
                f"Resend did not respond within {self.settings.EMAIL_SEND_TIMEOUT_SECONDS}s"
            ) from e
        except httpx.HTTPError as e:
            error_msg = f"Resend transport error: {e}"
            logger.error(error_msg, exc_info=True)
            return EmailSendResult(success=False, provider_message_id=None, error_message=error_msg)

        if response.is_error:
            error_msg = f"Resend rejected message with HTTP {response.status_code}: {response.text}"
            logger.error(error_msg, extra={"subject": subject})
            return EmailSendResult(success=False, provider_message_id=None, error_message=error_msg)

        provider_message_id = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            provider_message_id = body.get("id")

        logger.info(
            "Email sent successfully via Resend",
            extra={"subject": subject, "provider_message_id": provider_message_id},
        )
        return EmailSendResult(
            success=True,
            provider_message_id=provider_message_id,
            error_message=None,
        )

    def get_provider_name(self) -> str:
        return "resend"
