"""SMTP email provider.

Alternative to Resend for operators who relay through their own mailbox.
Uses aiosmtplib with multipart (plain text + HTML) messages.
"""

from __future__ import annotations

import re
import uuid
from email.message import EmailMessage

import aiosmtplib
from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.config import Settings
from services.early_access_service.protocols import EmailProvider, EmailSendResult

logger = create_service_logger("early_access_service.provider_smtp")


class SMTPEmailProvider(EmailProvider):
    """SMTP email provider using aiosmtplib."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def send_email(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
        from_email: str | None = None,
        from_name: str | None = None,
    ) -> EmailSendResult:
        """Send email via SMTP with multipart support."""
        from_email = from_email or self.settings.FROM_EMAIL
        from_name = from_name or self.settings.FROM_NAME

        msg = EmailMessage()
        msg["From"] = f"{from_name} <{from_email}>"
        msg["To"] = to
        msg["Subject"] = subject

        if text_content is None:
            text_content = self._html_to_text(html_content)

        msg.set_content(text_content, charset="utf-8")
        msg.add_alternative(html_content, subtype="html", charset="utf-8")

        if self.settings.SMTP_USERNAME is None or self.settings.SMTP_PASSWORD is None:
            raise ValueError("SMTP username and password are required for authentication")

        try:
            async with aiosmtplib.SMTP(
                hostname=self.settings.SMTP_HOST,
                port=self.settings.SMTP_PORT,
                start_tls=self.settings.SMTP_USE_TLS,
                timeout=self.settings.EMAIL_SEND_TIMEOUT_SECONDS,
            ) as smtp:
                await smtp.login(
                    self.settings.SMTP_USERNAME,
                    self.settings.SMTP_PASSWORD.get_secret_value(),
                )
                refused, server_response = await smtp.send_message(msg)

            if refused:
                error_details = "; ".join(f"{addr}: {error}" for addr, error in refused.items())
                logger.error(f"SMTP recipients refused: {error_details}")
                return EmailSendResult(
                    success=False,
                    provider_message_id=None,
                    error_message=f"Recipients refused: {error_details}",
                )

            provider_message_id = f"smtp_{uuid.uuid4().hex}"
            logger.info(
                "Email sent successfully via SMTP",
                extra={
                    "subject": subject,
                    "provider_message_id": provider_message_id,
                    "smtp_host": self.settings.SMTP_HOST,
                    "server_response": server_response,
                },
            )
            return EmailSendResult(
                success=True,
                provider_message_id=provider_message_id,
                error_message=None,
            )

        except aiosmtplib.SMTPTimeoutError as e:
            logger.error(f"SMTP timeout: {e}")
            raise TimeoutError(f"SMTP server did not respond: {e}") from e

        except aiosmtplib.SMTPAuthenticationError as e:
            error_msg = f"SMTP authentication failed: {e}"
            logger.error(error_msg, exc_info=True)
            return EmailSendResult(success=False, provider_message_id=None, error_message=error_msg)

        except aiosmtplib.SMTPConnectError as e:
            error_msg = f"SMTP connection failed: {e}"
            logger.error(error_msg, exc_info=True)
            return EmailSendResult(success=False, provider_message_id=None, error_message=error_msg)

        except aiosmtplib.SMTPException as e:
            error_msg = f"SMTP error: {e}"
            logger.error(error_msg, exc_info=True)
            return EmailSendResult(success=False, provider_message_id=None, error_message=error_msg)

    def get_provider_name(self) -> str:
        return "smtp"

    def _html_to_text(self, html: str) -> str:
        """Strip tags and common entities for the plain text part."""
        clean_text = re.sub(r"<[^>]+>", "", html)
        clean_text = clean_text.replace("&nbsp;", " ")
        clean_text = clean_text.replace("&lt;", "<")
        clean_text = clean_text.replace("&gt;", ">")
        clean_text = clean_text.replace("&#34;", '"')
        clean_text = clean_text.replace("&#39;", "'")
        clean_text = clean_text.replace("&amp;", "&")
        return re.sub(r"\s+", " ", clean_text.strip())
