"""Signup notification workflow.

Renders and sends the two notification emails for an accepted signup as a
two-step sequence: the operator alert first, then the submitter
confirmation. A failed step stops the sequence. When the operator was
notified but the submitter confirmation failed, the partial outcome is
logged and counted, while the caller only sees DELIVERY_FAILURE.
"""

from __future__ import annotations

import asyncio
import time
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from tiktrend_service_libs.error_handling import raise_delivery_failure, raise_timeout_error
from tiktrend_service_libs.logging_utils import create_service_logger

from services.early_access_service.api.schemas import SignupRequest
from services.early_access_service.config import Settings
from services.early_access_service.protocols import (
    EmailProvider,
    EmailSendResult,
    TemplateRenderer,
)

logger = create_service_logger("early_access_service.notifier")

OPERATOR_TEMPLATE = "operator_notification"
SUBMITTER_TEMPLATE = "submitter_confirmation"

OPERATOR_ROLE = "operator"
SUBMITTER_ROLE = "submitter"

SUBMITTED_AT_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class SignupNotifier:
    """Sends the operator alert and the submitter confirmation for a signup."""

    def __init__(
        self,
        template_renderer: TemplateRenderer,
        email_provider: EmailProvider,
        settings: Settings,
        metrics: dict[str, Any] | None = None,
    ):
        self.template_renderer = template_renderer
        self.email_provider = email_provider
        self.settings = settings
        self.metrics = metrics or {}

    async def notify(
        self,
        signup: SignupRequest,
        correlation_id: UUID,
        submitted_at: datetime | None = None,
    ) -> None:
        """Send both emails, operator first.

        Args:
            signup: Validated and trimmed signup
            correlation_id: Request correlation ID for logs and errors
            submitted_at: Submission time, defaults to now (UTC)

        Raises:
            TikTrendError: DELIVERY_FAILURE if a provider rejected a message,
                TIMEOUT if a provider did not answer in time
        """
        submitted_at = submitted_at or datetime.now(UTC)
        variables = {
            "name": signup.name,
            "email": signup.email,
            "niche": signup.niche,
            "beta_access": signup.beta_access,
            "submitted_at": submitted_at.strftime(SUBMITTED_AT_FORMAT),
        }

        await self._dispatch(
            recipient_role=OPERATOR_ROLE,
            to=self.settings.OPERATOR_EMAIL,
            template_id=OPERATOR_TEMPLATE,
            variables=variables,
            correlation_id=correlation_id,
        )

        try:
            await self._dispatch(
                recipient_role=SUBMITTER_ROLE,
                to=signup.email,
                template_id=SUBMITTER_TEMPLATE,
                variables=variables,
                correlation_id=correlation_id,
            )
        except Exception:
            logger.error(
                "Signup partially delivered: operator notified, submitter confirmation failed",
                extra={"correlation_id": str(correlation_id)},
            )
            self._count_partial_delivery()
            raise

        logger.info(
            "Signup notifications sent",
            extra={
                "correlation_id": str(correlation_id),
                "provider": self.email_provider.get_provider_name(),
            },
        )

    async def _dispatch(
        self,
        recipient_role: str,
        to: str,
        template_id: str,
        variables: dict[str, Any],
        correlation_id: UUID,
    ) -> EmailSendResult:
        rendered = await self.template_renderer.render(
            template_id=template_id,
            variables=variables,
        )

        provider = self.email_provider.get_provider_name()
        timeout = self.settings.EMAIL_SEND_TIMEOUT_SECONDS
        logger.debug(
            f"Sending {recipient_role} email via {provider}",
            extra={"correlation_id": str(correlation_id), "template_id": template_id},
        )

        start = time.monotonic()
        try:
            result = await asyncio.wait_for(
                self.email_provider.send_email(
                    to=to,
                    subject=rendered.subject,
                    html_content=rendered.html_content,
                    text_content=rendered.text_content,
                    from_email=self.settings.FROM_EMAIL,
                    from_name=self.settings.FROM_NAME,
                ),
                timeout=timeout,
            )
        except TimeoutError:
            self._observe_provider(provider, start)
            self._count_dispatch(recipient_role, "timeout")
            raise_timeout_error(
                service=self.settings.SERVICE_NAME,
                operation="notify",
                timeout_seconds=timeout,
                message=f"Email provider timed out sending {recipient_role} email",
                correlation_id=correlation_id,
                recipient_role=recipient_role,
                provider=provider,
            )

        self._observe_provider(provider, start)

        if not result.success:
            self._count_dispatch(recipient_role, "error")
            raise_delivery_failure(
                service=self.settings.SERVICE_NAME,
                operation="notify",
                recipient_role=recipient_role,
                message=result.error_message or f"Failed to send {recipient_role} email",
                correlation_id=correlation_id,
                provider=provider,
            )

        self._count_dispatch(recipient_role, "success")
        logger.info(
            f"{recipient_role.capitalize()} email sent",
            extra={
                "correlation_id": str(correlation_id),
                "provider_message_id": result.provider_message_id,
            },
        )
        return result

    def _observe_provider(self, provider: str, start: float) -> None:
        histogram = self.metrics.get("provider_response_time_seconds")
        if histogram:
            histogram.labels(provider=provider).observe(time.monotonic() - start)

    def _count_dispatch(self, recipient_role: str, status: str) -> None:
        counter = self.metrics.get("emails_dispatched_total")
        if counter:
            counter.labels(recipient_role=recipient_role, status=status).inc()

    def _count_partial_delivery(self) -> None:
        counter = self.metrics.get("partial_deliveries_total")
        if counter:
            counter.inc()
