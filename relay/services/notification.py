"""
relay/services/notification.py

Notification orchestrator.
Looks up office settings, applies the preference gate, renders the email
once and fans it out to every recipient concurrently.
"""

import asyncio
from typing import Any, Protocol

import structlog

from relay.schemas import NotificationResult, OfficeNotificationSettings, RenderedEmail
from relay.services.persistence import LookupFailed
from relay.services.preferences import is_notification_enabled
from relay.services.templates import render_email

logger = structlog.get_logger(__name__)


class OfficeStore(Protocol):
    async def get_notification_settings(
        self, office_id: int
    ) -> OfficeNotificationSettings: ...

    async def get_office_name(self, office_id: int) -> str: ...


class MailSender(Protocol):
    async def send(self, to: str, email: RenderedEmail) -> None: ...


class NotificationProcessor:
    """Processes one notification event at a time; holds no per-event state."""

    def __init__(self, store: OfficeStore, mailer: MailSender) -> None:
        self._store = store
        self._mailer = mailer

    async def process(
        self,
        office_id: int,
        notification_type: str,
        data: Any,
    ) -> NotificationResult:
        """
        Run the full pipeline for one event.

        Flow:
        1. Fetch notification settings for the office
        2. Stop with "suppressed" if the kind is disabled
        3. Resolve the office display name
        4. Render the email once
        5. Send to all recipients concurrently; any failure fails the event

        Never raises: every error becomes a failed NotificationResult.
        """
        try:
            try:
                settings = await self._store.get_notification_settings(office_id)
            except LookupFailed as exc:
                return NotificationResult(
                    success=False,
                    error=f"No notification settings found for office {office_id}: {exc}",
                )

            if not is_notification_enabled(settings, notification_type):
                logger.info(
                    "notification_suppressed",
                    office_id=office_id,
                    notification_type=notification_type,
                )
                return NotificationResult(
                    success=True, message="Notification disabled", suppressed=True
                )

            try:
                office_name = await self._store.get_office_name(office_id)
            except LookupFailed as exc:
                return NotificationResult(
                    success=False,
                    error=f"Office not found for office_id {office_id}: {exc}",
                )

            email = render_email(notification_type, data, office_name)

            # All-or-nothing: the first failure is reported, successes are not
            await asyncio.gather(
                *(self._mailer.send(to, email) for to in settings.recipient_emails)
            )

            sent = len(settings.recipient_emails)
            logger.info(
                "notification_sent",
                office_id=office_id,
                notification_type=notification_type,
                recipients=sent,
            )
            return NotificationResult(
                success=True,
                message=f"Sent to {sent} recipients",
                sent_count=sent,
            )
        except Exception as exc:
            logger.error(
                "notification_processing_failed",
                office_id=office_id,
                notification_type=notification_type,
                error=str(exc),
            )
            return NotificationResult(success=False, error=str(exc) or type(exc).__name__)
