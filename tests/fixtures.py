"""
tests/fixtures.py

Shared test data and helper functions for constructing test payloads.
All tests must use these fixtures instead of hardcoding test values.
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

from relay.schemas import NotificationResult, OfficeNotificationSettings
from relay.services.notification import NotificationProcessor
from relay.services.persistence import LookupFailed

TEST_OFFICE_ID: int = 42
TEST_OFFICE_NAME: str = "Lakeside Dental"
TEST_RECIPIENTS: list[str] = ["a@x.com", "b@x.com"]


def build_settings(
    office_id: int = TEST_OFFICE_ID,
    recipient_emails: list[str] | None = None,
    date_request: bool = False,
    patient_status: bool = False,
    production_summary: bool = False,
) -> OfficeNotificationSettings:
    """Build OfficeNotificationSettings with every kind disabled by default."""
    return OfficeNotificationSettings(
        office_id=office_id,
        recipient_emails=(
            list(TEST_RECIPIENTS) if recipient_emails is None else recipient_emails
        ),
        notify_on_date_request=date_request,
        notify_on_patient_status=patient_status,
        notify_on_production_summary=production_summary,
    )


def build_store(
    settings: OfficeNotificationSettings | None = None,
    office_name: str | None = TEST_OFFICE_NAME,
) -> MagicMock:
    """
    Build a fake OfficeStore.

    Passing settings=None or office_name=None makes that lookup fail.
    """
    store = MagicMock()
    if settings is None:
        store.get_notification_settings = AsyncMock(
            side_effect=LookupFailed("no rows returned")
        )
    else:
        store.get_notification_settings = AsyncMock(return_value=settings)
    if office_name is None:
        store.get_office_name = AsyncMock(side_effect=LookupFailed("no rows returned"))
    else:
        store.get_office_name = AsyncMock(return_value=office_name)
    return store


def build_mailer(side_effect: Any = None) -> MagicMock:
    """Build a fake MailSender whose send() records every call."""
    mailer = MagicMock()
    mailer.send = AsyncMock(side_effect=side_effect)
    return mailer


def build_processor(
    store: MagicMock | None = None,
    mailer: MagicMock | None = None,
) -> NotificationProcessor:
    return NotificationProcessor(
        store=store or build_store(build_settings(patient_status=True)),
        mailer=mailer or build_mailer(),
    )


def build_fake_processor(result: NotificationResult) -> MagicMock:
    """Build a processor stand-in whose process() returns a fixed result."""
    processor = MagicMock()
    processor.process = AsyncMock(return_value=result)
    return processor


def build_broadcast(
    event: str = "patient_status",
    office_id: Any = TEST_OFFICE_ID,
    notification_type: Any = "patient_status",
    data: dict | None = None,
) -> dict:
    """Build a realtime broadcast message as delivered to channel callbacks."""
    payload: dict[str, Any] = {"data": data if data is not None else {"date": "2024-01-01"}}
    if office_id is not None:
        payload["office_id"] = office_id
    if notification_type is not None:
        payload["notification_type"] = notification_type
    return {"event": event, "type": "broadcast", "payload": payload}
