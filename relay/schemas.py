"""
relay/schemas.py

Pydantic data models for the relay.
- NotificationRequest: body of POST /webhook/notification
- RealtimeNotificationPayload: payload carried by a realtime broadcast message
- OfficeNotificationSettings: row of the office_notification_settings table
- RenderedEmail / NotificationResult: transient values passed between services
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class NotificationType(str, Enum):
    """Notification kinds with a dedicated template and preference flag."""

    DATE_REQUEST = "date_request"
    PATIENT_STATUS = "patient_status"
    PRODUCTION_SUMMARY = "production_summary"

    @classmethod
    def resolve(cls, value: str) -> "NotificationType | None":
        """Map a raw kind string to a member, or None for unknown kinds."""
        try:
            return cls(value)
        except ValueError:
            return None


class NotificationRequest(BaseModel):
    """Incoming notification posted to the webhook endpoint."""

    office_id: int
    notification_type: str
    data: Any = None


class RealtimeNotificationPayload(BaseModel):
    """The `payload` section of a broadcast message on the notifications channel."""

    office_id: int
    notification_type: str = Field(min_length=1)
    data: Any = None


class OfficeNotificationSettings(BaseModel):
    """Per-office notification preferences, owned by the portal database."""

    office_id: int
    recipient_emails: list[str] = Field(default_factory=list)
    notify_on_date_request: bool = False
    notify_on_patient_status: bool = False
    notify_on_production_summary: bool = False

    @field_validator(
        "notify_on_date_request",
        "notify_on_patient_status",
        "notify_on_production_summary",
        mode="before",
    )
    @classmethod
    def _null_flag_is_off(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("recipient_emails", mode="before")
    @classmethod
    def _null_recipients_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RenderedEmail(BaseModel):
    """Subject and HTML body produced once per notification."""

    subject: str
    html: str


class NotificationResult(BaseModel):
    """Outcome of processing one notification event."""

    success: bool
    message: str | None = None
    error: str | None = None
    sent_count: int = 0
    suppressed: bool = False
