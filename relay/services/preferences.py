"""
relay/services/preferences.py

Preference gate: decides whether an office wants a given notification kind.
"""

from relay.schemas import NotificationType, OfficeNotificationSettings

_FLAG_BY_TYPE: dict[NotificationType, str] = {
    NotificationType.DATE_REQUEST: "notify_on_date_request",
    NotificationType.PATIENT_STATUS: "notify_on_patient_status",
    NotificationType.PRODUCTION_SUMMARY: "notify_on_production_summary",
}


def is_notification_enabled(
    settings: OfficeNotificationSettings,
    notification_type: str,
) -> bool:
    """Return the office's flag for this kind; unknown kinds are always disabled."""
    kind = NotificationType.resolve(notification_type)
    if kind is None:
        return False
    return bool(getattr(settings, _FLAG_BY_TYPE[kind]))
