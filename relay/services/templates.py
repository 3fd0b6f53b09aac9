"""
relay/services/templates.py

Email content rendering, one fixed template per notification kind.
Rendering never fails: missing payload fields become empty text or a
placeholder, and unknown kinds fall back to a generic template.
"""

import json
from collections.abc import Callable
from html import escape
from typing import Any

import structlog

from relay.constants import BRAND_NAME, PROVIDER_PLACEHOLDER
from relay.schemas import NotificationType, RenderedEmail

logger = structlog.get_logger(__name__)

BASE_STYLE = """
<style>
  body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
  .header { background-color: #1e40af; color: white; padding: 20px; text-align: center; }
  .content { padding: 20px; }
  .footer { background-color: #f3f4f6; padding: 15px; text-align: center; font-size: 12px; color: #666; }
  .status-approved { color: #059669; font-weight: bold; }
  .status-denied { color: #dc2626; font-weight: bold; }
  .highlight { background-color: #fef3c7; padding: 10px; border-left: 4px solid #f59e0b; margin: 15px 0; }
</style>
"""

FOOTER = f"""
<div class="footer">
  <p>This is an automated notification from {BRAND_NAME}</p>
</div>
"""


def _text(data: dict[str, Any], key: str, default: str = "") -> str:
    """HTML-escaped payload value, or `default` when absent or empty."""
    value = data.get(key)
    if value is None or value == "":
        return escape(default)
    return escape(str(value))


def _format_amount(value: Any) -> str:
    # Thousands separators, at most 3 decimals: 1234.5678 -> "1,234.568"
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:,.3f}".rstrip("0").rstrip(".")
    return escape(str(value))


def _page(title: str, content: str) -> str:
    return (
        f"{BASE_STYLE}"
        f'<div class="header">\n  <h1>{BRAND_NAME} - {title}</h1>\n</div>\n'
        f'<div class="content">\n{content}</div>\n'
        f"{FOOTER}"
    )


def _render_date_request(data: dict[str, Any], office_name: str) -> RenderedEmail:
    office = escape(office_name)
    raw_status = data.get("status")
    decision = "Approved" if raw_status == "approved" else "Denied"
    status = "" if raw_status is None else str(raw_status)

    reason = ""
    if data.get("denial_reason"):
        reason = (
            '  <div class="highlight"><strong>Reason:</strong> '
            f"{_text(data, 'denial_reason')}</div>\n"
        )

    content = (
        f"  <h2>Date Request {decision}</h2>\n"
        f"  <p><strong>Office:</strong> {office}</p>\n"
        f"  <p><strong>Requested Date:</strong> {_text(data, 'date')}</p>\n"
        f'  <p><strong>Status:</strong> <span class="status-{escape(status)}">'
        f"{escape(status.upper())}</span></p>\n"
        f"{reason}"
        "  <p>Please log into your portal for more details.</p>\n"
    )
    return RenderedEmail(
        subject=f"Date Request {decision} - {office_name}",
        html=_page("Date Request Update", content),
    )


def _render_patient_status(data: dict[str, Any], office_name: str) -> RenderedEmail:
    office = escape(office_name)
    content = (
        "  <h2>Patient Status Changed</h2>\n"
        f"  <p><strong>Office:</strong> {office}</p>\n"
        f"  <p><strong>Date:</strong> {_text(data, 'date')}</p>\n"
        "  <p><strong>Provider ID:</strong> "
        f"{_text(data, 'provider_id', PROVIDER_PLACEHOLDER)}</p>\n"
        "  <p>Please review the patient details in your portal.</p>\n"
    )
    return RenderedEmail(
        subject=f"Patient Status Update - {office_name}",
        html=_page("Patient Status Update", content),
    )


def _render_production_summary(data: dict[str, Any], office_name: str) -> RenderedEmail:
    office = escape(office_name)
    content = (
        "  <h2>Payment Update</h2>\n"
        f"  <p><strong>Office:</strong> {office}</p>\n"
        f"  <p><strong>Amount:</strong> ${_format_amount(data.get('amount'))}</p>\n"
        f"  <p><strong>Due Date:</strong> {_text(data, 'due_date')}</p>\n"
        f"  <p><strong>Status:</strong> {_text(data, 'status')}</p>\n"
        '  <div class="highlight">\n'
        "    <p>Your production summary has been updated. Please log into your "
        "portal to view the complete details.</p>\n"
        "  </div>\n"
    )
    return RenderedEmail(
        subject=f"Production Summary Updated - {office_name}",
        html=_page("Production Summary", content),
    )


def _render_generic(
    notification_type: str, data: Any, office_name: str
) -> RenderedEmail:
    office = escape(office_name)
    logger.warning("unknown_notification_type", notification_type=notification_type)
    payload = escape(json.dumps(data, default=str))
    return RenderedEmail(
        subject=f"Notification Update - {office_name}",
        html=(
            f"{BASE_STYLE}<div><h2>Generic Notification</h2>"
            f"<p>Office: {office}</p>"
            f"<p>Type: {escape(notification_type)}</p>"
            f"<p>Data: {payload}</p></div>"
        ),
    )


_RENDERERS: dict[NotificationType, Callable[[dict[str, Any], str], RenderedEmail]] = {
    NotificationType.DATE_REQUEST: _render_date_request,
    NotificationType.PATIENT_STATUS: _render_patient_status,
    NotificationType.PRODUCTION_SUMMARY: _render_production_summary,
}


def render_email(
    notification_type: str,
    data: Any,
    office_name: str,
) -> RenderedEmail:
    """
    Build the subject and HTML body for one notification.

    The office name appears verbatim in the subject and escaped in the body.
    """
    kind = NotificationType.resolve(notification_type)
    if kind is None:
        return _render_generic(notification_type, data, office_name)
    # Non-object payloads carry no known fields
    payload = data if isinstance(data, dict) else {}
    return _RENDERERS[kind](payload, office_name)
