"""
relay/services/mailer.py

Gmail dispatch under domain-wide delegation.
Messages are sent as the impersonated mailbox configured at startup; the
blocking Google API client runs in a worker thread per send.
"""

import asyncio
import base64

import google.auth
import google_auth_httplib2
import httplib2
import structlog
from google.auth.credentials import Credentials
from google.oauth2 import service_account
from googleapiclient.discovery import build

from config import Settings
from relay.constants import GMAIL_SEND_SCOPE, GMAIL_USER_ID
from relay.schemas import RenderedEmail

logger = structlog.get_logger(__name__)


def _header_value(value: str) -> str:
    # Header values must stay on one line
    return " ".join(value.splitlines())


def build_raw_message(
    to: str,
    subject: str,
    body: str,
    content_type: str = "text/html; charset=utf-8",
    sender: str | None = None,
) -> str:
    """
    Assemble an RFC 2822 message and return it base64url-encoded.

    The encoding keeps `=` padding and only swaps `+`/`/` for `-`/`_`,
    which is the form the Gmail `raw` field accepts.
    """
    lines = [f"To: {_header_value(to)}"]
    if sender:
        lines.append(f"From: {_header_value(sender)}")
    lines += [
        f"Subject: {_header_value(subject)}",
        f"Content-Type: {content_type}",
        "",
        body,
    ]
    message = "\n".join(lines)
    return base64.urlsafe_b64encode(message.encode("utf-8")).decode("ascii")


def load_delegated_credentials(settings: Settings) -> Credentials:
    """
    Load credentials that send mail as `settings.user_to_impersonate`.

    Uses the service-account key file when configured, otherwise
    application default credentials.
    """
    if settings.google_application_credentials:
        logger.info(
            "google_credentials_file_configured",
            path=settings.google_application_credentials,
        )
        return service_account.Credentials.from_service_account_file(
            settings.google_application_credentials,
            scopes=[GMAIL_SEND_SCOPE],
            subject=settings.user_to_impersonate,
        )

    logger.info("google_credentials_file_not_set", fallback="application_default")
    credentials, _ = google.auth.default(scopes=[GMAIL_SEND_SCOPE])
    if hasattr(credentials, "with_subject"):
        credentials = credentials.with_subject(settings.user_to_impersonate)
    return credentials


class GmailSender:
    """Sends rendered notifications through the Gmail API."""

    def __init__(self, credentials: Credentials, sender: str) -> None:
        self._credentials = credentials
        self.sender = sender
        self._service = build(
            "gmail", "v1", credentials=credentials, cache_discovery=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GmailSender":
        return cls(load_delegated_credentials(settings), settings.user_to_impersonate)

    def _send_raw(self, raw: str) -> dict:
        # httplib2 is not thread-safe, so each send gets its own transport
        http = google_auth_httplib2.AuthorizedHttp(
            self._credentials, http=httplib2.Http()
        )
        request = self._service.users().messages().send(
            userId=GMAIL_USER_ID, body={"raw": raw}
        )
        return request.execute(http=http)

    async def send_raw(self, to: str, raw: str, subject: str) -> None:
        """Submit an already-encoded message; errors are logged and re-raised."""
        logger.info("email_send_attempt", recipient=to, subject=subject)
        try:
            await asyncio.to_thread(self._send_raw, raw)
        except Exception as exc:
            logger.error("email_send_failed", recipient=to, error=str(exc))
            raise
        logger.info("email_sent", recipient=to)

    async def send(self, to: str, email: RenderedEmail) -> None:
        """Send one rendered notification to one recipient."""
        raw = build_raw_message(to, email.subject, email.html)
        await self.send_raw(to, raw, email.subject)
