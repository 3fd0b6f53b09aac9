"""
relay/send_test_email.py

One-off check that domain-wide delegation is set up: sends a plain-text
message from the impersonated mailbox using the relay's own configuration.

Usage:
    python -m relay.send_test_email --to someone@example.com
    python -m relay.send_test_email --to someone@example.com --subject "Hello"
"""

import argparse
import asyncio
import sys

import structlog

from config import settings
from relay.services.mailer import GmailSender, build_raw_message

logger = structlog.get_logger(__name__)

DEFAULT_SUBJECT = "Test Email from Notification Relay"
DEFAULT_BODY = (
    "This is a test message sent via the Gmail API using the notification "
    "relay with impersonation."
)


async def send_test_email(sender: GmailSender, args: argparse.Namespace) -> None:
    raw = build_raw_message(
        args.to,
        args.subject,
        args.body,
        content_type="text/plain; charset=utf-8",
        sender=sender.sender,
    )
    await sender.send_raw(args.to, raw, args.subject)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Send a test email through the delegated Gmail identity"
    )
    parser.add_argument("--to", required=True, help="Recipient address")
    parser.add_argument("--subject", default=DEFAULT_SUBJECT, help="Subject line")
    parser.add_argument("--body", default=DEFAULT_BODY, help="Plain-text body")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        sender = GmailSender.from_settings(settings)
        asyncio.run(send_test_email(sender, args))
    except Exception as exc:
        logger.error("test_email_failed", recipient=args.to, error=str(exc))
        return 1
    logger.info("test_email_sent", recipient=args.to, sender=settings.user_to_impersonate)
    return 0


if __name__ == "__main__":
    sys.exit(main())
