"""
tests/test_notification.py

Unit tests for relay/services/notification.py.
The office store and mail sender are replaced with AsyncMock fakes.
"""

import pytest

from relay.schemas import OfficeNotificationSettings
from tests.fixtures import (
    TEST_OFFICE_ID,
    TEST_OFFICE_NAME,
    build_mailer,
    build_processor,
    build_settings,
    build_store,
)


@pytest.mark.asyncio
async def test_sends_to_every_recipient() -> None:
    """Office 42 with two recipients gets two identical patient status emails."""
    mailer = build_mailer()
    store = build_store(build_settings(patient_status=True))
    processor = build_processor(store, mailer)

    result = await processor.process(
        TEST_OFFICE_ID, "patient_status", {"date": "2024-01-01"}
    )

    assert result.success is True
    assert result.sent_count == 2
    assert mailer.send.await_count == 2
    recipients = sorted(call.args[0] for call in mailer.send.await_args_list)
    assert recipients == ["a@x.com", "b@x.com"]
    emails = [call.args[1] for call in mailer.send.await_args_list]
    assert len({(e.subject, e.html) for e in emails}) == 1
    email = mailer.send.await_args_list[0].args[1]
    assert email.subject == f"Patient Status Update - {TEST_OFFICE_NAME}"
    assert "Provider ID:</strong> Not assigned" in email.html


@pytest.mark.asyncio
async def test_disabled_kind_is_suppressed() -> None:
    mailer = build_mailer()
    store = build_store(build_settings(patient_status=True))
    processor = build_processor(store, mailer)

    result = await processor.process(TEST_OFFICE_ID, "date_request", {})

    assert result.success is True
    assert result.suppressed is True
    mailer.send.assert_not_called()
    store.get_office_name.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_kind_is_suppressed() -> None:
    mailer = build_mailer()
    store = build_store(
        build_settings(date_request=True, patient_status=True, production_summary=True)
    )
    processor = build_processor(store, mailer)

    result = await processor.process(TEST_OFFICE_ID, "invoice_overdue", {})

    assert result.suppressed is True
    mailer.send.assert_not_called()


@pytest.mark.asyncio
async def test_missing_settings_fails_without_office_lookup() -> None:
    mailer = build_mailer()
    store = build_store(settings=None)
    processor = build_processor(store, mailer)

    result = await processor.process(TEST_OFFICE_ID, "patient_status", {})

    assert result.success is False
    assert result.error.startswith(f"No notification settings found for office {TEST_OFFICE_ID}")
    store.get_office_name.assert_not_called()
    mailer.send.assert_not_called()


@pytest.mark.asyncio
async def test_missing_office_fails_with_distinct_error() -> None:
    mailer = build_mailer()
    store = build_store(build_settings(patient_status=True), office_name=None)
    processor = build_processor(store, mailer)

    result = await processor.process(TEST_OFFICE_ID, "patient_status", {})

    assert result.success is False
    assert result.error.startswith(f"Office not found for office_id {TEST_OFFICE_ID}")
    mailer.send.assert_not_called()


@pytest.mark.asyncio
async def test_one_failed_send_fails_the_event() -> None:
    async def flaky_send(to, email):
        if to == "b@x.com":
            raise RuntimeError("quota exceeded")

    mailer = build_mailer(side_effect=flaky_send)
    store = build_store(build_settings(patient_status=True))
    processor = build_processor(store, mailer)

    result = await processor.process(TEST_OFFICE_ID, "patient_status", {})

    assert result.success is False
    assert result.error == "quota exceeded"
    assert result.sent_count == 0
    assert mailer.send.await_count == 2


@pytest.mark.asyncio
async def test_unexpected_error_becomes_failed_result() -> None:
    store = build_store(build_settings(patient_status=True))
    store.get_office_name.side_effect = ConnectionError("socket closed")
    processor = build_processor(store, build_mailer())

    result = await processor.process(TEST_OFFICE_ID, "patient_status", {})

    assert result.success is False
    assert result.error == "socket closed"


@pytest.mark.asyncio
async def test_no_recipients_sends_nothing() -> None:
    mailer = build_mailer()
    store = build_store(build_settings(recipient_emails=[], production_summary=True))
    processor = build_processor(store, mailer)

    result = await processor.process(TEST_OFFICE_ID, "production_summary", {"amount": 10})

    assert result.success is True
    assert result.sent_count == 0
    mailer.send.assert_not_called()


@pytest.mark.asyncio
async def test_null_flag_in_stored_row_is_suppressed() -> None:
    mailer = build_mailer()
    settings = OfficeNotificationSettings.model_validate(
        {
            "office_id": TEST_OFFICE_ID,
            "recipient_emails": None,
            "notify_on_date_request": None,
        }
    )
    processor = build_processor(build_store(settings), mailer)

    result = await processor.process(TEST_OFFICE_ID, "date_request", {"status": "approved"})

    assert result.success is True
    assert result.suppressed is True
    mailer.send.assert_not_called()


@pytest.mark.asyncio
async def test_settings_are_fetched_for_every_event() -> None:
    mailer = build_mailer()
    store = build_store(build_settings(patient_status=True))
    processor = build_processor(store, mailer)

    first = await processor.process(TEST_OFFICE_ID, "patient_status", {})
    store.get_notification_settings.return_value = build_settings(patient_status=False)
    second = await processor.process(TEST_OFFICE_ID, "patient_status", {})

    assert store.get_notification_settings.await_count == 2
    assert first.sent_count == 2
    assert second.suppressed is True
    assert mailer.send.await_count == 2
