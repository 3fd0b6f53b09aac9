"""
relay/services/realtime.py

Supabase Realtime ingress.
Subscribes to a private broadcast channel and hands every well-formed
message to the NotificationProcessor as a background task.
"""

import asyncio
from typing import Any

import structlog
from pydantic import ValidationError
from realtime.types import RealtimeSubscribeStates
from supabase import AsyncClient

from relay.constants import BROADCAST_ALL_EVENTS
from relay.schemas import RealtimeNotificationPayload
from relay.services.notification import NotificationProcessor

logger = structlog.get_logger(__name__)

_FAILED_STATES = {
    RealtimeSubscribeStates.CHANNEL_ERROR,
    RealtimeSubscribeStates.TIMED_OUT,
    RealtimeSubscribeStates.CLOSED,
}


class RealtimeListener:
    """Bridges broadcast messages on one channel into notification processing."""

    def __init__(
        self,
        client: AsyncClient,
        processor: NotificationProcessor,
        channel_name: str,
    ) -> None:
        self._client = client
        self._processor = processor
        self.channel_name = channel_name
        self._channel = None
        # In-flight tasks, kept referenced until done
        self._tasks: set[asyncio.Task] = set()

    async def start(self) -> None:
        logger.info("realtime_subscribing", channel=self.channel_name)
        self._channel = self._client.channel(
            self.channel_name, {"config": {"private": True}}
        )
        self._channel.on_broadcast(BROADCAST_ALL_EVENTS, self.handle_message)
        await self._channel.subscribe(self._on_subscribe_status)

    async def stop(self) -> None:
        if self._channel is not None:
            await self._channel.unsubscribe()
            self._channel = None
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        logger.info("realtime_unsubscribed", channel=self.channel_name)

    def _on_subscribe_status(
        self, status: RealtimeSubscribeStates, err: Exception | None
    ) -> None:
        if status == RealtimeSubscribeStates.SUBSCRIBED:
            logger.info("realtime_subscribed", channel=self.channel_name, private=True)
        elif status in _FAILED_STATES:
            logger.error(
                "realtime_subscription_failed",
                channel=self.channel_name,
                status=str(status),
                error=str(err) if err else None,
            )
        else:
            logger.info(
                "realtime_subscription_status",
                channel=self.channel_name,
                status=str(status),
            )

    def handle_message(self, message: dict[str, Any]) -> asyncio.Task | None:
        """
        Validate one broadcast message and schedule its processing.

        The outer `event` tag is the authoritative notification type.
        Returns the scheduled task, or None when the message was dropped.
        """
        event = message.get("event")
        raw_payload = message.get("payload")
        logger.info("realtime_message_received", event=event)

        try:
            if not event:
                raise ValueError("missing event")
            payload = RealtimeNotificationPayload.model_validate(raw_payload)
        except (ValidationError, ValueError) as exc:
            logger.error(
                "realtime_message_invalid",
                event=event,
                payload=raw_payload,
                error=str(exc),
            )
            return None

        if event != payload.notification_type:
            logger.warning(
                "realtime_event_type_mismatch",
                event=event,
                notification_type=payload.notification_type,
                using="event",
            )

        task = asyncio.create_task(self._process(payload.office_id, event, payload.data))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _process(
        self, office_id: int, event: str, data: Any
    ) -> None:
        try:
            result = await self._processor.process(office_id, event, data)
        except Exception as exc:
            logger.error(
                "realtime_processing_unhandled_error",
                office_id=office_id,
                event=event,
                error=str(exc),
            )
            return

        if result.success:
            logger.info(
                "realtime_notification_processed",
                office_id=office_id,
                event=event,
                message=result.message,
            )
        else:
            logger.error(
                "realtime_notification_failed",
                office_id=office_id,
                event=event,
                error=result.error,
            )
