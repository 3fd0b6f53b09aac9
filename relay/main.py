"""
relay/main.py

FastAPI application entry point for the notification relay.
Creates the Supabase client, Gmail sender and realtime subscription once
per process and registers the HTTP routers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from supabase import acreate_client

from config import settings
from relay.routers.health import router as health_router
from relay.routers.webhook import invalid_payload_handler
from relay.routers.webhook import router as webhook_router
from relay.services.mailer import GmailSender
from relay.services.notification import NotificationProcessor
from relay.services.persistence import OfficeRepository
from relay.services.realtime import RealtimeListener

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle: startup and shutdown."""
    logger.info(
        "relay_starting",
        port=settings.port,
        supabase_url=settings.supabase_url,
    )

    client = await acreate_client(
        settings.supabase_url, settings.supabase_service_role_key
    )
    processor = NotificationProcessor(
        store=OfficeRepository(client),
        mailer=GmailSender.from_settings(settings),
    )
    listener = RealtimeListener(client, processor, settings.realtime_channel_name)

    app.state.processor = processor
    await listener.start()
    yield
    logger.info("relay_shutting_down")
    await listener.stop()


app = FastAPI(
    title="Office Notification Relay",
    description="Relays office events to email recipients via Gmail",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(webhook_router)
app.add_exception_handler(RequestValidationError, invalid_payload_handler)


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
