"""
relay/services/persistence.py

Read-only lookups against the Supabase portal database.
Uses the supabase async client; every call queries fresh, nothing is cached.
"""

import structlog
from pydantic import ValidationError
from supabase import AsyncClient

from relay.constants import OFFICE_NAME_COLUMN, OFFICE_TABLE, SETTINGS_TABLE
from relay.schemas import OfficeNotificationSettings

logger = structlog.get_logger(__name__)


class LookupFailed(Exception):
    """A required row was missing or the query itself failed."""


class OfficeRepository:
    """Queries office configuration through a long-lived Supabase client."""

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get_notification_settings(
        self, office_id: int
    ) -> OfficeNotificationSettings:
        """Fetch the single settings row for an office."""
        try:
            response = await (
                self._client.table(SETTINGS_TABLE)
                .select("*")
                .eq("office_id", office_id)
                .single()
                .execute()
            )
        except Exception as exc:
            logger.warning(
                "settings_query_failed",
                office_id=office_id,
                error=str(exc),
            )
            raise LookupFailed(str(exc)) from exc

        if not response.data:
            raise LookupFailed("no rows returned")

        try:
            settings = OfficeNotificationSettings.model_validate(response.data)
        except ValidationError as exc:
            logger.warning("settings_row_invalid", office_id=office_id, error=str(exc))
            raise LookupFailed("settings row is malformed") from exc

        logger.info(
            "settings_loaded",
            office_id=office_id,
            recipients=len(settings.recipient_emails),
        )
        return settings

    async def get_office_name(self, office_id: int) -> str:
        """Fetch the display name of an office."""
        try:
            response = await (
                self._client.table(OFFICE_TABLE)
                .select(OFFICE_NAME_COLUMN)
                .eq("office_id", office_id)
                .single()
                .execute()
            )
        except Exception as exc:
            logger.warning(
                "office_query_failed",
                office_id=office_id,
                error=str(exc),
            )
            raise LookupFailed(str(exc)) from exc

        if not response.data:
            raise LookupFailed("no rows returned")
        return response.data[OFFICE_NAME_COLUMN]
