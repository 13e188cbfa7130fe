"""Schedule service layer.

Looks channels up in the configuration store and runs them through the
schedule engine. API routes call this service - never the engine or
the database directly for schedule queries.
"""

import logging
import threading
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import datetime, timedelta
from sqlite3 import Connection

from channelarr.consumers.scheduling import ProgramCatalog, ScheduleEngine, SlotEnricher
from channelarr.core import ChannelGuide, Slot
from channelarr.database import get_db
from channelarr.database.channels import get_channel, list_channels
from channelarr.database.settings import get_schedule_settings
from channelarr.providers import get_media_provider

logger = logging.getLogger(__name__)

DbFactory = Callable[[], AbstractContextManager[Connection]]


class ScheduleService:
    """Schedule queries by channel ID.

    Unknown channels yield None so the caller can report "not found".
    """

    def __init__(self, engine: ScheduleEngine, db_factory: DbFactory = get_db):
        self._engine = engine
        self._db_factory = db_factory

    def get_schedule(self, channel_id: str, start: datetime, end: datetime) -> list[Slot] | None:
        """Slots for a channel over [start, end), or None if the channel is unknown."""
        with self._db_factory() as conn:
            channel = get_channel(conn, channel_id)
        if channel is None:
            return None
        return self._engine.generate_schedule(channel, start, end)

    def get_now_playing(self, channel_id: str, now: datetime) -> tuple[bool, Slot | None]:
        """What a channel is playing at `now`.

        Returns:
            (channel found, current slot or None)
        """
        with self._db_factory() as conn:
            channel = get_channel(conn, channel_id)
        if channel is None:
            return False, None
        return True, self._engine.now_playing(channel, now)

    def get_guide(self, start: datetime, end: datetime) -> list[ChannelGuide]:
        """Slots for every enabled channel over [start, end)."""
        with self._db_factory() as conn:
            channels = list_channels(conn, enabled_only=True)

        guide = [
            ChannelGuide(channel=channel, slots=self._engine.generate_schedule(channel, start, end))
            for channel in channels
        ]
        logger.info(
            "[SCHEDULE] Guide for %d channels: %d slots",
            len(guide),
            sum(len(g.slots) for g in guide),
        )
        return guide

    def get_guide_for_days(self, now: datetime, days: int) -> list[ChannelGuide]:
        return self.get_guide(now, now + timedelta(days=days))


def create_schedule_service(db_factory: DbFactory = get_db) -> ScheduleService:
    """Create a ScheduleService wired to the configured media provider.

    Cache TTL and enrichment deadline come from the settings table.
    Without a media provider, only channels with explicit program lists
    produce schedules, and slots are not enriched.
    """
    with db_factory() as conn:
        settings = get_schedule_settings(conn)

    provider = get_media_provider()
    catalog = ProgramCatalog(provider, cache_ttl=settings["catalog_cache_ttl_seconds"])
    enricher = (
        SlotEnricher(provider, timeout=settings["enrichment_timeout_seconds"])
        if provider is not None
        else None
    )
    return ScheduleService(ScheduleEngine(catalog, enricher), db_factory)


_service: ScheduleService | None = None
_service_lock = threading.Lock()


def get_schedule_service() -> ScheduleService:
    """Get (or lazily create) the process-wide schedule service."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = create_schedule_service()
    return _service


def reset_schedule_service() -> None:
    """Drop the process-wide service (settings changed, or tests)."""
    global _service
    with _service_lock:
        _service = None
