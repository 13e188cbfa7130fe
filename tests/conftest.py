"""Shared fixtures: in-memory sources and a throwaway database."""

import sqlite3
from datetime import timedelta

import pytest

from channelarr.core import (
    TICKS_PER_MINUTE,
    UNIX_EPOCH,
    Channel,
    ContentSource,
    ItemMetadata,
    LibraryItem,
    MetadataSource,
    Program,
    ScheduleMode,
    SourceError,
)
from channelarr.database import init_schema


def minutes(n: int) -> int:
    """Runtime in ticks for n minutes."""
    return n * TICKS_PER_MINUTE


def at_minute(n: float):
    """Datetime n minutes after the Unix epoch."""
    return UNIX_EPOCH + timedelta(minutes=n)


def make_channel(programs=(), mode=ScheduleMode.SEQUENTIAL, **kwargs) -> Channel:
    return Channel(
        id=kwargs.pop("id", "chan1"),
        name=kwargs.pop("name", "Test Channel"),
        mode=mode,
        programs=tuple(programs),
        **kwargs,
    )


class FakeContentSource(ContentSource):
    """Libraries held in a dict; unknown ids raise SourceError."""

    def __init__(self, libraries: dict[str, list[LibraryItem]]):
        self.libraries = libraries
        self.calls: list[str] = []

    def list_items(self, library_id: str) -> list[LibraryItem]:
        self.calls.append(library_id)
        if library_id not in self.libraries:
            raise SourceError(f"no library {library_id}")
        return list(self.libraries[library_id])


class FakeMetadataSource(MetadataSource):
    """Metadata held in a dict; ids in `failing` raise SourceError."""

    def __init__(self, items: dict[str, ItemMetadata], failing: set[str] | None = None):
        self.items = items
        self.failing = failing or set()
        self.calls: list[str] = []

    def describe(self, item_id: str) -> ItemMetadata | None:
        self.calls.append(item_id)
        if item_id in self.failing:
            raise SourceError(f"lookup failed for {item_id}")
        return self.items.get(item_id)


@pytest.fixture
def abc_programs() -> list[Program]:
    """A 30, B 20, C 10 minutes: a one-hour cycle."""
    return [
        Program("A", "Alpha", minutes(30)),
        Program("B", "Bravo", minutes(20)),
        Program("C", "Charlie", minutes(10)),
    ]


@pytest.fixture
def conn():
    """In-memory database with the schema applied."""
    connection = sqlite3.connect(":memory:")
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    init_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def api_client(tmp_path, monkeypatch):
    """TestClient over a fresh database file, with no media server configured."""
    from fastapi.testclient import TestClient

    from channelarr.api.app import create_app
    from channelarr.providers import reset_media_provider
    from channelarr.services import reset_schedule_service

    monkeypatch.setenv("CHANNELARR_DB_PATH", str(tmp_path / "channelarr.db"))
    monkeypatch.setenv("CHANNELARR_TIMEZONE", "UTC")
    monkeypatch.delenv("JELLYFIN_URL", raising=False)
    monkeypatch.delenv("JELLYFIN_API_KEY", raising=False)
    reset_media_provider()
    reset_schedule_service()

    with TestClient(create_app()) as client:
        yield client

    reset_schedule_service()
    reset_media_provider()
