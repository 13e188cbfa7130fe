"""Jellyfin provider.

Maps Jellyfin item JSON onto core types and implements the ContentSource
and MetadataSource contracts the scheduling core depends on.
"""

import logging

from channelarr.core import (
    ContentSource,
    EpisodeInfo,
    ItemKind,
    ItemMetadata,
    Library,
    LibraryItem,
    MetadataSource,
    SourceError,
)

from .client import JellyfinClient

logger = logging.getLogger(__name__)

_KINDS = {
    "Movie": ItemKind.MOVIE,
    "Episode": ItemKind.EPISODE,
    "Series": ItemKind.SERIES,
}


def item_kind(item: dict) -> ItemKind:
    return _KINDS.get(item.get("Type", ""), ItemKind.OTHER)


def primary_image_url(item: dict) -> str | None:
    """Relative primary image path, if the item has one."""
    if (item.get("ImageTags") or {}).get("Primary"):
        return f"/Items/{item['Id']}/Images/Primary"
    return None


def item_to_library_item(item: dict) -> LibraryItem:
    return LibraryItem(
        item_id=item["Id"],
        name=item.get("Name", ""),
        runtime_ticks=item.get("RunTimeTicks"),
        sort_name=item.get("SortName") or item.get("Name", ""),
        kind=item_kind(item),
    )


def item_to_metadata(item: dict) -> ItemMetadata:
    kind = item_kind(item)
    episode = None
    if kind == ItemKind.EPISODE:
        episode = EpisodeInfo(
            series_name=item.get("SeriesName"),
            season_number=item.get("ParentIndexNumber"),
            episode_number=item.get("IndexNumber"),
        )
    return ItemMetadata(
        item_id=item["Id"],
        name=item.get("Name", ""),
        kind=kind,
        overview=item.get("Overview"),
        production_year=item.get("ProductionYear"),
        image_url=primary_image_url(item),
        runtime_ticks=item.get("RunTimeTicks"),
        episode=episode,
    )


class JellyfinProvider(ContentSource, MetadataSource):
    """Jellyfin-backed content and metadata source.

    Usage:
        provider = JellyfinProvider(JellyfinClient(url, api_key))
        items = provider.list_items(library_id)
        metadata = provider.describe(item_id)
    """

    def __init__(self, client: JellyfinClient):
        self._client = client

    @property
    def client(self) -> JellyfinClient:
        return self._client

    def list_items(self, library_id: str) -> list[LibraryItem]:
        data = self._client.get_library_items(library_id)
        if data is None:
            raise SourceError(f"Could not list library {library_id}")
        items = [item_to_library_item(i) for i in data.get("Items") or [] if i.get("Id")]
        logger.debug("[JELLYFIN] Library %s: %d items", library_id, len(items))
        return items

    def describe(self, item_id: str) -> ItemMetadata | None:
        item = self.get_item(item_id)
        return item_to_metadata(item) if item else None

    def get_item(self, item_id: str) -> dict | None:
        """Raw item dict, or None if the server has no such item."""
        item = self._client.get_item(item_id)
        if item is None:
            raise SourceError(f"Could not look up item {item_id}")
        return item or None

    def list_libraries(self) -> list[Library]:
        data = self._client.get_libraries()
        if data is None:
            raise SourceError("Could not list libraries")
        return [
            Library(id=f["Id"], name=f.get("Name", ""), collection_type=f.get("CollectionType"))
            for f in data.get("Items") or []
            if f.get("Id")
        ]

    def search_items(
        self, query: str | None = None, parent_id: str | None = None, limit: int = 50
    ) -> list[ItemMetadata]:
        data = self._client.search_items(query=query, parent_id=parent_id, limit=limit)
        if data is None:
            raise SourceError("Search failed")
        return [item_to_metadata(i) for i in data.get("Items") or [] if i.get("Id")]

    def list_series_episodes(self, series_id: str) -> list[ItemMetadata]:
        data = self._client.get_series_episodes(series_id)
        if data is None:
            raise SourceError(f"Could not list episodes of series {series_id}")
        return [item_to_metadata(i) for i in data.get("Items") or [] if i.get("Id")]
