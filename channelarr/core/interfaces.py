"""Contracts the scheduling core needs from the media library.

Providers implement these; the core never talks to a media server directly.
"""

from abc import ABC, abstractmethod

from channelarr.core.types import ItemMetadata, LibraryItem


class SourceError(Exception):
    """A content or metadata lookup failed outright (transport, auth, bad id)."""


class ContentSource(ABC):
    """Lists the playable items of a library."""

    @abstractmethod
    def list_items(self, library_id: str) -> list[LibraryItem]:
        """Return the items of a library in a stable order.

        Raises:
            SourceError: if the library could not be listed
        """


class MetadataSource(ABC):
    """Describes a single library item."""

    @abstractmethod
    def describe(self, item_id: str) -> ItemMetadata | None:
        """Return metadata for an item, or None if it does not exist.

        Raises:
            SourceError: if the lookup failed
        """
