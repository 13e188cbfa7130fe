"""Core types and interfaces for Channelarr.

All data structures are dataclasses with attribute access.
Media providers implement ContentSource and MetadataSource.
"""

from channelarr.core.interfaces import ContentSource, MetadataSource, SourceError
from channelarr.core.types import (
    TICKS_PER_MINUTE,
    TICKS_PER_SECOND,
    UNIX_EPOCH,
    Channel,
    ChannelGuide,
    EpisodeInfo,
    ItemKind,
    ItemMetadata,
    Library,
    LibraryItem,
    Program,
    ScheduleMode,
    Slot,
)

__all__ = [
    # Constants
    "TICKS_PER_MINUTE",
    "TICKS_PER_SECOND",
    "UNIX_EPOCH",
    # Types
    "Channel",
    "ChannelGuide",
    "EpisodeInfo",
    "ItemKind",
    "ItemMetadata",
    "Library",
    "LibraryItem",
    "Program",
    "ScheduleMode",
    "Slot",
    # Interfaces
    "ContentSource",
    "MetadataSource",
    "SourceError",
]
