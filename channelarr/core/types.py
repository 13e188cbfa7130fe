"""Core data types for Channelarr.

All data structures are pure dataclasses with attribute access.
Durations are integer ticks of 100ns (the media server's runtime unit).
Timestamps are timezone-aware datetimes.

Use attribute access: channel.programs, slot.start, etc.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum

TICKS_PER_SECOND = 10_000_000
TICKS_PER_MINUTE = 60 * TICKS_PER_SECOND

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class ScheduleMode(Enum):
    """How a channel orders its programs."""

    SHUFFLE = "shuffle"  # deterministic per-cycle permutation
    SEQUENTIAL = "sequential"  # configured order, looping


class ItemKind(Enum):
    """Kind of a media library item."""

    MOVIE = "movie"
    EPISODE = "episode"
    SERIES = "series"
    OTHER = "other"


@dataclass(frozen=True)
class Program:
    """A media item assigned to a channel."""

    item_id: str
    name: str
    runtime_ticks: int


@dataclass(frozen=True)
class Channel:
    """A user-defined virtual channel.

    Treated as an immutable value for the duration of one schedule
    computation. `revision` changes on every stored update and doubles
    as the catalog cache's change token.
    """

    id: str
    name: str
    number: str = "1"
    group: str = "Virtual"
    mode: ScheduleMode = ScheduleMode.SHUFFLE
    programs: tuple[Program, ...] = ()
    library_ids: tuple[str, ...] = ()
    enabled: bool = True
    image_url: str | None = None
    anchor: datetime = UNIX_EPOCH  # cycle origin
    revision: int = 0


@dataclass
class Slot:
    """A resolved, time-bounded occurrence of one program."""

    item_id: str
    title: str
    start: datetime
    end: datetime
    runtime_ticks: int

    # Only meaningful for the now-playing slot
    elapsed: timedelta = timedelta(0)

    # Filled by SlotEnricher
    overview: str | None = None
    episode_title: str | None = None
    season_number: int | None = None
    episode_number: int | None = None
    production_year: int | None = None
    image_url: str | None = None
    is_movie: bool = False
    is_series: bool = False

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class LibraryItem:
    """An item listed by a ContentSource."""

    item_id: str
    name: str
    runtime_ticks: int | None
    sort_name: str = ""
    kind: ItemKind = ItemKind.OTHER


@dataclass(frozen=True)
class EpisodeInfo:
    """Series placement of an episode."""

    series_name: str | None = None
    season_number: int | None = None
    episode_number: int | None = None


@dataclass(frozen=True)
class ItemMetadata:
    """Descriptive metadata returned by a MetadataSource."""

    item_id: str
    name: str
    kind: ItemKind = ItemKind.OTHER
    overview: str | None = None
    production_year: int | None = None
    image_url: str | None = None
    runtime_ticks: int | None = None
    episode: EpisodeInfo | None = None


@dataclass(frozen=True)
class Library:
    """A top-level media library (collection folder)."""

    id: str
    name: str
    collection_type: str | None = None


@dataclass
class ChannelGuide:
    """A channel and the slots generated for one guide window."""

    channel: Channel
    slots: list[Slot] = field(default_factory=list)
