"""Pydantic request/response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from channelarr.core import Channel, ItemMetadata, Library, Program, ScheduleMode, Slot
from channelarr.utilities.tz import format_runtime


def _require_aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        raise ValueError("anchor must include a timezone offset")
    return value


# =============================================================================
# CHANNELS
# =============================================================================


class ProgramModel(BaseModel):
    """One entry of a channel's explicit program list."""

    item_id: str = Field(min_length=1)
    name: str
    runtime_ticks: int = Field(ge=0)

    @classmethod
    def from_program(cls, program: Program) -> "ProgramModel":
        return cls(item_id=program.item_id, name=program.name, runtime_ticks=program.runtime_ticks)

    def to_program(self) -> Program:
        return Program(item_id=self.item_id, name=self.name, runtime_ticks=self.runtime_ticks)


class ChannelCreate(BaseModel):
    id: str | None = None
    name: str = Field(min_length=1)
    number: str | None = None
    group: str | None = None
    mode: ScheduleMode = ScheduleMode.SHUFFLE
    library_ids: list[str] = []
    image_url: str | None = None
    anchor: datetime | None = None
    programs: list[ProgramModel] = []

    @field_validator("anchor")
    @classmethod
    def check_anchor(cls, value: datetime | None) -> datetime | None:
        return _require_aware(value)


class ChannelUpdate(BaseModel):
    """Partial channel update. Omitted fields are left unchanged; null clears image_url."""

    name: str | None = None
    number: str | None = None
    group: str | None = None
    mode: ScheduleMode | None = None
    library_ids: list[str] | None = None
    enabled: bool | None = None
    image_url: str | None = None
    anchor: datetime | None = None

    @field_validator("anchor")
    @classmethod
    def check_anchor(cls, value: datetime | None) -> datetime | None:
        return _require_aware(value)


class ChannelResponse(BaseModel):
    id: str
    name: str
    number: str
    group: str
    mode: ScheduleMode
    library_ids: list[str]
    enabled: bool
    image_url: str | None
    anchor: datetime
    revision: int
    programs: list[ProgramModel]

    @classmethod
    def from_channel(cls, channel: Channel) -> "ChannelResponse":
        return cls(
            id=channel.id,
            name=channel.name,
            number=channel.number,
            group=channel.group,
            mode=channel.mode,
            library_ids=list(channel.library_ids),
            enabled=channel.enabled,
            image_url=channel.image_url,
            anchor=channel.anchor,
            revision=channel.revision,
            programs=[ProgramModel.from_program(p) for p in channel.programs],
        )


class AddProgramRequest(BaseModel):
    """Add a media item to a channel.

    When name or runtime_ticks is omitted the item is looked up on the
    media server.
    """

    item_id: str = Field(min_length=1)
    name: str | None = None
    runtime_ticks: int | None = Field(default=None, gt=0)


class SeriesImportResponse(BaseModel):
    added: int
    skipped: int
    programs: list[ProgramModel]


# =============================================================================
# SCHEDULE
# =============================================================================


class SlotResponse(BaseModel):
    item_id: str
    title: str
    start: datetime
    end: datetime
    runtime_ticks: int
    runtime: str
    elapsed_seconds: float
    overview: str | None = None
    episode_title: str | None = None
    season_number: int | None = None
    episode_number: int | None = None
    production_year: int | None = None
    image_url: str | None = None
    is_movie: bool = False
    is_series: bool = False

    @classmethod
    def from_slot(cls, slot: Slot) -> "SlotResponse":
        return cls(
            item_id=slot.item_id,
            title=slot.title,
            start=slot.start,
            end=slot.end,
            runtime_ticks=slot.runtime_ticks,
            runtime=format_runtime(slot.runtime_ticks),
            elapsed_seconds=slot.elapsed.total_seconds(),
            overview=slot.overview,
            episode_title=slot.episode_title,
            season_number=slot.season_number,
            episode_number=slot.episode_number,
            production_year=slot.production_year,
            image_url=slot.image_url,
            is_movie=slot.is_movie,
            is_series=slot.is_series,
        )


class ScheduleSettingsModel(BaseModel):
    guide_days: int
    preview_hours: int
    enrichment_timeout_seconds: float
    catalog_cache_ttl_seconds: int


class ScheduleSettingsUpdate(BaseModel):
    guide_days: int | None = Field(default=None, ge=1, le=14)
    preview_hours: int | None = Field(default=None, ge=1, le=336)
    enrichment_timeout_seconds: float | None = Field(default=None, gt=0)
    catalog_cache_ttl_seconds: int | None = Field(default=None, ge=0)


# =============================================================================
# LIBRARY
# =============================================================================


class LibraryResponse(BaseModel):
    id: str
    name: str
    collection_type: str | None = None

    @classmethod
    def from_library(cls, library: Library) -> "LibraryResponse":
        return cls(id=library.id, name=library.name, collection_type=library.collection_type)


class MediaItemResponse(BaseModel):
    item_id: str
    name: str
    kind: str
    overview: str | None = None
    production_year: int | None = None
    image_url: str | None = None
    runtime_ticks: int | None = None
    runtime: str
    series_name: str | None = None
    season_number: int | None = None
    episode_number: int | None = None

    @classmethod
    def from_metadata(cls, item: ItemMetadata) -> "MediaItemResponse":
        episode = item.episode
        return cls(
            item_id=item.item_id,
            name=item.name,
            kind=item.kind.value,
            overview=item.overview,
            production_year=item.production_year,
            image_url=item.image_url,
            runtime_ticks=item.runtime_ticks,
            runtime=format_runtime(item.runtime_ticks),
            series_name=episode.series_name if episode else None,
            season_number=episode.season_number if episode else None,
            episode_number=episode.episode_number if episode else None,
        )
