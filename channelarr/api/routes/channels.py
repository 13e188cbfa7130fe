"""Channel API endpoints.

Channel CRUD plus program list management:
- GET/POST /channels
- GET/PUT/PATCH/DELETE /channels/{channel_id}
- GET/POST/PUT /channels/{channel_id}/programs
- DELETE /channels/{channel_id}/programs/{item_id}
- POST /channels/{channel_id}/series/{series_id}
"""

import logging
import sqlite3

from fastapi import APIRouter, HTTPException, status

from channelarr.api.dependencies import require_media_provider
from channelarr.api.models import (
    AddProgramRequest,
    ChannelCreate,
    ChannelResponse,
    ChannelUpdate,
    ProgramModel,
    SeriesImportResponse,
)
from channelarr.core import Program, SourceError
from channelarr.database import get_db
from channelarr.database.channels import (
    NULLABLE_FIELDS,
    add_programs,
    channel_exists,
    create_channel,
    delete_channel,
    get_channel,
    get_programs,
    list_channels,
    remove_program,
    set_programs,
    update_channel,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _channel_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found")


@router.get("/channels", response_model=list[ChannelResponse])
def list_all_channels(enabled_only: bool = False):
    """List all channels."""
    with get_db() as conn:
        channels = list_channels(conn, enabled_only=enabled_only)
    return [ChannelResponse.from_channel(c) for c in channels]


@router.post("/channels", response_model=ChannelResponse, status_code=status.HTTP_201_CREATED)
def create_new_channel(request: ChannelCreate):
    """Create a new channel, optionally with an initial program list."""
    with get_db() as conn:
        try:
            channel = create_channel(
                conn,
                name=request.name,
                number=request.number,
                group=request.group,
                mode=request.mode,
                library_ids=request.library_ids,
                image_url=request.image_url,
                anchor=request.anchor,
                channel_id=request.id,
            )
        except sqlite3.IntegrityError:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Channel with this id already exists",
            ) from None
        if request.programs:
            add_programs(conn, channel.id, [p.to_program() for p in request.programs])
            channel = get_channel(conn, channel.id)
    return ChannelResponse.from_channel(channel)


@router.get("/channels/{channel_id}", response_model=ChannelResponse)
def get_one_channel(channel_id: str):
    """Get a channel by ID."""
    with get_db() as conn:
        channel = get_channel(conn, channel_id)
    if channel is None:
        raise _channel_not_found()
    return ChannelResponse.from_channel(channel)


@router.put("/channels/{channel_id}", response_model=ChannelResponse)
@router.patch("/channels/{channel_id}", response_model=ChannelResponse)
def update_one_channel(channel_id: str, request: ChannelUpdate):
    """Update a channel (full or partial)."""
    updates = {
        k: v
        for k, v in request.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    if not updates:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    with get_db() as conn:
        channel = update_channel(conn, channel_id, updates)
    if channel is None:
        raise _channel_not_found()
    return ChannelResponse.from_channel(channel)


@router.delete("/channels/{channel_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_one_channel(channel_id: str):
    """Delete a channel and its program list."""
    with get_db() as conn:
        if not delete_channel(conn, channel_id):
            raise _channel_not_found()


# =============================================================================
# PROGRAMS
# =============================================================================


@router.get("/channels/{channel_id}/programs", response_model=list[ProgramModel])
def list_channel_programs(channel_id: str):
    """Get a channel's explicit program list in order."""
    with get_db() as conn:
        if not channel_exists(conn, channel_id):
            raise _channel_not_found()
        programs = get_programs(conn, channel_id)
    return [ProgramModel.from_program(p) for p in programs]


@router.post(
    "/channels/{channel_id}/programs",
    response_model=ProgramModel,
    status_code=status.HTTP_201_CREATED,
)
def add_channel_program(channel_id: str, request: AddProgramRequest):
    """Append a media item to a channel's program list.

    Name and runtime come from the media server unless both are given.
    """
    with get_db() as conn:
        if not channel_exists(conn, channel_id):
            raise _channel_not_found()

    name, runtime_ticks = request.name, request.runtime_ticks
    if name is None or runtime_ticks is None:
        provider = require_media_provider()
        try:
            metadata = provider.describe(request.item_id)
        except SourceError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
            ) from None
        if metadata is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
        name = name if name is not None else metadata.name
        runtime_ticks = runtime_ticks if runtime_ticks is not None else metadata.runtime_ticks
        if not runtime_ticks or runtime_ticks <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Item has no runtime",
            )

    program = Program(item_id=request.item_id, name=name, runtime_ticks=runtime_ticks)
    with get_db() as conn:
        add_programs(conn, channel_id, [program])
    logger.info("[CHANNELS] Added '%s' to channel %s", name, channel_id)
    return ProgramModel.from_program(program)


@router.put("/channels/{channel_id}/programs", response_model=list[ProgramModel])
def replace_channel_programs(channel_id: str, programs: list[ProgramModel]):
    """Replace a channel's whole program list (reorder / bulk update)."""
    with get_db() as conn:
        if not channel_exists(conn, channel_id):
            raise _channel_not_found()
        stored = set_programs(conn, channel_id, [p.to_program() for p in programs])
    return [ProgramModel.from_program(p) for p in stored]


@router.delete(
    "/channels/{channel_id}/programs/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def remove_channel_program(channel_id: str, item_id: str):
    """Remove every occurrence of an item from a channel's program list."""
    with get_db() as conn:
        if not channel_exists(conn, channel_id):
            raise _channel_not_found()
        if not remove_program(conn, channel_id, item_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not in channel",
            )


@router.post("/channels/{channel_id}/series/{series_id}", response_model=SeriesImportResponse)
def add_channel_series(channel_id: str, series_id: str):
    """Append every episode of a series (in season/episode order).

    Episodes without a runtime are skipped.
    """
    with get_db() as conn:
        if not channel_exists(conn, channel_id):
            raise _channel_not_found()

    provider = require_media_provider()
    try:
        episodes = provider.list_series_episodes(series_id)
    except SourceError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from None

    programs = [
        Program(item_id=e.item_id, name=e.name, runtime_ticks=e.runtime_ticks)
        for e in episodes
        if e.runtime_ticks and e.runtime_ticks > 0
    ]
    if not programs:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Series has no playable episodes",
        )

    with get_db() as conn:
        add_programs(conn, channel_id, programs)

    skipped = len(episodes) - len(programs)
    logger.info(
        "[CHANNELS] Added %d episodes of series %s to channel %s (%d skipped)",
        len(programs),
        series_id,
        channel_id,
        skipped,
    )
    return SeriesImportResponse(
        added=len(programs),
        skipped=skipped,
        programs=[ProgramModel.from_program(p) for p in programs],
    )
