"""Schedule API endpoints.

- GET /channels/{channel_id}/schedule - slot preview from now
- GET /channels/{channel_id}/now-playing - current slot with elapsed time
- GET /guide.xml - XMLTV guide for all enabled channels
"""

from datetime import timedelta

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import Response

from channelarr.api.models import SlotResponse
from channelarr.database import get_db
from channelarr.database.settings import get_schedule_settings
from channelarr.providers import get_media_provider
from channelarr.services import get_schedule_service
from channelarr.utilities.tz import now_utc
from channelarr.utilities.xmltv import programmes_to_xmltv

router = APIRouter()


@router.get("/channels/{channel_id}/schedule", response_model=list[SlotResponse])
def get_channel_schedule(
    channel_id: str,
    hours: int | None = Query(default=None, ge=1, le=336),
):
    """Preview a channel's schedule from now.

    Args:
        channel_id: Channel ID
        hours: Window length (default: preview_hours setting)
    """
    if hours is None:
        with get_db() as conn:
            hours = get_schedule_settings(conn)["preview_hours"]

    now = now_utc()
    slots = get_schedule_service().get_schedule(channel_id, now, now + timedelta(hours=hours))
    if slots is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found")
    return [SlotResponse.from_slot(s) for s in slots]


@router.get("/channels/{channel_id}/now-playing", response_model=SlotResponse)
def get_channel_now_playing(channel_id: str):
    """Get what a channel is playing right now."""
    found, slot = get_schedule_service().get_now_playing(channel_id, now_utc())
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found")
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Nothing playing")
    return SlotResponse.from_slot(slot)


@router.get("/guide.xml")
def get_guide_xml(days: int | None = Query(default=None, ge=1, le=14)):
    """XMLTV guide for every enabled channel.

    Args:
        days: Guide length (default: guide_days setting)
    """
    if days is None:
        with get_db() as conn:
            days = get_schedule_settings(conn)["guide_days"]

    guide = get_schedule_service().get_guide_for_days(now_utc(), days)
    provider = get_media_provider()
    image_base_url = provider.client.base_url if provider is not None else None
    return Response(
        content=programmes_to_xmltv(guide, image_base_url=image_base_url),
        media_type="application/xml",
    )
