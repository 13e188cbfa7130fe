"""XMLTV rendering for channel guides."""

import xml.etree.ElementTree as ET

from channelarr.core import ChannelGuide, Slot
from channelarr.utilities.tz import format_datetime_xmltv

GENERATOR_NAME = "Channelarr"


def _absolute_url(url: str | None, base_url: str | None) -> str | None:
    """Prefix server-relative paths (e.g. /Items/x/Images/Primary) with base_url."""
    if not url:
        return None
    if base_url and url.startswith("/"):
        return base_url.rstrip("/") + url
    return url


def _add_text(parent: ET.Element, tag: str, text, **attrs) -> ET.Element:
    element = ET.SubElement(parent, tag, attrs)
    element.text = str(text)
    return element


def _episode_numbers(slot: Slot) -> tuple[str | None, str] | None:
    """(xmltv_ns, onscreen) episode numbers, or None if not an episode.

    xmltv_ns is zero-based: S1E1 -> "0.0.". Specials numbered 0 have no
    xmltv_ns form and get None there.
    """
    if slot.season_number is None or slot.episode_number is None:
        return None
    xmltv_ns = None
    if slot.season_number >= 1 and slot.episode_number >= 1:
        xmltv_ns = f"{slot.season_number - 1}.{slot.episode_number - 1}."
    onscreen = f"S{slot.season_number:02d}E{slot.episode_number:02d}"
    return xmltv_ns, onscreen


def _add_programme(tv: ET.Element, channel_id: str, slot: Slot, image_base_url: str | None):
    programme = ET.SubElement(
        tv,
        "programme",
        {
            "start": format_datetime_xmltv(slot.start),
            "stop": format_datetime_xmltv(slot.end),
            "channel": channel_id,
        },
    )
    _add_text(programme, "title", slot.title, lang="en")
    if slot.episode_title and slot.episode_title != slot.title:
        _add_text(programme, "sub-title", slot.episode_title, lang="en")
    if slot.overview:
        _add_text(programme, "desc", slot.overview, lang="en")
    if slot.production_year:
        _add_text(programme, "date", slot.production_year)
    if slot.is_movie:
        _add_text(programme, "category", "Movie", lang="en")
    elif slot.is_series:
        _add_text(programme, "category", "Series", lang="en")

    numbers = _episode_numbers(slot)
    if numbers:
        xmltv_ns, onscreen = numbers
        if xmltv_ns:
            _add_text(programme, "episode-num", xmltv_ns, system="xmltv_ns")
        _add_text(programme, "episode-num", onscreen, system="onscreen")

    icon = _absolute_url(slot.image_url, image_base_url)
    if icon:
        ET.SubElement(programme, "icon", {"src": icon})

    # Virtual channels only ever replay library content
    ET.SubElement(programme, "previously-shown")


def programmes_to_xmltv(guide: list[ChannelGuide], image_base_url: str | None = None) -> str:
    """Render channel guides as an XMLTV document.

    Args:
        guide: Channels with their slots, in output order
        image_base_url: Media server URL used to absolutize relative image paths

    Returns:
        XMLTV document as a string (with XML declaration)
    """
    tv = ET.Element("tv", {"generator-info-name": GENERATOR_NAME})

    # All <channel> elements precede all <programme> elements
    for entry in guide:
        channel = entry.channel
        element = ET.SubElement(tv, "channel", {"id": channel.id})
        _add_text(element, "display-name", channel.name)
        _add_text(element, "display-name", channel.number)
        icon = _absolute_url(channel.image_url, image_base_url)
        if icon:
            ET.SubElement(element, "icon", {"src": icon})

    for entry in guide:
        for slot in entry.slots:
            _add_programme(tv, entry.channel.id, slot, image_base_url)

    ET.indent(tv, space="  ")
    body = ET.tostring(tv, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"
