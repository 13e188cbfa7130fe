"""Tests for XMLTV rendering."""

import xml.etree.ElementTree as ET
from datetime import UTC, datetime, timedelta

import pytest
from conftest import make_channel, minutes

from channelarr.core import ChannelGuide, Slot
from channelarr.utilities.tz import format_datetime_xmltv, format_runtime
from channelarr.utilities.xmltv import programmes_to_xmltv

START = datetime(2024, 5, 1, 20, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def utc_guide(monkeypatch):
    monkeypatch.setenv("CHANNELARR_TIMEZONE", "UTC")


def episode_slot() -> Slot:
    return Slot(
        item_id="ep1",
        title="Breaking Bad",
        start=START,
        end=START + timedelta(minutes=58),
        runtime_ticks=minutes(58),
        overview="It begins.",
        episode_title="Pilot",
        season_number=1,
        episode_number=3,
        image_url="/Items/ep1/Images/Primary",
        is_series=True,
    )


def movie_slot() -> Slot:
    return Slot(
        item_id="mov1",
        title="Heat",
        start=START + timedelta(minutes=58),
        end=START + timedelta(minutes=228),
        runtime_ticks=minutes(170),
        production_year=1995,
        is_movie=True,
    )


def render(slots, **kwargs) -> ET.Element:
    channel = make_channel([], id="chan1", name="Crime", number="7")
    xml = programmes_to_xmltv([ChannelGuide(channel=channel, slots=slots)], **kwargs)
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    return ET.fromstring(xml.split("\n", 1)[1])


class TestTimeFormatting:
    def test_xmltv_datetime_utc(self):
        assert format_datetime_xmltv(START) == "20240501200000 +0000"

    def test_xmltv_datetime_user_timezone(self, monkeypatch):
        monkeypatch.setenv("CHANNELARR_TIMEZONE", "America/New_York")
        assert format_datetime_xmltv(START) == "20240501160000 -0400"

    def test_format_runtime(self):
        assert format_runtime(minutes(58)) == "0:58:00"
        assert format_runtime(minutes(170)) == "2:50:00"
        assert format_runtime(None) == "Unknown"


class TestProgrammesToXmltv:
    def test_channel_element(self):
        tv = render([])
        channel = tv.find("channel")
        assert channel.get("id") == "chan1"
        assert [d.text for d in channel.findall("display-name")] == ["Crime", "7"]
        assert tv.findall("programme") == []

    def test_episode_programme(self):
        programme = render([episode_slot()]).find("programme")

        assert programme.get("channel") == "chan1"
        assert programme.get("start") == "20240501200000 +0000"
        assert programme.get("stop") == "20240501205800 +0000"
        assert programme.findtext("title") == "Breaking Bad"
        assert programme.findtext("sub-title") == "Pilot"
        assert programme.findtext("desc") == "It begins."
        assert programme.findtext("category") == "Series"
        numbers = {e.get("system"): e.text for e in programme.findall("episode-num")}
        assert numbers == {"xmltv_ns": "0.2.", "onscreen": "S01E03"}
        assert programme.find("previously-shown") is not None

    def test_special_has_only_onscreen_number(self):
        slot = episode_slot()
        slot.season_number = 0
        programme = render([slot]).find("programme")
        numbers = {e.get("system"): e.text for e in programme.findall("episode-num")}
        assert numbers == {"onscreen": "S00E03"}

    def test_movie_programme(self):
        programme = render([movie_slot()]).find("programme")
        assert programme.findtext("category") == "Movie"
        assert programme.findtext("date") == "1995"
        assert programme.find("sub-title") is None
        assert programme.find("episode-num") is None

    def test_relative_images_use_base_url(self):
        tv = render([episode_slot()], image_base_url="http://jellyfin:8096/")
        icon = tv.find("programme/icon")
        assert icon.get("src") == "http://jellyfin:8096/Items/ep1/Images/Primary"

    def test_relative_images_without_base_url(self):
        icon = render([episode_slot()]).find("programme/icon")
        assert icon.get("src") == "/Items/ep1/Images/Primary"

    def test_programmes_in_slot_order(self):
        tv = render([episode_slot(), movie_slot()])
        assert [p.findtext("title") for p in tv.findall("programme")] == ["Breaking Bad", "Heat"]

    def test_text_is_escaped(self):
        slot = movie_slot()
        slot.title = "Tom & Jerry <Classic>"
        assert render([slot]).find("programme").findtext("title") == "Tom & Jerry <Classic>"
