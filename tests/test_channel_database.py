"""Tests for channel and settings persistence."""

import sqlite3
from datetime import UTC, datetime, timedelta, timezone

import pytest
from conftest import minutes

from channelarr.core import UNIX_EPOCH, Program, ScheduleMode
from channelarr.database.channels import (
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
from channelarr.database.settings import (
    DEFAULT_SCHEDULE_SETTINGS,
    get_schedule_settings,
    update_schedule_settings,
)


class TestCreateChannel:
    def test_defaults(self, conn):
        channel = create_channel(conn, name="Movies")

        assert len(channel.id) == 32
        assert channel.number == "1"
        assert channel.group == "Virtual"
        assert channel.mode == ScheduleMode.SHUFFLE
        assert channel.enabled is True
        assert channel.anchor == UNIX_EPOCH
        assert channel.programs == ()
        assert channel.library_ids == ()
        assert channel.revision == 0

    def test_numbers_follow_channel_count(self, conn):
        create_channel(conn, name="One")
        assert create_channel(conn, name="Two").number == "2"

    def test_explicit_fields(self, conn):
        anchor = datetime(2024, 1, 1, 6, tzinfo=timezone(timedelta(hours=2)))
        channel = create_channel(
            conn,
            name="Cartoons",
            number="42",
            group="Kids",
            mode=ScheduleMode.SEQUENTIAL,
            library_ids=["lib1", "lib2"],
            image_url="http://img/logo.png",
            anchor=anchor,
            channel_id="cartoons",
        )

        assert channel.id == "cartoons"
        assert channel.number == "42"
        assert channel.group == "Kids"
        assert channel.mode == ScheduleMode.SEQUENTIAL
        assert channel.library_ids == ("lib1", "lib2")
        assert channel.image_url == "http://img/logo.png"
        assert channel.anchor == anchor
        assert channel.anchor.tzinfo == UTC

    def test_duplicate_id_rejected(self, conn):
        create_channel(conn, name="A", channel_id="same")
        with pytest.raises(sqlite3.IntegrityError):
            create_channel(conn, name="B", channel_id="same")


class TestQueryChannels:
    def test_list_ordered_by_number(self, conn):
        create_channel(conn, name="Ten", number="10")
        create_channel(conn, name="Two", number="2")
        create_channel(conn, name="One", number="1")
        assert [c.name for c in list_channels(conn)] == ["One", "Two", "Ten"]

    def test_enabled_only(self, conn):
        keep = create_channel(conn, name="On")
        off = create_channel(conn, name="Off")
        update_channel(conn, off.id, {"enabled": False})
        assert [c.id for c in list_channels(conn, enabled_only=True)] == [keep.id]

    def test_get_unknown(self, conn):
        assert get_channel(conn, "nope") is None
        assert channel_exists(conn, "nope") is False


class TestUpdateChannel:
    def test_updates_fields_and_bumps_revision(self, conn):
        channel = create_channel(conn, name="Old")
        updated = update_channel(
            conn, channel.id, {"name": "New", "group": "Films", "mode": ScheduleMode.SEQUENTIAL}
        )
        assert updated.name == "New"
        assert updated.group == "Films"
        assert updated.mode == ScheduleMode.SEQUENTIAL
        assert updated.revision == channel.revision + 1

    def test_mode_accepts_string_value(self, conn):
        channel = create_channel(conn, name="X")
        assert update_channel(conn, channel.id, {"mode": "sequential"}).mode == (
            ScheduleMode.SEQUENTIAL
        )

    def test_unknown_fields_ignored(self, conn):
        channel = create_channel(conn, name="X")
        updated = update_channel(conn, channel.id, {"revision": 99, "bogus": 1})
        assert updated.revision == 0

    def test_unknown_channel(self, conn):
        assert update_channel(conn, "nope", {"name": "X"}) is None

    def test_delete(self, conn):
        channel = create_channel(conn, name="X")
        add_programs(conn, channel.id, [Program("a", "A", minutes(5))])
        assert delete_channel(conn, channel.id) is True
        assert delete_channel(conn, channel.id) is False
        assert get_programs(conn, channel.id) == []


class TestPrograms:
    def test_add_appends_in_order(self, conn):
        channel = create_channel(conn, name="X")
        add_programs(conn, channel.id, [Program("a", "A", minutes(5))])
        add_programs(
            conn, channel.id, [Program("b", "B", minutes(6)), Program("c", "C", minutes(7))]
        )

        stored = get_channel(conn, channel.id)
        assert [p.item_id for p in stored.programs] == ["a", "b", "c"]
        assert stored.programs[1].runtime_ticks == minutes(6)
        assert stored.revision == 2

    def test_set_replaces_list(self, conn):
        channel = create_channel(conn, name="X")
        add_programs(conn, channel.id, [Program("a", "A", minutes(5))])
        result = set_programs(
            conn, channel.id, [Program("c", "C", minutes(7)), Program("b", "B", minutes(6))]
        )
        assert [p.item_id for p in result] == ["c", "b"]
        assert [p.item_id for p in get_programs(conn, channel.id)] == ["c", "b"]

    def test_remove_every_occurrence(self, conn):
        channel = create_channel(conn, name="X")
        add_programs(
            conn,
            channel.id,
            [
                Program("a", "A", minutes(5)),
                Program("b", "B", minutes(6)),
                Program("a", "A", minutes(5)),
            ],
        )
        assert remove_program(conn, channel.id, "a") == 2
        assert [p.item_id for p in get_programs(conn, channel.id)] == ["b"]

    def test_remove_missing_item_keeps_revision(self, conn):
        channel = create_channel(conn, name="X")
        assert remove_program(conn, channel.id, "zzz") == 0
        assert get_channel(conn, channel.id).revision == 0


class TestScheduleSettings:
    def test_defaults(self, conn):
        assert get_schedule_settings(conn) == DEFAULT_SCHEDULE_SETTINGS

    def test_update(self, conn):
        settings = update_schedule_settings(conn, {"guide_days": 7, "unknown": 1})
        assert settings["guide_days"] == 7
        assert settings["preview_hours"] == DEFAULT_SCHEDULE_SETTINGS["preview_hours"]
