"""Tests for deterministic schedule generation."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from conftest import FakeMetadataSource, at_minute, make_channel, minutes

from channelarr.consumers.scheduling import (
    ProgramCatalog,
    ScheduleEngine,
    SlotEnricher,
    cycle_seed,
    locate,
    shuffle_deterministic,
)
from channelarr.core import UNIX_EPOCH, ItemKind, ItemMetadata, Program, ScheduleMode


@pytest.fixture
def engine() -> ScheduleEngine:
    return ScheduleEngine(ProgramCatalog())


def item_ids(slots) -> list[str]:
    return [s.item_id for s in slots]


class TestHelpers:
    def test_locate(self, abc_programs):
        assert locate(abc_programs, 0) == (0, 0)
        assert locate(abc_programs, minutes(35)) == (1, minutes(5))
        assert locate(abc_programs, minutes(50)) == (2, 0)
        assert locate(abc_programs, minutes(59)) == (2, minutes(9))


class TestSequentialSchedule:
    """A 30, B 20, C 10 minutes from the Unix epoch."""

    def test_window_mid_program(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        slots = engine.generate_schedule(channel, at_minute(65), at_minute(95))

        assert item_ids(slots) == ["A", "B"]
        assert slots[0].start == at_minute(60)
        assert slots[0].end == at_minute(90)
        assert slots[1].start == at_minute(90)
        assert slots[1].end == at_minute(110)

    def test_window_on_boundary_starts_with_that_program(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        slots = engine.generate_schedule(channel, at_minute(30), at_minute(50))
        assert item_ids(slots) == ["B"]
        assert slots[0].start == at_minute(30)

    def test_loops_in_configured_order(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        slots = engine.generate_schedule(channel, at_minute(0), at_minute(180))
        assert item_ids(slots) == ["A", "B", "C"] * 3

    def test_contiguous_and_covering(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        start, end = at_minute(17), at_minute(17 + 60 * 24)
        slots = engine.generate_schedule(channel, start, end)

        assert slots[0].start <= start < slots[0].end
        assert slots[-1].start < end <= slots[-1].end
        for previous, current in zip(slots, slots[1:]):
            assert previous.end == current.start

    def test_slot_length_matches_runtime(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        for slot in engine.generate_schedule(channel, at_minute(0), at_minute(120)):
            assert slot.duration == timedelta(microseconds=slot.runtime_ticks // 10)
            assert slot.title in {"Alpha", "Bravo", "Charlie"}

    def test_deterministic(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        first = engine.generate_schedule(channel, at_minute(1000), at_minute(2000))
        second = engine.generate_schedule(channel, at_minute(1000), at_minute(2000))
        assert [(s.item_id, s.start, s.end) for s in first] == [
            (s.item_id, s.start, s.end) for s in second
        ]

    def test_overlapping_windows_agree(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        wide = engine.generate_schedule(channel, at_minute(0), at_minute(600))
        narrow = engine.generate_schedule(channel, at_minute(245), at_minute(300))
        wide_by_start = {s.start: s.item_id for s in wide}
        for slot in narrow:
            assert wide_by_start[slot.start] == slot.item_id

    def test_zero_runtime_programs_are_skipped(self, engine, abc_programs):
        channel = make_channel([*abc_programs, Program("Z", "Zero", 0)])
        slots = engine.generate_schedule(channel, at_minute(0), at_minute(60))
        assert "Z" not in item_ids(slots)

    def test_anchor_shifts_timeline(self, engine, abc_programs):
        anchor = at_minute(10)
        channel = make_channel(abc_programs, anchor=anchor)
        slots = engine.generate_schedule(channel, anchor, anchor + timedelta(minutes=30))
        assert item_ids(slots) == ["A"]
        assert slots[0].start == anchor

    def test_non_utc_timezones_are_equivalent(self, engine, abc_programs):
        from zoneinfo import ZoneInfo

        channel = make_channel(abc_programs)
        start_utc = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)
        start_ny = start_utc.astimezone(ZoneInfo("America/New_York"))
        a = engine.generate_schedule(channel, start_utc, start_utc + timedelta(hours=3))
        b = engine.generate_schedule(channel, start_ny, start_ny + timedelta(hours=3))
        assert [(s.item_id, s.start) for s in a] == [(s.item_id, s.start) for s in b]


class TestAnchorWrap:
    """Queries before the anchor map onto the same cycle positions."""

    def test_before_anchor_matches_after_anchor(self, engine, abc_programs):
        anchor = datetime(2024, 1, 1, tzinfo=UTC)
        channel = make_channel(abc_programs, anchor=anchor)
        cycle = timedelta(minutes=60)

        after = engine.generate_schedule(
            channel, anchor + timedelta(minutes=5), anchor + timedelta(minutes=65)
        )
        before = engine.generate_schedule(
            channel,
            anchor - 2 * cycle + timedelta(minutes=5),
            anchor - 2 * cycle + timedelta(minutes=65),
        )

        assert item_ids(before) == item_ids(after)
        assert [s.start + 2 * cycle for s in before] == [s.start for s in after]

    def test_shuffle_before_anchor_keeps_cycle_boundaries(self, engine, abc_programs):
        anchor = datetime(2024, 1, 1, tzinfo=UTC)
        channel = make_channel(abc_programs, mode=ScheduleMode.SHUFFLE, anchor=anchor, id="wrap")
        cycle = timedelta(minutes=60)

        slots = engine.generate_schedule(channel, anchor - 2 * cycle, anchor - cycle)

        assert slots[0].start == anchor - 2 * cycle
        assert slots[-1].end == anchor - cycle
        expected = shuffle_deterministic(abc_programs, cycle_seed("wrap", -2))
        assert item_ids(slots) == [p.item_id for p in expected]

    def test_window_spanning_anchor_is_contiguous(self, engine, abc_programs):
        anchor = datetime(2024, 1, 1, tzinfo=UTC)
        channel = make_channel(abc_programs, anchor=anchor)
        slots = engine.generate_schedule(
            channel, anchor - timedelta(minutes=45), anchor + timedelta(minutes=45)
        )
        for previous, current in zip(slots, slots[1:]):
            assert previous.end == current.start
        assert any(s.start == anchor and s.item_id == "A" for s in slots)

    def test_shuffle_window_spanning_anchor_agrees_with_later_window(self, engine):
        programs = [Program(f"item{i}", f"Item {i}", minutes(10)) for i in range(8)]
        anchor = datetime(2030, 1, 1, tzinfo=UTC)
        channel = make_channel(programs, mode=ScheduleMode.SHUFFLE, anchor=anchor, id="spans")

        early = engine.generate_schedule(
            channel, anchor - timedelta(minutes=30), anchor + timedelta(minutes=80)
        )
        late = engine.generate_schedule(channel, anchor, anchor + timedelta(minutes=80))

        early_by_start = {s.start: s.item_id for s in early}
        assert [early_by_start[s.start] for s in late] == item_ids(late)
        first_cycle = shuffle_deterministic(programs, cycle_seed("spans", 0))
        assert item_ids(late)[:8] == [p.item_id for p in first_cycle]

        current = engine.now_playing(channel, anchor + timedelta(minutes=15))
        assert current.item_id == early_by_start[anchor + timedelta(minutes=10)]


class TestShuffleSchedule:
    def programs(self, count: int = 8) -> list[Program]:
        return [Program(f"item{i}", f"Item {i}", minutes(10 + i)) for i in range(count)]

    def test_each_cycle_is_a_permutation(self, engine):
        programs = self.programs()
        cycle_minutes = sum(p.runtime_ticks for p in programs) // minutes(1)
        channel = make_channel(programs, mode=ScheduleMode.SHUFFLE)

        slots = engine.generate_schedule(channel, at_minute(0), at_minute(3 * cycle_minutes))
        assert len(slots) == 3 * len(programs)
        all_ids = sorted(p.item_id for p in programs)
        for k in range(3):
            block = item_ids(slots[k * len(programs) : (k + 1) * len(programs)])
            assert sorted(block) == all_ids

    def test_cycle_order_comes_from_cycle_seed(self, engine):
        programs = self.programs()
        cycle_minutes = sum(p.runtime_ticks for p in programs) // minutes(1)
        channel = make_channel(programs, mode=ScheduleMode.SHUFFLE, id="shuffled")

        for k in (0, 1, 5):
            start = at_minute(k * cycle_minutes)
            slots = engine.generate_schedule(
                channel, start, start + timedelta(minutes=cycle_minutes)
            )
            expected = shuffle_deterministic(programs, cycle_seed("shuffled", k))
            assert item_ids(slots) == [p.item_id for p in expected]

    def test_mid_cycle_query_matches_full_cycle(self, engine):
        programs = self.programs()
        channel = make_channel(programs, mode=ScheduleMode.SHUFFLE)
        full = engine.generate_schedule(channel, at_minute(0), at_minute(500))
        partial = engine.generate_schedule(channel, at_minute(123), at_minute(300))
        full_by_start = {s.start: s.item_id for s in full}
        for slot in partial:
            assert full_by_start[slot.start] == slot.item_id

    def test_channel_id_changes_order(self, engine):
        programs = self.programs(12)
        orders = set()
        for channel_id in ("one", "two", "three", "four"):
            channel = make_channel(programs, mode=ScheduleMode.SHUFFLE, id=channel_id)
            slots = engine.generate_schedule(channel, at_minute(0), at_minute(60))
            orders.add(tuple(item_ids(slots)))
        assert len(orders) > 1


class TestEdgeCases:
    def test_empty_catalog(self, engine):
        channel = make_channel([])
        assert engine.generate_schedule(channel, at_minute(0), at_minute(60)) == []
        assert engine.now_playing(channel, at_minute(0)) is None

    def test_start_not_before_end(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        assert engine.generate_schedule(channel, at_minute(60), at_minute(60)) == []
        assert engine.generate_schedule(channel, at_minute(90), at_minute(60)) == []

    def test_naive_datetimes_rejected(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        with pytest.raises(ValueError):
            engine.generate_schedule(channel, datetime(2024, 1, 1), datetime(2024, 1, 2))

    def test_only_zero_runtime_programs(self, engine):
        channel = make_channel([Program("Z", "Zero", 0)])
        assert engine.generate_schedule(channel, at_minute(0), at_minute(60)) == []


class TestNowPlaying:
    def test_returns_current_slot_with_elapsed(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        slot = engine.now_playing(channel, at_minute(35))

        assert slot.item_id == "B"
        assert slot.start == at_minute(30)
        assert slot.end == at_minute(50)
        assert slot.elapsed == timedelta(minutes=5)

    def test_on_boundary_elapsed_zero(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        slot = engine.now_playing(channel, at_minute(50))
        assert slot.item_id == "C"
        assert slot.elapsed == timedelta(0)

    def test_far_future(self, engine, abc_programs):
        channel = make_channel(abc_programs)
        now = UNIX_EPOCH + timedelta(days=20000, minutes=35)
        slot = engine.now_playing(channel, now)
        assert slot.item_id == "B"
        assert slot.elapsed == timedelta(minutes=5)


class TestEnrichment:
    def test_slots_are_enriched(self, abc_programs):
        source = FakeMetadataSource(
            {
                "A": ItemMetadata("A", "Alpha", kind=ItemKind.MOVIE, production_year=1999),
            }
        )
        engine = ScheduleEngine(ProgramCatalog(), SlotEnricher(source))
        slots = engine.generate_schedule(make_channel(abc_programs), at_minute(0), at_minute(60))

        assert slots[0].is_movie is True
        assert slots[0].production_year == 1999
        assert slots[1].is_movie is False

    def test_no_enricher_leaves_slots_bare(self, engine, abc_programs):
        slots = engine.generate_schedule(make_channel(abc_programs), at_minute(0), at_minute(60))
        assert all(s.overview is None and not s.is_movie for s in slots)

    def test_enricher_not_called_for_empty_schedule(self):
        enricher = MagicMock(spec=SlotEnricher)
        engine = ScheduleEngine(ProgramCatalog(), enricher)
        engine.generate_schedule(make_channel([]), at_minute(0), at_minute(60))
        enricher.enrich_all.assert_not_called()
