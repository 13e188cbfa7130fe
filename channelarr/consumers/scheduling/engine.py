"""Deterministic schedule generation for virtual channels.

The schedule is computed on the fly from the channel and its programs
rather than stored. A channel's programs form a cycle whose length is
the sum of their runtimes; the cycle repeats forever from the channel's
anchor. Any window [start, end) maps to a position inside some cycle,
and slots are materialized forward from there.

All arithmetic runs on integer ticks from the Unix epoch. For a fixed
channel and program snapshot the output depends only on
(channel, start, end).
"""

import bisect
import logging
from datetime import datetime, timedelta
from itertools import accumulate

from channelarr.core import Channel, Program, ScheduleMode, Slot
from channelarr.utilities.tz import datetime_to_ticks, ticks_to_datetime

from .catalog import ProgramCatalog
from .enricher import SlotEnricher
from .shuffle import cycle_seed, shuffle_deterministic

logger = logging.getLogger(__name__)

NOW_PLAYING_WINDOW = timedelta(minutes=1)


def locate(ordered: list[Program], position_ticks: int) -> tuple[int, int]:
    """Find the program playing at a position inside one cycle.

    Returns:
        (index, offset into that program) for the first program whose
        cumulative end is past the position.
    """
    starts = [0, *accumulate(p.runtime_ticks for p in ordered[:-1])]
    index = bisect.bisect_right(starts, position_ticks) - 1
    return index, position_ticks - starts[index]


class ScheduleEngine:
    """Turns a channel's program list into an infinite, gap-free timeline.

    Stateless over its inputs; safe to call concurrently for the same or
    different channels.

    Usage:
        engine = ScheduleEngine(ProgramCatalog(provider), SlotEnricher(provider))
        slots = engine.generate_schedule(channel, start, end)
        current = engine.now_playing(channel, now)
    """

    def __init__(self, catalog: ProgramCatalog, enricher: SlotEnricher | None = None):
        self._catalog = catalog
        self._enricher = enricher

    def _ordering(
        self, channel: Channel, programs: list[Program], cycle_number: int
    ) -> list[Program]:
        """Program order for one cycle of the channel."""
        if channel.mode == ScheduleMode.SHUFFLE:
            return shuffle_deterministic(programs, cycle_seed(channel.id, cycle_number))
        return programs

    def generate_schedule(self, channel: Channel, start: datetime, end: datetime) -> list[Slot]:
        """Generate slots covering [start, end).

        The first slot may begin before start (mid-program window) and the
        last may end after end. Consecutive slots are contiguous.

        Args:
            channel: Channel to schedule
            start: Window start (timezone-aware)
            end: Window end (timezone-aware)

        Returns:
            Chronological slots; empty when the window is empty or the
            channel has nothing to play
        """
        start_ticks = datetime_to_ticks(start)
        end_ticks = datetime_to_ticks(end)
        if start_ticks >= end_ticks:
            return []

        programs = self._catalog.resolve(channel)
        if not programs:
            logger.warning("[SCHEDULE] Channel '%s' has no programs available", channel.name)
            return []

        cycle_ticks = sum(p.runtime_ticks for p in programs)
        if cycle_ticks <= 0:
            return []

        # Floor division: cycles before the anchor are numbered -1, -2, ...
        anchor_ticks = datetime_to_ticks(channel.anchor)
        cycle_number, position = divmod(start_ticks - anchor_ticks, cycle_ticks)

        ordered = self._ordering(channel, programs, cycle_number)
        index, start_offset = locate(ordered, position)

        slots: list[Slot] = []
        cursor = start_ticks - start_offset

        while cursor < end_ticks:
            program = ordered[index]
            slot_end = cursor + program.runtime_ticks

            if slot_end > start_ticks:
                slots.append(
                    Slot(
                        item_id=program.item_id,
                        title=program.name,
                        start=ticks_to_datetime(cursor),
                        end=ticks_to_datetime(slot_end),
                        runtime_ticks=program.runtime_ticks,
                    )
                )

            cursor = slot_end
            index += 1
            if index == len(ordered):
                # New cycle: Shuffle channels get that cycle's own order
                index = 0
                cycle_number += 1
                ordered = self._ordering(channel, programs, cycle_number)

        logger.debug(
            "[SCHEDULE] Channel '%s': %d slots for %s - %s",
            channel.name,
            len(slots),
            start.isoformat(),
            end.isoformat(),
        )

        if self._enricher is not None:
            slots = self._enricher.enrich_all(slots)
        return slots

    def now_playing(self, channel: Channel, now: datetime) -> Slot | None:
        """Get the slot playing at `now`, with its elapsed offset set.

        Returns:
            The current slot, or None if the channel has nothing to play
        """
        slots = self.generate_schedule(channel, now, now + NOW_PLAYING_WINDOW)
        if not slots:
            return None

        current = slots[0]
        current.elapsed = now - current.start
        return current
