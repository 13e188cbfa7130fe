"""Slot enrichment with library metadata.

Fills guide fields (overview, year, episode numbers, image, movie/series
flags) from a MetadataSource. Enrichment never fails a schedule: missing
items, lookup errors and lookups that miss the deadline leave the slot
with its bare fields.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait

from channelarr.core import ItemKind, ItemMetadata, MetadataSource, Slot, SourceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_WORKERS = 8


def apply_metadata(slot: Slot, metadata: ItemMetadata) -> Slot:
    """Copy metadata onto a slot.

    Episodes take the series name as the slot title so guides show the
    show, with the episode name kept in episode_title.
    """
    slot.overview = metadata.overview
    slot.production_year = metadata.production_year
    slot.image_url = metadata.image_url

    if metadata.kind == ItemKind.MOVIE:
        slot.is_movie = True
    elif metadata.kind == ItemKind.EPISODE:
        slot.is_series = True
        slot.episode_title = metadata.name
        if metadata.episode is not None:
            slot.season_number = metadata.episode.season_number
            slot.episode_number = metadata.episode.episode_number
            if metadata.episode.series_name:
                slot.title = metadata.episode.series_name

    return slot


class SlotEnricher:
    """Augments schedule slots with descriptive metadata."""

    def __init__(
        self,
        metadata_source: MetadataSource,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """Initialize the enricher.

        Args:
            metadata_source: Where item metadata comes from
            timeout: Deadline in seconds for enrich_all (None = no deadline)
            max_workers: Parallel lookups in enrich_all
        """
        self._source = metadata_source
        self._timeout = timeout
        self._max_workers = max_workers

    def _describe(self, item_id: str) -> ItemMetadata | None:
        try:
            metadata = self._source.describe(item_id)
        except SourceError as e:
            logger.warning("[ENRICH] Metadata lookup failed for %s: %s", item_id, e)
            return None
        if metadata is None:
            logger.debug("[ENRICH] Item %s not found, leaving slot bare", item_id)
        return metadata

    def enrich(self, slot: Slot) -> Slot:
        """Enrich a single slot in place and return it."""
        metadata = self._describe(slot.item_id)
        if metadata is None:
            return slot
        return apply_metadata(slot, metadata)

    def enrich_all(self, slots: list[Slot]) -> list[Slot]:
        """Enrich slots with one lookup per distinct item, in parallel.

        Lookups still running at the deadline are abandoned and their slots
        stay bare. The returned list keeps the input order.
        """
        if not slots:
            return slots

        item_ids = list(dict.fromkeys(slot.item_id for slot in slots))
        executor = ThreadPoolExecutor(
            max_workers=min(len(item_ids), self._max_workers),
            thread_name_prefix="enrich",
        )
        try:
            futures: dict[str, Future] = {
                item_id: executor.submit(self._describe, item_id) for item_id in item_ids
            }
            done, not_done = wait(futures.values(), timeout=self._timeout)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if not_done:
            logger.warning(
                "[ENRICH] %d of %d metadata lookups missed the %.1fs deadline",
                len(not_done),
                len(item_ids),
                self._timeout,
            )

        metadata_by_id: dict[str, ItemMetadata] = {}
        for item_id, future in futures.items():
            if future in done and future.exception() is None:
                metadata = future.result()
                if metadata is not None:
                    metadata_by_id[item_id] = metadata
            elif future in done:
                logger.warning(
                    "[ENRICH] Metadata lookup for %s raised: %s", item_id, future.exception()
                )

        for slot in slots:
            metadata = metadata_by_id.get(slot.item_id)
            if metadata is not None:
                apply_metadata(slot, metadata)
        return slots
