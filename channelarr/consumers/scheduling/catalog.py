"""Program resolution for virtual channels.

A channel's playable programs come from one of two places:
1. Its explicit program list (Sequential order / Shuffle base list)
2. Otherwise, every configured library, queried through a ContentSource

Library-backed catalogs can be cached per (channel id, revision) with a
TTL. The cache is an optimization only.
"""

import logging
import threading
import time

from channelarr.core import Channel, ContentSource, Program, SourceError

logger = logging.getLogger(__name__)


class ProgramCatalog:
    """Resolves the ordered program list for a channel.

    Usage:
        catalog = ProgramCatalog(content_source, cache_ttl=300)
        programs = catalog.resolve(channel)
    """

    def __init__(self, content_source: ContentSource | None = None, cache_ttl: float = 0):
        """Initialize the catalog.

        Args:
            content_source: Source for library-backed channels (None = explicit lists only)
            cache_ttl: Seconds to keep library-backed results (0 disables caching)
        """
        self._content_source = content_source
        self._cache_ttl = cache_ttl
        self._cache: dict[tuple[str, int], tuple[float, tuple[Program, ...]]] = {}
        self._cache_lock = threading.Lock()

    def resolve(self, channel: Channel) -> list[Program]:
        """Get the programs for a channel.

        Args:
            channel: Channel to resolve

        Returns:
            Programs with positive runtime, in channel order. Empty if
            nothing resolves.
        """
        if channel.programs:
            return [p for p in channel.programs if p.runtime_ticks > 0]

        if not channel.library_ids:
            return []

        if self._content_source is None:
            logger.warning(
                "[CATALOG] Channel '%s' pulls from libraries but no content source is configured",
                channel.name,
            )
            return []

        cache_key = (channel.id, channel.revision)
        cached = self._get_cached(cache_key)
        if cached is not None:
            return list(cached)

        programs = self._resolve_libraries(channel)
        self._set_cached(cache_key, programs)
        return programs

    def _resolve_libraries(self, channel: Channel) -> list[Program]:
        programs: list[Program] = []

        for library_id in channel.library_ids:
            try:
                items = self._content_source.list_items(library_id)
            except SourceError as e:
                logger.warning(
                    "[CATALOG] Skipping library %s for channel '%s': %s",
                    library_id,
                    channel.name,
                    e,
                )
                continue

            # The source decides the order within a library
            for item in items:
                if item.runtime_ticks is None or item.runtime_ticks <= 0:
                    continue
                programs.append(
                    Program(item_id=item.item_id, name=item.name, runtime_ticks=item.runtime_ticks)
                )

        logger.debug(
            "[CATALOG] Resolved %d programs from %d libraries for channel '%s'",
            len(programs),
            len(channel.library_ids),
            channel.name,
        )
        return programs

    def _get_cached(self, key: tuple[str, int]) -> tuple[Program, ...] | None:
        if self._cache_ttl <= 0:
            return None
        with self._cache_lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            expires_at, programs = entry
            if time.monotonic() >= expires_at:
                del self._cache[key]
                return None
            return programs

    def _set_cached(self, key: tuple[str, int], programs: list[Program]) -> None:
        if self._cache_ttl <= 0:
            return
        with self._cache_lock:
            # Older revisions of this channel can never be hit again
            for stale in [k for k in self._cache if k[0] == key[0] and k != key]:
                del self._cache[stale]
            self._cache[key] = (time.monotonic() + self._cache_ttl, tuple(programs))

    def clear_cache(self) -> None:
        """Drop all cached catalogs."""
        with self._cache_lock:
            self._cache.clear()
