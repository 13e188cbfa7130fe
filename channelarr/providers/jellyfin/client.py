"""Jellyfin API HTTP client.

Handles raw HTTP requests to a Jellyfin server.
No data transformation - just fetch and return JSON.
"""

import logging
import threading
import time

import httpx

logger = logging.getLogger(__name__)

# Fields requested on item queries (everything the catalog and enricher read)
ITEM_FIELDS = "Overview,SortName,ProductionYear,ParentIndexNumber,IndexNumber,SeriesName"

PLAYABLE_ITEM_TYPES = "Movie,Episode"
SEARCHABLE_ITEM_TYPES = "Movie,Episode,Series"


class JellyfinClient:
    """Low-level Jellyfin API client with retries."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        retry_count: int = 3,
        retry_delay: float = 1.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Server URL (e.g., "http://localhost:8096")
            api_key: Jellyfin API key
            timeout: Request timeout in seconds
            retry_count: Attempts per request
            retry_delay: Base delay between attempts (multiplied by attempt number)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._retry_count = retry_count
        self._retry_delay = retry_delay
        self._transport = transport
        self._client: httpx.Client | None = None
        self._lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            with self._lock:
                # Double-check after acquiring lock
                if self._client is None:
                    self._client = httpx.Client(
                        base_url=self._base_url,
                        timeout=self._timeout,
                        headers={
                            "X-Emby-Token": self._api_key,
                            "Accept": "application/json",
                        },
                        limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
                        transport=self._transport,
                    )
        return self._client

    def _request(self, path: str, params: dict | None = None) -> dict | None:
        """Make HTTP GET request with retry logic."""
        for attempt in range(self._retry_count):
            try:
                response = self._get_client().get(path, params=params)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                logger.warning("[JELLYFIN] HTTP %d for %s", e.response.status_code, path)
                # Client errors will not fix themselves on retry
                if e.response.status_code < 500:
                    return None
                if attempt < self._retry_count - 1:
                    time.sleep(self._retry_delay * (attempt + 1))
                    continue
                return None
            except (httpx.RequestError, ValueError) as e:
                # ValueError: response body was not JSON
                logger.warning("[JELLYFIN] Request failed for %s: %s", path, e)
                if attempt < self._retry_count - 1:
                    time.sleep(self._retry_delay * (attempt + 1))
                    continue
                return None

        return None

    def close(self) -> None:
        """Close the underlying HTTP client."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def get_items(self, **params) -> dict | None:
        """Query /Items.

        Args:
            **params: Jellyfin query parameters (ParentId, IncludeItemTypes, ...)

        Returns:
            Raw response ({"Items": [...], "TotalRecordCount": n}) or None on error
        """
        query = {"Fields": ITEM_FIELDS, **{k: v for k, v in params.items() if v is not None}}
        return self._request("/Items", query)

    def get_library_items(self, library_id: str) -> dict | None:
        """All playable items under a library, sorted by sort name."""
        return self.get_items(
            ParentId=library_id,
            Recursive="true",
            IsVirtualItem="false",
            IncludeItemTypes=PLAYABLE_ITEM_TYPES,
            SortBy="SortName",
            SortOrder="Ascending",
        )

    def get_item(self, item_id: str) -> dict | None:
        """Fetch one item by ID.

        Returns:
            Raw item dict, empty dict if the server has no such item, None on error
        """
        data = self.get_items(Ids=item_id)
        if data is None:
            return None
        items = data.get("Items") or []
        return items[0] if items else {}

    def get_series_episodes(self, series_id: str) -> dict | None:
        """All episodes of a series, by season then episode number."""
        return self.get_items(
            ParentId=series_id,
            Recursive="true",
            IsVirtualItem="false",
            IncludeItemTypes="Episode",
            SortBy="ParentIndexNumber,IndexNumber",
            SortOrder="Ascending",
        )

    def search_items(
        self, query: str | None = None, parent_id: str | None = None, limit: int = 50
    ) -> dict | None:
        """Search movies, episodes and series."""
        return self.get_items(
            SearchTerm=query or None,
            ParentId=parent_id or None,
            Recursive="true",
            IsVirtualItem="false",
            IncludeItemTypes=SEARCHABLE_ITEM_TYPES,
            SortBy="SortName",
            SortOrder="Ascending",
            Limit=limit,
        )

    def get_libraries(self) -> dict | None:
        """Top-level media folders."""
        return self._request("/Library/MediaFolders")
