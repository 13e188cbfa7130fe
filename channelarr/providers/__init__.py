"""Media providers.

The media provider is configured once per process from the environment
(see channelarr.config.get_jellyfin_settings). Consumers call
get_media_provider() - never construct clients directly.
"""

import logging
import threading

from channelarr.config import get_jellyfin_settings
from channelarr.providers.jellyfin import JellyfinClient, JellyfinProvider

logger = logging.getLogger(__name__)

_provider: JellyfinProvider | None = None
_provider_lock = threading.Lock()


def create_media_provider() -> JellyfinProvider | None:
    """Build a provider from current settings.

    Returns:
        JellyfinProvider, or None if no server is configured
    """
    settings = get_jellyfin_settings()
    if not settings["enabled"]:
        logger.info("[PROVIDERS] No Jellyfin server configured")
        return None
    client = JellyfinClient(settings["url"], settings["api_key"], timeout=settings["timeout"])
    logger.info("[PROVIDERS] Using Jellyfin server at %s", client.base_url)
    return JellyfinProvider(client)


def get_media_provider() -> JellyfinProvider | None:
    """Get (or lazily create) the process-wide media provider."""
    global _provider
    if _provider is None:
        with _provider_lock:
            if _provider is None:
                _provider = create_media_provider()
    return _provider


def reset_media_provider() -> None:
    """Drop the cached provider (settings changed, or tests)."""
    global _provider
    with _provider_lock:
        if _provider is not None:
            _provider.client.close()
        _provider = None


__all__ = [
    "JellyfinClient",
    "JellyfinProvider",
    "create_media_provider",
    "get_media_provider",
    "reset_media_provider",
]
