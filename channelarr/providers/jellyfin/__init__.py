"""Jellyfin provider.

Provides library listings and item metadata from a Jellyfin server via
its HTTP API.
"""

from channelarr.providers.jellyfin.client import JellyfinClient
from channelarr.providers.jellyfin.provider import JellyfinProvider

__all__ = ["JellyfinClient", "JellyfinProvider"]
