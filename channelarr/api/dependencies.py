"""Helpers shared by API routes."""

from fastapi import HTTPException, status

from channelarr.providers import JellyfinProvider, get_media_provider


def require_media_provider() -> JellyfinProvider:
    """Return the configured media provider or fail the request with 503."""
    provider = get_media_provider()
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No media server configured",
        )
    return provider
