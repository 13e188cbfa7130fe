"""Media library API endpoints (browse and search the media server)."""

from fastapi import APIRouter, HTTPException, Query, status

from channelarr.api.dependencies import require_media_provider
from channelarr.api.models import LibraryResponse, MediaItemResponse
from channelarr.core import SourceError

router = APIRouter()


@router.get("/libraries", response_model=list[LibraryResponse])
def list_libraries():
    """List the media server's top-level libraries."""
    provider = require_media_provider()
    try:
        libraries = provider.list_libraries()
    except SourceError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from None
    return [LibraryResponse.from_library(lib) for lib in libraries]


@router.get("/search", response_model=list[MediaItemResponse])
def search_media(
    query: str | None = None,
    parent_id: str | None = None,
    limit: int = Query(default=50, ge=1, le=500),
):
    """Search movies, episodes and series, optionally within one library."""
    provider = require_media_provider()
    try:
        items = provider.search_items(query=query, parent_id=parent_id, limit=limit)
    except SourceError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from None
    return [MediaItemResponse.from_metadata(item) for item in items]
