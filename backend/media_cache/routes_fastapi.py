"""
Media Cache API Routes

Provides endpoints for:
- Fetching assets, with on-the-fly image transforms (catch-all GET)
- Cache statistics
- Cache management (cleanup, clear)
"""

import logging
from typing import Optional
from urllib.parse import unquote
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import Response
from pydantic import BaseModel

from .errors import MediaCacheError
from .negotiation import accepts_gzip
from .response import AssembledResponse, assemble, assemble_error
from .service import MediaService
from .transport import resolve_resource_id

logger = logging.getLogger(__name__)


def get_media_service(request: Request) -> MediaService:
    """Service instance built by create_app()."""
    return request.app.state.media_service


def _to_response(assembled: AssembledResponse) -> Response:
    return Response(
        content=assembled.body,
        status_code=assembled.status_code,
        headers=assembled.headers,
    )


# ============================================
# Response Models
# ============================================

class CacheStats(BaseModel):
    total_entries: int
    fresh_entries: int
    total_size_bytes: int
    total_size_mb: float
    max_age_days: int


class CacheStatsResponse(BaseModel):
    success: bool
    stats: CacheStats


class CleanupResponse(BaseModel):
    success: bool
    removed_entries: int
    current_stats: CacheStats


class ClearResponse(BaseModel):
    success: bool
    removed_entries: int
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str
    cache_stats: CacheStats


# ============================================
# Admin Router
# ============================================

admin_router = APIRouter(prefix="/api/media-cache", tags=["Media Cache"])


@admin_router.get("/stats", response_model=CacheStatsResponse)
async def get_cache_stats(service: MediaService = Depends(get_media_service)):
    """
    Get cache statistics.

    Returns entry counts (total and still fresh), size on disk and the
    configured max age.
    """
    return CacheStatsResponse(success=True, stats=CacheStats(**service.cache.get_stats()))


@admin_router.post("/cleanup", response_model=CleanupResponse)
async def cleanup_cache(service: MediaService = Depends(get_media_service)):
    """
    Remove expired cache entries.

    Reads never delete expired entries, so this is the only way they leave
    the disk short of being overwritten.
    """
    removed = await service.cache.cleanup_expired()
    return CleanupResponse(
        success=True,
        removed_entries=removed,
        current_stats=CacheStats(**service.cache.get_stats()),
    )


@admin_router.delete("/clear", response_model=ClearResponse)
async def clear_cache(service: MediaService = Depends(get_media_service)):
    """Clear all cached images."""
    removed = await service.cache.clear_all()
    return ClearResponse(success=True, removed_entries=removed, message="Cache cleared successfully")


@admin_router.get("/health", response_model=HealthResponse)
async def health_check(service: MediaService = Depends(get_media_service)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        service="media-cache",
        cache_stats=CacheStats(**service.cache.get_stats()),
    )


# ============================================
# Fetch Router
# ============================================

router = APIRouter(tags=["Media"])


@router.get("/{resource_path:path}")
async def fetch_resource(
    resource_path: str,
    request: Request,
    accept_encoding: Optional[str] = Header(None),
    service: MediaService = Depends(get_media_service),
):
    """
    Serve an asset from the public directory.

    Image assets with a query string are resized/re-encoded and cached:

        GET /photo.jpg?w=100&q=50&fmt=webp

    Other assets are served as-is, gzip compressed when the caller accepts
    it and the payload is large enough.
    """
    resource_id = resolve_resource_id("/" + resource_path)
    raw_query = unquote(request.url.query) or None

    try:
        result = await service.fetch(resource_id, raw_query, accepts_gzip(accept_encoding))
    except MediaCacheError as e:
        logger.error(f"[MediaRoutes] {resource_id} failed ({e.status_code}): {e.message}")
        return _to_response(assemble_error(e.status_code, e.message))

    extra_headers = {"X-Cache": result.cache_status} if result.cache_status else None
    return _to_response(
        assemble(result.content_type, result.body, result.compressed, extra_headers=extra_headers)
    )
