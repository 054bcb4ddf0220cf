"""
Media Cache Module

Serves static assets and transforms images on demand (resize, quality,
output format), persisting each distinct result on disk.

Features:
- Query-driven transforms: ?w=, ?h=, ?q=, ?fmt=
- File-based cache with age-based expiry and atomic writes
- Coalescing of concurrent misses for the same result
- Gzip for large text payloads
"""

from .cache_key import derive_cache_key
from .config import MediaCacheConfig
from .disk_cache import DiskCache
from .errors import (
    AccessDenied,
    CacheDirectoryUnavailable,
    DecodeFailed,
    EncodeFailed,
    MalformedRequest,
    MediaCacheError,
    ResourceNotFound,
    TransformError,
)
from .options import OutputFormat, TransformOptions, parse_options
from .service import FetchResult, MediaService
from .transformer import transform

__all__ = [
    "derive_cache_key",
    "MediaCacheConfig",
    "DiskCache",
    "AccessDenied",
    "CacheDirectoryUnavailable",
    "DecodeFailed",
    "EncodeFailed",
    "MalformedRequest",
    "MediaCacheError",
    "ResourceNotFound",
    "TransformError",
    "OutputFormat",
    "TransformOptions",
    "parse_options",
    "FetchResult",
    "MediaService",
    "transform",
]
