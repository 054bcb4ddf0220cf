"""
Media Service

The single ``fetch`` operation behind every transport:

    load source
      ├── image + query  → parse options → cache key → DiskCache
      │                      ├── hit  → respond
      │                      └── miss → transform → store → respond
      └── otherwise      → negotiate compression → respond
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .cache_key import derive_cache_key
from .config import MediaCacheConfig
from .disk_cache import DiskCache
from .negotiation import compress, content_type_for, is_image_content_type, should_compress
from .options import TransformOptions, parse_options
from .singleflight import SingleFlight
from .source import FileSystemSourceLoader
from .transformer import transform

logger = logging.getLogger(__name__)

Transform = Callable[[bytes, TransformOptions], bytes]


@dataclass
class FetchResult:
    """Outcome of a successful fetch."""
    content_type: str
    body: bytes
    compressed: bool = False
    cache_status: Optional[str] = None  # "HIT" / "MISS" on the transform path


class MediaService:
    """
    Serves source assets, transforming and caching images on demand.

    Usage:
        service = MediaService.from_config(MediaCacheConfig.from_env())
        result = await service.fetch("/photo.jpg", "w=100&fmt=webp")
    """

    def __init__(
        self,
        cache: DiskCache,
        loader: FileSystemSourceLoader,
        transformer: Transform = transform,
    ):
        self.cache = cache
        self.loader = loader
        self._transform = transformer
        self._inflight = SingleFlight()

    @classmethod
    def from_config(cls, config: MediaCacheConfig) -> "MediaService":
        """Build the service; raises CacheDirectoryUnavailable if the cache root is unusable."""
        return cls(
            cache=DiskCache(config.cache_dir, config.max_age_days),
            loader=FileSystemSourceLoader(config.public_dir),
        )

    async def fetch(
        self,
        resource_id: str,
        raw_query: Optional[str] = None,
        accepts_compression: bool = False,
    ) -> FetchResult:
        """
        Fetch a resource, applying transform options for images.

        Args:
            resource_id: Logical path of the source asset
            raw_query: Unescaped query string, e.g. ``"w=100&q=50"``
            accepts_compression: Caller advertised gzip support

        Raises:
            ResourceNotFound, AccessDenied: source could not be loaded
            TransformError: image could not be decoded or encoded
        """
        data = await self.loader.load(resource_id)
        content_type = content_type_for(resource_id)

        if is_image_content_type(content_type) and raw_query:
            return await self._fetch_transformed(resource_id, data, parse_options(raw_query))

        compressed = should_compress(content_type, len(data), accepts_compression)
        body = compress(data) if compressed else data
        if compressed:
            logger.debug(f"[MediaService] Compressed {resource_id}: {len(data)} -> {len(body)} bytes")
        return FetchResult(content_type=content_type, body=body, compressed=compressed)

    async def _fetch_transformed(
        self, resource_id: str, data: bytes, options: TransformOptions
    ) -> FetchResult:
        key = derive_cache_key(resource_id, options)
        content_type = options.format.content_type

        cached = await self.cache.get(key)
        if cached is not None:
            logger.info(f"[MediaService] Cache hit for {resource_id}")
            return FetchResult(content_type=content_type, body=cached, cache_status="HIT")

        logger.info(f"[MediaService] Cache miss for {resource_id} ({options.serialize()})")
        body = await self._inflight.do(key, lambda: self._transform_and_store(key, data, options))
        return FetchResult(content_type=content_type, body=body, cache_status="MISS")

    async def _transform_and_store(self, key: str, data: bytes, options: TransformOptions) -> bytes:
        body = await asyncio.to_thread(self._transform, data, options)
        if not await self.cache.store(key, body):
            # Non-fatal: the next request recomputes
            logger.warning(f"[MediaService] Serving uncached result for key {key[:16]}...")
        return body
