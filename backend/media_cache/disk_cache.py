"""
Disk Cache

File-based cache for transformed images with:
- Age-based freshness from the file modification time
- Lazy expiry (expired entries read as misses, cleanup is explicit)
- Atomic writes (temp file + rename inside the cache directory)
"""

import os
import time
import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Optional, List

from .errors import CacheDirectoryUnavailable

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
TEMP_PREFIX = ".tmp-"


class DiskCache:
    """
    Stores transformed image bytes keyed by cache key.

    Cache structure:
    cache_dir/
    ├── 3f2a9c...e1      (one file per key, no extension)
    └── .tmp-xxxx        (in-progress writes, never read as entries)

    No metadata file is kept: an entry is fresh while
    ``now - mtime <= max_age``.
    """

    def __init__(self, cache_dir: str = "cache/images", max_age_days: int = 7):
        self.cache_dir = Path(cache_dir)
        self.max_age_days = max_age_days
        self.max_age_seconds = max_age_days * SECONDS_PER_DAY

        self._init_cache_dir()

    def _init_cache_dir(self) -> None:
        """Create the cache directory, failing startup if that is impossible."""
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheDirectoryUnavailable(
                f"Cannot create cache directory {self.cache_dir}: {e}"
            ) from e
        if not self.cache_dir.is_dir():
            raise CacheDirectoryUnavailable(f"Cache path is not a directory: {self.cache_dir}")
        logger.info(f"[DiskCache] Cache directory: {self.cache_dir} (max age {self.max_age_days}d)")

    def _entry_path(self, key: str) -> Path:
        return self.cache_dir / key

    def _is_fresh(self, mtime: float, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return now - mtime <= self.max_age_seconds

    def _entry_paths(self) -> List[Path]:
        return [
            path for path in self.cache_dir.iterdir()
            if path.is_file() and not path.name.startswith(TEMP_PREFIX)
        ]

    # ============================================
    # Read / write
    # ============================================

    def _read(self, key: str) -> Optional[bytes]:
        path = self._entry_path(key)
        try:
            mtime = path.stat().st_mtime
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"[DiskCache] Cannot stat {path.name}: {e}")
            return None

        if not self._is_fresh(mtime):
            logger.debug(f"[DiskCache] Expired: {key[:16]}...")
            return None

        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning(f"[DiskCache] Unreadable entry {key[:16]}..., treating as miss: {e}")
            return None

    def _write(self, key: str, data: bytes) -> bool:
        path = self._entry_path(key)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.cache_dir, prefix=TEMP_PREFIX, delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
            logger.debug(f"[DiskCache] Cached: {key[:16]}... ({len(data)} bytes)")
            return True
        except OSError as e:
            logger.error(f"[DiskCache] Failed to cache {key[:16]}...: {e}")
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError as cleanup_error:
                    logger.warning(f"[DiskCache] Leftover temp file {tmp_name}: {cleanup_error}")
            return False

    async def get(self, key: str) -> Optional[bytes]:
        """
        Get cached bytes by key.

        Returns:
            Stored bytes if present and fresh, None otherwise. Expired
            entries stay on disk until overwritten or cleaned up.
        """
        return await asyncio.to_thread(self._read, key)

    async def store(self, key: str, data: bytes) -> bool:
        """
        Store bytes under key.

        Readers never observe a partial file: the data is written to a
        temporary file in the cache directory and renamed into place.

        Returns:
            True if cached successfully, False otherwise.
        """
        return await asyncio.to_thread(self._write, key, data)

    # ============================================
    # Administration
    # ============================================

    def _remove_paths(self, paths: List[Path]) -> int:
        removed = 0
        for path in paths:
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.error(f"[DiskCache] Failed to remove {path.name}: {e}")
        return removed

    def _cleanup_expired(self) -> int:
        now = time.time()
        expired = []
        for path in self._entry_paths():
            try:
                if not self._is_fresh(path.stat().st_mtime, now):
                    expired.append(path)
            except OSError:
                continue
        removed = self._remove_paths(expired)
        if removed:
            logger.info(f"[DiskCache] Cleaned up {removed} expired entries")
        return removed

    async def cleanup_expired(self) -> int:
        """
        Remove all expired entries.

        Only runs when asked; normal reads never delete anything.

        Returns:
            Number of entries removed.
        """
        return await asyncio.to_thread(self._cleanup_expired)

    async def clear_all(self) -> int:
        """
        Clear all cached entries.

        Returns:
            Number of entries removed.
        """
        removed = await asyncio.to_thread(lambda: self._remove_paths(self._entry_paths()))
        logger.info(f"[DiskCache] Cleared all {removed} entries")
        return removed

    def get_stats(self) -> dict:
        """Get cache statistics."""
        now = time.time()
        total_entries = 0
        fresh_entries = 0
        total_size = 0
        for path in self._entry_paths():
            try:
                stat = path.stat()
            except OSError:
                continue
            total_entries += 1
            total_size += stat.st_size
            if self._is_fresh(stat.st_mtime, now):
                fresh_entries += 1
        return {
            "total_entries": total_entries,
            "fresh_entries": fresh_entries,
            "total_size_bytes": total_size,
            "total_size_mb": round(total_size / (1024 * 1024), 2),
            "max_age_days": self.max_age_days,
        }
