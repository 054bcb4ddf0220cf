"""Filesystem loader for source assets."""

import asyncio
import logging
from pathlib import Path

from .errors import AccessDenied, ResourceNotFound

logger = logging.getLogger(__name__)


class FileSystemSourceLoader:
    """
    Loads source bytes from a public root directory.

    Resource ids are logical paths (``/photos/cat.jpg``) resolved under the
    root; anything that resolves outside it is refused.
    """

    def __init__(self, public_dir: str = "public"):
        self.public_dir = Path(public_dir)

    def resolve(self, resource_id: str) -> Path:
        root = self.public_dir.resolve()
        try:
            path = (root / resource_id.lstrip("/")).resolve()
        except ValueError as e:
            # e.g. an embedded NUL byte
            raise ResourceNotFound(f"Not found: {resource_id!r}") from e
        if not path.is_relative_to(root):
            raise AccessDenied(f"Forbidden: {resource_id}")
        return path

    def _read(self, resource_id: str) -> bytes:
        path = self.resolve(resource_id)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise ResourceNotFound(f"Not found: {resource_id}") from e
        except ValueError as e:
            raise ResourceNotFound(f"Not found: {resource_id!r}") from e
        except OSError as e:
            logger.warning(f"[SourceLoader] Cannot read {resource_id}: {e}")
            raise ResourceNotFound(f"Not found: {resource_id}") from e

    async def load(self, resource_id: str) -> bytes:
        """
        Read the source asset.

        Raises:
            ResourceNotFound: no file at that path
            AccessDenied: path escapes the public root
        """
        return await asyncio.to_thread(self._read, resource_id)
