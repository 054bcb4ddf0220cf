"""Cache key derivation for transformed images."""

import hashlib

from .options import TransformOptions


def derive_cache_key(resource_id: str, options: TransformOptions) -> str:
    """
    Derive the cache key for a (resource, options) pair.

    Digest input, in order: the resource id (UTF-8), a newline, then
    ``options.serialize()`` (UTF-8). The SHA-256 hex digest is safe to use
    directly as a filename.
    """
    hasher = hashlib.sha256()
    hasher.update(resource_id.encode("utf-8"))
    hasher.update(b"\n")
    hasher.update(options.serialize().encode("utf-8"))
    return hasher.hexdigest()
