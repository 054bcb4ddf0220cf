"""
Content Negotiation

Maps file extensions to content types and decides whether a generic
(non-image) payload is gzip compressed before it is sent.
"""

import gzip
from pathlib import PurePosixPath
from typing import Optional

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Payloads at or below this size are sent uncompressed
MIN_COMPRESS_SIZE = 1024

CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".txt": "text/plain",
    ".json": "application/json",
    ".xml": "application/xml",
}

IMAGE_CONTENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
}

COMPRESSIBLE_CONTENT_TYPES = {
    "text/html",
    "text/css",
    "application/javascript",
    "text/javascript",
    "text/plain",
    "application/json",
    "application/xml",
}


def content_type_for(path: str) -> str:
    """Content type derived from the path's extension."""
    suffix = PurePosixPath(path).suffix.lower()
    return CONTENT_TYPES.get(suffix, DEFAULT_CONTENT_TYPE)


def is_image_content_type(content_type: str) -> bool:
    return content_type in IMAGE_CONTENT_TYPES


def is_compressible(content_type: str) -> bool:
    return content_type in COMPRESSIBLE_CONTENT_TYPES


def should_compress(content_type: str, size: int, accepts_compression: bool) -> bool:
    """
    Decide whether to gzip a generic payload.

    True only when the caller accepts gzip, the type is text-like and the
    body is larger than MIN_COMPRESS_SIZE. Image types are never in the
    compressible set.
    """
    return accepts_compression and is_compressible(content_type) and size > MIN_COMPRESS_SIZE


def accepts_gzip(accept_encoding: Optional[str]) -> bool:
    """
    Whether an Accept-Encoding header value advertises gzip.

    Plain substring match: q-values are not parsed, so ``gzip;q=0`` still
    counts as support.
    """
    return "gzip" in (accept_encoding or "").lower()


def compress(body: bytes) -> bytes:
    return gzip.compress(body)
