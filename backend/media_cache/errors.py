"""
Media Cache Errors

Every error that can end a fetch carries the HTTP status code the
transport shims answer with.
"""


class MediaCacheError(Exception):
    """Base class for fetch failures."""
    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ResourceNotFound(MediaCacheError):
    """Source asset does not exist."""
    status_code = 404


class AccessDenied(MediaCacheError):
    """Resource path escapes the public root."""
    status_code = 403


class MalformedRequest(MediaCacheError):
    """Request line could not be parsed."""
    status_code = 400


class TransformError(MediaCacheError):
    """Image processing failed. Never retried: the transform is deterministic."""
    status_code = 500


class DecodeFailed(TransformError):
    """Source bytes are not a decodable image."""


class EncodeFailed(TransformError):
    """Encoder rejected the image for the requested format."""


class CacheDirectoryUnavailable(MediaCacheError):
    """Cache root could not be created. Fatal at startup."""
