"""
Media Cache Configuration

Values come from environment variables, with defaults suitable for local
development:

- MEDIA_CACHE_DIR            cache root (default: cache/images)
- MEDIA_CACHE_MAX_AGE_DAYS   entry lifetime in days (default: 7)
- MEDIA_PUBLIC_DIR           source asset root (default: public)
- MEDIA_HOST / MEDIA_PORT    bind address (default: 127.0.0.1:4221)
- MEDIA_LOG_LEVEL            logging level (default: INFO)
"""

import os
from dataclasses import dataclass


@dataclass
class MediaCacheConfig:
    """Configuration for the media cache service."""
    cache_dir: str = "cache/images"
    max_age_days: int = 7
    public_dir: str = "public"

    # Server settings
    host: str = "127.0.0.1"
    port: int = 4221
    log_level: str = "INFO"

    def __post_init__(self):
        if not isinstance(self.max_age_days, int) or self.max_age_days <= 0:
            raise ValueError(f"max_age_days must be a positive integer, got {self.max_age_days!r}")

    @classmethod
    def from_env(cls) -> "MediaCacheConfig":
        return cls(
            cache_dir=os.getenv("MEDIA_CACHE_DIR", "cache/images"),
            max_age_days=int(os.getenv("MEDIA_CACHE_MAX_AGE_DAYS", "7")),
            public_dir=os.getenv("MEDIA_PUBLIC_DIR", "public"),
            host=os.getenv("MEDIA_HOST", "127.0.0.1"),
            port=int(os.getenv("MEDIA_PORT", "4221")),
            log_level=os.getenv("MEDIA_LOG_LEVEL", "INFO").upper(),
        )
