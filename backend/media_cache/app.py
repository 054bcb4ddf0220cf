"""
Media Cache Application

Usage:
    media-cache-server            # reads MEDIA_* environment variables
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from .config import MediaCacheConfig
from .routes_fastapi import admin_router, router
from .service import MediaService

logger = logging.getLogger(__name__)


def create_app(config: Optional[MediaCacheConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Raises:
        CacheDirectoryUnavailable: cache root cannot be created
    """
    config = config or MediaCacheConfig.from_env()
    service = MediaService.from_config(config)

    app = FastAPI(title="Media Cache")
    app.state.media_service = service
    app.state.config = config

    # Admin routes first: the fetch router is a catch-all
    app.include_router(admin_router)
    app.include_router(router)

    logger.info(f"[MediaCache] Serving {config.public_dir}, cache at {config.cache_dir}")
    return app


def main() -> None:
    config = MediaCacheConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
