"""
Media cache test configuration

Fixtures build throwaway public/cache directories under pytest's tmp_path
and small in-memory images, so no test touches the real filesystem layout.
"""

import sys
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from media_cache.config import MediaCacheConfig
from media_cache.disk_cache import DiskCache
from media_cache.service import MediaService
from media_cache.source import FileSystemSourceLoader


# ============================================
# Image Fixtures
# ============================================

@pytest.fixture
def make_image():
    """
    Factory for encoded test images.

    Usage:
    ```python
    def test_something(make_image):
        data = make_image(400, 300, "JPEG")
    ```
    """
    colors = {"RGB": (200, 80, 40), "RGBA": (200, 80, 40, 128), "L": 128}

    def _make(width: int, height: int, fmt: str = "JPEG", mode: str = "RGB") -> bytes:
        img = Image.new(mode, (width, height), colors[mode])
        output = BytesIO()
        img.save(output, format=fmt)
        return output.getvalue()

    return _make


# ============================================
# Directory Fixtures
# ============================================

@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache" / "images"


@pytest.fixture
def public_dir(tmp_path, make_image):
    """
    Public root with preset assets:
    - /photo.jpg:   400x300 JPEG
    - /logo.png:    64x64 RGBA PNG
    - /broken.jpg:  not an image
    - /index.html:  2000-byte HTML page
    - /small.html:  500-byte HTML page
    - /data.bin:    unknown type
    """
    root = tmp_path / "public"
    root.mkdir()
    (root / "photo.jpg").write_bytes(make_image(400, 300, "JPEG"))
    (root / "logo.png").write_bytes(make_image(64, 64, "PNG", mode="RGBA"))
    (root / "broken.jpg").write_bytes(b"definitely not a jpeg")
    (root / "index.html").write_bytes(b"<p>" + b"a" * 1993 + b"</p>")
    (root / "small.html").write_bytes(b"<p>" + b"b" * 493 + b"</p>")
    (root / "data.bin").write_bytes(bytes(range(256)) * 8)
    return root


@pytest.fixture
def config(cache_dir, public_dir):
    return MediaCacheConfig(cache_dir=str(cache_dir), max_age_days=7, public_dir=str(public_dir))


@pytest.fixture
def disk_cache(cache_dir):
    return DiskCache(str(cache_dir), max_age_days=7)


@pytest.fixture
def service(config):
    return MediaService.from_config(config)


@pytest.fixture
def counting_transformer():
    """
    Wraps the real transform and counts invocations.

    Usage:
    ```python
    service = MediaService(cache, loader, transformer=counting_transformer)
    assert counting_transformer.calls == 1
    ```
    """
    from media_cache.transformer import transform

    class CountingTransformer:
        def __init__(self):
            self.calls = 0

        def __call__(self, data, options):
            self.calls += 1
            return transform(data, options)

    return CountingTransformer()


@pytest.fixture
def counted_service(disk_cache, public_dir, counting_transformer):
    return MediaService(
        cache=disk_cache,
        loader=FileSystemSourceLoader(str(public_dir)),
        transformer=counting_transformer,
    )


# ============================================
# Helper Functions
# ============================================

def image_size(data: bytes):
    """(format, width, height) of encoded image bytes."""
    with Image.open(BytesIO(data)) as img:
        return img.format, img.width, img.height
