"""
Image transformer tests

Run:
    cd backend
    pytest tests/test_transformer.py -v
"""

from io import BytesIO

import pytest
from PIL import Image

from media_cache.errors import DecodeFailed, EncodeFailed, TransformError
from media_cache.options import OutputFormat, TransformOptions
from media_cache.transformer import target_size, transform
from conftest import image_size


# ============================================
# 1. target_size
# ============================================

class TestTargetSize:
    """Resize policy"""

    def test_both_dimensions_exact_box(self):
        assert target_size((400, 300), TransformOptions(width=50, height=50)) == (50, 50)

    def test_width_only_keeps_ratio(self):
        assert target_size((400, 300), TransformOptions(width=100)) == (100, 75)

    def test_height_only_keeps_ratio(self):
        assert target_size((400, 300), TransformOptions(height=100)) == (133, 100)

    def test_truncates_toward_zero(self):
        # 301 * (200 / 400) = 150.5
        assert target_size((400, 301), TransformOptions(width=200)) == (200, 150)

    def test_never_below_one_pixel(self):
        assert target_size((1000, 2), TransformOptions(width=10)) == (10, 1)

    def test_no_dimensions_no_resize(self):
        assert target_size((400, 300), TransformOptions()) == (400, 300)


# ============================================
# 2. transform
# ============================================

class TestTransform:
    """Decode, resize, encode"""

    def test_width_only_round_trip(self, make_image):
        source = make_image(640, 427, "PNG")

        fmt, width, height = image_size(transform(source, TransformOptions(width=200)))

        assert fmt == "JPEG"
        assert width == 200
        assert abs(height - round(427 * 200 / 640)) <= 1

    def test_webp_output(self, make_image):
        source = make_image(400, 300, "JPEG")
        options = TransformOptions(width=100, quality=50, format=OutputFormat.WEBP)

        assert image_size(transform(source, options)) == ("WEBP", 100, 75)

    def test_png_keeps_alpha(self, make_image):
        source = make_image(64, 64, "PNG", mode="RGBA")

        data = transform(source, TransformOptions(width=32, format=OutputFormat.PNG))

        assert image_size(data) == ("PNG", 32, 32)

    def test_jpeg_from_transparent_source(self, make_image):
        source = make_image(64, 64, "PNG", mode="RGBA")

        assert image_size(transform(source, TransformOptions()))[0] == "JPEG"

    def test_quality_affects_lossy_output(self, make_image):
        # Noisy image so quality changes are visible in size
        img = Image.effect_noise((200, 200), 64).convert("RGB")
        buf = BytesIO()
        img.save(buf, format="PNG")

        low = transform(buf.getvalue(), TransformOptions(quality=10))
        high = transform(buf.getvalue(), TransformOptions(quality=95))

        assert len(low) < len(high)

    def test_deterministic(self, make_image):
        source = make_image(120, 80, "JPEG")
        options = TransformOptions(height=40, format=OutputFormat.WEBP)

        assert transform(source, options) == transform(source, options)

    def test_decode_failure(self):
        with pytest.raises(DecodeFailed):
            transform(b"not an image", TransformOptions(width=10))

    def test_truncated_source_fails_decode(self):
        buf = BytesIO()
        Image.effect_noise((100, 100), 64).save(buf, format="PNG")
        source = buf.getvalue()

        with pytest.raises(TransformError):
            transform(source[: len(source) // 2], TransformOptions())

    def test_encode_failure(self, make_image, monkeypatch):
        source = make_image(10, 10, "PNG")

        def broken_save(self, *args, **kwargs):
            raise OSError("encoder error")

        monkeypatch.setattr(Image.Image, "save", broken_save)

        with pytest.raises(EncodeFailed):
            transform(source, TransformOptions())

    def test_oversized_width_fails_encode(self, make_image):
        source = make_image(40, 30, "JPEG")

        with pytest.raises(EncodeFailed):
            transform(source, TransformOptions(width=3_000_000_000))

    def test_oversized_box_fails_encode(self, make_image):
        source = make_image(40, 30, "JPEG")

        with pytest.raises(EncodeFailed) as exc_info:
            transform(source, TransformOptions(width=60000, height=60000))

        assert exc_info.value.status_code == 500
