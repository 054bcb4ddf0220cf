"""
Transform Options

Parses the query string of an image fetch into a canonical, immutable
TransformOptions value.

Recognized parameters:
- w / width    target width in pixels
- h / height   target height in pixels
- q / quality  encode quality, clamped into [0, 100]
- fmt          output format: jpg, jpeg, png, webp

Anything else is ignored. Parsing never fails: bad values fall back to
defaults.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

DEFAULT_QUALITY = 80


class OutputFormat(Enum):
    """Encoded output format."""
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @property
    def content_type(self) -> str:
        return f"image/{self.value}"

    @property
    def pil_format(self) -> str:
        """Format name understood by Pillow's encoder registry."""
        return self.value.upper()

    @property
    def lossy(self) -> bool:
        return self is not OutputFormat.PNG


_FORMAT_ALIASES = {
    "jpg": OutputFormat.JPEG,
    "jpeg": OutputFormat.JPEG,
    "png": OutputFormat.PNG,
    "webp": OutputFormat.WEBP,
}


@dataclass(frozen=True)
class TransformOptions:
    """
    Resize and re-encode parameters for one image fetch.

    The format carries no quality of its own. Lossy formats read the shared
    ``quality`` field at encode time, so JPEG quality and top-level quality
    can never diverge.
    """
    width: Optional[int] = None
    height: Optional[int] = None
    quality: int = DEFAULT_QUALITY
    format: OutputFormat = OutputFormat.JPEG

    @property
    def encode_quality(self) -> Optional[int]:
        """Quality passed to the encoder, None for lossless formats."""
        return self.quality if self.format.lossy else None

    def serialize(self) -> str:
        """
        Render every field in a fixed order.

        Format: ``w=<width>;h=<height>;q=<quality>;fmt=<format>`` where an
        absent dimension is written as ``-``.
        """
        width = "-" if self.width is None else str(self.width)
        height = "-" if self.height is None else str(self.height)
        return f"w={width};h={height};q={self.quality};fmt={self.format.value}"


MAX_DIMENSION = 2**32 - 1


def _is_ascii_digits(value: str) -> bool:
    # int() would also accept " 50", "+5", "1_000" and non-ASCII digits
    return value.isascii() and value.isdigit()


def _parse_dimension(value: str) -> Optional[int]:
    if not _is_ascii_digits(value):
        return None
    parsed = int(value)
    return parsed if 0 < parsed <= MAX_DIMENSION else None


def _parse_quality(value: str) -> Optional[int]:
    digits = value[1:] if value.startswith("-") else value
    if not _is_ascii_digits(digits):
        return None
    return max(0, min(100, int(value)))


def parse_options(query: Optional[str]) -> TransformOptions:
    """
    Parse a raw, unescaped query string into TransformOptions.

    Pairs are processed left to right, so a later occurrence of a key
    overwrites an earlier one. Pairs without ``=`` are skipped.

    Args:
        query: e.g. ``"w=100&q=50&fmt=webp"``. None or empty yields defaults.

    Returns:
        TransformOptions (never raises)
    """
    width: Optional[int] = None
    height: Optional[int] = None
    quality = DEFAULT_QUALITY
    output_format = OutputFormat.JPEG

    for pair in (query or "").split("&"):
        parts = pair.split("=")
        if len(parts) < 2:
            continue
        key, value = parts[0], parts[1]

        if key in ("w", "width"):
            width = _parse_dimension(value)
        elif key in ("h", "height"):
            height = _parse_dimension(value)
        elif key in ("q", "quality"):
            parsed = _parse_quality(value)
            if parsed is not None:
                quality = parsed
        elif key == "fmt":
            output_format = _FORMAT_ALIASES.get(value.lower(), output_format)

    return TransformOptions(
        width=width,
        height=height,
        quality=quality,
        format=output_format,
    )
