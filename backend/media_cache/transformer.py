"""
Image Transformer

Resizes and re-encodes source image bytes according to TransformOptions.
Pure function of its inputs: no I/O, no caching.

Resize policy:
- width and height given: resize to exactly that box
- one dimension given: the other follows the source aspect ratio,
  ``int(source_other * (given / source_given))`` (float ratio, truncated
  toward zero, never below 1)
- neither given: no resize
"""

import logging
from io import BytesIO
from typing import Tuple

from PIL import Image

from .errors import DecodeFailed, EncodeFailed
from .options import OutputFormat, TransformOptions

logger = logging.getLogger(__name__)

# Largest output raster accepted, in pixels
MAX_OUTPUT_PIXELS = Image.MAX_IMAGE_PIXELS or 89_478_485

# Modes every target encoder accepts as-is (JPEG is handled separately)
_PASSTHROUGH_MODES = ("RGB", "RGBA", "L", "LA")


def target_size(source_size: Tuple[int, int], options: TransformOptions) -> Tuple[int, int]:
    """Compute output dimensions for a source of ``source_size``."""
    source_width, source_height = source_size
    width, height = options.width, options.height

    if width is not None and height is not None:
        return width, height
    if width is not None:
        ratio = width / source_width
        return width, max(1, int(source_height * ratio))
    if height is not None:
        ratio = height / source_height
        return max(1, int(source_width * ratio)), height
    return source_width, source_height


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info)


def _prepare_mode(img: Image.Image, output_format: OutputFormat) -> Image.Image:
    """Convert the raster into a mode the target encoder accepts."""
    if output_format is OutputFormat.JPEG:
        if img.mode in ("RGB", "L"):
            return img
        if _has_alpha(img):
            # Flatten transparency onto a white background
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[3])
            return background
        return img.convert("RGB")

    if img.mode in _PASSTHROUGH_MODES:
        return img
    return img.convert("RGBA" if _has_alpha(img) else "RGB")


def transform(source_bytes: bytes, options: TransformOptions) -> bytes:
    """
    Decode, resize and re-encode an image.

    Args:
        source_bytes: Original image bytes
        options: Resize and encode parameters

    Returns:
        Encoded bytes in ``options.format``

    Raises:
        DecodeFailed: source is not a decodable image
        EncodeFailed: encoder rejected the image, or the requested size
            exceeds MAX_OUTPUT_PIXELS
    """
    try:
        img = Image.open(BytesIO(source_bytes))
        img.load()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeFailed(f"Cannot decode source image: {e}") from e

    save_kwargs = {"format": options.format.pil_format}
    if options.encode_quality is not None:
        save_kwargs["quality"] = options.encode_quality

    output = BytesIO()
    try:
        # Palette and bilevel images would be resized with nearest-neighbour
        img = _prepare_mode(img, options.format)

        original_size = img.size
        new_size = target_size(original_size, options)
        if new_size[0] * new_size[1] > MAX_OUTPUT_PIXELS:
            raise EncodeFailed(
                f"Requested size {new_size[0]}x{new_size[1]} exceeds {MAX_OUTPUT_PIXELS} pixels"
            )
        if new_size != original_size:
            img = img.resize(new_size, Image.Resampling.LANCZOS)
            logger.debug(
                f"[Transformer] Resized {original_size[0]}x{original_size[1]} -> {new_size[0]}x{new_size[1]}"
            )

        img.save(output, **save_kwargs)
    except (OSError, ValueError, KeyError, OverflowError, MemoryError) as e:
        raise EncodeFailed(f"Cannot encode image as {options.format.value}: {e}") from e

    return output.getvalue()
