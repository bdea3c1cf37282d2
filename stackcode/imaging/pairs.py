"""Two-barcode canvas composition and PNG output."""

import logging
from io import BytesIO

from PIL import Image

from .code128 import BARCODE_HEIGHT, encode
from .errors import CompositionError, SerializationError

MARGIN = 20
TOP_MARGIN = 10
GAP = 20
# Clockwise
ROTATION = 270
BACKGROUND = (255, 255, 255, 255)


def compose_unrotated(id_bitmap: Image.Image, payload_bitmap: Image.Image) -> Image.Image:
    """Stack the two bitmaps on a white canvas, id on top."""
    for name, bitmap in (("id", id_bitmap), ("payload", payload_bitmap)):
        if bitmap.width == 0 or bitmap.height == 0:
            raise CompositionError(f"{name} bitmap is empty ({bitmap.width}x{bitmap.height})")
        if bitmap.height > BARCODE_HEIGHT:
            raise CompositionError(f"{name} bitmap is taller than {BARCODE_HEIGHT}px")

    width = max(id_bitmap.width, payload_bitmap.width) + 2 * MARGIN
    height = 2 * BARCODE_HEIGHT + 2 * MARGIN
    canvas = Image.new("RGBA", (width, height), BACKGROUND)

    canvas.paste(id_bitmap.convert("RGBA"), (MARGIN, TOP_MARGIN))
    canvas.paste(payload_bitmap.convert("RGBA"), (MARGIN, id_bitmap.height + TOP_MARGIN + GAP))
    return canvas


def compose(id_bitmap: Image.Image, payload_bitmap: Image.Image) -> Image.Image:
    """Compose both bitmaps and rotate the canvas to portrait."""
    canvas = compose_unrotated(id_bitmap, payload_bitmap)
    return canvas.rotate(-ROTATION, expand=True)


def serialize(canvas: Image.Image) -> bytes:
    """Encode canvas as PNG bytes."""
    buf = BytesIO()
    try:
        canvas.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise SerializationError(f"PNG encoding failed: {e}") from e
    return buf.getvalue()


def render_pair(self_code: str, payload_code: str) -> Image.Image:
    """Encode both marked texts and compose them."""
    return compose(encode(self_code), encode(payload_code))


def render_pair_png(self_code: str, payload_code: str) -> bytes:
    """Encode both marked texts and return the composed image as PNG."""
    data = serialize(render_pair(self_code, payload_code))
    logging.debug(f"Rendered barcode pair, {len(data)} bytes")
    return data
