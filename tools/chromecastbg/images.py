"""Image decoding, encoding and the gradient / watermark overlays."""

from __future__ import annotations

import io
import logging

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger("chromecastbg.images")

# Vertical black gradient, mimicking the Chromecast's own display.
GRADIENT_TOP_ALPHA = 0.098
GRADIENT_BOTTOM_ALPHA = 0.9

WATERMARK_PREFIX = "Photo by "
WATERMARK_FONT_SIZE = 24
WATERMARK_OPACITY = 0.25
WATERMARK_MARGIN = 50


def decode(data: bytes) -> Image.Image:
    """Decode image bytes, forcing a full load so corrupt data fails here."""
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def encode_jpeg(image: Image.Image, quality: int = 95) -> bytes:
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


# ── gradient ─────────────────────────────────────────────────────

def gradient_mask(width: int, height: int) -> Image.Image:
    """Build an ``L`` mask fading from the top alpha to the bottom alpha."""
    top = GRADIENT_TOP_ALPHA * 255
    bottom = GRADIENT_BOTTOM_ALPHA * 255
    span = max(height - 1, 1)
    column = Image.new("L", (1, height))
    column.putdata([round(top * (1 - y / span) + bottom * y / span) for y in range(height)])
    return column.resize((width, height), Image.Resampling.NEAREST)


def overlay_gradient(image: Image.Image) -> Image.Image:
    """Return a new RGB image with the gradient composited over ``image``."""
    base = image.convert("RGB")
    black = Image.new("RGB", base.size, (0, 0, 0))
    return Image.composite(black, base, gradient_mask(*base.size))


# ── watermark ────────────────────────────────────────────────────

def load_font(font_path: str | None = None, size: int = WATERMARK_FONT_SIZE) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    if font_path:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError as exc:
            logger.warning("Unable to load font %s (%s). Using the default font.", font_path, exc)
    return ImageFont.load_default(size=size)


def apply_watermark(image: Image.Image, author: str, font_path: str | None = None) -> Image.Image:
    """Draw "Photo by <author>" near the bottom-right corner of ``image``."""
    text = WATERMARK_PREFIX + author
    base = image.convert("RGBA")
    layer = Image.new("RGBA", base.size, (255, 255, 255, 0))
    draw = ImageDraw.Draw(layer)
    font = load_font(font_path)

    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = base.width - (right - left) - WATERMARK_MARGIN
    y = base.height - (bottom - top) - WATERMARK_MARGIN
    draw.text((x, y), text, font=font, fill=(255, 255, 255, round(255 * WATERMARK_OPACITY)))

    return Image.alpha_composite(base, layer).convert("RGB")
