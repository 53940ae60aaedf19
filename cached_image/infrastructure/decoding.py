from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from ..errors import DecodingError

# Modes the PNG encoder accepts as-is.
PNG_MODES = frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"})
ALPHA_TARGETS = {"RGBa": "RGBA", "La": "LA", "PA": "RGBA"}


def normalize_mode(image: Image.Image) -> Image.Image:
    """Convert modes PNG cannot store (CMYK, YCbCr, F, ...) to one it can."""

    if image.mode in PNG_MODES:
        return image
    if image.mode == "F" or image.mode.startswith("I;"):
        return image.convert("I")
    return image.convert(ALPHA_TARGETS.get(image.mode, "RGB"))


def decode_image(data: bytes) -> Image.Image:
    if not data:
        raise DecodingError("empty payload")
    try:
        image = Image.open(io.BytesIO(data))
        # Pillow decodes lazily; force it so truncated payloads fail here.
        image.load()
        return normalize_mode(image)
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise DecodingError(str(exc)) from exc


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    normalize_mode(image).save(buffer, "PNG")
    return buffer.getvalue()
