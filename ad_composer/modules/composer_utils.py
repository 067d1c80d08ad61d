# modules/composer_utils.py
from functools import lru_cache
from typing import List, Protocol

import structlog
from PIL import ImageFont

logger = structlog.get_logger(__name__)

# Tried in order after the configured font path
FALLBACK_FONTS = ("arialbd.ttf", "Arial Bold.ttf", "DejaVuSans-Bold.ttf")


@lru_cache(maxsize=64)
def load_font(font_path: str, size: int) -> ImageFont.FreeTypeFont:
    """Safe font loader.

    Results are cached per (path, size) and shared between jobs; fonts are
    only read after creation.
    """
    for candidate in (font_path, *FALLBACK_FONTS):
        if not candidate:
            continue
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue

    logger.warning("font_fallback_default", font_path=font_path, size=size)
    return ImageFont.load_default(size=size)


class TextMeasurer(Protocol):
    def measure(self, text: str, font_size: int) -> float:
        ...


class FontMeasurer:
    """Measures text with the bold ad font through Pillow."""

    def __init__(self, font_path: str):
        self.font_path = font_path

    def font(self, font_size: int) -> ImageFont.FreeTypeFont:
        return load_font(self.font_path, int(font_size))

    def measure(self, text: str, font_size: int) -> float:
        return self.font(font_size).getlength(text)


def clamp_font_size(image_width: int, divisor: float, min_size: int, max_size: int) -> int:
    """Font size proportional to the image width, kept within [min_size, max_size]."""
    return int(min(max(image_width / divisor, min_size), max_size))


def wrap_text(text: str, max_width: float, font_size: int, measurer: TextMeasurer) -> List[str]:
    """Greedy word wrap based on pixel width.

    Words are never split: a word wider than ``max_width`` ends up alone on
    its own (overflowing) line.
    """
    words = text.split(" ")
    lines = []
    current = ""

    for w in words:
        test = current + (" " if current else "") + w
        if measurer.measure(test, font_size) > max_width and current:
            lines.append(current)
            current = w
        else:
            current = test

    if current:
        lines.append(current)
    return lines
