"""
Shared fixtures: a deterministic text measurer and in-memory images.
"""

import io

import pytest
from PIL import Image


class FakeMeasurer:
    """Every character is half the font size wide."""

    def __init__(self):
        self.calls = 0

    def measure(self, text: str, font_size: int) -> float:
        self.calls += 1
        return len(text) * font_size / 2


def make_image_bytes(size=(1000, 800), color=(30, 60, 90), fmt="PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def fake_measurer():
    return FakeMeasurer()


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def corrupt_bytes():
    return b"definitely not an image"
