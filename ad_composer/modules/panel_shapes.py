# modules/panel_shapes.py
import math
from enum import Enum
from typing import List, Sequence, Tuple

import numpy as np
import structlog
from PIL import Image, ImageChops, ImageDraw, ImageFilter

from .panel_layout import VERTICAL_PADDING, PanelGeometry

logger = structlog.get_logger(__name__)

Point = Tuple[float, float]
ColorStop = Tuple[float, Tuple[int, int, int, int]]

CORNER_RADIUS = 30
CORNER_STEPS = 8
CURVE_STEPS = 24

# Arch rises from the body's top edge up to the geometry's top
ARCH_HEIGHT = VERTICAL_PADDING // 2
ARCH_WIDTH_RATIO = 0.4

# Warm-to-dark palette, diagonal from top-left to bottom-right
PANEL_GRADIENT: Sequence[ColorStop] = (
    (0.0, (255, 215, 0, 242)),    # gold
    (0.3, (255, 140, 0, 242)),    # orange
    (0.6, (255, 69, 0, 242)),     # red-orange
    (1.0, (220, 20, 60, 242)),    # crimson
)

PANEL_SHADOW_COLOR = (0, 0, 0, 178)
PANEL_SHADOW_BLUR = 30
PANEL_SHADOW_OFFSET = (0, 10)

BORDER_COLOR = (255, 255, 255, 128)
BORDER_WIDTH = 4
ARCH_BORDER_COLOR = (255, 215, 0, 230)
ARCH_BORDER_WIDTH = 3


class PanelStyle(Enum):
    ROUNDED = "rounded"
    ARCHED = "arched"

    @classmethod
    def from_name(cls, name: str) -> "PanelStyle":
        try:
            return cls((name or "").lower())
        except ValueError:
            if name:
                logger.warning("unknown_panel_style", panel_style=name, fallback=cls.ROUNDED.value)
            return cls.ROUNDED


def cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point, steps: int = CURVE_STEPS) -> List[Point]:
    points = []
    for i in range(steps + 1):
        t = i / steps
        mt = 1 - t
        x = mt ** 3 * p0[0] + 3 * mt ** 2 * t * p1[0] + 3 * mt * t ** 2 * p2[0] + t ** 3 * p3[0]
        y = mt ** 3 * p0[1] + 3 * mt ** 2 * t * p1[1] + 3 * mt * t ** 2 * p2[1] + t ** 3 * p3[1]
        points.append((x, y))
    return points


def _corner(cx: float, cy: float, r: float, start_deg: float, end_deg: float) -> List[Point]:
    points = []
    for i in range(CORNER_STEPS + 1):
        angle = math.radians(start_deg + (end_deg - start_deg) * i / CORNER_STEPS)
        points.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
    return points


def arch_curve(geometry: PanelGeometry) -> List[Point]:
    """Two mirrored cubic curves meeting at a single peak on the panel's centre line."""
    cx = geometry.center_x
    base_y = geometry.top + ARCH_HEIGHT
    peak = (cx, geometry.top)
    half = geometry.width * ARCH_WIDTH_RATIO / 2

    left = cubic_bezier(
        (cx - half, base_y),
        (cx - half * 0.55, base_y),
        (cx - half * 0.1, geometry.top + ARCH_HEIGHT * 0.4),
        peak,
    )
    right = cubic_bezier(
        peak,
        (cx + half * 0.1, geometry.top + ARCH_HEIGHT * 0.4),
        (cx + half * 0.55, base_y),
        (cx + half, base_y),
    )
    return left + right[1:]


def panel_outline(geometry: PanelGeometry, style: PanelStyle) -> List[Point]:
    """Closed outline of the panel, clockwise from the top-left corner."""
    left, right, bottom = geometry.left, geometry.right, geometry.bottom
    top = geometry.top + ARCH_HEIGHT if style is PanelStyle.ARCHED else geometry.top
    r = min(CORNER_RADIUS, (right - left) / 2, (bottom - top) / 2)

    points = _corner(left + r, top + r, r, 180, 270)
    if style is PanelStyle.ARCHED:
        points += arch_curve(geometry)
    points += _corner(right - r, top + r, r, 270, 360)
    points += _corner(right - r, bottom - r, r, 0, 90)
    points += _corner(left + r, bottom - r, r, 90, 180)
    return points


def linear_gradient(size: Tuple[int, int], stops: Sequence[ColorStop] = PANEL_GRADIENT) -> Image.Image:
    """RGBA image filled with a multi-stop gradient along its top-left to bottom-right diagonal."""
    w, h = size
    Y, X = np.mgrid[0:h, 0:w].astype(np.float32)
    t = (X * w + Y * h) / float(w * w + h * h)

    positions = [pos for pos, _ in stops]
    arr = np.zeros((h, w, 4), dtype=np.uint8)
    for channel in range(4):
        values = [color[channel] for _, color in stops]
        arr[:, :, channel] = np.interp(t, positions, values).astype(np.uint8)
    return Image.fromarray(arr, "RGBA")


def draw_panel(canvas: Image.Image, geometry: PanelGeometry, style: PanelStyle,
               stops: Sequence[ColorStop] = PANEL_GRADIENT) -> Image.Image:
    """Draw shadow, gradient fill and borders of the panel; returns the new canvas."""
    outline = panel_outline(geometry, style)

    # 1. Soft drop shadow
    shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    dx, dy = PANEL_SHADOW_OFFSET
    ImageDraw.Draw(shadow).polygon([(x + dx, y + dy) for x, y in outline], fill=PANEL_SHADOW_COLOR)
    canvas = Image.alpha_composite(canvas, shadow.filter(ImageFilter.GaussianBlur(PANEL_SHADOW_BLUR / 2)))

    # 2. Gradient clipped to the outline
    mask = Image.new("L", canvas.size, 0)
    ImageDraw.Draw(mask).polygon(outline, fill=255)

    box_w = max(1, int(math.ceil(geometry.width)))
    box_h = max(1, int(math.ceil(geometry.height)))
    fill = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    fill.paste(linear_gradient((box_w, box_h), stops), (int(geometry.left), int(geometry.top)))
    fill.putalpha(ImageChops.multiply(fill.getchannel("A"), mask))
    canvas = Image.alpha_composite(canvas, fill)

    # 3. Borders
    borders = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(borders)
    draw.line(outline + [outline[0]], fill=BORDER_COLOR, width=BORDER_WIDTH, joint="curve")
    if style is PanelStyle.ARCHED:
        draw.line(arch_curve(geometry), fill=ARCH_BORDER_COLOR, width=ARCH_BORDER_WIDTH, joint="curve")
    return Image.alpha_composite(canvas, borders)
