"""
Tier extraction and panel geometry.

Every measurement here is derived from the image width (font sizes) and
the wrapped line counts of each tier, so two images with the same
dimensions and the same text always get the same panel.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Tuple

from .composer_utils import TextMeasurer, clamp_font_size, wrap_text

# ---------------------------
# Spacing constants (px)
# ---------------------------
SIDE_PADDING = 60          # text wrap width = image width - 2 * SIDE_PADDING
SIDE_MARGIN = 80           # panel never wider than image width - SIDE_MARGIN
HORIZONTAL_PADDING = 120   # added around the wrap width
VERTICAL_PADDING = 60      # above the title and below the last tier


class TextTier(Enum):
    HEADLINE = "headline"
    PRICE = "price"
    CALL_TO_ACTION = "call_to_action"


# Line 1 -> headline, line 2 -> price, line 3 -> call to action
TIER_ORDER: Tuple[TextTier, ...] = (TextTier.HEADLINE, TextTier.PRICE, TextTier.CALL_TO_ACTION)


@dataclass(frozen=True)
class TierStyle:
    divisor: float
    min_size: int
    max_size: int
    leading: int
    gap: int
    fill: Tuple[int, int, int, int]
    shadow_color: Tuple[int, int, int, int]
    shadow_blur: int
    shadow_offset: Tuple[int, int]

    def font_size(self, image_width: int) -> int:
        return clamp_font_size(image_width, self.divisor, self.min_size, self.max_size)

    def block_height(self, line_count: int, image_width: int) -> int:
        if line_count <= 0:
            return 0
        return line_count * (self.font_size(image_width) + self.leading) + self.gap


WHITE = (255, 255, 255, 255)
GOLD = (255, 215, 0, 255)
WARM_WHITE = (255, 248, 231, 255)

TITLE_STYLE = TierStyle(8, 40, 60, 30, 0, WHITE, (0, 0, 0, 242), 12, (5, 5))

TIER_STYLES: Dict[TextTier, TierStyle] = {
    TextTier.HEADLINE: TierStyle(10, 48, 80, 30, 20, WHITE, (0, 0, 0, 242), 12, (5, 5)),
    TextTier.PRICE: TierStyle(12, 42, 68, 25, 25, GOLD, (0, 0, 0, 204), 10, (4, 4)),
    TextTier.CALL_TO_ACTION: TierStyle(14, 38, 56, 20, 20, WARM_WHITE, (0, 0, 0, 217), 8, (3, 3)),
}


def split_tiers(text: str) -> Dict[TextTier, str]:
    """Map the first three non-blank lines of ``text`` onto their tiers."""
    lines = [line.strip() for line in (text or "").replace("\r\n", "\n").split("\n") if line.strip()]
    return dict(zip(TIER_ORDER, lines))


@dataclass(frozen=True)
class PanelGeometry:
    width: float
    height: float
    center_x: float
    center_y: float

    @property
    def left(self) -> float:
        return self.center_x - self.width / 2

    @property
    def right(self) -> float:
        return self.center_x + self.width / 2

    @property
    def top(self) -> float:
        return self.center_y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.center_y + self.height / 2

    def fits_within(self, image_width: int, image_height: int) -> bool:
        return self.left >= 0 and self.top >= 0 and self.right <= image_width and self.bottom <= image_height


def wrap_width(image_width: int) -> int:
    return image_width - SIDE_PADDING * 2


def content_height(image_width: int, line_counts: Mapping[TextTier, int]) -> int:
    """Height of the title block plus every present tier block."""
    height = TITLE_STYLE.block_height(1, image_width)
    for tier in TIER_ORDER:
        height += TIER_STYLES[tier].block_height(line_counts.get(tier, 0), image_width)
    return height


def panel_geometry(image_width: int, image_height: int, line_counts: Mapping[TextTier, int]) -> PanelGeometry:
    height = content_height(image_width, line_counts) + VERTICAL_PADDING * 2
    width = min(image_width - SIDE_MARGIN, wrap_width(image_width) + HORIZONTAL_PADDING)
    return PanelGeometry(width, height, image_width / 2, image_height / 2)


@dataclass(frozen=True)
class TierBlock:
    tier: TextTier
    style: TierStyle
    font_size: int
    lines: List[str]


@dataclass(frozen=True)
class PanelLayout:
    geometry: PanelGeometry
    title_size: int
    blocks: List[TierBlock]


def compute_layout(image_width: int, image_height: int, tiers: Mapping[TextTier, str], measurer: TextMeasurer) -> PanelLayout:
    max_w = wrap_width(image_width)
    blocks = []
    for tier in TIER_ORDER:
        text = tiers.get(tier)
        if not text:
            continue
        style = TIER_STYLES[tier]
        size = style.font_size(image_width)
        lines = wrap_text(text, max_w, size, measurer)
        if lines:
            blocks.append(TierBlock(tier, style, size, lines))

    line_counts = {block.tier: len(block.lines) for block in blocks}
    return PanelLayout(
        geometry=panel_geometry(image_width, image_height, line_counts),
        title_size=TITLE_STYLE.font_size(image_width),
        blocks=blocks,
    )
