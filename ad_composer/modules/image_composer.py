# modules/image_composer.py
import io
from dataclasses import dataclass
from typing import List, Optional

import structlog
from PIL import Image, ImageDraw, ImageFilter

from .composer_utils import FontMeasurer, TextMeasurer
from .panel_layout import (
    TITLE_STYLE,
    VERTICAL_PADDING,
    PanelLayout,
    TextTier,
    TierStyle,
    compute_layout,
    split_tiers,
)
from .panel_shapes import PanelStyle, draw_panel

logger = structlog.get_logger(__name__)

OUTPUT_FORMAT = "PNG"
CONTRAST_NONE = "none"
CONTRAST_DARKEN = "darken"


class RenderError(Exception):
    """Decoding, drawing or encoding of a single ad failed."""


@dataclass(frozen=True)
class ComposerOptions:
    font_path: str = "arialbd.ttf"
    brand_title: str = "Wins Wereld"
    panel_style: PanelStyle = PanelStyle.ROUNDED
    contrast_mode: str = CONTRAST_NONE
    contrast_alpha: float = 0.25

    @classmethod
    def from_settings(cls, settings) -> "ComposerOptions":
        return cls(
            font_path=settings.FONT_PATH,
            brand_title=settings.BRAND_TITLE,
            panel_style=PanelStyle.from_name(settings.PANEL_STYLE),
            contrast_mode=settings.CONTRAST_MODE,
            contrast_alpha=settings.CONTRAST_ALPHA,
        )


@dataclass(frozen=True)
class TextRun:
    """One line of text positioned by its centre point."""
    text: str
    x: float
    y: float
    font_size: int
    style: TierStyle
    tier: Optional[TextTier] = None   # None for the brand title


def plan_text_runs(layout: PanelLayout, brand_title: str) -> List[TextRun]:
    """Brand title first, then each tier top-to-bottom, centred on the panel."""
    geometry = layout.geometry
    cx = geometry.center_x
    y = geometry.top + VERTICAL_PADDING + layout.title_size / 2

    runs = [TextRun(brand_title, cx, y, layout.title_size, TITLE_STYLE)]
    y += layout.title_size + TITLE_STYLE.leading + TITLE_STYLE.gap

    for block in layout.blocks:
        for line in block.lines:
            runs.append(TextRun(line, cx, y, block.font_size, block.style, block.tier))
            y += block.font_size + block.style.leading
        y += block.style.gap
    return runs


def decode_image(image_bytes: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except Exception as e:
        raise RenderError(f"Could not decode image: {e}") from e
    return img.convert("RGBA")


def encode_image(canvas: Image.Image) -> bytes:
    buf = io.BytesIO()
    canvas.save(buf, format=OUTPUT_FORMAT)
    return buf.getvalue()


def apply_contrast(canvas: Image.Image, mode: str, alpha: float) -> Image.Image:
    # "none" leaves the base layer exactly as decoded
    if mode != CONTRAST_DARKEN:
        if mode != CONTRAST_NONE:
            logger.warning("unknown_contrast_mode", contrast_mode=mode, fallback=CONTRAST_NONE)
        return canvas
    shade = Image.new("RGBA", canvas.size, (0, 0, 0, int(255 * max(0.0, min(alpha, 1.0)))))
    return Image.alpha_composite(canvas, shade)


def draw_text_runs(canvas: Image.Image, runs: List[TextRun], measurer: FontMeasurer) -> Image.Image:
    # Shadows are blurred per style, so runs sharing a style share a layer
    by_style = {}
    for run in runs:
        by_style.setdefault(run.style, []).append(run)

    for style, style_runs in by_style.items():
        shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(shadow)
        dx, dy = style.shadow_offset
        for run in style_runs:
            draw.text((run.x + dx, run.y + dy), run.text, font=measurer.font(run.font_size),
                      fill=style.shadow_color, anchor="mm")
        if style.shadow_blur:
            shadow = shadow.filter(ImageFilter.GaussianBlur(style.shadow_blur / 2))
        canvas = Image.alpha_composite(canvas, shadow)

    text_layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(text_layer)
    for run in runs:
        draw.text((run.x, run.y), run.text, font=measurer.font(run.font_size),
                  fill=run.style.fill, anchor="mm")
    return Image.alpha_composite(canvas, text_layer)


# ---------------------------
# MAIN FUNCTION
# ---------------------------
def compose_image(
    image_bytes: bytes,
    text: str,
    options: ComposerOptions = None,
    measurer: TextMeasurer = None,
) -> bytes:
    """Overlay the ad panel and text on the image and return PNG bytes.

    Raises RenderError for any failure; the caller decides how to report it.
    """
    options = options or ComposerOptions()
    font_measurer = FontMeasurer(options.font_path)
    measurer = measurer or font_measurer

    try:
        # 1. Base layer
        canvas = decode_image(image_bytes)
        canvas = apply_contrast(canvas, options.contrast_mode, options.contrast_alpha)

        # 2. Geometry
        tiers = split_tiers(text)
        layout = compute_layout(canvas.width, canvas.height, tiers, measurer)
        if not layout.geometry.fits_within(canvas.width, canvas.height):
            logger.warning(
                "panel_overflows_image",
                image_size=canvas.size,
                panel_height=layout.geometry.height,
            )

        # 3. Panel
        canvas = draw_panel(canvas, layout.geometry, options.panel_style)

        # 4-5. Title and tiers
        runs = plan_text_runs(layout, options.brand_title)
        canvas = draw_text_runs(canvas, runs, font_measurer)

        # 6. Output
        return encode_image(canvas)
    except RenderError:
        raise
    except Exception as e:
        raise RenderError(str(e) or e.__class__.__name__) from e
