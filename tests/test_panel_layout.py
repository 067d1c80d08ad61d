import pytest

from ad_composer.modules.panel_layout import (
    PanelGeometry,
    TextTier,
    compute_layout,
    content_height,
    panel_geometry,
    split_tiers,
)

EXAMPLE_TEXT = "50% OFF\n€19.95\nShop Now"


def test_split_tiers_maps_lines_by_position():
    assert split_tiers(EXAMPLE_TEXT) == {
        TextTier.HEADLINE: "50% OFF",
        TextTier.PRICE: "€19.95",
        TextTier.CALL_TO_ACTION: "Shop Now",
    }


def test_split_tiers_skips_blank_lines_and_extra_lines():
    tiers = split_tiers("\n  Big Sale \n\n   \nNow 10€\nClick\nIgnored line")
    assert list(tiers) == [TextTier.HEADLINE, TextTier.PRICE, TextTier.CALL_TO_ACTION]
    assert tiers[TextTier.HEADLINE] == "Big Sale"
    assert "Ignored line" not in tiers.values()


def test_split_tiers_single_line_only_headline():
    assert split_tiers("Just a headline") == {TextTier.HEADLINE: "Just a headline"}
    assert split_tiers("   \n") == {}


def test_example_geometry_1000x800(fake_measurer):
    layout = compute_layout(1000, 800, split_tiers(EXAMPLE_TEXT), fake_measurer)

    assert [len(b.lines) for b in layout.blocks] == [1, 1, 1]
    assert layout.title_size == 60
    assert [b.font_size for b in layout.blocks] == [80, 68, 56]
    assert layout.geometry == PanelGeometry(width=920, height=554, center_x=500, center_y=400)
    assert layout.geometry.fits_within(1000, 800)


def test_missing_tiers_add_no_height():
    counts = {TextTier.HEADLINE: 1}
    # title 60 + 30, headline 80 + 30 + 20
    assert content_height(1000, counts) == 220
    assert panel_geometry(1000, 800, counts).height == 340


@pytest.mark.parametrize("tier", list(TextTier))
def test_height_increases_with_line_count(tier):
    base = {TextTier.HEADLINE: 1, TextTier.PRICE: 1, TextTier.CALL_TO_ACTION: 1}
    heights = []
    for count in range(1, 5):
        heights.append(panel_geometry(1000, 800, {**base, tier: count}).height)
    assert heights == sorted(heights)
    assert len(set(heights)) == len(heights)


def test_geometry_depends_only_on_dimensions_and_text(fake_measurer):
    tiers = split_tiers("Mega clearance on all summer collections\n€5\nVisit our store today")
    first = compute_layout(640, 480, tiers, fake_measurer)
    second = compute_layout(640, 480, tiers, fake_measurer)
    assert first == second


def test_panel_width_keeps_side_margin():
    geometry = panel_geometry(500, 500, {})
    assert geometry.width == 420
    assert geometry.left == 40
    assert geometry.center_y == 250


def test_tall_panel_reports_overflow():
    geometry = panel_geometry(400, 300, {TextTier.HEADLINE: 6})
    assert not geometry.fits_within(400, 300)


def test_split_tiers_breaks_on_newlines_only():
    tiers = split_tiers("Spring\x0cSale   now\r\n€10\rnet\r\nShop")
    assert tiers == {
        TextTier.HEADLINE: "Spring\x0cSale   now",
        TextTier.PRICE: "€10\rnet",
        TextTier.CALL_TO_ACTION: "Shop",
    }
