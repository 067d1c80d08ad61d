from ad_composer.modules.composer_utils import (
    FontMeasurer,
    clamp_font_size,
    load_font,
    wrap_text,
)


def test_wrap_empty_text_returns_no_lines(fake_measurer):
    assert wrap_text("", 500, 40, fake_measurer) == []


def test_short_text_stays_on_one_line(fake_measurer):
    assert wrap_text("50% OFF", 880, 80, fake_measurer) == ["50% OFF"]


def test_greedy_wrap_packs_words_per_line(fake_measurer):
    # 10px per character at size 20
    lines = wrap_text("aa bb cc dd ee", 55, 20, fake_measurer)
    assert lines == ["aa bb", "cc dd", "ee"]


def test_every_line_fits_unless_single_overwide_word(fake_measurer):
    text = "Summer sale on everything extraordinarilylongword in the shop today"
    max_width = 200
    lines = wrap_text(text, max_width, 20, fake_measurer)

    assert " ".join(lines) == text
    for line in lines:
        width = fake_measurer.measure(line, 20)
        assert width <= max_width or " " not in line


def test_overwide_word_is_not_split(fake_measurer):
    lines = wrap_text("Buy Supercalifragilistic now", 100, 20, fake_measurer)
    assert lines == ["Buy", "Supercalifragilistic", "now"]


def test_wrap_is_deterministic(fake_measurer):
    text = "Only this weekend all shoes half price"
    assert wrap_text(text, 150, 30, fake_measurer) == wrap_text(text, 150, 30, fake_measurer)


def test_clamp_font_size_bounds():
    assert clamp_font_size(1000, 10, 48, 80) == 80
    assert clamp_font_size(300, 10, 48, 80) == 48
    assert clamp_font_size(600, 10, 48, 80) == 60


def test_load_font_is_cached():
    assert load_font("missing-font.ttf", 32) is load_font("missing-font.ttf", 32)


def test_font_measurer_grows_with_text():
    measurer = FontMeasurer("missing-font.ttf")
    short = measurer.measure("Sale", 40)
    longer = measurer.measure("Sale today", 40)
    assert 0 < short < longer
    assert measurer.measure("Sale", 40) == short
