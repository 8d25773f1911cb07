"""Color harmony analyzer tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.color_theory import (
    ANALOGOUS,
    BLACK,
    COMPLEMENTARY,
    CUSTOM,
    HARMONY_BASE_SCORES,
    HSL,
    MONOCHROMATIC,
    NEUTRAL,
    SPLIT_COMPLEMENTARY,
    TRIADIC,
    accessory_color_score,
    analogous_colors,
    classify_harmony,
    color_harmony_score,
    color_palette,
    colors_are_close,
    complementary_color,
    contrast_ratio,
    hex_to_hsl,
    hsl_to_hex,
    hue_difference,
    is_neutral,
    monochromatic_colors,
    split_complementary_colors,
    triadic_colors,
    undergarment_color_score,
)


def test_hex_to_hsl_converts_primary_colors():
    red = hex_to_hsl("#ff0000")
    assert red.h == pytest.approx(0.0)
    assert red.s == pytest.approx(1.0)
    assert red.l == pytest.approx(0.5)

    blue = hex_to_hsl("#0000FF")
    assert blue.h == pytest.approx(240.0)


def test_hex_to_hsl_accepts_short_hex_and_names():
    assert hex_to_hsl("#fff").l == pytest.approx(1.0)
    assert hex_to_hsl("navy") == hex_to_hsl("#000080")


@pytest.mark.parametrize("value", [None, "", "not-a-color", "#12", "#zzzzzz"])
def test_invalid_colors_degrade_to_black(value):
    assert hex_to_hsl(value) == BLACK


def test_hue_difference_wraps_around_the_wheel():
    assert hue_difference(350, 10) == pytest.approx(20)
    assert hue_difference(0, 180) == pytest.approx(180)


def test_identical_black_is_monochromatic_not_custom():
    colors = ["#000000", "#000000"]
    assert classify_harmony([hex_to_hsl(color) for color in colors]) == MONOCHROMATIC
    assert color_harmony_score(colors) == pytest.approx(HARMONY_BASE_SCORES[MONOCHROMATIC])


def test_harmony_classification_table():
    def classify(*colors):
        return classify_harmony([hex_to_hsl(color) for color in colors])

    assert classify("#000000", "#ffffff") == NEUTRAL
    assert classify("#ff0000", "#ff8000") == ANALOGOUS
    assert classify("#ff0000", "#00ffff") == COMPLEMENTARY
    assert classify("#ff0000", "#00ff00", "#0000ff") == TRIADIC
    assert classify("#ff0000", "#80ff00") == CUSTOM


def test_mostly_neutral_palette_recurses_on_accent_color():
    # Two neutrals and one accent classify by the accent alone.
    assert classify_harmony([hex_to_hsl(c) for c in ("#000000", "#ffffff", "#000080")]) == MONOCHROMATIC


def test_custom_harmony_uses_distance_score():
    # Hue gap of ~90 degrees -> distance ~54 -> normalised 0.36 -> 0.72.
    assert color_harmony_score(["#ff0000", "#80ff00"]) == pytest.approx(0.72, abs=0.01)


def test_single_or_no_color_scores_perfectly():
    assert color_harmony_score([]) == 1.0
    assert color_harmony_score(["#123456"]) == 1.0


def test_colors_are_close():
    assert colors_are_close("#000080", "#00008b")
    assert not colors_are_close("#000000", "#000080")


def test_is_neutral():
    assert is_neutral("black")
    assert is_neutral("#e3bc9a")
    assert not is_neutral("#ff0000")


def test_undergarment_color_score():
    assert undergarment_color_score("#ffffff", ["#ff0000"]) == 0.9
    assert undergarment_color_score("#ff0000", ["#ff1100"]) == 0.8
    assert undergarment_color_score("#00ff00", ["#ff0000"]) == 0.5


def test_accessory_color_score():
    assert accessory_color_score("#ff1100", ["#ff0000"]) == 1.0
    assert accessory_color_score("#00ffff", ["#ff0000"]) == 0.9
    assert accessory_color_score("#ff8000", ["#ff0000"]) == 0.8
    assert accessory_color_score("silver", ["#0000ff"]) == 0.7
    assert accessory_color_score("#00ff00", ["#0000ff"]) == 0.3


def _hues(colors):
    return [round(hex_to_hsl(color).h) for color in colors]


def test_hsl_to_hex_inverts_hex_to_hsl():
    assert hsl_to_hex(HSL(0, 1, 0.5)) == "#ff0000"
    assert hsl_to_hex(HSL(0, 0, 1)) == "#ffffff"
    assert hsl_to_hex(hex_to_hsl("#000080")) == "#000080"


def test_complementary_and_triadic_rotate_hue():
    assert complementary_color("#ff0000") == "#00ffff"
    assert triadic_colors("red") == ["#ff0000", "#00ff00", "#0000ff"]


def test_split_complementary_and_analogous_neighbours():
    assert _hues(split_complementary_colors("#ff0000")) == [0, 150, 210]
    assert _hues(analogous_colors("#ff0000")) == [0, 30, 330]
    assert _hues(analogous_colors("#ff0000", count=4, angle=20)) == [0, 20, 340, 40]
    assert analogous_colors("#ff0000", count=1) == ["#ff0000"]


def test_monochromatic_colors_keep_hue_and_spread_lightness():
    palette = monochromatic_colors("#000080")
    assert len(palette) == 5
    assert palette[2] == "#000080"
    assert all(hue == 240 for hue in _hues(palette))
    lightness = [hex_to_hsl(color).l for color in palette]
    assert lightness == sorted(lightness)
    assert monochromatic_colors("#000080", count=1) == ["#000080"]


def test_color_palette_dispatches_on_harmony():
    assert color_palette("#ff0000", COMPLEMENTARY) == ["#ff0000", "#00ffff"]
    assert color_palette("#ff0000", TRIADIC) == triadic_colors("#ff0000")
    assert color_palette("#ff0000", SPLIT_COMPLEMENTARY) == split_complementary_colors("#ff0000")
    assert len(color_palette("#000080", MONOCHROMATIC, count=3)) == 3
    assert color_palette("#ff0000", CUSTOM) == analogous_colors("#ff0000", 3)


def test_contrast_ratio_matches_wcag_extremes():
    assert contrast_ratio("#000000", "#ffffff") == pytest.approx(21.0)
    assert contrast_ratio("#ffffff", "#000000") == pytest.approx(21.0)
    assert contrast_ratio("navy", "navy") == pytest.approx(1.0)
    assert contrast_ratio("not-a-color", "white") == pytest.approx(21.0)
