"""Perceptual color harmony helpers for deterministic outfit scoring."""
from __future__ import annotations

import colorsys
import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Sequence, Tuple

from models.taxonomy import (
    NAMED_COLORS,
    NEUTRAL_ACCESSORY_COLOR_NAMES,
    NEUTRAL_COLOR_NAMES,
    normalize_color_name,
)

logger = logging.getLogger(__name__)

MONOCHROMATIC = "monochromatic"
ANALOGOUS = "analogous"
COMPLEMENTARY = "complementary"
TRIADIC = "triadic"
NEUTRAL = "neutral"
SPLIT_COMPLEMENTARY = "split-complementary"
CUSTOM = "custom"

HARMONY_BASE_SCORES = {
    MONOCHROMATIC: 0.95,
    ANALOGOUS: 0.9,
    COMPLEMENTARY: 0.85,
    TRIADIC: 0.8,
    NEUTRAL: 0.75,
}

NEUTRAL_SATURATION = 0.15
IDEAL_DISTANCE_SCALE = 150.0

_NEUTRAL_HEXES = {NAMED_COLORS[name] for name in NEUTRAL_COLOR_NAMES}
_NEUTRAL_ACCESSORY_HEXES = {NAMED_COLORS[name] for name in NEUTRAL_ACCESSORY_COLOR_NAMES}


@dataclass(frozen=True)
class HSL:
    """Hue in degrees, saturation and lightness in [0, 1]."""

    h: float
    s: float
    l: float  # noqa: E741


BLACK = HSL(0.0, 0.0, 0.0)


def _hex_to_rgb(color: str | None) -> Tuple[float, float, float]:
    """Channels in [0, 1]; anything unparseable is black."""

    if not color:
        return (0.0, 0.0, 0.0)
    value = normalize_color_name(color)
    if not value.startswith("#"):
        return (0.0, 0.0, 0.0)
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        return (0.0, 0.0, 0.0)
    try:
        r, g, b = (int(digits[i : i + 2], 16) / 255 for i in (0, 2, 4))
    except ValueError:
        return (0.0, 0.0, 0.0)
    return (r, g, b)


def hex_to_hsl(color: str | None) -> HSL:
    """Convert a ``#rrggbb`` (or known color name) into HSL.

    Invalid or missing values degrade to black instead of raising.
    """

    r, g, b = _hex_to_rgb(color)
    high, low = max(r, g, b), min(r, g, b)
    lightness = (high + low) / 2
    if high == low:
        return HSL(0.0, 0.0, lightness)

    delta = high - low
    saturation = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
    if high == r:
        hue = (g - b) / delta + (6 if g < b else 0)
    elif high == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4
    return HSL((hue / 6) * 360 % 360, saturation, lightness)


def hue_difference(first: float, second: float) -> float:
    """Distance between two hues on the circular 0-360 scale."""

    diff = abs(first - second)
    return min(diff, 360 - diff)


def is_neutral(color: str) -> bool:
    """Whites, blacks, greys and the classic neutral shades."""

    value = normalize_color_name(color or "")
    return value in _NEUTRAL_HEXES or hex_to_hsl(value).s < NEUTRAL_SATURATION


def classify_harmony(colors: Sequence[HSL]) -> str:
    """Classify the relationship between a set of HSL colors."""

    if not colors:
        return NEUTRAL
    if len(set(colors)) == 1:
        return MONOCHROMATIC

    neutrals = [color for color in colors if color.s < NEUTRAL_SATURATION]
    if len(neutrals) == len(colors):
        return NEUTRAL
    if len(neutrals) >= len(colors) - 1 and len(colors) > 2:
        non_neutrals = [color for color in colors if color.s >= NEUTRAL_SATURATION]
        return classify_harmony(non_neutrals)

    hues = [color.h for color in colors]
    hue_range = max(hues) - min(hues)
    if hue_range <= 15 or hue_range >= 345:
        return MONOCHROMATIC
    if hue_range <= 60 or hue_range >= 300:
        return ANALOGOUS
    if len(colors) == 2 and abs(abs(hues[0] - hues[1]) - 180) <= 30:
        return COMPLEMENTARY
    if len(colors) == 3:
        ordered = sorted(hues)
        if abs(ordered[1] - ordered[0] - 120) <= 30 and abs(ordered[2] - ordered[1] - 120) <= 30:
            return TRIADIC
    return CUSTOM


def color_distance(first: HSL, second: HSL) -> float:
    return hue_difference(first.h, second.h) * 0.6 + abs(first.s - second.s) * 0.2 + abs(first.l - second.l) * 0.2


def color_distance_score(colors: Sequence[HSL]) -> float:
    """Score peaking at a medium contrast between every pair of colors."""

    if len(colors) <= 1:
        return 1.0
    distances = [
        color_distance(colors[i], colors[j]) for i in range(len(colors)) for j in range(i + 1, len(colors))
    ]
    normalized = min(1.0, (sum(distances) / len(distances)) / IDEAL_DISTANCE_SCALE)
    return 1 - abs(normalized - 0.5) * 2


def color_harmony_score(colors: Iterable[str]) -> float:
    """Return the harmony score for an outfit's colors."""

    hsl_colors = [hex_to_hsl(color) for color in colors]
    if len(hsl_colors) <= 1:
        return 1.0
    harmony = classify_harmony(hsl_colors)
    if harmony in HARMONY_BASE_SCORES:
        score = HARMONY_BASE_SCORES[harmony]
    else:
        score = color_distance_score(hsl_colors)
    logger.debug("harmony %s -> %.3f", harmony, score)
    return score


def colors_are_close(first: str, second: str) -> bool:
    """Return True when two colors are visually close."""

    a, b = hex_to_hsl(first), hex_to_hsl(second)
    return hue_difference(a.h, b.h) < 30 and abs(a.s - b.s) < 0.3 and abs(a.l - b.l) < 0.3


def undergarment_color_score(color: str, outfit_colors: Sequence[str]) -> float:
    if is_neutral(color):
        return 0.9
    if any(colors_are_close(color, outfit_color) for outfit_color in outfit_colors):
        return 0.8
    return 0.5


def accessory_color_score(color: str, outfit_colors: Sequence[str]) -> float:
    """Rank how well an accessory color ties into the outfit palette."""

    if any(colors_are_close(color, outfit_color) for outfit_color in outfit_colors):
        return 1.0
    item_hsl = hex_to_hsl(color)
    for outfit_color in outfit_colors:
        hue_diff = abs(item_hsl.h - hex_to_hsl(outfit_color).h)
        if abs(hue_diff - 180) < 30:
            return 0.9
        if hue_diff < 60:
            return 0.8
    if normalize_color_name(color or "") in _NEUTRAL_ACCESSORY_HEXES:
        return 0.7
    return 0.3


def hsl_to_hex(color: HSL) -> str:
    """Convert HSL back to a lowercase ``#rrggbb`` string."""

    channels = colorsys.hls_to_rgb((color.h % 360) / 360, _clamp_unit(color.l), _clamp_unit(color.s))
    return "#" + "".join(f"{round(channel * 255):02x}" for channel in channels)


def _clamp_unit(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _rotate(color: HSL, degrees: float) -> str:
    return hsl_to_hex(replace(color, h=(color.h + degrees) % 360))


def complementary_color(color: str) -> str:
    return _rotate(hex_to_hsl(color), 180)


def analogous_colors(color: str, count: int = 3, angle: float = 30) -> List[str]:
    """Base color followed by neighbours alternating clockwise and counter-clockwise."""

    base = hex_to_hsl(color)
    palette = [hsl_to_hex(base)]
    for index in range(1, count):
        step = angle * ((index + 1) // 2)
        palette.append(_rotate(base, step if index % 2 else -step))
    return palette


def triadic_colors(color: str) -> List[str]:
    base = hex_to_hsl(color)
    return [hsl_to_hex(base), _rotate(base, 120), _rotate(base, 240)]


def split_complementary_colors(color: str) -> List[str]:
    base = hex_to_hsl(color)
    return [hsl_to_hex(base), _rotate(base, 150), _rotate(base, 210)]


def monochromatic_colors(color: str, count: int = 5) -> List[str]:
    """Same hue, saturation and lightness spread over +/-0.3 around the base."""

    base = hex_to_hsl(color)
    palette: List[str] = []
    for index in range(count):
        offset = (index / (count - 1) if count > 1 else 0.5) * 0.6 - 0.3
        palette.append(
            hsl_to_hex(
                HSL(base.h, _clamp_unit(base.s + offset), _clamp_unit(base.l + offset, 0.1, 0.9))
            )
        )
    return palette


def color_palette(color: str, harmony: str, count: int = 3) -> List[str]:
    """Suggest colors that form ``harmony`` with ``color``; unknown harmonies fall back to analogous."""

    if harmony == MONOCHROMATIC:
        return monochromatic_colors(color, count)
    if harmony == COMPLEMENTARY:
        return [hsl_to_hex(hex_to_hsl(color)), complementary_color(color)]
    if harmony == TRIADIC:
        return triadic_colors(color)
    if harmony == SPLIT_COMPLEMENTARY:
        return split_complementary_colors(color)
    return analogous_colors(color, count)


def _relative_luminance(color: str) -> float:
    linear = [
        channel / 12.92 if channel <= 0.03928 else ((channel + 0.055) / 1.055) ** 2.4
        for channel in _hex_to_rgb(color)
    ]
    return 0.2126 * linear[0] + 0.7152 * linear[1] + 0.0722 * linear[2]


def contrast_ratio(first: str, second: str) -> float:
    """WCAG contrast ratio, from 1 (identical) to 21 (black on white)."""

    lighter, darker = sorted((_relative_luminance(first), _relative_luminance(second)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


def unique_colors(colors: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for color in colors:
        if color not in seen:
            seen.append(color)
    return seen


__all__ = [
    "HSL",
    "MONOCHROMATIC",
    "ANALOGOUS",
    "COMPLEMENTARY",
    "TRIADIC",
    "NEUTRAL",
    "SPLIT_COMPLEMENTARY",
    "CUSTOM",
    "HARMONY_BASE_SCORES",
    "hex_to_hsl",
    "hsl_to_hex",
    "hue_difference",
    "is_neutral",
    "classify_harmony",
    "color_distance",
    "color_distance_score",
    "color_harmony_score",
    "colors_are_close",
    "undergarment_color_score",
    "accessory_color_score",
    "complementary_color",
    "analogous_colors",
    "triadic_colors",
    "split_complementary_colors",
    "monochromatic_colors",
    "color_palette",
    "contrast_ratio",
    "unique_colors",
]
