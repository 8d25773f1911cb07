"""Deterministic multi-factor scoring for candidate outfits."""

from __future__ import annotations

import math
from typing import Dict, Optional, Sequence

from engine_app.config import DEFAULT_SCORE_WEIGHTS, EngineConfig
from memory.recency_tracker import RecencyTracker, jaccard_similarity
from models.clothing_item import ClothingItem
from models.color_theory import color_harmony_score, colors_are_close
from models.options import GenerationOptions, StylePreference, WeatherData
from models.outfit import OutfitScore, ScoreBreakdown, outfit_key
from models.taxonomy import (
    ACCESSORIES,
    ACTIVEWEAR,
    BAGS,
    BELTS,
    BOTTOMS,
    BRAS,
    DRESSES,
    HATS,
    JEWELRY,
    OUTERWEAR,
    SCARVES,
    SHOES,
    SHORTS_UNDERWEAR,
    SLEEPWEAR,
    SOCKS,
    SWIMWEAR,
    TOPS,
    UNDERSHIRTS,
    UNDERWEAR,
)

CATEGORY_STYLE_VALUES: Dict[str, Dict[str, float]] = {
    TOPS: {"formality": 0.5, "boldness": 0.5},
    BOTTOMS: {"formality": 0.5, "boldness": 0.4},
    DRESSES: {"formality": 0.7, "boldness": 0.6},
    OUTERWEAR: {"formality": 0.6, "boldness": 0.5},
    SHOES: {"formality": 0.5, "boldness": 0.4},
    ACCESSORIES: {"formality": 0.5, "boldness": 0.7},
    UNDERWEAR: {"formality": 0.3, "boldness": 0.5},
    SOCKS: {"formality": 0.3, "boldness": 0.4},
    UNDERSHIRTS: {"formality": 0.3, "boldness": 0.3},
    BRAS: {"formality": 0.3, "boldness": 0.4},
    SHORTS_UNDERWEAR: {"formality": 0.3, "boldness": 0.4},
    JEWELRY: {"formality": 0.6, "boldness": 0.8},
    BAGS: {"formality": 0.5, "boldness": 0.5},
    BELTS: {"formality": 0.5, "boldness": 0.5},
    HATS: {"formality": 0.4, "boldness": 0.7},
    SCARVES: {"formality": 0.6, "boldness": 0.6},
    ACTIVEWEAR: {"formality": 0.2, "boldness": 0.6},
    SLEEPWEAR: {"formality": 0.1, "boldness": 0.4},
    SWIMWEAR: {"formality": 0.3, "boldness": 0.7},
}

OCCASION_FORMALITY_SHIFT = {"formal": 0.3, "work": 0.2, "casual": -0.2, "sport": -0.3}
BOLD_TAGS = ("bright", "pattern", "print", "colorful", "vibrant")
CONSERVATIVE_TAGS = ("plain", "simple", "basic", "classic")
LONG_SLEEVE_TAGS = ("long sleeve", "long-sleeve")
WATER_RESISTANT_TAGS = ("waterproof", "water-resistant", "rain")
WIND_RESISTANT_TAGS = ("windproof", "wind-resistant")

# Upper bounds (exclusive) of the temperature bands in Celsius.
VERY_COLD_MAX = 0
COLD_MAX = 10
COOL_MAX = 18
MILD_MAX = 24
WARM_MAX = 30


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _has_tag(item: ClothingItem, keywords: Sequence[str]) -> bool:
    return any(keyword in tag for tag in item.lowered_tags for keyword in keywords)


def has_base(items: Sequence[ClothingItem]) -> bool:
    """Completeness invariant: a dress, or both a top and a bottom."""

    categories = {item.category for item in items}
    return DRESSES in categories or {TOPS, BOTTOMS} <= categories


def item_style(item: ClothingItem) -> Dict[str, float]:
    base = CATEGORY_STYLE_VALUES.get(item.category, {})
    formality = base.get("formality", 0.5)
    for occasion, shift in OCCASION_FORMALITY_SHIFT.items():
        if occasion in item.occasion:
            formality += shift

    boldness = base.get("boldness", 0.5)
    for tag in item.lowered_tags:
        if any(keyword in tag for keyword in BOLD_TAGS):
            boldness += 0.1
        if any(keyword in tag for keyword in CONSERVATIVE_TAGS):
            boldness -= 0.1
    return {"formality": _clamp(formality), "boldness": _clamp(boldness)}


def style_matching_score(items: Sequence[ClothingItem], preference: Optional[StylePreference]) -> float:
    if preference is None or not items:
        return 1.0
    styles = [item_style(item) for item in items]
    formality = sum(style["formality"] for style in styles) / len(styles)
    boldness = sum(style["boldness"] for style in styles) / len(styles)
    return ((1 - abs(formality - preference.formality)) + (1 - abs(boldness - preference.boldness))) / 2


def occasion_suitability_score(items: Sequence[ClothingItem], occasion: Optional[str]) -> float:
    if not occasion or not items:
        return 1.0
    return sum(1 for item in items if occasion in item.occasion) / len(items)


def season_suitability_score(items: Sequence[ClothingItem], season: Optional[str]) -> float:
    if not season or not items:
        return 1.0
    return sum(1 for item in items if season in item.season) / len(items)


def _temperature_score(items: Sequence[ClothingItem], temperature: float) -> float:
    has_outerwear = any(item.category == OUTERWEAR for item in items)
    has_long_sleeves = any(_has_tag(item, LONG_SLEEVE_TAGS) for item in items)

    if temperature < VERY_COLD_MAX:
        if has_outerwear:
            return 1.0 if has_long_sleeves or any(item.category in {SCARVES, HATS} for item in items) else 0.8
        return 0.2
    if temperature < COLD_MAX:
        return 1.0 if has_outerwear else 0.3
    if temperature < COOL_MAX:
        return 1.0 if has_outerwear or has_long_sleeves else 0.6
    if temperature < MILD_MAX:
        return 1.0
    if temperature < WARM_MAX:
        return 0.5 if has_outerwear else 1.0
    if has_outerwear:
        return 0.2
    return 0.6 if has_long_sleeves else 1.0


def weather_suitability_score(items: Sequence[ClothingItem], weather: WeatherData) -> float:
    """Blend temperature (60%), precipitation (30%) and wind (10%) fitness."""

    temperature_score = _temperature_score(items, weather.temperature)

    precipitation_score = 1.0
    if weather.precipitation > 0.5 or weather.conditions in {"rainy", "snowy"}:
        precipitation_score = 1.0 if any(_has_tag(item, WATER_RESISTANT_TAGS) for item in items) else 0.5

    wind_score = 1.0
    if weather.wind_speed > 20 or weather.conditions == "windy":
        wind_ready = any(item.category == OUTERWEAR or _has_tag(item, WIND_RESISTANT_TAGS) for item in items)
        wind_score = 1.0 if wind_ready else 0.7

    return temperature_score * 0.6 + precipitation_score * 0.3 + wind_score * 0.1


def user_preference_score(items: Sequence[ClothingItem], preferred_colors: Sequence[str]) -> float:
    if not preferred_colors or not items:
        return 1.0
    matching = [
        item
        for item in items
        if any(item.color == color or colors_are_close(item.color, color) for color in preferred_colors)
    ]
    return len(matching) / len(items)


def completeness_multiplier(items: Sequence[ClothingItem], config: EngineConfig) -> float:
    categories = {item.category for item in items}
    multiplier = 1.0
    if not has_base(items):
        multiplier *= config.missing_base_multiplier
    if SHOES not in categories:
        multiplier *= config.missing_shoes_multiplier
    if len(categories) >= 5:
        multiplier *= 1 + config.five_category_bonus
    elif len(categories) == 4:
        multiplier *= 1 + config.four_category_bonus
    return multiplier


def distribution_curve(value: float, steepness: float) -> float:
    """Normalised logistic curve mapping [0, 1] onto [0, 1], monotone increasing."""

    value = _clamp(value)
    if steepness <= 0:
        return value

    def logistic(x: float) -> float:
        return 1 / (1 + math.exp(-steepness * (x - 0.5)))

    low, high = logistic(0.0), logistic(1.0)
    return (logistic(value) - low) / (high - low)


def weighted_total(breakdown: ScoreBreakdown, weights: Dict[str, float]) -> float:
    values = breakdown.as_dict()
    total_weight = sum(weights.get(name, 0.0) for name in DEFAULT_SCORE_WEIGHTS)
    if total_weight <= 0:
        return 0.0
    return sum(values[name] * weights.get(name, 0.0) for name in DEFAULT_SCORE_WEIGHTS) / total_weight


class OutfitScorer:
    """Scores outfits against options, consulting the recency tracker."""

    def __init__(self, config: EngineConfig, tracker: RecencyTracker) -> None:
        self.config = config
        self.tracker = tracker

    def variety_score(self, items: Sequence[ClothingItem]) -> float:
        """1 minus the strongest decayed penalty from a near-identical recent outfit."""

        key = outfit_key(items)
        window = self.config.recency_window_days
        strongest = 0.0
        for recent_key in self.tracker.entries():
            similarity = jaccard_similarity(key, recent_key)
            if similarity <= self.config.variety_similarity_threshold:
                continue
            age = self.tracker.age_days(recent_key)
            if age is None:
                continue
            decay = max(0.0, 1 - age / window)
            strongest = max(strongest, similarity * decay)
        return _clamp(1 - strongest)

    def recency_penalty(self, items: Sequence[ClothingItem]) -> float:
        age = self.tracker.age_days(outfit_key(items))
        if age is None:
            return 0.0
        return max(0.0, self.config.recency_penalty * (1 - age / self.config.recency_window_days))

    def breakdown(self, items: Sequence[ClothingItem], options: GenerationOptions) -> ScoreBreakdown:
        return ScoreBreakdown(
            color_harmony=color_harmony_score([item.color for item in items]),
            style_matching=style_matching_score(items, options.style_preference),
            occasion_suitability=occasion_suitability_score(items, options.occasion),
            season_suitability=season_suitability_score(items, options.season),
            weather_suitability=(
                weather_suitability_score(items, options.weather)
                if options.weather
                else self.config.neutral_weather_score
            ),
            user_preference=user_preference_score(items, options.preferred_colors),
            variety=self.variety_score(items),
        )

    def score(self, items: Sequence[ClothingItem], options: GenerationOptions) -> OutfitScore:
        """Calculate the composite score and per-criterion breakdown."""

        config = self.config
        breakdown = self.breakdown(items, options)
        raw = _clamp(weighted_total(breakdown, config.weights) * completeness_multiplier(items, config))

        complete = has_base(items)
        if complete:
            span = config.score_ceiling - config.score_floor
            total = config.score_floor + span * distribution_curve(raw, config.curve_steepness)
        else:
            total = raw

        penalty = self.recency_penalty(items)
        if penalty:
            if complete:
                total = config.score_floor + (total - config.score_floor) * (1 - penalty)
            else:
                total *= 1 - penalty

        if complete:
            total = _clamp(total, config.score_floor, config.score_ceiling)
        return OutfitScore(total=_clamp(total), breakdown=breakdown)


__all__ = [
    "OutfitScorer",
    "has_base",
    "item_style",
    "style_matching_score",
    "occasion_suitability_score",
    "season_suitability_score",
    "weather_suitability_score",
    "user_preference_score",
    "completeness_multiplier",
    "distribution_curve",
    "weighted_total",
    "CATEGORY_STYLE_VALUES",
]
