"""Deterministic availability filters applied before outfit generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from models.clothing_item import ClothingItem
from models.options import GenerationOptions, WeatherData

# Upper temperature bound (exclusive, Celsius) for each weather-derived season.
WEATHER_SEASON_BANDS = ((10, "winter"), (18, "fall"), (30, "spring"))
HOT_WEATHER_SEASON = "summer"


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of a single filtering step."""

    items: List[ClothingItem]
    removed: Dict[str, str]
    debug: Dict[str, object]


def season_for_weather(weather: WeatherData) -> str:
    for upper, season in WEATHER_SEASON_BANDS:
        if weather.temperature < upper:
            return season
    return HOT_WEATHER_SEASON


def _partition(items: Iterable[ClothingItem], keep, reason: str) -> FilteringResult:
    kept: List[ClothingItem] = []
    removed: Dict[str, str] = {}
    for item in items:
        if keep(item):
            kept.append(item)
        else:
            removed[item.item_id] = reason
    return FilteringResult(
        items=kept,
        removed=removed,
        debug={"kept_count": len(kept), "removed_count": len(removed)},
    )


def filter_excluded(items: List[ClothingItem], excluded_ids: Iterable[str]) -> FilteringResult:
    excluded = set(excluded_ids)
    return _partition(items, lambda item: item.item_id not in excluded, "excluded by caller")


def filter_by_season(items: List[ClothingItem], season: str) -> FilteringResult:
    return _partition(items, lambda item: season in item.season, f"not worn in {season}")


def filter_by_occasion(items: List[ClothingItem], occasion: str) -> FilteringResult:
    return _partition(items, lambda item: occasion in item.occasion, f"not suited to {occasion}")


def filter_by_weather(items: List[ClothingItem], weather: WeatherData) -> FilteringResult:
    """Keep items tagged for the season implied by the forecast temperature."""

    season = season_for_weather(weather)
    result = _partition(items, lambda item: season in item.season, f"not suited to {season} weather")
    result.debug["weather_season"] = season
    result.debug["temperature"] = weather.temperature
    return result


def apply_availability_filters(items: List[ClothingItem], options: GenerationOptions) -> FilteringResult:
    """Run the excluded-id, season, occasion and weather filters in order."""

    removed: Dict[str, str] = {}
    steps: Dict[str, object] = {}
    current = list(items)

    stages = [("excluded", lambda values: filter_excluded(values, options.excluded_items))]
    if options.season:
        stages.append(("season", lambda values: filter_by_season(values, options.season)))
    if options.occasion:
        stages.append(("occasion", lambda values: filter_by_occasion(values, options.occasion)))
    if options.weather:
        stages.append(("weather", lambda values: filter_by_weather(values, options.weather)))

    for name, stage in stages:
        result = stage(current)
        current = result.items
        removed.update(result.removed)
        steps[name] = result.debug

    debug = {
        "input_count": len(items),
        "kept_count": len(current),
        "removed_count": len(removed),
        "steps": steps,
    }
    return FilteringResult(items=current, removed=removed, debug=debug)


__all__ = [
    "FilteringResult",
    "season_for_weather",
    "filter_excluded",
    "filter_by_season",
    "filter_by_occasion",
    "filter_by_weather",
    "apply_availability_filters",
]
