"""Pydantic schemas validating generation options at the engine boundary."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from engine_app.config import EngineConfig
from models.taxonomy import normalize_color_name, validate_occasion, validate_season


class StylePreference(BaseModel):
    """User style sliders, each between 0 (casual/conservative/minimal) and 1."""

    model_config = ConfigDict(frozen=True)

    formality: float = Field(default=0.5, ge=0.0, le=1.0)
    boldness: float = Field(default=0.5, ge=0.0, le=1.0)
    layering: float = Field(default=0.5, ge=0.0, le=1.0)
    colorfulness: float = Field(default=0.5, ge=0.0, le=1.0)


class WeatherData(BaseModel):
    """Read-only weather snapshot supplied by a weather collaborator."""

    model_config = ConfigDict(frozen=True)

    temperature: float
    conditions: Literal["clear", "cloudy", "rainy", "snowy", "windy"] = "clear"
    precipitation: float = Field(default=0.0, ge=0.0, le=1.0)
    humidity: float = Field(default=0.5, ge=0.0, le=1.0)
    wind_speed: float = Field(default=0.0, ge=0.0)


class GenerationOptions(BaseModel):
    """Input contract for a single generation call.

    ``max_results`` and ``min_score`` stay ``None`` until
    :meth:`resolve_defaults` fills them relative to the catalog size.
    """

    model_config = ConfigDict(frozen=True)

    occasion: Optional[str] = None
    season: Optional[str] = None
    weather: Optional[WeatherData] = None
    preferred_colors: List[str] = Field(default_factory=list)
    excluded_items: List[str] = Field(default_factory=list)
    style_preference: Optional[StylePreference] = None
    force_include_items: List[str] = Field(default_factory=list)
    max_results: Optional[int] = Field(default=None, ge=1)
    min_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    use_all_items: bool = False

    @field_validator("occasion")
    @classmethod
    def _validate_occasion(cls, value: Optional[str]) -> Optional[str]:
        return validate_occasion(value) if value else None

    @field_validator("season")
    @classmethod
    def _validate_season(cls, value: Optional[str]) -> Optional[str]:
        return validate_season(value) if value else None

    @field_validator("preferred_colors")
    @classmethod
    def _normalise_colors(cls, values: List[str]) -> List[str]:
        return [normalize_color_name(value) for value in values if value]

    @field_validator("excluded_items", "force_include_items", mode="before")
    @classmethod
    def _stringify_ids(cls, values: Any) -> List[str]:
        if values is None:
            return []
        if isinstance(values, (str, int)):
            values = [values]
        return [str(value) for value in values]

    def resolve_defaults(self, item_count: int, config: EngineConfig) -> "GenerationOptions":
        """Return a copy with catalog-relative defaults filled in."""

        updates: Dict[str, Any] = {}
        if self.max_results is None:
            scaled = math.ceil(item_count / 4) if item_count else 0
            updates["max_results"] = min(config.max_results_cap, max(config.default_max_results, scaled))
        if self.min_score is None:
            updates["min_score"] = config.default_min_score
        if self.style_preference is None:
            updates["style_preference"] = StylePreference()
        return self.model_copy(update=updates) if updates else self


def validate_options(options: GenerationOptions | Dict[str, Any] | None) -> GenerationOptions:
    """Accept a model, a loose dict or ``None`` and return validated options.

    Raises :class:`pydantic.ValidationError` for invalid payloads.
    """

    if options is None:
        return GenerationOptions()
    if isinstance(options, GenerationOptions):
        return options
    return GenerationOptions.model_validate(options)


__all__ = ["StylePreference", "WeatherData", "GenerationOptions", "validate_options"]
