"""Configuration helpers for the outfit generation engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional

DEFAULT_SCORE_WEIGHTS: Dict[str, float] = {
    "color_harmony": 0.2,
    "style_matching": 0.2,
    "occasion_suitability": 0.2,
    "season_suitability": 0.15,
    "weather_suitability": 0.15,
    "user_preference": 0.05,
    "variety": 0.05,
}

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class EngineConfig:
    """Tunable weights, thresholds and caps for outfit generation.

    Every literal the scorer and the combination search depend on lives here so
    that product tuning does not require code changes. Values can be supplied
    through environment variables prefixed with ``OUTFIT_`` or a key/value
    config file.
    """

    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_SCORE_WEIGHTS))
    score_floor: float = 0.6
    score_ceiling: float = 1.0
    curve_steepness: float = 4.0
    neutral_weather_score: float = 1.0

    missing_base_multiplier: float = 0.5
    missing_shoes_multiplier: float = 0.85
    four_category_bonus: float = 0.02
    five_category_bonus: float = 0.05

    recency_window_days: float = 7.0
    recency_penalty: float = 0.5
    variety_similarity_threshold: float = 0.8
    diversity_threshold: float = 0.7

    max_items_per_category: int = 10
    max_depth: int = 15
    max_candidates: int = 1000
    max_accessories_per_category: int = 3
    undergarment_threshold: float = 0.2
    optional_item_threshold: float = 0.1

    default_max_results: int = 5
    max_results_cap: int = 20
    default_min_score: float = 0.1
    relaxed_min_score: float = 0.05
    challenge_tops: int = 3
    challenge_bottoms: int = 2

    environment: Optional[str] = None

    @property
    def recency_window_seconds(self) -> float:
        return self.recency_window_days * SECONDS_PER_DAY

    def validate(self) -> "EngineConfig":
        """Reject configurations that would break score bounds."""

        unknown = set(self.weights) - set(DEFAULT_SCORE_WEIGHTS)
        if unknown:
            raise ValueError(f"Unknown score weights: {sorted(unknown)}")
        if any(weight < 0 for weight in self.weights.values()):
            raise ValueError("Score weights must be non-negative")
        if not 0.0 <= self.score_floor < self.score_ceiling <= 1.0:
            raise ValueError("score_floor and score_ceiling must satisfy 0 <= floor < ceiling <= 1")
        if self.recency_window_days <= 0:
            raise ValueError("recency_window_days must be positive")
        if self.max_items_per_category < 1 or self.max_depth < 1 or self.max_candidates < 1:
            raise ValueError("Search caps must be at least 1")
        if self.default_max_results < 1 or self.max_results_cap < self.default_max_results:
            raise ValueError("max_results_cap must be >= default_max_results >= 1")
        return self

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific files live in ``config/environments/<env>.yaml`` by
        default. Environment variables win over file values; score weights use
        keys such as ``weight_color_harmony`` / ``OUTFIT_WEIGHT_COLOR_HARMONY``.
        """

        env_name = os.getenv("OUTFIT_ENV")
        config_path = os.getenv("OUTFIT_CONFIG_PATH")
        config_dir = Path(os.getenv("OUTFIT_CONFIG_DIR", "config/environments"))
        file_config: Dict[str, str] = {}

        if config_path:
            path: Optional[Path] = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            file_config = cls._load_yaml_config(path)

        def get_value(key: str) -> Optional[str]:
            return os.getenv(f"OUTFIT_{key.upper()}", file_config.get(key))

        defaults = cls()
        overrides: Dict[str, object] = {}
        for config_field in fields(cls):
            if config_field.name in {"weights", "environment"}:
                continue
            raw = get_value(config_field.name)
            if raw is None or raw == "":
                continue
            current = getattr(defaults, config_field.name)
            overrides[config_field.name] = int(raw) if isinstance(current, int) else float(raw)

        weights = dict(DEFAULT_SCORE_WEIGHTS)
        for name in DEFAULT_SCORE_WEIGHTS:
            raw = get_value(f"weight_{name}")
            if raw:
                weights[name] = float(raw)

        return cls(weights=weights, environment=env_name, **overrides).validate()  # type: ignore[arg-type]

    @staticmethod
    def _load_yaml_config(path: Path) -> Dict[str, str]:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: Dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


__all__ = ["EngineConfig", "DEFAULT_SCORE_WEIGHTS", "SECONDS_PER_DAY"]
