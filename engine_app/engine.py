"""Outfit engine facade: validation, filtering, search, scoring and ranking."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from engine_app.config import EngineConfig
from engine_app.logging_config import get_logger, log_event
from engine_app.observability import instrument_operation
from logic.contextual_filtering import apply_availability_filters, filter_excluded
from logic.outfit_builder import generate_outfit_combinations, generate_outfits_using_all_items
from logic.outfit_scoring import OutfitScorer
from logic.ranking import rank_outfits
from memory.recency_tracker import RecencyTracker
from models.clothing_item import ClothingItem, from_raw_metadata
from models.options import GenerationOptions, validate_options
from models.outfit import GeneratedOutfit, Outfit, OutfitScore
from models.outfit_naming import generate_outfit_name

logger = get_logger(__name__)

MIN_AVAILABLE_ITEMS = 2
MAX_OUTFIT_TAGS = 5

RawItem = Union[ClothingItem, Dict[str, Any]]
RawOptions = Union[GenerationOptions, Dict[str, Any], None]


def coerce_items(raw_items: Iterable[RawItem]) -> List[ClothingItem]:
    """Accept items or loose dicts; skip entries that fail validation."""

    items: List[ClothingItem] = []
    for raw in raw_items:
        if isinstance(raw, ClothingItem):
            items.append(raw)
            continue
        try:
            items.append(from_raw_metadata(raw))
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("Skipping catalog entry due to validation error: %s", exc)
    return items


def _common_values(groups: Sequence[Sequence[str]]) -> List[str]:
    if not groups:
        return []
    common = list(groups[0])
    for group in groups[1:]:
        common = [value for value in common if value in group]
    return common


class OutfitEngine:
    """Generates, scores and ranks outfits while remembering recent results.

    Each instance owns its :class:`RecencyTracker`; share an engine to share
    the anti-repetition memory, or build a fresh one for an isolated run.
    """

    def __init__(self, config: EngineConfig | None = None, tracker: RecencyTracker | None = None) -> None:
        self.config = (config or EngineConfig()).validate()
        self.tracker = tracker or RecencyTracker(expiry_seconds=self.config.recency_window_seconds)
        self.scorer = OutfitScorer(self.config, self.tracker)

    @classmethod
    def from_env(cls) -> "OutfitEngine":
        return cls(config=EngineConfig.from_env())

    @instrument_operation("engine.generate")
    def generate(self, items: Iterable[RawItem], options: RawOptions = None) -> List[GeneratedOutfit]:
        """Return ranked outfits for ``items``; an empty list means the catalog is insufficient.

        Raises :class:`pydantic.ValidationError` for invalid options before any
        search starts.
        """

        validated = validate_options(options)
        catalog = coerce_items(items)
        expired = self.tracker.cleanup()
        resolved = validated.resolve_defaults(len(catalog), self.config)
        log_event(
            logger,
            logging.INFO,
            "generation_started",
            catalog_size=len(catalog),
            occasion=resolved.occasion,
            season=resolved.season,
            use_all_items=resolved.use_all_items,
            max_results=resolved.max_results,
            min_score=resolved.min_score,
            expired_recent=expired,
        )

        if resolved.use_all_items:
            return self._generate_using_all_items(catalog, resolved)

        filtering = apply_availability_filters(catalog, resolved)
        available = filtering.items
        if len(available) < MIN_AVAILABLE_ITEMS:
            log_event(
                logger,
                logging.WARNING,
                "generation_insufficient_items",
                available_count=len(available),
                filters=filtering.debug,
            )
            return []

        combinations = generate_outfit_combinations(available, resolved.force_include_items, self.config)
        scored = [
            GeneratedOutfit(items=tuple(outfit), score=self.scorer.score(outfit, resolved))
            for outfit in combinations.outfits
        ]
        ranking = rank_outfits(scored, resolved.min_score, resolved.max_results, self.config.diversity_threshold)
        self.tracker.record(outfit.key for outfit in ranking.outfits)

        log_event(
            logger,
            logging.INFO,
            "generation_completed",
            available_count=len(available),
            removed_by_filters=len(filtering.removed),
            search=combinations.diagnostics,
            ranking=ranking.diagnostics,
            score_range=[
                round(min(outfit.score.total for outfit in scored), 3),
                round(max(outfit.score.total for outfit in scored), 3),
            ]
            if scored
            else [],
        )
        return ranking.outfits

    def _generate_using_all_items(
        self, catalog: List[ClothingItem], options: GenerationOptions
    ) -> List[GeneratedOutfit]:
        available = filter_excluded(catalog, options.excluded_items).items
        if len(available) < MIN_AVAILABLE_ITEMS:
            log_event(logger, logging.WARNING, "generation_insufficient_items", available_count=len(available))
            return []
        result = generate_outfits_using_all_items(available, options, self.scorer)
        self.tracker.record(outfit.key for outfit in result.outfits)
        log_event(logger, logging.INFO, "generation_completed", strategy="all_items", **result.diagnostics)
        return result.outfits

    @instrument_operation("engine.score_outfit")
    def score_outfit(self, items: Iterable[RawItem], options: RawOptions = None) -> OutfitScore:
        """Score an arbitrary set of items without recording it as generated."""

        catalog = coerce_items(items)
        resolved = validate_options(options).resolve_defaults(len(catalog), self.config)
        return self.scorer.score(catalog, resolved)

    def create_outfit(
        self,
        items: Sequence[RawItem],
        name: Optional[str] = None,
        existing_names: Iterable[str] = (),
    ) -> Outfit:
        """Build an :class:`Outfit` ready for an external persistence layer.

        Without an explicit ``name`` one is generated from the items, kept
        distinct from ``existing_names``.
        """

        catalog = coerce_items(items)
        tags: List[str] = []
        for item in catalog:
            for tag in item.tags:
                if tag not in tags:
                    tags.append(tag)
        now = datetime.now(timezone.utc)
        return Outfit(
            outfit_id=str(uuid.uuid4()),
            name=name or generate_outfit_name(catalog, existing_names),
            items=catalog,
            season=_common_values([item.season for item in catalog]),
            occasion=_common_values([item.occasion for item in catalog]),
            tags=tags[:MAX_OUTFIT_TAGS],
            created_at=now,
            updated_at=now,
        )

    def reset_history(self) -> None:
        self.tracker.clear()


__all__ = ["OutfitEngine", "coerce_items"]
