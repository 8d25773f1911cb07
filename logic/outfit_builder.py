"""Deterministic outfit assembly with transparent diagnostics.

Two entry points build candidate outfits from an already filtered catalog:

* :func:`generate_outfit_combinations` runs a bounded backtracking search over
  category tiers (essential, completing, undergarment, coordinating).
* :func:`generate_outfits_using_all_items` builds outfits around every item as
  a "star" piece so that most of the catalog is represented at least once.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from engine_app.config import EngineConfig
from logic.classifier import group_items_by_category, has_any
from logic.compatibility import is_compatible, item_compatibility_score
from logic.outfit_scoring import OutfitScorer, has_base
from logic.ranking import ensure_outfit_variety, remove_duplicate_outfits
from models.clothing_item import ClothingItem
from models.color_theory import accessory_color_score, undergarment_color_score, unique_colors
from models.options import GenerationOptions
from models.outfit import GeneratedOutfit, outfit_key
from models.taxonomy import (
    ACCESSORIES,
    ACCESSORY_FALLBACK_CATEGORIES,
    ACCESSORY_FAMILY,
    BAGS,
    BELTS,
    BOTTOMS,
    COORDINATING_CATEGORIES,
    DRESSES,
    HATS,
    JEWELRY,
    MULTI_ITEM_CATEGORIES,
    OUTERWEAR,
    SCARVES,
    SHOES,
    TOPS,
    UNDERGARMENT_CATEGORIES,
)

logger = logging.getLogger(__name__)

STAR_OPTIONAL_CATEGORIES = (SHOES, ACCESSORIES, OUTERWEAR)
CHALLENGE_OPTIONAL_CATEGORIES = (SHOES, ACCESSORIES)

ACCESSORY_PRIORITIES: Dict[str, Tuple[str, ...]] = {
    "formal": (JEWELRY, BAGS, BELTS, SCARVES, ACCESSORIES, HATS, OUTERWEAR),
    "business": (BELTS, BAGS, JEWELRY, ACCESSORIES, SCARVES, OUTERWEAR, HATS),
    "party": (JEWELRY, ACCESSORIES, BAGS, SCARVES, BELTS, HATS, OUTERWEAR),
    "athletic": (ACCESSORIES, BAGS, HATS, OUTERWEAR, BELTS, JEWELRY, SCARVES),
    "casual": (ACCESSORIES, BAGS, JEWELRY, HATS, BELTS, SCARVES, OUTERWEAR),
}

STYLE_MATCH_TAGS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    # style -> (matching tags, matching occasions)
    "formal": (("formal", "elegant"), ("formal",)),
    "business": (("business", "professional"), ("work",)),
    "party": (("party", "fun"), ("party",)),
    "athletic": (("athletic", "sport"), ("sport",)),
    "casual": (("casual",), ("casual",)),
}
VERSATILE_TAGS = ("versatile", "classic")

URGENCY_BOOST = 0.2
URGENT_ACCESSORY_THRESHOLD = 0.3
ACCESSORY_THRESHOLD = 0.4


@dataclass(frozen=True)
class CombinationResult:
    outfits: List[List[ClothingItem]]
    diagnostics: Dict[str, object]


@dataclass(frozen=True)
class AllItemsResult:
    outfits: List[GeneratedOutfit]
    diagnostics: Dict[str, object]


def _outfit_colors(outfit: Sequence[ClothingItem]) -> List[str]:
    return unique_colors(item.color for item in outfit)


def find_best_item_in_category(
    category_items: Sequence[ClothingItem],
    outfit: Sequence[ClothingItem],
    max_multi_items: int = 3,
) -> Optional[ClothingItem]:
    """Pick the highest compatibility item, preferring ones that pass the checker.

    When nothing passes :func:`is_compatible` the best item whose category
    slot is still free is returned instead; ``None`` means no slot is left.
    """

    if not category_items:
        return None
    compatible = [item for item in category_items if is_compatible(item, outfit, max_multi_items)]
    pool = compatible
    if not pool:
        taken_ids = {item.item_id for item in outfit}
        pool = []
        for item in category_items:
            same_category = sum(1 for existing in outfit if existing.category == item.category)
            limit = max_multi_items if item.category in MULTI_ITEM_CATEGORIES else 1
            if item.item_id not in taken_ids and same_category < limit:
                pool.append(item)
        if pool:
            logger.debug("No compatible %s item, using best available", category_items[0].category)
    if not pool:
        return None
    # max() keeps the first of equal scores, preserving catalog order on ties.
    return max(pool, key=lambda item: item_compatibility_score(item, outfit))


def add_coordinated_undergarments(
    outfit: Sequence[ClothingItem],
    grouped: Dict[str, List[ClothingItem]],
    skip_categories: Iterable[str] = (),
    threshold: float = 0.2,
    max_multi_items: int = 3,
) -> List[ClothingItem]:
    """Add color-matched socks and underwear-family pieces above ``threshold``."""

    result = list(outfit)
    skipped = set(skip_categories)
    main_colors = _outfit_colors(outfit)
    for category in UNDERGARMENT_CATEGORIES:
        if category in skipped or any(item.category == category for item in result):
            continue
        best_item: Optional[ClothingItem] = None
        best_score = -1.0
        for item in grouped.get(category, []):
            if not is_compatible(item, result, max_multi_items):
                continue
            score = (undergarment_color_score(item.color, main_colors) + item_compatibility_score(item, result)) / 2
            if score > best_score:
                best_item, best_score = item, score
        if best_item is not None and best_score >= threshold:
            result.append(best_item)
            logger.debug("Added %s %s (score=%.2f)", category, best_item.item_id, best_score)
    return result


def determine_outfit_style(outfit: Sequence[ClothingItem]) -> str:
    """Infer formal, business, party, athletic or casual from occasions and tags."""

    tags = {tag for item in outfit for tag in item.lowered_tags}
    occasions = {occasion for item in outfit for occasion in item.occasion}
    if "formal" in occasions or "formal" in tags:
        return "formal"
    if "work" in occasions or "business" in tags:
        return "business"
    if "party" in occasions or "party" in tags:
        return "party"
    if "sport" in occasions or "athletic" in tags:
        return "athletic"
    return "casual"


def accessory_style_score(item: ClothingItem, outfit_style: str) -> float:
    match_tags, match_occasions = STYLE_MATCH_TAGS.get(outfit_style, STYLE_MATCH_TAGS["casual"])
    tags = item.lowered_tags
    if any(tag in tags for tag in match_tags) or any(occasion in item.occasion for occasion in match_occasions):
        return 1.0
    if any(tag in tags for tag in VERSATILE_TAGS):
        return 0.7
    return 0.4


def prioritize_accessories(categories: Iterable[str], outfit_style: str) -> List[str]:
    """Order ``categories`` by importance for the inferred outfit style."""

    wanted = set(categories)
    priorities = ACCESSORY_PRIORITIES.get(outfit_style, ACCESSORY_PRIORITIES["casual"])
    return [category for category in priorities if category in wanted]


def add_coordinating_accessories(
    outfit: Sequence[ClothingItem],
    grouped: Dict[str, List[ClothingItem]],
    skip_categories: Iterable[str] = (),
    max_multi_items: int = 3,
) -> List[ClothingItem]:
    """Add up to two extra coordinating pieces (three when no accessory is present)."""

    result = list(outfit)
    skipped = set(skip_categories)
    outfit_colors = _outfit_colors(outfit)
    outfit_style = determine_outfit_style(outfit)
    has_mandatory = any(item.category in ACCESSORY_FAMILY for item in result)
    max_additional = 2 if has_mandatory else 3
    added = 0

    for category in prioritize_accessories(COORDINATING_CATEGORIES, outfit_style):
        if added >= max_additional:
            break
        if category in skipped or any(item.category == category for item in result):
            continue
        urgent = not has_mandatory and added == 0
        best_item: Optional[ClothingItem] = None
        best_score = -1.0
        for item in grouped.get(category, []):
            if not is_compatible(item, result, max_multi_items):
                continue
            score = (
                accessory_color_score(item.color, outfit_colors) * 0.4
                + accessory_style_score(item, outfit_style) * 0.3
                + item_compatibility_score(item, result) * 0.3
                + (URGENCY_BOOST if urgent else 0.0)
            )
            if score > best_score:
                best_item, best_score = item, score
        threshold = URGENT_ACCESSORY_THRESHOLD if urgent else ACCESSORY_THRESHOLD
        if best_item is not None and best_score > threshold:
            result.append(best_item)
            added += 1
            logger.debug("Added coordinating %s %s (score=%.2f)", category, best_item.item_id, best_score)
    return result


class _CombinationSearch:
    """Bounded recursive search state for one generation call."""

    def __init__(
        self,
        grouped: Dict[str, List[ClothingItem]],
        forced_categories: Set[str],
        config: EngineConfig,
    ) -> None:
        self.grouped = grouped
        self.forced_categories = forced_categories
        self.config = config
        self.outfits: List[List[ClothingItem]] = []
        self.seen_keys: Set[str] = set()
        self.shoes_available = bool(grouped.get(SHOES))
        self.accessories_available = has_any(grouped, ACCESSORY_FAMILY)
        self.depth_cap_hits = 0
        self.rejected = 0
        self.duplicates = 0

    @property
    def capped(self) -> bool:
        return len(self.outfits) >= self.config.max_candidates

    def build(
        self,
        outfit: List[ClothingItem],
        essential: Tuple[str, ...],
        completing: Tuple[str, ...],
        depth: int = 0,
    ) -> None:
        if self.capped:
            return
        if depth > self.config.max_depth:
            self.depth_cap_hits += 1
            return

        if essential:
            category, remaining = essential[0], essential[1:]
            candidates = self.grouped.get(category, [])[: self.config.max_items_per_category]
            placed = False
            for item in candidates:
                if self.capped:
                    return
                if is_compatible(item, outfit, self.config.max_accessories_per_category):
                    placed = True
                    self.build(outfit + [item], remaining, completing, depth + 1)
            if not placed:
                fallback = find_best_item_in_category(candidates, outfit, self.config.max_accessories_per_category)
                if fallback is not None:
                    self.build(outfit + [fallback], remaining, completing, depth + 1)
            return

        if completing:
            category, remaining = completing[0], completing[1:]
            best = find_best_item_in_category(
                self.grouped.get(category, []), outfit, self.config.max_accessories_per_category
            )
            self.build(outfit + [best] if best is not None else outfit, essential, remaining, depth + 1)
            return

        self.finalize(outfit)

    def finalize(self, outfit: List[ClothingItem]) -> None:
        config = self.config
        result = add_coordinated_undergarments(
            outfit,
            self.grouped,
            self.forced_categories,
            config.undergarment_threshold,
            config.max_accessories_per_category,
        )
        result = add_coordinating_accessories(
            result, self.grouped, self.forced_categories, config.max_accessories_per_category
        )

        categories = {item.category for item in result}
        if not (
            has_base(result)
            and (not self.shoes_available or SHOES in categories)
            and (not self.accessories_available or categories & set(ACCESSORY_FAMILY))
        ):
            self.rejected += 1
            logger.debug("Rejected incomplete outfit %s", outfit_key(result))
            return

        key = outfit_key(result)
        if key in self.seen_keys:
            self.duplicates += 1
            return
        self.seen_keys.add(key)
        self.outfits.append(result)


def _select_forced_items(
    items: Sequence[ClothingItem], forced_ids: Iterable[str], max_multi_items: int
) -> Tuple[List[ClothingItem], List[str]]:
    wanted = set(forced_ids)
    kept: List[ClothingItem] = []
    dropped: List[str] = []
    for item in items:
        if item.item_id not in wanted:
            continue
        if is_compatible(item, kept, max_multi_items):
            kept.append(item)
        else:
            dropped.append(item.item_id)
            logger.warning("Forced item %s conflicts with another forced %s item; dropping", item.item_id, item.category)
    return kept, dropped


def _essential_categories(grouped: Dict[str, List[ClothingItem]], forced_categories: Set[str]) -> Tuple[str, ...]:
    if DRESSES in forced_categories:
        return (DRESSES,)
    if forced_categories & {TOPS, BOTTOMS}:
        return (TOPS, BOTTOMS)
    if grouped.get(DRESSES):
        return (DRESSES,)
    return (TOPS, BOTTOMS)


def _completing_categories(grouped: Dict[str, List[ClothingItem]]) -> Tuple[str, ...]:
    completing: List[str] = []
    if grouped.get(SHOES):
        completing.append(SHOES)
    if grouped.get(ACCESSORIES):
        completing.append(ACCESSORIES)
    else:
        fallback = next((category for category in ACCESSORY_FALLBACK_CATEGORIES if grouped.get(category)), None)
        if fallback:
            completing.append(fallback)
    return tuple(completing)


def generate_outfit_combinations(
    items: Sequence[ClothingItem],
    forced_ids: Iterable[str] = (),
    config: Optional[EngineConfig] = None,
) -> CombinationResult:
    """Build every complete outfit reachable within the search caps."""

    config = config or EngineConfig()
    grouped = group_items_by_category(items)
    forced_items, dropped_forced = _select_forced_items(items, forced_ids, config.max_accessories_per_category)
    forced_categories = {item.category for item in forced_items}

    essential = _essential_categories(grouped, forced_categories)
    completing = _completing_categories(grouped)
    diagnostics: Dict[str, object] = {
        "input_count": len(items),
        "categories": {category: len(values) for category, values in grouped.items()},
        "forced_ids": [item.item_id for item in forced_items],
        "dropped_forced_ids": dropped_forced,
        "essential": list(essential),
        "completing": list(completing),
    }

    missing = [category for category in essential if category not in forced_categories and not grouped.get(category)]
    if missing:
        logger.info("Essential categories without items: %s", missing)
        diagnostics["reason"] = "missing_essential_categories"
        diagnostics["missing"] = missing
        return CombinationResult(outfits=[], diagnostics=diagnostics)

    search = _CombinationSearch(grouped, forced_categories, config)
    search.build(
        list(forced_items),
        tuple(category for category in essential if category not in forced_categories),
        tuple(category for category in completing if category not in forced_categories),
    )
    diagnostics.update(
        {
            "generated": len(search.outfits),
            "rejected_incomplete": search.rejected,
            "duplicates": search.duplicates,
            "depth_cap_hits": search.depth_cap_hits,
            "candidate_cap_reached": search.capped,
        }
    )
    if search.capped:
        logger.info("Candidate cap of %s reached; search stopped early", config.max_candidates)
    logger.info("Generated %s complete outfits from %s items", len(search.outfits), len(items))
    return CombinationResult(outfits=search.outfits, diagnostics=diagnostics)


def add_best_optional_items(
    outfit: Sequence[ClothingItem],
    grouped: Dict[str, List[ClothingItem]],
    categories: Iterable[str],
    threshold: float = 0.1,
) -> List[ClothingItem]:
    """Append the most compatible item of each missing optional category."""

    result = list(outfit)
    for category in categories:
        if any(item.category == category for item in result):
            continue
        best_item: Optional[ClothingItem] = None
        best_score = -1.0
        for item in grouped.get(category, []):
            if any(existing.item_id == item.item_id for existing in result):
                continue
            score = item_compatibility_score(item, result)
            if score > best_score:
                best_item, best_score = item, score
        if best_item is not None and best_score > threshold:
            result.append(best_item)
    return result


def _required_for_star(star: ClothingItem) -> Tuple[str, ...]:
    if star.category == DRESSES:
        return ()
    if star.category == TOPS:
        return (BOTTOMS,)
    if star.category == BOTTOMS:
        return (TOPS,)
    return (TOPS, BOTTOMS)


def generate_outfits_around_star_item(
    star: ClothingItem,
    items: Sequence[ClothingItem],
    options: GenerationOptions,
    scorer: OutfitScorer,
    min_score: float,
) -> List[GeneratedOutfit]:
    """Complete outfits featuring ``star`` and keep those scoring at least ``min_score``."""

    config = scorer.config
    grouped = group_items_by_category(item for item in items if item.item_id != star.item_id)
    outfits: List[GeneratedOutfit] = []

    def extend(outfit: List[ClothingItem], remaining: Tuple[str, ...]) -> None:
        if len(outfits) >= config.max_candidates:
            return
        if not remaining:
            final = add_best_optional_items(
                outfit, grouped, STAR_OPTIONAL_CATEGORIES, config.optional_item_threshold
            )
            score = scorer.score(final, options)
            if score.total >= min_score:
                outfits.append(GeneratedOutfit(items=tuple(final), score=score))
            return
        category, rest = remaining[0], remaining[1:]
        candidates = grouped.get(category, [])[: config.max_items_per_category]
        placed = False
        for item in candidates:
            if is_compatible(item, outfit, config.max_accessories_per_category):
                placed = True
                extend(outfit + [item], rest)
        if not placed and candidates:
            fallback = find_best_item_in_category(candidates, outfit, config.max_accessories_per_category)
            if fallback is not None:
                extend(outfit + [fallback], rest)

    extend([star], _required_for_star(star))
    return outfits


def generate_challenge_outfits(
    items: Sequence[ClothingItem],
    options: GenerationOptions,
    scorer: OutfitScorer,
) -> List[GeneratedOutfit]:
    """Pair the first few tops and bottoms regardless of how well they match."""

    config = scorer.config
    grouped = group_items_by_category(items)
    tops = grouped.get(TOPS, [])[: config.challenge_tops]
    bottoms = grouped.get(BOTTOMS, [])[: config.challenge_bottoms]
    outfits: List[GeneratedOutfit] = []
    for top in tops:
        for bottom in bottoms:
            final = add_best_optional_items(
                [top, bottom], grouped, CHALLENGE_OPTIONAL_CATEGORIES, config.optional_item_threshold
            )
            outfits.append(GeneratedOutfit(items=tuple(final), score=scorer.score(final, options)))
    return outfits


def generate_outfits_using_all_items(
    items: Sequence[ClothingItem],
    options: GenerationOptions,
    scorer: OutfitScorer,
) -> AllItemsResult:
    """Generate outfits so that as much of the catalog as possible appears at least once.

    Results go through the same Jaccard diversity pass as ranked generation, so
    near-identical star outfits collapse to the best scoring one.

    ``options`` must already carry resolved ``max_results`` and ``min_score``.
    """

    config = scorer.config
    min_score = options.min_score if options.min_score is not None else config.default_min_score
    max_results = options.max_results or config.default_max_results

    collected: List[GeneratedOutfit] = []
    used: Set[str] = set()
    for star in items:
        star_outfits = generate_outfits_around_star_item(star, items, options, scorer, min_score)
        for outfit in star_outfits:
            used.update(outfit.item_ids)
        collected.extend(star_outfits)
    star_count = len(collected)

    unused = [item for item in items if item.item_id not in used]
    if unused:
        logger.info("Second pass for %s unused items", len(unused))
    for item in unused:
        collected.extend(generate_outfits_around_star_item(item, items, options, scorer, config.relaxed_min_score))

    challenge = generate_challenge_outfits(items, options, scorer)
    collected.extend(challenge)

    unique = remove_duplicate_outfits(collected)
    unique.sort(key=lambda outfit: outfit.score.total, reverse=True)
    diverse = ensure_outfit_variety(unique, config.diversity_threshold)
    target = max(max_results, math.ceil(len(items) / 3))
    selected = diverse[:target]

    represented = {item_id for outfit in selected for item_id in outfit.item_ids}
    diagnostics: Dict[str, object] = {
        "star_outfits": star_count,
        "second_pass_items": len(unused),
        "challenge_outfits": len(challenge),
        "unique_outfits": len(unique),
        "diverse_outfits": len(diverse),
        "returned": len(selected),
        "utilization": round(len(represented) / len(items), 3) if items else 0.0,
    }
    logger.info(
        "All-items strategy used %s/%s items across %s outfits", len(represented), len(items), len(selected)
    )
    return AllItemsResult(outfits=selected, diagnostics=diagnostics)


__all__ = [
    "CombinationResult",
    "AllItemsResult",
    "find_best_item_in_category",
    "add_coordinated_undergarments",
    "add_coordinating_accessories",
    "determine_outfit_style",
    "accessory_style_score",
    "prioritize_accessories",
    "generate_outfit_combinations",
    "add_best_optional_items",
    "generate_outfits_around_star_item",
    "generate_challenge_outfits",
    "generate_outfits_using_all_items",
]
