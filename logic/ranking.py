"""Minimum-score filter, stable ordering and greedy diversity selection."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from memory.recency_tracker import jaccard_similarity
from models.outfit import GeneratedOutfit

logger = logging.getLogger(__name__)

DEFAULT_DIVERSITY_THRESHOLD = 0.7


@dataclass(frozen=True)
class RankingResult:
    outfits: List[GeneratedOutfit]
    diagnostics: Dict[str, object]


def remove_duplicate_outfits(outfits: Iterable[GeneratedOutfit]) -> List[GeneratedOutfit]:
    """Keep the first outfit seen for each canonical key."""

    seen = set()
    unique: List[GeneratedOutfit] = []
    for outfit in outfits:
        if outfit.key in seen:
            continue
        seen.add(outfit.key)
        unique.append(outfit)
    return unique


def ensure_outfit_variety(
    outfits: List[GeneratedOutfit], threshold: float = DEFAULT_DIVERSITY_THRESHOLD
) -> List[GeneratedOutfit]:
    """Greedily keep outfits whose Jaccard similarity to every kept one is at most ``threshold``."""

    kept: List[GeneratedOutfit] = []
    for outfit in outfits:
        if all(jaccard_similarity(outfit.key, chosen.key) <= threshold for chosen in kept):
            kept.append(outfit)
    return kept


def rank_outfits(
    outfits: Iterable[GeneratedOutfit],
    min_score: float,
    max_results: int,
    diversity_threshold: float = DEFAULT_DIVERSITY_THRESHOLD,
) -> RankingResult:
    """Filter by ``min_score``, sort descending, diversify and truncate."""

    candidates = list(outfits)
    qualifying = [outfit for outfit in candidates if outfit.score.total >= min_score]
    # sorted() is stable, so equal scores keep generation order.
    ordered = sorted(qualifying, key=lambda outfit: outfit.score.total, reverse=True)
    diverse = ensure_outfit_variety(ordered, diversity_threshold)
    selected = diverse[:max_results]
    logger.info(
        "Ranked %s candidates: %s qualifying, %s diverse, %s returned",
        len(candidates),
        len(qualifying),
        len(diverse),
        len(selected),
    )
    return RankingResult(
        outfits=selected,
        diagnostics={
            "scored": len(candidates),
            "qualifying": len(qualifying),
            "diverse": len(diverse),
            "returned": len(selected),
            "min_score": min_score,
        },
    )


__all__ = ["RankingResult", "rank_outfits", "remove_duplicate_outfits", "ensure_outfit_variety"]
