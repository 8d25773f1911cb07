"""Hard category rules and soft item-to-outfit compatibility scoring."""

from __future__ import annotations

import logging
from typing import Sequence

from models.clothing_item import ClothingItem
from models.color_theory import color_harmony_score
from models.taxonomy import MULTI_ITEM_CATEGORIES

logger = logging.getLogger(__name__)

MAX_MULTI_ITEM_COUNT = 3


def is_compatible(
    candidate: ClothingItem,
    outfit: Sequence[ClothingItem],
    max_multi_items: int = MAX_MULTI_ITEM_COUNT,
) -> bool:
    """Return True when ``candidate`` may join ``outfit``.

    Only category exclusivity and the multi-item cap are enforced here; finer
    judgement is left to the scorer so the search space is not over-pruned.
    """

    if any(item.item_id == candidate.item_id for item in outfit):
        return False
    same_category = sum(1 for item in outfit if item.category == candidate.category)
    if candidate.category in MULTI_ITEM_CATEGORIES:
        if same_category >= max_multi_items:
            logger.debug("%s would exceed %s items for %s", candidate.item_id, max_multi_items, candidate.category)
            return False
        return True
    if same_category:
        logger.debug("%s conflicts with existing %s", candidate.item_id, candidate.category)
        return False
    return True


def _overlap(values: Sequence[str], pool: set) -> float:
    if not pool:
        return 1.0
    return sum(1 for value in values if value in pool) / len(pool)


def item_compatibility_score(item: ClothingItem, outfit: Sequence[ClothingItem]) -> float:
    """Soft score of how well ``item`` fits the partial outfit (0-1)."""

    if not outfit:
        return 1.0
    color_score = color_harmony_score([existing.color for existing in outfit] + [item.color])
    seasons = {season for existing in outfit for season in existing.season}
    occasions = {occasion for existing in outfit for occasion in existing.occasion}
    return color_score * 0.4 + _overlap(item.season, seasons) * 0.3 + _overlap(item.occasion, occasions) * 0.3


__all__ = ["is_compatible", "item_compatibility_score", "MAX_MULTI_ITEM_COUNT"]
