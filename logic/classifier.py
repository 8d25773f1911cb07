"""Group a flat catalog into per-category buckets."""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from models.clothing_item import ClothingItem


def group_items_by_category(items: Iterable[ClothingItem]) -> Dict[str, List[ClothingItem]]:
    """Return category -> items, preserving catalog order within each bucket."""

    grouped: Dict[str, List[ClothingItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def categories_present(items: Iterable[ClothingItem]) -> Set[str]:
    return {item.category for item in items}


def has_any(grouped: Dict[str, List[ClothingItem]], categories: Iterable[str]) -> bool:
    return any(grouped.get(category) for category in categories)


__all__ = ["group_items_by_category", "categories_present", "has_any"]
