"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.taxonomy import (
    OCCASIONS,
    SEASON_ALIASES,
    SEASONS,
    normalise_tags,
    normalize_color_name,
    validate_category,
)

# Outfit keys join sorted item ids with this character, so ids may not contain it.
KEY_DELIMITER = "|"


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


@dataclass
class ClothingItem:
    """Represents an item in the user's catalog.

    Items are owned by the external catalog; the engine only reads them.
    """

    item_id: str
    category: str
    color: str = ""
    name: str = ""
    subcategory: Optional[str] = None
    season: List[str] = field(default_factory=list)
    occasion: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    brand: Optional[str] = None
    price: Optional[float] = None

    def __post_init__(self) -> None:
        self.item_id = str(self.item_id)
        if KEY_DELIMITER in self.item_id:
            raise ValueError(f"Item id {self.item_id!r} may not contain {KEY_DELIMITER!r}")
        self.category = validate_category(self.category)
        self.color = normalize_color_name(self.color or "")
        self.season = normalise_tags(_ensure_list(self.season), SEASONS, SEASON_ALIASES)
        self.occasion = normalise_tags(_ensure_list(self.occasion), OCCASIONS)
        self.tags = [str(tag).strip() for tag in _ensure_list(self.tags) if str(tag).strip()]
        if self.price is not None:
            self.price = float(self.price)

    @property
    def lowered_tags(self) -> List[str]:
        return [tag.lower() for tag in self.tags]


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from loose catalog metadata."""

    item_id = metadata.get("item_id", metadata.get("id"))
    missing = [name for name, value in (("item_id", item_id), ("category", metadata.get("category"))) if not value]
    if missing:
        raise ValueError(f"Missing required fields for ClothingItem: {missing}")

    return ClothingItem(
        item_id=str(item_id),
        category=str(metadata["category"]),
        color=str(metadata.get("color") or ""),
        name=str(metadata.get("name") or ""),
        subcategory=metadata.get("subcategory"),
        season=_ensure_list(metadata.get("season")),
        occasion=_ensure_list(metadata.get("occasion")),
        tags=_ensure_list(metadata.get("tags")),
        brand=metadata.get("brand"),
        price=metadata.get("price"),
    )


__all__ = ["ClothingItem", "KEY_DELIMITER", "from_raw_metadata"]
