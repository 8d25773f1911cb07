"""Outfit and score schemas."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple

from models.clothing_item import KEY_DELIMITER, ClothingItem


def outfit_key(items) -> str:
    """Canonical key: item ids sorted ascending and joined."""

    return KEY_DELIMITER.join(sorted(item.item_id for item in items))


@dataclass(frozen=True)
class ScoreBreakdown:
    color_harmony: float
    style_matching: float
    occasion_suitability: float
    season_suitability: float
    weather_suitability: float
    user_preference: float
    variety: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class OutfitScore:
    total: float
    breakdown: ScoreBreakdown


@dataclass(frozen=True)
class GeneratedOutfit:
    items: Tuple[ClothingItem, ...]
    score: OutfitScore

    @property
    def key(self) -> str:
        return outfit_key(self.items)

    @property
    def item_ids(self) -> List[str]:
        return [item.item_id for item in self.items]

    @property
    def categories(self) -> List[str]:
        return [item.category for item in self.items]


@dataclass
class Outfit:
    """A named outfit ready to hand over to a persistence collaborator."""

    outfit_id: str
    name: str
    items: List[ClothingItem]
    season: List[str] = field(default_factory=list)
    occasion: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    is_favorite: bool = False
    times_worn: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
