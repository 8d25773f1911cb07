"""Compare outfits by shared items, palette, categories and style tags."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Set, Tuple

from models.clothing_item import ClothingItem
from models.color_theory import colors_are_close

VERY_SIMILAR_THRESHOLD = 0.6
IGNORED_COLORS = {"#000000", "#ffffff"}
STYLE_TAGS = {"casual", "formal", "business", "sporty", "vintage", "trendy", "classic", "bohemian"}


@dataclass(frozen=True)
class SimilarityResult:
    similarity: float
    is_very_similar: bool
    item_match: float = 0.0
    color_match: float = 0.0
    category_match: float = 0.0
    style_match: float = 0.0


def _jaccard(first: Set[str], second: Set[str]) -> float:
    union = first | second
    if not union:
        return 0.0
    return len(first & second) / len(union)


def _primary_colors(outfit: Sequence[ClothingItem]) -> List[str]:
    return [item.color for item in outfit if item.color and item.color not in IGNORED_COLORS]


def _styles(outfit: Sequence[ClothingItem]) -> Set[str]:
    return {tag for item in outfit for tag in item.lowered_tags if tag in STYLE_TAGS}


def _color_match(first: Sequence[ClothingItem], second: Sequence[ClothingItem]) -> float:
    colors_a, colors_b = _primary_colors(first), _primary_colors(second)
    if not colors_a or not colors_b:
        return 0.0
    close_pairs = sum(1 for a in colors_a for b in colors_b if a == b or colors_are_close(a, b))
    return close_pairs / (len(colors_a) * len(colors_b))


def compare_outfits(first: Sequence[ClothingItem], second: Sequence[ClothingItem]) -> SimilarityResult:
    """Weighted similarity: items 40%, colors 25%, categories 20%, style tags 15%."""

    if not first or not second:
        return SimilarityResult(similarity=0.0, is_very_similar=False)

    item_match = _jaccard({item.item_id for item in first}, {item.item_id for item in second})
    color_match = _color_match(first, second)
    category_match = _jaccard({item.category for item in first}, {item.category for item in second})
    styles_a, styles_b = _styles(first), _styles(second)
    style_match = _jaccard(styles_a, styles_b) if styles_a and styles_b else 0.0

    similarity = item_match * 0.4 + color_match * 0.25 + category_match * 0.2 + style_match * 0.15
    return SimilarityResult(
        similarity=similarity,
        is_very_similar=similarity > VERY_SIMILAR_THRESHOLD,
        item_match=item_match,
        color_match=color_match,
        category_match=category_match,
        style_match=style_match,
    )


def find_similar_outfits(
    new_outfit: Sequence[ClothingItem], existing_outfits: Sequence[Sequence[ClothingItem]]
) -> List[Tuple[int, SimilarityResult]]:
    """Return ``(index, result)`` for very similar existing outfits, most similar first."""

    matches = [(index, compare_outfits(new_outfit, outfit)) for index, outfit in enumerate(existing_outfits)]
    very_similar = [match for match in matches if match[1].is_very_similar]
    return sorted(very_similar, key=lambda match: match[1].similarity, reverse=True)


def outfit_fingerprint(outfit: Sequence[ClothingItem]) -> str:
    categories = sorted(item.category for item in outfit)
    colors = sorted(item.color for item in outfit if item.color)
    tags = sorted(tag for item in outfit for tag in item.tags)
    return "|".join([",".join(categories), ",".join(colors), ",".join(tags)])


__all__ = [
    "SimilarityResult",
    "compare_outfits",
    "find_similar_outfits",
    "outfit_fingerprint",
    "VERY_SIMILAR_THRESHOLD",
]
