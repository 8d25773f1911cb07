"""Category grouping and compatibility rules."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.classifier import categories_present, group_items_by_category, has_any
from logic.compatibility import is_compatible, item_compatibility_score
from models.clothing_item import ClothingItem, from_raw_metadata


def _item(item_id, category, color="#000000", season=("fall",), occasion=("work",), tags=()):
    return ClothingItem(
        item_id=item_id,
        category=category,
        color=color,
        season=list(season),
        occasion=list(occasion),
        tags=list(tags),
    )


def test_grouping_preserves_catalog_order():
    items = [_item("t2", "tops"), _item("b1", "bottoms"), _item("t1", "tops")]
    grouped = group_items_by_category(items)
    assert [item.item_id for item in grouped["tops"]] == ["t2", "t1"]
    assert list(grouped) == ["tops", "bottoms"]
    assert categories_present(items) == {"tops", "bottoms"}
    assert has_any(grouped, ["dresses", "bottoms"])
    assert not has_any(grouped, ["dresses"])


def test_single_item_categories_are_exclusive():
    outfit = [_item("t1", "tops")]
    assert not is_compatible(_item("t2", "tops"), outfit)
    assert is_compatible(_item("b1", "bottoms"), outfit)


def test_duplicate_item_is_rejected():
    jewelry = _item("j1", "jewelry")
    assert not is_compatible(jewelry, [jewelry])


def test_multi_item_categories_cap_at_three():
    outfit = [_item("j1", "jewelry"), _item("j2", "jewelry")]
    assert is_compatible(_item("j3", "jewelry"), outfit)
    outfit.append(_item("j3", "jewelry"))
    assert not is_compatible(_item("j4", "jewelry"), outfit)


def test_item_compatibility_score_rewards_shared_context():
    outfit = [_item("t1", "tops", season=("fall", "winter"), occasion=("work",))]
    matching = _item("b1", "bottoms", season=("fall", "winter"), occasion=("work",))
    unrelated = _item("b2", "bottoms", season=("summer",), occasion=("party",))

    assert item_compatibility_score(matching, []) == 1.0
    assert item_compatibility_score(matching, outfit) > item_compatibility_score(unrelated, outfit)
    assert 0.0 <= item_compatibility_score(unrelated, outfit) <= 1.0


def test_clothing_item_normalises_fields():
    item = ClothingItem(item_id=7, category="Top", color="Navy", season=["Autumn", "bogus"], occasion="work")
    assert item.item_id == "7"
    assert item.category == "tops"
    assert item.color == "#000080"
    assert item.season == ["fall"]
    assert item.occasion == ["work"]


def test_clothing_item_rejects_unknown_category():
    with pytest.raises(ValueError):
        ClothingItem(item_id="x", category="spaceship")


def test_from_raw_metadata_requires_id_and_category():
    item = from_raw_metadata({"id": "s1", "category": "shoes", "color": "black", "tags": "leather"})
    assert item.item_id == "s1"
    assert item.tags == ["leather"]
    with pytest.raises(ValueError):
        from_raw_metadata({"category": "shoes"})
    with pytest.raises(ValueError):
        from_raw_metadata({"id": "s2"})
