"""Ranking, diversity and outfit similarity."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.ranking import ensure_outfit_variety, rank_outfits, remove_duplicate_outfits
from logic.similarity import compare_outfits, find_similar_outfits, outfit_fingerprint
from memory.recency_tracker import jaccard_similarity
from models.clothing_item import ClothingItem
from models.outfit import GeneratedOutfit, OutfitScore, ScoreBreakdown

CATEGORY_BY_PREFIX = {"t": "tops", "b": "bottoms", "s": "shoes", "a": "accessories", "j": "jewelry"}


def _item(item_id, color="#000000", tags=()):
    return ClothingItem(item_id=item_id, category=CATEGORY_BY_PREFIX[item_id[0]], color=color, tags=list(tags))


def _outfit(ids, total):
    breakdown = ScoreBreakdown(1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0)
    return GeneratedOutfit(items=tuple(_item(item_id) for item_id in ids), score=OutfitScore(total, breakdown))


def test_rank_filters_sorts_and_truncates():
    outfits = [
        _outfit(["t1", "b1"], 0.65),
        _outfit(["t2", "b2"], 0.9),
        _outfit(["t3", "b3"], 0.05),
        _outfit(["t4", "b4"], 0.8),
    ]
    result = rank_outfits(outfits, min_score=0.1, max_results=2)
    assert [outfit.score.total for outfit in result.outfits] == [0.9, 0.8]
    assert result.diagnostics["qualifying"] == 3
    assert result.diagnostics["returned"] == 2


def test_rank_keeps_generation_order_for_ties():
    outfits = [_outfit(["t1", "b1"], 0.7), _outfit(["t2", "b2"], 0.7), _outfit(["t3", "b3"], 0.7)]
    result = rank_outfits(outfits, min_score=0.0, max_results=5)
    assert [outfit.item_ids[0] for outfit in result.outfits] == ["t1", "t2", "t3"]


def test_diversity_pass_drops_near_duplicates():
    base = _outfit(["t1", "b1", "s1", "a1"], 0.9)
    sibling = _outfit(["t1", "b1", "s1", "a2"], 0.85)  # Jaccard 3/5 = 0.6
    near_copy = _outfit(["t1", "b1", "s1", "a1", "j1"], 0.8)  # Jaccard 4/5 = 0.8
    kept = ensure_outfit_variety([base, sibling, near_copy])
    assert kept == [base, sibling]
    for first in kept:
        for second in kept:
            if first is not second:
                assert jaccard_similarity(first.key, second.key) <= 0.7


def test_remove_duplicate_outfits_ignores_item_order():
    first = _outfit(["t1", "b1"], 0.7)
    reordered = _outfit(["b1", "t1"], 0.6)
    assert remove_duplicate_outfits([first, reordered]) == [first]


def test_identical_outfits_are_very_similar():
    outfit = [_item("t1", color="navy", tags=["classic"]), _item("b1", tags=["Casual"])]
    result = compare_outfits(outfit, list(outfit))
    assert result.similarity == pytest.approx(1.0)
    assert result.is_very_similar
    assert result.item_match == 1.0


def test_different_outfits_are_not_very_similar():
    first = [_item("t1", color="navy"), _item("b1")]
    second = [_item("t2", color="red"), _item("b2"), _item("s1", color="brown")]
    result = compare_outfits(first, second)
    assert result.item_match == 0.0
    assert result.category_match == pytest.approx(2 / 3)
    assert not result.is_very_similar
    assert compare_outfits([], second).similarity == 0.0


def test_find_similar_outfits_orders_by_similarity():
    new = [_item("t1", color="navy"), _item("b1"), _item("s1")]
    existing = [
        [_item("t9", color="red"), _item("b9")],
        [_item("t1", color="navy"), _item("b1"), _item("s1")],
        [_item("t1", color="navy"), _item("b1"), _item("s2")],
    ]
    matches = find_similar_outfits(new, existing)
    assert [index for index, _ in matches] == [1, 2]


def test_outfit_fingerprint():
    outfit = [_item("t1", color="navy", tags=["work"]), _item("b1", tags=["basic"])]
    assert outfit_fingerprint(outfit) == "bottoms,tops|#000000,#000080|basic,work"
