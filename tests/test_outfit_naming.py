"""Outfit naming tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.clothing_item import ClothingItem
from models.outfit_naming import (
    EMPTY_OUTFIT_NAME,
    NAME_TEMPLATES,
    STYLE_MODIFIERS,
    color_family,
    ensure_unique_name,
    generate_outfit_name,
    generate_styled_outfit_name,
)


def _work_outfit():
    return [
        ClothingItem(item_id="top", category="tops", color="navy", season=["fall"], occasion=["work"]),
        ClothingItem(item_id="trousers", category="bottoms", color="black", season=["fall"], occasion=["work"]),
        ClothingItem(item_id="loafers", category="shoes", color="black", occasion=["work", "party"]),
    ]


def test_same_items_always_get_the_same_name():
    items = _work_outfit()
    assert generate_outfit_name(items) == generate_outfit_name(items)
    assert generate_outfit_name(list(reversed(items))) == generate_outfit_name(items)


def test_name_uses_templates_of_the_dominant_occasion():
    name = generate_outfit_name(_work_outfit())
    assert any(template in name for template in NAME_TEMPLATES["work"])

    untagged = [ClothingItem(item_id="t", category="tops"), ClothingItem(item_id="b", category="bottoms")]
    assert any(template in generate_outfit_name(untagged) for template in NAME_TEMPLATES["casual"])


def test_existing_names_get_a_suffix():
    items = _work_outfit()
    name = generate_outfit_name(items)
    assert generate_outfit_name(items, existing_names=[name]) == f"{name} II"
    assert generate_outfit_name(items, existing_names={name, f"{name} II"}) == f"{name} III"


def test_empty_outfit_has_a_placeholder_name():
    assert generate_outfit_name([]) == EMPTY_OUTFIT_NAME
    assert generate_outfit_name([], existing_names=[EMPTY_OUTFIT_NAME]) == f"{EMPTY_OUTFIT_NAME} II"


def test_ensure_unique_name_switches_to_numbers_after_roman_numerals():
    taken = ["Look"] + [f"Look {numeral}" for numeral in ("II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X")]
    assert ensure_unique_name("Look", taken) == "Look 2"
    assert ensure_unique_name("Look", taken + ["Look 2"]) == "Look 3"
    assert ensure_unique_name("Fresh", taken) == "Fresh"


@pytest.mark.parametrize("style", sorted(STYLE_MODIFIERS))
def test_styled_name_wraps_the_plain_name(style):
    items = _work_outfit()
    base = generate_outfit_name(items)
    styled = generate_styled_outfit_name(items, style)
    assert styled == generate_styled_outfit_name(items, style)
    if styled != base:
        modifier, _, rest = styled.partition(" ")
        assert modifier in STYLE_MODIFIERS[style]
        assert rest == base


def test_styled_name_rejects_unknown_style():
    with pytest.raises(ValueError):
        generate_styled_outfit_name(_work_outfit(), "grunge")


@pytest.mark.parametrize(
    "color, family",
    [
        ("#000000", "black"),
        ("#ffffff", "white"),
        ("#808080", "gray"),
        ("#ff0000", "red"),
        ("#008000", "green"),
        ("#0000ff", "blue"),
        ("#8b4513", "brown"),
        ("#800080", "purple"),
    ],
)
def test_color_family(color, family):
    assert color_family(color) == family
