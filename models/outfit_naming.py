"""Deterministic, content-seeded outfit names.

The same items always produce the same name. Names already in use are passed
in explicitly and a suffix (roman numerals, then integers) keeps the result
unique; nothing is cached between calls.
"""
from __future__ import annotations

import hashlib
import itertools
import random
from collections import Counter
from typing import Dict, Iterable, Optional, Sequence, Tuple

from models.clothing_item import ClothingItem
from models.color_theory import hex_to_hsl

EMPTY_OUTFIT_NAME = "Mystery Look"
DEFAULT_NAME_OCCASION = "casual"

NAME_TEMPLATES: Dict[str, Tuple[str, ...]] = {
    "casual": (
        "Weekend Vibes", "Chill Mode", "Easy Breeze", "Laid Back", "Sunday Stroll", "Coffee Run",
        "Comfort Zone", "Relax & Roll", "Casual Cool", "Everyday Style", "Simple Chic", "Effortless Look",
    ),
    "work": (
        "Boss Mode", "Power Play", "Office Chic", "Meeting Ready", "Pro Status", "Work Flow",
        "Business Edge", "Sharp Focus", "Executive Style", "Corporate Chic", "Professional Power", "Boardroom Ready",
    ),
    "formal": (
        "Elegance", "Refined", "Sophisticated", "Classic Grace", "Timeless", "Polished",
        "Distinguished", "Luxe Appeal", "Formal Finesse", "Evening Elegance", "Black Tie Ready", "Gala Glamour",
    ),
    "party": (
        "Night Out", "Party Ready", "Celebration", "Dance Floor", "Show Stopper", "Glamour",
        "Statement", "Sparkle", "Party Perfect", "Night Magic", "Festive Fun", "Club Ready",
    ),
    "sport": (
        "Active Mode", "Workout Ready", "Sporty Edge", "Fitness Focus", "Athletic", "Power Move",
        "Dynamic", "Energy Boost", "Gym Ready", "Sports Star", "Active Lifestyle", "Fitness First",
    ),
    "travel": (
        "Wanderlust", "Journey Ready", "Explorer", "Adventure", "On the Go", "Traveler",
        "Discovery", "Roam Free", "Vacation Vibes", "Travel Style", "Adventure Ready", "Jet Set",
    ),
    "date": (
        "Date Night", "Romance", "Sweet Spot", "Charming", "Flirty", "Enchanting",
        "Dreamy", "Heart Skip", "Love Story", "Romantic Rendezvous", "Sweet Romance", "Date Perfect",
    ),
    "special": (
        "Special Moment", "Occasion", "Memorable", "Milestone", "Celebration", "Unforgettable",
        "Unique", "Distinctive", "Once in a Lifetime", "Grand Occasion", "Special Event", "Milestone Magic",
    ),
}

SEASON_MODIFIERS: Dict[str, Tuple[str, ...]] = {
    "spring": ("Fresh", "Bloom", "Renewal", "Garden", "Awakening", "Breezy", "Flourishing", "Vibrant"),
    "summer": ("Sunny", "Bright", "Tropical", "Radiant", "Golden", "Vibrant", "Warm", "Luminous"),
    "fall": ("Cozy", "Warm", "Autumn", "Rustic", "Harvest", "Earthy", "Crisp", "Rich"),
    "winter": ("Crisp", "Cool", "Frost", "Snow", "Arctic", "Ice", "Chilly", "Frosty"),
}

COLOR_ADJECTIVES: Dict[str, Tuple[str, ...]] = {
    "black": ("Midnight", "Shadow", "Obsidian", "Onyx", "Noir", "Eclipse", "Charcoal", "Raven"),
    "white": ("Pure", "Snow", "Pearl", "Cloud", "Ivory", "Crystal", "Pristine", "Angelic"),
    "gray": ("Storm", "Steel", "Ash", "Slate", "Fog", "Stone", "Silver", "Misty"),
    "red": ("Fire", "Cherry", "Crimson", "Rose", "Ruby", "Flame", "Scarlet", "Burgundy"),
    "blue": ("Ocean", "Sky", "Sapphire", "Navy", "Azure", "Denim", "Cobalt", "Royal"),
    "green": ("Forest", "Emerald", "Mint", "Sage", "Olive", "Jade", "Moss", "Pine"),
    "yellow": ("Sunshine", "Gold", "Lemon", "Honey", "Amber", "Citrus", "Butter", "Canary"),
    "orange": ("Sunset", "Tangerine", "Copper", "Coral", "Peach", "Flame", "Papaya", "Ginger"),
    "pink": ("Blush", "Rose", "Petal", "Soft", "Candy", "Ballet", "Blossom", "Rosy"),
    "purple": ("Lavender", "Plum", "Violet", "Amethyst", "Mauve", "Grape", "Orchid", "Lilac"),
    "brown": ("Chocolate", "Caramel", "Coffee", "Mocha", "Toffee", "Espresso", "Cocoa", "Mahogany"),
}

STYLE_DESCRIPTORS = (
    "Chic", "Sleek", "Modern", "Classic", "Edgy", "Soft", "Bold", "Minimal",
    "Statement", "Effortless", "Polished", "Trendy", "Sophisticated", "Playful", "Elegant", "Sharp",
)

STYLE_MODIFIERS: Dict[str, Tuple[str, ...]] = {
    "modern": ("Sleek", "Contemporary", "Fresh", "Current"),
    "classic": ("Timeless", "Traditional", "Elegant", "Refined"),
    "edgy": ("Bold", "Fierce", "Statement", "Dramatic"),
    "minimal": ("Clean", "Simple", "Pure", "Essential"),
    "bold": ("Striking", "Vibrant", "Dynamic", "Powerful"),
}

ROMAN_SUFFIXES = ("II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X")

# (upper hue bound in degrees, family) for saturated colors.
_HUE_FAMILIES = ((15, "red"), (45, "orange"), (70, "yellow"), (165, "green"), (255, "blue"), (320, "purple"), (345, "pink"))


def color_family(color: str) -> str:
    """Coarse color family used to pick an adjective."""

    hsl = hex_to_hsl(color)
    if hsl.l < 0.15:
        return "black"
    if hsl.l > 0.9:
        return "white"
    if hsl.s < 0.15:
        return "gray"
    if 15 <= hsl.h < 45 and hsl.l < 0.4:
        return "brown"
    for upper, family in _HUE_FAMILIES:
        if hsl.h < upper:
            return family
    return "red"


def _rng(signature: str) -> random.Random:
    digest = hashlib.sha256(signature.encode("utf-8")).hexdigest()
    return random.Random(int(digest[:16], 16))


def _signature(items: Sequence[ClothingItem], with_color: bool = True) -> str:
    parts = (
        f"{item.item_id}-{item.category}-{item.color}" if with_color else f"{item.item_id}-{item.category}"
        for item in items
    )
    return "|".join(sorted(parts))


def _most_common(values: Iterable[str]) -> Optional[str]:
    counts = Counter(value for value in values if value)
    return counts.most_common(1)[0][0] if counts else None


def ensure_unique_name(base_name: str, existing_names: Iterable[str] = ()) -> str:
    """Return ``base_name`` or the first suffixed variant not in ``existing_names``."""

    taken = set(existing_names)
    if base_name not in taken:
        return base_name
    numbers = (str(number) for number in itertools.count(2))
    for suffix in itertools.chain(ROMAN_SUFFIXES, numbers):
        candidate = f"{base_name} {suffix}"
        if candidate not in taken:
            break
    return candidate


def generate_outfit_name(items: Sequence[ClothingItem], existing_names: Iterable[str] = ()) -> str:
    """Build a name from the outfit's occasion, season and dominant color.

    The occasion picks the template family; a season, color or style modifier
    is sometimes added in front of or behind it.
    """

    if not items:
        return ensure_unique_name(EMPTY_OUTFIT_NAME, existing_names)

    items = sorted(items, key=lambda item: item.item_id)
    rng = _rng(_signature(items))
    occasion = _most_common(value for item in items for value in item.occasion)
    season = _most_common(value for item in items for value in item.season)
    dominant_color = _most_common(item.color for item in items)

    base = rng.choice(NAME_TEMPLATES.get(occasion or DEFAULT_NAME_OCCASION, NAME_TEMPLATES[DEFAULT_NAME_OCCASION]))

    modifier = ""
    roll_season, roll_color, roll_style = rng.random(), rng.random(), rng.random()
    if season in SEASON_MODIFIERS and roll_season < 0.4:
        modifier = rng.choice(SEASON_MODIFIERS[season])
    elif dominant_color and roll_color < 0.3:
        modifier = rng.choice(COLOR_ADJECTIVES[color_family(dominant_color)])
    elif roll_style < 0.2:
        modifier = rng.choice(STYLE_DESCRIPTORS)

    name = base
    if modifier and rng.random() < 0.7:
        name = f"{modifier} {base}" if rng.random() < 0.7 else f"{base} {modifier}"
    return ensure_unique_name(name, existing_names)


def generate_styled_outfit_name(
    items: Sequence[ClothingItem],
    style: str = "modern",
    existing_names: Iterable[str] = (),
) -> str:
    """Like :func:`generate_outfit_name`, sometimes prefixed with a style word.

    Raises ``ValueError`` for a style outside :data:`STYLE_MODIFIERS`.
    """

    if style not in STYLE_MODIFIERS:
        raise ValueError(f"Unsupported name style '{style}'. Allowed: {sorted(STYLE_MODIFIERS)}")
    taken = list(existing_names)
    name = generate_outfit_name(items, taken)
    rng = _rng(_signature(items, with_color=False) + style)
    modifier = rng.choice(STYLE_MODIFIERS[style])
    if rng.random() < 0.5:
        return ensure_unique_name(f"{modifier} {name}", taken)
    return name


__all__ = [
    "EMPTY_OUTFIT_NAME",
    "NAME_TEMPLATES",
    "STYLE_MODIFIERS",
    "color_family",
    "ensure_unique_name",
    "generate_outfit_name",
    "generate_styled_outfit_name",
]
