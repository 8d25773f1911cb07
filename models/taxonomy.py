"""Canonical taxonomy definitions for catalog items.

This module centralises the canonical labels for categories, seasons and
occasions together with the category groupings the outfit search relies on.
Helper functions keep validation logic consistent across models and logic.
"""

from typing import Dict, Iterable, List, Tuple

TOPS = "tops"
BOTTOMS = "bottoms"
DRESSES = "dresses"
OUTERWEAR = "outerwear"
SHOES = "shoes"
ACCESSORIES = "accessories"
JEWELRY = "jewelry"
BAGS = "bags"
BELTS = "belts"
HATS = "hats"
SCARVES = "scarves"
UNDERWEAR = "underwear"
BRAS = "bras"
UNDERSHIRTS = "undershirts"
SHORTS_UNDERWEAR = "shorts_underwear"
SOCKS = "socks"
ACTIVEWEAR = "activewear"
SLEEPWEAR = "sleepwear"
SWIMWEAR = "swimwear"

CATEGORIES: List[str] = [
    TOPS,
    BOTTOMS,
    DRESSES,
    OUTERWEAR,
    SHOES,
    ACCESSORIES,
    JEWELRY,
    BAGS,
    BELTS,
    HATS,
    SCARVES,
    UNDERWEAR,
    BRAS,
    UNDERSHIRTS,
    SHORTS_UNDERWEAR,
    SOCKS,
    ACTIVEWEAR,
    SLEEPWEAR,
    SWIMWEAR,
]

MULTI_ITEM_CATEGORIES: Tuple[str, ...] = (ACCESSORIES, JEWELRY, SCARVES)
UNDERGARMENT_CATEGORIES: Tuple[str, ...] = (UNDERWEAR, SHORTS_UNDERWEAR, BRAS, UNDERSHIRTS, SOCKS)
ACCESSORY_FALLBACK_CATEGORIES: Tuple[str, ...] = (JEWELRY, BAGS, BELTS, HATS, SCARVES)
ACCESSORY_FAMILY: Tuple[str, ...] = (ACCESSORIES,) + ACCESSORY_FALLBACK_CATEGORIES
COORDINATING_CATEGORIES: Tuple[str, ...] = (JEWELRY, BAGS, BELTS, HATS, SCARVES, OUTERWEAR)

SEASONS = ["spring", "summer", "fall", "winter"]
OCCASIONS = ["casual", "work", "formal", "party", "sport", "travel", "date", "special"]
OUTFIT_STYLES = ["formal", "business", "party", "athletic", "casual"]

CATEGORY_ALIASES: Dict[str, str] = {
    "top": TOPS,
    "bottom": BOTTOMS,
    "dress": DRESSES,
    "accessory": ACCESSORIES,
    "jewellery": JEWELRY,
    "bag": BAGS,
    "belt": BELTS,
    "hat": HATS,
    "scarf": SCARVES,
    "bra": BRAS,
    "undershirt": UNDERSHIRTS,
    "sock": SOCKS,
}

SEASON_ALIASES: Dict[str, str] = {"autumn": "fall"}

# Named colors resolve to hex so the harmony maths works on free-form catalogs.
NAMED_COLORS: Dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "off_white": "#f5f5f5",
    "gray": "#808080",
    "grey": "#808080",
    "charcoal": "#36454f",
    "navy": "#000080",
    "navy_blue": "#000080",
    "blue": "#0000ff",
    "light_blue": "#add8e6",
    "sky_blue": "#87ceeb",
    "red": "#ff0000",
    "burgundy": "#800020",
    "pink": "#ffc0cb",
    "orange": "#ffa500",
    "yellow": "#ffff00",
    "green": "#008000",
    "olive": "#808000",
    "purple": "#800080",
    "brown": "#a52a2a",
    "tan": "#d2b48c",
    "beige": "#f5f5dc",
    "cream": "#fffdd0",
    "nude": "#e3bc9a",
    "gold": "#ffd700",
    "silver": "#c0c0c0",
}

NEUTRAL_COLOR_NAMES = ("white", "black", "nude", "beige", "gray", "grey")
NEUTRAL_ACCESSORY_COLOR_NAMES = ("black", "white", "brown", "tan", "gold", "silver")


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_").replace("-", "_")


def validate_category(value: str) -> str:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    key = _normalize_key(value)
    key = CATEGORY_ALIASES.get(key, key)
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {sorted(CATEGORIES)}")
    return key


def validate_season(value: str) -> str:
    key = _normalize_key(value)
    key = SEASON_ALIASES.get(key, key)
    if key not in SEASONS:
        raise ValueError(f"Unsupported season '{value}'. Allowed: {SEASONS}")
    return key


def validate_occasion(value: str) -> str:
    key = _normalize_key(value)
    if key not in OCCASIONS:
        raise ValueError(f"Unsupported occasion '{value}'. Allowed: {OCCASIONS}")
    return key


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a hex value when it names a known color."""

    stripped = raw_string.strip()
    if stripped.startswith("#"):
        return stripped.lower()
    return NAMED_COLORS.get(_normalize_key(stripped), stripped.lower())


def normalise_tags(values: Iterable[str], allowed: List[str], aliases: Dict[str, str] | None = None) -> List[str]:
    """Normalise and deduplicate tags against an allowed set."""

    normalised = []
    seen = set()
    for value in values:
        key = _normalize_key(str(value))
        if aliases:
            key = aliases.get(key, key)
        if key in allowed and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "CATEGORIES",
    "MULTI_ITEM_CATEGORIES",
    "UNDERGARMENT_CATEGORIES",
    "ACCESSORY_FALLBACK_CATEGORIES",
    "ACCESSORY_FAMILY",
    "COORDINATING_CATEGORIES",
    "SEASONS",
    "OCCASIONS",
    "OUTFIT_STYLES",
    "NAMED_COLORS",
    "NEUTRAL_COLOR_NAMES",
    "NEUTRAL_ACCESSORY_COLOR_NAMES",
    "TOPS",
    "BOTTOMS",
    "DRESSES",
    "OUTERWEAR",
    "SHOES",
    "ACCESSORIES",
    "JEWELRY",
    "BAGS",
    "BELTS",
    "HATS",
    "SCARVES",
    "UNDERWEAR",
    "BRAS",
    "UNDERSHIRTS",
    "SHORTS_UNDERWEAR",
    "SOCKS",
    "ACTIVEWEAR",
    "SLEEPWEAR",
    "SWIMWEAR",
    "validate_category",
    "validate_season",
    "validate_occasion",
    "normalize_color_name",
    "normalise_tags",
]
