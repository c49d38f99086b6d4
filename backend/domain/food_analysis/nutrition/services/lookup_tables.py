"""Last-resort per-label lookup tables.

Only consulted when a backend supplied no value of its own. Matching is
exact first, then substring in either direction, in table order.
"""

from typing import Dict, Mapping, Optional, Tuple, TypeVar

DEFAULT_CALORIES = 100
DEFAULT_WEIGHT_GRAMS = 100
DEFAULT_EMOJI = "🍽️"

# label: (calories per typical portion, typical portion grams, emoji)
_FOOD_TABLE: Dict[str, Tuple[int, int, str]] = {
    "apple": (95, 150, "🍎"),
    "banana": (105, 120, "🍌"),
    "orange": (62, 130, "🍊"),
    "grape": (62, 100, "🍇"),
    "strawberry": (4, 150, "🍓"),
    "blueberry": (4, 100, "🫐"),
    "avocado": (234, 200, "🥑"),
    "broccoli": (55, 100, "🥦"),
    "carrot": (25, 80, "🥕"),
    "lettuce": (5, 50, "🥬"),
    "tomato": (18, 120, "🍅"),
    "cucumber": (16, 100, "🥒"),
    "spinach": (7, 30, "🥬"),
    "potato": (77, 150, "🥔"),
    "sweet potato": (86, 130, "🍠"),
    "chicken": (165, 100, "🍗"),
    "beef": (250, 100, "🥩"),
    "fish": (206, 100, "🐟"),
    "salmon": (206, 100, "🐟"),
    "egg": (70, 50, "🥚"),
    "tofu": (94, 100, "🧈"),
    "cheese": (113, 30, "🧀"),
    "rice": (130, 100, "🍚"),
    "bread": (80, 30, "🍞"),
    "pasta": (131, 100, "🍝"),
    "quinoa": (120, 100, "🌾"),
    "oats": (154, 40, "🌾"),
    "milk": (42, 250, "🥛"),
    "yogurt": (59, 150, "🥛"),
    "butter": (102, 15, "🧈"),
    "almond": (7, 10, "🥜"),
    "walnut": (49, 10, "🥜"),
    "peanut": (6, 10, "🥜"),
}

CALORIE_TABLE: Mapping[str, int] = {k: v[0] for k, v in _FOOD_TABLE.items()}
WEIGHT_TABLE: Mapping[str, int] = {k: v[1] for k, v in _FOOD_TABLE.items()}
EMOJI_TABLE: Mapping[str, str] = {k: v[2] for k, v in _FOOD_TABLE.items()}

T = TypeVar("T")


def lookup(table: Mapping[str, T], label: str) -> Optional[T]:
    """
    Match a label against a table.

    Example:
        >>> lookup(CALORIE_TABLE, "green apple")
        95
    """
    key = label.strip().lower()
    if not key:
        return None
    if key in table:
        return table[key]
    for name, value in table.items():
        if name in key or key in name:
            return value
    return None


def estimate_calories(label: str) -> int:
    value = lookup(CALORIE_TABLE, label)
    return DEFAULT_CALORIES if value is None else value


def estimate_weight(label: str) -> int:
    value = lookup(WEIGHT_TABLE, label)
    return DEFAULT_WEIGHT_GRAMS if value is None else value


def food_emoji(label: str) -> str:
    value = lookup(EMOJI_TABLE, label)
    return DEFAULT_EMOJI if value is None else value
