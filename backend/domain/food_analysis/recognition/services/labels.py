"""Food label sanitization."""

import re
from typing import Optional

UNKNOWN_FOOD = "unknown_food"

_EXTENSION_SUFFIX = re.compile(r"(\.[A-Za-z0-9]+)+$")
_SEPARATORS = re.compile(r"[_-]+")
_WHITESPACE = re.compile(r"\s+")

_PARENT_KEYWORDS = (
    ("apple", "fruit"),
    ("salad", "salad"),
    ("chicken", "chicken"),
    ("rice", "rice"),
)


def sanitize_label(raw: Optional[str]) -> str:
    """
    Normalize a food label coming from a model or a filename.

    Strips trailing extension-like suffixes, turns runs of ``_``/``-`` into
    a space, lower-cases and collapses whitespace. An empty result maps to
    ``"unknown_food"``. Sanitizing an already sanitized label is a no-op.

    Example:
        >>> sanitize_label("Grilled_Chicken-Breast.jpg")
        'grilled chicken breast'
    """
    if not raw or raw.strip().lower() == UNKNOWN_FOOD:
        return UNKNOWN_FOOD

    text = _SEPARATORS.sub(" ", raw)
    text = _WHITESPACE.sub(" ", text).strip().lower()
    # Stripping can expose another suffix ("a.b .c" -> "a.b").
    while True:
        stripped = _EXTENSION_SUFFIX.sub("", text).strip()
        if stripped == text:
            break
        text = stripped
    return text or UNKNOWN_FOOD


def derive_parent_label(label: str) -> Optional[str]:
    """Broader category of a label, or None when no keyword matches."""
    lowered = label.lower()
    for keyword, parent in _PARENT_KEYWORDS:
        if keyword in lowered:
            return parent
    return None
