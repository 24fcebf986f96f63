"""Task categories and bar colors."""
from __future__ import annotations

from typing import Dict

CATEGORY_META: Dict[str, Dict[str, str]] = {
    "To Do": {"color": "#3B82F6"},         # blue-500
    "In Progress": {"color": "#EAB308"},   # yellow-500
    "Review": {"color": "#A855F7"},        # purple-500
    "Completed": {"color": "#22C55E"},     # green-500
}

CATEGORIES = tuple(CATEGORY_META.keys())
DEFAULT_CATEGORY = "To Do"

COLOR_META: Dict[str, str] = {
    "blue": "#3B82F6",
    "green": "#22C55E",
    "purple": "#A855F7",
    "orange": "#F97316",
    "red": "#EF4444",
    "pink": "#EC4899",
    "indigo": "#6366F1",
    "teal": "#14B8A6",
}

COLORS = tuple(COLOR_META.keys())
DEFAULT_COLOR = "blue"


def normalize_category(value: str | None) -> str:
    if value is None:
        return DEFAULT_CATEGORY
    text = str(value).strip()
    for category in CATEGORIES:
        if category.lower() == text.lower():
            return category
    return DEFAULT_CATEGORY


def normalize_color(value: str | None) -> str:
    if value is None:
        return DEFAULT_COLOR
    key = str(value).strip().lower()
    return key if key in COLOR_META else DEFAULT_COLOR


def color_hex(value: str) -> str:
    return COLOR_META.get(value, COLOR_META[DEFAULT_COLOR])


__all__ = [
    "CATEGORIES",
    "CATEGORY_META",
    "COLORS",
    "COLOR_META",
    "DEFAULT_CATEGORY",
    "DEFAULT_COLOR",
    "color_hex",
    "normalize_category",
    "normalize_color",
]
