"""Utility helpers for task priorities."""
from __future__ import annotations

from typing import Dict

# Three levels, most urgent first. "P1" is what new and legacy tasks get.
PRIORITY_META: Dict[str, Dict[str, str]] = {
    "P0": {
        "label": "Critical",
        "color": "#EF4444",    # red-500
    },
    "P1": {
        "label": "High",
        "color": "#F97316",    # orange-500
    },
    "P2": {
        "label": "Medium",
        "color": "#EAB308",    # yellow-500
    },
}

PRIORITIES = tuple(PRIORITY_META.keys())
DEFAULT_PRIORITY = "P1"


def normalize_priority(value: str | None) -> str:
    """Map external values onto a supported priority, falling back to the default."""
    if value is None:
        return DEFAULT_PRIORITY
    key = str(value).strip().upper()
    return key if key in PRIORITY_META else DEFAULT_PRIORITY


def priority_color(value: str) -> str:
    meta = PRIORITY_META.get(value, PRIORITY_META[DEFAULT_PRIORITY])
    return meta["color"]


def priority_options() -> Dict[str, str]:
    """Return mapping of dropdown values -> labels."""
    return {key: f"{key} - {meta['label']}" for key, meta in PRIORITY_META.items()}
