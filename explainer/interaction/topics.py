"""
Preset topics offered as one-click shortcuts on the dashboard.
"""
from __future__ import annotations

PRESET_TOPICS: tuple[str, ...] = (
    "Arrays",
    "Strings",
    "Binary Search",
    "Linked Lists",
    "Recursion",
    "Trees",
)


def list_topics() -> list[str]:
    return list(PRESET_TOPICS)
