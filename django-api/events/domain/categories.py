"""Mapping between the provider's segment/genre taxonomy and platform categories.

Dispatch order is fixed: an exact segment name wins, then genre keywords are
tried category by category, then everything falls back to Miscellaneous.
The tables below are data and can grow without touching the dispatch.
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any


class Category(StrEnum):
    MUSIC = "Music"
    SPORTS = "Sports"
    ARTS_THEATRE = "Arts & Theatre"
    COMEDY = "Comedy"
    FAMILY = "Family"
    MISCELLANEOUS = "Miscellaneous"


# Canonical provider segment name per platform category.
SEGMENT_NAMES: dict[Category, str] = {
    Category.MUSIC: "Music",
    Category.SPORTS: "Sports",
    Category.ARTS_THEATRE: "Arts & Theatre",
    Category.COMEDY: "Comedy",
    Category.FAMILY: "Family",
    Category.MISCELLANEOUS: "Miscellaneous",
}

_CATEGORY_BY_SEGMENT: dict[str, Category] = {
    segment: category for category, segment in SEGMENT_NAMES.items()
}

GENRE_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.MUSIC: (
        "Rock", "Pop", "Classical", "Jazz", "Country", "Hip-Hop", "Electronic",
        "R&B", "Folk", "Alternative", "Metal", "Reggae", "Blues", "World",
    ),
    Category.SPORTS: (
        "Football", "Basketball", "Baseball", "Hockey", "Soccer", "Tennis",
        "Golf", "Racing", "Boxing", "MMA",
    ),
    Category.ARTS_THEATRE: ("Theatre", "Dance", "Opera", "Ballet"),
    Category.COMEDY: ("Comedy",),
    Category.FAMILY: ("Family", "Children"),
}


def _name_of(node: Any) -> str:
    if isinstance(node, Mapping):
        name = node.get("name")
        if isinstance(name, str):
            return name
    return ""


def normalize(classification: Mapping[str, Any] | None) -> Category:
    """Return the platform category for a provider classification."""
    if not isinstance(classification, Mapping):
        return Category.MISCELLANEOUS

    segment = _name_of(classification.get("segment"))
    if segment in _CATEGORY_BY_SEGMENT:
        return _CATEGORY_BY_SEGMENT[segment]

    genre = _name_of(classification.get("genre"))
    if genre:
        for category, keywords in GENRE_KEYWORDS.items():
            if any(keyword in genre for keyword in keywords):
                return category

    return Category.MISCELLANEOUS


def to_segment(category: str) -> str:
    """Provider segment name for a platform category.

    Values outside the platform set are forwarded untouched so a caller can
    still query the provider with its own classification names.
    """
    for known, segment in SEGMENT_NAMES.items():
        if category.strip().lower() == known.value.lower():
            return segment
    return category
