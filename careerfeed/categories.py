"""Static category tables: code mapping, display names and descriptions.

Career categories reach the engine either as one of the six canonical names or
as a finer-grained code (``"music_production"``, ``"dance"`` ...).
:func:`parse_category` is the single place where a raw identifier is turned
into a :data:`~careerfeed.models.CategoryRef`, and :func:`normalize_category`
the single place a code is mapped onto its canonical category.

The display and description tables are used only for formatting output, never
for scoring.
"""

from __future__ import annotations

import re

from careerfeed.models import Canonical, CareerCategory, CategoryRef, Code

CATEGORY_CODE_MAP: dict[str, CareerCategory] = {
    "music_business": CareerCategory.BUSINESS,
    "video_editing": CareerCategory.ANIMATION,
    "creative_career": CareerCategory.WRITING,
    "music_production": CareerCategory.MUSIC,
    "filmmaking": CareerCategory.FILM,
    "dance": CareerCategory.SPORTS,
    "rap_music": CareerCategory.MUSIC,
    "production": CareerCategory.FILM,
}

_CANONICAL_BY_NAME: dict[str, CareerCategory] = {c.value: c for c in CareerCategory}

DISPLAY_NAMES: dict[str, str] = {
    "music_production": "Music Production",
    "dance": "Dance & Choreography",
    "filmmaking": "Filmmaking",
    "video_editing": "Video Editing",
    "rap_music": "Rap & Hip Hop",
    "creative_direction": "Creative Direction",
    "production": "Video Production",
    "music_business": "Music Business",
    "creative_career": "Creative Careers",
}

DESCRIPTIONS: dict[str, str] = {
    "music_production": "Create beats, produce tracks, and work in recording studios",
    "dance": "Choreograph performances, teach dance, and perform professionally",
    "filmmaking": "Direct music videos, films, and visual content",
    "video_editing": "Edit videos, create visual effects, and post-production work",
    "rap_music": "Write lyrics, perform, and build a music career",
    "creative_direction": "Lead creative projects and design visual concepts",
    "production": "Manage video shoots, coordinate teams, and produce content",
    "music_business": "Manage artists, promote music, and work in the industry",
    "creative_career": "Explore various creative industry opportunities",
}

DEFAULT_DESCRIPTION = "A creative career path worth exploring"

# Which category a user tends to move on to after the key.
NEXT_INTEREST_PATTERNS: dict[str, list[str]] = {
    "music_production": ["video_editing", "music_business"],
    "dance": ["choreography", "filmmaking"],
    "rap_music": ["music_production", "music_business"],
    "filmmaking": ["video_editing", "creative_direction"],
}

_WORD_START = re.compile(r"\b\w")


def parse_category(raw: str) -> CategoryRef:
    """Classify *raw* as a canonical category or a free-form code."""
    canonical = _CANONICAL_BY_NAME.get(raw)
    if canonical is not None:
        return Canonical(canonical)
    return Code(raw)


def normalize_category(raw: str | None) -> str | None:
    """Map a category code onto its canonical name.

    Canonical names are returned as-is and unmapped codes pass through
    unchanged.  ``None`` and the empty string normalise to ``None``.
    """
    if not raw:
        return None
    ref = parse_category(raw)
    if isinstance(ref, Canonical):
        return ref.name
    mapped = CATEGORY_CODE_MAP.get(ref.code)
    return mapped.value if mapped is not None else ref.code


def format_category_name(category: str) -> str:
    """Return the human-readable name for a category code.

    Unknown identifiers have underscores replaced by spaces and each word
    capitalised.
    """
    name = DISPLAY_NAMES.get(category)
    if name is not None:
        return name
    return _WORD_START.sub(lambda m: m.group(0).upper(), category.replace("_", " "))


def describe_category(category: str) -> str:
    return DESCRIPTIONS.get(category, DEFAULT_DESCRIPTION)


def next_interest_for(category: str) -> str | None:
    """Return the first category usually explored after *category*, if any."""
    successors = NEXT_INTEREST_PATTERNS.get(category)
    return successors[0] if successors else None
