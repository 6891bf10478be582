"""
Filename-based metadata inference.

Last stage of the resolution chain: when no structured metadata can be read,
derive a family/subfamily/full-name triple from the file's base name. Tuned
for variable fonts shipped under numeric or VF-tagged names (e.g. "60981",
"Brevia-VF", "Brevia-LightItalic").
"""

import re
from typing import List, Optional, Tuple

from FontOrganizerCore.core_font_metadata import FontMetadata, FontType

UNKNOWN_VF_FAMILY = "Unknown VF"
DEFAULT_SUBFAMILY = "Regular"
# Font types whose filenames always go through style matching
VF_FONT_TYPES = frozenset([FontType.OPENTYPE, FontType.UNKNOWN])

# Ordered longest-first; the first entry found in the name wins
STYLE_VOCABULARY = (
    "condensed extralight italics",
    "condensed extralight",
    "condensed light italics",
    "condensed light",
    "extralight italics",
    "extralight",
    "light italics",
    "light",
    "medium italics",
    "medium",
    "bold italics",
    "bold",
    "italic",
    "regular",
)


def _style_pattern(style: str) -> "re.Pattern[str]":
    # "light italics" matches "light italics", "lightitalics" and "lightitalic"
    parts = [re.escape(word) for word in style.split()]
    if parts[-1] == "italics":
        parts[-1] = "italics?"
    return re.compile(r"\s*".join(parts))


_STYLE_PATTERNS = [(style, _style_pattern(style)) for style in STYLE_VOCABULARY]


def normalize_stem(stem: str) -> List[str]:
    """Split a filename stem into words on '-', '_' and whitespace."""
    return stem.replace("-", " ").replace("_", " ").split()


def is_numeric_name(stem: str) -> bool:
    return stem.isascii() and stem.isdigit()


def is_variable_font_candidate(stem: str, font_type: FontType) -> bool:
    clean = " ".join(word.lower() for word in normalize_stem(stem))
    # Unreadable signatures are most often damaged OpenType files
    return is_numeric_name(stem) or "vf" in clean or font_type in VF_FONT_TYPES


def match_style(words: List[str]) -> Optional[Tuple[str, int]]:
    """
    Find the first vocabulary style in lowercased words.

    Returns (style, index of the first word the match touches) or None. The
    first word is only searched when it is the only word, so a family name
    like "Boldonse" does not swallow the style.
    """
    starts = []
    position = 0
    for word in words:
        starts.append(position)
        position += len(word) + 1
    clean = " ".join(words)
    search_from = starts[1] if len(words) > 1 else 0

    for style, pattern in _STYLE_PATTERNS:
        match = pattern.search(clean, search_from)
        if match is None:
            continue
        index = max(i for i, start in enumerate(starts) if start <= match.start())
        return style, index
    return None


def infer_metadata(stem: str, font_type: FontType = FontType.UNKNOWN) -> FontMetadata:
    """
    Derive metadata from a filename stem. Never raises.

    Variable-font candidates (numeric names, names containing "vf", OpenType
    or unrecognized files) are split into family and style; anything else
    keeps the stem as family and full name with a Regular style.
    """
    fallback = FontMetadata(
        family_name=stem,
        subfamily_name=DEFAULT_SUBFAMILY,
        full_name=stem,
    )

    words = normalize_stem(stem)
    if not words or not is_variable_font_candidate(stem, font_type):
        return fallback

    lowered = [word.lower() for word in words]
    matched = match_style(lowered)
    if matched is not None:
        style, consumed_from = matched
        subfamily = style.title()
    elif len(words) > 1:
        # Style descriptors are usually the last one or two tokens
        consumed_from = len(words) - 2
        subfamily = " ".join(words[consumed_from:])
    else:
        consumed_from = len(words)
        subfamily = DEFAULT_SUBFAMILY

    family = " ".join(words[:consumed_from])
    if not family or is_numeric_name(stem):
        family = UNKNOWN_VF_FAMILY

    return FontMetadata(
        family_name=family,
        subfamily_name=subfamily,
        full_name=f"{family} {subfamily}".strip(),
    )
