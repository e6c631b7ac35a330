"""Text normalization helpers for locations and amenity tags.

Locations are compared case-insensitively after whitespace and punctuation
cleanup. Amenities are reduced to an explicit tag vocabulary
("Ground Floor" -> "ground_floor") so that scoring never depends on
substring checks against free text.
"""

import re
import unicodedata
from typing import Iterable, Optional


def sanitize_text(text: Optional[str]) -> str:
    """Trim and collapse whitespace.

    Args:
        text: Text to sanitize

    Returns:
        Sanitized text (empty string if input is None/empty)
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", str(text).strip())


def normalize_location(text: Optional[str]) -> str:
    """Normalize a city or locality name for comparison.

    Example:
        >>> normalize_location("  HSR  Layout, ")
        'hsr layout'
    """
    normalized = sanitize_text(text).lower()
    normalized = re.sub(r"[,;.!?()\[\]{}\"<>]", " ", normalized)
    return re.sub(r"\s+", " ", normalized).strip()


def normalize_tag(text: Optional[str]) -> str:
    """Reduce an amenity label to a tag.

    Example:
        >>> normalize_tag("Power Back-up")
        'power_back_up'
    """
    tag = unicodedata.normalize("NFKD", sanitize_text(text).lower())
    tag = "".join(ch for ch in tag if not unicodedata.combining(ch))
    tag = re.sub(r"[^a-z0-9]+", "_", tag)
    return tag.strip("_")


def normalize_tags(values: Iterable[str]) -> frozenset:
    """Normalize a collection of amenity labels, dropping empty ones."""
    tags = (normalize_tag(value) for value in values)
    return frozenset(tag for tag in tags if tag)


def humanize_tag(tag: str) -> str:
    """Turn a tag back into readable words ("ground_floor" -> "ground floor")."""
    return tag.replace("_", " ")
