"""Utility functions for raw-field coercion and text normalization."""

from .coercion import coerce_bool, coerce_number, coerce_optional_str, coerce_string_list
from .text import (
    humanize_tag,
    normalize_location,
    normalize_tag,
    normalize_tags,
    sanitize_text,
)

__all__ = [
    # Coercion
    "coerce_bool",
    "coerce_number",
    "coerce_optional_str",
    "coerce_string_list",
    # Text
    "humanize_tag",
    "normalize_location",
    "normalize_tag",
    "normalize_tags",
    "sanitize_text",
]
