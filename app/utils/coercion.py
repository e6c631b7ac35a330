"""Coercion of loosely typed raw fields into Python values.

Raw brand profiles and listings arrive as JSON-shaped mappings where numbers
may be strings, lists may be JSON-encoded strings and anything may be null.
These helpers are used only at the normalization boundary; scoring code
receives fully typed records.
"""

import json
import math
from typing import Any, List, Optional

_TRUE_STRINGS = {"true", "yes", "y", "1", "on"}
_FALSE_STRINGS = {"false", "no", "n", "0", "off"}


def coerce_number(value: Any, field_name: str) -> Optional[float]:
    """Convert a raw numeric field to float.

    Accepts ints, floats and numeric strings (thousands separators allowed).
    None and blank strings mean "absent" and return None.

    Args:
        value: Raw value
        field_name: Field name used in error messages

    Returns:
        Float value, or None when the field is absent

    Raises:
        ValueError: If the value is not numeric, or is NaN/infinite
    """
    if value is None:
        return None

    # bool is an int subclass; a flag is never a valid measurement
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be numeric, got boolean {value!r}")

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("_", "")
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            raise ValueError(f"{field_name} must be numeric, got {value!r}") from None
    else:
        raise ValueError(f"{field_name} must be numeric, got {type(value).__name__}")

    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"{field_name} must be a finite number, got {value!r}")

    return number


def coerce_string_list(value: Any, field_name: str) -> List[str]:
    """Convert a raw list field to a list of stripped, non-empty strings.

    Accepts real lists, JSON-encoded lists ('["a", "b"]') and comma-separated
    strings. None yields an empty list.

    Raises:
        ValueError: If the value cannot be read as a list of strings
    """
    if value is None:
        return []

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                value = json.loads(text)
            except json.JSONDecodeError as e:
                raise ValueError(f"{field_name} is not a valid JSON list: {e}") from None
        else:
            value = text.split(",")

    if isinstance(value, (set, frozenset, tuple)):
        value = list(value)

    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list, got {type(value).__name__}")

    items = []
    for item in value:
        if item is None:
            continue
        if not isinstance(item, (str, int, float)) or isinstance(item, bool):
            raise ValueError(f"{field_name} contains a non-text entry: {item!r}")
        stripped = str(item).strip()
        if stripped:
            items.append(stripped)
    return items


def coerce_bool(value: Any, field_name: str, default: bool = True) -> bool:
    """Convert a raw flag to bool; None falls back to the default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"{field_name} must be a boolean flag, got {value!r}")


def coerce_optional_str(value: Any) -> Optional[str]:
    """Convert a raw text field to a stripped string, or None if blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
