"""Soft checks on raw configuration that warrant a warning, not a failure."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are legal but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    matching = config_dict.get("matching", {})
    if not isinstance(matching, dict):
        return warning_messages

    threshold = matching.get("min_score_threshold")
    if isinstance(threshold, (int, float)) and not isinstance(threshold, bool):
        if threshold == 0:
            warning_messages.append(
                "min_score_threshold is 0: every available property will be returned"
            )
        elif threshold > 90:
            warning_messages.append(
                f"High min_score_threshold ({threshold}) will return very few matches"
            )

    secondary = matching.get("secondary_location_score")
    if isinstance(secondary, (int, float)) and not isinstance(secondary, bool):
        if secondary >= 100:
            warning_messages.append(
                "secondary_location_score is 100: secondary locations score like primary ones"
            )

    max_workers = matching.get("max_workers")
    if isinstance(max_workers, int) and max_workers > 16:
        warning_messages.append(
            f"Large max_workers ({max_workers}) rarely helps; scoring is CPU-bound"
        )

    zones = matching.get("location_zones")
    if isinstance(zones, dict):
        seen: Dict[str, str] = {}
        for zone, members in zones.items():
            if not isinstance(members, list):
                continue
            for member in members:
                if not isinstance(member, str):
                    continue
                key = member.strip().lower()
                if key in seen and seen[key] != zone:
                    warning_messages.append(
                        f"Locality '{key}' appears in zones '{seen[key]}' and '{zone}'"
                    )
                seen.setdefault(key, zone)

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
