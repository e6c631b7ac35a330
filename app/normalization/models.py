"""Data models for the normalization layer.

This module defines the structures returned when raw listings are normalized
in bulk, and the lookup helper shared by both normalizers for reading raw
fields under their snake_case or camelCase names.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from app.domain.models import PropertyRecord, SkippedRecord


def pick(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-None value found under any of the given keys.

    Args:
        raw: Raw mapping (brand profile or listing)
        *keys: Candidate key spellings, most canonical first

    Returns:
        The value, or None if no key holds one
    """
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


@dataclass
class PropertyBatch:
    """Result of normalizing a batch of raw listings.

    Attributes:
        records: Successfully normalized records, in input order
        skipped: Records rejected as invalid, in input order
    """

    records: List[PropertyRecord] = field(default_factory=list)
    skipped: List[SkippedRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Number of raw listings seen."""
        return len(self.records) + len(self.skipped)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def skipped_ids(self) -> List[Optional[str]]:
        return [s.record_id for s in self.skipped]
