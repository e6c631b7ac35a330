"""Data models for the matching engine.

This module defines the structure returned by a full evaluation of one
requirement against a catalog: the ranked results plus the counts the caller
needs to explain why the remaining properties were left out.
"""

from dataclasses import dataclass, field
from typing import List

from app.domain.models import MatchResult, SkippedRecord


@dataclass
class MatchReport:
    """Outcome of evaluating one brand requirement against a property catalog.

    Attributes:
        results: Properties at or above the threshold, in rank order
        evaluated: Number of properties that were scored
        skipped_unavailable: Properties dropped because they are not available
        skipped_invalid: Properties rejected as malformed during scoring
        below_threshold: Scored properties whose overall score was too low
        min_score_threshold: Threshold the results were filtered with
    """

    results: List[MatchResult] = field(default_factory=list)
    evaluated: int = 0
    skipped_unavailable: int = 0
    skipped_invalid: List[SkippedRecord] = field(default_factory=list)
    below_threshold: int = 0
    min_score_threshold: float = 60.0

    @property
    def matched(self) -> int:
        return len(self.results)

    @property
    def skipped_count(self) -> int:
        """Properties excluded before ranking (unavailable or invalid)."""
        return self.skipped_unavailable + len(self.skipped_invalid)

    @property
    def top_score(self) -> int:
        """Best overall score, or 0 when nothing matched."""
        return self.results[0].overall_score if self.results else 0
