"""Aggregation of sub-scores into the Brand Fit Index, and ranking.

Rules:
- Unavailable properties are never ranked
- overall = round_half_up(sum(sub_score * weight) / 100), weights in percent
- Only properties with overall >= threshold are kept
- Order: overall desc, then location sub-score desc, then id asc
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence, Tuple

from app.domain.exceptions import ValidationError
from app.domain.models import BrandRequirement, PropertyRecord, ScoreBreakdown, ScoreWeights

DEFAULT_MIN_SCORE_THRESHOLD = 60.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative input."""
    return int(math.floor(value + 0.5))


def overall_score(breakdown: ScoreBreakdown, weights: ScoreWeights) -> int:
    """Combine the four weighted sub-scores into the 0-100 Brand Fit Index.

    Example:
        >>> overall_score(ScoreBreakdown(location=0, budget=100, size=100, category=100),
        ...               ScoreWeights())
        65
    """
    weighted = (
        breakdown.location * weights.location
        + breakdown.budget * weights.budget
        + breakdown.size * weights.size
        + breakdown.category * weights.category
    )
    # Trim float noise so an exact .5 is not seen as .4999...
    return max(0, min(100, round_half_up(round(weighted / 100.0, 9))))


def validate_threshold(value: Any) -> float:
    """Validate a caller-supplied minimum score.

    Raises:
        ValidationError: If the threshold is not a number in [0, 100]
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            "Invalid score threshold", [f"min_score_threshold must be numeric, got {value!r}"]
        )
    if math.isnan(value) or not 0 <= value <= 100:
        raise ValidationError(
            "Invalid score threshold",
            [f"min_score_threshold must be between 0 and 100, got {value!r}"],
        )
    return float(value)


@dataclass(frozen=True)
class ScoredProperty:
    """A property together with its breakdown and aggregate score."""

    record: PropertyRecord
    breakdown: ScoreBreakdown
    overall_score: int

    @property
    def property_id(self) -> str:
        return self.record.id


def ranking_key(item: ScoredProperty) -> Tuple[int, float, str]:
    """Sort key giving a total, reproducible order."""
    return (-item.overall_score, -item.breakdown.location, item.record.id)


class Ranker:
    """Filters and orders scored properties for one requirement."""

    def __init__(self, min_score_threshold: float = DEFAULT_MIN_SCORE_THRESHOLD):
        self.min_score_threshold = validate_threshold(min_score_threshold)

    @staticmethod
    def split_available(
        properties: Sequence[PropertyRecord],
    ) -> Tuple[List[PropertyRecord], int]:
        """Drop unavailable properties, keeping input order.

        Returns:
            Tuple of (available properties, number of unavailable ones dropped)
        """
        available = [p for p in properties if p.available is True]
        return available, len(properties) - len(available)

    @staticmethod
    def aggregate(
        requirement: BrandRequirement, prop: PropertyRecord, breakdown: ScoreBreakdown
    ) -> ScoredProperty:
        return ScoredProperty(
            record=prop,
            breakdown=breakdown,
            overall_score=overall_score(breakdown, requirement.weights),
        )

    def rank(self, scored: Iterable[ScoredProperty]) -> Tuple[List[ScoredProperty], int]:
        """Keep properties at or above the threshold and sort them.

        Args:
            scored: Scored properties in any order

        Returns:
            Tuple of (kept properties in rank order, number below threshold)
        """
        kept = []
        below = 0
        for item in scored:
            if item.overall_score >= self.min_score_threshold:
                kept.append(item)
            else:
                below += 1
        kept.sort(key=ranking_key)
        return kept, below
