"""Sub-score calculation for a single (requirement, property) pair.

Every function here is pure and deterministic and returns a float in
[0, 100]. Inputs are expected to be fully normalized; a NaN or negative
measurement means the record was built without validation and is rejected
with InvalidRecordError rather than being scored as 0.
"""

import math
from typing import Any, Dict, FrozenSet, Optional

from app.domain.exceptions import InvalidRecordError
from app.domain.models import (
    BrandRequirement,
    NumericRange,
    PropertyCategory,
    PropertyRecord,
    ScoreBreakdown,
)
from app.utils.text import normalize_location

DEFAULT_SECONDARY_LOCATION_SCORE = 70.0

# Partial credit for related categories; pairs are unordered
CATEGORY_COMPATIBILITY: Dict[FrozenSet[PropertyCategory], float] = {
    frozenset({PropertyCategory.RESTAURANT, PropertyCategory.RETAIL}): 70.0,
    frozenset({PropertyCategory.OFFICE, PropertyCategory.RETAIL}): 40.0,
    frozenset({PropertyCategory.WAREHOUSE, PropertyCategory.OTHER}): 40.0,
    frozenset({PropertyCategory.OFFICE, PropertyCategory.OTHER}): 30.0,
}


def _clamp(score: float) -> float:
    return max(0.0, min(100.0, score))


def _check_measure(value: Any, field_name: str, record_id: Optional[str]) -> float:
    """Reject values that are not finite, non-negative numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRecordError(
            f"{field_name} must be numeric, got {value!r}", record_id=record_id
        )
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise InvalidRecordError(
            f"{field_name} must be a finite non-negative number, got {value!r}",
            record_id=record_id,
        )
    return float(value)


def range_score(value: float, band: NumericRange, record_id: Optional[str] = None) -> float:
    """Score a value against an accepted band with linear decay outside it.

    Inside [min, max] (bounds included) the score is 100. Outside, the
    distance to the nearer bound is divided by the band width and subtracted
    (x100) from 100, floored at 0. A zero-width band uses its upper bound as
    the width; if that is zero too, any value outside scores 0.

    Example:
        >>> range_score(1500, NumericRange(min=500, max=1000))
        0.0
        >>> range_score(1250, NumericRange(min=500, max=1000))
        50.0
    """
    value = _check_measure(value, "value", record_id)

    if band.contains(value):
        return 100.0

    distance = band.min - value if value < band.min else value - band.max
    width = band.width or band.max
    if width <= 0:
        return 0.0

    return _clamp(100.0 - (distance / width) * 100.0)


def location_score(
    requirement: BrandRequirement,
    prop: PropertyRecord,
    secondary_score: float = DEFAULT_SECONDARY_LOCATION_SCORE,
) -> float:
    """100 for a primary location match, secondary_score for a secondary one, else 0."""
    if not isinstance(prop.city, str) or not prop.city.strip():
        raise InvalidRecordError("city is missing", record_id=prop.id)

    city = normalize_location(prop.city)
    if any(normalize_location(loc) == city for loc in requirement.primary_locations):
        return 100.0
    if any(normalize_location(loc) == city for loc in requirement.secondary_locations):
        return _clamp(secondary_score)
    return 0.0


def size_score(requirement: BrandRequirement, prop: PropertyRecord) -> float:
    """Linear-decay score of the property size against the size range."""
    _check_measure(prop.size, "size", prop.id)
    if prop.size == 0:
        raise InvalidRecordError("size must be positive", record_id=prop.id)
    return range_score(prop.size, requirement.size_range, prop.id)


def budget_score(requirement: BrandRequirement, prop: PropertyRecord) -> float:
    """Linear-decay score of the monthly rent against the budget range."""
    _check_measure(prop.monthly_rent, "monthly_rent", prop.id)
    return range_score(prop.monthly_rent, requirement.budget_range, prop.id)


def category_score(requirement: BrandRequirement, prop: PropertyRecord) -> float:
    """100 on exact match, table-driven partial credit for related categories, else 0."""
    if not isinstance(prop.category, PropertyCategory):
        raise InvalidRecordError(
            f"unknown category {prop.category!r}", record_id=prop.id
        )

    target = requirement.target_category
    if target is None:
        return 0.0
    if target == prop.category:
        return 100.0
    return CATEGORY_COMPATIBILITY.get(frozenset({target, prop.category}), 0.0)


def amenity_score(requirement: BrandRequirement, prop: PropertyRecord) -> float:
    """Share of the brand's must-have amenities the property offers, as a percentage."""
    wanted = requirement.must_have_amenities
    if not wanted:
        return 0.0
    return _clamp(100.0 * len(wanted & prop.amenities) / len(wanted))


class ScoreCalculator:
    """Computes the full ScoreBreakdown for a (requirement, property) pair."""

    def __init__(self, secondary_location_score: float = DEFAULT_SECONDARY_LOCATION_SCORE):
        """Initialize ScoreCalculator.

        Args:
            secondary_location_score: Location score for a secondary location match
        """
        self.secondary_location_score = secondary_location_score

    def score(self, requirement: BrandRequirement, prop: PropertyRecord) -> ScoreBreakdown:
        """Score one property.

        Args:
            requirement: Normalized brand requirement
            prop: Normalized property record

        Returns:
            ScoreBreakdown with all sub-scores

        Raises:
            InvalidRecordError: If the property carries NaN/negative measurements,
                an empty city or an unknown category
        """
        return ScoreBreakdown(
            location=location_score(requirement, prop, self.secondary_location_score),
            budget=budget_score(requirement, prop),
            size=size_score(requirement, prop),
            category=category_score(requirement, prop),
            amenity=amenity_score(requirement, prop),
        )


def score_property(
    requirement: BrandRequirement,
    prop: PropertyRecord,
    secondary_location_score: float = DEFAULT_SECONDARY_LOCATION_SCORE,
) -> ScoreBreakdown:
    """Score one property with a throwaway ScoreCalculator."""
    return ScoreCalculator(secondary_location_score).score(requirement, prop)
