"""Core domain models for brand requirements, properties and match results.

This module defines the canonical records the matching engine works with:
- PropertyRecord: normalized property listing (rent always monthly)
- BrandRequirement: normalized brand requirement with ranges and weights
- ScoreBreakdown: per-dimension sub-scores for one (requirement, property) pair
- MatchResult: ranked, explained result handed back to the caller
- SkippedRecord: a record excluded from a run, with the reason why

All models are frozen: they are built once per invocation and never mutated.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from app.utils.text import normalize_location

# Tolerance applied when checking that weights sum to 100
WEIGHT_TOLERANCE = 0.01

# Hard cap on explanation strings per result
MAX_REASONS = 5


class PropertyCategory(str, Enum):
    """Closed set of property categories."""

    OFFICE = "office"
    RETAIL = "retail"
    WAREHOUSE = "warehouse"
    RESTAURANT = "restaurant"
    OTHER = "other"


class PriceType(str, Enum):
    """Pricing conventions found on raw listings."""

    MONTHLY = "monthly"
    YEARLY = "yearly"
    SQFT = "sqft"


class NumericRange(BaseModel):
    """Inclusive numeric band with non-negative bounds."""

    min: float = Field(..., ge=0, allow_inf_nan=False, description="Lower bound (inclusive)")
    max: float = Field(..., ge=0, allow_inf_nan=False, description="Upper bound (inclusive)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_order(self):
        """Reject inverted ranges."""
        if self.min > self.max:
            raise ValueError(f"range min ({self.min}) is greater than max ({self.max})")
        return self

    @property
    def width(self) -> float:
        return self.max - self.min

    def contains(self, value: float) -> bool:
        """Check whether value falls inside the band, bounds included."""
        return self.min <= value <= self.max


class ScoreWeights(BaseModel):
    """Relative importance of the four weighted sub-scores, as percentages."""

    location: float = Field(35.0, ge=0, allow_inf_nan=False)
    budget: float = Field(25.0, ge=0, allow_inf_nan=False)
    size: float = Field(25.0, ge=0, allow_inf_nan=False)
    category: float = Field(15.0, ge=0, allow_inf_nan=False)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_total(self):
        """Weights must add up to 100."""
        total = self.total
        if abs(total - 100.0) > WEIGHT_TOLERANCE:
            raise ValueError(f"weights must sum to 100, got {total:g}")
        return self

    @property
    def total(self) -> float:
        return self.location + self.budget + self.size + self.category

    def as_dict(self) -> Dict[str, float]:
        return {
            "location": self.location,
            "budget": self.budget,
            "size": self.size,
            "category": self.category,
        }


class PropertyRecord(BaseModel):
    """Normalized property listing.

    monthly_rent is always the monthly-equivalent figure, whatever pricing
    convention the source listing used. title and address are carried for
    display only and never influence scoring.
    """

    id: str = Field(..., min_length=1, description="Opaque listing identifier")
    city: str = Field(..., min_length=1, description="City or locality of the listing")
    size: int = Field(..., gt=0, description="Carpet area in sqft")
    monthly_rent: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Monthly-equivalent rent"
    )
    category: PropertyCategory = Field(..., description="Property category")
    amenities: FrozenSet[str] = Field(
        default_factory=frozenset, description="Normalized amenity tags"
    )
    available: bool = Field(True, description="Whether the listing is currently offerable")
    title: Optional[str] = Field(None, description="Listing title")
    address: Optional[str] = Field(None, description="Street address")

    @field_validator("id", "city")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip whitespace from identifying fields."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "id": "prop-101",
        "city": "Koramangala",
        "size": 750,
        "monthly_rent": 75000,
        "category": "restaurant",
        "amenities": ["parking", "ground_floor"],
        "available": True,
    }}}


class BrandRequirement(BaseModel):
    """Normalized requirement of a single brand.

    Locations are split into a primary tier and a disjoint secondary tier.
    preferred_locations gives both tiers in order, primary first.
    """

    id: str = Field(..., min_length=1, description="Brand identifier")
    primary_locations: Tuple[str, ...] = Field(default_factory=tuple)
    secondary_locations: Tuple[str, ...] = Field(default_factory=tuple)
    size_range: NumericRange = Field(..., description="Accepted size band in sqft")
    budget_range: NumericRange = Field(..., description="Accepted monthly rent band")
    target_category: Optional[PropertyCategory] = Field(None)
    weights: ScoreWeights = Field(default_factory=ScoreWeights)
    must_have_amenities: FrozenSet[str] = Field(default_factory=frozenset)
    industry: Optional[str] = Field(None, description="Brand industry, used in wording only")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_requirement(self):
        """Enforce positive size bounds and disjoint location tiers."""
        if self.size_range.min <= 0:
            raise ValueError("size range bounds must be positive")

        primary = {normalize_location(loc) for loc in self.primary_locations}
        overlap = sorted(
            loc for loc in self.secondary_locations if normalize_location(loc) in primary
        )
        if overlap:
            raise ValueError(
                f"locations cannot be both primary and secondary: {', '.join(overlap)}"
            )
        return self

    @property
    def preferred_locations(self) -> Tuple[str, ...]:
        return self.primary_locations + self.secondary_locations


class ScoreBreakdown(BaseModel):
    """Sub-scores for one (requirement, property) pair, each in [0, 100].

    location, budget, size and category are weighted into the overall score.
    amenity measures must-have amenity coverage and only feeds explanations.
    """

    location: float = Field(..., ge=0, le=100)
    budget: float = Field(..., ge=0, le=100)
    size: float = Field(..., ge=0, le=100)
    category: float = Field(..., ge=0, le=100)
    amenity: float = Field(0.0, ge=0, le=100)

    model_config = {"frozen": True}


class MatchResult(BaseModel):
    """A property that cleared the threshold, with its score and explanations."""

    property_id: str = Field(..., min_length=1)
    overall_score: int = Field(..., ge=0, le=100, description="Brand Fit Index")
    breakdown: ScoreBreakdown
    reasons: Tuple[str, ...] = Field(default_factory=tuple, max_length=MAX_REASONS)

    model_config = {"frozen": True}


class SkippedRecord(BaseModel):
    """A raw or normalized record excluded from a run."""

    record_id: Optional[str] = Field(None, description="Identifier, if one could be read")
    reason: str = Field(..., description="Why the record was excluded")

    model_config = {"frozen": True}
