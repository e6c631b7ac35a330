"""Domain models and exceptions for the Brand-Fit-Index matching engine."""

from .exceptions import (
    BrandProfileNotFoundError,
    InvalidRecordError,
    MatchingError,
    ProviderError,
    ValidationError,
)
from .models import (
    BrandRequirement,
    MatchResult,
    NumericRange,
    PriceType,
    PropertyCategory,
    PropertyRecord,
    ScoreBreakdown,
    ScoreWeights,
    SkippedRecord,
)

__all__ = [
    # Models
    "BrandRequirement",
    "MatchResult",
    "NumericRange",
    "PriceType",
    "PropertyCategory",
    "PropertyRecord",
    "ScoreBreakdown",
    "ScoreWeights",
    "SkippedRecord",
    # Exceptions
    "MatchingError",
    "ValidationError",
    "InvalidRecordError",
    "BrandProfileNotFoundError",
    "ProviderError",
]
