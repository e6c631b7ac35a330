"""Normalization layer turning raw brand profiles and listings into canonical records.

This module provides:
- RequirementNormalizer: raw brand profile -> BrandRequirement
- PropertyNormalizer: raw listing -> PropertyRecord (monthly rent normalized)
- PropertyBatch: batch normalization output with skipped records
"""

from .models import PropertyBatch
from .properties import PropertyNormalizer, to_monthly_rent
from .requirements import INDUSTRY_CATEGORIES, RequirementNormalizer, parse_category

__all__ = [
    "RequirementNormalizer",
    "PropertyNormalizer",
    "PropertyBatch",
    "INDUSTRY_CATEGORIES",
    "parse_category",
    "to_monthly_rent",
]
