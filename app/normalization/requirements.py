"""Brand requirement normalization.

Turns a raw, loosely typed brand profile (nullable fields, JSON-encoded
lists, string-typed numbers, camelCase keys) into a canonical
BrandRequirement. All coercion happens here so scoring code only ever sees
typed, validated records.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from app.config.models import MatchingConfig
from app.domain.exceptions import ValidationError
from app.domain.models import BrandRequirement, NumericRange, PropertyCategory, ScoreWeights
from app.logging import get_logger
from app.utils.coercion import coerce_number, coerce_optional_str, coerce_string_list
from app.utils.text import normalize_location, normalize_tag, normalize_tags, sanitize_text

from .models import pick

logger = get_logger(__name__, component="normalization")

DEFAULT_SIZE_MIN = 1.0
DEFAULT_SIZE_MAX = 100_000.0
DEFAULT_BUDGET_MIN = 0.0
DEFAULT_BUDGET_MAX = 10_000_000.0

WEIGHT_KEYS = ("location", "budget", "size", "category")

# Decimal places kept on normalized weights; drops binary drift such as 28.999999999999996
WEIGHT_PRECISION = 9

# Alternative spellings accepted for weight keys
WEIGHT_ALIASES = {
    "property_type": "category",
    "propertyType": "category",
    "type": "category",
}

# Business type -> property category it is best served by
INDUSTRY_CATEGORIES: Dict[str, PropertyCategory] = {
    "cafe": PropertyCategory.RESTAURANT,
    "cafe_qsr": PropertyCategory.RESTAURANT,
    "restaurant": PropertyCategory.RESTAURANT,
    "fine_dining": PropertyCategory.RESTAURANT,
    "bar": PropertyCategory.RESTAURANT,
    "brewery": PropertyCategory.RESTAURANT,
    "cloud_kitchen": PropertyCategory.RESTAURANT,
    "qsr": PropertyCategory.RETAIL,
    "retail": PropertyCategory.RETAIL,
    "fashion": PropertyCategory.RETAIL,
    "gym": PropertyCategory.RETAIL,
    "fitness": PropertyCategory.RETAIL,
    "entertainment": PropertyCategory.RETAIL,
    "salon": PropertyCategory.RETAIL,
    "office": PropertyCategory.OFFICE,
    "coworking": PropertyCategory.OFFICE,
    "it": PropertyCategory.OFFICE,
    "logistics": PropertyCategory.WAREHOUSE,
    "warehousing": PropertyCategory.WAREHOUSE,
    "ecommerce": PropertyCategory.WAREHOUSE,
}


def parse_category(value: Any) -> Optional[PropertyCategory]:
    """Parse a raw category label into the closed enum.

    Raises:
        ValueError: If the label is not a known category
    """
    if isinstance(value, PropertyCategory):
        return value
    label = coerce_optional_str(value)
    if label is None:
        return None
    try:
        return PropertyCategory(normalize_tag(label))
    except ValueError:
        valid = ", ".join(c.value for c in PropertyCategory)
        raise ValueError(f"unknown category '{label}' (expected one of: {valid})") from None


class RequirementNormalizer:
    """Normalizes raw brand profiles into BrandRequirement records.

    Responsibilities:
    - Read fields under snake_case or camelCase names
    - Split locations into a primary tier and a disjoint secondary tier,
      expanding the secondary tier with localities from configured zones
    - Apply default ranges and weights
    - Derive a target category from the brand's industry when none is given
    - Collect every problem and raise a single ValidationError
    """

    def __init__(
        self,
        settings: Optional[MatchingConfig] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize RequirementNormalizer.

        Args:
            settings: Matching settings (default weights, tolerance, zones)
            logger_instance: Logger instance (defaults to module logger)
        """
        self.settings = settings or MatchingConfig()
        self.logger = logger_instance or logger

    def normalize(self, raw: Mapping[str, Any]) -> BrandRequirement:
        """Normalize a raw brand profile.

        Args:
            raw: Raw brand profile mapping

        Returns:
            Validated BrandRequirement

        Raises:
            ValidationError: If the profile is structurally malformed
        """
        if not isinstance(raw, Mapping):
            raise ValidationError(
                "Invalid brand requirement",
                [f"expected a mapping, got {type(raw).__name__}"],
            )

        errors: List[str] = []

        brand_id = coerce_optional_str(pick(raw, "id", "brand_id", "brandId"))
        if brand_id is None:
            errors.append("id: brand identifier is required")

        primary, secondary = self._read_locations(raw, errors)
        size_range = self._read_range(
            raw, "size", ("min_size", "minSize"), ("max_size", "maxSize"),
            DEFAULT_SIZE_MIN, DEFAULT_SIZE_MAX, errors,
        )
        budget_range = self._read_range(
            raw, "budget", ("budget_min", "budgetMin"), ("budget_max", "budgetMax"),
            DEFAULT_BUDGET_MIN, DEFAULT_BUDGET_MAX, errors,
        )
        industry = coerce_optional_str(pick(raw, "industry", "business_type", "businessType"))
        target_category = self._read_category(raw, industry, errors)
        weights = self._read_weights(raw.get("weights"), errors)

        try:
            amenities = normalize_tags(
                coerce_string_list(
                    pick(raw, "must_have_amenities", "mustHaveAmenities"), "must_have_amenities"
                )
            )
        except ValueError as e:
            errors.append(str(e))
            amenities = frozenset()

        if errors:
            self.logger.warning(
                "Rejected malformed brand requirement",
                extra={
                    "event": "normalization.requirement.rejected",
                    "brand_id": brand_id,
                    "error_count": len(errors),
                },
            )
            raise ValidationError("Invalid brand requirement", errors)

        try:
            requirement = BrandRequirement(
                id=brand_id,
                primary_locations=primary,
                secondary_locations=secondary,
                size_range=size_range,
                budget_range=budget_range,
                target_category=target_category,
                weights=weights,
                must_have_amenities=amenities,
                industry=industry,
            )
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid brand requirement",
                [f"{'.'.join(str(p) for p in err['loc']) or 'requirement'}: {err['msg']}"
                 for err in e.errors()],
            ) from e

        self.logger.debug(
            "Normalized brand requirement",
            extra={
                "event": "normalization.requirement.normalized",
                "brand_id": requirement.id,
                "primary_locations": len(requirement.primary_locations),
                "secondary_locations": len(requirement.secondary_locations),
                "target_category": target_category.value if target_category else None,
            },
        )

        return requirement

    def _read_locations(
        self, raw: Mapping[str, Any], errors: List[str]
    ) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """Read both location tiers, deduplicated case-insensitively, primary first."""
        try:
            primary_raw = coerce_string_list(
                pick(raw, "preferred_locations", "preferredLocations", "locations"),
                "preferred_locations",
            )
            secondary_raw = coerce_string_list(
                pick(raw, "secondary_locations", "secondaryLocations", "alternate_locations"),
                "secondary_locations",
            )
        except ValueError as e:
            errors.append(str(e))
            return (), ()

        seen = set()
        primary: List[str] = []
        for location in primary_raw:
            key = normalize_location(location)
            if key and key not in seen:
                seen.add(key)
                primary.append(sanitize_text(location))

        secondary: List[str] = []
        for location in secondary_raw + self._zone_neighbours(primary):
            key = normalize_location(location)
            if key and key not in seen:
                seen.add(key)
                secondary.append(sanitize_text(location))

        return tuple(primary), tuple(secondary)

    def _zone_neighbours(self, primary: List[str]) -> List[str]:
        """Localities sharing a configured zone with any primary location."""
        primary_keys = {normalize_location(loc) for loc in primary}
        neighbours = []
        for zone in sorted(self.settings.location_zones):
            members = self.settings.location_zones[zone]
            if primary_keys & {normalize_location(m) for m in members}:
                neighbours.extend(members)
        return neighbours

    @staticmethod
    def _read_range(
        raw: Mapping[str, Any],
        label: str,
        min_keys: Tuple[str, ...],
        max_keys: Tuple[str, ...],
        default_min: float,
        default_max: float,
        errors: List[str],
    ) -> Optional[NumericRange]:
        """Read a min/max pair, applying defaults for absent bounds."""
        try:
            low = coerce_number(pick(raw, *min_keys), min_keys[0])
            high = coerce_number(pick(raw, *max_keys), max_keys[0])
        except ValueError as e:
            errors.append(str(e))
            return None

        negative = [
            f"{name} cannot be negative, got {value:g}"
            for name, value in ((min_keys[0], low), (max_keys[0], high))
            if value is not None and value < 0
        ]
        if negative:
            errors.extend(negative)
            return None

        # A zero lower bound means "no lower bound"
        if low is None or (low == 0 and default_min > 0):
            low = default_min
        if high is None:
            high = max(default_max, low)

        if low > high:
            errors.append(f"{label} range is inverted: min {low:g} > max {high:g}")
            return None

        if label == "size" and high <= 0:
            errors.append(f"{label} range bounds must be positive")
            return None

        return NumericRange(min=low, max=high)

    @staticmethod
    def _read_category(
        raw: Mapping[str, Any], industry: Optional[str], errors: List[str]
    ) -> Optional[PropertyCategory]:
        """Read the target category, falling back to the industry mapping."""
        value = pick(
            raw, "target_category", "targetCategory", "property_type", "propertyType",
            "preferred_property_types", "preferredPropertyTypes",
        )

        # Profiles store a list of preferred types; the first one is the target
        if isinstance(value, (list, tuple)) or (isinstance(value, str) and value.strip().startswith("[")):
            try:
                values = coerce_string_list(value, "preferred_property_types")
            except ValueError as e:
                errors.append(str(e))
                return None
            value = values[0] if values else None

        try:
            category = parse_category(value)
        except ValueError as e:
            errors.append(f"target_category: {e}")
            return None

        if category is None and industry:
            category = INDUSTRY_CATEGORIES.get(normalize_tag(industry))
        return category

    def _read_weights(self, value: Any, errors: List[str]) -> Optional[ScoreWeights]:
        """Read weights, filling gaps from the defaults and rescaling fractions.

        The returned weights always sum to exactly 100.
        """
        weights = self.settings.default_weights.as_dict()

        if isinstance(value, str) and value.strip():
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                errors.append(f"weights: not valid JSON: {e}")
                return None

        if value is not None and not isinstance(value, Mapping):
            errors.append(f"weights: expected a mapping, got {type(value).__name__}")
            return None

        if value:
            provided: Dict[str, float] = {}
            for key, raw_weight in value.items():
                name = WEIGHT_ALIASES.get(key, key)
                if name not in WEIGHT_KEYS:
                    errors.append(f"weights: unknown weight '{key}'")
                    continue
                try:
                    weight = coerce_number(raw_weight, f"weights.{key}")
                except ValueError as e:
                    errors.append(str(e))
                    continue
                if weight is None:
                    continue
                if weight < 0:
                    errors.append(f"weights.{key} cannot be negative, got {weight:g}")
                    continue
                provided[name] = weight

            # Fractions (0.35, 0.25, ...) covering every key are scaled to percentages
            if (
                len(provided) == len(WEIGHT_KEYS)
                and abs(sum(provided.values()) - 1.0) <= self.settings.weight_tolerance / 100
            ):
                provided = {k: round(v * 100, WEIGHT_PRECISION) for k, v in provided.items()}

            weights.update(provided)

        total = sum(weights[k] for k in WEIGHT_KEYS)
        if abs(total - 100.0) > self.settings.weight_tolerance:
            errors.append(f"weights must sum to 100, got {total:g}")
            return None

        if errors:
            return None

        # Absorb rounding drift so the four weights add up to exactly 100
        scaled = {k: round(weights[k] * 100.0 / total, WEIGHT_PRECISION) for k in WEIGHT_KEYS}
        scaled["category"] = round(
            100.0 - (scaled["location"] + scaled["budget"] + scaled["size"]), WEIGHT_PRECISION
        )
        if scaled["category"] < 0:
            scaled["category"] = 0.0
        return ScoreWeights(**scaled)
