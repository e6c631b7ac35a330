"""Property listing normalization.

This module implements the normalization logic that:
1. Reads raw listing fields under the spellings the catalog uses
2. Converts the listed price to a monthly-equivalent rent
3. Reduces amenities (and amenity flags) to normalized tags
4. Rejects malformed listings with InvalidRecordError
5. Normalizes whole batches, skipping bad records instead of aborting
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from app.config.models import MatchingConfig, RatePeriod
from app.domain.exceptions import InvalidRecordError
from app.domain.models import PriceType, PropertyRecord, SkippedRecord
from app.logging import get_logger
from app.utils.coercion import (
    coerce_bool,
    coerce_number,
    coerce_optional_str,
    coerce_string_list,
)
from app.utils.text import normalize_tag, normalize_tags, sanitize_text

from .models import PropertyBatch, pick
from .requirements import parse_category

logger = get_logger(__name__, component="normalization")

# Boolean listing flags that map onto amenity tags
AMENITY_FLAGS = {
    "power_backup": ("power_backup", "powerBackup"),
    "water_facility": ("water_facility", "waterFacility"),
    "parking": ("parking",),
}

PRICE_TYPE_ALIASES = {
    "month": PriceType.MONTHLY,
    "per_month": PriceType.MONTHLY,
    "year": PriceType.YEARLY,
    "annual": PriceType.YEARLY,
    "per_year": PriceType.YEARLY,
    "per_sqft": PriceType.SQFT,
    "sqft_rate": PriceType.SQFT,
}


def to_monthly_rent(
    price: float,
    price_type: PriceType,
    size: int,
    sqft_rate_period: str = RatePeriod.MONTHLY.value,
) -> float:
    """Convert a listed price to a monthly-equivalent rent.

    Args:
        price: Listed price (non-negative)
        price_type: Pricing convention of the listing
        size: Listing size in sqft, used for per-sqft rates
        sqft_rate_period: Whether a per-sqft rate is quoted per month or per year

    Returns:
        Monthly-equivalent rent, rounded to 2 decimal places
    """
    if price_type == PriceType.YEARLY:
        monthly = price / 12
    elif price_type == PriceType.SQFT:
        monthly = price * size
        if sqft_rate_period == RatePeriod.YEARLY:
            monthly = monthly / 12
    else:
        monthly = price
    return round(monthly, 2)


class PropertyNormalizer:
    """Normalizes raw listings into PropertyRecord instances.

    Responsibilities:
    - Validate id, city, size, price and category
    - Compute monthly_rent from (price, price_type, size)
    - Build the amenity tag set
    - Skip and record malformed listings during batch processing
    """

    def __init__(
        self,
        settings: Optional[MatchingConfig] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize PropertyNormalizer.

        Args:
            settings: Matching settings (sqft rate period)
            logger_instance: Logger instance (defaults to module logger)
        """
        self.settings = settings or MatchingConfig()
        self.logger = logger_instance or logger

    def normalize(self, raw: Mapping[str, Any]) -> PropertyRecord:
        """Normalize a single raw listing.

        Args:
            raw: Raw listing mapping

        Returns:
            PropertyRecord with monthly_rent in the normalized unit

        Raises:
            InvalidRecordError: If the listing is malformed
        """
        if not isinstance(raw, Mapping):
            raise InvalidRecordError(f"listing must be a mapping, got {type(raw).__name__}")

        record_id = coerce_optional_str(pick(raw, "id", "property_id", "propertyId"))
        if record_id is None:
            raise InvalidRecordError("listing has no id")

        try:
            city = sanitize_text(coerce_optional_str(pick(raw, "city", "locality")))
            if not city:
                raise ValueError("city is required")

            size_value = coerce_number(pick(raw, "size", "area", "sqft"), "size")
            if size_value is None:
                raise ValueError("size is required")
            if size_value <= 0:
                raise ValueError(f"size must be positive, got {size_value:g}")
            size = int(size_value + 0.5)
            if size <= 0:
                raise ValueError(f"size must be positive, got {size_value:g}")

            price = coerce_number(pick(raw, "price", "rent"), "price")
            if price is None:
                raise ValueError("price is required")
            if price < 0:
                raise ValueError(f"price cannot be negative, got {price:g}")

            price_type = self._parse_price_type(pick(raw, "price_type", "priceType"))

            category = parse_category(pick(raw, "category", "property_type", "propertyType"))
            if category is None:
                raise ValueError("category is required")

            amenities = set(
                normalize_tags(coerce_string_list(raw.get("amenities"), "amenities"))
            )
            for tag, keys in AMENITY_FLAGS.items():
                if coerce_bool(pick(raw, *keys), tag, default=False):
                    amenities.add(tag)

            available = coerce_bool(
                pick(raw, "available", "availability", "isAvailable"), "available"
            )
        except ValueError as e:
            raise InvalidRecordError(f"listing {record_id}: {e}", record_id=record_id) from None

        try:
            return PropertyRecord(
                id=record_id,
                city=city,
                size=size,
                monthly_rent=to_monthly_rent(
                    price, price_type, size, self.settings.sqft_rate_period
                ),
                category=category,
                amenities=frozenset(amenities),
                available=available,
                title=coerce_optional_str(raw.get("title")),
                address=coerce_optional_str(raw.get("address")),
            )
        except PydanticValidationError as e:
            details = "; ".join(err["msg"] for err in e.errors())
            raise InvalidRecordError(
                f"listing {record_id}: {details}", record_id=record_id
            ) from e

    def normalize_batch(self, raw_listings: Iterable[Mapping[str, Any]]) -> PropertyBatch:
        """Normalize a batch of raw listings.

        Malformed listings are logged, recorded as skipped and excluded; they
        never abort the batch.

        Args:
            raw_listings: Iterable of raw listing mappings

        Returns:
            PropertyBatch with normalized records and skipped entries
        """
        batch = PropertyBatch()

        for raw in raw_listings:
            try:
                batch.records.append(self.normalize(raw))
            except InvalidRecordError as e:
                self.logger.warning(
                    f"Skipping invalid listing: {e}",
                    extra={
                        "event": "normalization.property.skipped",
                        "record_id": e.record_id,
                    },
                )
                batch.skipped.append(SkippedRecord(record_id=e.record_id, reason=str(e)))

        self.logger.info(
            "Normalized property batch",
            extra={
                "event": "normalization.batch.completed",
                "total": batch.total,
                "normalized": len(batch.records),
                "skipped": batch.skipped_count,
            },
        )

        return batch

    @staticmethod
    def _parse_price_type(value: Any) -> PriceType:
        """Parse a raw price type; an absent price type means monthly."""
        if isinstance(value, PriceType):
            return value
        label = coerce_optional_str(value)
        if label is None:
            return PriceType.MONTHLY
        tag = normalize_tag(label)
        if tag in PRICE_TYPE_ALIASES:
            return PRICE_TYPE_ALIASES[tag]
        try:
            return PriceType(tag)
        except ValueError:
            raise ValueError(f"unknown price type '{label}'") from None
