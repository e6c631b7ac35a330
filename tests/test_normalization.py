"""Unit tests for normalization layer.

Tests the RequirementNormalizer and PropertyNormalizer for:
- Key spellings (snake_case and camelCase) and loosely typed values
- Default ranges and weights, fractional weight scaling
- Industry -> category derivation and location zone expansion
- Price type conversion to monthly rent
- Rejection of malformed records, and batch skipping
"""

import pytest

from app.config.models import MatchingConfig
from app.domain.exceptions import InvalidRecordError, ValidationError
from app.domain.models import PriceType, PropertyCategory
from app.normalization import (
    PropertyNormalizer,
    RequirementNormalizer,
    parse_category,
    to_monthly_rent,
)
from app.normalization.requirements import (
    DEFAULT_BUDGET_MAX,
    DEFAULT_BUDGET_MIN,
    DEFAULT_SIZE_MAX,
    DEFAULT_SIZE_MIN,
)


@pytest.fixture
def normalizer():
    """RequirementNormalizer with default settings."""
    return RequirementNormalizer()


@pytest.fixture
def no_zone_normalizer():
    """RequirementNormalizer with zone expansion disabled."""
    return RequirementNormalizer(MatchingConfig(location_zones={}))


@pytest.fixture
def property_normalizer():
    """PropertyNormalizer with default settings."""
    return PropertyNormalizer()


def listing(**overrides):
    """A valid raw listing with overrides applied."""
    raw = {
        "id": "prop-1",
        "city": "Koramangala",
        "size": 750,
        "price": 75000,
        "priceType": "monthly",
        "propertyType": "restaurant",
    }
    raw.update(overrides)
    return raw


class TestRequirementNormalizer:
    """Tests for RequirementNormalizer."""

    def test_camel_case_profile(self, no_zone_normalizer, raw_profile):
        """Test a camelCase profile with JSON-encoded lists and string numbers."""
        requirement = no_zone_normalizer.normalize(raw_profile)

        assert requirement.id == "brand-chai"
        assert requirement.primary_locations == ("Koramangala",)
        assert requirement.secondary_locations == ()
        assert requirement.size_range.min == 500
        assert requirement.size_range.max == 1000
        assert requirement.budget_range.min == 50000
        assert requirement.budget_range.max == 100000
        assert requirement.must_have_amenities == frozenset({"parking"})
        assert requirement.industry == "cafe"

    def test_snake_case_profile(self, no_zone_normalizer):
        """Test the snake_case spellings and brand_id."""
        requirement = no_zone_normalizer.normalize(
            {
                "brand_id": "brand-2",
                "preferred_locations": ["Whitefield", "whitefield "],
                "secondary_locations": ["Marathahalli"],
                "min_size": 2000,
                "max_size": 4000,
                "budget_min": "1,20,000",
                "budget_max": 250000,
                "target_category": "Retail",
            }
        )

        assert requirement.id == "brand-2"
        assert requirement.primary_locations == ("Whitefield",)
        assert requirement.secondary_locations == ("Marathahalli",)
        assert requirement.budget_range.min == 120000
        assert requirement.target_category is PropertyCategory.RETAIL

    def test_defaults_applied(self, normalizer):
        """Test default ranges and weights for a bare profile."""
        requirement = normalizer.normalize({"id": "bare"})

        assert requirement.size_range.min == DEFAULT_SIZE_MIN
        assert requirement.size_range.max == DEFAULT_SIZE_MAX
        assert requirement.budget_range.min == DEFAULT_BUDGET_MIN
        assert requirement.budget_range.max == DEFAULT_BUDGET_MAX
        assert requirement.weights.as_dict() == {
            "location": 35.0,
            "budget": 25.0,
            "size": 25.0,
            "category": 15.0,
        }
        assert requirement.preferred_locations == ()
        assert requirement.target_category is None

    def test_zero_min_size_means_default(self, normalizer):
        """Test that a zero lower size bound falls back to the default minimum."""
        requirement = normalizer.normalize({"id": "b", "min_size": 0, "max_size": 900})
        assert requirement.size_range.min == DEFAULT_SIZE_MIN
        assert requirement.size_range.max == 900

    def test_min_above_default_max(self, normalizer):
        """Test that a missing max never produces an inverted range."""
        requirement = normalizer.normalize({"id": "b", "budget_min": 20_000_000})
        assert requirement.budget_range.min == requirement.budget_range.max == 20_000_000

    def test_fractional_weights_scaled(self, normalizer):
        """Test that weights given as fractions are scaled to percentages."""
        requirement = normalizer.normalize(
            {"id": "b", "weights": {"location": 0.4, "budget": 0.3, "size": 0.2, "category": 0.1}}
        )
        weights = requirement.weights
        assert weights.location == pytest.approx(40)
        assert weights.budget == pytest.approx(30)
        assert weights.size == pytest.approx(20)
        assert weights.category == pytest.approx(10)
        assert weights.total == pytest.approx(100, abs=1e-9)

    def test_fractional_weights_are_exact(self, normalizer):
        """Test that scaled fractions carry no binary drift (0.29 -> 29, not 28.999...)."""
        requirement = normalizer.normalize(
            {"id": "b", "weights": {"location": 0.29, "budget": 0.21, "size": 0.25, "category": 0.25}}
        )
        assert requirement.weights.as_dict() == {
            "location": 29.0,
            "budget": 21.0,
            "size": 25.0,
            "category": 25.0,
        }

    def test_partial_weights_filled_from_defaults(self, normalizer):
        """Test that missing weight keys take their default values."""
        requirement = normalizer.normalize(
            {"id": "b", "weights": '{"location": 45, "budget": 15}'}
        )
        assert requirement.weights.as_dict() == pytest.approx(
            {"location": 45, "budget": 15, "size": 25, "category": 15}
        )

    def test_weight_alias(self, normalizer):
        """Test that property_type is accepted as the category weight."""
        requirement = normalizer.normalize(
            {"id": "b", "weights": {"location": 40, "budget": 20, "size": 20, "property_type": 20}}
        )
        assert requirement.weights.category == pytest.approx(20)

    def test_weights_not_summing_to_100(self, normalizer):
        """Test that weights off by more than the tolerance are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize(
                {"id": "b", "weights": {"location": 30, "budget": 30, "size": 30}}
            )
        assert any("sum to 100" in e for e in exc_info.value.errors)

    def test_unknown_weight_key(self, normalizer):
        """Test that unknown weight names are rejected."""
        with pytest.raises(ValidationError, match="unknown weight"):
            normalizer.normalize({"id": "b", "weights": {"vibes": 100}})

    def test_inverted_size_range(self, normalizer):
        """Test that min_size > max_size is rejected."""
        with pytest.raises(ValidationError, match="size range is inverted"):
            normalizer.normalize({"id": "b", "min_size": 2000, "max_size": 1000})

    def test_negative_budget(self, normalizer):
        """Test that negative budget bounds are rejected."""
        with pytest.raises(ValidationError, match="cannot be negative"):
            normalizer.normalize({"id": "b", "budget_min": -5})

    def test_non_numeric_bound(self, normalizer):
        """Test that non-numeric bounds are rejected."""
        with pytest.raises(ValidationError, match="must be numeric"):
            normalizer.normalize({"id": "b", "max_size": "large"})

    def test_errors_collected_together(self, normalizer):
        """Test that every problem is reported in one ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize(
                {"min_size": 2000, "max_size": 1000, "target_category": "castle"}
            )
        assert len(exc_info.value.errors) == 3

    def test_unknown_target_category(self, normalizer):
        """Test that an unknown target category is rejected."""
        with pytest.raises(ValidationError, match="unknown category"):
            normalizer.normalize({"id": "b", "target_category": "castle"})

    def test_not_a_mapping(self, normalizer):
        """Test that non-mapping input is rejected."""
        with pytest.raises(ValidationError):
            normalizer.normalize(["not", "a", "profile"])

    @pytest.mark.parametrize(
        "industry,expected",
        [
            ("cafe", PropertyCategory.RESTAURANT),
            ("Cafe / QSR", PropertyCategory.RESTAURANT),
            ("Brewery", PropertyCategory.RESTAURANT),
            ("gym", PropertyCategory.RETAIL),
            ("logistics", PropertyCategory.WAREHOUSE),
            ("coworking", PropertyCategory.OFFICE),
        ],
    )
    def test_category_derived_from_industry(self, normalizer, industry, expected):
        """Test that the target category is derived from a known industry."""
        requirement = normalizer.normalize({"id": "b", "industry": industry})
        assert requirement.target_category is expected

    def test_explicit_category_wins_over_industry(self, normalizer):
        """Test that an explicit target category is not overridden."""
        requirement = normalizer.normalize(
            {"id": "b", "industry": "cafe", "propertyType": "office"}
        )
        assert requirement.target_category is PropertyCategory.OFFICE

    def test_preferred_property_types_list(self, normalizer):
        """Test that the first preferred property type becomes the target."""
        requirement = normalizer.normalize(
            {"id": "b", "preferred_property_types": '["retail", "restaurant"]'}
        )
        assert requirement.target_category is PropertyCategory.RETAIL

    def test_unknown_industry_leaves_category_empty(self, normalizer):
        """Test that an unmapped industry gives no target category."""
        requirement = normalizer.normalize({"id": "b", "industry": "shipbuilding"})
        assert requirement.target_category is None

    def test_zone_neighbours_become_secondary(self, normalizer):
        """Test that localities sharing a zone with a primary location are secondary."""
        requirement = normalizer.normalize(
            {"id": "b", "preferred_locations": ["Koramangala"], "secondary_locations": ["Hebbal"]}
        )

        assert requirement.primary_locations == ("Koramangala",)
        assert requirement.secondary_locations == (
            "Hebbal",
            "jayanagar",
            "btm layout",
            "hsr layout",
            "indiranagar",
        )

    def test_primary_never_duplicated_in_secondary(self, normalizer):
        """Test that primary locations are excluded from the secondary tier."""
        requirement = normalizer.normalize(
            {
                "id": "b",
                "preferred_locations": ["Koramangala", "Indiranagar"],
                "secondary_locations": ["KORAMANGALA"],
            }
        )
        secondary = {loc.lower() for loc in requirement.secondary_locations}
        assert "koramangala" not in secondary
        assert "indiranagar" not in secondary

    def test_custom_zones(self):
        """Test zones supplied through configuration."""
        normalizer = RequirementNormalizer(
            MatchingConfig(location_zones={"docks": ["Pier 1", "Pier 2"]})
        )
        requirement = normalizer.normalize({"id": "b", "preferred_locations": ["pier 1"]})
        assert requirement.secondary_locations == ("pier 2",)


class TestToMonthlyRent:
    """Tests for the price conversion helper."""

    def test_monthly_passthrough(self):
        """Test that monthly prices pass through."""
        assert to_monthly_rent(75000, PriceType.MONTHLY, 750) == 75000

    def test_yearly_divided_by_twelve(self):
        """Test that yearly prices are divided by 12."""
        assert to_monthly_rent(1_080_000, PriceType.YEARLY, 900) == 90000

    def test_sqft_rate_multiplied_by_size(self):
        """Test that per-sqft rates are multiplied by size."""
        assert to_monthly_rent(110, PriceType.SQFT, 650) == 71500

    def test_sqft_yearly_rate(self):
        """Test a per-sqft rate quoted per year."""
        assert to_monthly_rent(1200, PriceType.SQFT, 100, sqft_rate_period="yearly") == 10000

    def test_rounded_to_cents(self):
        """Test that results are rounded to two decimals."""
        assert to_monthly_rent(100, PriceType.YEARLY, 1) == 8.33


class TestParseCategory:
    """Tests for parse_category."""

    def test_case_insensitive(self):
        assert parse_category(" Warehouse ") is PropertyCategory.WAREHOUSE

    def test_blank_is_none(self):
        assert parse_category("") is None
        assert parse_category(None) is None

    def test_unknown(self):
        with pytest.raises(ValueError, match="unknown category"):
            parse_category("castle")

    def test_enum_member_passes_through(self):
        """Test that callers may pass a PropertyCategory directly."""
        assert parse_category(PropertyCategory.RETAIL) is PropertyCategory.RETAIL

    def test_enum_target_category_in_profile(self):
        requirement = RequirementNormalizer().normalize(
            {"id": "b", "target_category": PropertyCategory.OFFICE}
        )
        assert requirement.target_category is PropertyCategory.OFFICE


class TestPropertyNormalizer:
    """Tests for PropertyNormalizer."""

    def test_valid_listing(self, property_normalizer):
        """Test normalizing a complete listing."""
        record = property_normalizer.normalize(
            listing(
                title="Corner cafe",
                amenities='["Ground Floor", "Kitchen Exhaust"]',
                parking=True,
                powerBackup="yes",
            )
        )

        assert record.id == "prop-1"
        assert record.city == "Koramangala"
        assert record.size == 750
        assert record.monthly_rent == 75000
        assert record.category is PropertyCategory.RESTAURANT
        assert record.amenities == frozenset(
            {"ground_floor", "kitchen_exhaust", "parking", "power_backup"}
        )
        assert record.available is True
        assert record.title == "Corner cafe"

    def test_yearly_price(self, property_normalizer):
        """Test that yearly prices are stored as monthly rent."""
        record = property_normalizer.normalize(listing(price=900000, priceType="yearly"))
        assert record.monthly_rent == 75000

    def test_sqft_price(self, property_normalizer):
        """Test that per-sqft prices are stored as monthly rent."""
        record = property_normalizer.normalize(listing(size=650, price=110, priceType="sqft"))
        assert record.monthly_rent == 71500

    def test_enum_values_accepted(self, property_normalizer):
        """Test listings built in Python with enum members instead of labels."""
        record = property_normalizer.normalize(
            listing(size=650, price=110, priceType=PriceType.SQFT, propertyType=PropertyCategory.RETAIL)
        )
        assert record.monthly_rent == 71500
        assert record.category is PropertyCategory.RETAIL

    def test_sqft_yearly_period_from_settings(self):
        """Test the configured per-sqft rate period."""
        normalizer = PropertyNormalizer(MatchingConfig(sqft_rate_period="yearly"))
        record = normalizer.normalize(listing(size=100, price=1200, priceType="sqft"))
        assert record.monthly_rent == 10000

    def test_missing_price_type_is_monthly(self, property_normalizer):
        """Test that an absent price type means monthly."""
        raw = listing()
        del raw["priceType"]
        assert property_normalizer.normalize(raw).monthly_rent == 75000

    def test_fractional_size_rounded(self, property_normalizer):
        """Test that fractional sizes are rounded to whole sqft."""
        assert property_normalizer.normalize(listing(size="750.5")).size == 751

    @pytest.mark.parametrize(
        "key,value",
        [("available", False), ("availability", "false"), ("isAvailable", 0)],
    )
    def test_availability_spellings(self, property_normalizer, key, value):
        """Test every availability key spelling."""
        assert property_normalizer.normalize(listing(**{key: value})).available is False

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"id": None}, "no id"),
            ({"city": "  "}, "city is required"),
            ({"size": 0}, "size must be positive"),
            ({"size": -10}, "size must be positive"),
            ({"size": "big"}, "must be numeric"),
            ({"price": -1}, "cannot be negative"),
            ({"price": None}, "price is required"),
            ({"priceType": "weekly"}, "unknown price type"),
            ({"propertyType": "castle"}, "unknown category"),
            ({"propertyType": None}, "category is required"),
        ],
    )
    def test_invalid_listing(self, property_normalizer, overrides, message):
        """Test that malformed listings raise InvalidRecordError."""
        with pytest.raises(InvalidRecordError, match=message):
            property_normalizer.normalize(listing(**overrides))

    def test_invalid_listing_carries_id(self, property_normalizer):
        """Test that the record id is attached to the error."""
        with pytest.raises(InvalidRecordError) as exc_info:
            property_normalizer.normalize(listing(id="prop-bad", size=0))
        assert exc_info.value.record_id == "prop-bad"

    def test_batch_skips_invalid(self, property_normalizer, raw_listings):
        """Test that a batch keeps going past invalid listings."""
        batch = property_normalizer.normalize_batch(raw_listings + ["not a mapping"])

        assert [r.id for r in batch.records] == ["prop-101", "prop-102", "prop-103"]
        assert batch.skipped_ids() == ["prop-104", None]
        assert batch.total == 5
        assert batch.skipped_count == 2

    def test_batch_logs_skips(self, property_normalizer, caplog):
        """Test that each skipped listing is logged with its id."""
        with caplog.at_level("WARNING"):
            property_normalizer.normalize_batch([listing(id="prop-x", size=0)])

        skipped = [r for r in caplog.records if getattr(r, "event", None) == "normalization.property.skipped"]
        assert len(skipped) == 1
        assert skipped[0].record_id == "prop-x"
