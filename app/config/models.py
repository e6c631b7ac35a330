"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.domain.models import MAX_REASONS


# Locality zones used to derive secondary preferred locations. A locality
# sharing a zone with a primary location counts as a secondary match.
DEFAULT_LOCATION_ZONES: Dict[str, List[str]] = {
    "central": ["mg road", "brigade road", "church street", "commercial street"],
    "south": ["koramangala", "jayanagar", "btm layout", "hsr layout", "indiranagar"],
    "east": ["whitefield", "marathahalli", "hebbal", "kundalahalli"],
    "north": ["hebbal", "yelahanka", "sahakar nagar"],
    "west": ["rajajinagar", "malleswaram", "yeshwanthpur"],
}


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class RatePeriod(str, Enum):
    """Period a per-sqft listed rate refers to."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class WeightsConfig(BaseModel):
    """Default sub-score weights applied when a brand profile has none."""

    location: float = Field(35.0, ge=0, le=100)
    budget: float = Field(25.0, ge=0, le=100)
    size: float = Field(25.0, ge=0, le=100)
    category: float = Field(15.0, ge=0, le=100)

    @model_validator(mode="after")
    def validate_total(self):
        """Default weights must add up to 100."""
        total = self.location + self.budget + self.size + self.category
        if abs(total - 100.0) > 0.01:
            raise ValueError(f"default_weights must sum to 100, got {total:g}")
        return self

    def as_dict(self) -> Dict[str, float]:
        return {
            "location": self.location,
            "budget": self.budget,
            "size": self.size,
            "category": self.category,
        }


class MatchingConfig(BaseModel):
    """Tunable parameters of the matching engine."""

    min_score_threshold: float = Field(
        60, ge=0, le=100, description="Minimum overall score for a property to be returned"
    )
    secondary_location_score: float = Field(
        70, ge=0, le=100, description="Location score awarded for a secondary location match"
    )
    default_weights: WeightsConfig = Field(
        default_factory=WeightsConfig, description="Weights used when a profile has none"
    )
    weight_tolerance: float = Field(
        0.01, ge=0, le=1, description="Allowed deviation from 100 when summing weights"
    )
    sqft_rate_period: RatePeriod = Field(
        RatePeriod.MONTHLY, description="Period a per-sqft listed rate refers to"
    )
    max_reasons: int = Field(
        MAX_REASONS, ge=0, le=MAX_REASONS, description="Maximum explanations per result"
    )
    strong_match_score: float = Field(
        80, ge=0, le=100, description="Sub-score at or above which strong phrasing is used"
    )
    moderate_match_score: float = Field(
        60, ge=0, le=100, description="Sub-score at or above which a reason is emitted"
    )
    max_workers: int = Field(
        1, ge=1, le=64, description="Worker threads used for scoring large catalogs"
    )
    parallel_threshold: int = Field(
        500, ge=1, description="Catalog size from which scoring fans out to threads"
    )
    location_zones: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_LOCATION_ZONES.items()},
        description="Named zones of localities used to derive secondary locations",
    )

    @field_validator("location_zones")
    @classmethod
    def normalize_zones(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        """Normalize zone members: strip whitespace, lowercase, drop empty entries."""
        normalized = {}
        for zone, members in v.items():
            cleaned = [m.strip().lower() for m in members if m and m.strip()]
            if cleaned:
                normalized[zone.strip().lower()] = cleaned
        return normalized

    @model_validator(mode="after")
    def validate_reason_thresholds(self):
        """Strong phrasing must not start below the moderate threshold."""
        if self.strong_match_score < self.moderate_match_score:
            raise ValueError(
                "strong_match_score must be greater than or equal to moderate_match_score"
            )
        return self

    model_config = {"use_enum_values": True}


class DataConfig(BaseModel):
    """Locations of the brand profile and catalog documents used by the CLI."""

    profiles_path: Optional[str] = Field(
        None, description="JSON/YAML document holding raw brand profiles"
    )
    catalog_path: Optional[str] = Field(
        None, description="JSON/YAML document holding raw property listings"
    )

    @field_validator("profiles_path", "catalog_path")
    @classmethod
    def strip_path(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from paths, treating blank as unset."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the Brand-Fit-Index matching engine."""

    matching: MatchingConfig = Field(
        default_factory=MatchingConfig, description="Matching engine settings"
    )
    data: DataConfig = Field(default_factory=DataConfig, description="Input data locations")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
