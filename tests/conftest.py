"""Shared fixtures for Brand-Fit-Index tests."""

import pytest

from app.config.models import AppConfig, MatchingConfig
from app.logging.context import clear_log_context

ENV_VARS = ("LOG_LEVEL", "ENVIRONMENT", "BFI_MAX_WORKERS")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the application reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def clean_log_context():
    """Keep logging context from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def matching_config():
    """Default matching settings."""
    return MatchingConfig()


@pytest.fixture
def app_config():
    """Default application configuration."""
    return AppConfig()


@pytest.fixture
def raw_profile():
    """A raw brand profile in the loosely typed shape providers return."""
    return {
        "id": "brand-chai",
        "industry": "cafe",
        "preferredLocations": '["Koramangala"]',
        "minSize": "500",
        "maxSize": "1000",
        "budgetMin": 50000,
        "budgetMax": 100000,
        "mustHaveAmenities": ["Parking"],
        "weights": None,
    }


@pytest.fixture
def raw_listings():
    """Raw listings covering a match, a near miss, an unavailable and an invalid one."""
    return [
        {
            "id": "prop-101",
            "city": "Koramangala",
            "size": 750,
            "price": 75000,
            "priceType": "monthly",
            "propertyType": "restaurant",
            "parking": True,
        },
        {
            "id": "prop-102",
            "city": "Whitefield",
            "size": 750,
            "price": 900000,
            "priceType": "yearly",
            "propertyType": "restaurant",
        },
        {
            "id": "prop-103",
            "city": "Koramangala",
            "size": 700,
            "price": 70000,
            "propertyType": "restaurant",
            "isAvailable": False,
        },
        {
            "id": "prop-104",
            "city": "Koramangala",
            "size": -5,
            "price": 70000,
            "propertyType": "restaurant",
        },
    ]
