"""Test helper utilities for Brand-Fit-Index tests."""

from .builders import make_property, make_requirement
from .memory_providers import InMemoryCatalogProvider, InMemoryProfileProvider

__all__ = [
    "InMemoryCatalogProvider",
    "InMemoryProfileProvider",
    "make_property",
    "make_requirement",
]
