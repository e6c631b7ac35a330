"""Providers supplying raw brand profiles and property listings.

This module provides:
- BrandProfileProvider / PropertyCatalogProvider: interfaces for the calling layer
- PROFILE_NOT_FOUND: sentinel returned for unknown brands
- FileBrandProfileProvider / FileCatalogProvider: JSON or YAML file implementations
"""

from .base import PROFILE_NOT_FOUND, BrandProfileProvider, PropertyCatalogProvider
from .files import FileBrandProfileProvider, FileCatalogProvider, load_document

__all__ = [
    "PROFILE_NOT_FOUND",
    "BrandProfileProvider",
    "PropertyCatalogProvider",
    "FileBrandProfileProvider",
    "FileCatalogProvider",
    "load_document",
]
