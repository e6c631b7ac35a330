"""Interfaces for the collaborators that supply raw brand profiles and listings.

The engine never performs I/O itself; the calling layer fetches raw mappings
through these providers and hands them to the normalizers.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, Mapping, Union


class _ProfileLookup(Enum):
    NOT_FOUND = "profile_not_found"


# Returned by get_brand_profile() when no profile exists for the brand
PROFILE_NOT_FOUND = _ProfileLookup.NOT_FOUND

RawRecord = Mapping[str, Any]


class BrandProfileProvider(ABC):
    """Source of raw brand profiles."""

    @abstractmethod
    def get_brand_profile(self, brand_id: str) -> Union[RawRecord, _ProfileLookup]:
        """Fetch the raw profile of one brand.

        Args:
            brand_id: Brand identifier

        Returns:
            Raw profile mapping, or PROFILE_NOT_FOUND if the brand is unknown

        Raises:
            ProviderError: If the underlying source cannot be read
        """
        pass


class PropertyCatalogProvider(ABC):
    """Source of raw property listings."""

    @abstractmethod
    def list_properties(self) -> Iterable[RawRecord]:
        """Return every raw listing in the catalog.

        Raises:
            ProviderError: If the underlying source cannot be read
        """
        pass
