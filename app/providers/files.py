"""File-backed providers reading JSON or YAML documents.

Profile documents may be a list of profiles, a mapping with a "profiles" list,
or a mapping keyed by brand id. Catalog documents may be a list of listings
or a mapping with a "properties" list.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import yaml

from app.domain.exceptions import ProviderError
from app.logging import get_logger

from .base import (
    PROFILE_NOT_FOUND,
    BrandProfileProvider,
    PropertyCatalogProvider,
    RawRecord,
    _ProfileLookup,
)

logger = get_logger(__name__, component="provider")

YAML_SUFFIXES = {".yaml", ".yml"}
PROFILE_ID_KEYS = ("id", "brand_id", "brandId")


def load_document(path: Union[str, Path]) -> Any:
    """Parse a JSON or YAML file, chosen by extension.

    Raises:
        ProviderError: If the file is missing, unreadable or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise ProviderError(f"Data file not found: {path}", source=str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                return yaml.safe_load(f)
            return json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ProviderError(f"Malformed data file {path}: {e}", source=str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ProviderError(f"Failed to read data file {path}: {e}", source=str(path)) from e


def _require_records(items: Any, path: Path, kind: str) -> List[RawRecord]:
    if not isinstance(items, list):
        raise ProviderError(
            f"Expected a list of {kind} in {path}, got {type(items).__name__}",
            source=str(path),
        )
    bad = [i for i, item in enumerate(items) if not isinstance(item, Mapping)]
    if bad:
        raise ProviderError(
            f"Entries {bad} in {path} are not {kind} mappings", source=str(path)
        )
    return items


class FileBrandProfileProvider(BrandProfileProvider):
    """Reads brand profiles from a JSON or YAML document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get_brand_profile(self, brand_id: str) -> Union[RawRecord, _ProfileLookup]:
        profiles = self._load_profiles()
        profile = profiles.get(str(brand_id).strip())
        if profile is None:
            logger.info(
                f"Brand profile not found: {brand_id}",
                extra={"event": "provider.profile.not_found", "source": str(self.path)},
            )
            return PROFILE_NOT_FOUND
        return profile

    def _load_profiles(self) -> Dict[str, RawRecord]:
        document = load_document(self.path)
        if document is None:
            return {}

        if isinstance(document, Mapping) and "profiles" in document:
            document = document["profiles"]

        if isinstance(document, Mapping):
            profiles = {}
            for key, profile in document.items():
                if not isinstance(profile, Mapping):
                    raise ProviderError(
                        f"Profile '{key}' in {self.path} is not a mapping",
                        source=str(self.path),
                    )
                # Key doubles as the id when the profile omits one
                if not any(profile.get(k) is not None for k in PROFILE_ID_KEYS):
                    profile = {**profile, "id": key}
                profiles[str(key).strip()] = profile
            return profiles

        profiles = {}
        for profile in _require_records(document, self.path, "profiles"):
            for key in PROFILE_ID_KEYS:
                if profile.get(key) is not None:
                    profiles.setdefault(str(profile[key]).strip(), profile)
                    break
        return profiles


class FileCatalogProvider(PropertyCatalogProvider):
    """Reads raw property listings from a JSON or YAML document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def list_properties(self) -> List[RawRecord]:
        document = load_document(self.path)
        if document is None:
            return []
        if isinstance(document, Mapping):
            if "properties" not in document:
                raise ProviderError(
                    f"Catalog {self.path} has no 'properties' list", source=str(self.path)
                )
            document = document["properties"]

        listings = _require_records(document, self.path, "listings")
        logger.debug(
            f"Loaded {len(listings)} listings",
            extra={"event": "provider.catalog.loaded", "source": str(self.path)},
        )
        return listings
