"""Exceptions raised by the matching engine and its calling layer."""

from typing import List, Optional


class MatchingError(Exception):
    """Base exception for all matching-related errors.

    Catching this exception catches anything the engine, the normalizers or
    the pipeline raise on purpose.
    """

    pass


class ValidationError(MatchingError):
    """A brand requirement (or call argument) is structurally malformed.

    Fatal for the whole call: inverted ranges, weights that do not sum to 100,
    an out-of-range score threshold. Holds every individual problem found so
    the caller can report them together.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        """Initialize ValidationError.

        Args:
            message: Primary error message
            errors: Individual validation problems
        """
        self.message = message
        self.errors = list(errors or [])
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.errors:
            return self.message
        details = "; ".join(self.errors)
        return f"{self.message}: {details}"


class InvalidRecordError(MatchingError):
    """A single property record is malformed.

    The record is excluded from results; the rest of the batch carries on.
    """

    def __init__(self, message: str, record_id: Optional[str] = None) -> None:
        """Initialize InvalidRecordError.

        Args:
            message: Human-readable description of the problem
            record_id: Identifier of the offending record, when known
        """
        super().__init__(message)
        self.record_id = record_id


class BrandProfileNotFoundError(MatchingError):
    """No brand profile exists for the requested brand.

    Raised by the calling layer before the engine is invoked.
    """

    def __init__(self, brand_id: str) -> None:
        super().__init__(f"Brand profile not found: {brand_id}")
        self.brand_id = brand_id


class ProviderError(MatchingError):
    """A brand profile or catalog provider failed to load its data."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        """Initialize ProviderError.

        Args:
            message: Human-readable error message
            source: Path or name of the data source that failed
        """
        super().__init__(message)
        self.source = source
