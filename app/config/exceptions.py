"""Custom exceptions for configuration management."""

from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError


class ConfigurationError(Exception):
    """
    Raised when the configuration file or environment is unusable.

    Collects every validation problem found, plus suggestions for fixing
    them, and renders both into the exception message.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: List of specific validation errors
            suggestions: List of helpful suggestions to fix the errors
        """
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    @classmethod
    def from_pydantic(
        cls, message: str, exc: PydanticValidationError, suggestions: Optional[List[str]] = None
    ) -> "ConfigurationError":
        """Build a ConfigurationError listing each field a pydantic model rejected.

        Args:
            message: Primary error message
            exc: Pydantic validation error raised by model_validate()
            suggestions: Suggestions to attach

        Returns:
            ConfigurationError with one entry per failing field
        """
        errors = []
        for error in exc.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"]) or "(root)"
            error_type = error["type"]

            if error_type == "missing":
                errors.append(f"Missing required field: {field_path}")
            elif error_type.endswith("_type") or error_type.endswith("_parsing"):
                errors.append(
                    f"Invalid type for '{field_path}': {error['msg']} (got {error.get('input')!r})"
                )
            elif "enum" in error_type:
                errors.append(f"Invalid value for '{field_path}': {error['msg']}")
            else:
                errors.append(f"{field_path}: {error['msg']}")

        return cls(message, errors=errors, suggestions=suggestions)

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            parts.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))

        if self.suggestions:
            parts.append("\nSuggestions:")
            parts.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(parts)
