"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
        max_workers: Optional[int] = None,
    ):
        """Initialize environment configuration."""
        self.log_level = log_level
        self.environment = environment or "local"
        self.max_workers = max_workers


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment label attached to every log line (default: local)
    - BFI_MAX_WORKERS: Override matching.max_workers (1-64)

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")
    max_workers_str = os.getenv("BFI_MAX_WORKERS")

    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        else:
            log_level = log_level.upper()

    max_workers = None
    if max_workers_str:
        try:
            max_workers = int(max_workers_str)
            if max_workers < 1 or max_workers > 64:
                errors.append(
                    f"Invalid BFI_MAX_WORKERS: {max_workers}. Must be between 1 and 64."
                )
        except ValueError:
            errors.append(
                f"Invalid BFI_MAX_WORKERS: '{max_workers_str}'. Must be a valid integer."
            )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level or None,
        environment=environment,
        max_workers=max_workers,
    )
