"""Configuration management module for the Brand-Fit-Index matching engine."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    DEFAULT_LOCATION_ZONES,
    AppConfig,
    DataConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    MatchingConfig,
    RatePeriod,
    WeightsConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "MatchingConfig",
    "WeightsConfig",
    "DataConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    "DEFAULT_LOCATION_ZONES",
    # Enums
    "LogLevel",
    "LogFormat",
    "RatePeriod",
    # Exceptions
    "ConfigurationError",
]
