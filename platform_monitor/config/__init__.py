"""Configuration management for the Platform Monitor."""

from .environment import EnvironmentConfig, TelegramCredentials, load_environment_config
from .exceptions import ConfigurationError
from .loader import apply_environment_overrides, load_config, parse_config_dict
from .models import (
    AdvancedConfig,
    AppConfig,
    CriteriaConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    NotificationConfig,
    ScoringWeights,
    SourceConfig,
    SourceKind,
)

__all__ = [
    # Loader functions
    "load_config",
    "parse_config_dict",
    "apply_environment_overrides",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "SourceConfig",
    "CriteriaConfig",
    "ScoringWeights",
    "NotificationConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    "TelegramCredentials",
    # Enums
    "SourceKind",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
