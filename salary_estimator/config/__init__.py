"""Configuration management module for the salary estimator."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_config_dict
from .models import (
    CANDIDATE_NAMES,
    AdvancedConfig,
    AppConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ModelingConfig,
    OutputConfig,
    SearchConfig,
    SelectorConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "parse_config_dict",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "SearchConfig",
    "SelectorConfig",
    "ModelingConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "OutputConfig",
    "EnvironmentConfig",
    "CANDIDATE_NAMES",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
