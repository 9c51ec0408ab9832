"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_DATABASE_URL = "sqlite:///./data/salary_estimator.db"


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
        output_dir: Optional[str] = None,
    ):
        self.log_level = log_level
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.output_dir = output_dir


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Optional environment variables:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - DATABASE_URL: SQLAlchemy URL for the listing store
      (default: sqlite:///./data/salary_estimator.db)
    - OUTPUT_DIR: Override the configured artifact directory

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    log_level = os.getenv("LOG_LEVEL")
    database_url = os.getenv("DATABASE_URL")
    output_dir = os.getenv("OUTPUT_DIR")

    if log_level:
        log_level = log_level.upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    if database_url is not None and "://" not in database_url:
        errors.append(f"Invalid DATABASE_URL: '{database_url}'. Expected a URL like sqlite:///path.db")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the variables exported in your shell or .env file",
                "Unset variables you do not need; every variable is optional",
            ],
        )

    return EnvironmentConfig(
        log_level=log_level,
        database_url=database_url,
        output_dir=output_dir or None,
    )
