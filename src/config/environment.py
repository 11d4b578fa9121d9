"""Environment configuration module.

This module MUST be imported before any other project modules that depend on environment variables.
It loads the .env file and sets up the environment configuration that will be used throughout the project,
both when running the FastAPI app and when running standalone scripts.

Usage:
    from src.config.environment import IS_PRODUCTION_ENVIRONMENT, get_database_url

Note:
    This module handles loading of environment variables via python-dotenv.
    In production, environment variables should be set directly
    in the platform's environment configuration.
"""

import os
import logging
from dotenv import load_dotenv

from ..errors import DevEventError

# Load environment variables - this must happen before any other imports
load_dotenv()

# Environment configuration
env_setting = os.environ.get('ENVIRONMENT', '').lower()
IS_PRODUCTION_ENVIRONMENT = env_setting == 'production'

if env_setting not in ['development', 'production']:
    logging.warning(
        f"Environment setting '{env_setting}' is invalid or not specified. "
        "Expected 'development' or 'production'. Defaulting to development environment."
    )


class ConfigurationError(DevEventError):
    """Raised when required configuration is missing or malformed."""
    pass


def get_database_url() -> str:
    """
    Return the database connection string from DATABASE_URL.

    Raises:
        ConfigurationError: If DATABASE_URL is not set or blank
    """
    url = os.environ.get('DATABASE_URL', '').strip()
    if not url:
        raise ConfigurationError(
            "Please define the DATABASE_URL environment variable (for example in .env)"
        )
    return url


def get_float_setting(name: str, default: float) -> float:
    """Read a positive float setting from the environment."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def get_bool_setting(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


__all__ = [
    'IS_PRODUCTION_ENVIRONMENT',
    'ConfigurationError',
    'get_database_url',
    'get_float_setting',
    'get_bool_setting',
]
