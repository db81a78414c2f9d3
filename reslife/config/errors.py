"""Configuration error classes.

All config-related exceptions for fast-fail behavior.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class MissingKeyError(ConfigError):
    """Raised when a required key has no value in any source."""

    pass


class ValidationError(ConfigError):
    """Raised when a config value fails validation."""

    pass


class ConfigFileError(ConfigError):
    """Raised when an override file cannot be read or parsed."""

    pass


class UnknownKeyError(ConfigError):
    """Raised when an unknown config key is requested."""

    pass
