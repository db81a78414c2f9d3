"""
Unified configuration management for community analysis.

Every analysis parameter has a schema default; environment variables and an
optional JSON override file replace them. Unknown keys and invalid values
fail fast.

Usage:
    from reslife.config import ConfigLoader, ConfigError

    # Initialize at application startup
    ConfigLoader.initialize(config_file="reslife.json")

    # Get singleton instance
    config = ConfigLoader.get_instance()

    # Typed accessors
    threshold = config.get_float("graph.isolation_threshold")
    top_n = config.get_int("scheduling.top_n")
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    ConfigFileError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .loader import ConfigLoader
from .schema import CONFIG_SCHEMA, get_all_required_keys, get_schema_key, validate_key
from .types import ConfigKey, ConfigType

__all__ = [
    # Main loader
    "ConfigLoader",
    # Error classes
    "ConfigError",
    "ConfigFileError",
    "MissingKeyError",
    "ValidationError",
    "UnknownKeyError",
    # Schema
    "CONFIG_SCHEMA",
    "ConfigKey",
    "ConfigType",
    "get_schema_key",
    "get_all_required_keys",
    "validate_key",
]
