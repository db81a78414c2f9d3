"""
ConfigLoader - Unified fast-fail configuration management.

Resolves each analysis parameter from, in order: a CONFIG_<KEY> environment
variable, an override mapping (passed in or read from a JSON file), and the
schema default. Unknown keys and invalid values fail immediately.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any, cast

from .errors import (
    ConfigError,
    ConfigFileError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .schema import CONFIG_SCHEMA, get_all_required_keys
from .types import ConfigType

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "RESLIFE_CONFIG_FILE"


class ConfigLoader:
    """
    Unified configuration loader with fast-fail behavior.

    Usage:
        # Initialize at application startup (validates every key)
        ConfigLoader.initialize(config_file="reslife.json")

        # Get singleton instance
        loader = ConfigLoader.get_instance()

        # Typed accessors
        min_strength = loader.get_float("graph.min_strength")
        top_n = loader.get_int("scheduling.top_n")

        # Test substitution
        with ConfigLoader.use(ConfigLoader(overrides={"scheduling.top_n": 3})):
            pass
    """

    _instance: ConfigLoader | None = None
    _initialized: bool = False

    def __init__(
        self,
        overrides: Mapping[str, Any] | None = None,
        config_file: str | Path | None = None,
    ):
        """
        Initialize the config loader.

        Args:
            overrides: Values keyed by dot-notation key. Nested mappings are
                flattened, so {"graph": {"min_strength": 1.0}} also works.
            config_file: JSON file of overrides. Defaults to $RESLIFE_CONFIG_FILE.
                Explicit overrides win over file values.
        """
        self._overrides: dict[str, Any] = {}

        if config_file is None:
            config_file = os.environ.get(CONFIG_FILE_ENV) or None
        if config_file is not None:
            self._overrides.update(self._load_file(Path(config_file)))

        if overrides:
            self._overrides.update(_flatten(overrides))

        unknown = sorted(key for key in self._overrides if key not in CONFIG_SCHEMA)
        if unknown:
            raise UnknownKeyError(f"Unknown config keys in overrides: {unknown}")

        self._cache: dict[str, Any] = {}
        self._validated = False

    @staticmethod
    def _load_file(path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigFileError(f"Cannot read config file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"Config file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigFileError(f"Config file {path} must contain a JSON object")

        logger.debug(f"Loaded {len(data)} top-level config entries from {path}")
        return _flatten(data)

    @classmethod
    def initialize(
        cls,
        overrides: Mapping[str, Any] | None = None,
        config_file: str | Path | None = None,
        validate_on_init: bool = True,
    ) -> ConfigLoader:
        """
        Initialize the singleton ConfigLoader.

        Args:
            overrides: Values keyed by dot-notation key
            config_file: JSON override file (defaults to env var)
            validate_on_init: If True, resolves and validates every key now

        Returns:
            The initialized ConfigLoader instance

        Raises:
            ConfigError: If any key is missing or invalid
        """
        if cls._initialized:
            logger.debug("ConfigLoader already initialized, returning existing instance")
            return cls._instance  # type: ignore

        instance = cls(overrides=overrides, config_file=config_file)

        if validate_on_init:
            instance._validate_all_keys()

        cls._instance = instance
        cls._initialized = True
        logger.info("ConfigLoader initialized successfully")
        return instance

    @classmethod
    def get_instance(cls) -> ConfigLoader:
        """Get the singleton instance, auto-initializing from the environment."""
        if not cls._initialized or cls._instance is None:
            # CLI scripts and tests may never call initialize()
            logger.debug("ConfigLoader auto-initializing (no explicit initialize() call)")
            return cls.initialize(validate_on_init=False)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset singleton state. For testing only."""
        cls._instance = None
        cls._initialized = False

    @classmethod
    @contextmanager
    def use(cls, loader: ConfigLoader) -> Iterator[None]:
        """
        Temporarily replace the singleton with a custom loader.

        Args:
            loader: The loader to use temporarily.
        """
        original = cls._instance
        original_initialized = cls._initialized
        cls._instance = loader
        cls._initialized = True
        try:
            yield
        finally:
            cls._instance = original
            cls._initialized = original_initialized

    def _validate_all_keys(self) -> None:
        """
        Resolve every schema key and collect all failures into one error.

        Raises:
            ConfigError: If any keys are missing or invalid
        """
        missing_keys: list[str] = []
        invalid_values: list[str] = []

        for key in CONFIG_SCHEMA:
            try:
                self.get(key)
            except MissingKeyError:
                missing_keys.append(key)
            except ValidationError as e:
                invalid_values.append(str(e))

        if missing_keys or invalid_values:
            error_parts = []
            if missing_keys:
                error_parts.append(f"Missing required keys ({len(missing_keys)}): {missing_keys}")
            if invalid_values:
                error_parts.append(f"Invalid values ({len(invalid_values)}): {invalid_values}")

            raise ConfigError("Configuration validation failed.\n" + "\n".join(error_parts))

        self._validated = True
        logger.info(f"Validated {len(CONFIG_SCHEMA)} config keys ({len(get_all_required_keys())} without defaults)")

    def _get_env_key(self, key: str) -> str:
        """Convert dot notation to environment variable name."""
        # graph.min_strength -> CONFIG_GRAPH_MIN_STRENGTH
        return "CONFIG_" + key.upper().replace(".", "_")

    def get(self, key: str) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key (e.g., "graph.min_strength")

        Returns:
            The typed configuration value

        Raises:
            UnknownKeyError: If key is not in schema
            MissingKeyError: If no source provides a required key
            ValidationError: If value fails type conversion or validation
        """
        if key not in CONFIG_SCHEMA:
            raise UnknownKeyError(f"Unknown config key: '{key}'")

        schema = CONFIG_SCHEMA[key]

        # Environment first (highest priority override)
        env_key = self._get_env_key(key)
        env_value = os.environ.get(env_key)
        if env_value is not None:
            try:
                typed_value = self._convert_type(env_value, schema.config_type)
            except (ValueError, TypeError) as e:
                raise ValidationError(f"Environment variable {env_key} has invalid type: {e}") from e
            error = schema.validate(typed_value)
            if error:
                raise ValidationError(f"Environment variable {env_key}: {error}")
            return typed_value

        if key in self._cache:
            return self._cache[key]

        if key in self._overrides:
            raw_value = self._overrides[key]
        elif schema.default is not None:
            raw_value = schema.default
        else:
            raise MissingKeyError(f"Required config key '{key}' has no value. Set {env_key} or add it to the config file.")

        try:
            typed_value = self._convert_type(raw_value, schema.config_type)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Config key '{key}' has invalid type: {e}") from e

        error = schema.validate(typed_value)
        if error:
            raise ValidationError(f"Config key '{key}': {error}")

        self._cache[key] = typed_value
        return typed_value

    def _get_or_default(self, key: str, default: Any) -> Any:
        # Fallback covers absent or unknown keys only; invalid values still raise
        try:
            return self.get(key)
        except (MissingKeyError, UnknownKeyError):
            if default is None:
                raise
            return default

    def get_int(self, key: str, default: int | None = None) -> int:
        return cast(int, self._get_or_default(key, default))

    def get_float(self, key: str, default: float | None = None) -> float:
        return cast(float, self._get_or_default(key, default))

    def _convert_type(self, value: Any, config_type: ConfigType) -> Any:
        """Convert a raw value to the specified type."""
        if config_type == ConfigType.INT:
            if isinstance(value, bool):
                raise TypeError(f"expected int, got bool {value!r}")
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"expected int, got {value!r}")
            return int(value)
        elif config_type == ConfigType.FLOAT:
            if isinstance(value, bool):
                raise TypeError(f"expected float, got bool {value!r}")
            return float(value)
        elif config_type == ConfigType.BOOL:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                return value.lower() in ("true", "1", "yes", "on")
            return bool(value)
        elif config_type == ConfigType.STRING:
            return str(value)
        else:
            return value

    def as_dict(self) -> dict[str, Any]:
        """Resolved value of every schema key."""
        return {key: self.get(key) for key in CONFIG_SCHEMA}

    def invalidate_cache(self, key: str | None = None) -> None:
        """
        Invalidate cached values.

        Args:
            key: Specific key to invalidate, or None for all
        """
        if key is None:
            self._cache.clear()
        elif key in self._cache:
            del self._cache[key]

    def clear_cache(self) -> None:
        """Clear the configuration cache (alias for invalidate_cache)."""
        self._cache.clear()

    def health_check(self) -> dict[str, Any]:
        """
        Perform a health check on configuration system.

        Returns:
            Dict with status, validation results, and any issues
        """
        result: dict[str, Any] = {
            "status": "healthy",
            "validated": self._validated,
            "override_keys": len(self._overrides),
            "cached_keys": len(self._cache),
            "issues": [],
        }

        for key in CONFIG_SCHEMA:
            try:
                self.get(key)
            except ConfigError as e:
                result["status"] = "unhealthy"
                result["issues"].append(str(e))

        return result


def _flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """{"graph": {"min_strength": 1}} -> {"graph.min_strength": 1}"""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, f"{full_key}."))
        else:
            flat[full_key] = value
    return flat
