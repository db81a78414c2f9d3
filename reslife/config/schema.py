"""Configuration schema registry.

Defines all valid configuration keys with their types, defaults and
validation rules. This is the single source of truth for configuration
structure.
"""

from __future__ import annotations

from typing import Any

from .types import ConfigKey, ConfigType

# =============================================================================
# CONFIGURATION SCHEMA REGISTRY
#
# All configuration keys must be defined here. Unknown keys will be rejected.
# =============================================================================

CONFIG_SCHEMA: dict[str, ConfigKey] = {
    # =========================================================================
    # GRAPH CONSTRUCTION
    # =========================================================================
    "graph.min_strength": ConfigKey(
        key="graph.min_strength",
        config_type=ConfigType.FLOAT,
        default=0.5,
        description="Minimum total strength for a synthesized relationship",
        min_value=0.0,
    ),
    "graph.isolation_threshold": ConfigKey(
        key="graph.isolation_threshold",
        config_type=ConfigType.FLOAT,
        default=0.7,
        description="Boundary score at or above which a member is an isolation risk",
        min_value=0.0,
        max_value=1.0,
    ),
    # =========================================================================
    # INTRODUCTIONS
    # =========================================================================
    "introductions.max_boundary_score": ConfigKey(
        key="introductions.max_boundary_score",
        config_type=ConfigType.FLOAT,
        default=0.5,
        description="Highest boundary score a member may have to be introduced to an isolated member",
        min_value=0.0,
        max_value=1.0,
    ),
    # =========================================================================
    # FILTRATION (accepted for interface compatibility, order comes from edges)
    # =========================================================================
    "filtration.min_strength": ConfigKey(
        key="filtration.min_strength",
        config_type=ConfigType.FLOAT,
        default=0.0,
        description="Lower end of the strength range passed to the filtration",
        min_value=0.0,
    ),
    "filtration.max_strength": ConfigKey(
        key="filtration.max_strength",
        config_type=ConfigType.FLOAT,
        default=10.0,
        description="Upper end of the strength range passed to the filtration",
        min_value=0.0,
    ),
    "filtration.steps": ConfigKey(
        key="filtration.steps",
        config_type=ConfigType.INT,
        default=20,
        description="Number of filtration steps passed to the filtration",
        min_value=1,
    ),
    # =========================================================================
    # EVENT SCHEDULING
    # =========================================================================
    "scheduling.top_n": ConfigKey(
        key="scheduling.top_n",
        config_type=ConfigType.INT,
        default=5,
        description="Number of ranked event time slots to return",
        min_value=0,
    ),
    "scheduling.min_attendance": ConfigKey(
        key="scheduling.min_attendance",
        config_type=ConfigType.INT,
        default=5,
        description="Slots with fewer available members are skipped",
        min_value=0,
    ),
}


def get_schema_key(key: str) -> ConfigKey | None:
    """
    Get the schema definition for a config key.

    Args:
        key: The dot-notation config key

    Returns:
        ConfigKey if found, None if unknown
    """
    return CONFIG_SCHEMA.get(key)


def get_all_required_keys() -> list[str]:
    """Keys that must resolve to a value (required with no default)."""
    return [key for key, schema in CONFIG_SCHEMA.items() if schema.required and schema.default is None]


def validate_key(key: str, value: Any) -> str | None:
    """
    Validate a value against its schema.

    Args:
        key: The config key
        value: The value to validate

    Returns:
        None if valid, error message if invalid
    """
    schema = CONFIG_SCHEMA.get(key)
    if schema is None:
        return f"Unknown config key: {key}"
    return schema.validate(value)
