"""Tests for the fast-fail configuration loader."""

from __future__ import annotations

import json

import pytest

from reslife.config import (
    CONFIG_SCHEMA,
    ConfigError,
    ConfigFileError,
    ConfigKey,
    ConfigLoader,
    ConfigType,
    UnknownKeyError,
    ValidationError,
    get_all_required_keys,
    get_schema_key,
    validate_key,
)


class TestSchema:
    def test_every_key_has_a_default(self):
        assert get_all_required_keys() == []
        for key, schema in CONFIG_SCHEMA.items():
            assert schema.key == key
            assert schema.default is not None

    def test_get_schema_key(self):
        assert get_schema_key("filtration.steps").config_type is ConfigType.INT
        assert get_schema_key("filtration.nope") is None

    def test_validate_key(self):
        assert validate_key("graph.min_strength", 1.0) is None
        assert "below minimum" in validate_key("graph.min_strength", -1.0)
        assert "above maximum" in validate_key("graph.isolation_threshold", 1.5)
        assert "Unknown config key" in validate_key("graph.nope", 1)

    def test_allowed_values_and_custom_validator(self):
        key = ConfigKey(
            key="x",
            config_type=ConfigType.STRING,
            allowed_values=["a", "b"],
            validator=lambda v: v != "b",
        )
        assert key.validate("a") is None
        assert "not in allowed values" in key.validate("c")
        assert "failed custom validation" in key.validate("b")


class TestConfigLoader:
    def test_schema_defaults(self):
        config = ConfigLoader()
        assert config.get_float("graph.min_strength") == 0.5
        assert config.get_float("graph.isolation_threshold") == 0.7
        assert config.get_float("introductions.max_boundary_score") == 0.5
        assert config.get_float("filtration.min_strength") == 0.0
        assert config.get_float("filtration.max_strength") == 10.0
        assert config.get_int("filtration.steps") == 20
        assert config.get_int("scheduling.top_n") == 5
        assert config.get_int("scheduling.min_attendance") == 5

    def test_overrides(self):
        config = ConfigLoader(overrides={"scheduling.top_n": 3})
        assert config.get_int("scheduling.top_n") == 3

    def test_nested_overrides(self):
        config = ConfigLoader(overrides={"graph": {"min_strength": 1.25}})
        assert config.get_float("graph.min_strength") == 1.25

    def test_environment_wins(self, monkeypatch):
        monkeypatch.setenv("CONFIG_SCHEDULING_TOP_N", "9")
        config = ConfigLoader(overrides={"scheduling.top_n": 3})
        assert config.get_int("scheduling.top_n") == 9

    def test_environment_type_error(self, monkeypatch):
        monkeypatch.setenv("CONFIG_GRAPH_MIN_STRENGTH", "strong")
        with pytest.raises(ValidationError):
            ConfigLoader().get("graph.min_strength")

    def test_environment_value_is_validated(self, monkeypatch):
        monkeypatch.setenv("CONFIG_GRAPH_ISOLATION_THRESHOLD", "3")
        with pytest.raises(ValidationError):
            ConfigLoader().get("graph.isolation_threshold")

    def test_unknown_key(self):
        with pytest.raises(UnknownKeyError):
            ConfigLoader().get("graph.colour")

    def test_unknown_override_key_fails_fast(self):
        with pytest.raises(UnknownKeyError):
            ConfigLoader(overrides={"graph.colour": "blue"})

    def test_invalid_override_value(self):
        config = ConfigLoader(overrides={"graph.isolation_threshold": 1.5})
        with pytest.raises(ValidationError):
            config.get("graph.isolation_threshold")

    def test_fractional_int_rejected(self):
        with pytest.raises(ValidationError):
            ConfigLoader(overrides={"scheduling.top_n": 2.5}).get("scheduling.top_n")

    def test_typed_default_for_unknown_key(self):
        assert ConfigLoader().get_int("graph.colour", default=4) == 4

    def test_config_file(self, tmp_path):
        path = tmp_path / "reslife.json"
        path.write_text(json.dumps({"graph": {"min_strength": 2.0}, "scheduling.top_n": 2}))

        config = ConfigLoader(config_file=path)
        assert config.get_float("graph.min_strength") == 2.0
        assert config.get_int("scheduling.top_n") == 2

    def test_explicit_overrides_beat_file(self, tmp_path):
        path = tmp_path / "reslife.json"
        path.write_text(json.dumps({"scheduling.top_n": 2}))
        config = ConfigLoader(overrides={"scheduling.top_n": 7}, config_file=path)
        assert config.get_int("scheduling.top_n") == 7

    def test_config_file_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "reslife.json"
        path.write_text(json.dumps({"filtration": {"steps": 4}}))
        monkeypatch.setenv("RESLIFE_CONFIG_FILE", str(path))
        assert ConfigLoader().get_int("filtration.steps") == 4

    def test_bad_config_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigFileError):
            ConfigLoader(config_file=path)

        with pytest.raises(ConfigFileError):
            ConfigLoader(config_file=tmp_path / "missing.json")

        listing = tmp_path / "list.json"
        listing.write_text("[1, 2]")
        with pytest.raises(ConfigFileError):
            ConfigLoader(config_file=listing)

    def test_as_dict(self):
        resolved = ConfigLoader().as_dict()
        assert set(resolved) == set(CONFIG_SCHEMA)

    def test_cache_invalidation(self):
        config = ConfigLoader()
        config.get("scheduling.top_n")
        assert "scheduling.top_n" in config._cache
        config.invalidate_cache("scheduling.top_n")
        assert "scheduling.top_n" not in config._cache
        config.get("scheduling.top_n")
        config.clear_cache()
        assert config._cache == {}


class TestSingleton:
    def test_initialize_validates_everything(self):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.initialize(overrides={"graph.isolation_threshold": 5.0, "scheduling.top_n": -1})
        message = str(exc_info.value)
        assert "graph.isolation_threshold" in message
        assert "scheduling.top_n" in message

    def test_initialize_returns_same_instance(self):
        first = ConfigLoader.initialize()
        assert ConfigLoader.initialize(overrides={"scheduling.top_n": 1}) is first
        assert ConfigLoader.get_instance() is first

    def test_get_instance_auto_initializes(self):
        assert ConfigLoader.get_instance().get_int("scheduling.top_n") == 5

    def test_use_restores_previous(self):
        original = ConfigLoader.get_instance()
        replacement = ConfigLoader(overrides={"scheduling.top_n": 1})
        with ConfigLoader.use(replacement):
            assert ConfigLoader.get_instance() is replacement
        assert ConfigLoader.get_instance() is original

    def test_health_check(self):
        assert ConfigLoader().health_check()["status"] == "healthy"

        unhealthy = ConfigLoader(overrides={"graph.min_strength": -2}).health_check()
        assert unhealthy["status"] == "unhealthy"
        assert len(unhealthy["issues"]) == 1
