# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Tests - Defaults, settings merge and execution options
# PURPOSE: Verify environment overrides and immutable run options
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

import dataclasses
import logging

import pytest

from core.config import (
    DEFAULT_SETTINGS,
    ExecutionOptions,
    GeneratorDefaults,
    get_defaults,
    is_dialect_key,
    merge_settings,
    parse_bool,
    reset_defaults,
)
from core.contracts import Action


class TestParseBool:
    @pytest.mark.parametrize("value", ["true", "TRUE", "yes", "1", "on", True])
    def test_true(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "No", "0", "off", "", False])
    def test_false(self, value):
        assert parse_bool(value) is False

    def test_none_uses_default(self):
        assert parse_bool(None, default=True) is True

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_bool("maybe")


class TestGeneratorDefaults:
    def test_builtin_values(self):
        defaults = GeneratorDefaults.from_env()
        assert defaults.output_directory == "generated-resources/sql/ddl"
        assert defaults.delimiter == ";"
        assert defaults.format
        assert defaults.halt_on_error
        assert defaults.manage_namespaces

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DDL_OUTPUT_DIR", "/tmp/ddl")
        monkeypatch.setenv("DDL_DELIMITER", "GO")
        monkeypatch.setenv("DDL_HALT_ON_ERROR", "false")
        defaults = GeneratorDefaults.from_env()
        assert defaults.output_directory == "/tmp/ddl"
        assert defaults.delimiter == "GO"
        assert not defaults.halt_on_error

    def test_global_instance_cached(self, monkeypatch):
        first = get_defaults()
        monkeypatch.setenv("DDL_FORMAT", "false")
        assert get_defaults() is first
        reset_defaults()
        assert get_defaults().format is False


class TestMergeSettings:
    def test_defaults_kept(self):
        merged = merge_settings(None)
        assert dict(merged) == dict(DEFAULT_SETTINGS)

    def test_user_value_overrides_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            merged = merge_settings({"default_string_length": "100"})
        assert merged["default_string_length"] == "100"
        assert (
            "value for property 'default_string_length' already present, "
            "overriding current value '255'"
        ) in caplog.text

    def test_dialect_key_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            merged = merge_settings({"dialect": "MySQL", "hibernate.dialect": "H2", "storage_engine": "MyISAM"})
        assert "dialect" not in merged
        assert "hibernate.dialect" not in merged
        assert merged["storage_engine"] == "MyISAM"
        assert "ignoring dialect property 'dialect'" in caplog.text

    def test_read_only(self):
        with pytest.raises(TypeError):
            merge_settings({"a": "b"})["a"] = "c"

    def test_is_dialect_key(self):
        assert is_dialect_key(" Dialect ")
        assert not is_dialect_key("dialect_version")


class TestExecutionOptions:
    def test_build_uses_defaults(self):
        options = ExecutionOptions.build()
        assert options.delimiter == ";"
        assert options.action is Action.CREATE
        assert options.halt_on_error
        assert options.output_directory == "generated-resources/sql/ddl"
        assert options.settings["globally_quoted_identifiers"] == "true"

    def test_explicit_values_win(self):
        defaults = GeneratorDefaults(delimiter="GO", halt_on_error=True)
        options = ExecutionOptions.build(halt_on_error=False, defaults=defaults)
        assert options.delimiter == "GO"
        assert not options.halt_on_error

    def test_create_drop(self):
        assert ExecutionOptions.build(create_drop=True).action is Action.BOTH
        assert ExecutionOptions.build(action="drop").action is Action.DROP

    def test_immutable(self):
        options = ExecutionOptions.build(import_files=["a.sql"])
        assert options.import_files == ("a.sql",)
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.delimiter = "GO"
        with pytest.raises(TypeError):
            options.settings["x"] = "y"

    def test_with_changes(self):
        options = ExecutionOptions.build()
        changed = options.with_changes(format=False, import_files=["seed.sql"])
        assert options.format
        assert not changed.format
        assert changed.import_files == ("seed.sql",)

    def test_to_dict(self):
        data = ExecutionOptions.build(create_drop=True).to_dict()
        assert data["action"] == "both"
        assert data["settings"]["use_sql_comments"] == "true"
