# ============================================================================
# SCHEMA FILTER TESTS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Tests - Per-phase namespace/table selection
# PURPOSE: Verify pattern filters, provider resolution and filtered views
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Filter Tests

Run with:
    pytest tests/test_schema_filter.py -v
"""

import logging

import pytest

from core.contracts import Phase
from core.models.entity import NamespaceGroup
from services.schema_builder import build_schema
from services.schema_filter import (
    DEFAULT_FILTER_CONFIG,
    INCLUDE_ALL,
    PatternSchemaFilter,
    SchemaFilterConfig,
    filter_for,
    list_filter_providers,
    register_filter_provider,
    resolve_filter_config,
)
from tests.factories import make_entity, make_order, make_user


@pytest.fixture
def mixed_model():
    """shop.User, shop.Order, audit.Entry and Setting (default namespace)."""
    return build_schema(
        [
            make_user("shop.User"),
            make_order("shop.Order", target="shop.User"),
            make_entity("audit.Entry"),
            make_entity("Setting"),
        ],
        [
            NamespaceGroup(name="shop", entities=["shop.User", "shop.Order"]),
            NamespaceGroup(name="audit", entities=["audit.Entry"]),
        ],
    )


def _names(filtered):
    return [t.qualified_name for t in filtered.tables]


# ============================================================================
# PATTERN FILTER
# ============================================================================


class TestPatternSchemaFilter:
    def test_empty_filter_includes_everything(self, mixed_model):
        filtered = filter_for(Phase.CREATE, mixed_model, SchemaFilterConfig(create_filter=PatternSchemaFilter()))
        assert len(filtered) == 4

    def test_exclude_by_physical_name(self, mixed_model):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(exclude=("shop.order",)))
        assert _names(filter_for(Phase.CREATE, mixed_model, config)) == ["Setting", "audit.Entry", "shop.User"]

    def test_exclude_by_qualified_name(self, mixed_model):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(exclude=("shop.User",)))
        assert "shop.User" not in _names(filter_for(Phase.CREATE, mixed_model, config))

    def test_include_glob(self, mixed_model):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(include=("shop.*",)))
        assert _names(filter_for(Phase.CREATE, mixed_model, config)) == ["shop.User", "shop.Order"]

    def test_exclude_wins_over_include(self, mixed_model):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(include=("shop.*",), exclude=("*order",)))
        assert _names(filter_for(Phase.CREATE, mixed_model, config)) == ["shop.User"]

    def test_excluded_namespace_drops_its_tables(self, mixed_model):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(exclude=("audit",)))
        filtered = filter_for(Phase.CREATE, mixed_model, config)
        assert [ns.name for ns in filtered.namespaces] == ["shop"]
        assert not filtered.includes("audit.Entry")

    def test_default_namespace_never_excluded(self, mixed_model):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(exclude=("*",)))
        filtered = filter_for(Phase.CREATE, mixed_model, config)
        assert filtered.namespaces == []
        assert len(filtered) == 0

    def test_matching_is_case_sensitive(self, mixed_model):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(exclude=("SETTING",)))
        assert filter_for(Phase.CREATE, mixed_model, config).includes("Setting")

    def test_from_settings(self):
        schema_filter = PatternSchemaFilter.from_settings(
            {"drop_filter.include": "shop.*, audit.*", "drop_filter.exclude": ""}, "drop_filter"
        )
        assert schema_filter.include == ("shop.*", "audit.*")
        assert schema_filter.exclude == ()


# ============================================================================
# FILTERED VIEW
# ============================================================================


class TestFilteredSchema:
    def test_tables_in_creation_order(self, mixed_model):
        filtered = filter_for(Phase.CREATE, mixed_model)
        assert _names(filtered).index("shop.User") < _names(filtered).index("shop.Order")

    def test_default_namespace_not_listed(self, mixed_model):
        filtered = filter_for(Phase.DROP, mixed_model)
        assert [ns.name for ns in filtered.namespaces] == ["audit", "shop"]

    def test_partially_dropped_namespace_kept(self, mixed_model):
        config = SchemaFilterConfig(drop_filter=PatternSchemaFilter(exclude=("shop.order",)))
        filtered = filter_for(Phase.DROP, mixed_model, config)
        assert [ns.name for ns in filtered.namespaces] == ["audit"]
        assert filtered.includes("shop.User")

    def test_partially_created_namespace_still_created(self, mixed_model):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(exclude=("shop.order",)))
        filtered = filter_for(Phase.CREATE, mixed_model, config)
        assert [ns.name for ns in filtered.namespaces] == ["audit", "shop"]

    def test_unknown_name_not_included(self, mixed_model):
        assert not filter_for(Phase.CREATE, mixed_model).includes("Nope")

    def test_phases_filtered_independently(self, mixed_model):
        config = SchemaFilterConfig(
            create_filter=PatternSchemaFilter(exclude=("audit",)),
            drop_filter=PatternSchemaFilter(include=("audit.*",)),
        )
        assert "audit.Entry" not in _names(filter_for(Phase.CREATE, mixed_model, config))
        assert _names(filter_for(Phase.DROP, mixed_model, config)) == ["audit.Entry"]

    def test_model_is_shared(self, mixed_model):
        filtered = filter_for(Phase.CREATE, mixed_model)
        assert filtered.model is mixed_model
        assert filtered.phase is Phase.CREATE


# ============================================================================
# PROVIDERS
# ============================================================================


class TestFilterProviders:
    def test_builtin_providers(self):
        assert {"default", "patterns"} <= set(list_filter_providers())

    def test_explicit_config_wins(self):
        config = SchemaFilterConfig(create_filter=PatternSchemaFilter(exclude=("x",)))
        assert resolve_filter_config(config, {"schema_filter_provider": "patterns"}) is config

    def test_default_provider(self):
        assert resolve_filter_config(None, {}) is DEFAULT_FILTER_CONFIG
        assert DEFAULT_FILTER_CONFIG.for_phase(Phase.DROP) is INCLUDE_ALL

    def test_patterns_provider(self):
        config = resolve_filter_config(None, {
            "schema_filter_provider": "patterns",
            "create_filter.exclude": "audit.*",
        })
        assert config.create_filter == PatternSchemaFilter(exclude=("audit.*",))
        assert config.drop_filter == PatternSchemaFilter()

    def test_unknown_provider_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = resolve_filter_config(None, {"schema_filter_provider": "nope"})
        assert config is DEFAULT_FILTER_CONFIG
        assert "Unknown schema filter provider 'nope'" in caplog.text

    def test_duplicate_provider(self):
        with pytest.raises(ValueError):
            @register_filter_provider("Default")
            def again(settings):
                return DEFAULT_FILTER_CONFIG
