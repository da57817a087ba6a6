# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Services - Pipeline stages
# PURPOSE: Definition loading, schema assembly, filtering and emission
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Pipeline stages used by the ExecutionCoordinator:
- definition_loader: YAML/JSON definition files -> DefinitionSet
- schema_builder: entity sources -> SchemaModel
- schema_filter: per-phase selection of namespaces and tables
- script_emitter: ordered DDL statements for one dialect
"""

from services.definition_loader import load_definition_file, load_definitions
from services.schema_builder import SchemaModelBuilder, build_schema, dependency_order
from services.schema_filter import (
    SchemaFilter,
    IncludeAll,
    PatternSchemaFilter,
    SchemaFilterConfig,
    FilteredSchema,
    filter_for,
    register_filter_provider,
    resolve_filter_config,
)
from services.script_emitter import ScriptEmitter

__all__ = [
    "load_definition_file",
    "load_definitions",
    "SchemaModelBuilder",
    "build_schema",
    "dependency_order",
    "SchemaFilter",
    "IncludeAll",
    "PatternSchemaFilter",
    "SchemaFilterConfig",
    "FilteredSchema",
    "filter_for",
    "register_filter_provider",
    "resolve_filter_config",
    "ScriptEmitter",
]
