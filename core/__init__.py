# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core module initialization
# PURPOSE: Export core contracts, errors and models
# CREATED: 19 OCT 2026
# ============================================================================

from core.contracts import Phase, Action, TargetState, ColumnType, GenerationType
from core.errors import (
    DdlError,
    DialectResolutionError,
    SchemaAssemblyError,
    DuplicateEntityError,
    DanglingReferenceError,
    UnsupportedFeatureError,
    GenerationError,
    OutputWriteError,
    DefinitionLoadError,
)
from core.models import EntityDefinition, ColumnDefinition, DefinitionSet, SchemaModel

__all__ = [
    # Enums
    "Phase",
    "Action",
    "TargetState",
    "ColumnType",
    "GenerationType",
    # Errors
    "DdlError",
    "DialectResolutionError",
    "SchemaAssemblyError",
    "DuplicateEntityError",
    "DanglingReferenceError",
    "UnsupportedFeatureError",
    "GenerationError",
    "OutputWriteError",
    "DefinitionLoadError",
    # Models
    "EntityDefinition",
    "ColumnDefinition",
    "DefinitionSet",
    "SchemaModel",
]
