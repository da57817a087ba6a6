# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Model exports
# PURPOSE: Central export point for entity definitions and the schema model
# CREATED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Input records (pydantic, frozen) and the assembled schema model
(frozen dataclasses).
"""

from core.models.entity import (
    ColumnDefinition,
    ForeignKeyDefinition,
    IndexDefinition,
    EntityDefinition,
    NamespaceGroup,
    DefinitionSet,
    to_snake_case,
)
from core.models.schema import ResolvedForeignKey, Table, Namespace, SchemaModel

__all__ = [
    # Definitions
    "ColumnDefinition",
    "ForeignKeyDefinition",
    "IndexDefinition",
    "EntityDefinition",
    "NamespaceGroup",
    "DefinitionSet",
    "to_snake_case",
    # Schema model
    "ResolvedForeignKey",
    "Table",
    "Namespace",
    "SchemaModel",
]
