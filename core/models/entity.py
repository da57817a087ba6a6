# ============================================================================
# ENTITY DEFINITION MODELS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core model - Input records from entity discovery
# PURPOSE: Describe tables, columns, keys and namespace groupings
# CREATED: 19 OCT 2026
# EXPORTS: ColumnDefinition, ForeignKeyDefinition, IndexDefinition,
#          EntityDefinition, NamespaceGroup, DefinitionSet
# DEPENDENCIES: pydantic
# ============================================================================
"""
Entity Definition Models

An EntityDefinition is one logical table derived from one annotated type.
Definitions are produced outside this package (entity discovery, definition
files, pydantic models) and are immutable once built.

Example (YAML definition file):

    namespaces:
      - name: shop
        entities: [shop.User, shop.Order]
    entities:
      - qualified_name: shop.User
        columns:
          - {name: id, type: bigint, primary_key: true, generated: identity}
          - {name: name, type: string, length: 100}
      - qualified_name: shop.Order
        columns:
          - {name: id, type: bigint, primary_key: true}
          - {name: user_id, type: bigint, nullable: false}
        foreign_keys:
          - {columns: [user_id], target: shop.User}
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from core.contracts import ColumnType, GenerationType


_IDENTIFIER_CHARS = re.compile(r"^[^\s\"`\[\]]+$")


def to_snake_case(name: str) -> str:
    """OrderLine -> order_line."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _as_list(v):
    """Allow single string as shorthand for single-item list."""
    if isinstance(v, str):
        return [v]
    return v


class ColumnDefinition(BaseModel):
    """A single column of an entity."""
    name: str = Field(..., min_length=1, max_length=128)
    type: ColumnType
    length: Optional[int] = Field(default=None, ge=1)
    precision: Optional[int] = Field(default=None, ge=1)
    scale: Optional[int] = Field(default=None, ge=0)
    nullable: bool = True
    primary_key: bool = False
    unique: bool = False
    generated: Optional[GenerationType] = None
    default: Optional[str] = Field(default=None, description="Raw SQL default expression")
    allowed_values: Optional[List[str]] = Field(
        default=None,
        description="Enumerated values, rendered as a CHECK constraint"
    )
    comment: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not _IDENTIFIER_CHARS.match(v):
            raise ValueError(f"invalid column name: {v!r}")
        return v

    @model_validator(mode="after")
    def check_consistency(self) -> "ColumnDefinition":
        if self.scale is not None and self.precision is not None and self.scale > self.precision:
            raise ValueError(f"column {self.name}: scale {self.scale} exceeds precision {self.precision}")
        if self.allowed_values is not None and not self.allowed_values:
            raise ValueError(f"column {self.name}: allowed_values must not be empty")
        return self

    @property
    def is_nullable(self) -> bool:
        """Primary key columns are never nullable."""
        return self.nullable and not self.primary_key


class ForeignKeyDefinition(BaseModel):
    """
    A relationship from one entity to another.

    ``target`` is the qualified name of the referenced entity. A physical
    ``namespace.table`` reference is accepted as well (used by the pydantic
    model reader).
    """
    columns: List[str] = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    target_columns: Optional[List[str]] = None
    name: Optional[str] = None
    on_delete: Optional[str] = Field(
        default=None,
        pattern="^(?i:cascade|set null|set default|restrict|no action)$"
    )

    model_config = {"frozen": True}

    @field_validator("columns", "target_columns", mode="before")
    @classmethod
    def handle_string_input(cls, v):
        return _as_list(v)


class IndexDefinition(BaseModel):
    """A secondary index (or composite unique constraint) on an entity."""
    columns: List[str] = Field(..., min_length=1)
    name: Optional[str] = None
    unique: bool = False

    model_config = {"frozen": True}

    @field_validator("columns", mode="before")
    @classmethod
    def handle_string_input(cls, v):
        return _as_list(v)


class EntityDefinition(BaseModel):
    """
    A named logical table.

    Maps to: <namespace>.<table>
    """
    qualified_name: str = Field(..., min_length=1, description="e.g. shop.User")
    table: Optional[str] = Field(default=None, description="Defaults to snake_case of the simple name")
    namespace: Optional[str] = None
    columns: List[ColumnDefinition] = Field(..., min_length=1)
    foreign_keys: List[ForeignKeyDefinition] = Field(default_factory=list)
    indexes: List[IndexDefinition] = Field(default_factory=list)
    comment: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_columns(self) -> "EntityDefinition":
        seen = set()
        for column in self.columns:
            if column.name in seen:
                raise ValueError(f"entity {self.qualified_name}: duplicate column {column.name}")
            seen.add(column.name)
        if sum(1 for c in self.columns if c.generated is not None) > 1:
            raise ValueError(f"entity {self.qualified_name}: only one generated column is allowed")
        return self

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]

    @property
    def table_name(self) -> str:
        return self.table or to_snake_case(self.simple_name)

    @property
    def primary_key(self) -> List[str]:
        return [c.name for c in self.columns if c.primary_key]

    def column(self, name: str) -> Optional[ColumnDefinition]:
        for c in self.columns:
            if c.name == name:
                return c
        return None


class NamespaceGroup(BaseModel):
    """
    A schema-level grouping of entities.

    Lets the schema filter decide at namespace granularity.
    """
    name: str = Field(..., min_length=1)
    entities: List[str] = Field(default_factory=list, description="Qualified entity names")
    comment: Optional[str] = None

    model_config = {"frozen": True}


class DefinitionSet(BaseModel):
    """Entities and namespace groups from one source (e.g. one definition file)."""
    entities: List[EntityDefinition] = Field(default_factory=list)
    namespaces: List[NamespaceGroup] = Field(default_factory=list)

    model_config = {"frozen": True}


__all__ = [
    "ColumnDefinition",
    "ForeignKeyDefinition",
    "IndexDefinition",
    "EntityDefinition",
    "NamespaceGroup",
    "DefinitionSet",
    "to_snake_case",
]
