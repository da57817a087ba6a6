# ============================================================================
# SCHEMA MODEL
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core model - Assembled logical schema
# PURPOSE: Immutable, deterministic schema shared by all dialect targets
# CREATED: 19 OCT 2026
# EXPORTS: ResolvedForeignKey, Table, Namespace, SchemaModel
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Schema Model

The SchemaModel is the output of SchemaModelBuilder. It is built once per run
and read by every dialect target, so it is frozen and carries its orderings:

- namespaces: unnamed default namespace first, then by name
- tables: by qualified entity name
- creation_order: referenced tables before referencing tables
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Dict, List, Optional, Tuple

from core.models.entity import ColumnDefinition, EntityDefinition, IndexDefinition


@dataclass(frozen=True)
class ResolvedForeignKey:
    """A foreign key whose target entity and columns are known."""
    columns: Tuple[str, ...]
    target: str                         # Qualified name of the referenced entity
    target_columns: Tuple[str, ...]
    name: Optional[str] = None
    on_delete: Optional[str] = None


@dataclass(frozen=True)
class Table:
    """An entity placed in its namespace, with resolved relationships."""
    entity: EntityDefinition
    namespace: Optional[str]
    foreign_keys: Tuple[ResolvedForeignKey, ...] = ()

    @property
    def qualified_name(self) -> str:
        return self.entity.qualified_name

    @property
    def name(self) -> str:
        return self.entity.table_name

    @property
    def physical_name(self) -> str:
        """namespace.table, or table for the default namespace."""
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def columns(self) -> List[ColumnDefinition]:
        return self.entity.columns

    @property
    def indexes(self) -> List[IndexDefinition]:
        return self.entity.indexes

    @property
    def primary_key(self) -> List[str]:
        return self.entity.primary_key

    @property
    def comment(self) -> Optional[str]:
        return self.entity.comment

    @property
    def generated_column(self) -> Optional[ColumnDefinition]:
        for column in self.entity.columns:
            if column.generated is not None:
                return column
        return None

    def dependencies(self) -> Tuple[str, ...]:
        """Qualified names of referenced tables (excluding self references)."""
        targets = {fk.target for fk in self.foreign_keys if fk.target != self.qualified_name}
        return tuple(sorted(targets))


@dataclass(frozen=True)
class Namespace:
    """A schema/catalog scope. ``name`` is None for the default namespace."""
    name: Optional[str]
    tables: Tuple[str, ...] = ()
    comment: Optional[str] = None

    @property
    def is_default(self) -> bool:
        return self.name is None


@dataclass(frozen=True)
class SchemaModel:
    """Immutable logical schema, reusable across dialect emission passes."""
    namespaces: Tuple[Namespace, ...]
    tables: Tuple[Table, ...]
    creation_order: Tuple[str, ...]

    @cached_property
    def _tables_by_name(self) -> Dict[str, Table]:
        return {t.qualified_name: t for t in self.tables}

    @cached_property
    def _namespaces_by_name(self) -> Dict[Optional[str], Namespace]:
        return {ns.name: ns for ns in self.namespaces}

    def table(self, qualified_name: str) -> Optional[Table]:
        return self._tables_by_name.get(qualified_name)

    def namespace(self, name: Optional[str]) -> Optional[Namespace]:
        return self._namespaces_by_name.get(name)

    def namespace_of(self, table: Table) -> Namespace:
        return self._namespaces_by_name[table.namespace]

    def tables_in_creation_order(self) -> List[Table]:
        return [self._tables_by_name[name] for name in self.creation_order]

    def __len__(self) -> int:
        return len(self.tables)


__all__ = [
    "ResolvedForeignKey",
    "Table",
    "Namespace",
    "SchemaModel",
]
