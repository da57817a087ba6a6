# ============================================================================
# SCHEMA MODEL BUILDER
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Service - Logical schema assembly
# PURPOSE: Merge entity sources into one consistent, deterministic SchemaModel
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Model Builder

Collects entity definitions and namespace groups from any number of sources
(definition files, pydantic models, in-memory lists) and assembles them into
a single SchemaModel.

Assembly:
1. Assign every entity to a namespace (declared, or by group membership)
2. Reject duplicate entities and duplicate physical tables
3. Resolve foreign key targets and columns
4. Order namespaces and tables deterministically
5. Compute the dependency order (referenced tables first)

Input order never changes the result.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Type

from pydantic import BaseModel

from core.errors import DanglingReferenceError, DuplicateEntityError, SchemaAssemblyError
from core.models.entity import DefinitionSet, EntityDefinition, NamespaceGroup
from core.models.schema import Namespace, ResolvedForeignKey, SchemaModel, Table
from core.schema.pydantic_source import entities_from_models

logger = logging.getLogger(__name__)


@dataclass
class _GroupAccumulator:
    """Namespace group merged across sources."""
    name: str
    members: Set[str] = field(default_factory=set)
    comment: Optional[str] = None


class SchemaModelBuilder:
    """
    Assembles a SchemaModel from heterogeneous entity sources.

    Usage:
        builder = SchemaModelBuilder()
        builder.add_source(load_definition_file("shop.yaml"))
        builder.add_models([AuditEntry])
        model = builder.build()
    """

    def __init__(self):
        self._entities: Dict[str, EntityDefinition] = {}
        self._groups: Dict[str, _GroupAccumulator] = {}
        self._model: Optional[SchemaModel] = None

    # =========================================================================
    # SOURCES
    # =========================================================================

    def add_entities(self, entities: Iterable[EntityDefinition]) -> "SchemaModelBuilder":
        """
        Add entity definitions.

        Raises:
            DuplicateEntityError: If a qualified name was already added
        """
        self._check_open()
        for entity in entities:
            if entity.qualified_name in self._entities:
                raise DuplicateEntityError(
                    f"Entity defined more than once: {entity.qualified_name}",
                    entity=entity.qualified_name,
                )
            self._entities[entity.qualified_name] = entity
        return self

    def add_namespaces(self, groups: Iterable[NamespaceGroup]) -> "SchemaModelBuilder":
        """Add namespace groups. Groups with the same name are merged."""
        self._check_open()
        for group in groups:
            acc = self._groups.setdefault(group.name, _GroupAccumulator(name=group.name))
            acc.members.update(group.entities)
            if acc.comment is None:
                acc.comment = group.comment
        return self

    def add_source(self, source: DefinitionSet) -> "SchemaModelBuilder":
        """Add everything from one DefinitionSet."""
        self.add_entities(source.entities)
        self.add_namespaces(source.namespaces)
        return self

    def add_models(
        self,
        models: Sequence[Type[BaseModel]],
        default_namespace: Optional[str] = None,
    ) -> "SchemaModelBuilder":
        """Add pydantic models carrying __sql_* metadata."""
        try:
            entities = entities_from_models(models, default_namespace=default_namespace)
        except ValueError as e:
            raise SchemaAssemblyError(f"Cannot read entity models: {e}") from e
        return self.add_entities(entities)

    def _check_open(self) -> None:
        if self._model is not None:
            raise SchemaAssemblyError("Schema model already built; sources can no longer be added")

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(
        self,
        entities: Optional[Iterable[EntityDefinition]] = None,
        namespaces: Optional[Iterable[NamespaceGroup]] = None,
    ) -> SchemaModel:
        """
        Assemble the schema model.

        The model is built once; later calls return the same instance.

        Raises:
            DuplicateEntityError: Duplicate entity, table or namespace membership
            DanglingReferenceError: Unresolvable reference
        """
        if self._model is not None:
            return self._model

        if entities is not None:
            self.add_entities(entities)
        if namespaces is not None:
            self.add_namespaces(namespaces)

        namespace_of = self._assign_namespaces()
        physical_index = self._index_physical_names(namespace_of)

        tables = []
        for qualified_name in sorted(self._entities):
            entity = self._entities[qualified_name]
            tables.append(Table(
                entity=entity,
                namespace=namespace_of[qualified_name],
                foreign_keys=self._resolve_foreign_keys(entity, physical_index),
            ))
            self._check_indexes(entity)

        model = SchemaModel(
            namespaces=self._build_namespaces(tables),
            tables=tuple(tables),
            creation_order=dependency_order(tables),
        )

        logger.info(
            f"Schema model built: {len(model.tables)} tables in "
            f"{len(model.namespaces)} namespaces"
        )
        self._model = model
        return model

    def _assign_namespaces(self) -> Dict[str, Optional[str]]:
        membership: Dict[str, str] = {}
        for group_name in sorted(self._groups):
            for member in sorted(self._groups[group_name].members):
                if member not in self._entities:
                    raise DanglingReferenceError(
                        f"Namespace '{group_name}' lists unknown entity '{member}'",
                        entity=member,
                        reference=group_name,
                    )
                if member in membership:
                    raise DuplicateEntityError(
                        f"Entity '{member}' belongs to namespaces "
                        f"'{membership[member]}' and '{group_name}'",
                        entity=member,
                    )
                membership[member] = group_name

        namespace_of: Dict[str, Optional[str]] = {}
        for qualified_name, entity in self._entities.items():
            group = membership.get(qualified_name)
            if entity.namespace and group and entity.namespace != group:
                raise DuplicateEntityError(
                    f"Entity '{qualified_name}' declares namespace '{entity.namespace}' "
                    f"but is listed in namespace '{group}'",
                    entity=qualified_name,
                )
            namespace_of[qualified_name] = entity.namespace or group
        return namespace_of

    def _index_physical_names(self, namespace_of: Dict[str, Optional[str]]) -> Dict[str, str]:
        """physical "ns.table" / "table" -> qualified entity name."""
        index: Dict[str, str] = {}
        for qualified_name in sorted(self._entities):
            namespace = namespace_of[qualified_name]
            table = self._entities[qualified_name].table_name
            physical = f"{namespace}.{table}" if namespace else table
            if physical in index:
                raise DuplicateEntityError(
                    f"Entities '{index[physical]}' and '{qualified_name}' "
                    f"both map to table '{physical}'",
                    entity=qualified_name,
                )
            index[physical] = qualified_name
        return index

    def _resolve_foreign_keys(
        self,
        entity: EntityDefinition,
        physical_index: Dict[str, str],
    ) -> Tuple[ResolvedForeignKey, ...]:
        resolved = []
        for fk in entity.foreign_keys:
            for column in fk.columns:
                if entity.column(column) is None:
                    raise DanglingReferenceError(
                        f"Foreign key of '{entity.qualified_name}' uses unknown column '{column}'",
                        entity=entity.qualified_name,
                        reference=column,
                    )

            target_name = fk.target if fk.target in self._entities else physical_index.get(fk.target)
            if target_name is None:
                raise DanglingReferenceError(
                    f"Foreign key of '{entity.qualified_name}' references unknown entity '{fk.target}'",
                    entity=entity.qualified_name,
                    reference=fk.target,
                )
            target = self._entities[target_name]

            target_columns = list(fk.target_columns or target.primary_key)
            if not target_columns:
                raise DanglingReferenceError(
                    f"Foreign key of '{entity.qualified_name}' references '{target_name}', "
                    "which has no primary key",
                    entity=entity.qualified_name,
                    reference=target_name,
                )
            for column in target_columns:
                if target.column(column) is None:
                    raise DanglingReferenceError(
                        f"Foreign key of '{entity.qualified_name}' references unknown column "
                        f"'{target_name}.{column}'",
                        entity=entity.qualified_name,
                        reference=f"{target_name}.{column}",
                    )
            if len(target_columns) != len(fk.columns):
                raise SchemaAssemblyError(
                    f"Foreign key of '{entity.qualified_name}' has {len(fk.columns)} columns "
                    f"but '{target_name}' key has {len(target_columns)}",
                    entity=entity.qualified_name,
                )

            resolved.append(ResolvedForeignKey(
                columns=tuple(fk.columns),
                target=target_name,
                target_columns=tuple(target_columns),
                name=fk.name,
                on_delete=fk.on_delete,
            ))
        return tuple(resolved)

    @staticmethod
    def _check_indexes(entity: EntityDefinition) -> None:
        for index in entity.indexes:
            for column in index.columns:
                if entity.column(column) is None:
                    raise DanglingReferenceError(
                        f"Index on '{entity.qualified_name}' uses unknown column '{column}'",
                        entity=entity.qualified_name,
                        reference=column,
                    )

    def _build_namespaces(self, tables: List[Table]) -> Tuple[Namespace, ...]:
        members: Dict[Optional[str], List[str]] = {name: [] for name in self._groups}
        for table in tables:
            members.setdefault(table.namespace, []).append(table.qualified_name)

        def sort_key(name: Optional[str]):
            return (name is not None, name or "")

        return tuple(
            Namespace(
                name=name,
                tables=tuple(sorted(members[name])),
                comment=self._groups[name].comment if name in self._groups else None,
            )
            for name in sorted(members, key=sort_key)
        )


def dependency_order(tables: Sequence[Table]) -> Tuple[str, ...]:
    """
    Order tables so referenced tables come first.

    Ties are broken by qualified name. A cycle is broken at the smallest
    name that lies on it, so tables that merely depend on a cycle still
    follow their dependencies. Foreign keys are added after all tables
    anyway.
    """
    names = {t.qualified_name for t in tables}
    pending: Dict[str, Set[str]] = {
        t.qualified_name: {d for d in t.dependencies() if d in names} for t in tables
    }
    dependents: Dict[str, Set[str]] = {name: set() for name in names}
    for name, deps in pending.items():
        for dep in deps:
            dependents[dep].add(name)

    ready = [name for name, deps in pending.items() if not deps]
    heapq.heapify(ready)
    order: List[str] = []
    done: Set[str] = set()

    while len(order) < len(names):
        if not ready:
            cycle_break = next(n for n in sorted(names - done) if _on_cycle(n, pending))
            logger.debug(f"Dependency cycle broken at {cycle_break}")
            ready.append(cycle_break)
        name = heapq.heappop(ready)
        if name in done:
            continue
        done.add(name)
        order.append(name)
        for dependent in sorted(dependents[name]):
            deps = pending[dependent]
            deps.discard(name)
            if not deps and dependent not in done:
                heapq.heappush(ready, dependent)

    return tuple(order)


def _on_cycle(start: str, pending: Dict[str, Set[str]]) -> bool:
    """Whether ``start`` can reach itself through unresolved dependencies."""
    seen: Set[str] = set()
    stack = list(pending[start])
    while stack:
        name = stack.pop()
        if name == start:
            return True
        if name not in seen:
            seen.add(name)
            stack.extend(pending[name])
    return False


def build_schema(
    entities: Iterable[EntityDefinition],
    namespaces: Iterable[NamespaceGroup] = (),
) -> SchemaModel:
    """Build a SchemaModel from one set of entities and namespace groups."""
    return SchemaModelBuilder().build(entities, namespaces)


__all__ = [
    "SchemaModelBuilder",
    "dependency_order",
    "build_schema",
]
