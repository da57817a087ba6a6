# ============================================================================
# SCHEMA FILTER ENGINE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Service - Per-phase namespace/table selection
# PURPOSE: Decide which namespaces and tables each phase emits
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Filter Engine

Two independent filters select what the create and the drop phase emit.
A table is emitted only when its namespace is selected and the filter
accepts the table itself.

Filter providers are registered by name:
    default    include everything
    patterns   glob include/exclude lists read from settings

Settings:
    schema_filter_provider   provider name (unknown names fall back to "default")
    create_filter.include    comma-separated globs
    create_filter.exclude
    drop_filter.include
    drop_filter.exclude

Globs match "namespace.table", the bare table name and the qualified
entity name. Exclude wins over include; an empty include list includes
everything.
"""

import fnmatch
import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from core.contracts import Phase
from core.models.schema import Namespace, SchemaModel, Table

logger = logging.getLogger(__name__)


# ============================================================================
# FILTERS
# ============================================================================

class SchemaFilter:
    """Base filter: answers include/exclude for namespaces and tables."""

    def include_namespace(self, namespace: Namespace) -> bool:
        raise NotImplementedError

    def include_table(self, table: Table) -> bool:
        raise NotImplementedError


class IncludeAll(SchemaFilter):
    """Selects everything."""

    def include_namespace(self, namespace: Namespace) -> bool:
        return True

    def include_table(self, table: Table) -> bool:
        return True

    def __repr__(self) -> str:
        return "IncludeAll()"


INCLUDE_ALL = IncludeAll()


def _split_patterns(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(p.strip() for p in value.split(",") if p.strip())


@dataclass(frozen=True)
class PatternSchemaFilter(SchemaFilter):
    """
    Glob include/exclude filter.

    A namespace is excluded when its name matches an exclude pattern;
    tables are matched by physical name, bare table name and qualified name.
    """
    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @staticmethod
    def _matches(candidates: Sequence[str], patterns: Sequence[str]) -> bool:
        return any(fnmatch.fnmatchcase(c, p) for c in candidates for p in patterns)

    def include_namespace(self, namespace: Namespace) -> bool:
        if namespace.name is None:
            return True
        return not self._matches([namespace.name], self.exclude)

    def include_table(self, table: Table) -> bool:
        candidates = [table.physical_name, table.name, table.qualified_name]
        if self._matches(candidates, self.exclude):
            return False
        if not self.include:
            return True
        return self._matches(candidates, self.include)

    @classmethod
    def from_settings(cls, settings: Mapping[str, str], prefix: str) -> "PatternSchemaFilter":
        return cls(
            include=_split_patterns(settings.get(f"{prefix}.include")),
            exclude=_split_patterns(settings.get(f"{prefix}.exclude")),
        )


@dataclass(frozen=True)
class SchemaFilterConfig:
    """The create-phase and drop-phase filters."""
    create_filter: SchemaFilter = INCLUDE_ALL
    drop_filter: SchemaFilter = INCLUDE_ALL

    def for_phase(self, phase: Phase) -> SchemaFilter:
        return self.create_filter if phase is Phase.CREATE else self.drop_filter


DEFAULT_FILTER_CONFIG = SchemaFilterConfig()


# ============================================================================
# PROVIDER REGISTRY
# ============================================================================

FilterProvider = Callable[[Mapping[str, str]], SchemaFilterConfig]

_providers: Dict[str, FilterProvider] = {}

DEFAULT_PROVIDER = "default"


def register_filter_provider(name: str) -> Callable[[FilterProvider], FilterProvider]:
    """Decorator to register a filter provider under a name."""
    def decorator(func: FilterProvider) -> FilterProvider:
        key = name.lower()
        if key in _providers:
            raise ValueError(f"Filter provider already registered: {name}")
        _providers[key] = func
        return func
    return decorator


def list_filter_providers() -> List[str]:
    return sorted(_providers)


@register_filter_provider(DEFAULT_PROVIDER)
def _default_provider(settings: Mapping[str, str]) -> SchemaFilterConfig:
    return DEFAULT_FILTER_CONFIG


@register_filter_provider("patterns")
def _pattern_provider(settings: Mapping[str, str]) -> SchemaFilterConfig:
    return SchemaFilterConfig(
        create_filter=PatternSchemaFilter.from_settings(settings, "create_filter"),
        drop_filter=PatternSchemaFilter.from_settings(settings, "drop_filter"),
    )


def resolve_filter_config(
    config: Optional[SchemaFilterConfig] = None,
    settings: Optional[Mapping[str, str]] = None,
) -> SchemaFilterConfig:
    """
    Pick the filter configuration for a run.

    An explicit config wins; otherwise the provider named by
    ``schema_filter_provider`` is used, falling back to the default provider.
    """
    if config is not None:
        return config

    settings = settings or {}
    name = settings.get("schema_filter_provider", DEFAULT_PROVIDER)
    provider = _providers.get(name.lower())
    if provider is None:
        logger.warning(
            f"Unknown schema filter provider '{name}', falling back to '{DEFAULT_PROVIDER}' "
            f"(known: {', '.join(list_filter_providers())})"
        )
        provider = _providers[DEFAULT_PROVIDER]
    return provider(settings)


# ============================================================================
# FILTERED VIEW
# ============================================================================

@dataclass(frozen=True)
class FilteredSchema:
    """The part of a SchemaModel one phase emits. Never copies the model."""
    model: SchemaModel
    phase: Phase
    schema_filter: SchemaFilter = field(default=INCLUDE_ALL)

    @cached_property
    def _selected(self) -> Dict[str, bool]:
        selected = {}
        for table in self.model.tables:
            namespace = self.model.namespace_of(table)
            selected[table.qualified_name] = (
                self.schema_filter.include_namespace(namespace)
                and self.schema_filter.include_table(table)
            )
        return selected

    def includes(self, qualified_name: str) -> bool:
        return self._selected.get(qualified_name, False)

    @property
    def namespaces(self) -> List[Namespace]:
        """
        Selected named namespaces (the default namespace is never created or dropped).

        The drop phase only lists a namespace when every one of its tables is
        selected, so excluded tables never go down with their schema.
        """
        return [
            ns for ns in self.model.namespaces
            if not ns.is_default
            and self.schema_filter.include_namespace(ns)
            and (self.phase is Phase.CREATE or all(self.includes(name) for name in ns.tables))
        ]

    @property
    def tables(self) -> List[Table]:
        """Selected tables in dependency order."""
        return [t for t in self.model.tables_in_creation_order() if self.includes(t.qualified_name)]

    def __len__(self) -> int:
        return sum(1 for v in self._selected.values() if v)


def filter_for(
    phase: Phase,
    model: SchemaModel,
    config: Optional[SchemaFilterConfig] = None,
) -> FilteredSchema:
    """Select the part of the model the given phase emits."""
    config = config or DEFAULT_FILTER_CONFIG
    return FilteredSchema(model=model, phase=phase, schema_filter=config.for_phase(phase))


__all__ = [
    "SchemaFilter",
    "IncludeAll",
    "INCLUDE_ALL",
    "PatternSchemaFilter",
    "SchemaFilterConfig",
    "DEFAULT_FILTER_CONFIG",
    "register_filter_provider",
    "list_filter_providers",
    "resolve_filter_config",
    "FilteredSchema",
    "filter_for",
]
