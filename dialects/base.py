# ============================================================================
# DIALECT STRATEGY BASE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - SQL syntax rules shared by all database families
# PURPOSE: Quoting, type mapping and statement builders for one dialect
# CREATED: 19 OCT 2026
# EXPORTS: DatabaseVersion, DialectStrategy
# DEPENDENCIES: psycopg
# ============================================================================
"""
Dialect Strategy Base

A DialectStrategy holds the SQL rules for one database family and version:
- identifier quoting and reserved keywords
- logical column type -> SQL type names
- identity columns and sequences
- DROP syntax (IF EXISTS, CASCADE)
- schema, comment and index syntax

Subclasses override the class attributes and hooks that differ; version
specific behavior is decided from ``self.version``. A strategy is built once
per dialect target and is read-only afterwards.

Settings understood by every dialect:
    globally_quoted_identifiers  "true" (default) quotes every identifier,
                                 "false" quotes reserved keywords only
    default_string_length        Length for string columns without one (255)
    use_sql_comments             Emit table/column comments ("true")
"""

import logging
from dataclasses import dataclass
from typing import ClassVar, Dict, FrozenSet, List, Mapping, Optional, Tuple

from psycopg import sql

from core.config import parse_bool
from core.contracts import ColumnType, GenerationType, StatementKind
from core.errors import UnsupportedFeatureError
from core.models.entity import ColumnDefinition, IndexDefinition
from core.models.schema import ResolvedForeignKey, Table
from core.schema.ddl_utils import (
    Statement,
    column_list,
    generate_constraint_name,
    quote_literal,
    sequence_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class DatabaseVersion:
    """Database version descriptor (major, minor)."""
    major: int
    minor: int = 0

    def __post_init__(self):
        if self.major < 0 or self.minor < 0:
            raise ValueError(f"version numbers must be non-negative: {self.major}.{self.minor}")

    def is_same_or_after(self, major: int, minor: int = 0) -> bool:
        return (self.major, self.minor) >= (major, minor)

    def is_before(self, major: int, minor: int = 0) -> bool:
        return not self.is_same_or_after(major, minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


# SQL:2016 reserved words that commonly collide with entity names
SQL_KEYWORDS: FrozenSet[str] = frozenset({
    "ALL", "ALTER", "AND", "ANY", "AS", "ASC", "BETWEEN", "BY", "CASE", "CAST",
    "CHECK", "COLUMN", "CONSTRAINT", "CREATE", "CROSS", "CURRENT", "DEFAULT",
    "DELETE", "DESC", "DISTINCT", "DROP", "ELSE", "END", "EXISTS", "FALSE",
    "FETCH", "FOR", "FOREIGN", "FROM", "FULL", "GRANT", "GROUP", "HAVING", "IN",
    "INDEX", "INNER", "INSERT", "INTERSECT", "INTO", "IS", "JOIN", "KEY", "LEFT",
    "LIKE", "LIMIT", "NOT", "NULL", "OF", "OFFSET", "ON", "OR", "ORDER", "OUTER",
    "PRIMARY", "REFERENCES", "RIGHT", "ROW", "ROWS", "SELECT", "SET", "TABLE",
    "THEN", "TO", "TRUE", "UNION", "UNIQUE", "UPDATE", "USER", "USING", "VALUE",
    "VALUES", "WHEN", "WHERE", "WITH",
})


class DialectStrategy:
    """
    SQL generation rules for one database family and version.

    Subclasses must set ``family``, ``default_version`` and ``TYPE_NAMES``.
    """

    family: ClassVar[str] = ""
    default_version: ClassVar[DatabaseVersion] = DatabaseVersion(0)
    minimum_version: ClassVar[DatabaseVersion] = DatabaseVersion(0)

    quote_open: ClassVar[str] = '"'
    quote_close: ClassVar[str] = '"'
    keywords: ClassVar[FrozenSet[str]] = SQL_KEYWORDS

    # Types that need a size are formatted with .format(length=..., precision=..., scale=...)
    TYPE_NAMES: ClassVar[Dict[ColumnType, str]] = {}

    sequence_increment: ClassVar[int] = 50

    def __init__(
        self,
        version: Optional[DatabaseVersion] = None,
        settings: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the strategy.

        Args:
            version: Database version, defaults to the family default
            settings: Generic settings (see module docstring)

        Raises:
            ValueError: If the version is older than the supported minimum
        """
        self.version = version or self.default_version
        if self.version < self.minimum_version:
            raise ValueError(
                f"{self.family} {self.version} is not supported "
                f"(minimum version is {self.minimum_version})"
            )

        self.settings: Mapping[str, str] = settings or {}
        self.quote_all = parse_bool(self.settings.get("globally_quoted_identifiers", "true"))
        self.default_string_length = int(self.settings.get("default_string_length", 255))
        self.use_comments = parse_bool(self.settings.get("use_sql_comments", "true"))

    @property
    def name(self) -> str:
        """e.g. PostgreSQL 13.0"""
        return f"{self.family} {self.version}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(version={self.version})"

    # =========================================================================
    # CAPABILITIES
    # =========================================================================

    @property
    def supports_identity_columns(self) -> bool:
        return True

    @property
    def supports_sequences(self) -> bool:
        return True

    @property
    def emulates_sequences(self) -> bool:
        """Sequences are emulated with a single-row table."""
        return False

    @property
    def supports_schemas(self) -> bool:
        return True

    @property
    def supports_if_exists(self) -> bool:
        return True

    @property
    def supports_comment_on(self) -> bool:
        return True

    @property
    def supports_inline_comments(self) -> bool:
        return False

    @property
    def max_identifier_length(self) -> int:
        return 63

    @property
    def cascade_constraints(self) -> str:
        """Suffix that makes DROP TABLE remove dependent constraints."""
        return "CASCADE"

    def effective_generation(self, column: ColumnDefinition) -> Optional[GenerationType]:
        """
        Generation strategy actually used for a column.

        Identity falls back to a sequence on databases without identity
        columns.
        """
        if column.generated is GenerationType.IDENTITY and not self.supports_identity_columns:
            return GenerationType.SEQUENCE
        return column.generated

    # =========================================================================
    # IDENTIFIERS
    # =========================================================================

    def needs_quoting(self, name: str) -> bool:
        if self.quote_all:
            return True
        return name.upper() in self.keywords or not name.replace("_", "").isalnum()

    def quote(self, name: str) -> str:
        escaped = name.replace(self.quote_close, self.quote_close * 2)
        return f"{self.quote_open}{escaped}{self.quote_close}"

    def identifier(self, name: str) -> sql.Composable:
        """A single (possibly quoted) identifier."""
        if self.needs_quoting(name):
            return sql.SQL(self.quote(name))
        return sql.SQL(name)

    def qualified(self, namespace: Optional[str], name: str) -> sql.Composable:
        """namespace.name, or name for the default namespace."""
        if namespace:
            return sql.SQL(".").join([self.identifier(namespace), self.identifier(name)])
        return self.identifier(name)

    def table_name(self, table: Table) -> sql.Composable:
        return self.qualified(table.namespace, table.name)

    def identifiers(self, names) -> sql.Composed:
        return column_list([self.identifier(n) for n in names])

    def literal(self, value: str) -> sql.Composable:
        return sql.SQL(quote_literal(value))

    def constraint_name(self, prefix: str, table: Table, columns) -> str:
        return generate_constraint_name(prefix, table.name, list(columns), self.max_identifier_length)

    # =========================================================================
    # TYPES
    # =========================================================================

    def unsupported(self, feature: str) -> UnsupportedFeatureError:
        return UnsupportedFeatureError(f"{self.name} does not support {feature}", dialect=self.name)

    def column_type(self, column: ColumnDefinition) -> str:
        """
        Map a column's logical type to an SQL type name.

        Raises:
            UnsupportedFeatureError: If the dialect has no mapping
        """
        template = self.TYPE_NAMES.get(column.type)
        if template is None:
            raise self.unsupported(f"{column.type.value} columns (column {column.name})")
        return template.format(
            length=column.length or self.default_string_length,
            precision=column.precision or 19,
            scale=column.scale if column.scale is not None else 2,
        )

    def identity_column_type(self, column: ColumnDefinition) -> Optional[str]:
        """Replacement type for identity columns (e.g. SERIAL), if any."""
        return None

    def identity_clause(self) -> str:
        return "GENERATED BY DEFAULT AS IDENTITY"

    def check_allowed_values(self, column: ColumnDefinition) -> sql.Composable:
        values = sql.SQL(", ").join(self.literal(v) for v in column.allowed_values)
        return sql.SQL("CHECK ({} IN ({}))").format(self.identifier(column.name), values)

    def column_definition(self, column: ColumnDefinition) -> sql.Composable:
        """Render one column of a CREATE TABLE statement."""
        generation = self.effective_generation(column)
        identity = generation is GenerationType.IDENTITY

        type_name = self.identity_column_type(column) if identity else None
        parts: List[sql.Composable] = [
            self.identifier(column.name),
            sql.SQL(type_name or self.column_type(column)),
        ]

        if identity and type_name is None:
            parts.append(sql.SQL(self.identity_clause()))
        if column.default is not None:
            parts.append(sql.SQL("DEFAULT " + column.default))
        if not column.is_nullable:
            parts.append(sql.SQL("NOT NULL"))
        if column.unique and not column.primary_key:
            parts.append(sql.SQL("UNIQUE"))
        if column.allowed_values:
            parts.append(self.check_allowed_values(column))
        if column.comment and self.use_comments and self.supports_inline_comments:
            parts.append(sql.SQL("COMMENT {}").format(self.literal(column.comment)))

        return sql.SQL(" ").join(parts)

    # =========================================================================
    # TABLES
    # =========================================================================

    def table_suffix(self, table: Table) -> Optional[sql.Composable]:
        """Text after the closing parenthesis of CREATE TABLE."""
        return None

    def create_table(self, table: Table) -> Statement:
        elements = [self.column_definition(c) for c in table.columns]
        if table.primary_key:
            elements.append(
                sql.SQL("PRIMARY KEY ({})").format(self.identifiers(table.primary_key))
            )
        return Statement(
            kind=StatementKind.CREATE_TABLE,
            head=sql.SQL("CREATE TABLE {}").format(self.table_name(table)),
            elements=tuple(elements),
            suffix=self.table_suffix(table),
            entity=table.qualified_name,
        )

    def drop_table(self, table: Table) -> Statement:
        return Statement(
            kind=StatementKind.DROP_TABLE,
            head=self._drop("TABLE", self.table_name(table), self.cascade_constraints),
            entity=table.qualified_name,
        )

    def _drop(self, object_type: str, name: sql.Composable, suffix: str = "") -> sql.Composable:
        """DROP <type> [IF EXISTS] <name> [suffix]"""
        template = "DROP {} IF EXISTS {}" if self.supports_if_exists else "DROP {} {}"
        stmt = sql.SQL(template).format(sql.SQL(object_type), name)
        if suffix:
            stmt = sql.SQL("{} {}").format(stmt, sql.SQL(suffix))
        return stmt

    # =========================================================================
    # CONSTRAINTS & INDEXES
    # =========================================================================

    def add_foreign_key(self, table: Table, fk: ResolvedForeignKey, target: Table) -> Statement:
        """ALTER TABLE ... ADD CONSTRAINT ... FOREIGN KEY ... REFERENCES ..."""
        name = fk.name or self.constraint_name("fk", table, fk.columns)
        clauses = [
            sql.SQL("ADD CONSTRAINT {}").format(self.identifier(name)),
            sql.SQL("FOREIGN KEY ({})").format(self.identifiers(fk.columns)),
            sql.SQL("REFERENCES {} ({})").format(
                self.table_name(target), self.identifiers(fk.target_columns)
            ),
        ]
        if fk.on_delete:
            clauses.append(sql.SQL("ON DELETE " + fk.on_delete.upper()))
        return Statement(
            kind=StatementKind.ADD_FOREIGN_KEY,
            head=sql.SQL("ALTER TABLE {}").format(self.table_name(table)),
            clauses=tuple(clauses),
            entity=table.qualified_name,
        )

    def create_index(self, table: Table, index: IndexDefinition) -> Statement:
        prefix = "uk" if index.unique else "idx"
        name = index.name or self.constraint_name(prefix, table, index.columns)
        template = "CREATE UNIQUE INDEX {} ON {} ({})" if index.unique else "CREATE INDEX {} ON {} ({})"
        return Statement(
            kind=StatementKind.CREATE_INDEX,
            head=sql.SQL(template).format(
                self.identifier(name), self.table_name(table), self.identifiers(index.columns)
            ),
            entity=table.qualified_name,
        )

    # =========================================================================
    # COMMENTS
    # =========================================================================

    def comments(self, table: Table) -> List[Statement]:
        """COMMENT ON statements for a table and its columns."""
        if not self.use_comments or not self.supports_comment_on:
            return []

        result = []
        if table.comment:
            result.append(Statement(
                kind=StatementKind.COMMENT,
                head=sql.SQL("COMMENT ON TABLE {} IS {}").format(
                    self.table_name(table), self.literal(table.comment)
                ),
                entity=table.qualified_name,
            ))
        for column in table.columns:
            if column.comment:
                result.append(Statement(
                    kind=StatementKind.COMMENT,
                    head=sql.SQL("COMMENT ON COLUMN {}.{} IS {}").format(
                        self.table_name(table),
                        self.identifier(column.name),
                        self.literal(column.comment),
                    ),
                    entity=table.qualified_name,
                ))
        return result

    # =========================================================================
    # SEQUENCES
    # =========================================================================

    def sequence_for(self, table: Table) -> Optional[sql.Composable]:
        """Qualified sequence name for a table that needs one."""
        column = table.generated_column
        if column is None or self.effective_generation(column) is not GenerationType.SEQUENCE:
            return None
        return self.qualified(table.namespace, sequence_name(table.name))

    def create_sequence(self, table: Table) -> List[Statement]:
        """
        CREATE SEQUENCE for a table's generated key.

        Raises:
            UnsupportedFeatureError: If the dialect has no sequences
        """
        name = self.sequence_for(table)
        if name is None:
            return []
        if not self.supports_sequences:
            raise self.unsupported(f"sequences (table {table.physical_name})")
        return [Statement(
            kind=StatementKind.CREATE_SEQUENCE,
            head=sql.SQL("CREATE SEQUENCE {} START WITH 1 INCREMENT BY {}").format(
                name, sql.SQL(str(self.sequence_increment))
            ),
            entity=table.qualified_name,
        )]

    def drop_sequence(self, table: Table) -> List[Statement]:
        name = self.sequence_for(table)
        if name is None:
            return []
        if not self.supports_sequences:
            raise self.unsupported(f"sequences (table {table.physical_name})")
        return [Statement(
            kind=StatementKind.DROP_SEQUENCE,
            head=self._drop("SEQUENCE", name),
            entity=table.qualified_name,
        )]

    # =========================================================================
    # SCHEMAS
    # =========================================================================

    def create_schema(self, namespace: str) -> List[Statement]:
        if not self.supports_schemas:
            logger.debug(f"{self.name}: skipping CREATE SCHEMA for {namespace}")
            return []
        return [Statement(
            kind=StatementKind.CREATE_SCHEMA,
            head=sql.SQL("CREATE SCHEMA {}").format(self.identifier(namespace)),
        )]

    def drop_schema(self, namespace: str) -> List[Statement]:
        if not self.supports_schemas:
            logger.debug(f"{self.name}: skipping DROP SCHEMA for {namespace}")
            return []
        return [Statement(
            kind=StatementKind.DROP_SCHEMA,
            head=self._drop("SCHEMA", self.identifier(namespace)),
        )]


__all__ = [
    "DatabaseVersion",
    "DialectStrategy",
    "SQL_KEYWORDS",
]
