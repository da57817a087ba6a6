# ============================================================================
# MYSQL / MARIADB DIALECTS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Dialect - MySQL and MariaDB
# PURPOSE: Backtick quoting, AUTO_INCREMENT, storage engine, inline comments
# CREATED: 19 OCT 2026
# ============================================================================
"""
MySQL and MariaDB Dialects

MySQL has no sequences: a sequence-generated key is emulated with a one-row
table (next_val) initialized to 1, dropped together with the other tables.

Version differences:
- MySQL < 5.7: no JSON type
- MariaDB 10.3+: native sequences
- MariaDB 10.7+: native UUID type

Settings:
    storage_engine   Table engine suffix (default InnoDB, "" disables it)
"""

from typing import List, Optional

from psycopg import sql

from core.contracts import ColumnType, StatementKind
from core.models.entity import ColumnDefinition
from core.models.schema import Table
from core.schema.ddl_utils import Statement
from dialects.base import DatabaseVersion, DialectStrategy, SQL_KEYWORDS
from dialects.registry import register_dialect


MYSQL_KEYWORDS = SQL_KEYWORDS | frozenset({
    "ACCESSIBLE", "CHANGE", "DATABASE", "DATABASES", "DELAYED", "DIV", "DUAL",
    "ENCLOSED", "ESCAPED", "EXPLAIN", "FULLTEXT", "HIGH_PRIORITY", "IGNORE",
    "INTERVAL", "KEYS", "KILL", "LINES", "LOAD", "LOCK", "LONG", "MATCH", "MOD",
    "OPTIMIZE", "OPTION", "OUTFILE", "RANGE", "READ", "REGEXP", "RENAME",
    "REPLACE", "REQUIRE", "RLIKE", "SCHEMA", "SCHEMAS", "SEPARATOR", "SHOW",
    "SPATIAL", "STRAIGHT_JOIN", "TERMINATED", "UNLOCK", "UNSIGNED", "USAGE",
    "WRITE", "XOR", "ZEROFILL",
})


@register_dialect("MySQL")
class MySQLDialect(DialectStrategy):
    """MySQL 5+ (default 8)."""

    family = "MySQL"
    default_version = DatabaseVersion(8)
    minimum_version = DatabaseVersion(5)
    quote_open = "`"
    quote_close = "`"
    keywords = MYSQL_KEYWORDS

    TYPE_NAMES = {
        ColumnType.STRING: "VARCHAR({length})",
        ColumnType.TEXT: "LONGTEXT",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.DECIMAL: "DECIMAL({precision},{scale})",
        ColumnType.FLOAT: "FLOAT",
        ColumnType.DOUBLE: "DOUBLE PRECISION",
        ColumnType.BOOLEAN: "BIT",
        ColumnType.DATE: "DATE",
        ColumnType.TIME: "TIME",
        ColumnType.TIMESTAMP: "DATETIME(6)",
        ColumnType.TIMESTAMP_TZ: "DATETIME(6)",
        ColumnType.UUID: "BINARY(16)",
        ColumnType.JSON: "JSON",
        ColumnType.BINARY: "VARBINARY({length})",
    }

    def __init__(self, version=None, settings=None):
        super().__init__(version=version, settings=settings)
        self.storage_engine = self.settings.get("storage_engine", "InnoDB")

    @property
    def supports_sequences(self) -> bool:
        return False

    @property
    def emulates_sequences(self) -> bool:
        return True

    @property
    def supports_comment_on(self) -> bool:
        return False

    @property
    def supports_inline_comments(self) -> bool:
        return True

    @property
    def max_identifier_length(self) -> int:
        return 64

    @property
    def cascade_constraints(self) -> str:
        return ""

    def column_type(self, column: ColumnDefinition) -> str:
        if column.type is ColumnType.JSON and self.version.is_before(5, 7):
            raise self.unsupported(f"JSON columns (column {column.name})")
        return super().column_type(column)

    def identity_clause(self) -> str:
        return "AUTO_INCREMENT"

    def table_suffix(self, table: Table) -> Optional[sql.Composable]:
        parts = []
        if self.storage_engine:
            parts.append(sql.SQL("ENGINE=" + self.storage_engine))
        if table.comment and self.use_comments:
            parts.append(sql.SQL("COMMENT={}").format(self.literal(table.comment)))
        if not parts:
            return None
        return sql.SQL(" ").join(parts)

    # =========================================================================
    # SEQUENCE EMULATION
    # =========================================================================

    def create_sequence(self, table: Table) -> List[Statement]:
        name = self.sequence_for(table)
        if name is None:
            return []
        if self.supports_sequences:
            return super().create_sequence(table)

        suffix = sql.SQL("ENGINE=" + self.storage_engine) if self.storage_engine else None
        return [
            Statement(
                kind=StatementKind.CREATE_SEQUENCE,
                head=sql.SQL("CREATE TABLE {}").format(name),
                elements=(sql.SQL("{} BIGINT").format(self.identifier("next_val")),),
                suffix=suffix,
                entity=table.qualified_name,
            ),
            Statement(
                kind=StatementKind.INITIALIZE_SEQUENCE,
                head=sql.SQL("INSERT INTO {} VALUES (1)").format(name),
                entity=table.qualified_name,
            ),
        ]

    def drop_sequence(self, table: Table) -> List[Statement]:
        name = self.sequence_for(table)
        if name is None:
            return []
        if self.supports_sequences:
            return super().drop_sequence(table)
        return [Statement(
            kind=StatementKind.DROP_SEQUENCE,
            head=self._drop("TABLE", name),
            entity=table.qualified_name,
        )]


@register_dialect("MariaDB")
class MariaDBDialect(MySQLDialect):
    """MariaDB 10+ (default 10.6)."""

    family = "MariaDB"
    default_version = DatabaseVersion(10, 6)
    minimum_version = DatabaseVersion(10)

    @property
    def supports_sequences(self) -> bool:
        return self.version.is_same_or_after(10, 3)

    @property
    def emulates_sequences(self) -> bool:
        return not self.supports_sequences

    def column_type(self, column: ColumnDefinition) -> str:
        if column.type is ColumnType.UUID and self.version.is_same_or_after(10, 7):
            return "UUID"
        return super().column_type(column)
