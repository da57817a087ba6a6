# ============================================================================
# POSTGRESQL DIALECT
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Dialect - PostgreSQL
# PURPOSE: PostgreSQL type mapping, identity and quoting rules
# CREATED: 19 OCT 2026
# ============================================================================
"""
PostgreSQL Dialect

Version differences:
- 10+: identity columns (GENERATED BY DEFAULT AS IDENTITY)
- < 10: SERIAL / BIGSERIAL / SMALLSERIAL column types instead
- < 10: JSON instead of JSONB
"""

from psycopg import sql

from core.contracts import ColumnType
from core.models.entity import ColumnDefinition
from dialects.base import DatabaseVersion, DialectStrategy, SQL_KEYWORDS
from dialects.registry import register_dialect


PG_KEYWORDS = SQL_KEYWORDS | frozenset({
    "ANALYSE", "ANALYZE", "ARRAY", "ASYMMETRIC", "BOTH", "COLLATE", "CONCURRENTLY",
    "DEFERRABLE", "DO", "EXCEPT", "FREEZE", "ILIKE", "INITIALLY", "ISNULL",
    "LATERAL", "LEADING", "LOCALTIME", "LOCALTIMESTAMP", "NOTNULL", "ONLY",
    "OVERLAPS", "PLACING", "RETURNING", "SIMILAR", "SOME", "SYMMETRIC",
    "TABLESAMPLE", "TRAILING", "VARIADIC", "VERBOSE", "WINDOW",
})


@register_dialect("PostgreSQL", aliases=("Postgres", "PostgreSQLPlus"))
class PostgreSQLDialect(DialectStrategy):
    """PostgreSQL 9+ (default 12)."""

    family = "PostgreSQL"
    default_version = DatabaseVersion(12)
    minimum_version = DatabaseVersion(9)
    keywords = PG_KEYWORDS

    TYPE_NAMES = {
        ColumnType.STRING: "VARCHAR({length})",
        ColumnType.TEXT: "TEXT",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.DECIMAL: "NUMERIC({precision},{scale})",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "DOUBLE PRECISION",
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.DATE: "DATE",
        ColumnType.TIME: "TIME(6)",
        ColumnType.TIMESTAMP: "TIMESTAMP(6)",
        ColumnType.TIMESTAMP_TZ: "TIMESTAMP(6) WITH TIME ZONE",
        ColumnType.UUID: "UUID",
        ColumnType.JSON: "JSONB",
        ColumnType.BINARY: "BYTEA",
    }

    SERIAL_TYPES = {
        ColumnType.SMALLINT: "SMALLSERIAL",
        ColumnType.INTEGER: "SERIAL",
        ColumnType.BIGINT: "BIGSERIAL",
    }

    def identifier(self, name: str) -> sql.Composable:
        if self.needs_quoting(name):
            return sql.Identifier(name)
        return sql.SQL(name)

    def column_type(self, column: ColumnDefinition) -> str:
        if column.type is ColumnType.JSON and self.version.is_before(10):
            return "JSON"
        return super().column_type(column)

    def identity_column_type(self, column: ColumnDefinition):
        if self.version.is_same_or_after(10):
            return None
        serial = self.SERIAL_TYPES.get(column.type)
        if serial is None:
            raise self.unsupported(f"identity {column.type.value} columns (column {column.name})")
        return serial
