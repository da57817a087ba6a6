# ============================================================================
# ORACLE DIALECT
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Dialect - Oracle Database
# PURPOSE: NUMBER/VARCHAR2 types, identity fallback, CASCADE CONSTRAINTS
# CREATED: 19 OCT 2026
# ============================================================================
"""
Oracle Dialect

In Oracle a schema is a user, so CREATE/DROP SCHEMA statements are never
emitted; tables are still qualified with their namespace.

Version differences:
- 23+: BOOLEAN type, DROP ... IF EXISTS
- 21+: JSON type (CLOB before)
- 12+: identity columns; older versions fall back to a sequence
- < 12: identifiers limited to 30 characters
"""

from core.contracts import ColumnType
from core.models.entity import ColumnDefinition
from dialects.base import DatabaseVersion, DialectStrategy, SQL_KEYWORDS
from dialects.registry import register_dialect


ORACLE_KEYWORDS = SQL_KEYWORDS | frozenset({
    "ACCESS", "AUDIT", "CLUSTER", "COMMENT", "COMPRESS", "CONNECT", "EXCLUSIVE",
    "FILE", "IDENTIFIED", "IMMEDIATE", "INCREMENT", "INITIAL", "LEVEL", "LOCK",
    "LONG", "MAXEXTENTS", "MINUS", "MLSLABEL", "MODE", "MODIFY", "NOAUDIT",
    "NOCOMPRESS", "NOWAIT", "NUMBER", "OFFLINE", "ONLINE", "OPTION", "PCTFREE",
    "PRIOR", "PRIVILEGES", "PUBLIC", "RAW", "RENAME", "RESOURCE", "REVOKE",
    "ROWID", "ROWNUM", "SESSION", "SHARE", "SIZE", "SMALLINT", "START",
    "SUCCESSFUL", "SYNONYM", "SYSDATE", "TRIGGER", "UID", "VALIDATE", "VARCHAR",
    "VARCHAR2", "VIEW", "WHENEVER",
})


@register_dialect("Oracle")
class OracleDialect(DialectStrategy):
    """Oracle 11+ (default 19)."""

    family = "Oracle"
    default_version = DatabaseVersion(19)
    minimum_version = DatabaseVersion(11)
    keywords = ORACLE_KEYWORDS

    TYPE_NAMES = {
        ColumnType.STRING: "VARCHAR2({length} CHAR)",
        ColumnType.TEXT: "CLOB",
        ColumnType.SMALLINT: "NUMBER(5,0)",
        ColumnType.INTEGER: "NUMBER(10,0)",
        ColumnType.BIGINT: "NUMBER(19,0)",
        ColumnType.DECIMAL: "NUMBER({precision},{scale})",
        ColumnType.FLOAT: "FLOAT(24)",
        ColumnType.DOUBLE: "FLOAT(53)",
        ColumnType.BOOLEAN: "NUMBER(1,0)",
        ColumnType.DATE: "DATE",
        ColumnType.TIME: "DATE",
        ColumnType.TIMESTAMP: "TIMESTAMP(6)",
        ColumnType.TIMESTAMP_TZ: "TIMESTAMP(6) WITH TIME ZONE",
        ColumnType.UUID: "RAW(16)",
        ColumnType.JSON: "CLOB",
        ColumnType.BINARY: "RAW({length})",
    }

    @property
    def supports_identity_columns(self) -> bool:
        return self.version.is_same_or_after(12)

    @property
    def supports_schemas(self) -> bool:
        return False

    @property
    def supports_if_exists(self) -> bool:
        return self.version.is_same_or_after(23)

    @property
    def max_identifier_length(self) -> int:
        return 128 if self.version.is_same_or_after(12) else 30

    @property
    def cascade_constraints(self) -> str:
        return "CASCADE CONSTRAINTS"

    def column_type(self, column: ColumnDefinition) -> str:
        if column.type is ColumnType.BOOLEAN and self.version.is_same_or_after(23):
            return "BOOLEAN"
        if column.type is ColumnType.JSON and self.version.is_same_or_after(21):
            return "JSON"
        if column.type is ColumnType.BINARY and (column.length or self.default_string_length) > 2000:
            return "BLOB"
        return super().column_type(column)
