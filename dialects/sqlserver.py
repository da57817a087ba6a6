# ============================================================================
# SQL SERVER DIALECT
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Dialect - Microsoft SQL Server
# PURPOSE: Bracket quoting, IDENTITY, version dependent DROP syntax
# CREATED: 19 OCT 2026
# ============================================================================
"""
SQL Server Dialect

Versions use the internal major version numbers:
10 = 2008, 11 = 2012, 12 = 2014, 13 = 2016, 14 = 2017, 15 = 2019, 16 = 2022

Version differences:
- 13+: DROP TABLE / SEQUENCE / SCHEMA IF EXISTS
- < 13: existence checked with OBJECT_ID / SCHEMA_ID before dropping
- < 11: no sequences
"""

from typing import List

from psycopg import sql

from core.contracts import ColumnType, StatementKind
from core.models.schema import Table
from core.schema.ddl_utils import Statement, quote_literal, sequence_name
from dialects.base import DatabaseVersion, DialectStrategy, SQL_KEYWORDS
from dialects.registry import register_dialect


TSQL_KEYWORDS = SQL_KEYWORDS | frozenset({
    "BACKUP", "BREAK", "BROWSE", "BULK", "CHECKPOINT", "CLUSTERED", "COMPUTE",
    "CONTAINS", "CONTINUE", "DATABASE", "DBCC", "DENY", "DISK", "DUMP", "ERRLVL",
    "EXEC", "EXECUTE", "EXIT", "FILE", "FILLFACTOR", "FREETEXT", "GOTO",
    "HOLDLOCK", "IDENTITY", "IDENTITYCOL", "KILL", "LINENO", "LOAD", "NOCHECK",
    "NONCLUSTERED", "OPENQUERY", "OVER", "PERCENT", "PIVOT", "PLAN", "PRINT",
    "PROC", "PROCEDURE", "PUBLIC", "RAISERROR", "READTEXT", "RECONFIGURE",
    "RESTORE", "RETURN", "REVERT", "REVOKE", "ROWCOUNT", "RULE", "SAVE", "SCHEMA",
    "SHUTDOWN", "STATISTICS", "TEXTSIZE", "TOP", "TRAN", "TRANSACTION", "TRIGGER",
    "TRUNCATE", "TSEQUAL", "UNPIVOT", "UPDATETEXT", "USE", "VIEW", "WAITFOR",
    "WHILE", "WRITETEXT",
})


@register_dialect("SQLServer", aliases=("MSSQL",))
class SQLServerDialect(DialectStrategy):
    """SQL Server 2008+ (default 11 = 2012)."""

    family = "SQLServer"
    default_version = DatabaseVersion(11)
    minimum_version = DatabaseVersion(10)
    quote_open = "["
    quote_close = "]"
    keywords = TSQL_KEYWORDS

    TYPE_NAMES = {
        ColumnType.STRING: "NVARCHAR({length})",
        ColumnType.TEXT: "NVARCHAR(MAX)",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INTEGER: "INT",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.DECIMAL: "NUMERIC({precision},{scale})",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "FLOAT",
        ColumnType.BOOLEAN: "BIT",
        ColumnType.DATE: "DATE",
        ColumnType.TIME: "TIME",
        ColumnType.TIMESTAMP: "DATETIME2(6)",
        ColumnType.TIMESTAMP_TZ: "DATETIMEOFFSET(6)",
        ColumnType.UUID: "UNIQUEIDENTIFIER",
        ColumnType.JSON: "NVARCHAR(MAX)",
        ColumnType.BINARY: "VARBINARY({length})",
    }

    @property
    def supports_sequences(self) -> bool:
        return self.version.is_same_or_after(11)

    @property
    def supports_if_exists(self) -> bool:
        return self.version.is_same_or_after(13)

    @property
    def supports_comment_on(self) -> bool:
        return False

    @property
    def max_identifier_length(self) -> int:
        return 128

    @property
    def cascade_constraints(self) -> str:
        return ""

    def identity_clause(self) -> str:
        return "IDENTITY(1,1)"

    def _object_id_guard(self, object_name: str, object_type: str) -> sql.Composable:
        """IF OBJECT_ID(N'x', N'U') IS NOT NULL"""
        return sql.SQL("IF OBJECT_ID(N{}, N{}) IS NOT NULL").format(
            sql.SQL(quote_literal(object_name)), sql.SQL(quote_literal(object_type))
        )

    def drop_table(self, table: Table) -> Statement:
        if self.supports_if_exists:
            return super().drop_table(table)
        return Statement(
            kind=StatementKind.DROP_TABLE,
            head=sql.SQL("{} DROP TABLE {}").format(
                self._object_id_guard(table.physical_name, "U"), self.table_name(table)
            ),
            entity=table.qualified_name,
        )

    def drop_sequence(self, table: Table) -> List[Statement]:
        name = self.sequence_for(table)
        if name is None or self.supports_if_exists or not self.supports_sequences:
            return super().drop_sequence(table)
        physical = sequence_name(table.physical_name)
        return [Statement(
            kind=StatementKind.DROP_SEQUENCE,
            head=sql.SQL("{} DROP SEQUENCE {}").format(self._object_id_guard(physical, "SO"), name),
            entity=table.qualified_name,
        )]

    def drop_schema(self, namespace: str) -> List[Statement]:
        if self.supports_if_exists:
            return super().drop_schema(namespace)
        return [Statement(
            kind=StatementKind.DROP_SCHEMA,
            head=sql.SQL("IF SCHEMA_ID(N{}) IS NOT NULL DROP SCHEMA {}").format(
                sql.SQL(quote_literal(namespace)), self.identifier(namespace)
            ),
        )]
