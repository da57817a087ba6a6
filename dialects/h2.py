# ============================================================================
# H2 DIALECT
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Dialect - H2 database
# PURPOSE: H2 type mapping (embedded/test databases)
# CREATED: 19 OCT 2026
# ============================================================================
"""
H2 Dialect

Version differences:
- 2.x: JSON type, VARBINARY / CHARACTER LARGE OBJECT names
- 1.x: no JSON type, BINARY / CLOB names
"""

from core.contracts import ColumnType
from core.models.entity import ColumnDefinition
from dialects.base import DatabaseVersion, DialectStrategy
from dialects.registry import register_dialect


@register_dialect("H2")
class H2Dialect(DialectStrategy):
    """H2 1.4+ (default 2.1)."""

    family = "H2"
    default_version = DatabaseVersion(2, 1)
    minimum_version = DatabaseVersion(1)

    TYPE_NAMES = {
        ColumnType.STRING: "VARCHAR({length})",
        ColumnType.TEXT: "CHARACTER LARGE OBJECT",
        ColumnType.SMALLINT: "SMALLINT",
        ColumnType.INTEGER: "INTEGER",
        ColumnType.BIGINT: "BIGINT",
        ColumnType.DECIMAL: "NUMERIC({precision},{scale})",
        ColumnType.FLOAT: "REAL",
        ColumnType.DOUBLE: "DOUBLE PRECISION",
        ColumnType.BOOLEAN: "BOOLEAN",
        ColumnType.DATE: "DATE",
        ColumnType.TIME: "TIME",
        ColumnType.TIMESTAMP: "TIMESTAMP(6)",
        ColumnType.TIMESTAMP_TZ: "TIMESTAMP(6) WITH TIME ZONE",
        ColumnType.UUID: "UUID",
        ColumnType.JSON: "JSON",
        ColumnType.BINARY: "VARBINARY({length})",
    }

    LEGACY_TYPE_NAMES = {
        ColumnType.TEXT: "CLOB",
        ColumnType.BINARY: "BINARY({length})",
    }

    @property
    def max_identifier_length(self) -> int:
        return 256

    def column_type(self, column: ColumnDefinition) -> str:
        if self.version.is_before(2):
            if column.type is ColumnType.JSON:
                raise self.unsupported(f"JSON columns (column {column.name})")
            legacy = self.LEGACY_TYPE_NAMES.get(column.type)
            if legacy is not None:
                return legacy.format(length=column.length or self.default_string_length)
        return super().column_type(column)
