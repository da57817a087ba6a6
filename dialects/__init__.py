# ============================================================================
# DIALECTS MODULE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Dialect strategies and registry
# PURPOSE: Import all dialects so they register themselves
# CREATED: 19 OCT 2026
# ============================================================================
"""
Dialects

Importing this package registers every built-in dialect:
PostgreSQL, MySQL, MariaDB, H2, SQLServer, Oracle.

Usage:
    from dialects import resolve_dialect

    dialect = resolve_dialect("PostgreSQL@13")
"""

from dialects.registry import (
    DialectSpec,
    DuplicateDialectError,
    register_dialect,
    get_dialect_factory,
    list_dialects,
    unregister_dialect,
    resolve_dialect,
)
from dialects.base import DatabaseVersion, DialectStrategy

# Built-in dialects register on import
from dialects import postgresql, mysql, h2, sqlserver, oracle  # noqa: F401

from dialects.postgresql import PostgreSQLDialect
from dialects.mysql import MySQLDialect, MariaDBDialect
from dialects.h2 import H2Dialect
from dialects.sqlserver import SQLServerDialect
from dialects.oracle import OracleDialect

__all__ = [
    # Registry
    "DialectSpec",
    "DuplicateDialectError",
    "register_dialect",
    "get_dialect_factory",
    "list_dialects",
    "unregister_dialect",
    "resolve_dialect",
    # Strategies
    "DatabaseVersion",
    "DialectStrategy",
    "PostgreSQLDialect",
    "MySQLDialect",
    "MariaDBDialect",
    "H2Dialect",
    "SQLServerDialect",
    "OracleDialect",
]
