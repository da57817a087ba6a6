# ============================================================================
# DDL UTILITIES
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Statement model and rendering shared by all dialects
# PURPOSE: Compose statements with psycopg.sql, render them to script text
# CREATED: 19 OCT 2026
# EXPORTS: Statement, render_statement, join_script, generate_constraint_name
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Utilities - Shared SQL Generation Patterns.

Dialects build statements from psycopg.sql composables; the emitter renders
them into script text. A statement is split into parts so the same statement
can be rendered on one line or pretty-printed:

    head        CREATE TABLE "order"
    elements    ("id" BIGINT NOT NULL, ..., PRIMARY KEY ("id"))
    suffix      ENGINE=InnoDB
    clauses     ADD CONSTRAINT ... / FOREIGN KEY ... / REFERENCES ...

Usage:
    from core.schema.ddl_utils import Statement, render_statement

    stmt = Statement(StatementKind.CREATE_SCHEMA, sql.SQL("CREATE SCHEMA {}").format(sql.Identifier("shop")))
    render_statement(stmt, delimiter=";", pretty=True)   # 'CREATE SCHEMA "shop";'
"""

import hashlib
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from psycopg import sql

from core.contracts import StatementKind


INDENT = "    "


# ============================================================================
# STATEMENT MODEL
# ============================================================================

@dataclass(frozen=True)
class Statement:
    """One DDL statement, not yet rendered."""
    kind: StatementKind
    head: sql.Composable
    elements: Tuple[sql.Composable, ...] = ()
    suffix: Optional[sql.Composable] = None
    clauses: Tuple[sql.Composable, ...] = ()
    entity: Optional[str] = None


def as_text(composable: sql.Composable) -> str:
    """Render a composable without a connection."""
    return composable.as_string(None)


def render_statement(statement: Statement, delimiter: str = ";", pretty: bool = False) -> str:
    """
    Render a statement to text, terminated with the delimiter.

    Args:
        statement: Statement to render
        delimiter: Statement terminator
        pretty: Multi-line layout (one element / clause per line)

    Returns:
        Statement text
    """
    text = as_text(statement.head)

    if statement.elements:
        parts = [as_text(e) for e in statement.elements]
        if pretty:
            body = (",\n" + INDENT).join(parts)
            text += f" (\n{INDENT}{body}\n)"
        else:
            text += " (" + ", ".join(parts) + ")"

    if statement.suffix is not None:
        text += " " + as_text(statement.suffix)

    for clause in statement.clauses:
        separator = "\n" + INDENT if pretty else " "
        text += separator + as_text(clause)

    return text + (delimiter or "")


def join_script(statements: Sequence[str], pretty: bool = False) -> str:
    """
    Join rendered statements into script content.

    Pretty scripts separate statements with a blank line. The result always
    ends with a newline (unless empty).
    """
    if not statements:
        return ""
    text = ("\n\n" if pretty else "\n").join(statements)
    if not text.endswith("\n"):
        text += "\n"
    return text


# ============================================================================
# NAMING
# ============================================================================

def generate_constraint_name(
    prefix: str,
    table: str,
    columns: Sequence[str],
    max_length: int = 63,
) -> str:
    """
    Generate conventional constraint/index name.

    Names longer than the dialect limit are shortened and given a hash
    suffix so they stay unique and deterministic.
    """
    col_part = "_".join(columns)
    name = f"{prefix}_{table}_{col_part}"
    if len(name) <= max_length:
        return name
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
    return f"{name[:max_length - 9]}_{digest}"


def sequence_name(table: str) -> str:
    """Default sequence name for a table's generated key."""
    return f"{table}_seq"


def quote_literal(value: str) -> str:
    """Standard SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def column_list(identifiers: List[sql.Composable]) -> sql.Composed:
    """Comma-separated identifier list for column clauses."""
    return sql.SQL(", ").join(identifiers)


__all__ = [
    "INDENT",
    "Statement",
    "as_text",
    "render_statement",
    "join_script",
    "generate_constraint_name",
    "sequence_name",
    "quote_literal",
    "column_list",
]
