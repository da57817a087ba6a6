# ============================================================================
# SCRIPT EMITTER
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Service - Ordered statement emission per dialect
# PURPOSE: Turn a filtered schema into delimiter-terminated DDL statements
# CREATED: 19 OCT 2026
# ============================================================================
"""
Script Emitter

Emits the statements of one phase for one dialect.

Create phase order:
    1. CREATE SCHEMA            (manage_namespaces)
    2. sequences
    3. CREATE TABLE             (dependency order)
    4. comments
    5. indexes
    6. ALTER TABLE ... ADD CONSTRAINT ... FOREIGN KEY
    7. import files, verbatim

Drop phase order:
    1. DROP TABLE               (reverse dependency order)
    2. sequences
    3. DROP SCHEMA              (manage_namespaces)

Every statement that cannot be generated becomes a GenerationError handed to
the error handler, which either raises it (halt) or records it (collect).
"""

import logging
from typing import Callable, Iterable, List, Optional, Protocol

from core.config import ExecutionOptions
from core.contracts import Phase
from core.errors import DanglingReferenceError, DdlError, GenerationError
from core.logging import log_context
from core.models.schema import Table
from core.schema.ddl_utils import Statement, render_statement
from dialects.base import DialectStrategy
from infrastructure.script_files import read_import_script
from services.schema_filter import FilteredSchema

logger = logging.getLogger(__name__)


class ErrorHandler(Protocol):
    """Receives every GenerationError raised while emitting."""

    def handle(self, error: GenerationError) -> None:
        ...


class ScriptEmitter:
    """
    Emits the statements of a phase for one dialect target.

    Args:
        dialect: Resolved dialect strategy
        options: Execution options (delimiter, format, namespaces, imports)
        error_handler: Halt or collect policy
        dialect_id: Identifier used in error records (defaults to dialect name)
    """

    def __init__(
        self,
        dialect: DialectStrategy,
        options: ExecutionOptions,
        error_handler: ErrorHandler,
        dialect_id: Optional[str] = None,
    ):
        self.dialect = dialect
        self.options = options
        self.error_handler = error_handler
        self.dialect_id = dialect_id or dialect.name

    def emit(self, phase: Phase, filtered: FilteredSchema) -> List[str]:
        """
        Emit all statements of a phase.

        Returns:
            Rendered statements, each terminated with the delimiter

        Raises:
            GenerationError: When the error handler halts
        """
        output: List[str] = []
        with log_context(phase=phase.value):
            if phase is Phase.CREATE:
                self._emit_create(filtered, output)
            else:
                self._emit_drop(filtered, output)
        logger.debug(f"{self.dialect_id}: {len(output)} {phase.value} statements")
        return output

    # =========================================================================
    # PHASES
    # =========================================================================

    def _emit_create(self, filtered: FilteredSchema, output: List[str]) -> None:
        phase = Phase.CREATE
        tables = filtered.tables

        if self.options.manage_namespaces:
            for namespace in filtered.namespaces:
                self._add(output, phase, lambda ns=namespace: self.dialect.create_schema(ns.name))

        for table in tables:
            self._add(output, phase, lambda t=table: self.dialect.create_sequence(t), table.qualified_name)

        for table in tables:
            self._add(output, phase, lambda t=table: [self.dialect.create_table(t)], table.qualified_name)

        for table in tables:
            self._add(output, phase, lambda t=table: self.dialect.comments(t), table.qualified_name)

        for table in tables:
            for index in table.indexes:
                self._add(
                    output, phase,
                    lambda t=table, i=index: [self.dialect.create_index(t, i)],
                    table.qualified_name,
                )

        for table in tables:
            for fk in table.foreign_keys:
                self._add(
                    output, phase,
                    lambda t=table, f=fk: [self.dialect.add_foreign_key(t, f, filtered.model.table(f.target))],
                    table.qualified_name,
                    check=lambda t=table, f=fk: self._check_reference(filtered, t, f),
                )

        for path in self.options.import_files:
            self._add_import(output, path)

    def _emit_drop(self, filtered: FilteredSchema, output: List[str]) -> None:
        phase = Phase.DROP
        tables = list(reversed(filtered.tables))

        for table in tables:
            self._add(output, phase, lambda t=table: [self.dialect.drop_table(t)], table.qualified_name)

        for table in tables:
            self._add(output, phase, lambda t=table: self.dialect.drop_sequence(t), table.qualified_name)

        if self.options.manage_namespaces:
            for namespace in reversed(filtered.namespaces):
                self._add(output, phase, lambda ns=namespace: self.dialect.drop_schema(ns.name))

    @staticmethod
    def _check_reference(filtered: FilteredSchema, table: Table, fk) -> None:
        """The referenced table must be emitted by the same phase."""
        if not filtered.includes(fk.target):
            raise DanglingReferenceError(
                f"Foreign key of '{table.qualified_name}' references '{fk.target}', "
                f"which is not part of the {filtered.phase.value} script",
                entity=table.qualified_name,
                reference=fk.target,
            )

    # =========================================================================
    # STATEMENT HANDLING
    # =========================================================================

    def _add(
        self,
        output: List[str],
        phase: Phase,
        build: Callable[[], Iterable[Statement]],
        entity: Optional[str] = None,
        check: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Build and render statements; failures go to the error handler.

        ``check`` runs after rendering, so an error it raises carries the
        statement text.
        """
        with log_context(entity=entity):
            try:
                rendered = [
                    render_statement(stmt, self.options.delimiter, self.options.format)
                    for stmt in build()
                ]
            except Exception as e:
                self._report(self._statement_error(phase, entity, e), e)
                return
            if check is not None:
                try:
                    check()
                except DdlError as e:
                    self._report(self._statement_error(phase, entity, e, "\n".join(rendered)), e)
                    return
        output.extend(rendered)

    def _statement_error(
        self,
        phase: Phase,
        entity: Optional[str],
        cause: BaseException,
        sql: Optional[str] = None,
    ) -> GenerationError:
        return GenerationError(
            f"{self.dialect_id}: cannot generate {phase.value} statement"
            f"{f' for {entity}' if entity else ''}: {cause}",
            sql=sql,
            cause=cause,
            entity=entity,
            dialect=self.dialect_id,
            phase=phase.value,
        )

    def _add_import(self, output: List[str], path: str) -> None:
        try:
            content = read_import_script(path)
        except (OSError, UnicodeError) as e:
            self._report(GenerationError(
                f"{self.dialect_id}: cannot read import file {path}: {e}",
                cause=e,
                dialect=self.dialect_id,
                phase=Phase.CREATE.value,
            ), e)
            return
        if content:
            output.append(content)

    def _report(self, error: GenerationError, cause: BaseException) -> None:
        error.__cause__ = cause
        logger.error(str(error))
        self.error_handler.handle(error)


__all__ = [
    "ErrorHandler",
    "ScriptEmitter",
]
