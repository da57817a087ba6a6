# ============================================================================
# EXECUTION COORDINATOR
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Orchestrator - Runs the generation pipeline per dialect target
# PURPOSE: Resolve, filter, emit and write one script per dialect
# CREATED: 19 OCT 2026
# ============================================================================
"""
Execution Coordinator

Drives one generation run:

    1. Build the SchemaModel once (assembly errors are fatal)
    2. For each dialect identifier, in order:
         PENDING -> DROPPING -> CREATING -> DONE
       (DROPPING skipped for create-only, CREATING skipped for drop-only)
    3. Write one script file per successfully generated target

Error policy:
    - DialectResolutionError: target FAILED, no file written, other targets
      continue; the first one is raised after all targets
    - GenerationError: halt (abort, propagate) or collect (continue) per
      ExecutionOptions.halt_on_error
    - OutputWriteError / SchemaAssemblyError: fatal, propagate

Usage:
    coordinator = ExecutionCoordinator(ExecutionOptions.build(create_drop=True))
    result = coordinator.run(model, ["PostgreSQL@13", "MySQL"])
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from core.config import ExecutionOptions
from core.contracts import Phase, TargetState
from core.errors import DialectResolutionError, GenerationError
from core.logging import log_checkpoint, log_context
from core.models.entity import DefinitionSet, EntityDefinition
from core.models.schema import SchemaModel
from core.schema.ddl_utils import join_script
from dialects import resolve_dialect
from infrastructure.script_files import ScriptFile, ensure_output_directory
from orchestrator.error_handlers import error_handler_for
from services.schema_builder import SchemaModelBuilder
from services.schema_filter import SchemaFilterConfig, filter_for, resolve_filter_config
from services.script_emitter import ScriptEmitter

logger = logging.getLogger(__name__)


# ============================================================================
# RESULTS
# ============================================================================

@dataclass
class TargetResult:
    """Outcome of one dialect target."""
    identifier: str
    state: TargetState = TargetState.PENDING
    dialect: Optional[str] = None
    output_file: Optional[str] = None
    statement_count: int = 0
    errors: List[GenerationError] = field(default_factory=list)
    resolution_error: Optional[DialectResolutionError] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "state": self.state.value,
            "dialect": self.dialect,
            "output_file": self.output_file,
            "statement_count": self.statement_count,
            "errors": [e.to_dict() for e in self.errors],
            "resolution_error": str(self.resolution_error) if self.resolution_error else None,
        }


@dataclass
class RunResult:
    """Outcome of a generation run."""
    run_id: str
    timestamp: str
    targets: List[TargetResult] = field(default_factory=list)
    errors: List[GenerationError] = field(default_factory=list)

    @property
    def completed_with_errors(self) -> bool:
        return bool(self.errors)

    @property
    def resolution_errors(self) -> List[DialectResolutionError]:
        return [t.resolution_error for t in self.targets if t.resolution_error is not None]

    @property
    def success(self) -> bool:
        return not self.errors and all(t.state is TargetState.DONE for t in self.targets)

    def target(self, identifier: str) -> Optional[TargetResult]:
        for t in self.targets:
            if t.identifier == identifier:
                return t
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp,
            "success": self.success,
            "completed_with_errors": self.completed_with_errors,
            "targets": [t.to_dict() for t in self.targets],
            "errors": [e.to_dict() for e in self.errors],
            "summary": {
                "total_targets": len(self.targets),
                "done": len([t for t in self.targets if t.state is TargetState.DONE]),
                "failed": len([t for t in self.targets if t.state is TargetState.FAILED]),
                "errors": len(self.errors),
            },
        }


# ============================================================================
# COORDINATOR
# ============================================================================

class ExecutionCoordinator:
    """
    Runs the generation pipeline for a list of dialect identifiers.

    A coordinator is used for one run; ``result`` holds the RunResult of the
    last run, also when it ended with an exception.
    """

    def __init__(
        self,
        options: Optional[ExecutionOptions] = None,
        filter_config: Optional[SchemaFilterConfig] = None,
        run_id: Optional[str] = None,
    ):
        self.options = options or ExecutionOptions.build()
        self.filter_config = filter_config
        self.run_id = run_id or uuid.uuid4().hex[:12]
        self.result: Optional[RunResult] = None

    def run(
        self,
        source: Union[SchemaModel, SchemaModelBuilder],
        dialects: Sequence[str],
    ) -> RunResult:
        """
        Generate one script per dialect identifier.

        Args:
            source: Built SchemaModel, or a builder to build once
            dialects: Identifiers such as "PostgreSQL@13"

        Returns:
            RunResult (errors collected under the collect policy)

        Raises:
            SchemaAssemblyError: If the model cannot be assembled
            GenerationError: First statement error under the halt policy
            DialectResolutionError: After all targets, if any identifier failed
            OutputWriteError: If a script cannot be written
        """
        result = RunResult(run_id=self.run_id, timestamp=datetime.now(timezone.utc).isoformat())
        self.result = result

        with log_context(run_id=self.run_id):
            model = source.build() if isinstance(source, SchemaModelBuilder) else source
            filter_config = resolve_filter_config(self.filter_config, self.options.settings)
            handler = error_handler_for(self.options, result.errors)

            log_checkpoint("run_started", {
                "dialects": list(dialects),
                "tables": len(model),
                "action": self.options.action.value,
                "halt_on_error": self.options.halt_on_error,
            })
            ensure_output_directory(self.options.output_directory)

            for identifier in dialects:
                target = TargetResult(identifier=identifier)
                result.targets.append(target)
                with log_context(dialect=identifier):
                    self._run_target(target, model, filter_config, handler, result)

            log_checkpoint("run_completed", result.to_dict()["summary"])

            resolution_errors = result.resolution_errors
            if resolution_errors:
                logger.error(
                    f"{len(resolution_errors)} dialect(s) could not be resolved: "
                    f"{', '.join(e.identifier or '?' for e in resolution_errors)}"
                )
                raise resolution_errors[0]

        return result

    def _run_target(
        self,
        target: TargetResult,
        model: SchemaModel,
        filter_config: SchemaFilterConfig,
        handler,
        result: RunResult,
    ) -> None:
        try:
            dialect = resolve_dialect(target.identifier, self.options.settings)
        except DialectResolutionError as e:
            target.state = TargetState.FAILED
            target.resolution_error = e
            logger.error(f"Skipping {target.identifier}: {e}")
            log_checkpoint("target_failed", {"reason": "resolution"})
            return

        target.dialect = dialect.name
        emitter = ScriptEmitter(dialect, self.options, handler, dialect_id=target.identifier)
        errors_before = len(result.errors)
        statements: List[str] = []

        try:
            if self.options.action.does_drop():
                target.state = TargetState.DROPPING
                statements += emitter.emit(Phase.DROP, filter_for(Phase.DROP, model, filter_config))
            if self.options.action.does_create():
                target.state = TargetState.CREATING
                statements += emitter.emit(Phase.CREATE, filter_for(Phase.CREATE, model, filter_config))
        except GenerationError:
            target.state = TargetState.FAILED
            log_checkpoint("target_failed", {"reason": "halt"})
            raise

        target.errors = result.errors[errors_before:]
        script = ScriptFile.for_dialect(self.options.output_directory, target.identifier)
        target.output_file = str(script.write(join_script(statements, pretty=self.options.format)))
        target.statement_count = len(statements)
        target.state = TargetState.DONE

        log_checkpoint("target_completed", {
            "output_file": target.output_file,
            "statements": target.statement_count,
            "errors": len(target.errors),
        })


def generate_ddl(
    sources: Iterable[Union[DefinitionSet, EntityDefinition]],
    dialects: Sequence[str],
    options: Optional[ExecutionOptions] = None,
    filter_config: Optional[SchemaFilterConfig] = None,
) -> RunResult:
    """
    Build a schema from definition sets and/or entities and generate scripts.

    Convenience wrapper around SchemaModelBuilder and ExecutionCoordinator.
    """
    builder = SchemaModelBuilder()
    for source in sources:
        if isinstance(source, DefinitionSet):
            builder.add_source(source)
        else:
            builder.add_entities([source])
    return ExecutionCoordinator(options, filter_config).run(builder, dialects)


__all__ = [
    "TargetResult",
    "RunResult",
    "ExecutionCoordinator",
    "generate_ddl",
]
