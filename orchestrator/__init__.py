# ============================================================================
# ORCHESTRATOR MODULE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Generation run coordination
# PURPOSE: Coordinate script generation across dialect targets
# CREATED: 19 OCT 2026
# ============================================================================
"""
Orchestrator Module

Runs the DDL generation pipeline for a list of dialect identifiers.

Usage:
    from orchestrator import ExecutionCoordinator

    coordinator = ExecutionCoordinator(options)
    result = coordinator.run(model, ["PostgreSQL@13", "H2"])
"""

from .coordinator import ExecutionCoordinator, RunResult, TargetResult, generate_ddl
from .error_handlers import CollectingErrorHandler, HaltOnErrorHandler, error_handler_for

__all__ = [
    "ExecutionCoordinator",
    "RunResult",
    "TargetResult",
    "generate_ddl",
    "CollectingErrorHandler",
    "HaltOnErrorHandler",
    "error_handler_for",
]
