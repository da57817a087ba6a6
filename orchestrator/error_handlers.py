# ============================================================================
# GENERATION ERROR HANDLERS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Orchestrator - Halt / collect error policies
# PURPOSE: Decide what happens to a statement that cannot be generated
# CREATED: 19 OCT 2026
# ============================================================================
"""
Generation Error Handlers

    HaltOnErrorHandler      re-raises the first error (aborts the run)
    CollectingErrorHandler  records every error, generation continues

Only statement-level GenerationErrors go through a handler; resolution,
assembly and output errors are never policy-controlled.
"""

import logging
from typing import List, Optional

from core.config import ExecutionOptions
from core.errors import GenerationError

logger = logging.getLogger(__name__)


class HaltOnErrorHandler:
    """Re-raises every error."""

    def handle(self, error: GenerationError) -> None:
        raise error


class CollectingErrorHandler:
    """Appends every error to a run-scoped list."""

    def __init__(self, errors: Optional[List[GenerationError]] = None):
        self.errors: List[GenerationError] = errors if errors is not None else []

    def handle(self, error: GenerationError) -> None:
        self.errors.append(error)
        logger.warning(f"Collected generation error #{len(self.errors)}: {error}")


def error_handler_for(options: ExecutionOptions, errors: List[GenerationError]):
    """Handler matching the options' halt_on_error policy."""
    if options.halt_on_error:
        return HaltOnErrorHandler()
    return CollectingErrorHandler(errors)


__all__ = [
    "HaltOnErrorHandler",
    "CollectingErrorHandler",
    "error_handler_for",
]
