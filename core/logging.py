# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent logging across resolver, builder, emitter, coordinator
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Provides human-readable or JSON-formatted logging for the DDL generator.

Features:
- Component-based loggers
- Contextual fields (run_id, dialect, phase, entity)
- JSON output for build log aggregation
- Named checkpoints marking pipeline milestones

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("orchestrator.coordinator")

    with log_context(run_id="a1b2c3", dialect="PostgreSQL@13"):
        logger.info("Emitting create script")
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from enum import Enum


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    RESOLVER = "resolver"
    BUILDER = "builder"
    FILTER = "filter"
    EMITTER = "emitter"
    COORDINATOR = "coordinator"
    CLI = "cli"


_CONTEXT_FIELDS = ("run_id", "dialect", "phase", "entity", "component")


@dataclass(frozen=True)
class LogContext:
    """One frame of the context stack. Unset fields are None."""
    run_id: Optional[str] = None
    dialect: Optional[str] = None
    phase: Optional[str] = None
    entity: Optional[str] = None
    component: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **fields) -> "LogContext":
        """Child frame: named fields override, extra dicts are combined."""
        extra = {**self.extra, **(fields.pop("extra", None) or {})}
        values = {name: fields.get(name, getattr(self, name)) for name in _CONTEXT_FIELDS}
        return LogContext(extra=extra, **values)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            name: getattr(self, name)
            for name in _CONTEXT_FIELDS
            if getattr(self, name) is not None
        }
        result.update(self.extra)
        return result


_local = threading.local()


def _stack() -> List[LogContext]:
    stack = getattr(_local, "stack", None)
    if stack is None:
        stack = _local.stack = []
    return stack


def get_current_context() -> LogContext:
    stack = _stack()
    return stack[-1] if stack else LogContext()


@contextmanager
def log_context(**fields):
    """
    Push context fields for the duration of a block.

    Nested blocks inherit the outer fields:

        with log_context(run_id=run_id):
            with log_context(dialect="MySQL@8", phase="create"):
                logger.info("Emitting tables")
    """
    frame = get_current_context().merged(**fields)
    stack = _stack()
    stack.append(frame)
    try:
        yield frame
    finally:
        stack.pop()


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line, for CI log collectors.

    Keys: timestamp, level, logger, message; then context (log_context
    fields), data (ContextLogger / checkpoint payload) and exception when
    present.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _iso(_record_time(record)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_current_context().to_dict()
        if context:
            entry["context"] = context
        payload = getattr(record, "extra", None)
        if payload:
            entry["data"] = payload
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Single line: time, level, logger, [dialect, phase, entity], message."""

    shown = ("dialect", "phase", "entity")

    def format(self, record: logging.LogRecord) -> str:
        when = _record_time(record).strftime("%Y-%m-%d %H:%M:%S")
        context = get_current_context()
        tags = [f"{name}={getattr(context, name)}" for name in self.shown if getattr(context, name)]
        where = f"{record.name} [{', '.join(tags)}]" if tags else record.name

        line = f"{when} {record.levelname:<8} {where}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """
    Snapshots the current log_context into ``record.extra``, tagged with
    the logger's component.
    """

    def process(self, msg, kwargs):
        payload = {**kwargs.get("extra", {}), **get_current_context().to_dict()}
        component = (self.extra or {}).get("component")
        if component:
            payload.setdefault("component", component)
        kwargs["extra"] = {"extra": payload}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """Context-aware logger, optionally tagged with a pipeline component."""
    tag = component.value if component is not None else None
    return ContextLogger(logging.getLogger(name), {"component": tag})


def configure_logging(
    level: Union[str, int, None] = None,
    json_output: bool = False,
) -> None:
    """
    Install a single stderr handler on the root logger.

    Scripts are written to files, so stdout stays free for the run summary.

    Args:
        level: Level name or number; LOG_LEVEL, then INFO, when None
        json_output: JSON lines instead of human output (LOG_FORMAT=json also)
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter() if use_json else HumanFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a pipeline milestone ("run_started", "target_completed", ...).

    The payload carries the checkpoint name, a timestamp, the current
    log_context fields and ``data`` when given. Goes to the "checkpoint"
    logger unless another is passed.
    """
    payload: Dict[str, Any] = {
        "checkpoint": name,
        "timestamp": _iso(datetime.now(timezone.utc)),
        **get_current_context().to_dict(),
    }
    if data:
        payload["data"] = data

    (logger or logging.getLogger("checkpoint")).info(
        f"CHECKPOINT: {name}", extra={"extra": payload}
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
