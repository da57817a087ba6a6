# ============================================================================
# ERROR TYPES
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Foundation - Exception hierarchy for the generation pipeline
# PURPOSE: Typed errors carrying dialect/entity/statement context
# CREATED: 19 OCT 2026
# ============================================================================
"""
Error hierarchy.

    DdlError
    ├── DialectResolutionError   fatal for one dialect target
    ├── SchemaAssemblyError      fatal for the run (shared model)
    │   ├── DuplicateEntityError
    │   └── DanglingReferenceError
    ├── GenerationError          per statement, halt/collect policy
    ├── UnsupportedFeatureError  raised by dialects while rendering
    ├── OutputWriteError         fatal for the run
    └── DefinitionLoadError      definition file unreadable or invalid

Every error keeps the underlying exception available through ``__cause__``
(``raise ... from e``) and, for GenerationError, through ``cause``.
"""

from typing import Optional


class DdlError(Exception):
    """Base exception for DDL generation."""
    pass


class DialectResolutionError(DdlError):
    """Raised when a dialect identifier cannot be turned into a strategy."""

    def __init__(self, message: str, identifier: Optional[str] = None):
        self.identifier = identifier
        super().__init__(message)


class SchemaAssemblyError(DdlError):
    """Raised when the entity definitions do not form a consistent schema."""

    def __init__(self, message: str, entity: Optional[str] = None):
        self.entity = entity
        super().__init__(message)


class DuplicateEntityError(SchemaAssemblyError):
    """Raised when an entity (or its table) is defined more than once."""
    pass


class DanglingReferenceError(SchemaAssemblyError):
    """Raised when a reference points at something that does not exist."""

    def __init__(self, message: str, entity: Optional[str] = None, reference: Optional[str] = None):
        self.reference = reference
        super().__init__(message, entity=entity)


class UnsupportedFeatureError(DdlError):
    """Raised by a dialect that cannot express a column type or construct."""

    def __init__(self, message: str, dialect: Optional[str] = None):
        self.dialect = dialect
        super().__init__(message)


class GenerationError(DdlError):
    """
    A single statement that could not be generated.

    Attributes:
        sql: Statement text, when it could be rendered
        cause: Underlying exception
        entity: Qualified name of the contributing entity, if any
        dialect: Dialect identifier of the target
        phase: Generation phase value ("create" / "drop")
    """

    def __init__(
        self,
        message: str,
        sql: Optional[str] = None,
        cause: Optional[BaseException] = None,
        entity: Optional[str] = None,
        dialect: Optional[str] = None,
        phase: Optional[str] = None,
    ):
        self.sql = sql
        self.cause = cause
        self.entity = entity
        self.dialect = dialect
        self.phase = phase
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dict for reporting."""
        return {
            "message": str(self),
            "sql": self.sql,
            "cause": repr(self.cause) if self.cause is not None else None,
            "entity": self.entity,
            "dialect": self.dialect,
            "phase": self.phase,
        }


class OutputWriteError(DdlError):
    """Raised when the output directory or a script file cannot be written."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class DefinitionLoadError(DdlError):
    """Raised when a definition file cannot be read or does not validate."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


__all__ = [
    "DdlError",
    "DialectResolutionError",
    "SchemaAssemblyError",
    "DuplicateEntityError",
    "DanglingReferenceError",
    "UnsupportedFeatureError",
    "GenerationError",
    "OutputWriteError",
    "DefinitionLoadError",
]
