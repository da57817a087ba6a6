# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Foundation - Core enums shared by every pipeline stage
# PURPOSE: Define phases, actions, target states and logical column types
# CREATED: 19 OCT 2026
# EXPORTS: Phase, Action, TargetState, ColumnType, GenerationType, StatementKind
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the DDL generation pipeline.

These enums cross every boundary of the system:
- Definition files (YAML/JSON values)
- Dialect strategies (type mapping)
- Emitter and coordinator (phases, states)
"""

from enum import Enum


# ============================================================================
# PIPELINE ENUMS
# ============================================================================

class Phase(str, Enum):
    """Generation phase. Each phase has its own schema filter."""
    CREATE = "create"
    DROP = "drop"


class Action(str, Enum):
    """
    Which phases a run emits.

    BOTH emits the drop phase before the create phase
    (the "create-drop" mode of a build).
    """
    CREATE = "create"
    DROP = "drop"
    BOTH = "both"

    def does_drop(self) -> bool:
        return self in (Action.DROP, Action.BOTH)

    def does_create(self) -> bool:
        return self in (Action.CREATE, Action.BOTH)


class TargetState(str, Enum):
    """
    Per-dialect target lifecycle.

    State transitions:
        PENDING -> DROPPING -> CREATING -> DONE
                -> CREATING (create-only)
                -> FAILED   (resolution error or halt)
    """
    PENDING = "pending"
    DROPPING = "dropping"
    CREATING = "creating"
    DONE = "done"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return self in (TargetState.DONE, TargetState.FAILED)


# ============================================================================
# SCHEMA ENUMS
# ============================================================================

class ColumnType(str, Enum):
    """
    Logical column types.

    Dialects map these to concrete SQL type names.
    """
    STRING = "string"            # Bounded character data (uses length)
    TEXT = "text"                # Unbounded character data
    SMALLINT = "smallint"
    INTEGER = "integer"
    BIGINT = "bigint"
    DECIMAL = "decimal"          # Uses precision/scale
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TIMESTAMP_TZ = "timestamp_tz"
    UUID = "uuid"
    JSON = "json"
    BINARY = "binary"            # Uses length when bounded


class GenerationType(str, Enum):
    """How a primary key value is generated by the database."""
    IDENTITY = "identity"
    SEQUENCE = "sequence"


class StatementKind(str, Enum):
    """Kinds of statements the emitter produces."""
    CREATE_SCHEMA = "create_schema"
    CREATE_SEQUENCE = "create_sequence"
    CREATE_TABLE = "create_table"
    INITIALIZE_SEQUENCE = "initialize_sequence"
    COMMENT = "comment"
    CREATE_INDEX = "create_index"
    ADD_FOREIGN_KEY = "add_foreign_key"
    IMPORT = "import"
    DROP_TABLE = "drop_table"
    DROP_SEQUENCE = "drop_sequence"
    DROP_SCHEMA = "drop_schema"


__all__ = [
    "Phase",
    "Action",
    "TargetState",
    "ColumnType",
    "GenerationType",
    "StatementKind",
]
