# ============================================================================
# SCHEMA MODULE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Statement model and entity sources
# PURPOSE: Statement rendering helpers and the pydantic model reader
# CREATED: 19 OCT 2026
# ============================================================================

from core.schema.ddl_utils import (
    Statement,
    render_statement,
    join_script,
    generate_constraint_name,
    sequence_name,
    quote_literal,
)
from core.schema.pydantic_source import PydanticEntityReader, entities_from_models

__all__ = [
    # Statements
    "Statement",
    "render_statement",
    "join_script",
    "generate_constraint_name",
    "sequence_name",
    "quote_literal",
    # Pydantic source
    "PydanticEntityReader",
    "entities_from_models",
]
