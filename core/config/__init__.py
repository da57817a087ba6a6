# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides generator defaults and per-run execution options.
"""

from core.config.defaults import (
    DEFAULT_SETTINGS,
    RESERVED_DIALECT_KEY,
    parse_bool,
    GeneratorDefaults,
    is_dialect_key,
    merge_settings,
    ExecutionOptions,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "RESERVED_DIALECT_KEY",
    "parse_bool",
    "GeneratorDefaults",
    "is_dialect_key",
    "merge_settings",
    "ExecutionOptions",
    "get_defaults",
    "reset_defaults",
]
