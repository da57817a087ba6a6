# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Infrastructure - File system operations
# PURPOSE: Script file naming, atomic writes, import file reads
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the DDL generator.

Usage:
    from infrastructure import ScriptFile

    ScriptFile.for_dialect("target/ddl", "PostgreSQL@13").write(script)
"""

from infrastructure.script_files import (
    SCRIPT_SUFFIX,
    ScriptFile,
    ensure_output_directory,
    read_import_script,
    script_file_name,
)

__all__ = [
    "SCRIPT_SUFFIX",
    "ScriptFile",
    "ensure_output_directory",
    "read_import_script",
    "script_file_name",
]
