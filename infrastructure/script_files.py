# ============================================================================
# SCRIPT FILES
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Infrastructure - Script file output
# PURPOSE: Name, write and read DDL script files
# CREATED: 19 OCT 2026
# ============================================================================
"""
Script Files

One script file per dialect target, named from the dialect identifier:

    PostgreSQL@13  ->  postgresql13.sql
    MySQL          ->  mysql.sql

A script is written in one go: content goes to a temporary file in the
output directory, which then replaces the target. An existing file is always
fully overwritten, and a failed run never leaves a half-written script.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from core.errors import OutputWriteError

logger = logging.getLogger(__name__)

SCRIPT_SUFFIX = ".sql"


def script_file_name(identifier: str) -> str:
    """Identifier with the version separator removed, lower-cased, plus .sql."""
    return identifier.strip().replace("@", "").lower() + SCRIPT_SUFFIX


def ensure_output_directory(directory: Union[str, Path]) -> Path:
    """
    Create the output directory if absent.

    Raises:
        OutputWriteError: If it cannot be created or is not a directory
    """
    path = Path(directory)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(f"Cannot create output directory {path}: {e}", path=str(path)) from e
    return path


@dataclass(frozen=True)
class ScriptFile:
    """The script file of one dialect target."""
    path: Path

    @classmethod
    def for_dialect(cls, output_directory: Union[str, Path], identifier: str) -> "ScriptFile":
        return cls(path=Path(output_directory) / script_file_name(identifier))

    def write(self, content: str) -> Path:
        """
        Replace the file with the given content.

        Raises:
            OutputWriteError: If the file cannot be written
        """
        ensure_output_directory(self.path.parent)
        tmp_path = self.path.with_name(f".{self.path.name}.{os.getpid()}.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise OutputWriteError(f"Cannot write script {self.path}: {e}", path=str(self.path)) from e

        logger.info(f"Wrote {self.path} ({len(content)} bytes)")
        return self.path


def read_import_script(path: Union[str, Path]) -> str:
    """
    Read a raw SQL file to append to a create script, exactly as stored.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If it is not UTF-8
    """
    with open(path, encoding="utf-8") as f:
        return f.read()


__all__ = [
    "SCRIPT_SUFFIX",
    "script_file_name",
    "ensure_output_directory",
    "ScriptFile",
    "read_import_script",
]
