# ============================================================================
# DEFINITION LOADER
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Service - Entity definition file loading
# PURPOSE: Load YAML/JSON definition files into DefinitionSets
# CREATED: 19 OCT 2026
# ============================================================================
"""
Definition Loader

Loads entity definitions from YAML (or JSON) files. A file holds one
DefinitionSet; a directory is loaded file by file, sorted by name, so each
file is one source for the SchemaModelBuilder.
"""

import logging
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import ValidationError

from core.errors import DefinitionLoadError
from core.models.entity import DefinitionSet

logger = logging.getLogger(__name__)

DEFINITION_SUFFIXES = (".yaml", ".yml", ".json")


def load_definition_file(path: Union[str, Path]) -> DefinitionSet:
    """
    Load one definition file.

    Args:
        path: Path to a YAML or JSON file

    Returns:
        DefinitionSet instance

    Raises:
        DefinitionLoadError: If the file cannot be read, parsed or validated
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise DefinitionLoadError(f"Cannot read definition file {path}: {e}", path=str(path)) from e
    except UnicodeDecodeError as e:
        raise DefinitionLoadError(f"Definition file {path} is not valid UTF-8: {e}", path=str(path)) from e
    except yaml.YAMLError as e:
        raise DefinitionLoadError(f"Invalid YAML in {path}: {e}", path=str(path)) from e

    if data is None:
        logger.warning(f"Definition file is empty: {path}")
        return DefinitionSet()
    if not isinstance(data, dict):
        raise DefinitionLoadError(
            f"Definition file {path} must contain a mapping with 'entities' and 'namespaces'",
            path=str(path),
        )

    try:
        definitions = DefinitionSet.model_validate(data)
    except ValidationError as e:
        raise DefinitionLoadError(f"Invalid definitions in {path}: {e}", path=str(path)) from e

    logger.info(
        f"Loaded {len(definitions.entities)} entities and "
        f"{len(definitions.namespaces)} namespaces from {path}"
    )
    return definitions


def load_definitions(path: Union[str, Path]) -> List[DefinitionSet]:
    """
    Load a definition file, or every definition file in a directory.

    Returns:
        One DefinitionSet per file, in file name order
    """
    path = Path(path)
    if not path.exists():
        raise DefinitionLoadError(f"Definition path not found: {path}", path=str(path))

    if path.is_file():
        return [load_definition_file(path)]

    files = sorted(p for p in path.iterdir() if p.suffix.lower() in DEFINITION_SUFFIXES)
    if not files:
        logger.warning(f"No definition files found in {path}")
    return [load_definition_file(p) for p in files]


__all__ = [
    "DEFINITION_SUFFIXES",
    "load_definition_file",
    "load_definitions",
]
