# ============================================================================
# PYDANTIC MODEL SOURCE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Entity definitions from Pydantic models
# PURPOSE: Read __sql_* metadata and field types into EntityDefinitions
# CREATED: 19 OCT 2026
# EXPORTS: PydanticEntityReader, entities_from_models
# DEPENDENCIES: pydantic, annotated_types
# ============================================================================
"""
Pydantic Model Source.

Lets application models act as entity definitions, so the schema can be
generated from the same Pydantic classes the application uses.

Model Metadata Convention:
    Models define SQL metadata via ClassVar attributes:
    - __sql_table__: Table name (default: snake_case of the class name)
    - __sql_schema__: Schema name (default: none)
    - __sql_primary_key__: Primary key column(s) - string or list
    - __sql_foreign_keys__: Dict of {column: "schema.table(column)"}
    - __sql_indexes__: List of (name, columns) tuples or dicts
    - __sql_serial_columns__: Columns generated by the database

Usage:
    reader = PydanticEntityReader()
    entity = reader.read(Order)
"""

import logging
import re
import types
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union, get_args, get_origin
from uuid import UUID

from annotated_types import MaxLen
from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from core.contracts import ColumnType, GenerationType
from core.models.entity import (
    ColumnDefinition,
    EntityDefinition,
    ForeignKeyDefinition,
    IndexDefinition,
    to_snake_case,
)
from core.schema.ddl_utils import quote_literal

logger = logging.getLogger(__name__)

# "schema.table(column)" or "table(column)"
_FK_REFERENCE = re.compile(r"^(?:(\w+)\.)?(\w+)\((\w+)\)$")

_UNION_TYPES = (Union, types.UnionType)


class PydanticEntityReader:
    """
    Convert Pydantic models with __sql_* metadata to EntityDefinitions.
    """

    TYPE_MAP = {
        str: ColumnType.STRING,
        int: ColumnType.INTEGER,
        float: ColumnType.DOUBLE,
        bool: ColumnType.BOOLEAN,
        datetime: ColumnType.TIMESTAMP_TZ,
        date: ColumnType.DATE,
        time: ColumnType.TIME,
        Decimal: ColumnType.DECIMAL,
        UUID: ColumnType.UUID,
        bytes: ColumnType.BINARY,
        dict: ColumnType.JSON,
        Dict: ColumnType.JSON,
        list: ColumnType.JSON,
        List: ColumnType.JSON,
    }

    # default_factory on these columns means "set by the database"
    TIMESTAMP_COLUMNS = ("created_at", "updated_at")

    def __init__(self, default_namespace: Optional[str] = None):
        self.default_namespace = default_namespace

    # =========================================================================
    # METADATA EXTRACTION
    # =========================================================================

    @staticmethod
    def get_model_metadata(model: Type[BaseModel]) -> Dict[str, Any]:
        """
        Extract SQL DDL metadata from a Pydantic model.

        Looks for __sql_* attributes (which Python mangles to _ClassName__sql_*).

        Returns:
            Dict with table, schema, primary_key, foreign_keys, indexes, serial_columns
        """
        def get_attr(name: str, default=None):
            mangled = f"_{model.__name__}__{name}"
            return getattr(model, mangled, getattr(model, f"__{name}", default))

        metadata = {
            "table": get_attr("sql_table__"),
            "schema": get_attr("sql_schema__"),
            "primary_key": get_attr("sql_primary_key__", []),
            "foreign_keys": get_attr("sql_foreign_keys__", {}),
            "indexes": get_attr("sql_indexes__", []),
            "serial_columns": get_attr("sql_serial_columns__", []),
        }

        if isinstance(metadata["primary_key"], str):
            metadata["primary_key"] = [metadata["primary_key"]]

        return metadata

    # =========================================================================
    # TYPE CONVERSION
    # =========================================================================

    @staticmethod
    def unwrap_optional(field_type: Any) -> Tuple[Any, bool]:
        """Optional[X] -> (X, True); X -> (X, False)."""
        if get_origin(field_type) in _UNION_TYPES:
            args = [a for a in get_args(field_type) if a is not type(None)]
            if len(args) < len(get_args(field_type)):
                return (args[0] if len(args) == 1 else Union[tuple(args)]), True
        return field_type, False

    def python_type_to_column(self, field_type: Any, field_info: FieldInfo) -> Dict[str, Any]:
        """
        Convert a Python type to column attributes (type, length, ...).

        Unknown types are stored as JSON.
        """
        actual_type, _ = self.unwrap_optional(field_type)
        origin = get_origin(actual_type)

        if origin in (dict, Dict, list, List):
            return {"type": ColumnType.JSON}

        if isinstance(actual_type, type) and issubclass(actual_type, Enum):
            values = [str(member.value) for member in actual_type]
            return {
                "type": ColumnType.STRING,
                "length": max(len(v) for v in values) if values else None,
                "allowed_values": values or None,
            }

        attrs: Dict[str, Any] = {"type": self.TYPE_MAP.get(actual_type, ColumnType.JSON)}

        for constraint in getattr(field_info, "metadata", None) or []:
            if isinstance(constraint, MaxLen) and attrs["type"] in (ColumnType.STRING, ColumnType.BINARY):
                attrs["length"] = constraint.max_length
            if attrs["type"] is ColumnType.DECIMAL:
                if getattr(constraint, "max_digits", None) is not None:
                    attrs["precision"] = constraint.max_digits
                if getattr(constraint, "decimal_places", None) is not None:
                    attrs["scale"] = constraint.decimal_places

        return attrs

    def default_expression(self, field_name: str, field_info: FieldInfo) -> Optional[str]:
        """Raw SQL default for a field, or None."""
        default = field_info.default
        if default is not None and default is not PydanticUndefined:
            if isinstance(default, Enum):
                return quote_literal(str(default.value))
            if isinstance(default, bool):
                return "TRUE" if default else "FALSE"
            if isinstance(default, (int, float, Decimal)):
                return str(default)
            if isinstance(default, str):
                return quote_literal(default)
            return None

        if field_info.default_factory is not None and field_name in self.TIMESTAMP_COLUMNS:
            return "CURRENT_TIMESTAMP"
        return None

    # =========================================================================
    # ENTITY CONVERSION
    # =========================================================================

    def read(self, model: Type[BaseModel]) -> EntityDefinition:
        """
        Build an EntityDefinition from a Pydantic model class.

        The qualified name is "<schema>.<ClassName>" (or "<ClassName>").

        Raises:
            ValueError: If the metadata cannot be interpreted
        """
        meta = self.get_model_metadata(model)
        namespace = meta["schema"] or self.default_namespace
        table = meta["table"] or to_snake_case(model.__name__)
        primary_key = list(meta["primary_key"])
        serial_columns = set(meta["serial_columns"])

        logger.debug(f"Reading entity {model.__name__} -> {namespace or '<default>'}.{table}")

        columns = []
        for field_name, field_info in model.model_fields.items():
            attrs = self.python_type_to_column(field_info.annotation, field_info)
            _, is_optional = self.unwrap_optional(field_info.annotation)
            is_serial = field_name in serial_columns

            columns.append(ColumnDefinition(
                name=field_name,
                nullable=is_optional,
                primary_key=field_name in primary_key,
                generated=GenerationType.IDENTITY if is_serial else None,
                default=None if is_serial else self.default_expression(field_name, field_info),
                comment=field_info.description,
                **attrs,
            ))

        missing = [c for c in primary_key if c not in model.model_fields]
        if missing:
            raise ValueError(f"Model {model.__name__}: primary key columns {missing} are not fields")

        return EntityDefinition(
            qualified_name=f"{namespace}.{model.__name__}" if namespace else model.__name__,
            table=table,
            namespace=namespace,
            columns=columns,
            foreign_keys=[self._foreign_key(model, col, ref) for col, ref in meta["foreign_keys"].items()],
            indexes=[i for i in (self._index(d) for d in meta["indexes"]) if i is not None],
            comment=_first_line(model.__doc__),
        )

    def read_all(self, models: Sequence[Type[BaseModel]]) -> List[EntityDefinition]:
        return [self.read(m) for m in models]

    def _foreign_key(self, model: Type[BaseModel], column: str, reference: str) -> ForeignKeyDefinition:
        match = _FK_REFERENCE.match(reference.strip())
        if not match:
            raise ValueError(
                f"Model {model.__name__}: foreign key reference '{reference}' "
                "must look like schema.table(column)"
            )
        ref_schema, ref_table, ref_column = match.groups()
        target = f"{ref_schema}.{ref_table}" if ref_schema else ref_table
        return ForeignKeyDefinition(
            columns=[column],
            target=target,
            target_columns=[ref_column],
            on_delete="cascade",
        )

    @staticmethod
    def _index(idx_def) -> Optional[IndexDefinition]:
        # Tuple format: (name, columns) or (name, columns, partial_where)
        if isinstance(idx_def, tuple):
            name = idx_def[0]
            columns = idx_def[1] if len(idx_def) > 1 else []
            unique = False
            if len(idx_def) > 2:
                logger.debug(f"Index {name}: partial WHERE clause is not portable, ignored")
        elif isinstance(idx_def, dict):
            name = idx_def.get("name")
            columns = idx_def.get("columns", [])
            unique = bool(idx_def.get("unique", False))
        else:
            return None

        if not columns:
            return None
        return IndexDefinition(columns=columns, name=name, unique=unique)


def _first_line(text: Optional[str]) -> Optional[str]:
    lines = (text or "").strip().splitlines()
    return lines[0].strip() if lines else None


def entities_from_models(
    models: Sequence[Type[BaseModel]],
    default_namespace: Optional[str] = None,
) -> List[EntityDefinition]:
    """Convert Pydantic model classes to EntityDefinitions."""
    return PydanticEntityReader(default_namespace=default_namespace).read_all(models)


__all__ = [
    "PydanticEntityReader",
    "entities_from_models",
]
