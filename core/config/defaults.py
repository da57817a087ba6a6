# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Default configuration values
# PURPOSE: Generator defaults and per-run execution options
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for script generation and the immutable ExecutionOptions
built once per run.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
- User settings merged over built-in settings, with warnings
"""

import logging
import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from core.contracts import Action

logger = logging.getLogger(__name__)


# Settings applied before user settings (user settings override them)
DEFAULT_SETTINGS: Mapping[str, str] = MappingProxyType({
    "globally_quoted_identifiers": "true",
    "default_string_length": "255",
    "use_sql_comments": "true",
})

# Dialects are selected by identifier, never through settings
RESERVED_DIALECT_KEY = "dialect"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_bool(value: Union[str, bool, None], default: bool = False) -> bool:
    """
    Parse a boolean setting ("true", "yes", "1", "on" / "false", "no", "0", "off").

    Raises:
        ValueError: If the value is not recognized
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


@dataclass(frozen=True)
class GeneratorDefaults:
    """
    Defaults for script generation.

    Used for every option the caller leaves unset.
    """
    output_directory: str = "generated-resources/sql/ddl"
    delimiter: str = ";"
    format: bool = True
    halt_on_error: bool = True
    manage_namespaces: bool = True

    @classmethod
    def from_env(cls) -> "GeneratorDefaults":
        """Create from environment variables."""
        return cls(
            output_directory=os.getenv("DDL_OUTPUT_DIR", "generated-resources/sql/ddl"),
            delimiter=os.getenv("DDL_DELIMITER", ";"),
            format=parse_bool(os.getenv("DDL_FORMAT"), default=True),
            halt_on_error=parse_bool(os.getenv("DDL_HALT_ON_ERROR"), default=True),
            manage_namespaces=parse_bool(os.getenv("DDL_MANAGE_NAMESPACES"), default=True),
        )


# ============================================================================
# EXECUTION OPTIONS
# ============================================================================

def is_dialect_key(key: str) -> bool:
    """True for "dialect" and namespaced variants such as "hibernate.dialect"."""
    normalized = key.strip().lower()
    return normalized == RESERVED_DIALECT_KEY or normalized.endswith("." + RESERVED_DIALECT_KEY)


def merge_settings(
    user_settings: Optional[Mapping[str, str]],
    base: Mapping[str, str] = DEFAULT_SETTINGS,
) -> Mapping[str, str]:
    """
    Merge user settings over the built-in settings.

    The reserved dialect key is dropped with a warning; overriding an existing
    value is allowed but logged with the previous value.

    Returns:
        Read-only merged mapping
    """
    merged: Dict[str, str] = dict(base)
    if not user_settings:
        return MappingProxyType(merged)

    logger.info("Applying user settings...")
    for key, value in user_settings.items():
        if is_dialect_key(key):
            logger.warning(
                f"ignoring dialect property '{key}', use the dialect identifiers to select dialects"
            )
            continue
        if key in merged:
            logger.warning(
                f"value for property '{key}' already present, overriding current value '{merged[key]}'"
            )
        logger.debug(f"setting property {key} = {value}")
        merged[key] = str(value)
    return MappingProxyType(merged)


@dataclass(frozen=True)
class ExecutionOptions:
    """
    Options for one generation run.

    Built once and passed by reference to every stage.
    """
    delimiter: str = ";"
    format: bool = True
    halt_on_error: bool = True
    action: Action = Action.CREATE
    manage_namespaces: bool = True
    import_files: Tuple[str, ...] = ()
    settings: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(DEFAULT_SETTINGS)))
    output_directory: str = "generated-resources/sql/ddl"

    def __post_init__(self):
        # Freeze caller-supplied containers
        if not isinstance(self.settings, MappingProxyType):
            object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))
        if not isinstance(self.import_files, tuple):
            object.__setattr__(self, "import_files", tuple(self.import_files))
        if not isinstance(self.action, Action):
            object.__setattr__(self, "action", Action(self.action))

    @classmethod
    def build(
        cls,
        settings: Optional[Mapping[str, str]] = None,
        import_files: Iterable[str] = (),
        action: Union[Action, str] = Action.CREATE,
        create_drop: bool = False,
        delimiter: Optional[str] = None,
        format: Optional[bool] = None,
        halt_on_error: Optional[bool] = None,
        manage_namespaces: Optional[bool] = None,
        output_directory: Optional[str] = None,
        defaults: Optional[GeneratorDefaults] = None,
    ) -> "ExecutionOptions":
        """
        Build options from caller values, falling back to GeneratorDefaults.

        Args:
            settings: User settings (merged over DEFAULT_SETTINGS)
            import_files: Raw SQL files appended to the create script
            action: Phases to emit
            create_drop: Shortcut for action=BOTH
            defaults: Defaults to fall back on (get_defaults() if None)
        """
        defaults = defaults or get_defaults()
        return cls(
            delimiter=defaults.delimiter if delimiter is None else delimiter,
            format=defaults.format if format is None else format,
            halt_on_error=defaults.halt_on_error if halt_on_error is None else halt_on_error,
            action=Action.BOTH if create_drop else Action(action),
            manage_namespaces=(
                defaults.manage_namespaces if manage_namespaces is None else manage_namespaces
            ),
            import_files=tuple(str(p) for p in import_files),
            settings=merge_settings(settings),
            output_directory=output_directory or defaults.output_directory,
        )

    def with_changes(self, **changes) -> "ExecutionOptions":
        """Copy with some fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to dict for logging."""
        return {
            "delimiter": self.delimiter,
            "format": self.format,
            "halt_on_error": self.halt_on_error,
            "action": self.action.value,
            "manage_namespaces": self.manage_namespaces,
            "import_files": list(self.import_files),
            "settings": dict(self.settings),
            "output_directory": self.output_directory,
        }


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

_defaults: Optional[GeneratorDefaults] = None


def get_defaults() -> GeneratorDefaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = GeneratorDefaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

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
