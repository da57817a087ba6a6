# ============================================================================
# DIALECT REGISTRY
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Core - Dialect registration and resolution
# PURPOSE: Turn "Family" / "Family@Major" identifiers into dialect strategies
# CREATED: 19 OCT 2026
# ============================================================================
"""
Dialect Registry

Central registry for dialect strategies. The coordinator resolves every
requested dialect identifier through this module.

Design:
- Dialects are registered at import time via decorator
- Registry is a simple dict (lower-cased family name -> factory)
- Fail-fast on duplicate registration
- Identifiers: "PostgreSQL" (default version) or "PostgreSQL@13" (major 13)
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from core.errors import DdlError, DialectResolutionError
from dialects.base import DatabaseVersion, DialectStrategy

logger = logging.getLogger(__name__)


# Factory type: (version or None, settings) -> strategy
DialectFactory = Callable[[Optional[DatabaseVersion], Mapping[str, str]], DialectStrategy]

_VERSION_PATTERN = re.compile(r"^[0-9]+$")


# ============================================================================
# EXCEPTIONS
# ============================================================================

class DuplicateDialectError(DdlError):
    """Raised when a dialect family name is already registered."""
    def __init__(self, family: str):
        self.family = family
        super().__init__(f"Dialect already registered: {family}")


# ============================================================================
# DIALECT IDENTIFIERS
# ============================================================================

@dataclass(frozen=True)
class DialectSpec:
    """A parsed dialect identifier."""
    identifier: str
    family: str
    version: Optional[DatabaseVersion] = None

    @classmethod
    def parse(cls, identifier: str) -> "DialectSpec":
        """
        Parse "Family" or "Family@Major".

        Raises:
            DialectResolutionError: If the identifier is empty or the version
                is not a non-negative integer
        """
        if not identifier or not identifier.strip():
            raise DialectResolutionError("Empty dialect identifier", identifier=identifier)

        family, sep, version_part = identifier.strip().partition("@")
        family = family.strip()
        if not family:
            raise DialectResolutionError(
                f"Missing dialect family in identifier '{identifier}'", identifier=identifier
            )

        if not sep:
            return cls(identifier=identifier, family=family)

        version_part = version_part.strip()
        if not _VERSION_PATTERN.match(version_part):
            raise DialectResolutionError(
                f"Invalid major version '{version_part}' in dialect identifier '{identifier}' "
                "(expected a non-negative integer)",
                identifier=identifier,
            )
        return cls(identifier=identifier, family=family, version=DatabaseVersion(int(version_part), 0))


# ============================================================================
# REGISTRY
# ============================================================================

_dialects: Dict[str, DialectFactory] = {}
_dialect_metadata: Dict[str, Dict[str, Any]] = {}


def register_dialect(
    family: str,
    *,
    aliases: tuple = (),
) -> Callable:
    """
    Decorator to register a dialect strategy class (or factory function).

    Args:
        family: Family name used in identifiers (case-insensitive)
        aliases: Additional names resolving to the same dialect

    Example:
        @register_dialect("PostgreSQL")
        class PostgreSQLDialect(DialectStrategy):
            ...
    """
    def decorator(target):
        def factory(version: Optional[DatabaseVersion], settings: Mapping[str, str]) -> DialectStrategy:
            return target(version=version, settings=settings)

        for name in (family, *aliases):
            key = name.lower()
            if key in _dialects:
                raise DuplicateDialectError(name)
            _dialects[key] = factory
            _dialect_metadata[key] = {
                "family": family,
                "name": name,
                "alias": name != family,
                "default_version": str(getattr(target, "default_version", "")),
                "class": getattr(target, "__name__", repr(target)),
                "module": getattr(target, "__module__", ""),
                "registered_at": datetime.now(timezone.utc).isoformat(),
            }
            logger.debug(f"Registered dialect: {name} ({target.__module__}.{target.__name__})")
        return target

    return decorator


def get_dialect_factory(family: str) -> Optional[DialectFactory]:
    """Get a dialect factory by family name, or None."""
    return _dialects.get(family.lower())


def list_dialects(include_aliases: bool = False) -> List[Dict[str, Any]]:
    """List registered dialects with metadata, sorted by name."""
    entries = [
        meta for meta in _dialect_metadata.values()
        if include_aliases or not meta["alias"]
    ]
    return sorted(entries, key=lambda m: m["name"].lower())


def unregister_dialect(family: str) -> None:
    """Remove a dialect registration. Primarily for testing."""
    _dialects.pop(family.lower(), None)
    _dialect_metadata.pop(family.lower(), None)


def resolve_dialect(
    identifier: str,
    settings: Optional[Mapping[str, str]] = None,
) -> DialectStrategy:
    """
    Resolve a dialect identifier to a strategy.

    Args:
        identifier: "Family" or "Family@Major"
        settings: Generic settings passed to the dialect

    Returns:
        Constructed DialectStrategy

    Raises:
        DialectResolutionError: Unknown family, malformed version, or the
            dialect failed to construct (cause preserved)
    """
    spec = DialectSpec.parse(identifier)

    factory = get_dialect_factory(spec.family)
    if factory is None:
        known = ", ".join(m["name"] for m in list_dialects())
        raise DialectResolutionError(
            f"Unknown dialect '{spec.family}' in identifier '{identifier}' (known: {known})",
            identifier=identifier,
        )

    try:
        dialect = factory(spec.version, settings or {})
    except Exception as e:
        raise DialectResolutionError(
            f"Could not instantiate dialect '{identifier}': {e}",
            identifier=identifier,
        ) from e

    logger.debug(f"Resolved dialect {identifier} -> {dialect!r}")
    return dialect


__all__ = [
    "DialectFactory",
    "DialectSpec",
    "DuplicateDialectError",
    "register_dialect",
    "get_dialect_factory",
    "list_dialects",
    "unregister_dialect",
    "resolve_dialect",
]
