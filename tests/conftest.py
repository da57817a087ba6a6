# ============================================================================
# TEST FIXTURES
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Tests - Shared fixtures
# PURPOSE: Entity definitions and schema models used across test modules
# CREATED: 19 OCT 2026
# ============================================================================
"""
Shared fixtures.

The "shop" schema used throughout:

    User(id PK identity, name VARCHAR(100))
    Order(id PK, user_id FK -> User.id)
"""

import pytest

from core.config import reset_defaults
from core.models.entity import DefinitionSet, NamespaceGroup
from services.schema_builder import build_schema
from tests.factories import make_order, make_user


@pytest.fixture(autouse=True)
def clean_defaults(monkeypatch):
    """Environment overrides never leak into tests."""
    for name in ("DDL_OUTPUT_DIR", "DDL_DELIMITER", "DDL_FORMAT",
                 "DDL_HALT_ON_ERROR", "DDL_MANAGE_NAMESPACES", "LOG_FORMAT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_defaults()
    yield
    reset_defaults()


@pytest.fixture
def shop_entities():
    """User and Order in the default namespace."""
    return [make_user(), make_order()]


@pytest.fixture
def shop_model(shop_entities):
    return build_schema(shop_entities)


@pytest.fixture
def namespaced_definitions():
    """User and Order grouped in the "shop" namespace."""
    return DefinitionSet(
        entities=[
            make_user("shop.User"),
            make_order("shop.Order", target="shop.User"),
        ],
        namespaces=[NamespaceGroup(name="shop", entities=["shop.User", "shop.Order"])],
    )


@pytest.fixture
def namespaced_model(namespaced_definitions):
    return build_schema(namespaced_definitions.entities, namespaced_definitions.namespaces)
