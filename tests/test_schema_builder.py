# ============================================================================
# SCHEMA MODEL BUILDER TESTS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Tests - Logical schema assembly
# PURPOSE: Verify namespace assignment, reference resolution and ordering
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Model Builder Tests

Unit tests for SchemaModelBuilder:
- Deterministic namespace/table ordering regardless of input order
- Dependency order with cycles and self references
- Duplicate and dangling reference detection
- Multiple sources and namespace group merging

Run with:
    pytest tests/test_schema_builder.py -v
"""

from typing import ClassVar, Optional

import pytest
from pydantic import BaseModel, Field

from core.errors import DanglingReferenceError, DuplicateEntityError, SchemaAssemblyError
from core.models.entity import DefinitionSet, EntityDefinition, NamespaceGroup
from services.schema_builder import SchemaModelBuilder, build_schema
from tests.factories import make_entity, make_order, make_user


def _fk(target, columns=("ref_id",), **kwargs):
    return {"columns": list(columns), "target": target, **kwargs}


def _ref_column(name="ref_id"):
    return {"name": name, "type": "bigint"}


# ============================================================================
# ORDERING
# ============================================================================


class TestOrdering:
    def test_tables_sorted_by_qualified_name(self, shop_model):
        assert [t.qualified_name for t in shop_model.tables] == ["Order", "User"]

    def test_creation_order_puts_referenced_tables_first(self, shop_model):
        assert shop_model.creation_order == ("User", "Order")

    def test_input_order_does_not_matter(self, shop_entities):
        assert build_schema(shop_entities) == build_schema(list(reversed(shop_entities)))

    def test_default_namespace_only(self, shop_model):
        assert len(shop_model.namespaces) == 1
        assert shop_model.namespaces[0].is_default
        assert shop_model.namespaces[0].tables == ("Order", "User")

    def test_default_namespace_first(self):
        model = build_schema(
            [make_entity("a.Audit"), make_entity("Setting")],
            [NamespaceGroup(name="a", entities=["a.Audit"])],
        )
        assert [ns.name for ns in model.namespaces] == [None, "a"]

    def test_ties_broken_by_name(self):
        model = build_schema([make_entity("C"), make_entity("A"), make_entity("B")])
        assert model.creation_order == ("A", "B", "C")

    def test_chain(self):
        model = build_schema([
            make_entity("A", _ref_column(), foreign_keys=[_fk("B")]),
            make_entity("B", _ref_column(), foreign_keys=[_fk("C")]),
            make_entity("C"),
        ])
        assert model.creation_order == ("C", "B", "A")

    def test_cycle_is_broken_deterministically(self):
        model = build_schema([
            make_entity("B", _ref_column(), foreign_keys=[_fk("A")]),
            make_entity("A", _ref_column(), foreign_keys=[_fk("B")]),
        ])
        assert model.creation_order == ("A", "B")

    def test_table_depending_on_cycle_follows_it(self):
        model = build_schema([
            make_entity("A", _ref_column(), foreign_keys=[_fk("B")]),
            make_entity("B", _ref_column(), foreign_keys=[_fk("C")]),
            make_entity("C", _ref_column(), foreign_keys=[_fk("B")]),
        ])
        assert model.creation_order == ("B", "C", "A")

    def test_self_reference(self):
        model = build_schema([make_entity("Node", _ref_column("parent_id"), foreign_keys=[_fk("Node", ["parent_id"])])])
        table = model.table("Node")
        assert table.dependencies() == ()
        assert table.foreign_keys[0].target == "Node"
        assert model.creation_order == ("Node",)


# ============================================================================
# NAMESPACES
# ============================================================================


class TestNamespaces:
    def test_group_membership_assigns_namespace(self, namespaced_model):
        table = namespaced_model.table("shop.User")
        assert table.namespace == "shop"
        assert table.physical_name == "shop.user"

    def test_only_named_namespace(self, namespaced_model):
        assert [ns.name for ns in namespaced_model.namespaces] == ["shop"]
        assert namespaced_model.namespace("shop").tables == ("shop.Order", "shop.User")

    def test_declared_namespace(self):
        model = build_schema([make_user("User", namespace="shop")])
        assert model.table("User").physical_name == "shop.user"
        assert [ns.name for ns in model.namespaces] == ["shop"]

    def test_empty_group_is_kept(self, shop_entities):
        model = build_schema(shop_entities, [NamespaceGroup(name="archive")])
        assert model.namespace("archive").tables == ()

    def test_groups_merged_across_sources(self):
        builder = SchemaModelBuilder()
        builder.add_source(DefinitionSet(
            entities=[make_user("shop.User")],
            namespaces=[NamespaceGroup(name="shop", entities=["shop.User"], comment="Shop")],
        ))
        builder.add_source(DefinitionSet(
            entities=[make_order("shop.Order", target="shop.User")],
            namespaces=[NamespaceGroup(name="shop", entities=["shop.Order"])],
        ))
        model = builder.build()
        assert model.namespace("shop").tables == ("shop.Order", "shop.User")
        assert model.namespace("shop").comment == "Shop"

    def test_unknown_group_member(self, shop_entities):
        with pytest.raises(DanglingReferenceError) as exc_info:
            build_schema(shop_entities, [NamespaceGroup(name="shop", entities=["Missing"])])
        assert exc_info.value.entity == "Missing"

    def test_member_of_two_groups(self, shop_entities):
        with pytest.raises(DuplicateEntityError):
            build_schema(shop_entities, [
                NamespaceGroup(name="a", entities=["User"]),
                NamespaceGroup(name="b", entities=["User"]),
            ])

    def test_declared_namespace_conflicts_with_group(self):
        with pytest.raises(DuplicateEntityError):
            build_schema(
                [make_user("User", namespace="shop")],
                [NamespaceGroup(name="sales", entities=["User"])],
            )


# ============================================================================
# DUPLICATES AND REFERENCES
# ============================================================================


class TestDuplicates:
    def test_duplicate_entity(self):
        with pytest.raises(DuplicateEntityError) as exc_info:
            build_schema([make_user(), make_user()])
        assert exc_info.value.entity == "User"

    def test_duplicate_physical_table(self):
        with pytest.raises(DuplicateEntityError):
            build_schema([make_user("a.User"), make_user("b.User")])

    def test_same_table_in_different_namespaces(self):
        model = build_schema([make_user("a.User", namespace="a"), make_user("b.User", namespace="b")])
        assert len(model) == 2


class TestForeignKeys:
    def test_target_columns_default_to_primary_key(self, shop_model):
        fk = shop_model.table("Order").foreign_keys[0]
        assert fk.target == "User"
        assert fk.columns == ("user_id",)
        assert fk.target_columns == ("id",)

    def test_target_by_physical_name(self):
        model = build_schema(
            [make_user("shop.User"), make_order("shop.Order", target="shop.user")],
            [NamespaceGroup(name="shop", entities=["shop.User", "shop.Order"])],
        )
        assert model.table("shop.Order").foreign_keys[0].target == "shop.User"

    def test_unknown_target(self):
        with pytest.raises(DanglingReferenceError) as exc_info:
            build_schema([make_order(target="Customer")])
        assert exc_info.value.entity == "Order"
        assert exc_info.value.reference == "Customer"

    def test_unknown_column(self):
        with pytest.raises(DanglingReferenceError):
            build_schema([make_user(), make_entity("Order", foreign_keys=[_fk("User", ["missing"])])])

    def test_unknown_target_column(self):
        with pytest.raises(DanglingReferenceError) as exc_info:
            build_schema([
                make_user(),
                make_entity("Order", _ref_column(), foreign_keys=[_fk("User", target_columns=["nope"])]),
            ])
        assert exc_info.value.reference == "User.nope"

    def test_target_without_primary_key(self):
        log = EntityDefinition.model_validate({
            "qualified_name": "Log",
            "columns": [{"name": "line", "type": "text"}],
        })
        with pytest.raises(DanglingReferenceError):
            build_schema([
                log,
                make_entity("Order", _ref_column(), foreign_keys=[_fk("Log")]),
            ])

    def test_column_count_mismatch(self):
        with pytest.raises(SchemaAssemblyError) as exc_info:
            build_schema([
                make_user(),
                make_entity(
                    "Order", _ref_column("a"), _ref_column("b"),
                    foreign_keys=[_fk("User", ["a", "b"])],
                ),
            ])
        assert not isinstance(exc_info.value, DanglingReferenceError)


class TestIndexes:
    def test_unknown_index_column(self):
        with pytest.raises(DanglingReferenceError):
            build_schema([make_user(indexes=[{"columns": ["email"]}])])

    def test_index_kept(self):
        model = build_schema([make_user(indexes=[{"columns": "name", "unique": True}])])
        assert model.table("User").indexes[0].columns == ["name"]


# ============================================================================
# BUILDER LIFECYCLE
# ============================================================================


class TestBuilder:
    def test_build_once(self, shop_entities):
        builder = SchemaModelBuilder().add_entities(shop_entities)
        assert builder.build() is builder.build()

    def test_add_after_build(self, shop_entities):
        builder = SchemaModelBuilder().add_entities(shop_entities)
        builder.build()
        with pytest.raises(SchemaAssemblyError):
            builder.add_entities([make_entity("Late")])

    def test_empty_model(self):
        model = SchemaModelBuilder().build()
        assert len(model) == 0
        assert model.creation_order == ()

    def test_add_models(self, shop_entities):
        class Invoice(BaseModel):
            """Customer invoices."""
            __sql_schema__: ClassVar[str] = "billing"
            __sql_primary_key__: ClassVar[str] = "invoice_id"

            invoice_id: int
            note: Optional[str] = Field(default=None, max_length=200)

        model = SchemaModelBuilder().add_entities(shop_entities).add_models([Invoice]).build()
        table = model.table("billing.Invoice")
        assert table.physical_name == "billing.invoice"
        assert table.comment == "Customer invoices."

    def test_add_models_bad_metadata(self):
        class Broken(BaseModel):
            __sql_primary_key__: ClassVar[str] = "missing"
            value: int

        with pytest.raises(SchemaAssemblyError):
            SchemaModelBuilder().add_models([Broken])
