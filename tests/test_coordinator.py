# ============================================================================
# EXECUTION COORDINATOR TESTS
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Tests - End-to-end generation runs
# PURPOSE: Verify script files, target states and error policies per run
# CREATED: 19 OCT 2026
# ============================================================================
"""
Execution Coordinator Tests

End-to-end runs writing script files into a temporary directory:
- Create-only and create-drop scripts
- Unresolvable dialect identifiers
- Halt and collect policies
- Idempotence, namespace management, per-phase filters

Run with:
    pytest tests/test_coordinator.py -v
"""

import pytest

from core.config import ExecutionOptions
from core.contracts import Action, TargetState
from core.errors import (
    DanglingReferenceError,
    DialectResolutionError,
    GenerationError,
    OutputWriteError,
)
from core.models.entity import DefinitionSet, NamespaceGroup
from orchestrator import ExecutionCoordinator, generate_ddl
from services.schema_builder import SchemaModelBuilder, build_schema
from services.schema_filter import PatternSchemaFilter, SchemaFilterConfig
from tests.factories import make_entity, make_order, make_user


CREATE_USER = (
    'CREATE TABLE "user" ("id" BIGINT GENERATED BY DEFAULT AS IDENTITY NOT NULL, '
    '"name" VARCHAR(100) NOT NULL, PRIMARY KEY ("id"));'
)
CREATE_ORDER = (
    'CREATE TABLE "order" ("id" BIGINT NOT NULL, "user_id" BIGINT NOT NULL, PRIMARY KEY ("id"));'
)
ADD_ORDER_FK = (
    'ALTER TABLE "order" ADD CONSTRAINT "fk_order_user_id" '
    'FOREIGN KEY ("user_id") REFERENCES "user" ("id");'
)


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "ddl"


def _make_options(output_dir, **kwargs):
    kwargs.setdefault("format", False)
    return ExecutionOptions.build(output_directory=str(output_dir), **kwargs)


def _user_excluded():
    return SchemaFilterConfig(create_filter=PatternSchemaFilter(exclude=("User",)))


# ============================================================================
# SCRIPTS
# ============================================================================


class TestScripts:
    def test_create_script(self, shop_model, output_dir):
        result = ExecutionCoordinator(_make_options(output_dir)).run(shop_model, ["PostgreSQL@13"])

        script = output_dir / "postgresql13.sql"
        assert script.read_text(encoding="utf-8") == "\n".join([CREATE_USER, CREATE_ORDER, ADD_ORDER_FK]) + "\n"
        assert result.success
        target = result.target("PostgreSQL@13")
        assert target.state is TargetState.DONE
        assert target.output_file == str(script)
        assert target.statement_count == 3
        assert target.dialect == "PostgreSQL 13.0"

    def test_create_drop_script(self, shop_model, output_dir):
        options = _make_options(output_dir, create_drop=True)
        ExecutionCoordinator(options).run(shop_model, ["PostgreSQL@13"])

        lines = (output_dir / "postgresql13.sql").read_text(encoding="utf-8").splitlines()
        assert lines == [
            'DROP TABLE IF EXISTS "order" CASCADE;',
            'DROP TABLE IF EXISTS "user" CASCADE;',
            CREATE_USER,
            CREATE_ORDER,
            ADD_ORDER_FK,
        ]

    def test_drop_only_script(self, shop_model, output_dir):
        options = _make_options(output_dir, action=Action.DROP)
        result = ExecutionCoordinator(options).run(shop_model, ["PostgreSQL@13"])

        content = (output_dir / "postgresql13.sql").read_text(encoding="utf-8")
        assert "CREATE" not in content
        assert result.target("PostgreSQL@13").statement_count == 2

    def test_one_file_per_dialect(self, shop_model, output_dir):
        result = ExecutionCoordinator(_make_options(output_dir)).run(
            shop_model, ["PostgreSQL@13", "MySQL", "SQLServer@13"]
        )
        assert sorted(p.name for p in output_dir.iterdir()) == ["mysql.sql", "postgresql13.sql", "sqlserver13.sql"]
        assert "`user`" in (output_dir / "mysql.sql").read_text(encoding="utf-8")
        assert [t.state for t in result.targets] == [TargetState.DONE] * 3

    def test_pretty_script(self, shop_model, output_dir):
        ExecutionCoordinator(_make_options(output_dir, format=True)).run(shop_model, ["PostgreSQL@13"])
        content = (output_dir / "postgresql13.sql").read_text(encoding="utf-8")
        assert content.startswith('CREATE TABLE "user" (\n    "id" BIGINT')
        assert ");\n\nCREATE TABLE \"order\"" in content

    def test_idempotent(self, shop_model, output_dir):
        options = _make_options(output_dir, create_drop=True)
        ExecutionCoordinator(options).run(shop_model, ["PostgreSQL@13"])
        first = (output_dir / "postgresql13.sql").read_bytes()
        ExecutionCoordinator(options).run(shop_model, ["PostgreSQL@13"])
        assert (output_dir / "postgresql13.sql").read_bytes() == first

    def test_existing_file_overwritten(self, shop_model, output_dir):
        output_dir.mkdir()
        (output_dir / "postgresql13.sql").write_text("stale\n" * 100, encoding="utf-8")
        ExecutionCoordinator(_make_options(output_dir)).run(shop_model, ["PostgreSQL@13"])
        assert "stale" not in (output_dir / "postgresql13.sql").read_text(encoding="utf-8")

    def test_builder_source(self, shop_entities, output_dir):
        builder = SchemaModelBuilder().add_entities(shop_entities)
        result = ExecutionCoordinator(_make_options(output_dir)).run(builder, ["H2"])
        assert result.success
        assert (output_dir / "h2.sql").exists()


# ============================================================================
# NAMESPACES AND FILTERS
# ============================================================================


class TestNamespacesAndFilters:
    def test_managed_namespaces_round_trip(self, namespaced_model, output_dir):
        options = _make_options(output_dir, create_drop=True)
        ExecutionCoordinator(options).run(namespaced_model, ["PostgreSQL@13"])

        lines = (output_dir / "postgresql13.sql").read_text(encoding="utf-8").splitlines()
        assert lines.index('DROP SCHEMA IF EXISTS "shop";') < lines.index('CREATE SCHEMA "shop";')
        assert lines.index('CREATE SCHEMA "shop";') < lines.index(
            next(line for line in lines if line.startswith('CREATE TABLE "shop"."user"'))
        )

    def test_unmanaged_namespaces(self, namespaced_model, output_dir):
        options = _make_options(output_dir, create_drop=True, manage_namespaces=False)
        ExecutionCoordinator(options).run(namespaced_model, ["PostgreSQL@13"])
        assert "SCHEMA" not in (output_dir / "postgresql13.sql").read_text(encoding="utf-8")

    def test_disjoint_create_and_drop_filters(self, output_dir):
        model = build_schema(
            [make_entity("audit.Entry"), make_entity("shop.Item")],
            [
                NamespaceGroup(name="audit", entities=["audit.Entry"]),
                NamespaceGroup(name="shop", entities=["shop.Item"]),
            ],
        )
        filters = SchemaFilterConfig(
            create_filter=PatternSchemaFilter(include=("shop.*",)),
            drop_filter=PatternSchemaFilter(include=("audit.*",)),
        )
        ExecutionCoordinator(_make_options(output_dir, create_drop=True), filters).run(model, ["PostgreSQL@13"])

        lines = (output_dir / "postgresql13.sql").read_text(encoding="utf-8").splitlines()
        assert 'DROP TABLE IF EXISTS "audit"."entry" CASCADE;' in lines
        assert not any(line.startswith('DROP TABLE IF EXISTS "shop"') for line in lines)
        assert any(line.startswith('CREATE TABLE "shop"."item"') for line in lines)
        assert not any(line.startswith('CREATE TABLE "audit"') for line in lines)

    def test_drop_filter_keeps_excluded_table_and_its_schema(self, output_dir):
        model = build_schema(
            [make_user("shop.User"), make_order("shop.Order", target="shop.User"), make_entity("shop.Keep")],
            [NamespaceGroup(name="shop", entities=["shop.User", "shop.Order", "shop.Keep"])],
        )
        filters = SchemaFilterConfig(drop_filter=PatternSchemaFilter(exclude=("shop.keep",)))
        ExecutionCoordinator(_make_options(output_dir, action="drop"), filters).run(model, ["PostgreSQL@13"])

        lines = (output_dir / "postgresql13.sql").read_text(encoding="utf-8").splitlines()
        assert lines == [
            'DROP TABLE IF EXISTS "shop"."order" CASCADE;',
            'DROP TABLE IF EXISTS "shop"."user" CASCADE;',
        ]

    def test_filters_from_settings(self, shop_model, output_dir):
        options = _make_options(output_dir, settings={
            "schema_filter_provider": "patterns",
            "create_filter.exclude": "order",
        })
        ExecutionCoordinator(options).run(shop_model, ["PostgreSQL@13"])
        assert (output_dir / "postgresql13.sql").read_text(encoding="utf-8") == CREATE_USER + "\n"


# ============================================================================
# ERROR POLICIES
# ============================================================================


class TestResolutionErrors:
    def test_unknown_dialect(self, shop_model, output_dir):
        coordinator = ExecutionCoordinator(_make_options(output_dir))
        with pytest.raises(DialectResolutionError):
            coordinator.run(shop_model, ["Unknown@1"])

        assert not (output_dir / "unknown1.sql").exists()
        target = coordinator.result.target("Unknown@1")
        assert target.state is TargetState.FAILED
        assert target.resolution_error is not None

    def test_other_targets_still_generated(self, shop_model, output_dir):
        coordinator = ExecutionCoordinator(_make_options(output_dir))
        with pytest.raises(DialectResolutionError) as exc_info:
            coordinator.run(shop_model, ["Unknown@1", "PostgreSQL@13"])

        assert exc_info.value.identifier == "Unknown@1"
        assert (output_dir / "postgresql13.sql").exists()
        assert coordinator.result.target("PostgreSQL@13").state is TargetState.DONE
        assert not coordinator.result.success

    def test_existing_file_of_unknown_dialect_untouched(self, shop_model, output_dir):
        output_dir.mkdir()
        (output_dir / "unknown1.sql").write_text("keep\n", encoding="utf-8")
        with pytest.raises(DialectResolutionError):
            ExecutionCoordinator(_make_options(output_dir)).run(shop_model, ["Unknown@1"])
        assert (output_dir / "unknown1.sql").read_text(encoding="utf-8") == "keep\n"


class TestHaltPolicy:
    def test_halt_raises_and_writes_nothing(self, shop_model, output_dir):
        coordinator = ExecutionCoordinator(_make_options(output_dir), _user_excluded())
        with pytest.raises(GenerationError) as exc_info:
            coordinator.run(shop_model, ["PostgreSQL@13"])

        assert isinstance(exc_info.value.cause, DanglingReferenceError)
        assert not (output_dir / "postgresql13.sql").exists()
        assert coordinator.result.target("PostgreSQL@13").state is TargetState.FAILED

    def test_halt_keeps_previous_script(self, shop_model, output_dir):
        output_dir.mkdir()
        (output_dir / "postgresql13.sql").write_text("previous\n", encoding="utf-8")
        with pytest.raises(GenerationError):
            ExecutionCoordinator(_make_options(output_dir), _user_excluded()).run(shop_model, ["PostgreSQL@13"])
        assert (output_dir / "postgresql13.sql").read_text(encoding="utf-8") == "previous\n"

    def test_halt_stops_later_targets(self, shop_model, output_dir):
        with pytest.raises(GenerationError):
            ExecutionCoordinator(_make_options(output_dir), _user_excluded()).run(
                shop_model, ["PostgreSQL@13", "MySQL"]
            )
        assert not (output_dir / "mysql.sql").exists()


class TestCollectPolicy:
    def test_collect_writes_partial_script(self, shop_model, output_dir):
        options = _make_options(output_dir, halt_on_error=False)
        result = ExecutionCoordinator(options, _user_excluded()).run(shop_model, ["PostgreSQL@13"])

        content = (output_dir / "postgresql13.sql").read_text(encoding="utf-8")
        assert content == CREATE_ORDER + "\n"
        assert "ALTER TABLE" not in content

        assert len(result.errors) == 1
        assert isinstance(result.errors[0].cause, DanglingReferenceError)
        assert result.completed_with_errors
        assert not result.success
        target = result.target("PostgreSQL@13")
        assert target.state is TargetState.DONE
        assert target.errors == result.errors

    def test_errors_attributed_per_target(self, shop_model, output_dir):
        options = _make_options(output_dir, halt_on_error=False)
        result = ExecutionCoordinator(options, _user_excluded()).run(shop_model, ["PostgreSQL@13", "H2"])

        assert len(result.errors) == 2
        assert [e.dialect for e in result.target("H2").errors] == ["H2"]

    def test_to_dict_summary(self, shop_model, output_dir):
        options = _make_options(output_dir, halt_on_error=False)
        result = ExecutionCoordinator(options, _user_excluded(), run_id="run-1").run(shop_model, ["PostgreSQL@13"])

        data = result.to_dict()
        assert data["run_id"] == "run-1"
        assert data["summary"] == {"total_targets": 1, "done": 1, "failed": 0, "errors": 1}
        assert data["errors"][0]["phase"] == "create"


# ============================================================================
# MISC
# ============================================================================


class TestRunSetup:
    def test_output_directory_not_writable(self, shop_model, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(OutputWriteError):
            ExecutionCoordinator(_make_options(blocker / "ddl")).run(shop_model, ["PostgreSQL@13"])

    def test_generate_ddl(self, namespaced_definitions, output_dir):
        extra = make_entity("Setting")
        result = generate_ddl([namespaced_definitions, extra], ["PostgreSQL@13"], _make_options(output_dir))

        content = (output_dir / "postgresql13.sql").read_text(encoding="utf-8")
        assert 'CREATE TABLE "setting"' in content
        assert 'CREATE TABLE "shop"."order"' in content
        assert result.success

    def test_empty_definition_set(self, output_dir):
        result = generate_ddl([DefinitionSet()], ["PostgreSQL@13"], _make_options(output_dir))
        assert (output_dir / "postgresql13.sql").read_text(encoding="utf-8") == ""
        assert result.success
