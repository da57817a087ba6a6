#!/usr/bin/env python
# ============================================================================
# DDL SCRIPT GENERATOR - COMMAND LINE
# ============================================================================
# EPOCH: 1 - DDL GENERATION
# STATUS: Entry point - ddlgen command
# PURPOSE: Generate DDL scripts from definition files for several dialects
# USAGE:
#   ddlgen --definitions model/ --dialect PostgreSQL@13 --dialect MySQL
#   ddlgen --definitions shop.yaml --dialect H2 --create-drop --collect-errors
# ============================================================================
"""
DDL Script Generator CLI

Exit codes:
    0   all scripts generated
    1   generation errors (halted, collected, unresolved dialect, I/O)
    2   usage errors
"""

import argparse
import sys
from typing import Dict, List, Optional, Sequence

from __version__ import __version__, CODENAME
from core.config import ExecutionOptions
from core.contracts import Action, TargetState
from core.errors import DdlError, DialectResolutionError, GenerationError
from core.logging import configure_logging, get_logger, ComponentType
from dialects import list_dialects
from orchestrator import ExecutionCoordinator, RunResult
from services import (
    PatternSchemaFilter,
    SchemaFilterConfig,
    SchemaModelBuilder,
    load_definitions,
)

logger = get_logger(__name__, ComponentType.CLI)

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    known = ", ".join(d["name"] for d in list_dialects())
    parser = argparse.ArgumentParser(
        prog="ddlgen",
        description="Generate DDL scripts for one or more database dialects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Dialects: {known}
  Use Family or Family@Major, e.g. PostgreSQL@13 -> postgresql13.sql

Examples:
  ddlgen --definitions model/ --dialect PostgreSQL@13 --dialect MySQL
  ddlgen --definitions shop.yaml --dialect H2 --create-drop
  ddlgen --definitions shop.yaml --dialect Oracle --drop-exclude 'audit.*'

Environment Variables:
  DDL_OUTPUT_DIR          Output directory (default: generated-resources/sql/ddl)
  DDL_DELIMITER           Statement delimiter (default: ;)
  DDL_FORMAT              Pretty-print statements (default: true)
  DDL_HALT_ON_ERROR       Abort on the first error (default: true)
  DDL_MANAGE_NAMESPACES   Emit CREATE/DROP SCHEMA (default: true)
  LOG_LEVEL / LOG_FORMAT  Logging level / "json"
        """
    )
    parser.add_argument(
        "--definitions", "-d",
        action="append",
        required=True,
        metavar="PATH",
        help="Definition file or directory (repeatable)"
    )
    parser.add_argument(
        "--dialect",
        action="append",
        required=True,
        metavar="ID",
        help="Dialect identifier, Family or Family@Major (repeatable)"
    )
    parser.add_argument("--output-dir", "-o", metavar="DIR", help="Output directory")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--create-drop",
        action="store_true",
        help="Emit drop statements before create statements"
    )
    mode.add_argument("--drop-only", action="store_true", help="Emit drop statements only")

    parser.add_argument("--delimiter", help="Statement delimiter")
    parser.add_argument(
        "--no-format",
        dest="format",
        action="store_false",
        default=None,
        help="One statement per line"
    )
    parser.add_argument(
        "--collect-errors",
        dest="halt_on_error",
        action="store_false",
        default=None,
        help="Record generation errors and continue instead of aborting"
    )
    parser.add_argument(
        "--no-manage-namespaces",
        dest="manage_namespaces",
        action="store_false",
        default=None,
        help="Do not emit CREATE/DROP SCHEMA"
    )
    parser.add_argument(
        "--import-file",
        action="append",
        default=[],
        metavar="PATH",
        help="Raw SQL file appended to the create script (repeatable)"
    )
    parser.add_argument(
        "--property", "-p",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Generator setting, e.g. storage_engine=MyISAM (repeatable)"
    )
    for phase in ("create", "drop"):
        for kind in ("include", "exclude"):
            parser.add_argument(
                f"--{phase}-{kind}",
                action="append",
                default=[],
                metavar="GLOB",
                help=f"{kind.capitalize()} tables in the {phase} script (repeatable)"
            )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--json-logs", action="store_true", help="Log as JSON")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__} ({CODENAME})")
    return parser


def parse_properties(parser: argparse.ArgumentParser, values: Sequence[str]) -> Dict[str, str]:
    properties: Dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            parser.error(f"--property expects KEY=VALUE, got '{item}'")
        properties[key.strip()] = value.strip()
    return properties


def filter_config_from_args(args: argparse.Namespace) -> Optional[SchemaFilterConfig]:
    """Pattern filters from the command line, or None to use settings."""
    if not (args.create_include or args.create_exclude or args.drop_include or args.drop_exclude):
        return None
    return SchemaFilterConfig(
        create_filter=PatternSchemaFilter(
            include=tuple(args.create_include), exclude=tuple(args.create_exclude)
        ),
        drop_filter=PatternSchemaFilter(
            include=tuple(args.drop_include), exclude=tuple(args.drop_exclude)
        ),
    )


def print_summary(result: RunResult) -> None:
    print("\n[RESULTS]\n")
    for target in result.targets:
        status_emoji = "✅" if target.state is TargetState.DONE else "❌"
        if target.state is TargetState.DONE:
            print(f"{status_emoji} {target.identifier}: {target.statement_count} statements -> {target.output_file}")
        else:
            print(f"{status_emoji} {target.identifier}: {target.state.value}")
        if target.resolution_error:
            print(f"   Error: {target.resolution_error}")
        for error in target.errors:
            print(f"   Error: {error}")

    print("\n" + "=" * 70)
    if result.success:
        print("✅ Generation completed successfully!")
    elif result.completed_with_errors:
        print(f"❌ Generation completed with {len(result.errors)} error(s)")
    else:
        print("❌ Generation failed!")
    print("=" * 70)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    properties = parse_properties(parser, args.property)

    configure_logging(
        level="DEBUG" if args.verbose else None,
        json_output=args.json_logs,
    )

    action = Action.DROP if args.drop_only else Action.CREATE
    options = ExecutionOptions.build(
        settings=properties,
        import_files=args.import_file,
        action=action,
        create_drop=args.create_drop,
        delimiter=args.delimiter,
        format=args.format,
        halt_on_error=args.halt_on_error,
        manage_namespaces=args.manage_namespaces,
        output_directory=args.output_dir,
    )

    print("=" * 70)
    print(f"DDL SCRIPT GENERATOR {__version__}")
    print("=" * 70)
    print(f"Dialects: {', '.join(args.dialect)}")
    print(f"Action: {options.action.value}")
    print(f"Output: {options.output_directory}")
    print(f"On error: {'halt' if options.halt_on_error else 'collect'}")
    print("=" * 70)

    coordinator = ExecutionCoordinator(options, filter_config_from_args(args))
    try:
        builder = SchemaModelBuilder()
        for path in args.definitions:
            for source in load_definitions(path):
                builder.add_source(source)
        result = coordinator.run(builder, args.dialect)
    except (DialectResolutionError, GenerationError) as e:
        logger.error(f"Generation failed: {e}")
        if coordinator.result is not None:
            print_summary(coordinator.result)
        return EXIT_ERRORS
    except DdlError as e:
        logger.error(f"Generation failed: {e}")
        print(f"\n❌ {e}")
        return EXIT_ERRORS

    print_summary(result)
    return EXIT_OK if result.success else EXIT_ERRORS


if __name__ == "__main__":
    sys.exit(main())
