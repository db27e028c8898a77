"""
Командная строка sql-to-drizzle-schema.

Запуск:
    sql-to-drizzle-schema schema.sql
    sql-to-drizzle-schema schema.sql -o src/db/schema.ts --table-case pascal
    sql-to-drizzle-schema schema.sql --config sql2drizzle.yaml --strict
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .converter import SchemaConverter
from .core.config import DIALECT_ALIASES, load_config, merge_config
from .core.exceptions import ConverterError
from .utils.logger import setup_logger
from .utils.naming import NamingCase

DEFAULT_OUTPUT = "schema.ts"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sql-to-drizzle-schema",
        description="Convert SQL CREATE TABLE statements into a Drizzle ORM schema",
    )

    parser.add_argument("sql_file", metavar="SQL_FILE", help="SQL DDL file to convert")

    parser.add_argument(
        "-o", "--output",
        default=DEFAULT_OUTPUT,
        help=f"output TypeScript file (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "-d", "--dialect",
        choices=sorted(DIALECT_ALIASES),
        default=None,
        help="SQL dialect (default: postgresql)",
    )
    parser.add_argument("--config", metavar="FILE", help="YAML configuration file")

    parse_group = parser.add_argument_group("parsing")
    parse_group.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="fail on the first statement or clause that cannot be parsed",
    )
    parse_group.add_argument(
        "--report-unsupported",
        dest="ignore_unsupported",
        action="store_false",
        default=None,
        help="report unsupported constructs as diagnostics instead of skipping them silently",
    )

    cases = [c.value for c in NamingCase]
    gen_group = parser.add_argument_group("generation")
    gen_group.add_argument("--table-case", choices=cases, default=None, help="naming case for table exports")
    gen_group.add_argument("--column-case", choices=cases, default=None, help="naming case for column keys")
    gen_group.add_argument(
        "--no-comments",
        dest="include_comments",
        action="store_false",
        default=None,
        help="do not emit comments",
    )
    gen_group.add_argument("--prefix", default=None, help="prefix for exported table names")
    gen_group.add_argument("--indent", type=int, default=None, help="indentation width in spaces")

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument("-q", "--quiet", action="store_true", help="only print errors")
    output_group.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Значения флагов поверх конфигурации из файла; None, если флаг не задан."""
    return {
        "dialect": args.dialect,
        "parse": {
            "strict_mode": args.strict,
            "ignore_unsupported": args.ignore_unsupported,
        },
        "generate": {
            "table_name_case": args.table_case,
            "column_name_case": args.column_case,
            "include_comments": args.include_comments,
            "identifier_prefix": args.prefix,
            "indent_width": args.indent,
        },
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.INFO
    logger = setup_logger("sql2drizzle", level)

    try:
        file_config = load_config(args.config) if args.config else {}
        converter = SchemaConverter(merge_config(file_config, config_from_args(args)))
        result = converter.convert_file(args.sql_file, args.output)
    except ConverterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1

    summary = result.summary()
    logger.info(
        "parsed %d tables, %d columns, %d foreign keys",
        summary["tables"], summary["columns"], summary["foreign_keys"],
    )
    if result.diagnostics:
        logger.info("%d statements or clauses were skipped", len(result.diagnostics))

    if not args.quiet:
        print(f"Generated {args.output} ({summary['tables']} tables)")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
