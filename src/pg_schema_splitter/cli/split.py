"""
Split command: dump a database schema and lay it out as a source tree.

Usage:
    # Dump with pg_dump and split
    python -m pg_schema_splitter -d postgresql://localhost/app -o schema

    # Split an existing dump file
    python -m pg_schema_splitter -f app_schema.sql -o schema

    # Report malformed section headers instead of skipping them
    python -m pg_schema_splitter -f app_schema.sql -o schema --on-unparseable warn
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from pg_schema_splitter.config import get_settings
from pg_schema_splitter.dump import parse_schema
from pg_schema_splitter.dump.parser import UNPARSEABLE_POLICIES, UnparseablePolicy
from pg_schema_splitter.exceptions import SplitterError
from pg_schema_splitter.io import get_dump, read_dump_file
from pg_schema_splitter.layout import LayoutWriter, WriteReport
from pg_schema_splitter.utils.logging import (
    bind_context,
    configure_logging,
    redact_url_password,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pg-schema-splitter",
        description="PostgreSQL schema dump and organize",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-d",
        "--db-url",
        help="Database URL passed to pg_dump (default: DATABASE_URL setting)",
    )
    source.add_argument(
        "-f",
        "--dump-file",
        type=Path,
        help="Split an existing plain-text schema dump instead of running pg_dump",
    )
    parser.add_argument(
        "-o",
        "--output-fp",
        type=Path,
        required=True,
        help="Root directory of the generated tree",
    )
    parser.add_argument(
        "--on-unparseable",
        choices=UNPARSEABLE_POLICIES,
        default=None,
        help="What to do with malformed section headers (default: skip)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    return parser


def split_schema(
    output_fp: Path,
    db_url: Optional[str] = None,
    dump_file: Optional[Path] = None,
    on_unparseable: UnparseablePolicy = "skip",
) -> WriteReport:
    """
    Obtain the dump, parse it and write the tree below ``output_fp``.

    Raises:
        SplitterError: On dump, parse or table-reference failures
        OSError: On filesystem failures
    """
    if dump_file is not None:
        text = read_dump_file(dump_file)
    elif db_url:
        text = get_dump(db_url)
    else:
        raise SplitterError("No dump source: pass --db-url, --dump-file or set DATABASE_URL")

    model = parse_schema(text, on_unparseable=on_unparseable)
    return LayoutWriter(output_fp).write(model)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the split command.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    db_url = args.db_url or (None if args.dump_file else settings.DATABASE_URL)
    on_unparseable = args.on_unparseable or settings.on_unparseable

    logger = bind_context(
        output_root=str(args.output_fp),
        source=str(args.dump_file) if args.dump_file else "pg_dump",
    )
    logger.info("split.started", on_unparseable=on_unparseable)

    try:
        report = split_schema(
            args.output_fp,
            db_url=db_url,
            dump_file=args.dump_file,
            on_unparseable=on_unparseable,
        )
    except (SplitterError, OSError) as e:
        logger.error("split.failed", error=str(e), error_type=type(e).__name__)
        print(f"Error: {redact_url_password(str(e))}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    report.print_summary()
    logger.info("split.completed", sections=report.total_written, files=len(report.files))
    return 0
