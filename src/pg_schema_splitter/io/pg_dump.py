"""Obtain schema dump text from pg_dump or from a dump file on disk.

pg_dump is run in schema-only mode and its output captured whole. Any output
on stderr is treated as a failure, whatever the exit status.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Union

from pg_schema_splitter.config import get_settings
from pg_schema_splitter.exceptions import DumpError
from pg_schema_splitter.utils.logging import get_logger, redact_url_password

logger = get_logger(__name__)

SCHEMA_ONLY_FLAG = "-s"


def _decode(raw: bytes, source: str) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DumpError(f"{source} is not valid UTF-8: {e}") from e


def get_dump(db_url: str, pg_dump_path: Optional[str] = None) -> str:
    """
    Run ``pg_dump <db_url> -s`` and return its output.

    Args:
        db_url: Connection string or database name understood by pg_dump
        pg_dump_path: pg_dump executable; defaults to the configured one

    Returns:
        The schema-only dump as text

    Raises:
        DumpError: If pg_dump is missing, writes to stderr, or emits non-UTF-8
    """
    executable = pg_dump_path or get_settings().pg_dump_path
    cmd = [executable, db_url, SCHEMA_ONLY_FLAG]
    logger.info("pg_dump.started", executable=executable, db_url=db_url)

    try:
        result = subprocess.run(cmd, capture_output=True)
    except FileNotFoundError as e:
        raise DumpError(
            f"{executable} not found. Ensure PostgreSQL client tools are installed."
        ) from e

    if result.stderr:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        logger.error(
            "pg_dump.failed",
            returncode=result.returncode,
            stderr=stderr,
        )
        raise DumpError(f"pg_dump failed: {redact_url_password(stderr)}")

    text = _decode(result.stdout, "pg_dump output")
    logger.info("pg_dump.completed", returncode=result.returncode, size_bytes=len(result.stdout))
    return text


def read_dump_file(path: Union[str, Path]) -> str:
    """
    Read an existing plain-text schema dump.

    Raises:
        DumpError: If the file is missing or not valid UTF-8
    """
    dump_path = Path(path)
    try:
        raw = dump_path.read_bytes()
    except FileNotFoundError as e:
        raise DumpError(f"Dump file not found: {dump_path}") from e

    logger.info("dump_file.read", path=str(dump_path), size_bytes=len(raw))
    return _decode(raw, str(dump_path))
