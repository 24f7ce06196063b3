"""
Layout Writer.

Materializes a ``SchemaModel`` as a directory tree::

    <root>/tables/<schema>/<table>.sql           table DDL + constraints + indexes
    <root>/functions/<schema>/<name>.sql         functions and triggers
    <root>/tests/functions/<schema>/<name>.sql   names containing "test_"
    <root>/types/<schema>/<name>.sql             types and domains

Tables, functions and types are written with create-or-overwrite. Constraint
and index bodies are appended to the file of the table they target, so running
twice into the same root without clearing it duplicates the appended text.
The first error aborts the run and leaves what was already written in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pg_schema_splitter.exceptions import TableReferenceError
from pg_schema_splitter.dump.kinds import Bucket
from pg_schema_splitter.dump.models import SchemaModel, Section
from pg_schema_splitter.utils.logging import get_logger

from .destination import Destination, LocalDestination
from .table_ref import owning_table

logger = get_logger(__name__)

TEST_FUNCTION_MARKER = "test_"
SQL_SUFFIX = ".sql"

WRITE_ORDER: Tuple[Bucket, ...] = (
    Bucket.TABLES,
    Bucket.FUNCTIONS,
    Bucket.TYPES,
    Bucket.CONSTRAINTS,
    Bucket.INDEXES,
)
APPEND_BUCKETS: Tuple[Bucket, ...] = (Bucket.CONSTRAINTS, Bucket.INDEXES)
UNWRITTEN_BUCKETS: Tuple[Bucket, ...] = (Bucket.COMMENTS, Bucket.GENERAL)


def section_directory(root: Path, bucket: Bucket, section: Section) -> Path:
    """Directory a section of ``bucket`` is written into."""
    if bucket is Bucket.FUNCTIONS:
        if TEST_FUNCTION_MARKER in section.name:
            return root / "tests" / "functions" / section.namespace
        return root / "functions" / section.namespace
    if bucket is Bucket.TYPES:
        return root / "types" / section.namespace
    if bucket in (Bucket.TABLES, Bucket.CONSTRAINTS, Bucket.INDEXES):
        return root / "tables" / section.namespace
    raise ValueError(f"Bucket '{bucket.value}' is not written to disk")


def resolve_section_path(root: Path, bucket: Bucket, section: Section) -> Path:
    """
    Resolve the file a section is written or appended to.

    Constraints and indexes land in the file of their owning table, which is
    read from the statement body; the directory still follows the section's
    own schema.

    Raises:
        TableReferenceError: If the owning table cannot be recovered
        ValueError: For buckets that are not written
    """
    directory = section_directory(root, bucket, section)
    if bucket in APPEND_BUCKETS:
        try:
            file_stem = owning_table(bucket, section.body)
        except TableReferenceError as e:
            raise TableReferenceError(
                str(e), section_name=section.name, namespace=section.namespace
            ) from e
    else:
        file_stem = section.name
    return directory / f"{file_stem}{SQL_SUFFIX}"


@dataclass
class WriteReport:
    """Outcome of one layout write."""

    root: Path
    written: Dict[str, int] = field(default_factory=lambda: {b.value: 0 for b in WRITE_ORDER})
    skipped: Dict[str, int] = field(default_factory=dict)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    _files: Dict[Path, None] = field(default_factory=dict, repr=False)

    def record(self, bucket: Bucket, path: Path) -> None:
        self.written[bucket.value] += 1
        self._files.setdefault(path, None)

    @property
    def files(self) -> List[Path]:
        """Files touched, in first-write order, without duplicates."""
        return list(self._files)

    @property
    def total_written(self) -> int:
        return sum(self.written.values())

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())

    @property
    def duration_seconds(self) -> float:
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    def print_summary(self) -> None:
        """Print human-readable summary."""
        print("\n" + "=" * 60)
        print("SCHEMA SPLIT REPORT")
        print("=" * 60)
        print(f"Output root: {self.root}")
        for bucket_name, count in self.written.items():
            print(f"  {bucket_name:<12} {count:>6}")
        if self.total_skipped:
            print("Not written:")
            for bucket_name, count in self.skipped.items():
                print(f"  {bucket_name:<12} {count:>6}")
        print("-" * 60)
        print(f"Sections written: {self.total_written}")
        print(f"Files: {len(self._files)}")
        print(f"Duration: {self.duration_seconds:.2f}s")
        print("=" * 60 + "\n")


class LayoutWriter:
    """
    Writes the sections of a schema model below a root directory.

    Args:
        root: Destination root directory
        destination: Filesystem implementation (local disk by default)
    """

    def __init__(self, root: Path, destination: Optional[Destination] = None):
        self.root = Path(root)
        self.destination = destination or LocalDestination()

    def write(self, model: SchemaModel) -> WriteReport:
        """
        Write every table, function and type, then append constraints and indexes.

        Returns:
            WriteReport describing what was written

        Raises:
            TableReferenceError: If a constraint or index body has an unknown shape
            OSError: On any filesystem failure
        """
        report = WriteReport(root=self.root, start_time=datetime.now())
        logger.info("writer.started", root=str(self.root), **model.counts())

        for bucket in WRITE_ORDER:
            for section in model.bucket(bucket):
                try:
                    path = self._write_section(bucket, section)
                except TableReferenceError as e:
                    logger.error(
                        "writer.table_reference_failed",
                        bucket=bucket.value,
                        name=section.name,
                        namespace=section.namespace,
                        error=str(e),
                    )
                    raise
                report.record(bucket, path)

        for bucket in UNWRITTEN_BUCKETS:
            count = len(model.bucket(bucket))
            if count:
                report.skipped[bucket.value] = count
                logger.info("writer.bucket_not_written", bucket=bucket.value, sections=count)

        report.end_time = datetime.now()
        logger.info(
            "writer.completed",
            root=str(self.root),
            sections=report.total_written,
            files=len(report.files),
            skipped=report.total_skipped,
            duration_seconds=round(report.duration_seconds, 3),
        )
        return report

    def _write_section(self, bucket: Bucket, section: Section) -> Path:
        path = resolve_section_path(self.root, bucket, section)
        self.destination.make_dirs(path.parent)

        if bucket in APPEND_BUCKETS:
            self.destination.append_file(path, section.body + "\n")
            logger.debug("writer.file_appended", bucket=bucket.value, path=str(path))
        else:
            self.destination.write_file(path, section.body)
            logger.debug("writer.file_written", bucket=bucket.value, path=str(path))
        return path
