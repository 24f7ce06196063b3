"""
Unit tests for the layout writer.

Tests cover:
- Path routing per bucket (tables, functions, test functions, types)
- Appending constraints and indexes to their owning table file
- Verbatim round-trip of table bodies
- Overwrite vs append behavior across repeated runs
- Abort on the first unrecoverable constraint body
"""

from pathlib import Path
from typing import List, Tuple

import pytest

from pg_schema_splitter.dump import (
    Bucket,
    ObjectKind,
    SchemaModel,
    Section,
    SectionHeader,
    TableReferenceError,
    parse_schema,
)
from pg_schema_splitter.layout import LayoutWriter, resolve_section_path
from pg_schema_splitter.layout.destination import Destination, LocalDestination

ORDERS_BODY = "\nCREATE TABLE public.orders (\n    id integer NOT NULL\n);\n\n"
PKEY_BODY = "\nALTER TABLE ONLY public.orders\n    ADD CONSTRAINT orders_pkey PRIMARY KEY (id);\n"
INDEX_BODY = "\nCREATE INDEX idx_foo ON public.orders USING btree (id);\n"


def section(name: str, kind: ObjectKind, body: str, namespace: str = "public") -> Section:
    return Section(
        header=SectionHeader(name=name, kind=kind, namespace=namespace, owner="postgres"),
        body=body,
    )


class RecordingDestination(LocalDestination):
    """LocalDestination that also records each call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Path]] = []

    def make_dirs(self, path: Path) -> None:
        self.calls.append(("make_dirs", path))
        super().make_dirs(path)

    def write_file(self, path: Path, content: str) -> None:
        self.calls.append(("write_file", path))
        super().write_file(path, content)

    def append_file(self, path: Path, content: str) -> None:
        self.calls.append(("append_file", path))
        super().append_file(path, content)


class TestResolveSectionPath:
    """Pure path routing."""

    @pytest.mark.unit
    def test_table(self, tmp_path):
        path = resolve_section_path(tmp_path, Bucket.TABLES, section("orders", ObjectKind.TABLE, ORDERS_BODY))
        assert path == tmp_path / "tables" / "public" / "orders.sql"

    @pytest.mark.unit
    def test_function(self, tmp_path):
        path = resolve_section_path(tmp_path, Bucket.FUNCTIONS, section("cleanup", ObjectKind.FUNCTION, ""))
        assert path == tmp_path / "functions" / "public" / "cleanup.sql"

    @pytest.mark.unit
    def test_test_function(self, tmp_path):
        path = resolve_section_path(
            tmp_path, Bucket.FUNCTIONS, section("test_cleanup", ObjectKind.FUNCTION, "")
        )
        assert path == tmp_path / "tests" / "functions" / "public" / "test_cleanup.sql"

    @pytest.mark.unit
    def test_marker_anywhere_in_name(self, tmp_path):
        path = resolve_section_path(
            tmp_path, Bucket.FUNCTIONS, section("run_test_suite", ObjectKind.FUNCTION, "", "qa")
        )
        assert path == tmp_path / "tests" / "functions" / "qa" / "run_test_suite.sql"

    @pytest.mark.unit
    def test_type(self, tmp_path):
        path = resolve_section_path(
            tmp_path, Bucket.TYPES, section("order_status", ObjectKind.TYPE, "", "app")
        )
        assert path == tmp_path / "types" / "app" / "order_status.sql"

    @pytest.mark.unit
    def test_constraint_targets_table_file(self, tmp_path):
        path = resolve_section_path(
            tmp_path,
            Bucket.CONSTRAINTS,
            section("orders orders_pkey", ObjectKind.CONSTRAINT, PKEY_BODY),
        )
        assert path == tmp_path / "tables" / "public" / "orders.sql"

    @pytest.mark.unit
    def test_index_targets_table_file(self, tmp_path):
        path = resolve_section_path(tmp_path, Bucket.INDEXES, section("idx_foo", ObjectKind.INDEX, INDEX_BODY))
        assert path == tmp_path / "tables" / "public" / "orders.sql"

    @pytest.mark.unit
    def test_constraint_error_names_section(self, tmp_path):
        bad = section("email email_check", ObjectKind.CONSTRAINT, "\nALTER DOMAIN public.email ADD x;\n")
        with pytest.raises(TableReferenceError) as exc_info:
            resolve_section_path(tmp_path, Bucket.CONSTRAINTS, bad)

        assert exc_info.value.section_name == "email email_check"
        assert "schema='public'" in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.parametrize("bucket", [Bucket.COMMENTS, Bucket.GENERAL])
    def test_unwritten_buckets(self, tmp_path, bucket):
        with pytest.raises(ValueError, match="not written"):
            resolve_section_path(tmp_path, bucket, section("x", ObjectKind.COMMENT, ""))


class TestLayoutWriter:
    """Writing a schema model to disk."""

    @pytest.mark.unit
    def test_writes_sample_tree(self, tmp_path, sample_dump):
        report = LayoutWriter(tmp_path).write(parse_schema(sample_dump))

        written = sorted(p.relative_to(tmp_path).as_posix() for p in tmp_path.rglob("*.sql"))
        assert written == [
            "functions/public/cleanup.sql",
            "functions/public/orders orders_audit.sql",
            "tables/app/customers.sql",
            "tables/public/orders.sql",
            "tests/functions/public/test_cleanup.sql",
            "types/app/order_status.sql",
            "types/public/email.sql",
        ]
        assert report.written == {
            "tables": 2,
            "functions": 3,
            "types": 2,
            "constraints": 3,
            "indexes": 1,
        }
        assert report.skipped == {"comments": 1, "general": 2}
        assert len(report.files) == 7

    @pytest.mark.unit
    def test_table_file_collects_constraints_and_indexes(self, tmp_path, sample_dump):
        model = parse_schema(sample_dump)
        LayoutWriter(tmp_path).write(model)

        orders = (tmp_path / "tables" / "public" / "orders.sql").read_bytes().decode("utf-8")
        pkey, _, fkey = model.constraints
        index = model.indexes[0]
        assert orders == model.tables[0].body + pkey.body + "\n" + fkey.body + "\n" + index.body + "\n"

        customers = (tmp_path / "tables" / "app" / "customers.sql").read_bytes().decode("utf-8")
        assert customers.endswith('ADD CONSTRAINT customers_pkey PRIMARY KEY (id);\n\n\n')

    @pytest.mark.unit
    def test_table_round_trip_is_byte_identical(self, tmp_path):
        body = "\nCREATE TABLE public.notes (\r\n    body text DEFAULT 'café'\n);\n\n"
        model = SchemaModel(tables=[section("notes", ObjectKind.TABLE, body)])

        LayoutWriter(tmp_path).write(model)

        assert (tmp_path / "tables" / "public" / "notes.sql").read_bytes() == body.encode("utf-8")

    @pytest.mark.unit
    def test_rerun_overwrites_tables_and_doubles_appends(self, tmp_path):
        model = SchemaModel(
            tables=[section("orders", ObjectKind.TABLE, ORDERS_BODY)],
            functions=[section("cleanup", ObjectKind.FUNCTION, "\nCREATE FUNCTION f();\n")],
            constraints=[section("orders orders_pkey", ObjectKind.CONSTRAINT, PKEY_BODY)],
        )
        table_file = tmp_path / "tables" / "public" / "orders.sql"
        function_file = tmp_path / "functions" / "public" / "cleanup.sql"

        LayoutWriter(tmp_path).write(model)
        first_table = table_file.read_text(encoding="utf-8")
        first_function = function_file.read_text(encoding="utf-8")
        LayoutWriter(tmp_path).write(model)

        assert first_table == ORDERS_BODY + PKEY_BODY + "\n"
        # The table body is rewritten, then the constraint appended again
        assert table_file.read_text(encoding="utf-8") == first_table
        assert function_file.read_text(encoding="utf-8") == first_function

    @pytest.mark.unit
    def test_rerun_with_constraints_only_doubles_appends(self, tmp_path):
        model = SchemaModel(
            constraints=[section("orders orders_pkey", ObjectKind.CONSTRAINT, PKEY_BODY)],
            indexes=[section("idx_foo", ObjectKind.INDEX, INDEX_BODY)],
        )
        table_file = tmp_path / "tables" / "public" / "orders.sql"

        LayoutWriter(tmp_path).write(model)
        LayoutWriter(tmp_path).write(model)

        once = PKEY_BODY + "\n" + INDEX_BODY + "\n"
        assert table_file.read_text(encoding="utf-8") == once + once

    @pytest.mark.unit
    def test_append_creates_missing_table_file(self, tmp_path):
        model = SchemaModel(indexes=[section("idx_foo", ObjectKind.INDEX, INDEX_BODY)])

        LayoutWriter(tmp_path).write(model)

        assert (tmp_path / "tables" / "public" / "orders.sql").read_text(encoding="utf-8") == INDEX_BODY + "\n"

    @pytest.mark.unit
    def test_malformed_constraint_aborts_run(self, tmp_path):
        model = SchemaModel(
            tables=[section("orders", ObjectKind.TABLE, ORDERS_BODY)],
            constraints=[
                section("email email_check", ObjectKind.CONSTRAINT, "\nALTER DOMAIN public.email\n ADD x;\n"),
                section("orders orders_pkey", ObjectKind.CONSTRAINT, PKEY_BODY),
            ],
            indexes=[section("idx_foo", ObjectKind.INDEX, INDEX_BODY)],
        )
        destination = RecordingDestination()

        with pytest.raises(TableReferenceError, match="Constraint format unknown"):
            LayoutWriter(tmp_path, destination=destination).write(model)

        # Only the table was written; nothing after the failing section
        assert [call for call, _ in destination.calls] == ["make_dirs", "write_file"]
        assert (tmp_path / "tables" / "public" / "orders.sql").read_text(encoding="utf-8") == ORDERS_BODY

    @pytest.mark.unit
    def test_write_order_follows_buckets(self, tmp_path):
        model = SchemaModel(
            indexes=[section("idx_foo", ObjectKind.INDEX, INDEX_BODY)],
            types=[section("status", ObjectKind.TYPE, "\nCREATE TYPE s;\n")],
            constraints=[section("orders orders_pkey", ObjectKind.CONSTRAINT, PKEY_BODY)],
            functions=[section("f", ObjectKind.FUNCTION, "\nCREATE FUNCTION f();\n")],
            tables=[section("orders", ObjectKind.TABLE, ORDERS_BODY)],
        )
        destination = RecordingDestination()

        LayoutWriter(tmp_path, destination=destination).write(model)

        file_calls = [(call, p.relative_to(tmp_path).as_posix()) for call, p in destination.calls if call != "make_dirs"]
        assert file_calls == [
            ("write_file", "tables/public/orders.sql"),
            ("write_file", "functions/public/f.sql"),
            ("write_file", "types/public/status.sql"),
            ("append_file", "tables/public/orders.sql"),
            ("append_file", "tables/public/orders.sql"),
        ]

    @pytest.mark.unit
    def test_directories_created_before_each_write(self, tmp_path):
        model = SchemaModel(
            tables=[
                section("a", ObjectKind.TABLE, "\nCREATE TABLE public.a ();\n"),
                section("b", ObjectKind.TABLE, "\nCREATE TABLE public.b ();\n"),
            ]
        )
        destination = RecordingDestination()

        LayoutWriter(tmp_path, destination=destination).write(model)

        assert [call for call, _ in destination.calls] == [
            "make_dirs",
            "write_file",
            "make_dirs",
            "write_file",
        ]

    @pytest.mark.unit
    def test_filesystem_error_propagates(self, tmp_path):
        blocker = tmp_path / "tables"
        blocker.write_text("not a directory", encoding="utf-8")
        model = SchemaModel(tables=[section("orders", ObjectKind.TABLE, ORDERS_BODY)])

        with pytest.raises(OSError):
            LayoutWriter(tmp_path).write(model)

    @pytest.mark.unit
    def test_local_destination_satisfies_protocol(self):
        assert isinstance(LocalDestination(), Destination)

    @pytest.mark.unit
    def test_print_summary(self, tmp_path, sample_dump, capsys):
        report = LayoutWriter(tmp_path).write(parse_schema(sample_dump))

        report.print_summary()

        out = capsys.readouterr().out
        assert "SCHEMA SPLIT REPORT" in out
        assert "Sections written: 11" in out
        assert "comments" in out
