"""
Unit tests for the package-wide exception hierarchy.
"""

import importlib.util

import pytest

from pg_schema_splitter import exceptions
from pg_schema_splitter.exceptions import (
    DumpError,
    HeaderParseError,
    SplitterError,
    TableReferenceError,
    UnparseableHeaderError,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "error_type",
    [DumpError, HeaderParseError, UnparseableHeaderError, TableReferenceError],
)
def test_every_error_is_a_splitter_error(error_type):
    assert issubclass(error_type, SplitterError)


@pytest.mark.unit
def test_areas_share_one_hierarchy():
    from pg_schema_splitter.io import pg_dump
    from pg_schema_splitter.layout import table_ref, writer

    assert pg_dump.DumpError is exceptions.DumpError
    assert table_ref.TableReferenceError is exceptions.TableReferenceError
    assert writer.TableReferenceError is exceptions.TableReferenceError
    assert importlib.util.find_spec("pg_schema_splitter.dump.exceptions") is None


@pytest.mark.unit
def test_table_reference_error_context():
    error = TableReferenceError("No ON clause", section_name="idx_orders", namespace="app")

    assert str(error) == "No ON clause (schema='app', name='idx_orders')"
    assert error.section_name == "idx_orders"
    assert error.namespace == "app"
