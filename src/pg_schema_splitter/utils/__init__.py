"""Shared utilities for pg_schema_splitter."""
