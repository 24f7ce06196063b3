"""Command-line interface for pg_schema_splitter."""
