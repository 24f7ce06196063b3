"""
pg_schema_splitter - Split a PostgreSQL schema dump into a source tree.

Turns the plain-text output of ``pg_dump -s`` into one ``.sql`` file per
table, function and type, grouped by object kind and owning schema.
"""

__version__ = "0.1.0"
