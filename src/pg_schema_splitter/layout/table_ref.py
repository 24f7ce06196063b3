"""
Owning-table recovery for constraint and index sections.

pg_dump does not name the owning table in the header of a constraint or an
index, so it is read back from the statement text. Each statement shape has
its own rule, anchored on the fixed prefix pg_dump emits:

    ALTER TABLE ONLY public.orders
        ADD CONSTRAINT orders_pkey PRIMARY KEY (id);

    CREATE INDEX idx_orders_id ON public.orders USING btree (id);

Both rules return the bare table name: the part after the first ``.`` of the
qualified name, with surrounding whitespace and double quotes removed.
"""

from __future__ import annotations

from typing import Callable, Dict

from pg_schema_splitter.exceptions import TableReferenceError
from pg_schema_splitter.dump.kinds import Bucket

ALTER_TABLE_PREFIX = "ALTER TABLE ONLY"
INDEX_TARGET_MARKER = " ON "


def _unqualified(qualified: str, missing_message: str) -> str:
    parts = qualified.split(".")
    if len(parts) < 2:
        raise TableReferenceError(missing_message)
    return parts[1].strip().replace('"', "")


def constraint_table(body: str) -> str:
    """
    Table targeted by an ``ALTER TABLE ONLY <schema>.<table>`` statement.

    Raises:
        TableReferenceError: If the body does not start with the expected prefix
            or the target is not schema-qualified
    """
    statement = body.lstrip("\n")
    if not statement.startswith(ALTER_TABLE_PREFIX):
        raise TableReferenceError("Constraint format unknown")
    first_line = statement[len(ALTER_TABLE_PREFIX):].split("\n", 1)[0]
    return _unqualified(first_line, "Couldn't parse as schema.table")


def index_table(body: str) -> str:
    """
    Table targeted by a ``CREATE [UNIQUE] INDEX ... ON <schema>.<table>`` statement.

    ``ON ONLY <schema>.<table>``, emitted for indexes on partitioned tables, is
    not a recognized shape and fails with "No table name after schema".

    Raises:
        TableReferenceError: If there is no ``ON`` clause or no schema-qualified
            target after it
    """
    statement = body.lstrip("\n")
    _, found, target = statement.partition(INDEX_TARGET_MARKER)
    if not found:
        raise TableReferenceError("No ON clause")
    tokens = target.split()
    if not tokens:
        raise TableReferenceError("No table name")
    return _unqualified(tokens[0], "No table name after schema")


TABLE_RULES: Dict[Bucket, Callable[[str], str]] = {
    Bucket.CONSTRAINTS: constraint_table,
    Bucket.INDEXES: index_table,
}


def owning_table(bucket: Bucket, body: str) -> str:
    """Apply the rule registered for ``bucket`` to a section body."""
    try:
        rule = TABLE_RULES[bucket]
    except KeyError as e:
        raise ValueError(f"No owning-table rule for bucket '{bucket.value}'") from e
    return rule(body)
