"""
pg_dump section parsing.

Splits a plain-text schema dump into header/body sections and classifies
them by declared object kind.
"""

from pg_schema_splitter.exceptions import (
    HeaderParseError,
    TableReferenceError,
    UnparseableHeaderError,
)

from .header import SectionHeader
from .kinds import KIND_BUCKETS, Bucket, ObjectKind, bucket_for
from .models import SchemaModel, Section
from .parser import DumpFragments, Fragment, FragmentTag, iter_fragments, parse_schema

__all__ = [
    "HeaderParseError",
    "UnparseableHeaderError",
    "TableReferenceError",
    "SectionHeader",
    "ObjectKind",
    "Bucket",
    "KIND_BUCKETS",
    "bucket_for",
    "Section",
    "SchemaModel",
    "DumpFragments",
    "Fragment",
    "FragmentTag",
    "iter_fragments",
    "parse_schema",
]
