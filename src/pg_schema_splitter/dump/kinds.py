"""Object kinds declared in pg_dump section headers and their destination buckets."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class ObjectKind(str, Enum):
    """Object kinds recognized in the ``Type:`` field of a section header."""

    TABLE = "TABLE"
    FK_CONSTRAINT = "FK CONSTRAINT"
    TYPE = "TYPE"
    TRIGGER = "TRIGGER"
    SEQUENCE = "SEQUENCE"
    FUNCTION = "FUNCTION"
    COMMENT = "COMMENT"
    DEFAULT_ACL = "DEFAULT ACL"
    INDEX = "INDEX"
    EXTENSION = "EXTENSION"
    SCHEMA = "SCHEMA"
    DOMAIN = "DOMAIN"
    DEFAULT = "DEFAULT"
    CONSTRAINT = "CONSTRAINT"
    ACL = "ACL"
    SEQUENCE_OWNED_BY = "SEQUENCE OWNED BY"

    @classmethod
    def from_token(cls, token: str) -> Optional["ObjectKind"]:
        """Kind for a header ``Type:`` token, or None when the token is not one of ours."""
        try:
            return cls(token)
        except ValueError:
            return None


class Bucket(str, Enum):
    """Destination groupings of the schema model."""

    TABLES = "tables"
    TYPES = "types"
    FUNCTIONS = "functions"
    CONSTRAINTS = "constraints"
    INDEXES = "indexes"
    COMMENTS = "comments"
    GENERAL = "general"


# None means the section is parsed but routed nowhere. Unrecognized Type:
# tokens have no ObjectKind and are routed nowhere too.
KIND_BUCKETS: Dict[ObjectKind, Optional[Bucket]] = {
    ObjectKind.TABLE: Bucket.TABLES,
    ObjectKind.TYPE: Bucket.TYPES,
    ObjectKind.DOMAIN: Bucket.TYPES,
    ObjectKind.FK_CONSTRAINT: Bucket.CONSTRAINTS,
    ObjectKind.CONSTRAINT: Bucket.CONSTRAINTS,
    ObjectKind.INDEX: Bucket.INDEXES,
    ObjectKind.EXTENSION: Bucket.GENERAL,
    ObjectKind.DEFAULT: Bucket.GENERAL,
    ObjectKind.COMMENT: Bucket.COMMENTS,
    ObjectKind.FUNCTION: Bucket.FUNCTIONS,
    ObjectKind.TRIGGER: Bucket.FUNCTIONS,
    ObjectKind.SEQUENCE: None,
    ObjectKind.SEQUENCE_OWNED_BY: None,
    ObjectKind.DEFAULT_ACL: None,
    ObjectKind.ACL: None,
    ObjectKind.SCHEMA: None,
}


def bucket_for(kind: Optional[ObjectKind]) -> Optional[Bucket]:
    """Return the bucket a section of ``kind`` belongs to, or None to drop it."""
    if kind is None:
        return None
    return KIND_BUCKETS.get(kind)
