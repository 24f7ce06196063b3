"""
Section header grammar.

pg_dump wraps every object in a comment block of the form::

    --
    -- Name: orders; Type: TABLE; Schema: public; Owner: postgres
    --

After splitting the dump on ``"\\n--\\n"`` the middle line arrives as its own
fragment. The four labelled fields must appear in this order, separated by
``"; "``. Anything after the fourth field (``Tablespace:`` and the like) is
ignored. Any ``Type:`` token is accepted; tokens outside ``ObjectKind`` leave
``kind`` as None.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from pg_schema_splitter.exceptions import HeaderParseError

from .kinds import ObjectKind

HEADER_PREFIX = "-- "
FIELD_SEPARATOR = "; "
NAME_LABEL = "Name: "
TYPE_LABEL = "Type: "
SCHEMA_LABEL = "Schema: "
OWNER_LABEL = "Owner: "

# Fragments starting with this look like a header even when they fail to parse.
HEADER_MARKER = HEADER_PREFIX + NAME_LABEL


@dataclass(frozen=True)
class SectionHeader:
    """
    Parsed section header.

    Attributes:
        name: Declared object name, with any ``(signature)`` suffix removed
        kind: Declared object kind, None when the token is not recognized
        namespace: Owning schema (``-`` for schema-less objects)
        owner: Owning role; kept as dumped and never interpreted
        type_name: The ``Type:`` token as dumped
    """

    name: str
    kind: Optional[ObjectKind]
    namespace: str
    owner: str
    type_name: str = ""

    @property
    def kind_name(self) -> str:
        return self.kind.value if self.kind is not None else self.type_name

    @classmethod
    def parse(cls, fragment: str) -> "SectionHeader":
        """
        Parse one header fragment.

        Raises:
            HeaderParseError: If any part of the grammar does not match
        """
        if not fragment.startswith(HEADER_PREFIX):
            raise HeaderParseError("Missing prefix", fragment)
        parts = fragment[len(HEADER_PREFIX):].split(FIELD_SEPARATOR)

        name = _labelled(parts, 0, NAME_LABEL, fragment).split("(", 1)[0]
        type_name = _labelled(parts, 1, TYPE_LABEL, fragment)
        namespace = _labelled(parts, 2, SCHEMA_LABEL, fragment)
        owner = _labelled(parts, 3, OWNER_LABEL, fragment)

        return cls(
            name=name,
            kind=ObjectKind.from_token(type_name),
            namespace=namespace,
            owner=owner,
            type_name=type_name,
        )


def _labelled(parts: List[str], index: int, label: str, fragment: str) -> str:
    field_name = label.rstrip(": ")
    if index >= len(parts) or not parts[index].startswith(label):
        raise HeaderParseError(f"Missing {field_name}", fragment)
    return parts[index][len(label):]


def looks_like_header(fragment: str) -> bool:
    """True when the fragment starts the way a section header does."""
    return fragment.startswith(HEADER_MARKER)
