"""
pg_dump Section Parser.

Splits plain-text ``pg_dump -s`` output into header/body sections and
classifies them into the buckets of a ``SchemaModel``.

Example input::

    --
    -- Name: orders; Type: TABLE; Schema: public; Owner: postgres
    --

    CREATE TABLE public.orders (
        id integer NOT NULL
    );


    --
    -- PostgreSQL database dump complete
    --

Splitting on ``"\\n--\\n"`` turns every header comment block into its own
fragment, followed by the body fragment that runs up to the next block.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Literal, Optional, Tuple

from pg_schema_splitter.exceptions import HeaderParseError, UnparseableHeaderError
from pg_schema_splitter.utils.logging import get_logger

from .header import SectionHeader, looks_like_header
from .kinds import bucket_for
from .models import SchemaModel, Section

logger = get_logger(__name__)

SECTION_BOUNDARY = "\n--\n"

UnparseablePolicy = Literal["skip", "warn", "error"]
UNPARSEABLE_POLICIES: Tuple[str, ...] = ("skip", "warn", "error")


class FragmentTag(str, Enum):
    """Classification of a dump fragment."""

    PREAMBLE = "preamble"
    SECTION = "section"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True)
class Fragment:
    """
    One classified piece of the dump.

    Attributes:
        tag: What the fragment turned out to be
        raw: Fragment text as it appears in the dump (the body, for sections)
        position: Zero-based index of the fragment in the split dump
        section: The completed section, only for ``SECTION`` fragments
        reason: The header grammar failure, only for ``UNPARSEABLE`` fragments
    """

    tag: FragmentTag
    raw: str
    position: int
    section: Optional[Section] = None
    reason: Optional[str] = None


def split_fragments(text: str) -> Iterator[str]:
    """Lazily yield the pieces of ``text`` between section boundaries."""
    start = 0
    while True:
        end = text.find(SECTION_BOUNDARY, start)
        if end == -1:
            yield text[start:]
            return
        yield text[start:end]
        start = end + len(SECTION_BOUNDARY)


def iter_fragments(text: str) -> Iterator[Fragment]:
    """
    Run the header/body state machine over the dump.

    While waiting for a header, a fragment that parses becomes the pending
    header and yields nothing. One that does not parse is yielded as
    ``UNPARSEABLE`` when it starts like a header, ``PREAMBLE`` otherwise.
    While a header is pending, the next fragment is its body and a
    ``SECTION`` fragment is yielded. A header left pending at the end of the
    dump is dropped.
    """
    pending: Optional[SectionHeader] = None

    for position, raw in enumerate(split_fragments(text)):
        if pending is None:
            try:
                pending = SectionHeader.parse(raw)
            except HeaderParseError as e:
                if looks_like_header(raw):
                    yield Fragment(FragmentTag.UNPARSEABLE, raw, position, reason=str(e))
                else:
                    yield Fragment(FragmentTag.PREAMBLE, raw, position)
            continue

        yield Fragment(
            FragmentTag.SECTION,
            raw,
            position,
            section=Section(header=pending, body=raw),
        )
        pending = None

    if pending is not None:
        logger.debug(
            "parser.dangling_header",
            name=pending.name,
            kind=pending.kind_name,
            namespace=pending.namespace,
        )


class DumpFragments:
    """
    Restartable view of a dump as a sequence of classified fragments.

    Each iteration re-splits the text, so the same instance can be walked
    any number of times.
    """

    def __init__(self, text: str):
        self.text = text

    def __iter__(self) -> Iterator[Fragment]:
        return iter_fragments(self.text)

    def sections(self) -> Iterator[Section]:
        for fragment in self:
            if fragment.section is not None:
                yield fragment.section

    def unparseable(self) -> Iterator[Fragment]:
        return (f for f in self if f.tag is FragmentTag.UNPARSEABLE)


def parse_schema(text: str, on_unparseable: UnparseablePolicy = "skip") -> SchemaModel:
    """
    Parse a schema dump into a ``SchemaModel``.

    Args:
        text: Full dump text
        on_unparseable: What to do with fragments that look like a header but
            fail the grammar: ``skip`` drops them silently, ``warn`` logs and
            drops them, ``error`` raises

    Returns:
        SchemaModel with sections in dump order within each bucket

    Raises:
        UnparseableHeaderError: When ``on_unparseable`` is ``error`` and a
            malformed header is found
        ValueError: On an unknown policy
    """
    if on_unparseable not in UNPARSEABLE_POLICIES:
        raise ValueError(
            f"Unknown unparseable-header policy: {on_unparseable!r}. "
            f"Expected one of {', '.join(UNPARSEABLE_POLICIES)}"
        )

    model = SchemaModel()
    dropped = 0
    unparseable = 0

    for fragment in iter_fragments(text):
        if fragment.tag is FragmentTag.UNPARSEABLE:
            unparseable += 1
            reason = fragment.reason or ""
            if on_unparseable == "error":
                raise UnparseableHeaderError(reason, fragment.raw, fragment.position)
            if on_unparseable == "warn":
                logger.warning(
                    "parser.unparseable_header",
                    position=fragment.position,
                    reason=reason,
                    fragment=fragment.raw.strip(),
                )
            continue

        if fragment.section is None:
            continue

        header = fragment.section.header
        bucket = bucket_for(header.kind)
        if bucket is None:
            dropped += 1
            logger.debug(
                "parser.section_dropped",
                name=header.name,
                kind=header.kind_name,
                namespace=header.namespace,
                recognized=header.kind is not None,
            )
            continue

        model.add(bucket, fragment.section)

    logger.info(
        "parser.completed",
        sections=model.total_sections,
        dropped=dropped,
        unparseable=unparseable,
        **model.counts(),
    )
    return model
