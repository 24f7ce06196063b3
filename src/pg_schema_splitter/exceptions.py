"""
Exception hierarchy for pg_schema_splitter.

Every error raised by the splitter derives from ``SplitterError`` so callers
can report any failure with a single handler. Filesystem errors are left as
``OSError`` and propagate unchanged.
"""

from typing import Optional


class SplitterError(Exception):
    """Base exception for all splitter errors."""

    pass


class DumpError(SplitterError):
    """Raised when the schema dump cannot be obtained or decoded."""

    pass


class HeaderParseError(SplitterError):
    """
    Raised when a fragment does not match the section header grammar.

    Args:
        message: Which part of the header grammar failed
        fragment: The raw fragment text that was being parsed
    """

    def __init__(self, message: str, fragment: str = ""):
        self.fragment = fragment
        super().__init__(message)


class UnparseableHeaderError(SplitterError):
    """
    Raised when the caller asked for header failures to be fatal.

    Args:
        reason: The underlying header grammar failure
        fragment: The raw fragment text
        position: Index of the fragment in the dump
    """

    def __init__(self, reason: str, fragment: str, position: Optional[int] = None):
        self.reason = reason
        self.fragment = fragment
        self.position = position

        preview = fragment.strip().splitlines()[0] if fragment.strip() else ""
        location = f" at fragment {position}" if position is not None else ""
        super().__init__(f"Unparseable section header{location}: {reason} ({preview!r})")


class TableReferenceError(SplitterError):
    """
    Raised when the owning table of a constraint or index cannot be recovered.

    Args:
        message: Which statement rule failed
        section_name: Declared name of the section being written
        namespace: Declared schema of the section being written
    """

    def __init__(
        self,
        message: str,
        section_name: Optional[str] = None,
        namespace: Optional[str] = None,
    ):
        self.section_name = section_name
        self.namespace = namespace

        context_parts = []
        if namespace:
            context_parts.append(f"schema='{namespace}'")
        if section_name:
            context_parts.append(f"name='{section_name}'")

        if context_parts:
            full_message = f"{message} ({', '.join(context_parts)})"
        else:
            full_message = message

        super().__init__(full_message)
