"""Dump sources: the pg_dump process and dump files on disk."""

from .pg_dump import get_dump, read_dump_file

__all__ = ["get_dump", "read_dump_file"]
