"""Filesystem destination used by the layout writer."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class Destination(Protocol):
    """Where the layout writer puts its files."""

    def make_dirs(self, path: Path) -> None:
        """Create ``path`` and its parents; no-op when it already exists."""
        ...

    def write_file(self, path: Path, content: str) -> None:
        """Create or overwrite ``path`` with ``content``."""
        ...

    def append_file(self, path: Path, content: str) -> None:
        """Append ``content`` to ``path``, creating it when absent."""
        ...


class LocalDestination:
    """Destination backed by the local filesystem.

    Files are written as UTF-8 with newline translation disabled, so the
    bytes on disk match the dump text exactly. Each call opens and closes
    its file.
    """

    encoding = "utf-8"

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, content: str) -> None:
        with open(path, "w", encoding=self.encoding, newline="") as f:
            f.write(content)

    def append_file(self, path: Path, content: str) -> None:
        with open(path, "a", encoding=self.encoding, newline="") as f:
            f.write(content)
