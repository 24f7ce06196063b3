"""Schema model produced by the section parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .header import SectionHeader
from .kinds import Bucket


@dataclass(frozen=True)
class Section:
    """One header/body unit describing a single database object."""

    header: SectionHeader
    body: str

    @property
    def name(self) -> str:
        return self.header.name

    @property
    def namespace(self) -> str:
        return self.header.namespace


@dataclass
class SchemaModel:
    """Classified dump content, one ordered list of sections per bucket."""

    tables: List[Section] = field(default_factory=list)
    types: List[Section] = field(default_factory=list)
    functions: List[Section] = field(default_factory=list)
    constraints: List[Section] = field(default_factory=list)
    indexes: List[Section] = field(default_factory=list)
    comments: List[Section] = field(default_factory=list)
    general: List[Section] = field(default_factory=list)

    def bucket(self, bucket: Bucket) -> List[Section]:
        """Return the section list backing ``bucket``."""
        return getattr(self, bucket.value)

    def add(self, bucket: Bucket, section: Section) -> None:
        self.bucket(bucket).append(section)

    @property
    def total_sections(self) -> int:
        return sum(len(self.bucket(b)) for b in Bucket)

    def counts(self) -> Dict[str, int]:
        """Section count per bucket name, in bucket declaration order."""
        return {b.value: len(self.bucket(b)) for b in Bucket}
