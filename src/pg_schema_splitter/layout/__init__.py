"""Directory layout of the split schema tree."""

from .destination import Destination, LocalDestination
from .table_ref import constraint_table, index_table, owning_table
from .writer import LayoutWriter, WriteReport, resolve_section_path, section_directory

__all__ = [
    "Destination",
    "LocalDestination",
    "LayoutWriter",
    "WriteReport",
    "resolve_section_path",
    "section_directory",
    "constraint_table",
    "index_table",
    "owning_table",
]
