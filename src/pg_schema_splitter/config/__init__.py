"""Configuration management for pg_schema_splitter.

Usage:
    >>> from pg_schema_splitter.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.pg_dump_path)
"""

from pg_schema_splitter.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
