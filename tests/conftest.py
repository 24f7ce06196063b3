"""Shared pytest fixtures for pg_schema_splitter tests."""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from pg_schema_splitter.config import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_DUMP = FIXTURES_DIR / "sample_schema.sql"


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Each test sees settings built from its own (monkeypatched) environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_dump_path() -> Path:
    return SAMPLE_DUMP


@pytest.fixture
def sample_dump() -> str:
    """Realistic ``pg_dump -s`` output covering every routed object kind."""
    return SAMPLE_DUMP.read_bytes().decode("utf-8")
