"""
Configuration management for pg_schema_splitter.

Environment-based configuration using Pydantic BaseSettings. Values come from
the process environment and, when present, a ``.env`` file in the project
root (or the file named by ``SPLITTER_ENV_FILE``). Command-line flags take
precedence over anything configured here.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("SPLITTER_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Prefixed fields are read from ``SPLITTER_*`` variables, e.g.
    ``SPLITTER_PG_DUMP_PATH`` overrides ``pg_dump_path``.

    Unprefixed fields:
    - LOG_LEVEL: Logging level (uppercase)
    - DATABASE_URL: Default connection string handed to pg_dump
    """

    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )
    DATABASE_URL: Optional[str] = Field(
        default=None,
        validation_alias="DATABASE_URL",
        description="Connection string passed to pg_dump when --db-url is not given",
    )

    pg_dump_path: str = Field(
        default="pg_dump", description="pg_dump executable name or path"
    )
    on_unparseable: Literal["skip", "warn", "error"] = Field(
        default="skip",
        description="Policy for fragments that look like a section header but do not parse",
    )

    log_to_file: bool = Field(default=False, description="Also write logs to a file")
    log_file_dir: str = Field(default="logs", description="Directory for log files")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got: {value}"
            )
        return level

    model_config = SettingsConfigDict(
        env_prefix="SPLITTER_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
