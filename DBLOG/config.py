"""
Configuration Module - Settings for watching a log database

Values come from (lowest to highest priority):
- Defaults declared on Settings
- A .env file (loaded with python-dotenv)
- DBLOG_* environment variables
"""
import os
from enum import Enum
from typing import Optional, Tuple

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from DBLOG.errors import ConfigError

ENV_PREFIX = "DBLOG_"

DEFAULT_COLUMNS = ("timestamp", "thread", "level", "logger", "message")


class RetentionPolicy(str, Enum):
    """How many formatted lines the cache keeps in memory"""
    FULL = "full"
    CAPPED = "capped"


class Settings(BaseModel):
    """Settings for a single database watch"""
    poll_interval_ms: int = 500
    table: str = "log"
    columns: Tuple[str, str, str, str, str] = DEFAULT_COLUMNS
    retention: RetentionPolicy = RetentionPolicy.FULL
    max_lines: Optional[int] = None
    watch_filesystem: bool = False
    log_dir: str = "app_log"
    log_level: str = "INFO"

    @field_validator("poll_interval_ms")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("poll_interval_ms must be positive")
        return value

    @field_validator("table", "columns")
    @classmethod
    def _identifiers(cls, value):
        # Table and column names end up inside SQL text, they cannot be bound
        names = [value] if isinstance(value, str) else list(value)
        for name in names:
            if not name.isidentifier():
                raise ValueError(f"not a valid SQL identifier: {name!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return value

    @model_validator(mode="after")
    def _capped_needs_limit(self) -> "Settings":
        if self.retention is RetentionPolicy.CAPPED:
            if self.max_lines is None or self.max_lines <= 0:
                raise ValueError("capped retention requires a positive max_lines")
        return self

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds"""
        return self.poll_interval_ms / 1000.0


def _from_environment() -> dict:
    values = {}
    for field in Settings.model_fields:
        raw = os.getenv(ENV_PREFIX + field.upper())
        if raw is None:
            continue
        if field == "columns":
            values[field] = tuple(part.strip() for part in raw.split(","))
        else:
            values[field] = raw
    return values


def load_settings(env_file: Optional[str] = None, **overrides) -> Settings:
    """
    Build Settings from the environment

    Args:
        env_file: Optional path of a .env file (default: search upwards from the cwd)
        **overrides: Explicit values that win over the environment

    Raises:
        ConfigError: If any value fails validation
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))
    values = _from_environment()
    values.update(overrides)
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
