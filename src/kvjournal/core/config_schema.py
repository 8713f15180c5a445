"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``. Call
``Config.validated()`` to obtain a typed, validated ``KvJournalConfig``
instance. Dict-based access through ``Config.get`` keeps working unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    log_dir: Path | None = None

    @field_validator("data_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class LedgerConfig(BaseModel):
    """Which ledger backend to use and where it keeps its data."""

    backend: Literal["memory", "local"] = "local"
    path: Path = Path("~/.kvjournal-data/ledger")

    @field_validator("path", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class LoggingConfig(BaseModel):
    """Loguru sink settings."""

    level: str = "WARNING"
    file: str = ""
    rotation: str = "10 MB"
    retention: str = "7 days"

    @field_validator("level", mode="before")
    @classmethod
    def _known_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.upper()
            if v not in _LEVELS:
                raise ValueError(f"unknown log level {v!r}, expected one of {', '.join(_LEVELS)}")
        return v


class KvJournalConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so deployments can carry extra sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.kvjournal-data"))
    ledger: LedgerConfig = LedgerConfig()
    logging: LoggingConfig = LoggingConfig()
