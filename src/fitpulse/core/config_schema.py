"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``FitpulseConfig``
instance.  Dict-based access through ``Config.get`` keeps working unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


def _expand(v: Any) -> Any:
    if isinstance(v, str):
        return Path(v).expanduser()
    if isinstance(v, Path):
        return v.expanduser()
    return v


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    log_dir: Path | None = None
    records_dir: Path | None = None

    @field_validator("data_dir", "log_dir", "records_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        return _expand(v)


class IngestConfig(BaseModel):
    """Header resolution tuning and learned-alias persistence."""

    alias_store_path: Path | None = None
    match_threshold: float = 0.6
    fuzzy_threshold: float = 0.7
    learn: bool = True

    @field_validator("alias_store_path", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        return _expand(v)

    @field_validator("match_threshold", "fuzzy_threshold")
    @classmethod
    def _unit_interval(cls, v: float) -> float:
        if not 0 < v <= 1:
            raise ValueError(f"threshold must be in (0, 1], got {v}")
        return v


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    to_file: bool = False

    @model_validator(mode="after")
    def _known_level(self) -> LoggingConfig:
        level = self.level.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {self.level!r}")
        self.level = level
        return self


class FitpulseConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.fitpulse-data"))
    ingest: IngestConfig = IngestConfig()
    logging: LoggingConfig = LoggingConfig()
