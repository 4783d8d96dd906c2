"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, stockroom.toml only contains
overrides. An empty file (or none at all) gives an in-memory catalog.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    backend: Literal["memory", "sqlite"] = "memory"
    path: Path = Path(".stockroom/stockroom.db")


class LoggingConfig(BaseModel):
    """[logging] section."""

    model_config = {"frozen": True}

    verbose: bool = False
    log_json: bool = False


class TelemetryConfig(BaseModel):
    """[telemetry] section."""

    model_config = {"frozen": True}

    enabled: bool = False


class StockroomConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
