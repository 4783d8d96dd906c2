"""Locating and reading ``stockroom.toml``.

Lookup order:

1. ``$STOCKROOM_CONFIG``, if set. A path that does not name a file means
   "no config", never a fallback to the walk-up search.
2. ``stockroom.toml`` in the start directory or the nearest ancestor.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import pydantic

from stockroom.config.models import StockroomConfig

CONFIG_FILENAME = "stockroom.toml"
CONFIG_ENV_VAR = "STOCKROOM_CONFIG"


class ConfigError(Exception):
    """A configuration file was found but could not be used."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{reason} in {path}")
        self.path = path
        self.reason = reason


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: the CWD), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None

    here = (start or Path.cwd()).resolve()
    return next(
        (d / CONFIG_FILENAME for d in (here, *here.parents) if (d / CONFIG_FILENAME).is_file()),
        None,
    )


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; unreadable files and TOML syntax errors raise ConfigError."""
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(path, f"Invalid TOML ({exc})") from exc
    except OSError as exc:
        raise ConfigError(path, f"Unreadable config ({exc.strerror})") from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> StockroomConfig:
    """Validate the discovered (or given) file into a StockroomConfig.

    No file at all yields the defaults. Values of the wrong shape, such as
    an unknown storage backend, raise ConfigError naming the file.
    """
    path = path if path is not None else find_config(cwd)
    if path is None:
        return StockroomConfig()
    try:
        return StockroomConfig.model_validate(read_toml(path))
    except pydantic.ValidationError as exc:
        fields = ", ".join(".".join(map(str, err["loc"])) for err in exc.errors())
        raise ConfigError(path, f"Invalid values for {fields}") from exc
