"""Database location."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "gaugesync"
DB_FILENAME: Final[str] = "gaugesync.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def data_dir() -> Path:
    """Return ``GAUGESYNC_DATA_DIR``, falling back to ``$XDG_DATA_HOME/gaugesync``."""

    configured = os.getenv("GAUGESYNC_DATA_DIR")
    if configured:
        return Path(configured).expanduser().resolve()
    xdg_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return (base / APP_DIR_NAME).expanduser().resolve()


def get_database_config() -> DatabaseConfig:
    """``DATABASE_URI`` if set, else a SQLite file in the (created) data directory."""

    uri = os.getenv("DATABASE_URI")
    if uri:
        return DatabaseConfig(uri=uri)
    directory = data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{directory / DB_FILENAME}")
