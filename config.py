"""Painel settings.

Settings live in ``~/.config/painel.toml``. The file is written with defaults
the first time Painel runs; missing keys in an existing file fall back to the
same defaults, resolved against ``base_dir``.

Example file::

    base_dir = "/home/daniela/data/painel"

    [database]
    filename = "painel.db"

    [logging]
    level = "INFO"

    [archive]
    enabled = true
"""

import logging
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, Optional
import tomllib
import tomli_w

DEFAULT_DB_FILENAME = "painel.db"
DEFAULT_LOG_LEVEL = "INFO"


def _default_base_dir() -> Path:
    return Path.home() / "data" / "painel"


@dataclass
class Config:
    """Resolved settings; every path is absolute or relative to the cwd."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    archive_enabled: bool
    archive_dir: Path

    @property
    def db_path(self) -> Path:
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        return cls.from_toml({})

    @classmethod
    def from_toml(cls, data: Dict[str, Any]) -> "Config":
        """Build settings from parsed TOML, filling gaps with defaults.

        Raises:
            ValueError: If the log level is not a logging level name.
        """
        base_dir = Path(data.get("base_dir", _default_base_dir()))
        database = data.get("database", {})
        logs = data.get("logging", {})
        archive = data.get("archive", {})

        log_level = str(logs.get("level", DEFAULT_LOG_LEVEL)).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"Unknown log level in config: {log_level}")

        return cls(
            base_dir=base_dir,
            db_data_dir=Path(database.get("data_dir", base_dir / "db")),
            db_filename=database.get("filename", DEFAULT_DB_FILENAME),
            log_level=log_level,
            log_dir=Path(logs.get("log_dir", base_dir / "logs")),
            archive_enabled=bool(archive.get("enabled", True)),
            archive_dir=Path(archive.get("archive_dir", base_dir / "archives")),
        )

    def to_toml(self) -> Dict[str, Any]:
        return {
            "base_dir": str(self.base_dir),
            "database": {
                "data_dir": str(self.db_data_dir),
                "filename": self.db_filename,
            },
            "logging": {
                "level": self.log_level,
                "log_dir": str(self.log_dir),
            },
            "archive": {
                "enabled": self.archive_enabled,
                "archive_dir": str(self.archive_dir),
            },
        }


def get_config_path() -> Path:
    return Path.home() / ".config" / "painel.toml"


def get_migrations_dir() -> Path:
    """SQL migrations shipped next to the code (not configurable)."""
    return Path(__file__).parent / "db" / "migrations"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Read the settings file, writing a default one if it doesn't exist.

    Args:
        config_path: Settings file; defaults to ``get_config_path()``.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        config = Config.default()
        save_config(config, config_path)
        return config

    with open(config_path, "rb") as f:
        return Config.from_toml(tomllib.load(f))


def save_config(config: Config, config_path: Optional[Path] = None) -> None:
    config_path = config_path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config.to_toml(), f)
