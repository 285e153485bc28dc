import tomllib
import pytest
from pathlib import Path

from config import Config, get_config_path, load_config, save_config
from logger import get_logger, log_file_path, setup_logging


@pytest.fixture
def fake_home(tmp_path, monkeypatch):
    """Point Path.home() at a temporary directory."""
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    return tmp_path


class TestLoadConfig:
    """Tests for load_config function."""

    def test_creates_default_config(self, fake_home):
        """Test that a missing config file is created with defaults."""
        config = load_config()

        assert get_config_path() == fake_home / ".config" / "painel.toml"
        assert get_config_path().exists()
        assert config == Config.default()
        assert config.db_path == fake_home / "data" / "painel" / "db" / "painel.db"

        with open(get_config_path(), "rb") as f:
            data = tomllib.load(f)
        assert data["database"]["filename"] == "painel.db"
        assert data["archive"]["enabled"] is True

    def test_reads_existing_config(self, fake_home):
        """Test that values from the file override defaults."""
        config_path = fake_home / ".config" / "painel.toml"
        config_path.parent.mkdir(parents=True)
        config_path.write_text(
            'base_dir = "/srv/painel"\n'
            "[database]\n"
            'filename = "casa.db"\n'
            "[logging]\n"
            'level = "DEBUG"\n'
            "[archive]\n"
            "enabled = false\n",
            encoding="utf-8",
        )

        config = load_config()

        assert config.base_dir == Path("/srv/painel")
        assert config.db_path == Path("/srv/painel/db/casa.db")
        assert config.log_level == "DEBUG"
        assert config.log_dir == Path("/srv/painel/logs")
        assert config.archive_enabled is False

    def test_invalid_log_level(self, fake_home):
        """Test that an unknown log level is rejected."""
        config_path = fake_home / "painel.toml"
        config_path.write_text('[logging]\nlevel = "LOUD"\n', encoding="utf-8")

        with pytest.raises(ValueError, match="Unknown log level"):
            load_config(config_path)

    def test_explicit_path_round_trip(self, tmp_path):
        """Test saving and loading settings at a given path."""
        config_path = tmp_path / "custom.toml"
        config = Config.from_toml({"base_dir": str(tmp_path / "base")})

        save_config(config, config_path)

        assert load_config(config_path) == config


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_creates_dated_log_file(self, test_config):
        """Test that logging writes to a dated file in the log directory."""
        logger = setup_logging(test_config)
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        log_file = log_file_path(test_config.log_dir)
        assert log_file.name.startswith("painel-")
        assert "hello" in log_file.read_text(encoding="utf-8")
        assert get_logger() is logger

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_repeated_setup_does_not_duplicate_handlers(self, test_config):
        """Test that calling setup twice keeps a single pair of handlers."""
        setup_logging(test_config)
        logger = setup_logging(test_config)

        assert len(logger.handlers) == 2

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
