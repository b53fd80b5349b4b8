"""Tests for environment-driven configuration."""

import logging
import os
from pathlib import Path

import pytest

from testingbot_mcp.client.testingbot_api import AuthenticationError
from testingbot_mcp.config import settings

ALL_VARIABLES = (
    settings.KEY_VARIABLES
    + settings.SECRET_VARIABLES
    + ("TESTINGBOT_API_URL", "TESTINGBOT_TIMEOUT", "TESTINGBOT_DEBUG",
       "LOG_LEVEL", "MCP_ENV", "NODE_ENV")
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Start every test without TestingBot variables."""
    for name in ALL_VARIABLES:
        # setenv first so monkeypatch restores the prior state afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestCredentials:
    """Credential resolution."""

    def test_primary_variables(self, monkeypatch):
        monkeypatch.setenv("TESTINGBOT_KEY", "key")
        monkeypatch.setenv("TESTINGBOT_SECRET", "secret")

        assert settings.get_credentials() == ("key", "secret")

    def test_alternative_variables(self, monkeypatch):
        monkeypatch.setenv("TB_KEY", "tb-key")
        monkeypatch.setenv("TESTINGBOT_ACCESS_KEY", "access")

        assert settings.get_credentials() == ("tb-key", "access")

    def test_first_variable_wins(self, monkeypatch):
        monkeypatch.setenv("TESTINGBOT_KEY", "primary")
        monkeypatch.setenv("TESTINGBOT_USERNAME", "fallback")
        monkeypatch.setenv("TESTINGBOT_SECRET", "secret")

        assert settings.get_credentials()[0] == "primary"

    @pytest.mark.parametrize("variables", [
        {},
        {"TESTINGBOT_KEY": "key"},
        {"TESTINGBOT_SECRET": "secret"},
        {"TESTINGBOT_KEY": "   ", "TESTINGBOT_SECRET": "secret"},
    ])
    def test_missing_credentials(self, monkeypatch, variables):
        for name, value in variables.items():
            monkeypatch.setenv(name, value)

        with pytest.raises(AuthenticationError, match="TESTINGBOT_KEY and TESTINGBOT_SECRET"):
            settings.get_credentials()


class TestConnectionSettings:
    """API URL and timeout."""

    def test_defaults(self):
        assert settings.get_api_url() == "https://api.testingbot.com/v1"
        assert settings.get_timeout() == 30.0

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("TESTINGBOT_API_URL", "http://localhost:9000/v1")
        monkeypatch.setenv("TESTINGBOT_TIMEOUT", "5.5")

        assert settings.get_api_url() == "http://localhost:9000/v1"
        assert settings.get_timeout() == 5.5

    @pytest.mark.parametrize("raw", ["soon", "0", "-3"])
    def test_invalid_timeout_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("TESTINGBOT_TIMEOUT", raw)

        assert settings.get_timeout() == 30.0


class TestLogging:
    """Log level and debug file."""

    def test_quiet_by_default(self):
        assert settings.get_log_level() == logging.ERROR
        assert settings.get_log_file() is None

    def test_debug_mode(self, monkeypatch):
        monkeypatch.setenv("TESTINGBOT_DEBUG", "true")

        assert settings.get_log_level() == logging.INFO
        assert settings.get_log_file() == Path("logs") / "debug.log"

    @pytest.mark.parametrize("variable", ["MCP_ENV", "NODE_ENV"])
    def test_development_mode(self, monkeypatch, variable):
        monkeypatch.setenv(variable, "development")

        assert settings.is_dev_mode()
        assert settings.get_log_level() == logging.INFO

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("TESTINGBOT_DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert settings.get_log_level() == logging.DEBUG

    def test_unknown_level_ignored(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        assert settings.get_log_level() == logging.ERROR

    def test_settings_snapshot_has_no_secrets(self, monkeypatch):
        monkeypatch.setenv("TESTINGBOT_KEY", "key")
        monkeypatch.setenv("TESTINGBOT_SECRET", "secret")

        snapshot = settings.get_all_settings()

        assert snapshot["log_level"] == "ERROR"
        assert "secret" not in str(snapshot.values())


class TestDotenv:
    """.env loading."""

    def test_loads_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TESTINGBOT_KEY=from-file\nTESTINGBOT_SECRET=file-secret\n")

        assert settings.load_environment(str(env_file))
        assert os.environ["TESTINGBOT_KEY"] == "from-file"
        assert settings.get_credentials() == ("from-file", "file-secret")

    def test_existing_variables_not_overridden(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TESTINGBOT_KEY", "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text("TESTINGBOT_KEY=from-file\n")

        settings.load_environment(str(env_file))

        assert os.environ["TESTINGBOT_KEY"] == "from-env"

    def test_missing_file(self, tmp_path):
        assert not settings.load_environment(str(tmp_path / "absent.env"))
