"""Unit tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from src.reconciler.config import (
    ChainlaunchConfig,
    LoggingConfig,
    ReconcilerConfig,
    load_config,
)
from src.reconciler.utils.exceptions import ConfigurationError

CHAINLAUNCH_ENV = (
    "CHAINLAUNCH_URL",
    "CHAINLAUNCH_API_KEY",
    "CHAINLAUNCH_USERNAME",
    "CHAINLAUNCH_PASSWORD",
    "CHAINLAUNCH_TIMEOUT",
    "CHAINLAUNCH_VERIFY_SSL",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in CHAINLAUNCH_ENV:
        monkeypatch.delenv(name, raising=False)


class TestChainlaunchConfig:
    """Test ChainlaunchConfig dataclass."""

    def test_default_values(self):
        config = ChainlaunchConfig(url="https://cl.example.com", api_key="k")

        assert config.timeout == 60
        assert config.verify_ssl is True
        assert config.has_api_key is True
        assert config.has_username_password is False

    def test_username_password_config_is_valid(self):
        ChainlaunchConfig(url="https://cl.example.com", username="u", password="p").validate()

    def test_api_key_config_is_valid(self):
        ChainlaunchConfig(url="https://cl.example.com", api_key="k").validate()

    def test_missing_url(self):
        with pytest.raises(ConfigurationError, match="Missing Chainlaunch API URL"):
            ChainlaunchConfig(url="", api_key="k").validate()

    def test_missing_credentials(self):
        with pytest.raises(ConfigurationError, match="Missing authentication credentials"):
            ChainlaunchConfig(url="https://cl.example.com").validate()

    def test_username_without_password(self):
        with pytest.raises(ConfigurationError, match="Password is required"):
            ChainlaunchConfig(url="https://cl.example.com", api_key="k", username="u").validate()

    def test_all_problems_reported_together(self):
        with pytest.raises(ConfigurationError) as excinfo:
            ChainlaunchConfig(url="").validate()

        message = str(excinfo.value)
        assert "Missing Chainlaunch API URL" in message
        assert "Missing authentication credentials" in message


class TestReconcilerConfig:
    """Test ReconcilerConfig loading."""

    def test_require_chainlaunch_without_section(self):
        with pytest.raises(ConfigurationError, match="No Chainlaunch connection configured"):
            ReconcilerConfig().require_chainlaunch()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CHAINLAUNCH_URL", "https://cl.example.com")
        monkeypatch.setenv("CHAINLAUNCH_API_KEY", "key-123")
        monkeypatch.setenv("CHAINLAUNCH_TIMEOUT", "15")
        monkeypatch.setenv("CHAINLAUNCH_VERIFY_SSL", "false")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FORMAT", "json")

        config = ReconcilerConfig.from_env()

        assert config.chainlaunch == ChainlaunchConfig(
            url="https://cl.example.com", api_key="key-123", timeout=15, verify_ssl=False
        )
        assert config.logging.level == "DEBUG"
        assert config.logging.json_logs is True

    def test_from_env_without_url(self):
        config = ReconcilerConfig.from_env()

        assert config.chainlaunch is None
        assert config.logging == LoggingConfig()

    def test_from_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "chainlaunch": {
                        "url": "https://cl.example.com",
                        "username": "admin",
                        "password": "s3cret",
                        "verify_ssl": False,
                    },
                    "logging": {"level": "VERBOSE", "file": str(tmp_path / "run.log")},
                }
            )
        )

        config = ReconcilerConfig.from_file(config_file)

        assert config.chainlaunch.username == "admin"
        assert config.chainlaunch.verify_ssl is False
        assert config.logging.level == "VERBOSE"
        assert config.logging.file == tmp_path / "run.log"

    def test_env_fills_missing_secrets(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CHAINLAUNCH_PASSWORD", "from-env")
        monkeypatch.setenv("CHAINLAUNCH_URL", "https://ignored.example.com")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "chainlaunch:\n  url: https://cl.example.com\n  username: admin\n"
        )

        config = ReconcilerConfig.from_file(config_file)

        assert config.chainlaunch.url == "https://cl.example.com"
        assert config.chainlaunch.password == "from-env"

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        config = ReconcilerConfig.from_file(config_file)

        assert config.chainlaunch is None

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("chainlaunch: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            ReconcilerConfig.from_file(config_file)

    def test_non_mapping_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="expected dictionary, got list"):
            ReconcilerConfig.from_file(config_file)

    def test_to_file_omits_secrets(self, tmp_path):
        config = ReconcilerConfig(
            chainlaunch=ChainlaunchConfig(
                url="https://cl.example.com", api_key="key", username="u", password="p"
            )
        )
        config_file = tmp_path / "nested" / "config.yaml"

        config.to_file(config_file)

        data = yaml.safe_load(config_file.read_text())
        assert data["chainlaunch"]["url"] == "https://cl.example.com"
        assert data["chainlaunch"]["username"] == "u"
        assert "password" not in data["chainlaunch"]
        assert "api_key" not in data["chainlaunch"]
        assert data["logging"]["level"] == "INFO"


class TestLoadConfig:
    """Test load_config()."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("CHAINLAUNCH_URL", "https://cl.example.com")

        config = load_config(None)

        assert config.chainlaunch.url == "https://cl.example.com"

    def test_loads_file(self, tmp_path):
        config_file = Path(tmp_path) / "config.yaml"
        config_file.write_text("logging:\n  format: json\n")

        config = load_config(config_file)

        assert config.logging.json_logs is True
