"""Configuration management for the Chainlaunch reconciler."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import DEFAULT_TIMEOUT_SECONDS
from .utils.exceptions import ConfigurationError


@dataclass
class ChainlaunchConfig:
    """
    Chainlaunch control-plane connection configuration.

    Authentication prefers username/password when both are set and falls
    back to the API key (sent as the Basic auth username).
    """

    url: str
    api_key: str = ""
    username: str = ""
    password: str = ""
    timeout: int = DEFAULT_TIMEOUT_SECONDS
    verify_ssl: bool = True

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def has_username_password(self) -> bool:
        return bool(self.username and self.password)

    def validate(self) -> None:
        """
        Check that the configuration can build an authenticated client.

        Raises:
            ConfigurationError: If the URL is missing, no credentials are set,
                or a username is given without a password.
        """
        problems = []
        if not self.url:
            problems.append(
                "Missing Chainlaunch API URL: set 'url' in the configuration "
                "or the CHAINLAUNCH_URL environment variable"
            )
        if not self.has_api_key and not self.has_username_password:
            problems.append(
                "Missing authentication credentials: provide either an API key "
                "(CHAINLAUNCH_API_KEY) or username and password "
                "(CHAINLAUNCH_USERNAME and CHAINLAUNCH_PASSWORD)"
            )
        if self.username and not self.password:
            problems.append("Password is required when username is provided")

        if problems:
            raise ConfigurationError("; ".join(problems), field="chainlaunch")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    file: Path | None = None

    @property
    def json_logs(self) -> bool:
        return self.format.lower() == "json"


@dataclass
class ReconcilerConfig:
    """
    Complete configuration for the reconciler.

    This combines all configuration sections.
    """

    chainlaunch: ChainlaunchConfig | None = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def require_chainlaunch(self) -> ChainlaunchConfig:
        """
        Return the validated connection section.

        Raises:
            ConfigurationError: If the section is absent or invalid.
        """
        if self.chainlaunch is None:
            raise ConfigurationError(
                "No Chainlaunch connection configured: set CHAINLAUNCH_URL or add a "
                "'chainlaunch' section to the configuration file",
                field="chainlaunch",
            )
        self.chainlaunch.validate()
        return self.chainlaunch

    @classmethod
    def from_file(cls, config_path: Path) -> "ReconcilerConfig":
        """
        Load configuration from YAML file.

        Environment variables fill in connection fields the file leaves empty,
        so secrets can stay out of the file.

        Args:
            config_path: Path to YAML config file

        Returns:
            ReconcilerConfig instance
        """
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid configuration file structure in {config_path}: "
                f"expected dictionary, got {type(data).__name__}"
            )

        chainlaunch_data = data.get("chainlaunch")
        chainlaunch = None
        if chainlaunch_data:
            env = _chainlaunch_env()
            for key, value in env.items():
                if chainlaunch_data.get(key) in (None, "") and value != "":
                    chainlaunch_data[key] = value
            chainlaunch = ChainlaunchConfig(**chainlaunch_data)

        logging_data = data.get("logging", {}) or {}
        if "file" in logging_data and logging_data["file"]:
            logging_data["file"] = Path(logging_data["file"])
        logging = LoggingConfig(**logging_data)

        return cls(chainlaunch=chainlaunch, logging=logging)

    def to_file(self, config_path: Path) -> None:
        """
        Save configuration to YAML file.

        Secrets (password, api_key) are never written.

        Args:
            config_path: Path to save config file
        """
        chainlaunch = None
        if self.chainlaunch:
            chainlaunch = {
                k: v
                for k, v in self.chainlaunch.__dict__.items()
                if k not in ("password", "api_key")
            }
        data = {
            "chainlaunch": chainlaunch,
            "logging": {
                k: str(v) if isinstance(v, Path) else v
                for k, v in self.logging.__dict__.items()
                if v is not None
            },
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_env(cls) -> "ReconcilerConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            CHAINLAUNCH_URL: Control-plane base URL
            CHAINLAUNCH_API_KEY: API key (alternative to username/password)
            CHAINLAUNCH_USERNAME: Basic auth username
            CHAINLAUNCH_PASSWORD: Basic auth password
            CHAINLAUNCH_TIMEOUT: Request timeout in seconds (default: 60)
            CHAINLAUNCH_VERIFY_SSL: Set to 'false' to disable TLS verification
            LOG_LEVEL: Logging level (default: INFO)
            LOG_FORMAT: 'console' or 'json' (default: console)

        Returns:
            ReconcilerConfig instance
        """
        chainlaunch = None
        env = _chainlaunch_env()
        if env["url"]:
            chainlaunch = ChainlaunchConfig(**env)

        logging_config = LoggingConfig(
            level=os.environ.get("LOG_LEVEL", "INFO"),
            format=os.environ.get("LOG_FORMAT", "console"),
        )

        return cls(chainlaunch=chainlaunch, logging=logging_config)


def _chainlaunch_env() -> dict:
    verify_ssl_str = os.environ.get("CHAINLAUNCH_VERIFY_SSL", "true").lower()
    return {
        "url": os.environ.get("CHAINLAUNCH_URL", ""),
        "api_key": os.environ.get("CHAINLAUNCH_API_KEY", ""),
        "username": os.environ.get("CHAINLAUNCH_USERNAME", ""),
        "password": os.environ.get("CHAINLAUNCH_PASSWORD", ""),
        "timeout": int(os.environ.get("CHAINLAUNCH_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))),
        "verify_ssl": verify_ssl_str not in ("false", "0", "no", "off"),
    }


def load_config(config_file: Path | None = None) -> ReconcilerConfig:
    """
    Load configuration from file or environment variables.

    Args:
        config_file: Optional path to YAML config file

    Returns:
        ReconcilerConfig instance

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return ReconcilerConfig.from_file(config_file)
    return ReconcilerConfig.from_env()
