"""
Configuration loader module for the People API connector.

Provides YAML-based configuration file loading with support for:
- Loading configuration from default or custom paths
- Graceful handling of missing configuration files
- Validation of connection, auth and logging settings
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from gpeople_connector.config.connection import ConnectionConfig

# Default configuration directory and file name
DEFAULT_CONFIG_DIR = Path.home() / ".gpeople-connector"
DEFAULT_CONFIG_FILE = "config.yaml"

# Overrides DEFAULT_CONFIG_DIR when set
CONFIG_DIR_ENV_VAR = "GPEOPLE_CONNECTOR_CONFIG_DIR"

logger = logging.getLogger(__name__)


def resolve_config_dir(config_dir: Path | str | None = None) -> Path:
    """
    Resolve the configuration directory.

    An explicit directory wins, then $GPEOPLE_CONNECTOR_CONFIG_DIR, then
    ~/.gpeople-connector. The result is user-expanded and absolute.
    """
    chosen = config_dir or os.environ.get(CONFIG_DIR_ENV_VAR) or DEFAULT_CONFIG_DIR
    return Path(chosen).expanduser().resolve()


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


class ConfigLoader:
    """
    YAML configuration file loader.

    Handles loading and validation of the YAML configuration file for the
    gpeople-connector client and CLI.

    Attributes:
        config_dir: Directory containing the configuration file
        config_file: Name of the configuration file

    Usage:
        loader = ConfigLoader()
        config = loader.load_and_validate()
        connection = ConnectionConfig.from_dict(config)

        # Load from specific file
        config = loader.load_from_file("/path/to/config.yaml")
    """

    def __init__(
        self, config_dir: Path | None = None, config_file: str = DEFAULT_CONFIG_FILE
    ):
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing the configuration file.
                       Defaults to ~/.gpeople-connector/ or
                       $GPEOPLE_CONNECTOR_CONFIG_DIR
            config_file: Name of the configuration file (default: config.yaml)
        """
        if config_dir is not None:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = resolve_config_dir()

        self.config_file = config_file

    def _get_config_path(self) -> Path:
        """
        Get the full path to the configuration file.

        Returns:
            Path to the configuration file
        """
        return self.config_dir / self.config_file

    def load(self) -> dict[str, Any]:
        """
        Load configuration from the default configuration file.

        Returns:
            Dictionary containing configuration values, or empty dict if file
            doesn't exist

        Raises:
            ConfigError: If the configuration file exists but cannot be parsed
        """
        return self.load_from_file(self._get_config_path())

    def load_from_file(self, path: Path | str) -> dict[str, Any]:
        """
        Load configuration from a specific file.

        Returns an empty dict if the file doesn't exist, allowing
        graceful operation with defaults.

        Args:
            path: Path to the configuration file

        Returns:
            Dictionary containing configuration values, or empty dict if file
            doesn't exist

        Raises:
            ConfigError: If the configuration file exists but cannot be parsed
        """
        path = Path(path)

        if not path.exists():
            logger.debug(f"Configuration file not found: {path}")
            return {}

        try:
            with open(path, encoding="utf-8") as f:
                config = yaml.safe_load(f)

            if config is None:
                logger.debug(f"Configuration file is empty: {path}")
                return {}

            if not isinstance(config, dict):
                raise ConfigError(
                    f"Configuration file must contain a YAML dictionary, "
                    f"got {type(config).__name__}"
                )

            logger.debug(f"Loaded configuration from {path}")
            return config

        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML configuration file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file: {e}") from e

    def validate(self, config: dict[str, Any]) -> None:
        """
        Validate configuration structure and values.

        Args:
            config: Configuration dictionary to validate

        Raises:
            ConfigError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ConfigError(
                f"Configuration must be a dictionary, got {type(config).__name__}"
            )

        valid_keys: dict[str, type[Any] | tuple[type[Any], ...]] = {
            # Connection options
            "base_url": str,
            "timeout": (int, float),
            "connect_timeout": (int, float),
            "proxy": str,
            "verify_ssl": bool,
            "ca_bundle": str,
            "pool_connections": int,
            "pool_maxsize": int,
            "compression": bool,
            "retry_total": int,
            "retry_backoff_factor": (int, float),
            "retry_status_forcelist": list,
            "page_size": int,
            # Auth options
            "auth": dict,
            # CLI and logging options
            "verbose": bool,
            "log_dir": str,
            "log_retention_count": int,
        }

        for key, value in config.items():
            if key in valid_keys:
                expected_type = valid_keys[key]
                # bool is an int subclass; reject it for numeric keys
                is_bool_for_number = isinstance(value, bool) and expected_type in (
                    int,
                    (int, float),
                )
                if not isinstance(value, expected_type) or is_bool_for_number:
                    if isinstance(expected_type, tuple):
                        type_name = (
                            f"{expected_type[0].__name__} or "
                            f"{expected_type[1].__name__}"
                        )
                    else:
                        type_name = expected_type.__name__
                    raise ConfigError(
                        f"Invalid type for '{key}': expected {type_name}, "
                        f"got {type(value).__name__}"
                    )

        if "base_url" in config and not config["base_url"].startswith(
            ("http://", "https://")
        ):
            raise ConfigError(
                f"base_url must start with http:// or https://, "
                f"got {config['base_url']}"
            )

        # Positive values
        for key in ("timeout", "connect_timeout"):
            if key in config and config[key] <= 0:
                raise ConfigError(f"{key} must be > 0, got {config[key]}")

        for key in ("pool_connections", "pool_maxsize", "page_size"):
            if key in config and config[key] < 1:
                raise ConfigError(f"{key} must be >= 1, got {config[key]}")

        # Non-negative values
        for key in ("retry_total", "retry_backoff_factor", "log_retention_count"):
            if key in config and config[key] < 0:
                raise ConfigError(f"{key} must be >= 0, got {config[key]}")

        if "retry_status_forcelist" in config:
            for code in config["retry_status_forcelist"]:
                if (
                    not isinstance(code, int)
                    or isinstance(code, bool)
                    or not (100 <= code <= 599)
                ):
                    raise ConfigError(
                        f"retry_status_forcelist entries must be HTTP status "
                        f"codes, got {code!r}"
                    )

        if "auth" in config:
            self._validate_auth(config["auth"])

    def _validate_auth(self, auth: dict[str, Any]) -> None:
        """
        Validate the ``auth`` section.

        Raises:
            ConfigError: If a value has the wrong type or the refresh-token
                grant is missing its client credentials
        """
        for key in (
            "token",
            "refresh_token",
            "client_id",
            "client_secret",
            "token_uri",
            "token_file",
        ):
            if key in auth and not isinstance(auth[key], str):
                raise ConfigError(
                    f"Invalid type for 'auth.{key}': expected str, "
                    f"got {type(auth[key]).__name__}"
                )

        if "scopes" in auth and not (
            isinstance(auth["scopes"], list)
            and all(isinstance(s, str) for s in auth["scopes"])
        ):
            raise ConfigError("auth.scopes must be a list of strings")

        if auth.get("refresh_token") and not (
            auth.get("client_id") and auth.get("client_secret")
        ):
            raise ConfigError(
                "auth.refresh_token requires auth.client_id and auth.client_secret"
            )

    def load_and_validate(self) -> dict[str, Any]:
        """
        Load configuration and validate it.

        Returns:
            Validated configuration dictionary

        Raises:
            ConfigError: If configuration cannot be loaded or is invalid
        """
        config = self.load()
        if config:
            self.validate(config)
        return config

    def load_connection_config(self) -> ConnectionConfig:
        """
        Load, validate and convert the configuration file.

        Returns:
            ConnectionConfig built from the file (defaults if it is missing)

        Raises:
            ConfigError: If configuration cannot be loaded or is invalid
        """
        return ConnectionConfig.from_dict(self.load_and_validate())
