"""
gpeople_connector.config - Configuration management module

Contains configuration loading, validation, and connection settings.
"""

from gpeople_connector.config.connection import AuthConfig, ConnectionConfig
from gpeople_connector.config.loader import ConfigError, ConfigLoader

__all__ = [
    "AuthConfig",
    "ConfigError",
    "ConfigLoader",
    "ConnectionConfig",
]
