"""CLI package for gpeople_connector."""

from gpeople_connector.cli.formatters import format_person_row, show_groups, show_person
from gpeople_connector.cli.main import (
    cli,
    get_client,
    get_config_dir,
    get_config_file,
)
from gpeople_connector.config.loader import DEFAULT_CONFIG_DIR, DEFAULT_CONFIG_FILE

__all__ = [
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_CONFIG_FILE",
    "cli",
    "format_person_row",
    "get_client",
    "get_config_dir",
    "get_config_file",
    "show_groups",
    "show_person",
]
