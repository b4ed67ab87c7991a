"""
Entry point for running gpeople_connector as a module.

Usage:
    python -m gpeople_connector --help
    python -m gpeople_connector auth
    python -m gpeople_connector list --limit 20
"""

from gpeople_connector.cli import cli

if __name__ == "__main__":
    cli()
