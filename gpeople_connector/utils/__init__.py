"""
gpeople_connector.utils - Utility module

Logging setup for the command line.
"""

from gpeople_connector.utils.logging import cleanup_old_logs, setup_logging

__all__ = ["cleanup_old_logs", "setup_logging"]
