"""
gpeople_connector.auth - Credential management

Builds google-auth credentials from configuration and runs the OAuth flow.
"""

from gpeople_connector.auth.google_auth import (
    AuthenticationError,
    GoogleAuth,
    build_credentials,
)

__all__ = ["AuthenticationError", "GoogleAuth", "build_credentials"]
