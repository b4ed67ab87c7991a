"""
OAuth2 credential handling for the People API connector.

Provides:
- Credentials from configuration (bearer token, refresh-token grant, or an
  authorized-user token file)
- Interactive installed-app OAuth flow with token storage in the user's
  configuration directory
- Token refresh for stored credentials
"""

import json
import logging
from pathlib import Path

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from gpeople_connector.config.connection import DEFAULT_SCOPES, AuthConfig
from gpeople_connector.config.loader import resolve_config_dir

# OAuth client secrets file (downloaded from Google Cloud Console)
CLIENT_SECRETS_FILE = "credentials.json"

# Stored authorized-user token file
TOKEN_FILE = "token.json"

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when authentication fails or credentials are invalid."""

    pass


def build_credentials(auth: AuthConfig) -> Credentials:
    """
    Build google-auth credentials from an AuthConfig.

    Args:
        auth: Credential settings

    Returns:
        Credentials usable by an AuthorizedSession. Refresh-token credentials
        refresh themselves on first use and whenever the server answers 401.

    Raises:
        AuthenticationError: If no credential source is configured or the
            token file cannot be read
    """
    if auth.refresh_token:
        logger.debug("Using OAuth2 refresh-token grant")
        return Credentials(
            token=auth.token,
            refresh_token=auth.refresh_token,
            client_id=auth.client_id,
            client_secret=auth.client_secret,
            token_uri=auth.token_uri,
            scopes=auth.scopes,
        )

    if auth.token:
        logger.debug("Using static bearer token")
        return Credentials(token=auth.token)

    if auth.token_file:
        token_path = Path(auth.token_file).expanduser()
        try:
            creds: Credentials = Credentials.from_authorized_user_file(
                str(token_path), auth.scopes
            )
        except (OSError, json.JSONDecodeError, ValueError) as e:
            raise AuthenticationError(
                f"Cannot load token file {token_path}: {e}"
            ) from e
        logger.debug(f"Loaded credentials from {token_path}")
        return creds

    raise AuthenticationError(
        "No credentials configured. Set auth.token, auth.refresh_token "
        "or auth.token_file, or run 'gpeople auth'."
    )


class GoogleAuth:
    """
    OAuth2 authentication manager for the CLI.

    Handles credential loading, token refresh, and the installed-app OAuth
    flow, storing the resulting authorized-user token in the config dir.

    Attributes:
        config_dir: Directory for storing credentials and tokens
        credentials_path: Path to OAuth client secrets file
        token_path: Path to the stored authorized-user token

    Usage:
        auth = GoogleAuth()
        creds = auth.authenticate()

        # Get credentials if already authenticated
        creds = auth.get_credentials()
    """

    def __init__(
        self,
        config_dir: Path | None = None,
        scopes: list[str] | None = None,
    ):
        """
        Initialize the authentication manager.

        Args:
            config_dir: Directory for storing credentials and tokens.
                       Defaults to ~/.gpeople-connector/ or
                       $GPEOPLE_CONNECTOR_CONFIG_DIR
            scopes: OAuth scopes to request (default: contacts scopes)
        """
        if config_dir is not None:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = resolve_config_dir()

        self.scopes = scopes or list(DEFAULT_SCOPES)
        self.credentials_path = self.config_dir / CLIENT_SECRETS_FILE
        self.token_path = self.config_dir / TOKEN_FILE

    def _ensure_config_dir(self) -> None:
        """
        Ensure the configuration directory exists.

        Creates the directory with secure permissions (700) if it doesn't exist.
        """
        if not self.config_dir.exists():
            self.config_dir.mkdir(parents=True, mode=0o700)
            logger.debug(f"Created config directory: {self.config_dir}")

    def _load_credentials(self) -> Credentials | None:
        """
        Load credentials from the token file if it exists.

        Returns:
            Credentials object if token file exists and is valid, None otherwise
        """
        if not self.token_path.exists():
            logger.debug("No token file found")
            return None

        try:
            creds: Credentials = Credentials.from_authorized_user_file(
                str(self.token_path), self.scopes
            )
            logger.debug("Loaded stored credentials")
            return creds
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Invalid token file {self.token_path}: {e}")
            return None

    def _save_credentials(self, creds: Credentials) -> None:
        """
        Save credentials to the token file with 600 permissions.

        Args:
            creds: Credentials object to save
        """
        self._ensure_config_dir()
        self.token_path.write_text(creds.to_json())
        self.token_path.chmod(0o600)
        logger.debug(f"Saved credentials to {self.token_path}")

    def _refresh_credentials(self, creds: Credentials) -> bool:
        """
        Attempt to refresh expired credentials.

        Args:
            creds: Credentials object to refresh

        Returns:
            True if refresh succeeded, False otherwise
        """
        if not creds.refresh_token:
            logger.debug("No refresh token available")
            return False

        try:
            creds.refresh(Request())
            logger.debug("Successfully refreshed credentials")
            return True
        except RefreshError as e:
            logger.warning(f"Failed to refresh credentials: {e}")
            return False

    def get_credentials(self) -> Credentials | None:
        """
        Get valid stored credentials if available.

        Attempts to load and refresh credentials without user interaction.

        Returns:
            Valid Credentials object, or None if not available
        """
        creds = self._load_credentials()

        if creds is None:
            return None

        if creds.valid:
            return creds

        if creds.expired and creds.refresh_token and self._refresh_credentials(creds):
            self._save_credentials(creds)
            return creds

        return None

    def authenticate(self, force_reauth: bool = False) -> Credentials:
        """
        Authenticate with Google.

        If valid credentials exist and force_reauth is False, returns existing
        credentials. Otherwise, runs the installed-app OAuth flow.

        Args:
            force_reauth: If True, ignore existing credentials and re-authenticate

        Returns:
            Valid Credentials object

        Raises:
            AuthenticationError: If authentication fails
            FileNotFoundError: If the client secrets file is not found
        """
        if not force_reauth:
            creds = self.get_credentials()
            if creds is not None:
                logger.info("Using existing credentials")
                return creds

        if not self.credentials_path.exists():
            raise FileNotFoundError(
                f"OAuth credentials file not found: {self.credentials_path}\n"
                "Please download your OAuth client credentials from "
                "Google Cloud Console and save them to this location."
            )

        logger.info("Starting OAuth flow")

        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self.credentials_path), self.scopes
            )
            new_creds: Credentials = flow.run_local_server(port=0)
        except Exception as e:
            logger.error(f"Authentication failed: {e}")
            raise AuthenticationError(f"Failed to authenticate: {e}") from e

        self._save_credentials(new_creds)
        logger.info("Successfully authenticated")
        return new_creds

    def is_authenticated(self) -> bool:
        """
        Check if valid credentials are stored.

        Returns:
            True if valid credentials exist, False otherwise
        """
        return self.get_credentials() is not None

    def clear_credentials(self) -> bool:
        """
        Remove stored credentials.

        Returns:
            True if credentials were removed, False if they didn't exist
        """
        if self.token_path.exists():
            self.token_path.unlink()
            logger.info("Cleared stored credentials")
            return True

        return False
