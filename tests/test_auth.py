"""
Unit tests for the authentication module.

Tests credential construction from configuration and the GoogleAuth class
for the installed-app OAuth flow and stored token management.
"""

import json
import os
from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import RefreshError

from gpeople_connector.auth.google_auth import (
    CLIENT_SECRETS_FILE,
    TOKEN_FILE,
    AuthenticationError,
    GoogleAuth,
    build_credentials,
)
from gpeople_connector.config.connection import DEFAULT_SCOPES, AuthConfig
from gpeople_connector.config.loader import CONFIG_DIR_ENV_VAR


class TestBuildCredentials:
    """Tests for build_credentials."""

    def test_bearer_token(self):
        """A bare token yields non-refreshing credentials."""
        creds = build_credentials(AuthConfig(token="ya29.token"))

        assert creds.token == "ya29.token"
        assert creds.refresh_token is None

    def test_refresh_token_grant(self):
        """A refresh token yields refreshing credentials."""
        creds = build_credentials(
            AuthConfig(
                refresh_token="1//refresh",
                client_id="client-id",
                client_secret="client-secret",
            )
        )

        assert creds.refresh_token == "1//refresh"
        assert creds.client_id == "client-id"
        assert creds.client_secret == "client-secret"
        assert creds.token_uri == "https://oauth2.googleapis.com/token"

    def test_refresh_token_preferred_over_token(self):
        """The refresh-token grant wins when both are configured."""
        creds = build_credentials(
            AuthConfig(
                token="ya29.token",
                refresh_token="1//refresh",
                client_id="id",
                client_secret="secret",
            )
        )

        assert creds.token == "ya29.token"
        assert creds.refresh_token == "1//refresh"

    @patch("gpeople_connector.auth.google_auth.Credentials")
    def test_token_file(self, mock_creds_class, tmp_path):
        """A token file is loaded as authorized-user credentials."""
        token_file = tmp_path / "token.json"
        token_file.write_text("{}")

        creds = build_credentials(AuthConfig(token_file=str(token_file)))

        mock_creds_class.from_authorized_user_file.assert_called_once_with(
            str(token_file), DEFAULT_SCOPES
        )
        assert creds is mock_creds_class.from_authorized_user_file.return_value

    def test_token_file_missing(self, tmp_path):
        """A missing token file raises AuthenticationError."""
        with pytest.raises(AuthenticationError, match="Cannot load token file"):
            build_credentials(AuthConfig(token_file=str(tmp_path / "nope.json")))

    def test_token_file_invalid(self, tmp_path):
        """A token file without the required keys raises AuthenticationError."""
        token_file = tmp_path / "token.json"
        token_file.write_text(json.dumps({"token": "x"}))

        with pytest.raises(AuthenticationError):
            build_credentials(AuthConfig(token_file=str(token_file)))

    def test_nothing_configured(self):
        """No credential source raises AuthenticationError."""
        with pytest.raises(AuthenticationError, match="No credentials configured"):
            build_credentials(AuthConfig())


class TestGoogleAuthInitialization:
    """Tests for GoogleAuth initialization."""

    def test_custom_config_dir_via_argument(self, tmp_path):
        """Custom config dir can be passed as argument."""
        auth = GoogleAuth(config_dir=tmp_path)

        assert auth.config_dir == tmp_path
        assert auth.credentials_path == tmp_path / CLIENT_SECRETS_FILE
        assert auth.token_path == tmp_path / TOKEN_FILE

    def test_config_dir_from_environment_variable(self, tmp_path):
        """Config dir can be set via environment variable."""
        with patch.dict(os.environ, {CONFIG_DIR_ENV_VAR: str(tmp_path)}):
            auth = GoogleAuth()

        assert auth.config_dir == tmp_path.resolve()

    def test_default_scopes(self, tmp_path):
        """Contacts scopes are requested by default."""
        assert GoogleAuth(config_dir=tmp_path).scopes == DEFAULT_SCOPES

    def test_custom_scopes(self, tmp_path):
        """Scopes can be overridden."""
        scopes = ["https://www.googleapis.com/auth/contacts.readonly"]
        assert GoogleAuth(config_dir=tmp_path, scopes=scopes).scopes == scopes


class TestCredentialStorage:
    """Tests for loading, saving and clearing stored credentials."""

    @pytest.fixture
    def auth(self, tmp_path):
        """GoogleAuth rooted in a fresh config directory."""
        return GoogleAuth(config_dir=tmp_path / "config")

    def test_load_credentials_no_file(self, auth):
        """No token file means no credentials."""
        assert auth._load_credentials() is None

    def test_load_credentials_invalid_json(self, auth):
        """A corrupt token file is ignored."""
        auth.config_dir.mkdir()
        auth.token_path.write_text("not json")

        assert auth._load_credentials() is None

    def test_save_credentials_creates_dir_and_file(self, auth):
        """Saving creates the config dir and a 600 token file."""
        creds = MagicMock()
        creds.to_json.return_value = '{"token": "abc"}'

        auth._save_credentials(creds)

        assert auth.token_path.read_text() == '{"token": "abc"}'
        assert (auth.token_path.stat().st_mode & 0o777) == 0o600
        assert (auth.config_dir.stat().st_mode & 0o777) == 0o700

    def test_clear_credentials(self, auth):
        """clear_credentials removes the token file."""
        auth.config_dir.mkdir()
        auth.token_path.write_text("{}")

        assert auth.clear_credentials() is True
        assert not auth.token_path.exists()
        assert auth.clear_credentials() is False


class TestGetCredentials:
    """Tests for get_credentials and token refresh."""

    @pytest.fixture
    def auth(self, tmp_path):
        """GoogleAuth with an existing token file."""
        auth = GoogleAuth(config_dir=tmp_path)
        auth.token_path.write_text("{}")
        return auth

    @patch("gpeople_connector.auth.google_auth.Credentials")
    def test_valid_credentials(self, mock_creds_class, auth):
        """Valid stored credentials are returned as-is."""
        mock_creds = MagicMock(valid=True)
        mock_creds_class.from_authorized_user_file.return_value = mock_creds

        assert auth.get_credentials() is mock_creds
        assert auth.is_authenticated()

    @patch("gpeople_connector.auth.google_auth.Request")
    @patch("gpeople_connector.auth.google_auth.Credentials")
    def test_expired_credentials_refreshed(self, mock_creds_class, mock_request, auth):
        """Expired credentials are refreshed and saved."""
        mock_creds = MagicMock(valid=False, expired=True, refresh_token="r")
        mock_creds.to_json.return_value = '{"token": "new"}'
        mock_creds_class.from_authorized_user_file.return_value = mock_creds

        assert auth.get_credentials() is mock_creds

        mock_creds.refresh.assert_called_once_with(mock_request.return_value)
        assert auth.token_path.read_text() == '{"token": "new"}'

    @patch("gpeople_connector.auth.google_auth.Request")
    @patch("gpeople_connector.auth.google_auth.Credentials")
    def test_refresh_failure_returns_none(self, mock_creds_class, mock_request, auth):
        """A failed refresh means not authenticated."""
        mock_creds = MagicMock(valid=False, expired=True, refresh_token="r")
        mock_creds.refresh.side_effect = RefreshError("invalid_grant")
        mock_creds_class.from_authorized_user_file.return_value = mock_creds

        assert auth.get_credentials() is None
        assert not auth.is_authenticated()

    @patch("gpeople_connector.auth.google_auth.Credentials")
    def test_expired_without_refresh_token(self, mock_creds_class, auth):
        """Expired credentials without a refresh token are unusable."""
        mock_creds = MagicMock(valid=False, expired=True, refresh_token=None)
        mock_creds_class.from_authorized_user_file.return_value = mock_creds

        assert auth.get_credentials() is None


class TestAuthenticate:
    """Tests for the installed-app OAuth flow."""

    def test_missing_client_secrets(self, tmp_path):
        """Without credentials.json the flow cannot start."""
        auth = GoogleAuth(config_dir=tmp_path)

        with pytest.raises(FileNotFoundError, match="credentials.json"):
            auth.authenticate()

    @patch("gpeople_connector.auth.google_auth.Credentials")
    def test_uses_existing_credentials(self, mock_creds_class, tmp_path):
        """Valid stored credentials skip the flow."""
        auth = GoogleAuth(config_dir=tmp_path)
        auth.token_path.write_text("{}")
        mock_creds = MagicMock(valid=True)
        mock_creds_class.from_authorized_user_file.return_value = mock_creds

        assert auth.authenticate() is mock_creds

    @patch("gpeople_connector.auth.google_auth.InstalledAppFlow")
    def test_runs_flow_and_saves(self, mock_flow_class, tmp_path):
        """The flow result is saved to the token file."""
        auth = GoogleAuth(config_dir=tmp_path)
        auth.credentials_path.write_text("{}")
        new_creds = MagicMock()
        new_creds.to_json.return_value = '{"token": "fresh"}'
        mock_flow_class.from_client_secrets_file.return_value.run_local_server.return_value = (
            new_creds
        )

        assert auth.authenticate(force_reauth=True) is new_creds

        mock_flow_class.from_client_secrets_file.assert_called_once_with(
            str(auth.credentials_path), DEFAULT_SCOPES
        )
        assert auth.token_path.read_text() == '{"token": "fresh"}'

    @patch("gpeople_connector.auth.google_auth.InstalledAppFlow")
    def test_flow_failure(self, mock_flow_class, tmp_path):
        """Flow errors become AuthenticationError."""
        auth = GoogleAuth(config_dir=tmp_path)
        auth.credentials_path.write_text("{}")
        mock_flow_class.from_client_secrets_file.side_effect = ValueError("bad client")

        with pytest.raises(AuthenticationError, match="bad client"):
            auth.authenticate(force_reauth=True)
