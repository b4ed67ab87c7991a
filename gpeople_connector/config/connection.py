"""
Connection and authentication settings for the People API client.

Everything here is handed to the transport (requests / urllib3) or to
google-auth as-is; the client itself does not interpret these values.

Configuration file section (config.yaml):

    base_url: https://people.googleapis.com/v1
    timeout: 30
    connect_timeout: 10
    proxy: http://proxy.local:3128
    verify_ssl: true
    pool_maxsize: 10
    retry_total: 3
    retry_backoff_factor: 0.5
    retry_status_forcelist: [429, 500, 502, 503, 504]
    auth:
      client_id: ...
      client_secret: ...
      refresh_token: ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# People API v1 endpoint
DEFAULT_BASE_URL = "https://people.googleapis.com/v1"

# Google OAuth2 token endpoint used for the refresh-token grant
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"

# OAuth2 scopes required for contacts and other contacts access
DEFAULT_SCOPES = [
    "https://www.googleapis.com/auth/contacts",
    "https://www.googleapis.com/auth/contacts.other.readonly",
]

# HTTP defaults (seconds)
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10.0

# Connection pool defaults
DEFAULT_POOL_CONNECTIONS = 10
DEFAULT_POOL_MAXSIZE = 10

# Transport retry defaults (urllib3 Retry); 0 disables retries
DEFAULT_RETRY_TOTAL = 0
DEFAULT_RETRY_BACKOFF_FACTOR = 0.5
DEFAULT_RETRY_STATUS_FORCELIST = [429, 500, 502, 503, 504]


@dataclass
class AuthConfig:
    """
    Credential settings.

    Exactly one source is used, in this order:
        1. refresh_token (+ client_id/client_secret): OAuth2 refresh-token grant
        2. token: a bearer access token, used until it expires
        3. token_file: an authorized-user JSON file (as written by the
           ``gpeople auth`` command)
    """

    token: str | None = None
    refresh_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    token_uri: str = DEFAULT_TOKEN_URI
    token_file: str | None = None
    scopes: list[str] = field(default_factory=lambda: list(DEFAULT_SCOPES))

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> AuthConfig:
        """Create an AuthConfig from the ``auth`` mapping of the config file."""
        if not data:
            return cls()
        return cls(
            token=data.get("token"),
            refresh_token=data.get("refresh_token"),
            client_id=data.get("client_id"),
            client_secret=data.get("client_secret"),
            token_uri=data.get("token_uri", DEFAULT_TOKEN_URI),
            token_file=data.get("token_file"),
            scopes=list(data.get("scopes", DEFAULT_SCOPES)),
        )


@dataclass
class ConnectionConfig:
    """
    Transport settings forwarded to the requests session.

    Attributes:
        base_url: API root every request path is joined onto
        timeout: Read timeout per request
        connect_timeout: Connect timeout per request
        proxy: Proxy URL used for https traffic, if any
        verify_ssl: Verify server certificates
        ca_bundle: Custom CA bundle path (overrides verify_ssl when set)
        pool_connections: Number of connection pools to cache
        pool_maxsize: Maximum connections kept per pool
        compression: Ask for gzip-encoded responses
        retry_total: urllib3 retry budget (0 disables retries)
        retry_backoff_factor: urllib3 backoff factor
        retry_status_forcelist: Status codes urllib3 retries on
        page_size: Default page size for list operations
        auth: Credential settings
    """

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    proxy: str | None = None
    verify_ssl: bool = True
    ca_bundle: str | None = None
    pool_connections: int = DEFAULT_POOL_CONNECTIONS
    pool_maxsize: int = DEFAULT_POOL_MAXSIZE
    compression: bool = True
    retry_total: int = DEFAULT_RETRY_TOTAL
    retry_backoff_factor: float = DEFAULT_RETRY_BACKOFF_FACTOR
    retry_status_forcelist: list[int] = field(
        default_factory=lambda: list(DEFAULT_RETRY_STATUS_FORCELIST)
    )
    page_size: int | None = None
    auth: AuthConfig = field(default_factory=AuthConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ConnectionConfig:
        """
        Create a ConnectionConfig from a loaded configuration dictionary.

        Unknown keys are ignored so that the same file can carry CLI and
        logging options. Values are expected to have been validated by
        ConfigLoader.validate().
        """
        if not data:
            return cls()

        kwargs: dict[str, Any] = {}
        for key in (
            "base_url",
            "timeout",
            "connect_timeout",
            "proxy",
            "verify_ssl",
            "ca_bundle",
            "pool_connections",
            "pool_maxsize",
            "compression",
            "retry_total",
            "retry_backoff_factor",
            "retry_status_forcelist",
            "page_size",
        ):
            if key in data:
                kwargs[key] = data[key]

        return cls(auth=AuthConfig.from_dict(data.get("auth")), **kwargs)

    @property
    def request_timeout(self) -> tuple[float, float]:
        """(connect, read) timeout tuple in the form requests expects."""
        return (self.connect_timeout, self.timeout)

    @property
    def verify(self) -> bool | str:
        """Value for requests' ``verify`` argument."""
        return self.ca_bundle if self.ca_bundle else self.verify_ssl
