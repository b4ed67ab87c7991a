"""
HTTP session construction for the People API client.

Builds a google-auth AuthorizedSession (a requests.Session that injects
and refreshes the bearer token) and mounts an adapter carrying the
connection pool and urllib3 retry settings from ConnectionConfig.
"""

import logging

import requests
from google.auth.credentials import Credentials
from google.auth.transport.requests import AuthorizedSession
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from gpeople_connector import __version__
from gpeople_connector.config.connection import ConnectionConfig

# Methods urllib3 may retry; PATCH/POST are excluded as they are not idempotent
RETRY_ALLOWED_METHODS = frozenset({"GET", "PUT", "DELETE", "HEAD", "OPTIONS"})

USER_AGENT = f"gpeople-connector/{__version__}"

logger = logging.getLogger(__name__)


def build_retry(config: ConnectionConfig) -> Retry:
    """
    Build the urllib3 retry policy from configuration.

    Args:
        config: Connection settings

    Returns:
        Retry instance; ``retry_total=0`` yields a policy that never retries
    """
    return Retry(
        total=config.retry_total,
        backoff_factor=config.retry_backoff_factor,
        status_forcelist=config.retry_status_forcelist,
        allowed_methods=RETRY_ALLOWED_METHODS,
        raise_on_status=False,
        respect_retry_after_header=True,
    )


def build_session(
    credentials: Credentials, config: ConnectionConfig
) -> requests.Session:
    """
    Create an authorized requests session configured for the People API.

    Args:
        credentials: google-auth credentials
        config: Connection settings

    Returns:
        AuthorizedSession with pool, retry, proxy, TLS and header settings applied
    """
    session = AuthorizedSession(credentials)

    adapter = HTTPAdapter(
        pool_connections=config.pool_connections,
        pool_maxsize=config.pool_maxsize,
        max_retries=build_retry(config),
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    session.headers.update(
        {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
    )
    if config.compression:
        session.headers["Accept-Encoding"] = "gzip, deflate"
    else:
        session.headers["Accept-Encoding"] = "identity"

    if config.proxy:
        session.proxies.update({"http": config.proxy, "https": config.proxy})

    session.verify = config.verify

    logger.debug(
        f"Created HTTP session (pool={config.pool_maxsize}, "
        f"retries={config.retry_total}, proxy={bool(config.proxy)})"
    )
    return session
