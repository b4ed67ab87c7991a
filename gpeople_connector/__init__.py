"""
gpeople_connector - Typed client for the Google People API.

Exposes contacts, contact groups and "other contacts" operations over
plain HTTPS using google-auth credentials and a requests session.
"""

__version__ = "0.1.0"

from gpeople_connector.api.errors import (
    APIError,
    HTTPStatusError,
    PeopleAPIError,
    ResponseDecodeError,
)
from gpeople_connector.api.people_api import PeopleClient

__all__ = [
    "__version__",
    "PeopleClient",
    "PeopleAPIError",
    "APIError",
    "HTTPStatusError",
    "ResponseDecodeError",
]
