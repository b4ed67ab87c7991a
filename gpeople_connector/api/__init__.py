"""
gpeople_connector.api - People API client

Operation façade, request building, response decoding and pagination.
"""

from gpeople_connector.api.errors import (
    APIError,
    HTTPStatusError,
    PeopleAPIError,
    ResponseDecodeError,
)
from gpeople_connector.api.pagination import PageStream
from gpeople_connector.api.people_api import PeopleClient
from gpeople_connector.api.photo import PhotoError

__all__ = [
    "APIError",
    "HTTPStatusError",
    "PageStream",
    "PeopleAPIError",
    "PeopleClient",
    "PhotoError",
    "ResponseDecodeError",
]
