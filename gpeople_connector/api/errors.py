"""
Exceptions raised by the People API client.

Transport failures (connection errors, timeouts, TLS errors) are not
wrapped: they propagate as ``requests.RequestException`` subclasses.
"""

from __future__ import annotations

from typing import Any


class PeopleAPIError(Exception):
    """Base class for errors raised by a People API operation."""

    pass


class APIError(PeopleAPIError):
    """
    Raised when the API answers with a non-2xx status and an error body.

    Attributes:
        code: HTTP status code
        message: Error message from the body
        status: Canonical status string (e.g. "NOT_FOUND"), if present
        details: Raw ``details`` list from the body
    """

    def __init__(
        self,
        code: int,
        message: str,
        status: str | None = None,
        details: list[Any] | None = None,
    ):
        prefix = f"{code} {status}" if status else str(code)
        super().__init__(f"{prefix}: {message}")
        self.code = code
        self.message = message
        self.status = status
        self.details = details or []

    @property
    def status_code(self) -> int:
        return self.code


class HTTPStatusError(PeopleAPIError):
    """Raised for a non-2xx response whose body is not a parseable error."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"HTTP {status_code} with unparseable error body")
        self.status_code = status_code
        self.body = body


class ResponseDecodeError(PeopleAPIError):
    """Raised when a 2xx response body does not match the expected shape."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
