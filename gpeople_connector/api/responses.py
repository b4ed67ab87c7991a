"""
Response decoding shared by every People API operation.

Maps an HTTP response to either a decoded payload or a PeopleAPIError:
- 2xx: parse the JSON body and hand it to a decoder
- non-2xx with a Google error body: APIError(code, message, status)
- non-2xx with anything else: HTTPStatusError(status_code)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import requests

from gpeople_connector.api.errors import APIError, HTTPStatusError, ResponseDecodeError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def raise_for_error(response: requests.Response) -> None:
    """
    Raise the structured error for a non-2xx response.

    Args:
        response: HTTP response

    Raises:
        APIError: If the body is a Google error object
        HTTPStatusError: If the body cannot be parsed as one
    """
    if _is_success(response):
        return

    status_code = response.status_code
    try:
        error = response.json()["error"]
        if not isinstance(error, dict):
            raise TypeError("error is not an object")
        message = error.get("message") or response.reason or ""
        status = error.get("status")
        details = error.get("details")
        code = error.get("code", status_code)
    except (ValueError, KeyError, TypeError):
        logger.error(f"Request failed with status {status_code} (unparseable body)")
        raise HTTPStatusError(status_code, response.text) from None

    logger.error(f"Request failed with status {status_code}: {message}")
    raise APIError(
        code=code if isinstance(code, int) else status_code,
        message=str(message),
        status=status if isinstance(status, str) else None,
        details=details if isinstance(details, list) else None,
    )


def _decode(
    response: requests.Response, data: Any, decode: Callable[[Any], T]
) -> T:
    try:
        return decode(data)
    except (ValueError, KeyError, TypeError) as e:
        raise ResponseDecodeError(
            f"Unexpected response shape: {e}", status_code=response.status_code
        ) from e


def handle_response(response: requests.Response, decode: Callable[[Any], T]) -> T:
    """
    Decode a response that must carry a JSON payload.

    Args:
        response: HTTP response
        decode: Callable mapping the parsed JSON to the result type

    Returns:
        Decoded payload

    Raises:
        ResponseDecodeError: If the body is not JSON or not the expected shape
        APIError / HTTPStatusError: For non-2xx responses
    """
    raise_for_error(response)

    try:
        data = response.json()
    except ValueError as e:
        raise ResponseDecodeError(
            "Response body is not valid JSON", status_code=response.status_code
        ) from e

    return _decode(response, data, decode)


def handle_response_with_null(
    response: requests.Response, decode: Callable[[Any], T]
) -> T | None:
    """
    Decode a response whose success body may legitimately be empty.

    An empty body or an empty JSON object yields ``None``.
    """
    raise_for_error(response)

    if not response.content or not response.content.strip():
        return None

    try:
        data = response.json()
    except ValueError as e:
        raise ResponseDecodeError(
            "Response body is not valid JSON", status_code=response.status_code
        ) from e

    if not data:
        return None

    return _decode(response, data, decode)


def handle_delete_response(response: requests.Response) -> None:
    """Accept any 2xx response to a delete; the body is ignored."""
    raise_for_error(response)


def handle_upload_photo_response(response: requests.Response) -> None:
    """Accept any 2xx response to a photo upload or removal; the body is ignored."""
    raise_for_error(response)


def handle_modify_response(response: requests.Response) -> None:
    """Accept any 2xx response to a membership change; the body is ignored."""
    raise_for_error(response)
