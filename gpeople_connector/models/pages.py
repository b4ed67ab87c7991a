"""
List options and response envelopes for paginated and batch endpoints.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from gpeople_connector.models.contact_group import ContactGroup
from gpeople_connector.models.fields import SortOrder
from gpeople_connector.models.person import Person

T = TypeVar("T")

# Maximum page size accepted by the list endpoints
MAX_PAGE_SIZE = 1000

logger = logging.getLogger(__name__)


class EnvelopeDecodeError(ValueError):
    """Raised when a list, batch or search envelope has the wrong shape."""

    pass


@dataclass
class ListOptions:
    """
    Optional paging and sorting configuration for list endpoints.

    Attributes:
        page_size: Items per page (server default when None, capped at 1000)
        sync_token: Token from a previous listing for incremental results
        request_sync_token: Ask the server for a nextSyncToken on the last page
        sort_order: Connection sort order (people/me/connections only)
    """

    page_size: int | None = None
    sync_token: str | None = None
    request_sync_token: bool = False
    sort_order: SortOrder | str | None = None

    def to_query_params(self) -> dict[str, Any]:
        """Return the options as query parameters, omitting unset ones."""
        params: dict[str, Any] = {}
        if self.page_size is not None:
            params["pageSize"] = min(self.page_size, MAX_PAGE_SIZE)
        if self.sort_order is not None:
            params["sortOrder"] = (
                self.sort_order.value
                if isinstance(self.sort_order, SortOrder)
                else self.sort_order
            )
        if self.sync_token:
            params["syncToken"] = self.sync_token
        if self.request_sync_token:
            params["requestSyncToken"] = True
        return params


@dataclass
class Page(Generic[T]):
    """One decoded page of a list response."""

    items: list[T] = field(default_factory=list)
    next_page_token: str | None = None
    next_sync_token: str | None = None
    total_items: int | None = None


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise EnvelopeDecodeError(f"'{key}' must be a string")
    return value or None


def _object_list(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise EnvelopeDecodeError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def page_decoder(
    items_key: str,
    item_decoder: Callable[[dict[str, Any]], T],
    total_key: str = "totalItems",
) -> Callable[[dict[str, Any]], Page[T]]:
    """
    Build a decoder for a page-token list envelope.

    Args:
        items_key: Name of the list holding the page items
            ("connections", "otherContacts", "contactGroups")
        item_decoder: Decoder applied to every item
        total_key: Name of the total count field

    Returns:
        Callable turning the response JSON into a Page
    """

    def decode(data: dict[str, Any]) -> Page[T]:
        if not isinstance(data, dict):
            raise EnvelopeDecodeError("List response must be an object")
        total = data.get(total_key)
        return Page(
            items=[item_decoder(item) for item in _object_list(data, items_key)],
            next_page_token=_optional_str(data, "nextPageToken"),
            next_sync_token=_optional_str(data, "nextSyncToken"),
            total_items=total if isinstance(total, int) else None,
        )

    return decode


decode_connections_page = page_decoder(
    "connections", Person.from_api_response, total_key="totalItems"
)
decode_other_contacts_page = page_decoder(
    "otherContacts", Person.from_api_response, total_key="totalSize"
)
decode_contact_groups_page = page_decoder(
    "contactGroups", ContactGroup.from_api_response, total_key="totalItems"
)


def extract_entries(
    data: dict[str, Any],
    entries_key: str,
    payload_key: str,
    item_decoder: Callable[[dict[str, Any]], T],
) -> list[T]:
    """
    Pull the payload out of every entry of a batch or search envelope.

    Entries without the payload (e.g. a failed lookup inside a batch get)
    are skipped.

    Args:
        data: Response JSON
        entries_key: Name of the entries list ("responses", "results")
        payload_key: Name of the payload inside each entry ("person",
            "contactGroup")
        item_decoder: Decoder applied to every payload

    Returns:
        Decoded payloads in response order
    """
    if not isinstance(data, dict):
        raise EnvelopeDecodeError("Envelope must be an object")

    items: list[T] = []
    for entry in _object_list(data, entries_key):
        if not isinstance(entry, dict):
            raise EnvelopeDecodeError(f"'{entries_key}' entries must be objects")
        payload = entry.get(payload_key)
        if not payload:
            logger.debug(
                f"Skipping {entries_key} entry without {payload_key}: "
                f"{entry.get('requestedResourceName', '<unknown>')}"
            )
            continue
        items.append(item_decoder(payload))
    return items


def decode_person_batch(data: dict[str, Any]) -> list[Person]:
    """Decode a people:batchGet response."""
    return extract_entries(data, "responses", "person", Person.from_api_response)


def decode_person_search(data: dict[str, Any]) -> list[Person]:
    """Decode a people:searchContacts / otherContacts:search response."""
    return extract_entries(data, "results", "person", Person.from_api_response)


def decode_group_batch(data: dict[str, Any]) -> list[ContactGroup]:
    """Decode a contactGroups:batchGet response."""
    return extract_entries(
        data, "responses", "contactGroup", ContactGroup.from_api_response
    )
