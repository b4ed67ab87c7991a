"""
Lazy iteration over page-token list endpoints.

PageStream wraps one list endpoint (connections, otherContacts,
contactGroups) and fetches the next page only when the buffered items of
the previous one have been consumed.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

import requests

from gpeople_connector.api.query import with_params
from gpeople_connector.api.responses import handle_response
from gpeople_connector.models.pages import ListOptions, Page

T = TypeVar("T")

logger = logging.getLogger(__name__)


class PageStream(Generic[T]):
    """
    Forward-only, non-restartable iterator over a paginated endpoint.

    The first pull issues a GET against ``base_path`` plus the list options.
    Each later fetch adds the ``pageToken`` returned by the previous page.
    A page with no items ends the stream even if it carries a token.

    Any transport or decode error is raised from the pull that triggered the
    fetch, after which the stream is exhausted. Instances are not safe for
    concurrent consumers; callers must serialize pulls.

    Attributes:
        next_sync_token: nextSyncToken of the most recent page, if any
        pages_fetched: Number of pages fetched so far

    Usage:
        stream = client.list_contacts(["names"], ListOptions(page_size=100))
        for person in stream:
            print(person.display_name)
        token = stream.next_sync_token
    """

    def __init__(
        self,
        fetch: Callable[[str], requests.Response],
        base_path: str,
        decode_page: Callable[[Any], Page[T]],
        options: ListOptions | None = None,
    ):
        """
        Initialize the stream. No request is made until the first pull.

        Args:
            fetch: Issues a GET for a path relative to the API base URL
            base_path: Endpoint path including its mask parameters
            decode_page: Turns the response JSON into a Page
            options: Paging options (server defaults when None)
        """
        self._fetch = fetch
        self._base_path = base_path
        self._decode_page = decode_page
        self._options = options or ListOptions()

        self._buffer: deque[T] = deque()
        self._page_token: str | None = None
        self._started = False
        self._exhausted = False

        self.next_sync_token: str | None = None
        self.pages_fetched = 0

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        while not self._buffer:
            if self._exhausted or (self._started and not self._page_token):
                self._exhausted = True
                raise StopIteration
            self._fetch_next_page()
        return self._buffer.popleft()

    def _page_path(self) -> str:
        params = self._options.to_query_params()
        if self._page_token:
            params["pageToken"] = self._page_token
        return with_params(self._base_path, params)

    def _fetch_next_page(self) -> None:
        path = self._page_path()
        self._started = True
        logger.debug(f"Fetching page {self.pages_fetched + 1}: {path}")

        try:
            page = handle_response(self._fetch(path), self._decode_page)
        except Exception:
            self._exhausted = True
            raise

        self.pages_fetched += 1
        if page.next_sync_token:
            self.next_sync_token = page.next_sync_token

        if not page.items:
            if page.next_page_token:
                logger.warning(
                    "Received an empty page with a continuation token; "
                    "ending stream"
                )
            self._exhausted = True
            return

        self._buffer.extend(page.items)
        self._page_token = page.next_page_token

    @property
    def exhausted(self) -> bool:
        """True once the stream has ended or failed."""
        return self._exhausted and not self._buffer
