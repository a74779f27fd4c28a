"""
Cursor pagination for ChannelApe list endpoints.

List endpoints answer with a page of items plus a pagination block::

    {"orders": [...], "pagination": {"lastPage": false, "lastKey": "abc"}}

The next page is requested by echoing ``lastKey`` back as a query parameter.
Pages are fetched strictly one after another since each request depends on
the previous page's cursor.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .errors import (
    ChannelApeError,
    PaginationLimitError,
    decode_json,
    expect_status,
    malformed_response_error,
)
from .http import RetryingRequestClient
from ..utils.time_windows import to_iso8601

logger = logging.getLogger(__name__)

DATE_PARAMS = ("startDate", "endDate")


def prepare_query(params: dict[str, Any]) -> dict[str, Any]:
    """
    Copy query parameters into their on-the-wire form.

    Date parameters given as datetimes are rendered as ISO-8601 strings;
    strings pass through unchanged.
    """
    prepared = dict(params)
    for key in DATE_PARAMS:
        value = prepared.get(key)
        if value is not None and isinstance(value, datetime):
            prepared[key] = to_iso8601(value)
    return prepared


class PaginationEngine:
    """
    Walk a cursor-paginated list endpoint.

    Args:
        client: Request client used for every page
        path: List endpoint path, e.g. ``/v1/orders``
        items_field: Key holding the page's items in the response
        normalize: Applied to every item before it is returned
        expected_status: Status code a successful page carries
        max_pages: Optional cap on pages fetched by ``fetch_all``
    """

    def __init__(
        self,
        client: RetryingRequestClient,
        path: str,
        items_field: str,
        normalize: Callable[[dict], dict],
        *,
        expected_status: int = 200,
        max_pages: int | None = None,
    ):
        self.client = client
        self.path = path
        self.items_field = items_field
        self.normalize = normalize
        self.expected_status = expected_status
        self.max_pages = max_pages

    def _fetch_page(self, params: dict[str, Any]) -> tuple[list[dict], dict[str, Any]]:
        """Fetch one raw page; returns its items and pagination block."""
        response = self.client.execute("GET", self.path, params=prepare_query(params))
        expect_status(self.path, response, self.expected_status)
        body = decode_json(self.path, response)

        if not isinstance(body, dict) or not isinstance(body.get("pagination"), dict):
            raise malformed_response_error(
                self.path, response, "Response is missing the pagination block"
            )
        items = body.get(self.items_field)
        if not isinstance(items, list):
            raise malformed_response_error(
                self.path, response, f"Response is missing the '{self.items_field}' list"
            )

        pagination = body["pagination"]
        if not isinstance(pagination.get("lastPage"), bool):
            raise malformed_response_error(
                self.path, response, "Pagination block has no boolean lastPage"
            )
        if not pagination["lastPage"] and pagination.get("lastKey") is None:
            raise malformed_response_error(
                self.path, response, "Page is not the last page but has no lastKey"
            )

        return items, pagination

    def fetch_single_page(self, params: dict[str, Any]) -> dict[str, Any]:
        """
        Fetch exactly one page without following its cursor.

        Returns:
            ``{items_field: [normalized items], "pagination": {...}}`` with
            the pagination block exactly as the server sent it
        """
        items, pagination = self._fetch_page(params)
        logger.info(f"Fetched single page of {len(items)} items from {self.path}")
        return {
            self.items_field: [self.normalize(item) for item in items],
            "pagination": pagination,
        }

    def fetch_all(self, params: dict[str, Any]) -> list[dict]:
        """
        Fetch every page, following ``lastKey`` until ``lastPage`` is true.

        Any failure aborts the walk; pages already fetched are discarded.

        Returns:
            Normalized items of all pages, in fetch order
        """
        collected: list[dict] = []
        current = dict(params)
        page_count = 0

        while True:
            if self.max_pages is not None and page_count >= self.max_pages:
                logger.error(f"Pagination limit of {self.max_pages} pages reached for {self.path}")
                raise PaginationLimitError(
                    f"GET {self.path}\n  Pagination limit of {self.max_pages} pages reached",
                    status_code=self.expected_status,
                    uri=self.path,
                )

            try:
                items, pagination = self._fetch_page(current)
            except ChannelApeError as e:
                logger.error(f"Failed to fetch page {page_count + 1} from {self.path}: {e.status_code}")
                raise

            collected.extend(items)
            page_count += 1
            logger.info(
                f"Fetched {len(items)} items from {self.path} page {page_count}, "
                f"total: {len(collected)}"
            )

            if pagination["lastPage"]:
                break

            current = {**current, "lastKey": pagination["lastKey"]}

        logger.info(f"Completed pagination: {len(collected)} total items from {self.path}")
        return [self.normalize(item) for item in collected]
