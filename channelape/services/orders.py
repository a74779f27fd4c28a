"""Orders operations: lookup by id or query, single pages, and updates."""

import logging
from typing import Any

from .base import (
    EXPECTED_GET_STATUS,
    EXPECTED_UPDATE_STATUS,
    ResourceService,
    resource_path,
)
from ..common.http import RetryingRequestClient
from ..common.normalize import normalize_order, to_wire
from ..common.pagination import PaginationEngine
from ..models.orders import (
    OrderById,
    OrdersQuery,
    OrdersQueryByBusinessId,
    OrdersQueryByChannel,
    OrdersQueryByChannelOrderId,
    OrdersRequest,
)

logger = logging.getLogger(__name__)

ORDERS = "orders"


class OrdersService(ResourceService):
    """Read and update orders."""

    def __init__(self, client: RetryingRequestClient, max_pages: int | None = None):
        super().__init__(client)
        self.pages = PaginationEngine(
            client,
            resource_path(ORDERS),
            ORDERS,
            normalize_order,
            expected_status=EXPECTED_GET_STATUS,
            max_pages=max_pages,
        )

    def get(self, request: OrdersRequest) -> dict | list[dict]:
        """
        Fetch orders.

        An ``OrderById`` returns that one order; any query variant returns
        every matching order across all pages.
        """
        match request:
            case OrderById(order_id=order_id):
                return self._get_by_id(order_id)
            case OrdersQueryByBusinessId() | OrdersQueryByChannel() | OrdersQueryByChannelOrderId():
                logger.info(f"Fetching all orders for {type(request).__name__}")
                return self.pages.fetch_all(request.to_params())
            case _:
                raise TypeError(f"Unsupported orders request: {type(request).__name__}")

    def get_page(self, request: OrdersQuery) -> dict[str, Any]:
        """Fetch one page of orders along with its pagination block."""
        match request:
            case OrdersQueryByBusinessId() | OrdersQueryByChannel() | OrdersQueryByChannelOrderId():
                return self.pages.fetch_single_page(request.to_params())
            case _:
                raise TypeError(f"Unsupported orders page request: {type(request).__name__}")

    def update(self, order: dict) -> dict:
        """Replace an order; the API answers 202 with the stored order."""
        if not order.get("id"):
            raise ValueError("Order id is required for update")
        path = resource_path(ORDERS, order["id"])
        logger.info(f"Updating order {order['id']}")
        return self._request_entity(
            "PUT", path, EXPECTED_UPDATE_STATUS, normalize_order, json=to_wire(order)
        )

    def _get_by_id(self, order_id: str) -> dict:
        path = resource_path(ORDERS, order_id)
        return self._request_entity("GET", path, EXPECTED_GET_STATUS, normalize_order)
