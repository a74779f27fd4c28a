"""
Shared fixtures for ChannelApe client tests.

Responses are Mock objects shaped like requests.Response; the transport is a
Mock session so no test touches the network.
"""

import json
from unittest.mock import Mock

import pytest
import requests

from channelape.common.http import RetryingRequestClient

BUSINESS_ID = "4d688534-d82e-4111-940c-322ba9aec108"


class FakeClock:
    """Monotonic clock that only moves when something sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _make_response(
    status_code: int,
    body=None,
    *,
    reason: str = "",
    method: str = "GET",
    text: str | None = None,
) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.headers = {}
    response.request.method = method
    if body is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
        response.text = text or ""
    else:
        response.json.return_value = body
        response.text = json.dumps(body) if text is None else text
    return response


@pytest.fixture
def make_response():
    """Factory for mock HTTP responses."""
    return _make_response


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_session() -> Mock:
    return Mock(spec=requests.Session)


@pytest.fixture
def request_client(mock_session, fake_clock) -> RetryingRequestClient:
    """Retrying client over a mock session with a 3 second budget."""
    return RetryingRequestClient(
        mock_session,
        "https://staging-api.channelape.com",
        budget_ms=3000,
        timeout_ms=60000,
        sleep=fake_clock.sleep,
        clock=fake_clock,
    )


def _line_item(item_id: str, price, grams, quantity=1) -> dict:
    return {
        "id": item_id,
        "title": f"Item {item_id}",
        "sku": f"SKU-{item_id}",
        "price": price,
        "grams": grams,
        "quantity": quantity,
        "additionalFields": [{"name": "size", "value": "M"}],
    }


def _order(order_id: str, channel_order_id: str, **overrides) -> dict:
    order = {
        "id": order_id,
        "businessId": BUSINESS_ID,
        "channelId": "9c728601-0286-457d-b0d6-ec19292d4485",
        "channelOrderId": channel_order_id,
        "status": "OPEN",
        "purchasedAt": "2018-05-01T18:07:58.009Z",
        "createdAt": "2018-05-01T18:08:01.120Z",
        "updatedAt": "2018-05-02T09:15:00.000Z",
        "totalPrice": "34.98",
        "subtotalPrice": "31.98",
        "totalShippingPrice": "3.00",
        "totalTax": 0,
        "totalGrams": "1200",
        "lineItems": [
            _line_item("li-1", "15.99", "600", 1),
            _line_item("li-2", 15.99, 600, "1"),
        ],
        "fulfillments": [],
    }
    order.update(overrides)
    return order


@pytest.fixture
def single_order() -> dict:
    """Open order without shipping tax, cancel date or fulfillments."""
    return _order("c0f45529-cbed-4e90-9a38-c208d409ef2a", "314980073478")


@pytest.fixture
def canceled_order() -> dict:
    return _order(
        "06b70c49-a13e-42ca-a490-404d29c7fa46",
        "314980073479",
        status="CANCELED",
        canceledAt="2018-05-05T10:00:00.000Z",
        totalShippingTax="2",
    )


@pytest.fixture
def closed_order_with_fulfillment() -> dict:
    order = _order("9dc34b92-70d1-42d8-8b4e-ae7fb3deca70", "314980073480", status="CLOSED")
    order["fulfillments"] = [
        {
            "id": "fulfillment-id",
            "status": "SUCCESS",
            "trackingUrls": [
                "https://ups1.com/tracking-url1",
                "https://ups1.com/tracking-url2",
            ],
            "lineItems": [_line_item("li-1", "15.91", "600")],
        }
    ]
    return order


@pytest.fixture
def multiple_orders() -> list[dict]:
    return [
        _order("order-1", "1001"),
        _order("order-2", "1002"),
    ]


@pytest.fixture
def make_order():
    """Factory for order payloads with overridable fields."""
    return _order
