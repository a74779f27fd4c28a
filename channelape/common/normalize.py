"""
Response normalization for ChannelApe resources.

The API sends timestamps as ISO-8601 strings and money as either strings
or JSON numbers. These helpers turn raw resource dicts into ones with
datetime and Decimal values, touching only the keys that are present.
Inputs are never mutated.
"""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from ..models.orders import FulfillmentStatus, OrderStatus
from ..utils.time_windows import parse_iso8601, to_iso8601

logger = logging.getLogger(__name__)

ORDER_DATE_FIELDS = ("purchasedAt", "updatedAt", "createdAt", "canceledAt")
ORDER_DECIMAL_FIELDS = (
    "totalPrice",
    "subtotalPrice",
    "totalShippingPrice",
    "totalShippingTax",
    "totalTax",
    "totalGrams",
)
LINE_ITEM_DECIMAL_FIELDS = ("price", "grams", "shippingPrice", "shippingTax")
LINE_ITEM_INT_FIELDS = ("quantity",)
CHANNEL_DATE_FIELDS = ("createdAt", "updatedAt")
ACTION_DATE_FIELDS = ("startTime", "lastHealthCheckTime", "endTime")
ACTION_INT_FIELDS = ("healthCheckIntervalInSeconds",)


def coerce_datetime(value: Any) -> Any:
    """
    Coerce an ISO-8601 string to an aware datetime.

    Datetimes and None pass through; unparsable values are returned as-is.
    """
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        logger.warning(f"Could not parse date value: {value!r}")
        return value
    try:
        return parse_iso8601(value)
    except ValueError:
        logger.warning(f"Could not parse date string: {value}")
        return value


def coerce_decimal(value: Any) -> Any:
    """
    Coerce a numeric string or number to Decimal.

    Examples:
        >>> coerce_decimal("15.99")
        Decimal('15.99')
        >>> coerce_decimal(2)
        Decimal('2')
    """
    if value is None or isinstance(value, bool) or isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, float):
            # str() keeps the shortest repr, so 15.99 stays 15.99
            return Decimal(str(value))
        if isinstance(value, (int, str)):
            return Decimal(value.strip() if isinstance(value, str) else value)
    except InvalidOperation:
        pass
    logger.warning(f"Could not coerce to decimal: {value!r}")
    return value


def coerce_int(value: Any) -> Any:
    """
    Coerce a whole-number string or number to int.

    Fractional values such as ``"1.5"`` are kept as they are, like any
    other value that is not a whole number.
    """
    if value is None or isinstance(value, (bool, int)):
        return value
    number = coerce_decimal(value)
    if isinstance(number, Decimal) and number.is_finite() and number == number.to_integral_value():
        return int(number)
    logger.warning(f"Could not coerce to int: {value!r}")
    return value


def _coerce_enum(enum_cls: type[Enum], value: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(f"Unknown {enum_cls.__name__} value: {value!r}")
        return value


def _coerce_fields(resource: dict, fields: tuple[str, ...], coerce) -> None:
    for field in fields:
        if field in resource:
            resource[field] = coerce(resource[field])


def normalize_line_item(raw: dict) -> dict:
    """Normalize one line item."""
    line_item = dict(raw)
    _coerce_fields(line_item, LINE_ITEM_DECIMAL_FIELDS, coerce_decimal)
    _coerce_fields(line_item, LINE_ITEM_INT_FIELDS, coerce_int)
    return line_item


def _normalize_line_items(resource: dict) -> None:
    if isinstance(resource.get("lineItems"), list):
        resource["lineItems"] = [normalize_line_item(li) for li in resource["lineItems"]]


def normalize_fulfillment(raw: dict) -> dict:
    """Normalize one fulfillment and every line item inside it."""
    fulfillment = dict(raw)
    if fulfillment.get("status") is not None:
        fulfillment["status"] = _coerce_enum(FulfillmentStatus, fulfillment["status"])
    _normalize_line_items(fulfillment)
    return fulfillment


def normalize_order(raw: dict) -> dict:
    """
    Normalize an order as returned by the orders endpoints.

    Dates become aware datetimes, money and weights become Decimal, and
    line items are normalized both at order level and inside each
    fulfillment. The same line item appearing in both places yields two
    independent, equally normalized dicts.

    Args:
        raw: Order dict decoded from the API response

    Returns:
        New normalized order dict
    """
    order = dict(raw)
    _coerce_fields(order, ORDER_DATE_FIELDS, coerce_datetime)
    _coerce_fields(order, ORDER_DECIMAL_FIELDS, coerce_decimal)
    if order.get("status") is not None:
        order["status"] = _coerce_enum(OrderStatus, order["status"])
    _normalize_line_items(order)
    if isinstance(order.get("fulfillments"), list):
        order["fulfillments"] = [normalize_fulfillment(f) for f in order["fulfillments"]]
    return order


def normalize_channel(raw: dict) -> dict:
    """Normalize a channel."""
    channel = dict(raw)
    _coerce_fields(channel, CHANNEL_DATE_FIELDS, coerce_datetime)
    return channel


def normalize_action(raw: dict) -> dict:
    """Normalize an action."""
    action = dict(raw)
    _coerce_fields(action, ACTION_DATE_FIELDS, coerce_datetime)
    _coerce_fields(action, ACTION_INT_FIELDS, coerce_int)
    return action


def to_wire(value: Any) -> Any:
    """
    Convert a normalized resource back into JSON-serializable form.

    datetime becomes the API's ISO-8601 form, Decimal becomes float and
    enums become their values. Containers are converted recursively.
    """
    if isinstance(value, dict):
        return {key: to_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    if isinstance(value, datetime):
        return to_iso8601(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    return value
