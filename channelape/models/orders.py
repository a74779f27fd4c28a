"""
Order domain types for the ChannelApe API.

Order lookups are expressed as one request class per query shape so that
services can dispatch on the request type instead of probing dict keys.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrderStatus(str, Enum):
    """Lifecycle status of an order."""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"
    CANCELED = "CANCELED"


class FulfillmentStatus(str, Enum):
    """Status of a single fulfillment on an order."""

    OPEN = "OPEN"
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    CANCELED = "CANCELED"
    ERROR = "ERROR"
    FAILURE = "FAILURE"


class OrdersRequest(BaseModel):
    """Base class for order lookups; serializes to camelCase query parameters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    def to_params(self) -> dict[str, Any]:
        """Query parameters for this request, unset fields omitted."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="python")


class OrderById(OrdersRequest):
    """Look up exactly one order."""

    order_id: str = Field(..., alias="orderId", min_length=1)


class OrdersQuery(OrdersRequest):
    """Paginated order query. ``last_key`` resumes from a known cursor."""

    last_key: str | None = Field(default=None, alias="lastKey")


class OrdersQueryByBusinessId(OrdersQuery):
    """All orders for a business, optionally within a date range."""

    business_id: str = Field(..., alias="businessId")
    start_date: datetime | str | None = Field(default=None, alias="startDate")
    end_date: datetime | str | None = Field(default=None, alias="endDate")
    status: OrderStatus | None = None
    size: int | None = Field(default=None, gt=0)


class OrdersQueryByChannel(OrdersQuery):
    """All orders received through one channel."""

    channel_id: str = Field(..., alias="channelId")
    start_date: datetime | str | None = Field(default=None, alias="startDate")
    end_date: datetime | str | None = Field(default=None, alias="endDate")
    status: OrderStatus | None = None
    size: int | None = Field(default=None, gt=0)


class OrdersQueryByChannelOrderId(OrdersQuery):
    """Orders matching the id the sales channel assigned."""

    business_id: str = Field(..., alias="businessId")
    channel_order_id: str = Field(..., alias="channelOrderId")
