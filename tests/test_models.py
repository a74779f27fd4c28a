"""Tests for order request models and enumerations."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from channelape.models.orders import (
    OrderById,
    OrdersQueryByBusinessId,
    OrdersQueryByChannelOrderId,
    OrderStatus,
)


class TestOrderStatus:
    @pytest.mark.parametrize("status", ["OPEN", "IN_PROGRESS", "CLOSED", "CANCELED"])
    def test_values(self, status):
        assert OrderStatus(status).value == status


class TestOrdersQuery:
    def test_params_use_api_names(self):
        start = datetime(2018, 5, 1, tzinfo=UTC)
        query = OrdersQueryByBusinessId(business_id="biz", start_date=start, status="CLOSED")

        assert query.to_params() == {"businessId": "biz", "startDate": start, "status": "CLOSED"}

    def test_accepts_api_names(self):
        query = OrdersQueryByChannelOrderId(businessId="biz", channelOrderId="1001", lastKey="k")

        assert query.to_params() == {"businessId": "biz", "channelOrderId": "1001", "lastKey": "k"}

    def test_string_date_is_kept(self):
        query = OrdersQueryByBusinessId(business_id="biz", end_date="2018-05-07T18:07:58.009Z")

        assert query.end_date == "2018-05-07T18:07:58.009Z"

    def test_queries_are_immutable(self):
        query = OrdersQueryByBusinessId(business_id="biz")

        with pytest.raises(ValidationError):
            query.last_key = "k"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            OrdersQueryByBusinessId(business_id="biz", status="SHIPPED")

    def test_order_id_required(self):
        with pytest.raises(ValidationError):
            OrderById(order_id="")
