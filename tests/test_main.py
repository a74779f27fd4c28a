"""Tests for the command line entry point."""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

import main
from channelape.common.errors import transport_error
from channelape.config.loader import reload_config
from channelape.models.orders import (
    OrderById,
    OrdersQueryByBusinessId,
    OrdersQueryByChannel,
    OrdersQueryByChannelOrderId,
)


def parse(*argv):
    return main.build_parser().parse_args(list(argv))


class TestBuildOrdersQuery:
    def test_business(self):
        query = main.build_orders_query(parse("orders", "--business-id", "biz", "--start-date", "2018-05-01"))
        assert query == OrdersQueryByBusinessId(business_id="biz", start_date="2018-05-01")

    def test_channel(self):
        query = main.build_orders_query(parse("orders", "--channel-id", "chan"))
        assert isinstance(query, OrdersQueryByChannel)

    def test_channel_order_id(self):
        query = main.build_orders_query(
            parse("orders", "--business-id", "biz", "--channel-order-id", "1001")
        )
        assert query == OrdersQueryByChannelOrderId(business_id="biz", channel_order_id="1001")

    def test_channel_order_id_needs_business(self):
        with pytest.raises(ValueError):
            main.build_orders_query(parse("orders", "--channel-order-id", "1001"))

    def test_no_filter(self):
        with pytest.raises(ValueError):
            main.build_orders_query(parse("orders"))


class TestRunCommand:
    def test_order(self):
        client = MagicMock()
        client.orders.return_value.get.return_value = {"id": "abc"}

        result = main.run_command(client, parse("order", "abc"))

        assert result == {"id": "abc"}
        client.orders.return_value.get.assert_called_once_with(OrderById(order_id="abc"))

    def test_single_page(self):
        client = MagicMock()

        main.run_command(client, parse("orders", "--business-id", "biz", "--single-page"))

        client.orders.return_value.get_page.assert_called_once()
        client.orders.return_value.get.assert_not_called()


class TestMain:
    @pytest.fixture
    def config_path(self, tmp_path):
        path = tmp_path / "app.yaml"
        path.write_text("global:\n  log_level: INFO\nchannelape:\n  session_id: cli-session\n")
        reload_config()
        yield str(path)
        reload_config()

    def test_prints_json(self, config_path, capsys):
        with patch.object(main, "ChannelApeClient") as mock_client_class:
            client = mock_client_class.return_value.__enter__.return_value
            client.channels.return_value.get.return_value = {"id": "chan", "name": "Export"}

            exit_code = main.main(["--config", config_path, "channel", "chan"])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == {"id": "chan", "name": "Export"}

    def test_api_failure(self, config_path):
        with patch.object(main, "ChannelApeClient") as mock_client_class:
            client = mock_client_class.return_value.__enter__.return_value
            client.sessions.return_value.get.side_effect = transport_error("/v1/sessions/x", OSError("down"))

            exit_code = main.main(["--config", config_path, "session"])

        assert exit_code == 1

    def test_missing_config(self, tmp_path):
        reload_config()
        assert main.main(["--config", str(tmp_path / "none.yaml"), "session"]) == 1


class TestLogFormatter:
    def record(self, name="channelape.common.http", level=logging.WARNING, msg="Retrying GET /v1/orders"):
        return logging.LogRecord(name, level, __file__, 1, msg, None, None)

    def test_json_renders_library_records(self):
        formatter = main.build_log_formatter("json")

        payload = json.loads(formatter.format(self.record()))

        assert payload["event"] == "Retrying GET /v1/orders"
        assert payload["level"] == "warning"
        assert payload["logger"] == "channelape.common.http"
        assert "timestamp" in payload

    def test_text_is_not_json(self):
        formatter = main.build_log_formatter("text")

        line = formatter.format(self.record(level=logging.INFO, msg="Fetched 2 items"))

        assert "Fetched 2 items" in line
        with pytest.raises(ValueError):
            json.loads(line)
