#!/usr/bin/env python3
"""
ChannelApe API command line client.

Fetches orders, channels, actions and the current session from the
ChannelApe API and prints them as JSON.

Usage:
    python main.py order <order-id>
    python main.py orders --business-id <id> [--start-date ISO] [--end-date ISO] [--single-page]
    python main.py orders --channel-id <id>
    python main.py orders --business-id <id> --channel-order-id <id>
    python main.py channel <channel-id>
    python main.py action <action-id>
    python main.py session
"""

import argparse
import json
import logging
import sys
import time
from typing import Any

import structlog

from channelape.client import ChannelApeClient, ChannelApeConfig
from channelape.common.errors import ChannelApeError
from channelape.common.normalize import to_wire
from channelape.config.loader import cfg, get_channelape_config, load_config
from channelape.models.orders import (
    OrderById,
    OrdersQuery,
    OrdersQueryByBusinessId,
    OrdersQueryByChannel,
    OrdersQueryByChannelOrderId,
)

logger = structlog.get_logger(__name__)


SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def build_log_formatter(log_format: str) -> structlog.stdlib.ProcessorFormatter:
    """
    Formatter rendering both structlog events and plain ``logging`` records.

    The library logs through ``logging.getLogger``; routing those records
    through the same processors keeps ``log_format: json`` output uniform.
    """
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging():
    """Setup structured logging based on configuration."""
    log_level = cfg("global.log_level", "INFO")
    log_format = cfg("global.log_format", "text")

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(build_log_formatter(log_format))
    logging.basicConfig(level=getattr(logging, log_level.upper()), handlers=[handler])


def build_orders_query(args: argparse.Namespace) -> OrdersQuery:
    """Pick the order query variant matching the given flags."""
    if args.channel_order_id:
        if not args.business_id:
            raise ValueError("--channel-order-id requires --business-id")
        return OrdersQueryByChannelOrderId(
            business_id=args.business_id, channel_order_id=args.channel_order_id
        )
    if args.channel_id:
        return OrdersQueryByChannel(
            channel_id=args.channel_id, start_date=args.start_date, end_date=args.end_date
        )
    if args.business_id:
        return OrdersQueryByBusinessId(
            business_id=args.business_id, start_date=args.start_date, end_date=args.end_date
        )
    raise ValueError("One of --business-id or --channel-id is required")


def run_command(client: ChannelApeClient, args: argparse.Namespace) -> Any:
    """Dispatch a parsed command to the matching client call."""
    if args.command == "order":
        return client.orders().get(OrderById(order_id=args.order_id))
    if args.command == "orders":
        query = build_orders_query(args)
        if args.single_page:
            return client.orders().get_page(query)
        return client.orders().get(query)
    if args.command == "channel":
        return client.channels().get(args.channel_id)
    if args.command == "action":
        return client.actions().get(args.action_id)
    if args.command == "session":
        return client.sessions().get()
    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ChannelApe API client")
    parser.add_argument("--config", default="config/app.yaml", help="Configuration file path")

    subparsers = parser.add_subparsers(dest="command", required=True)

    order = subparsers.add_parser("order", help="Fetch one order by id")
    order.add_argument("order_id")

    orders = subparsers.add_parser("orders", help="Query orders")
    orders.add_argument("--business-id")
    orders.add_argument("--channel-id")
    orders.add_argument("--channel-order-id")
    orders.add_argument("--start-date", help="ISO-8601 start of the date range")
    orders.add_argument("--end-date", help="ISO-8601 end of the date range")
    orders.add_argument("--single-page", action="store_true", help="Stop after the first page")

    channel = subparsers.add_parser("channel", help="Fetch one channel by id")
    channel.add_argument("channel_id")

    action = subparsers.add_parser("action", help="Fetch one action by id")
    action.add_argument("action_id")

    subparsers.add_parser("session", help="Show the current session")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        load_config(args.config)
    except FileNotFoundError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging()

    try:
        config = ChannelApeConfig(**get_channelape_config())
        with ChannelApeClient(config) as client:
            started = time.monotonic()
            result = run_command(client, args)
            logger.info(
                "command_finished",
                command=args.command,
                duration_ms=round((time.monotonic() - started) * 1000),
            )
    except ChannelApeError as e:
        logger.error(
            "request_failed", command=args.command, status_code=e.status_code, diagnostic=e.message
        )
        return 1
    except ValueError as e:
        logger.error("invalid_input", command=args.command, error=str(e))
        return 1

    print(json.dumps(to_wire(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
