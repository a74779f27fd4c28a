"""
ChannelApe API client.

Entry point for library users: builds the authenticated session and the
retrying transport from a ChannelApeConfig and hands out one service per
resource. Service calls block; ``submit`` runs any call in the client's
thread pool and returns a Future.
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Any, Callable

import requests
from pydantic import BaseModel, Field, field_validator

from .common.http import RetryingRequestClient
from .services.actions import ActionsService
from .services.channels import ChannelsService
from .services.orders import OrdersService
from .services.sessions import SessionsService

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 180000
MINIMUM_TIMEOUT_MS = 2000
SESSION_HEADER = "X-Channel-Ape-Authorization-Token"


class Environment(str, Enum):
    """Known API endpoints."""

    PRODUCTION = "https://api.channelape.com"
    STAGING = "https://staging-api.channelape.com"


class LogLevel(str, Enum):
    """Verbosity of the ``channelape`` logger."""

    OFF = "OFF"
    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"

    def to_logging_level(self) -> int:
        return {
            LogLevel.OFF: logging.CRITICAL + 1,
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.VERBOSE: logging.DEBUG,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]


class ChannelApeConfig(BaseModel):
    """ChannelApe client configuration."""

    session_id: str = Field(default="", description="Session id sent with every request")
    email: str | None = Field(default=None, description="Account email for credential login")
    password: str | None = Field(default=None, description="Account password for credential login")
    endpoint: str = Field(default=Environment.PRODUCTION.value, description="API base URL")
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, description="Per-attempt timeout in ms")
    maximum_request_retry_timeout: int = Field(
        default=DEFAULT_TIMEOUT_MS, description="Retry budget per request in ms"
    )
    log_level: LogLevel | None = Field(default=None, description="Overrides the channelape logger level")
    max_pages: int | None = Field(default=None, gt=0, description="Page cap for list reads")
    max_workers: int = Field(default=4, gt=0, description="Threads used by submit()")

    @field_validator("timeout", "maximum_request_retry_timeout")
    @classmethod
    def _minimum_timeout(cls, value: int) -> int:
        if value < MINIMUM_TIMEOUT_MS:
            return DEFAULT_TIMEOUT_MS
        return value

    @field_validator("endpoint", mode="before")
    @classmethod
    def _endpoint_value(cls, value: Any) -> Any:
        if isinstance(value, Environment):
            return value.value
        return value or Environment.PRODUCTION.value

    @classmethod
    def from_env(cls) -> "ChannelApeConfig":
        """Load configuration from environment variables."""
        settings: dict[str, Any] = {
            "session_id": os.getenv("CHANNELAPE_SESSION_ID", ""),
            "email": os.getenv("CHANNELAPE_EMAIL"),
            "password": os.getenv("CHANNELAPE_PASSWORD"),
            "endpoint": os.getenv("CHANNELAPE_ENDPOINT", Environment.PRODUCTION.value),
        }
        if os.getenv("CHANNELAPE_TIMEOUT"):
            settings["timeout"] = int(os.environ["CHANNELAPE_TIMEOUT"])
        if os.getenv("CHANNELAPE_MAX_RETRY_TIMEOUT"):
            settings["maximum_request_retry_timeout"] = int(os.environ["CHANNELAPE_MAX_RETRY_TIMEOUT"])
        if os.getenv("CHANNELAPE_LOG_LEVEL"):
            settings["log_level"] = os.environ["CHANNELAPE_LOG_LEVEL"].upper()
        return cls(**settings)

    def has_session(self) -> bool:
        return bool(self.session_id)

    def has_credentials(self) -> bool:
        return bool(self.email) and bool(self.password)


class ChannelApeClient:
    """ChannelApe API client with retrying transport and cursor pagination."""

    def __init__(self, config: ChannelApeConfig | None = None, **transport_options: Any):
        """
        Initialize the client.

        Args:
            config: Client configuration; read from the environment if omitted
            transport_options: Extra keyword arguments for RetryingRequestClient
                (``wait``, ``sleep``, ``clock``)

        Raises:
            ValueError: If no session id is configured
        """
        self.config = config or ChannelApeConfig.from_env()
        if not self.config.has_session():
            raise ValueError("Invalid configuration. sessionId is required.")

        if self.config.log_level is not None:
            logging.getLogger("channelape").setLevel(self.config.log_level.to_logging_level())

        self.session = requests.Session()
        self.session.headers.update(
            {
                SESSION_HEADER: self.config.session_id,
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": "channelape-client-python/1.0",
            }
        )
        self.request_client = RetryingRequestClient(
            self.session,
            self.config.endpoint,
            budget_ms=self.config.maximum_request_retry_timeout,
            timeout_ms=self.config.timeout,
            **transport_options,
        )
        self._executor: ThreadPoolExecutor | None = None

        self._orders = OrdersService(self.request_client, max_pages=self.config.max_pages)
        self._channels = ChannelsService(self.request_client)
        self._actions = ActionsService(self.request_client)
        self._sessions = SessionsService(self.request_client, self.config.session_id)
        logger.info(f"ChannelApe client initialized for {self.config.endpoint}")

    @property
    def session_id(self) -> str:
        return self.config.session_id

    @property
    def timeout(self) -> int:
        return self.config.timeout

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    def orders(self) -> OrdersService:
        return self._orders

    def channels(self) -> ChannelsService:
        return self._channels

    def actions(self) -> ActionsService:
        return self._actions

    def sessions(self) -> SessionsService:
        return self._sessions

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """
        Run a client call in the background.

        Example:
            future = client.submit(client.orders().get, query)
            orders = future.result()
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers, thread_name_prefix="channelape"
            )
        return self._executor.submit(fn, *args, **kwargs)

    def close(self) -> None:
        """Wait for submitted calls, then release the thread pool and HTTP session."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.session.close()

    def __enter__(self) -> "ChannelApeClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
