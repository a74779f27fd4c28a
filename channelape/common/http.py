"""
Retrying HTTP transport for the ChannelApe API.

Wraps a requests Session so that transport-level failures (connection
refused, DNS failure, timeouts, malformed URLs) are retried until a
wall-clock budget runs out. A delivered HTTP response is never retried,
whatever its status; interpreting the status is left to the caller.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

import requests
from tenacity import (
    RetryCallState,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    wait_exponential,
)

from .errors import transport_error

logger = logging.getLogger(__name__)

DEFAULT_RETRY_BUDGET_MS = 180000
DEFAULT_TIMEOUT_MS = 180000


def safe_headers(response: requests.Response) -> dict[str, str]:
    """
    Safely extract headers from a response object.

    Useful for mocked tests where response.headers might not be a proper dict.
    """
    headers = getattr(response, "headers", None)
    if isinstance(headers, dict):
        return headers
    try:
        return dict(headers.items())
    except (AttributeError, TypeError, ValueError):
        return {}


class RetryingRequestClient:
    """
    Issue requests against one API endpoint with budget-bounded retries.

    Args:
        session: Requests session carrying auth headers
        base_url: Endpoint prefix joined with each request path
        budget_ms: Maximum wall-clock time across attempts of one call
        timeout_ms: Per-attempt socket timeout
        wait: tenacity wait strategy between attempts
        sleep: Function used to sleep between attempts
        clock: Monotonic clock in seconds used to measure the budget
    """

    def __init__(
        self,
        session: requests.Session,
        base_url: str,
        *,
        budget_ms: int = DEFAULT_RETRY_BUDGET_MS,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        wait: Callable[[RetryCallState], float] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.budget_ms = budget_ms
        self.timeout_ms = timeout_ms
        self._wait = wait or wait_exponential(multiplier=0.5, min=0.5, max=10)
        self._sleep = sleep
        self._clock = clock

    def execute(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: str | bytes | None = None,
    ) -> requests.Response:
        """
        Perform one logical request, retrying transport failures.

        Args:
            method: HTTP method (GET, POST, PUT)
            path: Request path, e.g. ``/v1/orders``
            params: Query parameters
            json: JSON-serializable request body
            data: Pre-serialized request body

        Returns:
            The delivered response, whatever its status code

        Raises:
            TransportError: No response was obtained within the retry budget
        """
        url = f"{self.base_url}{path}"
        started = self._clock()

        def elapsed_ms() -> float:
            return (self._clock() - started) * 1000

        def budget_exhausted(retry_state: RetryCallState) -> bool:
            return elapsed_ms() >= self.budget_ms

        def wait_within_budget(retry_state: RetryCallState) -> float:
            remaining = max(0.0, (self.budget_ms - elapsed_ms()) / 1000)
            return min(self._wait(retry_state), remaining)

        retrying = Retrying(
            stop=budget_exhausted,
            wait=wait_within_budget,
            sleep=self._sleep,
            retry=retry_if_exception_type(requests.exceptions.RequestException),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

        try:
            return retrying(
                self._send, method, url, params=params, json=json, data=data
            )
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Giving up on {method} {url} after {elapsed_ms():.0f}ms: {e}"
            )
            raise transport_error(path, e) from e

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None,
        json: Any,
        data: str | bytes | None,
    ) -> requests.Response:
        logger.debug(f"Making {method} request to {url}")
        response = self.session.request(
            method=method,
            url=url,
            params=params,
            json=json,
            data=data,
            timeout=self.timeout_ms / 1000,
        )
        logger.debug(
            f"{method} {url} -> {response.status_code} "
            f"(request id {safe_headers(response).get('X-Request-Id', 'n/a')})"
        )
        return response
