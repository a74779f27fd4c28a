"""Shared request plumbing for single-entity ChannelApe operations."""

from collections.abc import Callable
from typing import Any

from ..common.errors import decode_json, expect_status, malformed_response_error
from ..common.http import RetryingRequestClient

API_VERSION = "v1"

EXPECTED_GET_STATUS = 200
EXPECTED_CREATE_STATUS = 201
EXPECTED_UPDATE_STATUS = 202


def resource_path(resource: str, *parts: str) -> str:
    """Build a versioned API path, e.g. ``/v1/orders/<id>``."""
    return "/".join(["", API_VERSION, resource, *parts])


class ResourceService:
    """Base class for services that map one request to one resource."""

    def __init__(self, client: RetryingRequestClient):
        self.client = client

    def _request_entity(
        self,
        method: str,
        path: str,
        expected_status: int,
        normalize: Callable[[dict], dict],
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> dict:
        """
        Execute a request expected to return a single resource.

        Raises:
            TransportError: No response within the retry budget
            HttpStatusError: Response status differs from ``expected_status``
            MalformedResponseError: Body is not a JSON object
        """
        response = self.client.execute(method, path, params=params, json=json)
        expect_status(path, response, expected_status)
        body = decode_json(path, response)
        if not isinstance(body, dict):
            raise malformed_response_error(path, response, "Expected a JSON object")
        return normalize(body)
