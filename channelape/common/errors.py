"""
Structured errors for ChannelApe API calls.

Every failed call surfaces as a ChannelApeError carrying the HTTP status,
the API's own error codes, and a diagnostic message of the form::

    GET /v1/orders/abc
      Status: 404 Not Found
      Response Body:
      {"statusCode": 404, "errors": [...]}
    Code: 174 Message: Order could not be found.
"""

import json
import logging
from typing import Any

import requests
from pydantic import BaseModel

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_STATUS = -1
TRANSPORT_ERROR_CODE = -1


class ApiError(BaseModel):
    """One entry of the ``errors`` array in an API error envelope."""

    code: int
    message: str


class ChannelApeError(Exception):
    """Base exception for ChannelApe API failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        uri: str,
        api_errors: list[ApiError] | None = None,
        response: requests.Response | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.uri = uri
        self.api_errors = list(api_errors or [])
        self.response = response


class TransportError(ChannelApeError):
    """No HTTP response was obtained before the retry budget ran out."""


class HttpStatusError(ChannelApeError):
    """A response arrived with a status other than the one the operation expects."""


class MalformedResponseError(ChannelApeError):
    """A successful response is missing data the client depends on."""


class PaginationLimitError(ChannelApeError):
    """A paginated read exceeded the configured page cap."""


def format_diagnostic(
    method: str,
    uri: str,
    status_code: int,
    status_text: str,
    body: str,
    api_errors: list[ApiError],
) -> str:
    """Build the multi-line diagnostic message shared by all error kinds."""
    message = f"{method} {uri}\n  Status: {status_code} {status_text}\n  Response Body:\n  {body}"
    if api_errors:
        lines = "\n".join(f"Code: {e.code} Message: {e.message}" for e in api_errors)
        message += f"\n{lines}"
    return message


def _request_method(response: requests.Response) -> str:
    request = getattr(response, "request", None)
    method = getattr(request, "method", None)
    return method if isinstance(method, str) else ""


def _parse_api_errors(payload: Any) -> list[ApiError]:
    """Pull the ``errors`` array out of an error envelope, order preserved."""
    if not isinstance(payload, dict):
        return []
    raw_errors = payload.get("errors")
    if not isinstance(raw_errors, list):
        return []

    api_errors = []
    for raw in raw_errors:
        try:
            api_errors.append(ApiError.model_validate(raw))
        except ValueError:
            logger.warning(f"Skipping unrecognised API error entry: {raw!r}")
    return api_errors


def generate_api_error(uri: str, response: requests.Response) -> HttpStatusError:
    """
    Map a delivered response with an unexpected status to an HttpStatusError.

    Args:
        uri: Request path the call was made against
        response: The delivered HTTP response

    Returns:
        HttpStatusError with status, API errors and diagnostic message set
    """
    raw_body = response.text or ""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    api_errors = _parse_api_errors(payload)
    body = raw_body or json.dumps([e.model_dump() for e in api_errors])

    message = format_diagnostic(
        _request_method(response),
        uri,
        response.status_code,
        response.reason or "",
        body,
        api_errors,
    )
    return HttpStatusError(
        message,
        status_code=response.status_code,
        uri=uri,
        api_errors=api_errors,
        response=response,
    )


def transport_error(uri: str, error: Exception) -> TransportError:
    """Map a transport failure (no response at all) to a TransportError."""
    error_text = str(error)
    api_errors = [ApiError(code=TRANSPORT_ERROR_CODE, message=error_text)]
    message = format_diagnostic("", uri, 0, "", error_text, api_errors)
    return TransportError(
        message,
        status_code=TRANSPORT_ERROR_STATUS,
        uri=uri,
        api_errors=api_errors,
    )


def malformed_response_error(
    uri: str, response: requests.Response, reason: str
) -> MalformedResponseError:
    """Map a successful but unusable response to a MalformedResponseError."""
    message = format_diagnostic(
        _request_method(response),
        uri,
        response.status_code,
        response.reason or "",
        f"{reason}: {response.text or ''}",
        [],
    )
    return MalformedResponseError(
        message, status_code=response.status_code, uri=uri, response=response
    )


def expect_status(uri: str, response: requests.Response, expected_status: int) -> None:
    """Raise the mapped error unless the response has the expected status."""
    if response.status_code != expected_status:
        error = generate_api_error(uri, response)
        logger.error(
            f"ChannelApe API error: expected {expected_status}, "
            f"got {response.status_code} for {uri}"
        )
        raise error


def decode_json(uri: str, response: requests.Response) -> Any:
    """Decode a successful response body, raising MalformedResponseError if it is not JSON."""
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Undecodable response body from {uri}: {e}")
        raise malformed_response_error(uri, response, "Response body is not valid JSON") from e
