"""Delivery failures and interpretation of Graph API error bodies."""

import logfire
from pydantic import ValidationError

from src.constants import MAX_LOGGED_RESPONSE_BODY_CHARS
from src.models.messenger import QueryError, QueryResponse


class DeliveryError(Exception):
    """Base exception for failed deliveries to the Send API."""

    pass


class DeliveryTransportError(DeliveryError):
    """Raised when the request to the Send API could not be completed."""

    pass


class MalformedErrorBodyError(DeliveryError):
    """Raised when a non-200 Send API body is not a Graph API response envelope."""

    def __init__(self, body: bytes):
        preview = body[:MAX_LOGGED_RESPONSE_BODY_CHARS].decode("utf-8", "replace")
        super().__init__(f"json unmarshal error: {preview!r}")
        self.body = body


class UpstreamRejectedError(DeliveryError):
    """Raised when the Send API answers with a structured error."""

    def __init__(self, error: QueryError):
        super().__init__(
            f"facebook error: {error.message} "
            f"(type={error.type}, code={error.code}, "
            f"error_subcode={error.error_subcode}, fbtrace_id={error.fbtrace_id})"
        )
        self.error = error


def check_facebook_error(body: bytes) -> None:
    """
    Interpret the body of a non-200 Send API response.

    Args:
        body: Raw response body

    Raises:
        MalformedErrorBodyError: If the body is not a valid response envelope
        UpstreamRejectedError: If the envelope carries an ``error`` object

    A body without an ``error`` object is not treated as a failure.
    """
    logfire.info(
        "Send API response body",
        response_body=body[:MAX_LOGGED_RESPONSE_BODY_CHARS].decode("utf-8", "replace"),
    )

    try:
        query_response = QueryResponse.model_validate_json(body)
    except ValidationError as e:
        raise MalformedErrorBodyError(body) from e

    if query_response.error is not None:
        raise UpstreamRejectedError(query_response.error)
