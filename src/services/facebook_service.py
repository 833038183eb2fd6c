"""Send messages to Facebook Graph API service."""

import time

import httpx
import logfire

from src.constants import FACEBOOK_API_TIMEOUT_SECONDS, MAX_LOGGED_RESPONSE_BODY_CHARS
from src.logging_config import mask_pii
from src.models.messenger import OutboundDelivery
from src.services.facebook_errors import DeliveryTransportError, check_facebook_error


async def send_message(
    page_access_token: str,
    delivery: OutboundDelivery,
    *,
    url: str,
    client: httpx.AsyncClient | None = None,
    timeout_seconds: float = FACEBOOK_API_TIMEOUT_SECONDS,
) -> None:
    """
    Send a delivery via the Facebook Send API.

    Args:
        page_access_token: Facebook Page access token, sent as a query parameter
        delivery: Reply to send
        url: Send API endpoint
        client: Optional shared client; a short-lived one is used otherwise
        timeout_seconds: Timeout for the short-lived client

    Raises:
        DeliveryTransportError: If the request could not be sent
        UpstreamRejectedError: If the API returned a structured error
        MalformedErrorBodyError: If a non-200 body could not be parsed
    """
    start_time = time.time()
    recipient_id = delivery.recipient.id

    logfire.info(
        "Sending Facebook message",
        recipient_id=recipient_id,
        message_length=len(delivery.message.text),
        access_token=mask_pii(page_access_token),
    )

    params = {"access_token": page_access_token}
    payload = delivery.model_dump(mode="json")

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout_seconds) as owned_client:
                response = await owned_client.post(url, params=params, json=payload)
        else:
            response = await client.post(url, params=params, json=payload)
    except httpx.RequestError as e:
        elapsed = time.time() - start_time
        logfire.error(
            "Facebook API request error",
            recipient_id=recipient_id,
            error=str(e),
            error_type=type(e).__name__,
            response_time_ms=elapsed * 1000,
        )
        raise DeliveryTransportError(f"{type(e).__name__}: {e}") from e

    elapsed = time.time() - start_time

    if response.status_code == 200:
        logfire.info(
            "Facebook message sent successfully",
            recipient_id=recipient_id,
            status_code=response.status_code,
            response_time_ms=elapsed * 1000,
        )
        return

    logfire.error(
        "Facebook message send failed",
        recipient_id=recipient_id,
        status_code=response.status_code,
        response_body=response.text[:MAX_LOGGED_RESPONSE_BODY_CHARS],
        response_time_ms=elapsed * 1000,
    )

    check_facebook_error(response.content)

    # TODO: decide whether a non-200 without an error object should be
    # reported as a failed delivery once the Send API contract is confirmed.
    logfire.warn(
        "Non-200 Send API response without error object treated as delivered",
        recipient_id=recipient_id,
        status_code=response.status_code,
    )
