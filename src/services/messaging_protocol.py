"""Messaging abstraction protocols for decoupling from the Facebook API.

The gateway sends replies through a ``MessagingService`` so that tests can
record deliveries without HTTP mocking and other platforms can be plugged
in later.
"""

from typing import Protocol

import httpx

from src.config import Settings
from src.models.messenger import OutboundDelivery


class MessagingService(Protocol):
    """Protocol for delivering replies.

    Implementations raise ``DeliveryError`` subclasses on failure.
    """

    async def send_delivery(self, delivery: OutboundDelivery) -> None:
        """Send one delivery."""
        ...


class FacebookMessagingService:
    """Facebook Messenger implementation of MessagingService.

    Example:
        >>> service = FacebookMessagingService(page_access_token="...", url=SEND_URL)
        >>> await service.send_delivery(OutboundDelivery.reply(42, "Hello!"))
    """

    def __init__(
        self,
        page_access_token: str,
        url: str,
        timeout_seconds: float,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize with Facebook Page access token and Send API endpoint.

        Args:
            page_access_token: Facebook Page access token for API calls
            url: Send API endpoint
            timeout_seconds: Timeout for each Send API call
            client: Optional shared httpx client
        """
        if not page_access_token:
            raise ValueError("page_access_token is required")
        self._token = page_access_token
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._client = client

    async def send_delivery(self, delivery: OutboundDelivery) -> None:
        from src.services.facebook_service import send_message

        await send_message(
            page_access_token=self._token,
            delivery=delivery,
            url=self._url,
            client=self._client,
            timeout_seconds=self._timeout_seconds,
        )


def get_messaging_service(settings: Settings) -> FacebookMessagingService:
    """Factory function to get a MessagingService implementation.

    Currently returns FacebookMessagingService.
    """
    return FacebookMessagingService(
        page_access_token=settings.access_token,
        url=settings.send_message_url,
        timeout_seconds=settings.facebook_api_timeout_seconds,
    )
