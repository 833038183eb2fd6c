"""Webhook gateway service.

Owns the dispatch pipeline behind the webhook endpoint:

1. Verify the subscription handshake token
2. Walk every entry and messaging event of a decoded envelope, in order
3. Ask the responder for a reply to each text message
4. Deliver the reply through the messaging service

Every per-event failure is caught and logged here; none reaches the HTTP
response. Events are processed one at a time and each delivery completes
before the next event starts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import logfire

from src.constants import INCORRECT_VERIFY_TOKEN_BODY
from src.models.messenger import InboundEnvelope, MessageEvent, OutboundDelivery
from src.services.facebook_errors import DeliveryError, UpstreamRejectedError
from src.services.message_service import (
    MessageService,
    ResponderError,
    TextMessageRequest,
    UserInfo,
)
from src.services.messaging_protocol import MessagingService

logger = logging.getLogger(__name__)


@dataclass
class DispatchSummary:
    """Outcome counts for one envelope."""

    events: int = 0
    skipped: int = 0
    delivered: int = 0
    no_reply: int = 0
    failed: int = 0


class MessengerService:
    """Dispatch inbound Messenger events to a responder and deliver replies.

    Holds only read-only configuration and its collaborators, so one
    instance is shared safely by concurrent requests.

    Example:
        >>> service = MessengerService(
        ...     verify_token="secret",
        ...     message_service=SampleMessageService(),
        ...     messaging_service=get_messaging_service(settings),
        ... )
        >>> service.verify("secret", "1158201444")
        '1158201444'
    """

    def __init__(
        self,
        verify_token: str,
        message_service: MessageService,
        messaging_service: MessagingService,
    ):
        self._verify_token = verify_token
        self._message_service = message_service
        self._messaging_service = messaging_service

    def verify(self, token: str, challenge: str) -> str:
        """Return the handshake response body for a verification request."""
        if token == self._verify_token:
            logfire.info("Webhook verified successfully")
            return challenge

        logfire.warn("Webhook verification failed")
        return INCORRECT_VERIFY_TOKEN_BODY

    async def handle_message(self, event: MessageEvent) -> bool:
        """Run one message event through the responder and deliver the reply.

        Args:
            event: Messaging event carrying a ``message``; a missing text is empty

        Returns:
            True if a reply was delivered, False if the responder had none

        Raises:
            ResponderError: If the responder rejected the request
            DeliveryError: If the reply could not be delivered
        """
        request = TextMessageRequest(
            sender=UserInfo(id=event.sender.id),
            text=event.message.text,
        )
        reply = self._message_service.handle_event(request)

        if reply is None:
            logfire.info("Responder returned no reply", sender_id=event.sender.id)
            return False

        delivery = OutboundDelivery.reply(event.sender.id, reply.text)
        logfire.info("Delivering reply", payload=delivery.model_dump(mode="json"))

        await self._messaging_service.send_delivery(delivery)
        return True

    async def handle_messages(self, envelope: InboundEnvelope) -> DispatchSummary:
        """Dispatch every messaging event of an envelope in payload order."""
        summary = DispatchSummary()

        for event in envelope.iter_events():
            summary.events += 1

            if not event.has_message:
                summary.skipped += 1
                logfire.debug(
                    "Skipping messaging event without message",
                    sender_id=event.sender.id,
                    timestamp=event.timestamp,
                )
                continue

            try:
                delivered = await self.handle_message(event)
            except ResponderError as e:
                summary.failed += 1
                logfire.error(
                    "Responder rejected messaging event",
                    event=event.model_dump(by_alias=True),
                    error=str(e),
                    error_type=type(e).__name__,
                )
            except UpstreamRejectedError as e:
                summary.failed += 1
                logfire.error(
                    "Facebook rejected delivery",
                    recipient_id=event.sender.id,
                    error_type=type(e).__name__,
                    error_message=e.error.message,
                    facebook_error_type=e.error.type,
                    code=e.error.code,
                    error_subcode=e.error.error_subcode,
                    fbtrace_id=e.error.fbtrace_id,
                )
            except DeliveryError as e:
                summary.failed += 1
                logfire.error(
                    "Delivery failed",
                    recipient_id=event.sender.id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            except Exception as e:
                summary.failed += 1
                logger.error(
                    "Unexpected error handling msg %s: %s",
                    event.model_dump(by_alias=True),
                    e,
                    exc_info=True,
                )
            else:
                if delivered:
                    summary.delivered += 1
                else:
                    summary.no_reply += 1

        logfire.info(
            "Webhook envelope processed",
            object=envelope.object,
            entries=len(envelope.entries),
            events=summary.events,
            skipped=summary.skipped,
            delivered=summary.delivered,
            no_reply=summary.no_reply,
            failed=summary.failed,
        )
        return summary
