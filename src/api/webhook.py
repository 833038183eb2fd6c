"""Facebook webhook endpoints.

One path serves both sides of the Messenger webhook contract:

- GET answers the subscription handshake by echoing ``hub.challenge``
  when ``hub.verify_token`` matches the configured token
- POST decodes the event envelope, dispatches every message event and
  answers 202 once all deliveries have been attempted

Delivery failures never change the POST response; they are logged by
the MessengerService.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from src.models.messenger import InboundEnvelope
from src.services.messenger_service import MessengerService

logger = logging.getLogger(__name__)
router = APIRouter()


def get_messenger_service(request: Request) -> MessengerService:
    """Return the MessengerService built by the application factory."""
    return request.app.state.messenger_service


def first_query_param(request: Request, name: str) -> str:
    """Return the first value of a query parameter, or "" when absent."""
    values = request.query_params.getlist(name)
    return values[0] if values else ""


@router.get("", response_class=PlainTextResponse)
async def verify_webhook(
    request: Request,
    messenger_service: MessengerService = Depends(get_messenger_service),
):
    """Facebook webhook verification endpoint."""
    token = first_query_param(request, "hub.verify_token")
    challenge = first_query_param(request, "hub.challenge")

    return PlainTextResponse(
        messenger_service.verify(token, challenge), status_code=status.HTTP_200_OK
    )


@router.post("")
async def handle_webhook(
    request: Request,
    messenger_service: MessengerService = Depends(get_messenger_service),
):
    """Handle incoming Facebook Messenger webhook events."""
    body = await request.body()

    try:
        envelope = InboundEnvelope.model_validate_json(body)
    except ValidationError as e:
        # Dropped without a status body; the platform sees an empty reply.
        logger.warning(
            "Dropping undecodable webhook payload (%d bytes): %s",
            len(body),
            e.errors(include_url=False, include_input=False),
        )
        return Response(status_code=status.HTTP_200_OK)

    await messenger_service.handle_messages(envelope)

    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content={"code": status.HTTP_202_ACCEPTED, "status": "Accepted"},
    )
