"""Responder: turns a classified chat request into an optional reply.

Requests are tagged by ``kind``. The webhook gateway only depends on
``MessageService.handle_event``, so new event kinds (images, quick replies,
postbacks) are added as new ``ChatRequest`` subclasses plus a branch in the
responder, without touching the gateway.
"""

from enum import Enum
from typing import Literal, Protocol

from pydantic import BaseModel, Field

from src.constants import SAMPLE_RESPONSE_TEMPLATE


class EventKind(str, Enum):
    """Known chat event kinds."""

    TEXT_MESSAGE = "text_message"


class ResponderError(Exception):
    """Base exception for responder failures."""

    pass


class InvalidEventKindError(ResponderError):
    """Raised when a request carries an event kind the responder does not handle."""

    def __init__(self, kind: str):
        super().__init__(f"invalid event kind: {kind}")
        self.kind = kind


class InvalidRequestShapeError(ResponderError):
    """Raised when a request's payload does not match its declared kind."""

    def __init__(self, kind: str, request_type: str):
        super().__init__(f"invalid request shape for {kind}: {request_type}")
        self.kind = kind
        self.request_type = request_type


class UserInfo(BaseModel):
    """What the responder knows about the sender."""

    id: int = 0


class ChatRequest(BaseModel):
    """Responder input, tagged by event kind."""

    kind: str
    sender: UserInfo = Field(default_factory=UserInfo)


class TextMessageRequest(ChatRequest):
    """A plain text message from a user."""

    kind: Literal[EventKind.TEXT_MESSAGE] = EventKind.TEXT_MESSAGE
    text: str


class ChatResponse(BaseModel):
    """Reply produced by a responder."""

    text: str


class MessageService(Protocol):
    """Protocol for responders."""

    def handle_event(self, request: ChatRequest) -> ChatResponse | None:
        """Return a reply, None when no reply is needed, or raise ResponderError."""
        ...


class SampleMessageService:
    """Echo responder: wraps the inbound text in a fixed template."""

    def __init__(self, template: str = SAMPLE_RESPONSE_TEMPLATE):
        self._template = template

    def handle_event(self, request: ChatRequest) -> ChatResponse | None:
        # Kind is checked before shape: a text_message tag on the wrong
        # payload surfaces as InvalidRequestShapeError.
        if request.kind != EventKind.TEXT_MESSAGE:
            raise InvalidEventKindError(str(request.kind))
        if not isinstance(request, TextMessageRequest):
            raise InvalidRequestShapeError(
                EventKind.TEXT_MESSAGE.value, type(request).__name__
            )

        return ChatResponse(text=self._template.format(text=request.text))


def get_message_service() -> MessageService:
    """Factory for the default responder."""
    return SampleMessageService()
