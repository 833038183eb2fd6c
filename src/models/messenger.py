"""Incoming/outgoing Facebook Messenger models.

Inbound models mirror the webhook payload leniently: missing or null fields
fall back to zero values and unknown keys are ignored, so only malformed JSON
or mistyped values fail validation.
"""

from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_serializer,
    field_validator,
)

from src.constants import MESSAGING_TYPE_RESPONSE


def null_as_default(model: type[BaseModel], value: Any, info: ValidationInfo) -> Any:
    """Replace a JSON null with the field's default."""
    if value is None:
        field = model.model_fields[info.field_name]
        return field.get_default(call_default_factory=True)
    return value


class User(BaseModel):
    """Sender or recipient reference.

    Graph API ids arrive as JSON strings of digits and are sent back the
    same way.
    """

    id: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        return null_as_default(cls, value, info)

    @field_serializer("id")
    def _serialize_id(self, value: int) -> str:
        return str(value)


class MessageContent(BaseModel):
    """Content of a received message.

    Messages without text (attachments, stickers) decode with an empty text.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default="", alias="mid")
    text: str = ""

    @field_validator("id", "text", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        return null_as_default(cls, value, info)


class MessageEvent(BaseModel):
    """One entry of the ``messaging`` array."""

    sender: User = Field(default_factory=User)
    recipient: User = Field(default_factory=User)
    timestamp: int = 0
    message: MessageContent | None = None

    @field_validator("sender", "recipient", "timestamp", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        return null_as_default(cls, value, info)

    @property
    def has_message(self) -> bool:
        return self.message is not None


class Entry(BaseModel):
    """Facebook webhook entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = 0
    time: int = 0
    messaging_events: list[MessageEvent] = Field(
        default_factory=list, alias="messaging"
    )

    @field_validator("id", "time", "messaging_events", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        return null_as_default(cls, value, info)


class InboundEnvelope(BaseModel):
    """Facebook webhook payload."""

    model_config = ConfigDict(populate_by_name=True)

    object: str = ""
    entries: list[Entry] = Field(default_factory=list, alias="entry")

    @field_validator("object", "entries", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        return null_as_default(cls, value, info)

    def iter_events(self):
        """Yield every messaging event in payload order."""
        for entry in self.entries:
            yield from entry.messaging_events


class TextMessage(BaseModel):
    """Outgoing plain text message."""

    text: str


class OutboundDelivery(BaseModel):
    """Request body for the Send API."""

    recipient: User
    messaging_type: Literal["RESPONSE"] = MESSAGING_TYPE_RESPONSE
    message: TextMessage

    @classmethod
    def reply(cls, recipient_id: int, text: str) -> "OutboundDelivery":
        """Build a RESPONSE delivery addressed to ``recipient_id``."""
        return cls(recipient=User(id=recipient_id), message=TextMessage(text=text))


class QueryError(BaseModel):
    """Error object returned by the Graph API."""

    message: str = ""
    type: str = ""
    code: int = 0
    error_subcode: int = 0
    fbtrace_id: str = ""


class QueryResponse(BaseModel):
    """Graph API response envelope."""

    error: QueryError | None = None
    result: str | None = None
