"""Pydantic models for Notion webhook payloads.

Two body shapes are accepted:
- a verification handshake: ``{"type": "verification", "challenge": "..."}``
- an event batch: ``{"events": [{"eventType": ..., "subject": {"resourceId": ...}}]}``
"""

import json
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from notion_drive_bridge.errors import MalformedRequest


class EventType(str, Enum):
    PAGE_CREATED = "page.created"
    PAGE_UPDATED = "page.updated"
    PAGE_DELETED = "page.deleted"


class EventSubject(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    resource_id: str = Field(alias="resourceId", min_length=1)


class WebhookEvent(BaseModel):
    """A single page event. Unknown event types are kept and skipped later."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event_type: str = Field(alias="eventType")
    subject: EventSubject

    @property
    def record_id(self) -> str:
        return self.subject.resource_id

    @property
    def known_type(self) -> EventType | None:
        try:
            return EventType(self.event_type)
        except ValueError:
            return None


class VerificationChallenge(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["verification"]
    challenge: str


class EventBatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    events: list[WebhookEvent]


WebhookPayload = Union[VerificationChallenge, EventBatch]


def parse_payload(body: bytes) -> WebhookPayload:
    """Parse a raw webhook body into one of the accepted payload shapes.

    Raises MalformedRequest if the body is not JSON or matches neither shape.
    """
    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
        raise MalformedRequest("Invalid JSON") from exc

    if not isinstance(data, dict):
        raise MalformedRequest("Invalid payload")

    try:
        if data.get("type") == "verification":
            return VerificationChallenge.model_validate(data)
        return EventBatch.model_validate(data)
    except ValidationError as exc:
        raise MalformedRequest("Invalid payload") from exc
