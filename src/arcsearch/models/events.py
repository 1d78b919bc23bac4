"""Content lifecycle event models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Lifecycle verbs understood by the event router (without namespace)."""

    UPDATE = "update"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    DELETE = "delete"


class Operation(str, Enum):
    INDEX = "index"
    DELETE = "delete"


OPERATION_BY_EVENT: dict[EventType, Operation] = {
    EventType.UPDATE: Operation.INDEX,
    EventType.PUBLISH: Operation.INDEX,
    EventType.UNPUBLISH: Operation.DELETE,
    EventType.DELETE: Operation.DELETE,
}


class ContentEvent(BaseModel):
    """An inbound content event, e.g. ``{"type": "story.publish", "payload": {...}}``."""

    model_config = ConfigDict(extra="ignore")

    type: str = Field(description="Namespaced event type, e.g. 'story.publish'")
    payload: dict[str, Any] = Field(default_factory=dict, description="Raw ANS object")


class EventOutcome(BaseModel):
    """Result of routing one event to the index."""

    status: Literal["success"] = "success"
    operation: Operation
    id: str
    engine_result: str | None = Field(default=None, description="OpenSearch result token, e.g. 'created'")
