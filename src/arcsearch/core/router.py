"""Event router — apply one content lifecycle event to the index.

``update`` / ``publish`` project the story and upsert it; ``unpublish`` /
``delete`` remove it.  Every event results in exactly one write keyed by the
story id, so redelivery of the same event converges on the same index state.
"""

from __future__ import annotations

import logging

from arcsearch.adapters.base import IndexWriter
from arcsearch.core.projector import project
from arcsearch.exceptions import UnsupportedEventError, ValidationError
from arcsearch.models.events import OPERATION_BY_EVENT, ContentEvent, EventOutcome, EventType, Operation

logger = logging.getLogger(__name__)


def parse_event_type(raw_type: str, namespace: str = "story") -> EventType:
    """Resolve a wire event type (``story.publish`` or ``publish``) to an :class:`EventType`.

    Raises:
        UnsupportedEventError: If the namespace or verb is not recognized.
    """
    verb = raw_type
    prefix, sep, rest = raw_type.partition(".")
    if sep:
        if prefix != namespace:
            raise UnsupportedEventError(raw_type)
        verb = rest
    try:
        return EventType(verb)
    except ValueError:
        raise UnsupportedEventError(raw_type) from None


async def route(event: ContentEvent, writer: IndexWriter, namespace: str = "story") -> EventOutcome:
    """Route a content event to a single index write.

    Args:
        event: The inbound event.
        writer: Index writer for the target index.
        namespace: Expected wire prefix of the event type.

    Returns:
        The outcome of the write, including the engine's result token.

    Raises:
        UnsupportedEventError: Unknown event type; nothing is written.
        ValidationError: The payload has no ``_id``; nothing is written.
        SearchEngineError: The write itself failed.
    """
    event_type = parse_event_type(event.type, namespace)
    operation = OPERATION_BY_EVENT[event_type]

    story_id = event.payload.get("_id")
    if not story_id:
        raise ValidationError(f"missing id for {operation.value}")
    story_id = str(story_id)

    if operation is Operation.INDEX:
        document = project(event.payload)
        engine_result = await writer.upsert(document)
    else:
        engine_result = await writer.delete(story_id)

    logger.info("Applied %s event: %s %s -> %s", event.type, operation.value, story_id, engine_result)
    return EventOutcome(operation=operation, id=story_id, engine_result=engine_result)
