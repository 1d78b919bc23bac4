"""Content events endpoint — Keep the index in step with story lifecycle events."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from arcsearch.api.deps import get_engine
from arcsearch.core.engine import CatalogEngine
from arcsearch.models.events import ContentEvent, EventOutcome

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/events",
    response_model=EventOutcome,
    summary="Apply Content Event",
    description=(
        "Apply one content lifecycle event to the index. "
        "`story.update` / `story.publish` upsert the projected story; "
        "`story.unpublish` / `story.delete` remove it. "
        "The call returns once the change is visible to searches."
    ),
    responses={
        400: {"description": "Payload has no `_id`, or the index rejected the document shape"},
        422: {"description": "Unsupported event type or malformed body"},
        502: {"description": "Search engine unavailable or failed"},
    },
)
async def apply_event(
    event: ContentEvent,
    engine: CatalogEngine = Depends(get_engine),
) -> EventOutcome:
    """Route the event to a single index write."""
    logger.debug("Received event %s", event.type)
    return await engine.handle_event(event)
