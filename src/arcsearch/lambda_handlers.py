"""AWS Lambda entry points — API Gateway query handler and content event handler.

Each invocation builds its own engine inside ``asyncio.run`` because the
async OpenSearch client is bound to the event loop that created it.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from arcsearch.config.settings import Settings
from arcsearch.core.compiler import compile_query
from arcsearch.core.engine import CatalogEngine
from arcsearch.exceptions import ArcSearchError, ValidationError
from arcsearch.models.events import ContentEvent
from arcsearch.models.query import QueryParams

logger = logging.getLogger(__name__)

_CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def _response(status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {**_CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(body),
    }


async def _with_engine(settings: Settings, action: Any) -> Any:
    engine = CatalogEngine(settings)
    await engine.initialize()
    try:
        return await action(engine)
    finally:
        await engine.shutdown()


def _query_items(event: dict[str, Any]) -> list[tuple[str, str]]:
    multi = event.get("multiValueQueryStringParameters")
    if multi:
        return [(name, value) for name, values in multi.items() for value in values or []]
    return list((event.get("queryStringParameters") or {}).items())


def query_handler(event: dict[str, Any], context: Any, settings: Settings | None = None) -> dict[str, Any]:
    """Handle an API Gateway request carrying query-string filter parameters."""
    settings = settings or Settings()
    params = QueryParams.from_multi_items(_query_items(event))
    try:
        # Reject an unscoped query before any client or credentials are set up.
        compile_query(params)
        documents = asyncio.run(_with_engine(settings, lambda engine: engine.search(params)))
    except ArcSearchError as e:
        logger.warning("Query failed: %s", e.message)
        return _response(e.status_code, e.to_dict())
    return _response(200, documents)


def event_handler(event: dict[str, Any], context: Any, settings: Settings | None = None) -> dict[str, Any]:
    """Handle a content lifecycle event (``{"type": ..., "payload": {...}}``)."""
    settings = settings or Settings()
    try:
        if not isinstance(event.get("type"), str) or not isinstance(event.get("payload", {}), dict):
            raise ValidationError("event needs a string type and an object payload")
        content_event = ContentEvent.model_validate(event)
        outcome = asyncio.run(_with_engine(settings, lambda engine: engine.handle_event(content_event)))
    except ArcSearchError as e:
        logger.error("Error processing event %s: %s", event.get("type"), e.message)
        return _response(e.status_code, e.to_dict())
    return _response(200, outcome.model_dump(mode="json"))
