"""Translate ``opensearch-py`` exceptions into :class:`SearchEngineError`."""

from __future__ import annotations

from opensearchpy.exceptions import (
    ConnectionError,
    NotFoundError,
    OpenSearchException,
    RequestError,
    TransportError,
)

from arcsearch.exceptions import SearchEngineError

_RETRYABLE_STATUS = {429, 502, 503, 504}


def translate_error(error: OpenSearchException, action: str) -> SearchEngineError:
    """Map an engine exception onto the ArcSearch error taxonomy.

    Args:
        error: The exception raised by the client.
        action: What was being attempted, for the message (e.g. ``"search"``).

    Returns:
        A ``SearchEngineError`` carrying the reason category and whether the
        failure is worth retrying by the caller.
    """
    if isinstance(error, ConnectionError):
        return SearchEngineError(
            f"OpenSearch {action} failed: {error}",
            reason=SearchEngineError.TRANSPORT,
            retryable=True,
        )
    if isinstance(error, NotFoundError) and error.error == "index_not_found_exception":
        return SearchEngineError(
            f"OpenSearch {action} failed: index not found",
            reason=SearchEngineError.INDEX_NOT_FOUND,
        )
    if isinstance(error, RequestError):
        return SearchEngineError(
            f"OpenSearch {action} rejected the request: {error.error}",
            reason=SearchEngineError.SCHEMA_MISMATCH,
        )
    if isinstance(error, TransportError):
        status = error.status_code if isinstance(error.status_code, int) else None
        return SearchEngineError(
            f"OpenSearch {action} failed ({error.status_code}): {error.error}",
            retryable=status in _RETRYABLE_STATUS,
        )
    return SearchEngineError(f"OpenSearch {action} failed: {error}")
