"""OpenSearch query executor — run a compiled tree and return the matching stories."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from opensearchpy.exceptions import OpenSearchException

from arcsearch.adapters.base.adapter import QueryExecutor
from arcsearch.adapters.opensearch.errors import translate_error
from arcsearch.core.compiler import build_search_body

if TYPE_CHECKING:
    from opensearchpy import AsyncOpenSearch

    from arcsearch.core.query_tree import BoolQuery

logger = logging.getLogger(__name__)


class OpenSearchQueryExecutor(QueryExecutor):
    """Searches one OpenSearch index, newest stories first.

    Args:
        client: A connected ``AsyncOpenSearch`` client.
        index_name: Index to search.
    """

    def __init__(self, client: AsyncOpenSearch, index_name: str) -> None:
        self._client = client
        self._index_name = index_name

    async def execute(self, tree: BoolQuery, from_: int, size: int) -> list[dict[str, Any]]:
        body = build_search_body(tree, from_, size)
        try:
            start = time.monotonic()
            response = await self._client.search(index=self._index_name, body=body)
            took_ms = int((time.monotonic() - start) * 1000)
        except OpenSearchException as e:
            raise translate_error(e, "search") from e

        hits = response.get("hits", {}).get("hits", [])
        logger.debug("Search on %s returned %d hits in %d ms", self._index_name, len(hits), took_ms)
        return [self._to_document(hit) for hit in hits]

    @staticmethod
    def _to_document(hit: dict[str, Any]) -> dict[str, Any]:
        """Return the stored projection with the story id restored as ``_id``."""
        return {"_id": hit.get("_id"), **hit.get("_source", {})}
