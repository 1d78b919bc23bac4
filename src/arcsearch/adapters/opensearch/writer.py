"""OpenSearch index writer — single-document upserts and deletes keyed by story id."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opensearchpy.exceptions import NotFoundError, OpenSearchException

from arcsearch.adapters.base.adapter import IndexWriter
from arcsearch.adapters.opensearch.errors import translate_error

if TYPE_CHECKING:
    from opensearchpy import AsyncOpenSearch

    from arcsearch.models.document import IndexedDocument

logger = logging.getLogger(__name__)


class OpenSearchIndexWriter(IndexWriter):
    """Writes projected stories to one OpenSearch index.

    Every call passes ``refresh=true`` so the change is searchable by the
    time the call returns.

    Args:
        client: A connected ``AsyncOpenSearch`` client.
        index_name: Target index.
    """

    def __init__(self, client: AsyncOpenSearch, index_name: str) -> None:
        self._client = client
        self._index_name = index_name

    async def upsert(self, document: IndexedDocument) -> str:
        try:
            response = await self._client.index(
                index=self._index_name,
                id=document.id,
                body=document.to_source(),
                refresh=True,
            )
        except OpenSearchException as e:
            raise translate_error(e, "index") from e
        result = response.get("result", "unknown")
        logger.debug("Indexed %s into %s: %s", document.id, self._index_name, result)
        return result

    async def delete(self, doc_id: str) -> str:
        try:
            response = await self._client.delete(index=self._index_name, id=doc_id, refresh=True)
        except NotFoundError as e:
            # Missing document: the index already reflects the delete.
            if isinstance(e.info, dict) and e.info.get("result") == "not_found":
                logger.debug("Delete of %s from %s: not_found", doc_id, self._index_name)
                return "not_found"
            raise translate_error(e, "delete") from e
        except OpenSearchException as e:
            raise translate_error(e, "delete") from e
        result = response.get("result", "unknown")
        logger.debug("Deleted %s from %s: %s", doc_id, self._index_name, result)
        return result
