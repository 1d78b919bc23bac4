"""Base index adapters — Abstract interface for the write and read paths.

The write path (``IndexWriter``) and the read path (``QueryExecutor``) share
nothing but the index they target.  Implementations receive their
connection and index name at construction and keep no per-request state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from arcsearch.core.query_tree import BoolQuery
    from arcsearch.models.document import IndexedDocument


class AdapterHealth(BaseModel):
    """Health status of the search backend."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class IndexWriter(ABC):
    """Applies single-document writes keyed by story id.

    Both operations request synchronous visibility: they return only once
    the change is searchable.
    """

    @abstractmethod
    async def upsert(self, document: IndexedDocument) -> str:
        """Create or replace the document under ``document.id``.

        Returns:
            The engine's result token (``created`` / ``updated``).

        Raises:
            SearchEngineError: If the write fails.
        """

    @abstractmethod
    async def delete(self, doc_id: str) -> str:
        """Delete the document with ``doc_id``.

        Deleting an absent document is not an error.

        Returns:
            The engine's result token (``deleted`` / ``not_found``).

        Raises:
            SearchEngineError: If the delete fails.
        """


class QueryExecutor(ABC):
    """Runs compiled queries against the index."""

    @abstractmethod
    async def execute(self, tree: BoolQuery, from_: int, size: int) -> list[dict[str, Any]]:
        """Search with the compiled tree, the fixed sort and pagination bounds.

        Returns:
            Matching documents in engine order.

        Raises:
            SearchEngineError: On transport or query-shape failures.
        """
