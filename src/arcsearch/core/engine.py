"""ArcSearch Engine — Owns the OpenSearch connection and serves both paths.

  Write path:  ContentEvent → [Router] → [Projector] → IndexWriter
  Read path:   QueryParams  → [Compiler] → QueryExecutor → documents

The two paths share only the client and the index; no request state
outlives the call that created it.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from arcsearch.adapters.base.adapter import AdapterHealth, IndexWriter, QueryExecutor
from arcsearch.core.compiler import compile_query
from arcsearch.core.router import route
from arcsearch.models.events import ContentEvent, EventOutcome
from arcsearch.models.query import QueryParams

if TYPE_CHECKING:
    from arcsearch.adapters.opensearch.setup import IndexSetupResult
    from arcsearch.config.settings import Settings

logger = logging.getLogger(__name__)


class CatalogEngine:
    """Entry point for event handling and catalog queries.

    Attributes:
        settings: Application configuration.
        writer: Index writer (set by ``initialize`` unless injected).
        executor: Query executor (set by ``initialize`` unless injected).
    """

    def __init__(
        self,
        settings: Settings,
        writer: IndexWriter | None = None,
        executor: QueryExecutor | None = None,
    ) -> None:
        self.settings = settings
        self.writer = writer
        self.executor = executor
        self._client: Any = None

    async def initialize(self) -> None:
        """Create the OpenSearch client and the adapters bound to the configured index."""
        from arcsearch.adapters.opensearch import OpenSearchIndexWriter, OpenSearchQueryExecutor, create_client

        os_settings = self.settings.opensearch
        self._client = create_client(os_settings)
        if self.writer is None:
            self.writer = OpenSearchIndexWriter(self._client, os_settings.index_name)
        if self.executor is None:
            self.executor = OpenSearchQueryExecutor(self._client, os_settings.index_name)
        logger.info("ArcSearch engine initialized for index '%s'", os_settings.index_name)

    async def shutdown(self) -> None:
        """Close the OpenSearch client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
        logger.info("ArcSearch engine shut down")

    # ──────────────────────────────────────────────────────────────────────
    # Write path
    # ──────────────────────────────────────────────────────────────────────

    async def handle_event(self, event: ContentEvent) -> EventOutcome:
        """Apply one content lifecycle event to the index."""
        if self.writer is None:
            raise RuntimeError("ArcSearch engine not initialized.")
        return await route(event, self.writer, namespace=self.settings.events.namespace)

    # ──────────────────────────────────────────────────────────────────────
    # Read path
    # ──────────────────────────────────────────────────────────────────────

    async def search(self, params: QueryParams) -> list[dict[str, Any]]:
        """Compile the parameters and return one page of matching stories.

        Raises:
            MissingScopeError: If no site was supplied.
            SearchEngineError: If the search fails.
        """
        if self.executor is None:
            raise RuntimeError("ArcSearch engine not initialized.")

        start_time = time.monotonic()
        tree = compile_query(params)
        size = min(params.size, self.settings.search.max_page_size)
        documents = await self.executor.execute(tree, params.from_, size)

        logger.info(
            "Query for site %s returned %d stories in %d ms",
            params.site,
            len(documents),
            int((time.monotonic() - start_time) * 1000),
        )
        return documents

    # ──────────────────────────────────────────────────────────────────────
    # Index maintenance
    # ──────────────────────────────────────────────────────────────────────

    async def setup_index(self, force_recreate: bool = False) -> IndexSetupResult:
        """Create or update the configured index with the story mapping."""
        from arcsearch.adapters.opensearch import IndexManager

        if self._client is None:
            raise RuntimeError("ArcSearch engine not initialized.")
        manager = IndexManager(
            self._client,
            self.settings.opensearch.index_name,
            self.settings.opensearch.mapping_mode,
        )
        return await manager.setup(force_recreate=force_recreate)

    async def health_check(self) -> AdapterHealth:
        """Report backend health."""
        from arcsearch.adapters.opensearch import check_health

        if self._client is None:
            return AdapterHealth(status="unhealthy", message="Client not initialized")
        return await check_health(self._client)
