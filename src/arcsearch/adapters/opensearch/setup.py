"""Index setup — create the story index or bring its mapping up to date.

Three outcomes, depending on the current state of the index:

* missing → created with the schema mapping;
* present → mapping updated in place (additive changes only);
* present and ``force_recreate`` → deleted and created again (drops all
  documents; they come back as stories are republished).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from opensearchpy.exceptions import OpenSearchException
from pydantic import BaseModel, Field

from arcsearch.adapters.opensearch.errors import translate_error
from arcsearch.config.settings import MappingMode
from arcsearch.exceptions import SearchEngineError
from arcsearch.models.schema import build_index_mappings

if TYPE_CHECKING:
    from opensearchpy import AsyncOpenSearch

logger = logging.getLogger(__name__)


class IndexSetupResult(BaseModel):
    """Outcome of an index setup run."""

    index_name: str
    action: str = Field(description="created, updated or recreated")
    mappings: dict[str, Any] = Field(default_factory=dict, description="Mapping reported by the engine afterwards")


class IndexManager:
    """Creates and maintains the story index.

    Args:
        client: A connected ``AsyncOpenSearch`` client.
        index_name: The index to manage.
        mapping_mode: ``strict`` or ``loose`` handling of undeclared fields.
    """

    def __init__(self, client: AsyncOpenSearch, index_name: str, mapping_mode: MappingMode) -> None:
        self._client = client
        self._index_name = index_name
        self._body = build_index_mappings(mapping_mode)

    async def setup(self, force_recreate: bool = False) -> IndexSetupResult:
        """Create, update or recreate the index.

        Raises:
            SearchEngineError: If any engine call fails.  An incompatible
                mapping update surfaces with reason ``schema_mismatch``; rerun
                with ``force_recreate`` to rebuild the index.
        """
        try:
            exists = await self._client.indices.exists(index=self._index_name)
            if exists and force_recreate:
                logger.info("Force recreate set; deleting index '%s'", self._index_name)
                await self._client.indices.delete(index=self._index_name)
                await self._create()
                action = "recreated"
            elif exists:
                await self._update_mapping()
                action = "updated"
            else:
                await self._create()
                action = "created"

            mappings = await self._client.indices.get_mapping(index=self._index_name)
        except SearchEngineError:
            raise
        except OpenSearchException as e:
            raise translate_error(e, "index setup") from e

        logger.info("Index '%s' setup complete (%s)", self._index_name, action)
        return IndexSetupResult(index_name=self._index_name, action=action, mappings=dict(mappings))

    async def _create(self) -> None:
        logger.info("Creating index '%s' with mappings", self._index_name)
        await self._client.indices.create(index=self._index_name, body=self._body)

    async def _update_mapping(self) -> None:
        logger.info("Updating mappings for existing index '%s'", self._index_name)
        try:
            await self._client.indices.put_mapping(index=self._index_name, body=self._body["mappings"])
        except OpenSearchException as e:
            error = translate_error(e, "mapping update")
            error.reason = SearchEngineError.SCHEMA_MISMATCH
            logger.error(
                "Mapping update for '%s' is incompatible with existing data; rerun with force recreate",
                self._index_name,
            )
            raise error from e
