"""OpenSearch adapter — SigV4-signed writer, executor and index setup."""

from arcsearch.adapters.opensearch.client import check_health, create_client
from arcsearch.adapters.opensearch.executor import OpenSearchQueryExecutor
from arcsearch.adapters.opensearch.setup import IndexManager, IndexSetupResult
from arcsearch.adapters.opensearch.writer import OpenSearchIndexWriter

__all__ = [
    "IndexManager",
    "IndexSetupResult",
    "OpenSearchIndexWriter",
    "OpenSearchQueryExecutor",
    "check_health",
    "create_client",
]
