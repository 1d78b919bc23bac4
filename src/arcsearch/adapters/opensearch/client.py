"""OpenSearch client factory — SigV4-signed async client for collections and domains.

Uses ``opensearch-py`` (async) with ``AWSV4SignerAsyncAuth``.  Credentials
come from the default boto3 chain (environment, shared config, instance or
Lambda role).
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

from opensearchpy import AsyncHttpConnection, AsyncOpenSearch, AWSV4SignerAsyncAuth

from arcsearch.adapters.base.adapter import AdapterHealth
from arcsearch.config.settings import OpenSearchSettings
from arcsearch.exceptions import SearchEngineError

logger = logging.getLogger(__name__)


def _aws_auth(settings: OpenSearchSettings) -> AWSV4SignerAsyncAuth:
    import boto3

    credentials = boto3.Session(region_name=settings.region).get_credentials()
    if credentials is None:
        raise SearchEngineError(
            "No AWS credentials found for signing OpenSearch requests",
            reason=SearchEngineError.TRANSPORT,
        )
    return AWSV4SignerAsyncAuth(credentials, settings.region, settings.service)


def create_client(settings: OpenSearchSettings) -> AsyncOpenSearch:
    """Create an ``AsyncOpenSearch`` client for the configured endpoint.

    Args:
        settings: OpenSearch connection settings.

    Returns:
        A client ready for use; no request is issued here.
    """
    client_kwargs: dict[str, Any] = {
        "hosts": [settings.endpoint],
        "use_ssl": settings.endpoint.startswith("https://"),
        "verify_certs": settings.verify_certs,
        "ssl_show_warn": False,
        "timeout": settings.timeout,
        "connection_class": AsyncHttpConnection,
    }
    if settings.use_aws_auth:
        client_kwargs["http_auth"] = _aws_auth(settings)

    logger.info(
        "Creating OpenSearch client for %s (index=%s, signed=%s)",
        settings.endpoint,
        settings.index_name,
        settings.use_aws_auth,
    )
    return AsyncOpenSearch(**client_kwargs)


async def check_health(client: AsyncOpenSearch) -> AdapterHealth:
    """Check OpenSearch cluster health.

    Serverless collections do not expose ``_cluster/health``; any failure is
    reported as ``unhealthy`` with the error message instead of raising.
    """
    try:
        start = time.monotonic()
        health = await client.cluster.health()
        latency_ms = int((time.monotonic() - start) * 1000)

        status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

        return AdapterHealth(
            status=status_map.get(health.get("status", "red"), "unhealthy"),
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
        )
    except Exception as e:
        return AdapterHealth(status="unhealthy", last_check=datetime.now(UTC).isoformat(), message=str(e))
