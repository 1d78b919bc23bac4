"""Tests for the OpenSearch adapters (writer, executor, setup, client, errors)."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from opensearchpy.exceptions import ConnectionError, NotFoundError, RequestError, TransportError

from arcsearch.adapters.opensearch.client import check_health, create_client
from arcsearch.adapters.opensearch.errors import translate_error
from arcsearch.adapters.opensearch.executor import OpenSearchQueryExecutor
from arcsearch.adapters.opensearch.setup import IndexManager
from arcsearch.adapters.opensearch.writer import OpenSearchIndexWriter
from arcsearch.config.settings import MappingMode, OpenSearchSettings
from arcsearch.core.compiler import compile_query
from arcsearch.core.projector import project
from arcsearch.exceptions import SearchEngineError
from arcsearch.models.query import QueryParams

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def client() -> MagicMock:
    mock = MagicMock()
    mock.index = AsyncMock(return_value={"_id": "ABCDEF1234567890", "result": "created"})
    mock.delete = AsyncMock(return_value={"_id": "S1", "result": "deleted"})
    mock.search = AsyncMock()
    mock.indices = MagicMock()
    mock.indices.exists = AsyncMock(return_value=False)
    mock.indices.create = AsyncMock(return_value={"acknowledged": True})
    mock.indices.delete = AsyncMock(return_value={"acknowledged": True})
    mock.indices.put_mapping = AsyncMock(return_value={"acknowledged": True})
    mock.indices.get_mapping = AsyncMock(return_value={"test-stories": {"mappings": {"dynamic": "strict"}}})
    return mock


@pytest.fixture
def sample_hit() -> dict[str, Any]:
    return {
        "_index": "test-stories",
        "_id": "S1",
        "_score": None,
        "_source": {
            "display_date": "2024-06-15T12:30:00.000Z",
            "canonical_website": "siteA",
            "type": "story",
            "taxonomy": {"sections": [{"_id": "/news"}], "tags": []},
        },
        "sort": [1718454600000],
    }


# ── Error translation ────────────────────────────────────────────────────────


class TestTranslateError:
    def test_connection_error_is_retryable_transport(self) -> None:
        err = translate_error(ConnectionError("N/A", "Connection refused", Exception()), "search")
        assert err.reason == SearchEngineError.TRANSPORT
        assert err.retryable is True
        assert err.status_code == 502

    def test_index_not_found(self) -> None:
        err = translate_error(NotFoundError(404, "index_not_found_exception", {}), "search")
        assert err.reason == SearchEngineError.INDEX_NOT_FOUND
        assert err.retryable is False
        assert err.status_code == 503

    def test_request_error_is_schema_mismatch(self) -> None:
        err = translate_error(RequestError(400, "strict_dynamic_mapping_exception", {}), "index")
        assert err.reason == SearchEngineError.SCHEMA_MISMATCH
        assert err.status_code == 400
        assert "strict_dynamic_mapping_exception" in err.message

    @pytest.mark.parametrize(("status", "retryable"), [(503, True), (429, True), (500, False), (403, False)])
    def test_other_transport_errors(self, status: int, retryable: bool) -> None:
        err = translate_error(TransportError(status, "boom", {}), "search")
        assert err.reason == SearchEngineError.ENGINE_ERROR
        assert err.retryable is retryable


# ── Writer ───────────────────────────────────────────────────────────────────


class TestIndexWriter:
    async def test_upsert_writes_source_keyed_by_id(self, client: MagicMock, ans_story: dict[str, Any]) -> None:
        writer = OpenSearchIndexWriter(client, "test-stories")
        doc = project(ans_story)

        result = await writer.upsert(doc)

        assert result == "created"
        client.index.assert_awaited_once_with(
            index="test-stories",
            id="ABCDEF1234567890",
            body=doc.to_source(),
            refresh=True,
        )

    async def test_delete_requests_refresh(self, client: MagicMock) -> None:
        writer = OpenSearchIndexWriter(client, "test-stories")
        assert await writer.delete("S1") == "deleted"
        client.delete.assert_awaited_once_with(index="test-stories", id="S1", refresh=True)

    async def test_delete_of_absent_document_is_noop(self, client: MagicMock) -> None:
        client.delete.side_effect = NotFoundError(404, "not_found", {"_id": "S1", "result": "not_found"})
        writer = OpenSearchIndexWriter(client, "test-stories")
        assert await writer.delete("S1") == "not_found"

    async def test_delete_from_missing_index_raises(self, client: MagicMock) -> None:
        client.delete.side_effect = NotFoundError(
            404, "index_not_found_exception", {"error": {"type": "index_not_found_exception"}}
        )
        writer = OpenSearchIndexWriter(client, "test-stories")
        with pytest.raises(SearchEngineError) as exc_info:
            await writer.delete("S1")
        assert exc_info.value.reason == SearchEngineError.INDEX_NOT_FOUND

    async def test_upsert_rejected_by_strict_mapping(self, client: MagicMock, ans_story: dict[str, Any]) -> None:
        client.index.side_effect = RequestError(400, "strict_dynamic_mapping_exception", {})
        writer = OpenSearchIndexWriter(client, "test-stories")
        with pytest.raises(SearchEngineError) as exc_info:
            await writer.upsert(project(ans_story))
        assert exc_info.value.reason == SearchEngineError.SCHEMA_MISMATCH


# ── Executor ─────────────────────────────────────────────────────────────────


class TestQueryExecutor:
    async def test_search_body_and_results(self, client: MagicMock, sample_hit: dict[str, Any]) -> None:
        client.search.return_value = {"took": 3, "hits": {"total": {"value": 1}, "hits": [sample_hit]}}
        executor = OpenSearchQueryExecutor(client, "test-stories")
        tree = compile_query(QueryParams(arcSite="siteA"))

        docs = await executor.execute(tree, 10, 5)

        client.search.assert_awaited_once_with(
            index="test-stories",
            body={
                "query": tree.to_dsl(),
                "from": 10,
                "size": 5,
                "sort": [{"display_date": {"order": "desc"}}],
            },
        )
        assert docs == [{"_id": "S1", **sample_hit["_source"]}]

    async def test_preserves_engine_order(self, client: MagicMock) -> None:
        hits = [{"_id": f"S{i}", "_source": {"type": "story"}} for i in range(3)]
        client.search.return_value = {"hits": {"hits": hits}}
        executor = OpenSearchQueryExecutor(client, "test-stories")

        docs = await executor.execute(compile_query(QueryParams(arcSite="siteA")), 0, 10)
        assert [d["_id"] for d in docs] == ["S0", "S1", "S2"]

    async def test_empty_response(self, client: MagicMock) -> None:
        client.search.return_value = {}
        executor = OpenSearchQueryExecutor(client, "test-stories")
        assert await executor.execute(compile_query(QueryParams(arcSite="siteA")), 0, 10) == []

    async def test_transport_failure(self, client: MagicMock) -> None:
        client.search.side_effect = ConnectionError("N/A", "timed out", Exception())
        executor = OpenSearchQueryExecutor(client, "test-stories")
        with pytest.raises(SearchEngineError) as exc_info:
            await executor.execute(compile_query(QueryParams(arcSite="siteA")), 0, 10)
        assert exc_info.value.retryable is True


# ── Index setup ──────────────────────────────────────────────────────────────


class TestIndexManager:
    async def test_creates_missing_index(self, client: MagicMock) -> None:
        manager = IndexManager(client, "test-stories", MappingMode.STRICT)
        result = await manager.setup()

        assert result.action == "created"
        body = client.indices.create.await_args.kwargs["body"]
        assert body["mappings"]["dynamic"] == "strict"
        client.indices.put_mapping.assert_not_called()
        assert result.mappings == {"test-stories": {"mappings": {"dynamic": "strict"}}}

    async def test_updates_existing_index(self, client: MagicMock) -> None:
        client.indices.exists.return_value = True
        manager = IndexManager(client, "test-stories", MappingMode.LOOSE)
        result = await manager.setup()

        assert result.action == "updated"
        mapping = client.indices.put_mapping.await_args.kwargs["body"]
        assert mapping["dynamic"] is True
        client.indices.create.assert_not_called()

    async def test_force_recreate(self, client: MagicMock) -> None:
        client.indices.exists.return_value = True
        manager = IndexManager(client, "test-stories", MappingMode.STRICT)
        result = await manager.setup(force_recreate=True)

        assert result.action == "recreated"
        client.indices.delete.assert_awaited_once_with(index="test-stories")
        client.indices.create.assert_awaited_once()

    async def test_incompatible_mapping_update(self, client: MagicMock) -> None:
        client.indices.exists.return_value = True
        client.indices.put_mapping.side_effect = TransportError(500, "mapper_exception", {})
        manager = IndexManager(client, "test-stories", MappingMode.STRICT)

        with pytest.raises(SearchEngineError) as exc_info:
            await manager.setup()
        assert exc_info.value.reason == SearchEngineError.SCHEMA_MISMATCH

    async def test_connection_failure(self, client: MagicMock) -> None:
        client.indices.exists.side_effect = ConnectionError("N/A", "refused", Exception())
        manager = IndexManager(client, "test-stories", MappingMode.STRICT)
        with pytest.raises(SearchEngineError) as exc_info:
            await manager.setup()
        assert exc_info.value.reason == SearchEngineError.TRANSPORT


# ── Client ───────────────────────────────────────────────────────────────────


class TestClientFactory:
    def test_unsigned_client(self) -> None:
        settings = OpenSearchSettings(endpoint="http://localhost:9201/", use_aws_auth=False)
        with patch("arcsearch.adapters.opensearch.client.AsyncOpenSearch") as cls:
            create_client(settings)
        kwargs = cls.call_args.kwargs
        assert kwargs["hosts"] == ["http://localhost:9201"]
        assert kwargs["use_ssl"] is False
        assert "http_auth" not in kwargs

    def test_signed_client_uses_boto3_credentials(self) -> None:
        settings = OpenSearchSettings(
            endpoint="https://abc.us-west-2.aoss.amazonaws.com",
            region="us-west-2",
            service="aoss",
        )
        credentials = object()
        with (
            patch("boto3.Session") as session_cls,
            patch("arcsearch.adapters.opensearch.client.AWSV4SignerAsyncAuth") as signer_cls,
            patch("arcsearch.adapters.opensearch.client.AsyncOpenSearch") as cls,
        ):
            session_cls.return_value.get_credentials.return_value = credentials
            create_client(settings)

        signer_cls.assert_called_once_with(credentials, "us-west-2", "aoss")
        assert cls.call_args.kwargs["http_auth"] is signer_cls.return_value
        assert cls.call_args.kwargs["use_ssl"] is True

    def test_missing_credentials_is_a_server_failure(self) -> None:
        settings = OpenSearchSettings(endpoint="https://abc.aoss.amazonaws.com")
        with patch("boto3.Session") as session_cls, pytest.raises(SearchEngineError) as exc_info:
            session_cls.return_value.get_credentials.return_value = None
            create_client(settings)
        assert exc_info.value.reason == SearchEngineError.TRANSPORT
        assert exc_info.value.status_code == 502


class TestHealth:
    async def test_healthy(self) -> None:
        client = MagicMock()
        client.cluster.health = AsyncMock(
            return_value={"status": "green", "cluster_name": "test-cluster", "number_of_nodes": 3}
        )
        health = await check_health(client)
        assert health.status == "healthy"
        assert "test-cluster" in (health.message or "")

    async def test_exception_reports_unhealthy(self) -> None:
        client = MagicMock()
        client.cluster.health = AsyncMock(side_effect=RuntimeError("Connection refused"))
        health = await check_health(client)
        assert health.status == "unhealthy"
        assert health.message == "Connection refused"
