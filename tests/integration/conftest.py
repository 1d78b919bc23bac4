"""Integration test fixtures — a local OpenSearch seeded with projected stories.

Expects OpenSearch to be running without security on localhost:9201, e.g.:
    docker run -p 9201:9200 -e discovery.type=single-node \
        -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

The index is recreated and seeded once per session.
"""

from __future__ import annotations

import asyncio
import time
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest

from arcsearch.config.settings import MappingMode, Settings
from arcsearch.core.projector import project
from arcsearch.models.schema import build_index_mappings

OPENSEARCH_HOST = "http://localhost:9201"
INDEX_NAME = "arcsearch-it-stories"


def _days_ago(days: int) -> str:
    moment = datetime.now(UTC) - timedelta(days=days)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _story(
    story_id: str,
    site: str,
    days: int,
    content_type: str = "story",
    subtype: str = "standard",
    sections: tuple[str, ...] = (),
    tags: tuple[tuple[str, str], ...] = (),
    distributor: str | None = None,
    promo: bool = False,
) -> dict[str, Any]:
    story: dict[str, Any] = {
        "_id": story_id,
        "type": content_type,
        "subtype": subtype,
        "canonical_website": site,
        "display_date": _days_ago(days),
        "headlines": {"basic": f"Headline {story_id}"},
        "content_elements": [{"type": "text", "content": "Body text that is never indexed."}],
        "taxonomy": {
            "sections": [{"_id": s, "name": s.strip("/")} for s in sections],
            "tags": [{"text": text, "slug": slug} for text, slug in tags],
        },
    }
    if distributor:
        story["distributor"] = {"reference_id": distributor, "category": "wires"}
    if promo:
        story["promo_items"] = {
            "basic": {"_id": f"IMG-{story_id}", "type": "image", "url": f"https://cdn.example.com/{story_id}.jpg"}
        }
    return story


# Newest first for siteA: S1, S2, S5, S3
MOCK_STORIES: list[dict[str, Any]] = [
    _story("S1", "siteA", 1, sections=("/news",), tags=(("Budget", "budget"),), distributor="ap", promo=True),
    _story("S2", "siteA", 3, content_type="gallery", sections=("/sports",), tags=(("Football", "football"),)),
    _story(
        "S3",
        "siteA",
        10,
        sections=("/news", "/news/local"),
        tags=(("Budget", "budget"), ("City Council", "city-council")),
        distributor="reuters",
        promo=True,
    ),
    _story("S4", "siteB", 2, sections=("/news",)),
    _story("S5", "siteA", 5, content_type="video", subtype="live", tags=(("Opinion", "opinion"),)),
]


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=10)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _seed_opensearch(host: str, index: str) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        await client.delete(f"/{index}", params={"ignore_unavailable": "true"})

        resp = await client.put(f"/{index}", json=build_index_mappings(MappingMode.STRICT))
        resp.raise_for_status()

        for story in MOCK_STORIES:
            doc = project(story)
            resp = await client.put(f"/{index}/_doc/{doc.id}", json=doc.to_source())
            resp.raise_for_status()

        await client.post(f"/{index}/_refresh")


@pytest.fixture(scope="session")
def opensearch_ready() -> str:
    """Ensure OpenSearch is running and seeded."""
    if not _wait_for_service(OPENSEARCH_HOST):
        pytest.skip(f"OpenSearch not available at {OPENSEARCH_HOST}")
    asyncio.run(_seed_opensearch(OPENSEARCH_HOST, INDEX_NAME))
    return OPENSEARCH_HOST


@pytest.fixture
def it_settings(opensearch_ready: str) -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        opensearch={
            "endpoint": opensearch_ready,
            "index_name": INDEX_NAME,
            "use_aws_auth": False,
            "verify_certs": False,
        },
    )
