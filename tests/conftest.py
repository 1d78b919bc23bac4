"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any

import pytest

from arcsearch.config.settings import Settings


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance that never signs requests."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        opensearch={
            "endpoint": "http://localhost:9201",
            "index_name": "test-stories",
            "use_aws_auth": False,
        },
    )


@pytest.fixture
def ans_story() -> dict[str, Any]:
    """A published ANS story with body content, taxonomy and a promo image."""
    return {
        "_id": "ABCDEF1234567890",
        "type": "story",
        "subtype": "standard",
        "canonical_website": "siteA",
        "display_date": "2024-06-15T12:30:00.000Z",
        "created_date": "2024-06-14T08:00:00.000Z",
        "headlines": {"basic": "City council approves new budget"},
        "distributor": {
            "category": "wires",
            "name": "Associated Press",
            "reference_id": "ap-123",
        },
        "taxonomy": {
            "sections": [
                {"_id": "/news", "name": "News", "_website": "siteA", "type": "section"},
                {"_id": "/news/local", "name": "Local", "_website": "siteA", "type": "section"},
            ],
            "tags": [
                {"text": "Budget", "slug": "budget", "description": "City budget"},
                {"text": "City Council", "slug": "city-council"},
            ],
        },
        "websites": {
            "siteA": {"website_url": "/news/2024/06/15/budget/", "website_section": {"_id": "/news"}},
        },
        "promo_items": {
            "basic": {
                "_id": "IMG123",
                "type": "image",
                "url": "https://cdn.example.com/img123.jpg",
                "caption": "Council chamber",
                "width": 1920,
            },
        },
        "content_elements": [
            {"_id": "P1", "type": "text", "content": "The council voted 7-2 on Tuesday..."},
            {"_id": "P2", "type": "text", "content": "The budget includes..."},
        ],
    }


@pytest.fixture
def draft_story() -> dict[str, Any]:
    """An unpublished story: no display_date, no taxonomy, no distributor."""
    return {
        "_id": "DRAFT0001",
        "type": "story",
        "canonical_website": "siteA",
        "created_date": "2024-06-20T09:15:00.000Z",
        "content_elements": [{"_id": "P1", "type": "text", "content": "Draft text"}],
    }
