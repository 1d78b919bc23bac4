"""Stories endpoint — Filtered, newest-first listing of indexed stories."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from arcsearch.api.deps import get_engine
from arcsearch.core.engine import CatalogEngine
from arcsearch.models.query import QueryParams

router = APIRouter()


@router.get(
    "/stories",
    summary="Query Stories",
    description=(
        "Return one page of stories for a site, newest first.\n\n"
        "**Required:** `arcSite` (or `arc-site`).\n\n"
        "**Filters** (comma-separated lists): `includeContentTypes`, `includeSubtypes`, "
        "`includeSections`, `includeDistributor`, `includeTags`, `excludeContentTypes`, "
        "`excludeSubtypes`, `excludeSections`, `excludeDistributor`, `excludeTags`, "
        "`excludeTheseStoryIds`.\n\n"
        "**Flags:** `mustIncludeAllTags=true` (all tags instead of any), "
        "`mustIncludeThumbnail=true`.\n\n"
        "**Window and paging:** `daysBack`, `from` (default 0), `size` (default 10)."
    ),
    responses={
        200: {"description": "Matching stories (indexed projections) in display-date order"},
        400: {"description": "Missing site scope or a query the index rejects"},
        502: {"description": "Search engine unavailable or failed"},
    },
)
async def query_stories(
    request: Request,
    engine: CatalogEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """Compile the query string into a search and return the matching stories."""
    params = QueryParams.from_multi_items(request.query_params.multi_items())
    return await engine.search(params)
