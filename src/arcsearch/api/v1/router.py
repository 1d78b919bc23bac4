"""API v1 Router — Story query, content event, and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from arcsearch.api.v1.endpoints.events import router as events_router
from arcsearch.api.v1.endpoints.health import router as health_router
from arcsearch.api.v1.endpoints.stories import router as stories_router

router = APIRouter(tags=["v1"])
router.include_router(stories_router)
router.include_router(events_router)
router.include_router(health_router)
