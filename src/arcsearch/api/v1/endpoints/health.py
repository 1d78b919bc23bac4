"""Health check endpoint — Service and search backend health."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from arcsearch import __version__
from arcsearch.adapters.base.adapter import AdapterHealth
from arcsearch.api.deps import get_engine
from arcsearch.core.engine import CatalogEngine

router = APIRouter()


class HealthResponse(BaseModel):
    """System health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="ArcSearch server version")
    service: str = Field(description="Service name ('arcsearch')")
    index: str = Field(description="Name of the story index")
    backend: AdapterHealth = Field(description="OpenSearch health")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="System Health Check",
    description="Returns service health, version, the configured index and OpenSearch health.",
)
async def health_check(
    engine: CatalogEngine = Depends(get_engine),
) -> HealthResponse:
    """Basic health check endpoint with backend status."""
    backend = await engine.health_check()
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="arcsearch",
        index=engine.settings.opensearch.index_name,
        backend=backend,
    )
