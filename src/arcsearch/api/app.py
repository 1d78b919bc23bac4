"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from arcsearch import __version__
from arcsearch.api.deps import set_engine
from arcsearch.api.v1.router import router as v1_router
from arcsearch.config.settings import Settings
from arcsearch.core.engine import CatalogEngine
from arcsearch.exceptions import ArcSearchError

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        # Auto-detect arcsearch-config.yaml if present
        yaml_path = Path("arcsearch-config.yaml")
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting ArcSearch v%s", __version__)

        engine = CatalogEngine(settings)
        await engine.initialize()
        set_engine(engine)

        app.state.settings = settings
        app.state.engine = engine

        logger.info("ArcSearch is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down ArcSearch...")
        await engine.shutdown()
        set_engine(None)
        logger.info("ArcSearch shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        description="Filtered story listings and lifecycle indexing over an OpenSearch content catalog.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ArcSearchError, _arcsearch_error_handler)  # type: ignore[arg-type]

    app.include_router(v1_router, prefix="/v1")

    return app


async def _arcsearch_error_handler(request: Request, exc: ArcSearchError) -> JSONResponse:
    """Render ArcSearch errors as ``{"error", "message", "reason"}`` with their status code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
