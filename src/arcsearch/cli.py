"""CLI entry point for ArcSearch: run the API server or set up the index."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from arcsearch import __version__
from arcsearch.config.settings import Settings
from arcsearch.exceptions import ArcSearchError
from arcsearch.observability.logging import setup_logging


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="arcsearch",
        description="ArcSearch — OpenSearch-backed story catalog",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ArcSearch {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API server")
    serve.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")
    serve.add_argument("--workers", "-w", type=int, default=None, help="Number of worker processes")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    setup_index = subparsers.add_parser("setup-index", help="Create or update the story index mapping")
    setup_index.add_argument(
        "--force-recreate",
        action="store_true",
        help="Delete and recreate the index (drops all indexed stories)",
    )

    args = parser.parse_args(argv)
    settings = _load_settings(args.config)
    if args.log_level:
        settings.observability.log_level = args.log_level
    setup_logging(settings.observability)

    if args.command == "serve":
        _serve(settings, args)
    else:
        sys.exit(_setup_index(settings, args.force_recreate))


def _load_settings(config: str | None) -> Settings:
    if not config:
        return Settings()
    config_path = Path(config)
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)
    return Settings.from_yaml(config_path)


def _serve(settings: Settings, args: argparse.Namespace) -> None:
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers

    import uvicorn

    from arcsearch.api.app import create_app

    # Multiple workers and reload need an import string; workers then load settings themselves.
    use_factory_path = args.reload or settings.server.workers > 1
    uvicorn.run(
        "arcsearch.api.app:create_app" if use_factory_path else create_app(settings),
        factory=use_factory_path,
        host=settings.server.host,
        port=settings.server.port,
        workers=1 if args.reload else settings.server.workers,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
    )


def _setup_index(settings: Settings, force_recreate: bool) -> int:
    from arcsearch.core.engine import CatalogEngine

    async def run() -> int:
        engine = CatalogEngine(settings)
        try:
            await engine.initialize()
            health = await engine.health_check()
            print(f"OpenSearch: {health.status} ({health.message})")
            result = await engine.setup_index(force_recreate=force_recreate)
        except ArcSearchError as e:
            print(f"Failed to set up index: {e.message}", file=sys.stderr)
            if e.reason == "schema_mismatch" and not force_recreate:
                print("Rerun with --force-recreate to rebuild the index.", file=sys.stderr)
            return 1
        finally:
            await engine.shutdown()

        print(f"Index '{result.index_name}' {result.action}.")
        print(json.dumps(result.mappings, indent=2))
        return 0

    return asyncio.run(run())


if __name__ == "__main__":
    main()
