"""SharePoint indexer FastAPI application entry point.

Wires providers, services, and routes via dependency injection.  Loads
configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging at import time.

Run with ``python -m sharepoint_indexer.main`` or
``uvicorn sharepoint_indexer.main:app``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from sharepoint_indexer import __version__
from sharepoint_indexer.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from sharepoint_indexer.api.routes import router as api_router
from sharepoint_indexer.config.loader import load_config
from sharepoint_indexer.config.settings import Settings
from sharepoint_indexer.pipeline.factory import build_components
from sharepoint_indexer.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(components: dict[str, Any] | None = None) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    components:
        Pre-built components to place on ``app.state`` (tests pass fakes
        here).  When omitted they are built from configuration at startup.
    """

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # noqa: ANN202
        built = components
        if built is None:
            built = await build_components(settings, load_config(settings=settings))

        for key, value in built.items():
            setattr(application.state, key, value)

        _logger.info("app_startup", version=__version__, environment=settings.app_env)

        yield

        # -- Shutdown: close the shared httpx client, if this app owns one --
        http_client: httpx.AsyncClient | None = built.get("http_client")
        if http_client is not None:
            await http_client.aclose()
        _logger.info("app_shutdown")

    application = FastAPI(
        title="SharePoint Indexer API",
        version=__version__,
        description=(
            "Index a SharePoint document: extract its text, chunk it, embed each "
            "chunk, and replace the document's chunks in the search index."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "sharepoint_indexer.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
