"""FastAPI routes for on-demand document indexing.

# Endpoint            Method     Description
# ────────────────────────────────────────────────────────────────
# /api/v1/index       GET, POST  Index one SharePoint file
# /api/v1/health      GET        Health check + provider names

The file URL is taken from the ``fileUrl`` query parameter, then from a JSON
body ``{"fileUrl": ...}``, then from the ``DEFAULT_SHAREPOINT_FILE_PATH``
setting.  Services are resolved from ``app.state`` via ``Depends``; errors are
turned into the 500 body by :class:`~sharepoint_indexer.api.middleware.ErrorHandlingMiddleware`.
"""

from __future__ import annotations

import json
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request

from sharepoint_indexer import __version__
from sharepoint_indexer.api.schemas import HealthResponse, IndexRequest, IndexResponse
from sharepoint_indexer.interfaces.settings_provider import ISettingsProvider
from sharepoint_indexer.pipeline.orchestrator import IndexingPipeline
from sharepoint_indexer.utils.errors import MalformedReferenceError
from sharepoint_indexer.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")


def _get_pipeline(request: Request) -> IndexingPipeline:
    return request.app.state.pipeline


def _get_settings_provider(request: Request) -> ISettingsProvider:
    return request.app.state.settings_provider


PipelineDep = Annotated[IndexingPipeline, Depends(_get_pipeline)]
SettingsProviderDep = Annotated[ISettingsProvider, Depends(_get_settings_provider)]


async def _file_url_from_body(request: Request) -> str | None:
    """Return ``fileUrl`` from a JSON body; a missing or non-JSON body yields ``None``."""
    raw = await request.body()
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        _logger.warning("index_request_body_not_json", length=len(raw))
        return None
    if not isinstance(payload, dict):
        return None
    return IndexRequest.model_validate(payload).file_url


@router.api_route("/index", methods=["GET", "POST"], response_model=IndexResponse)
async def index_document(
    request: Request,
    pipeline: PipelineDep,
    settings_provider: SettingsProviderDep,
    file_url: Annotated[str | None, Query(alias="fileUrl")] = None,
) -> IndexResponse:
    """Run the indexing pipeline for one file and report the chunk count.

    Failures propagate to :class:`ErrorHandlingMiddleware`, which answers 500.
    """
    reference = (
        file_url
        or await _file_url_from_body(request)
        or await settings_provider.get_optional_setting("DEFAULT_SHAREPOINT_FILE_PATH")
    )
    if not reference:
        raise MalformedReferenceError("No fileUrl provided and no default file path configured")

    _logger.info("index_request_received", file_url=reference, method=request.method)
    result = await pipeline.run(reference)

    return IndexResponse(message=result.message, file_url=result.reference, chunk_count=result.chunk_count)


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Report liveness and which provider backs each interface."""
    providers: dict[str, str] = {}
    for role in ("document_source", "embedding_provider", "search_index"):
        provider = getattr(request.app.state, role, None)
        if provider is not None:
            providers[role] = provider.get_provider_name()
    return HealthResponse(status="healthy", version=__version__, providers=providers)
