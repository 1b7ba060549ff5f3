"""Construction of providers, services, and the pipeline from configuration.

Shared by the HTTP app (``main.py``), the queue worker, and the CLI so all
three entry points wire identical pipelines.  Required settings are read
through :class:`ISettingsProvider`, which raises
:class:`ConfigurationError` naming the first missing one.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from sharepoint_indexer.config.loader import load_config
from sharepoint_indexer.config.settings import Settings
from sharepoint_indexer.interfaces.search_index_provider import ISearchIndexProvider
from sharepoint_indexer.interfaces.settings_provider import ISettingsProvider
from sharepoint_indexer.pipeline.orchestrator import IndexingPipeline
from sharepoint_indexer.providers.document_source.graph_provider import GraphDocumentSource
from sharepoint_indexer.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from sharepoint_indexer.providers.search_index.azure_search_provider import AzureSearchIndexProvider
from sharepoint_indexer.providers.settings.env_settings_provider import EnvSettingsProvider
from sharepoint_indexer.services.chunker import SentenceChunker
from sharepoint_indexer.services.embedder import Embedder
from sharepoint_indexer.services.extraction import TextExtractor
from sharepoint_indexer.services.index_synchronizer import IndexSynchronizer
from sharepoint_indexer.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


async def _build_search_index(
    settings_provider: ISettingsProvider,
    http_client: httpx.AsyncClient,
) -> ISearchIndexProvider:
    """Select the search backend named by ``SEARCH_BACKEND``."""
    backend = (await settings_provider.get_optional_setting("SEARCH_BACKEND", "azure")).lower()
    index_name = await settings_provider.get_setting("SEARCH_INDEX_NAME")

    if backend == "azure":
        return AzureSearchIndexProvider(
            http_client=http_client,
            endpoint=await settings_provider.get_setting("AZURE_SEARCH_ENDPOINT"),
            api_key=await settings_provider.get_setting("AZURE_SEARCH_API_KEY"),
            index_name=index_name,
            api_version=await settings_provider.get_optional_setting(
                "AZURE_SEARCH_API_VERSION", "2023-11-01"
            ),
        )
    if backend == "chromadb":
        # Imported lazily so the Azure-only deployment never loads chromadb.
        from sharepoint_indexer.providers.search_index.chromadb_provider import (
            ChromaDBIndexProvider,
        )

        return ChromaDBIndexProvider(
            persist_directory=await settings_provider.get_setting("CHROMADB_PERSIST_DIR"),
            collection_name=index_name,
        )
    raise ConfigurationError(f"Unknown SEARCH_BACKEND: {backend!r} (expected 'azure' or 'chromadb')")


async def build_components(
    app_settings: Settings | None = None,
    config: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance for one process.

    Parameters
    ----------
    app_settings:
        Settings; read from the environment when omitted.
    config:
        Merged configuration mapping; produced by :func:`load_config`
        when omitted.

    Returns
    -------
    dict
        Named components: ``http_client``, ``settings_provider``,
        ``document_source``, ``embedding_provider``, ``search_index``,
        ``pipeline``.  The caller owns ``http_client`` and must close it.

    Raises
    ------
    ConfigurationError
        If a required setting is missing.
    """
    app_settings = app_settings or Settings()
    config = config if config is not None else load_config(settings=app_settings)
    settings_provider = EnvSettingsProvider(config)

    http_client = httpx.AsyncClient(
        timeout=float(await settings_provider.get_optional_setting("GRAPH_TIMEOUT_SECONDS", "60"))
    )
    try:
        document_source = GraphDocumentSource(
            http_client=http_client,
            tenant_id=await settings_provider.get_setting("GRAPH_TENANT_ID"),
            client_id=await settings_provider.get_setting("GRAPH_CLIENT_ID"),
            client_secret=await settings_provider.get_setting("GRAPH_CLIENT_SECRET"),
            base_url=await settings_provider.get_optional_setting(
                "GRAPH_BASE_URL", "https://graph.microsoft.com/v1.0"
            ),
            authority_url=await settings_provider.get_optional_setting(
                "GRAPH_AUTHORITY_URL", "https://login.microsoftonline.com"
            ),
            drive_name=await settings_provider.get_optional_setting("GRAPH_DRIVE_NAME", "Documents"),
        )

        embedding_provider = OpenAIEmbeddingProvider(settings=app_settings)
        if not embedding_provider.is_available():
            raise ConfigurationError(
                "No embedding API key configured (AZURE_OPENAI_API_KEY or OPENAI_API_KEY)"
            )
        embedder = Embedder(
            provider=embedding_provider,
            deployment=await settings_provider.get_setting("AZURE_OPENAI_EMBEDDING_DEPLOYMENT"),
            max_retries=int(await settings_provider.get_optional_setting("EMBEDDING_MAX_RETRIES", "3")),
            base_delay=float(await settings_provider.get_optional_setting("EMBEDDING_BASE_DELAY", "1.0")),
            expected_dimension=int(
                await settings_provider.get_optional_setting("EMBEDDING_DIMENSION", "0")
            ),
        )

        search_index = await _build_search_index(settings_provider, http_client)
    except Exception:
        await http_client.aclose()
        raise

    chunker = SentenceChunker(
        max_chunk_size=int(await settings_provider.get_optional_setting("MAX_CHUNK_SIZE", "2000"))
    )
    pipeline = IndexingPipeline(
        document_source=document_source,
        extractor=TextExtractor(),
        chunker=chunker,
        embedder=embedder,
        synchronizer=IndexSynchronizer(search_index),
    )

    logger.info(
        "components_built",
        document_source=document_source.get_provider_name(),
        embedding=embedding_provider.get_provider_name(),
        search_index=search_index.get_provider_name(),
        max_chunk_size=chunker.max_chunk_size,
    )
    return {
        "http_client": http_client,
        "settings_provider": settings_provider,
        "document_source": document_source,
        "embedding_provider": embedding_provider,
        "search_index": search_index,
        "pipeline": pipeline,
    }
