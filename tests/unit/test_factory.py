"""Tests for building the pipeline components from configuration."""

from __future__ import annotations

import pytest

from sharepoint_indexer.config.settings import Settings
from sharepoint_indexer.pipeline.factory import build_components
from sharepoint_indexer.pipeline.orchestrator import IndexingPipeline
from sharepoint_indexer.utils.errors import ConfigurationError


def _settings() -> Settings:
    return Settings(_env_file=None, openai_api_key="sk-test", azure_openai_endpoint="")


def _config(**overrides) -> dict:
    config = {
        "GRAPH_TENANT_ID": "tenant-guid",
        "GRAPH_CLIENT_ID": "client-id",
        "GRAPH_CLIENT_SECRET": "secret",
        "AZURE_OPENAI_EMBEDDING_DEPLOYMENT": "text-embedding-3-small",
        "SEARCH_BACKEND": "azure",
        "SEARCH_INDEX_NAME": "sharepoint-documents",
        "AZURE_SEARCH_ENDPOINT": "https://my-search.search.windows.net",
        "AZURE_SEARCH_API_KEY": "admin-key",
        "MAX_CHUNK_SIZE": 1500,
    }
    config.update(overrides)
    return config


class TestBuildComponents:
    @pytest.mark.asyncio
    async def test_azure_backend(self) -> None:
        components = await build_components(_settings(), _config())
        try:
            assert isinstance(components["pipeline"], IndexingPipeline)
            assert components["document_source"].get_provider_name() == "graph"
            assert components["embedding_provider"].get_provider_name() == "openai_embedding"
            assert components["search_index"].get_provider_name() == "azure_search"
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    async def test_chromadb_backend(self, tmp_path) -> None:
        config = _config(SEARCH_BACKEND="chromadb", CHROMADB_PERSIST_DIR=str(tmp_path / "chroma"))
        components = await build_components(_settings(), config)
        try:
            assert components["search_index"].get_provider_name() == "chromadb"
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "missing",
        ["GRAPH_TENANT_ID", "GRAPH_CLIENT_SECRET", "SEARCH_INDEX_NAME", "AZURE_SEARCH_API_KEY"],
    )
    async def test_missing_setting_is_named(self, missing: str) -> None:
        with pytest.raises(ConfigurationError, match=missing):
            await build_components(_settings(), _config(**{missing: ""}))

    @pytest.mark.asyncio
    async def test_missing_embedding_key(self) -> None:
        settings = Settings(_env_file=None, openai_api_key="", azure_openai_endpoint="")
        with pytest.raises(ConfigurationError, match="embedding API key"):
            await build_components(settings, _config())

    @pytest.mark.asyncio
    async def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown SEARCH_BACKEND"):
            await build_components(_settings(), _config(SEARCH_BACKEND="elastic"))
