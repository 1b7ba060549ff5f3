"""Unit tests for the ChromaDB search-index provider.

Uses a real persistent client in ``tmp_path``; every document carries its
own vector so no embedding model is loaded.
"""

from __future__ import annotations

import pytest

from sharepoint_indexer.models.index import IndexDocument
from sharepoint_indexer.providers.search_index.chromadb_provider import ChromaDBIndexProvider
from sharepoint_indexer.services.document_builder import build_index_document
from sharepoint_indexer.services.index_synchronizer import IndexSynchronizer, source_filter
from sharepoint_indexer.utils.errors import ValidationError
from tests.conftest import make_metadata

_URL_A = "https://contoso.sharepoint.com/sites/Eng/Shared%20Documents/a.txt"
_URL_B = "https://contoso.sharepoint.com/sites/Eng/Shared%20Documents/O'Brien.txt"


def _documents(source_id: str, url: str, count: int) -> list[IndexDocument]:
    metadata = make_metadata(file_id=source_id, web_url=url)
    return [
        build_index_document(source_id, i, metadata, f"Chunk {i} of {source_id}.", [0.1 * i, 0.2, 0.3], count)
        for i in range(1, count + 1)
    ]


@pytest.fixture()
def provider(tmp_path) -> ChromaDBIndexProvider:
    return ChromaDBIndexProvider(
        persist_directory=str(tmp_path / "chroma"),
        collection_name="test_index",
    )


class TestChromaDBIndexProvider:
    def test_get_provider_name(self, provider: ChromaDBIndexProvider) -> None:
        assert provider.get_provider_name() == "chromadb"

    @pytest.mark.asyncio
    async def test_upsert_then_query_by_url(self, provider: ChromaDBIndexProvider) -> None:
        outcomes = await provider.upsert(_documents("A", _URL_A, 2) + _documents("B", _URL_B, 1))

        assert all(outcome.succeeded for outcome in outcomes)
        assert provider.count() == 3
        assert sorted(await provider.query_ids(source_filter(_URL_A))) == ["A-1", "A-2"]
        assert await provider.query_ids(source_filter(_URL_B)) == ["B-1"]

    @pytest.mark.asyncio
    async def test_upsert_overwrites_same_key(self, provider: ChromaDBIndexProvider) -> None:
        await provider.upsert(_documents("A", _URL_A, 1))
        await provider.upsert(_documents("A", _URL_A, 1))

        assert provider.count() == 1

    @pytest.mark.asyncio
    async def test_delete_by_ids(self, provider: ChromaDBIndexProvider) -> None:
        await provider.upsert(_documents("A", _URL_A, 3))

        assert await provider.delete_by_ids(["A-1", "A-3"]) == 2
        assert await provider.query_ids(source_filter(_URL_A)) == ["A-2"]

    @pytest.mark.asyncio
    async def test_empty_operations(self, provider: ChromaDBIndexProvider) -> None:
        assert await provider.delete_by_ids([]) == 0
        assert await provider.upsert([]) == []
        assert await provider.query_ids(source_filter(_URL_A)) == []

    @pytest.mark.asyncio
    async def test_unsupported_filter_rejected(self, provider: ChromaDBIndexProvider) -> None:
        with pytest.raises(ValidationError, match="Unsupported filter"):
            await provider.query_ids("search.ismatch('x')")

    @pytest.mark.asyncio
    async def test_synchronizer_replaces_chunk_set(self, provider: ChromaDBIndexProvider) -> None:
        sync = IndexSynchronizer(provider)
        await sync.upsert_batch(_documents("A", _URL_A, 3))

        deleted = await sync.delete_by_source(_URL_A)
        await sync.upsert_batch(_documents("A", _URL_A, 2))

        assert deleted == 3
        assert sorted(await provider.query_ids(source_filter(_URL_A))) == ["A-1", "A-2"]


class TestFilterTranslation:
    def test_equality(self) -> None:
        assert ChromaDBIndexProvider._translate_filter("fileUrl eq 'x'") == {"fileUrl": "x"}

    def test_doubled_quote_unescaped(self) -> None:
        where = ChromaDBIndexProvider._translate_filter(source_filter(_URL_B))
        assert where == {"fileUrl": _URL_B}

    def test_metadata_excludes_vector_and_text(self) -> None:
        record = _documents("A", _URL_A, 1)[0].to_index_record()
        metadata = ChromaDBIndexProvider._to_metadata(record)
        assert "descriptionVector" not in metadata
        assert "description" not in metadata
        assert metadata["fileUrl"] == _URL_A
        assert metadata["totalChuncks"] == 1
