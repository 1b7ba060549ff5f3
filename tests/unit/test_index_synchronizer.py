"""Unit tests for the delete-then-upsert index synchronizer."""

from __future__ import annotations

import pytest

from sharepoint_indexer.models.index import IndexDocument
from sharepoint_indexer.services.document_builder import build_index_document
from sharepoint_indexer.services.index_synchronizer import IndexSynchronizer, source_filter
from sharepoint_indexer.utils.errors import PartialUploadError, ValidationError
from tests.conftest import FILE_URL, MockSearchIndex, make_metadata


def _documents(count: int, url: str = FILE_URL) -> list[IndexDocument]:
    metadata = make_metadata(web_url=url)
    return [
        build_index_document(
            source_id="01ABCDEF",
            chunk_index=i,
            metadata=metadata,
            content=f"Chunk {i}.",
            embedding=[float(i), 0.5],
            total_chunks=count,
        )
        for i in range(1, count + 1)
    ]


class TestSourceFilter:
    def test_plain_url(self) -> None:
        assert source_filter("https://x/a.txt") == "fileUrl eq 'https://x/a.txt'"

    def test_single_quotes_are_doubled(self) -> None:
        assert source_filter("https://x/O'Brien's.txt") == "fileUrl eq 'https://x/O''Brien''s.txt'"


class TestDeleteBySource:
    @pytest.mark.asyncio
    async def test_removes_only_matching_chunks(self, mock_search_index: MockSearchIndex) -> None:
        sync = IndexSynchronizer(mock_search_index)
        await sync.upsert_batch(_documents(2))
        other = _documents(1, url="https://contoso.sharepoint.com/sites/Engineering/Shared%20Documents/other.txt")
        mock_search_index.records["other-1"] = other[0].to_index_record()

        deleted = await sync.delete_by_source(FILE_URL)

        assert deleted == 2
        assert list(mock_search_index.records) == ["other-1"]

    @pytest.mark.asyncio
    async def test_nothing_indexed_skips_delete(self, mock_search_index: MockSearchIndex) -> None:
        deleted = await IndexSynchronizer(mock_search_index).delete_by_source(FILE_URL)

        assert deleted == 0
        assert mock_search_index.operations == ["query"]

    @pytest.mark.asyncio
    async def test_quoted_url_round_trips(self, mock_search_index: MockSearchIndex) -> None:
        url = "https://contoso.sharepoint.com/sites/Eng/Shared%20Documents/O'Brien.txt"
        sync = IndexSynchronizer(mock_search_index)
        await sync.upsert_batch(_documents(1, url=url))

        assert await sync.delete_by_source(url) == 1
        assert mock_search_index.filters[-1].endswith("O''Brien.txt'")


class TestUpsertBatch:
    @pytest.mark.asyncio
    async def test_all_accepted(self, mock_search_index: MockSearchIndex) -> None:
        outcomes = await IndexSynchronizer(mock_search_index).upsert_batch(_documents(3))

        assert [o.key for o in outcomes] == ["01ABCDEF-1", "01ABCDEF-2", "01ABCDEF-3"]
        assert all(o.succeeded for o in outcomes)
        assert len(mock_search_index.records) == 3

    @pytest.mark.asyncio
    async def test_empty_batch_does_not_call_index(self, mock_search_index: MockSearchIndex) -> None:
        assert await IndexSynchronizer(mock_search_index).upsert_batch([]) == []
        assert mock_search_index.operations == []

    @pytest.mark.asyncio
    async def test_one_rejected_raises_partial_upload(self, mock_search_index: MockSearchIndex) -> None:
        mock_search_index.fail_keys = {"01ABCDEF-2"}

        with pytest.raises(PartialUploadError) as exc_info:
            await IndexSynchronizer(mock_search_index).upsert_batch(_documents(3))

        assert exc_info.value.failed_count == 1
        assert exc_info.value.provider_name == "mock-index"
        assert "Failed to upload 1 documents" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_document_blocks_whole_batch(self, mock_search_index: MockSearchIndex) -> None:
        documents = _documents(2)
        documents[1] = documents[1].model_copy(update={"last_modified": "not a date"})

        with pytest.raises(ValidationError, match="lastmodified"):
            await IndexSynchronizer(mock_search_index).upsert_batch(documents)

        assert mock_search_index.operations == []


class TestDeleteThenUpsert:
    @pytest.mark.asyncio
    async def test_stale_chunks_do_not_survive(self, mock_search_index: MockSearchIndex) -> None:
        sync = IndexSynchronizer(mock_search_index)
        await sync.upsert_batch(_documents(3))

        deleted = await sync.delete_by_source(FILE_URL)
        await sync.upsert_batch(_documents(2))

        assert deleted == 3
        assert sorted(mock_search_index.records) == ["01ABCDEF-1", "01ABCDEF-2"]
        assert all(r["totalChuncks"] == 2 for r in mock_search_index.records.values())

    @pytest.mark.asyncio
    async def test_delete_queries_before_deleting(self, mock_search_index: MockSearchIndex) -> None:
        sync = IndexSynchronizer(mock_search_index)
        await sync.upsert_batch(_documents(1))
        mock_search_index.operations.clear()

        await sync.delete_by_source(FILE_URL)
        await sync.upsert_batch(_documents(1))

        assert mock_search_index.operations == ["query", "delete", "upsert"]
