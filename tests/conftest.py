"""Shared pytest fixtures for the SharePoint indexer test suite."""

from __future__ import annotations

import hashlib
import re
import struct
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any

import pytest

from sharepoint_indexer.interfaces.document_source import IDocumentSource
from sharepoint_indexer.interfaces.embedding_provider import IEmbeddingProvider
from sharepoint_indexer.interfaces.search_index_provider import ISearchIndexProvider
from sharepoint_indexer.models.document import RawDocument, SourceMetadata
from sharepoint_indexer.models.index import IndexDocument, IndexingOutcome
from sharepoint_indexer.utils.errors import NotFoundError

FILE_URL = "https://contoso.sharepoint.com/sites/Engineering/Shared%20Documents/specs/Plan.txt"

_EMBEDDING_DIM = 16


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic fixed-length vector by hashing *text*."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    raw = digest
    while len(raw) < dim * 4:
        raw += hashlib.sha256(raw).digest()
    values = struct.unpack(f"<{dim}I", raw[: dim * 4])
    return [v / 2**32 for v in values]


def sentence_text(total_chars: int) -> str:
    """Build text of exactly *total_chars* characters from 100-char sentences.

    The sentence tokenizer sees one 100-character token per sentence, so a
    2000-character chunk holds exactly 20 of them.
    """
    assert total_chars % 100 == 0
    count = total_chars // 100
    return "x" * 99 + "." + (" " + "x" * 98 + ".") * (count - 1)


def make_metadata(**overrides: Any) -> SourceMetadata:
    defaults: dict[str, Any] = {
        "file_id": "01ABCDEF",
        "name": "Plan.txt",
        "web_url": "https://contoso.sharepoint.com/sites/Engineering/Shared%20Documents/specs/Plan.txt",
        "size": 0,
        "created_at": datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc),
        "modified_at": datetime(2024, 3, 4, 12, 30, tzinfo=timezone.utc),
        "created_by": "Ada Lovelace",
        "modified_by": "Grace Hopper",
        "mime_type": "text/plain",
    }
    defaults.update(overrides)
    return SourceMetadata(**defaults)


def make_raw_document(content: bytes, name: str = "Plan.txt", **metadata: Any) -> RawDocument:
    return RawDocument(
        name=name,
        extension=PurePosixPath(name).suffix.lower(),
        content=content,
        size_bytes=len(content),
        metadata=make_metadata(name=name, size=len(content), **metadata),
    )


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class MockEmbeddingProvider(IEmbeddingProvider):
    """Deterministic hash-based embeddings; records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    async def compute_embedding(self, deployment: str, text: str) -> list[float] | None:
        self.calls.append((deployment, text))
        return _hash_to_vector(text)

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


class MockDocumentSource(IDocumentSource):
    """Serves documents keyed by their path inside the library."""

    def __init__(self, files: dict[str, RawDocument] | None = None) -> None:
        self.files: dict[str, RawDocument] = dict(files or {})
        self.fetched: list[str] = []

    async def resolve_site(self, tenant: str, site_path: str) -> str:
        return f"{tenant}.sharepoint.com,{site_path}"

    async def resolve_drive(self, site_id: str) -> str:
        return "drive-1"

    async def fetch_file(self, site_id: str, drive_id: str, relative_path: str) -> RawDocument:
        self.fetched.append(relative_path)
        if relative_path not in self.files:
            raise NotFoundError(f"No such file: {relative_path}", provider_name="mock-source")
        return self.files[relative_path]

    def get_provider_name(self) -> str:
        return "mock-source"


class MockSearchIndex(ISearchIndexProvider):
    """Dict-backed index keyed by ``docId``; keys in ``fail_keys`` are rejected."""

    _EQ_FILTER = re.compile(r"^(\w+) eq '((?:[^']|'')*)'$")

    def __init__(self) -> None:
        self.records: dict[str, dict[str, Any]] = {}
        self.fail_keys: set[str] = set()
        self.operations: list[str] = []
        self.filters: list[str] = []

    async def query_ids(self, filter_expression: str) -> list[str]:
        self.operations.append("query")
        self.filters.append(filter_expression)
        match = self._EQ_FILTER.match(filter_expression)
        assert match is not None, filter_expression
        field, value = match.group(1), match.group(2).replace("''", "'")
        return [key for key, record in self.records.items() if record.get(field) == value]

    async def delete_by_ids(self, ids: list[str]) -> int:
        self.operations.append("delete")
        for key in ids:
            self.records.pop(key, None)
        return len(ids)

    async def upsert(self, documents: list[IndexDocument]) -> list[IndexingOutcome]:
        self.operations.append("upsert")
        outcomes: list[IndexingOutcome] = []
        for document in documents:
            if document.doc_id in self.fail_keys:
                outcomes.append(
                    IndexingOutcome(key=document.doc_id, succeeded=False, status_code=400)
                )
                continue
            self.records[document.doc_id] = document.to_index_record()
            outcomes.append(IndexingOutcome(key=document.doc_id, succeeded=True, status_code=201))
        return outcomes

    def get_provider_name(self) -> str:
        return "mock-index"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_embedding_provider() -> MockEmbeddingProvider:
    return MockEmbeddingProvider()


@pytest.fixture
def mock_document_source() -> MockDocumentSource:
    return MockDocumentSource()


@pytest.fixture
def mock_search_index() -> MockSearchIndex:
    return MockSearchIndex()


@pytest.fixture
def sample_metadata() -> SourceMetadata:
    return make_metadata()


@pytest.fixture
def file_url() -> str:
    return FILE_URL
