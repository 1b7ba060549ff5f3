"""ChromaDB search-index provider adapter.

A local, persistent stand-in for Azure AI Search, useful for development and
for deployments without a search service.  Each index document becomes one
ChromaDB record: ``docId`` is the record id, ``descriptionVector`` the
embedding, ``description`` the document text and every other field is kept
as metadata so ``fileUrl`` filters work.
"""

from __future__ import annotations

import os
import re
from typing import Any

# Disable ChromaDB's anonymous telemetry before the client is imported.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import chromadb
import structlog

from sharepoint_indexer.interfaces.search_index_provider import ISearchIndexProvider
from sharepoint_indexer.models.index import IndexDocument, IndexingOutcome
from sharepoint_indexer.utils.errors import ProviderUnavailableError, ValidationError

logger = structlog.get_logger(logger_name=__name__)

# The single OData form the synchronizer emits: field eq 'value' ('' escapes ').
_EQ_FILTER = re.compile(r"^\s*(\w+)\s+eq\s+'((?:[^']|'')*)'\s*$")

_RECORD_FIELDS = ("docId", "description", "descriptionVector")


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Keeps ChromaDB from loading its default ONNX model; vectors are always supplied."""

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError("Index documents carry pre-computed embeddings.")

    def name(self) -> str:
        """Return function name (required by ChromaDB's EmbeddingFunction protocol)."""
        return "noop_precomputed"


class ChromaDBIndexProvider(ISearchIndexProvider):
    """Search index backed by a persistent ChromaDB collection."""

    _PROVIDER_NAME = "chromadb"

    def __init__(
        self,
        persist_directory: str = "./data/chromadb",
        collection_name: str = "sharepoint-documents",
    ) -> None:
        self._persist_directory = persist_directory
        self._collection_name = collection_name
        self._client = chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        try:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            # Collection persisted with a different embedding function.
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
            )

    # ------------------------------------------------------------------
    # ISearchIndexProvider implementation
    # ------------------------------------------------------------------

    async def query_ids(self, filter_expression: str) -> list[str]:
        where = self._translate_filter(filter_expression)
        try:
            result = self._collection.get(where=where, include=[])
        except Exception as exc:
            raise ProviderUnavailableError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self._PROVIDER_NAME,
            ) from exc
        return list(result["ids"] or [])

    async def delete_by_ids(self, ids: list[str]) -> int:
        if not ids:
            return 0
        try:
            self._collection.delete(ids=ids)
        except Exception as exc:
            raise ProviderUnavailableError(
                message=f"ChromaDB delete failed: {exc}",
                provider_name=self._PROVIDER_NAME,
            ) from exc
        logger.info("chromadb_documents_deleted", deleted_count=len(ids))
        return len(ids)

    async def upsert(self, documents: list[IndexDocument]) -> list[IndexingOutcome]:
        if not documents:
            return []
        records = [document.to_index_record() for document in documents]
        try:
            self._collection.upsert(
                ids=[record["docId"] for record in records],
                embeddings=[record["descriptionVector"] for record in records],
                documents=[record["description"] for record in records],
                metadatas=[self._to_metadata(record) for record in records],
            )
        except Exception as exc:
            logger.error("chromadb_upsert_failed", document_count=len(records), error=str(exc))
            return [
                IndexingOutcome(key=record["docId"], succeeded=False, error_message=str(exc))
                for record in records
            ]

        logger.info("chromadb_documents_upserted", count=len(records))
        return [IndexingOutcome(key=record["docId"], succeeded=True) for record in records]

    def get_provider_name(self) -> str:
        return self._PROVIDER_NAME

    def count(self) -> int:
        """Return the number of records in the collection."""
        return self._collection.count()

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _translate_filter(filter_expression: str) -> dict[str, Any]:
        """Translate ``field eq 'value'`` into a ChromaDB ``where`` clause."""
        match = _EQ_FILTER.match(filter_expression)
        if match is None:
            raise ValidationError(f"Unsupported filter expression: {filter_expression}")
        field, value = match.group(1), match.group(2).replace("''", "'")
        return {field: value}

    @staticmethod
    def _to_metadata(record: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in record.items() if key not in _RECORD_FIELDS}
