"""Replace a source document's chunk set in the search index.

Replacement is ordered, not atomic: every existing chunk whose ``fileUrl``
matches the source is deleted, then the new chunk set is upserted.  Between
the two calls the source is briefly absent from the index, and a failed
upsert leaves it absent until the next successful run.  Callers treat a
mid-run failure as "reprocess later".
"""

from __future__ import annotations

import structlog

from sharepoint_indexer.interfaces.search_index_provider import ISearchIndexProvider
from sharepoint_indexer.models.index import SOURCE_URL_FIELD, IndexDocument, IndexingOutcome
from sharepoint_indexer.services.document_builder import validate_index_document
from sharepoint_indexer.utils.errors import PartialUploadError

logger = structlog.get_logger(logger_name=__name__)


def source_filter(source_url: str) -> str:
    """Build the OData filter selecting every chunk of *source_url*."""
    escaped = source_url.replace("'", "''")
    return f"{SOURCE_URL_FIELD} eq '{escaped}'"


class IndexSynchronizer:
    """Delete-then-upsert chunk sets through an :class:`ISearchIndexProvider`."""

    def __init__(self, search_index: ISearchIndexProvider) -> None:
        self._search_index = search_index

    async def delete_by_source(self, source_url: str) -> int:
        """Delete every indexed chunk of *source_url* and return how many were removed."""
        ids = await self._search_index.query_ids(source_filter(source_url))
        if not ids:
            logger.info("no_existing_documents", file_url=source_url)
            return 0

        deleted = await self._search_index.delete_by_ids(ids)
        logger.info("existing_documents_deleted", file_url=source_url, deleted=deleted)
        return deleted

    async def upsert_batch(self, documents: list[IndexDocument]) -> list[IndexingOutcome]:
        """Validate and upsert *documents*.

        Every document is validated before the index is called, so one bad
        record aborts the batch without a partial write.

        Raises
        ------
        ValidationError
            If any document fails schema validation.
        PartialUploadError
            If the index rejects one or more documents.
        """
        logger.info("validating_documents", document_count=len(documents))
        for document in documents:
            validate_index_document(document)

        if not documents:
            return []

        outcomes = await self._search_index.upsert(documents)
        failed = [outcome for outcome in outcomes if not outcome.succeeded]
        if failed:
            logger.error(
                "document_upload_failed",
                document_count=len(documents),
                failed_count=len(failed),
                failed_keys=[outcome.key for outcome in failed],
            )
            raise PartialUploadError(
                failed_count=len(failed),
                provider_name=self._search_index.get_provider_name(),
            )

        logger.info("document_upload_complete", uploaded_count=len(documents))
        return outcomes
