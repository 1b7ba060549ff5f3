"""Central orchestrator for the single-document indexing pipeline.

One run takes a SharePoint file URL through a fixed sequence of stages:

    LOCATED    parse the URL into tenant / site / file path
    FETCHED    resolve site and drive, download bytes + metadata
    EXTRACTED  plain text for the file's format
    CHUNKED    sentence-respecting chunks of at most max_chunk_size chars
    EMBEDDED   one vector per chunk (retried inside the Embedder)
    ASSEMBLED  one validated index document per chunk
    DELETED    stale chunks of the same file removed from the index
    UPLOADED   the new chunk set upserted

Every chunk is embedded and assembled before anything in the index is
touched, so a failure up to ASSEMBLED leaves the previous chunk set intact.
A failure in any stage is re-raised as :class:`PipelineError` carrying the
stage, the URL, and the original exception.  The pipeline itself never
retries.

All per-run values (chunks, documents) are locals of :meth:`run`; the
pipeline object holds only injected collaborators and can serve concurrent
runs.  Two concurrent runs for the *same* URL are not serialized; the last
writer's chunk set wins.
"""

from __future__ import annotations

import time

import structlog

from sharepoint_indexer.interfaces.document_source import IDocumentSource
from sharepoint_indexer.models.document import DocumentReference, RawDocument, TextChunk
from sharepoint_indexer.models.index import IndexDocument
from sharepoint_indexer.models.pipeline import PipelineResult, PipelineStage
from sharepoint_indexer.services.chunker import SentenceChunker
from sharepoint_indexer.services.document_builder import (
    build_index_document,
    validate_index_document,
)
from sharepoint_indexer.services.embedder import Embedder
from sharepoint_indexer.services.extraction import TextExtractor
from sharepoint_indexer.services.index_synchronizer import IndexSynchronizer
from sharepoint_indexer.services.locator import parse_reference
from sharepoint_indexer.utils.errors import PipelineError
from sharepoint_indexer.utils.logging import bind_run_context, get_logger


class IndexingPipeline:
    """Index one remote document end to end.

    All collaborators are injected; the orchestrator never creates them.
    """

    def __init__(
        self,
        document_source: IDocumentSource,
        extractor: TextExtractor,
        chunker: SentenceChunker,
        embedder: Embedder,
        synchronizer: IndexSynchronizer,
    ) -> None:
        self._document_source = document_source
        self._extractor = extractor
        self._chunker = chunker
        self._embedder = embedder
        self._synchronizer = synchronizer
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def run(self, url: str) -> PipelineResult:
        """Index the document at *url*, replacing any chunks from earlier runs.

        Raises
        ------
        PipelineError
            If any stage fails.  ``error.stage`` names the failing stage and
            ``error.cause`` (also ``__cause__``) holds the original exception.
        """
        started = time.monotonic()
        stage = PipelineStage.LOCATED

        with bind_run_context(file_url=url):
            self._logger.info("pipeline_started")
            try:
                reference = parse_reference(url)

                stage = PipelineStage.FETCHED
                raw = await self._fetch(reference)

                stage = PipelineStage.EXTRACTED
                text = await self._extractor.extract(raw.extension, raw.content)
                self._logger.info("text_extracted", file_name=raw.name, characters=len(text))

                stage = PipelineStage.CHUNKED
                chunks = SentenceChunker.to_text_chunks(self._chunker.chunk(text))

                documents: list[IndexDocument] = []
                for chunk in chunks:
                    stage = PipelineStage.EMBEDDED
                    embedding = await self._embedder.embed(chunk.content)

                    stage = PipelineStage.ASSEMBLED
                    documents.append(self._assemble(url, raw, chunk, embedding))

                stage = PipelineStage.DELETED
                deleted = await self._synchronizer.delete_by_source(url)

                stage = PipelineStage.UPLOADED
                await self._synchronizer.upsert_batch(documents)
            except Exception as exc:
                self._logger.error(
                    "pipeline_failed",
                    stage=stage.value,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                raise PipelineError(stage=stage, reference=url, cause=exc) from exc

            result = PipelineResult(
                reference=url,
                file_name=raw.name,
                chunk_count=len(documents),
                deleted_count=deleted,
                elapsed_seconds=round(time.monotonic() - started, 3),
            )
            self._logger.info(
                "pipeline_complete",
                stage=PipelineStage.DONE.value,
                file_name=result.file_name,
                chunk_count=result.chunk_count,
                deleted_count=result.deleted_count,
                elapsed_seconds=result.elapsed_seconds,
            )
            return result

    # ------------------------------------------------------------------
    # Stage helpers
    # ------------------------------------------------------------------

    async def _fetch(self, reference: DocumentReference) -> RawDocument:
        site_id = await self._document_source.resolve_site(
            reference.tenant, reference.container_path
        )
        drive_id = await self._document_source.resolve_drive(site_id)
        raw = await self._document_source.fetch_file(
            site_id, drive_id, reference.relative_file_path
        )
        self._logger.info(
            "file_fetched",
            site_id=site_id,
            drive_id=drive_id,
            file_name=raw.name,
            size_bytes=raw.size_bytes,
        )
        return raw

    @staticmethod
    def _assemble(
        url: str,
        raw: RawDocument,
        chunk: TextChunk,
        embedding: list[float],
    ) -> IndexDocument:
        # fileUrl is the reference URL itself so re-runs delete what this run writes.
        metadata = raw.metadata.model_copy(update={"web_url": url})
        document = build_index_document(
            source_id=metadata.file_id,
            chunk_index=chunk.index,
            metadata=metadata,
            content=chunk.content,
            embedding=embedding,
            total_chunks=chunk.total_chunks,
        )
        validate_index_document(document)
        return document
