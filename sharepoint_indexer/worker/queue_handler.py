"""Queue-triggered indexing.

A queue message names one document to index.  Producers have sent it in
several shapes over time, all accepted here:

    "https://contoso.sharepoint.com/sites/..."         plain URL string
    '{"fileUrl": "https://contoso.sharepoint.com/..."}' JSON text
    {"fileUrl": "https://contoso.sharepoint.com/..."}   already-decoded mapping
    b'...'                                              UTF-8 bytes of any of the above

Failures propagate so the queue host can apply its own retry / poison-queue
policy; nothing is retried here.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import structlog

from sharepoint_indexer.models.pipeline import PipelineResult
from sharepoint_indexer.pipeline.orchestrator import IndexingPipeline
from sharepoint_indexer.utils.errors import MalformedReferenceError

logger = structlog.get_logger(logger_name=__name__)

_FILE_URL_KEY = "fileUrl"


def parse_queue_item(item: Any) -> str:
    """Extract the document URL from a queue message.

    Raises
    ------
    MalformedReferenceError
        If no non-empty URL can be found in *item*.
    """
    if isinstance(item, (bytes, bytearray)):
        try:
            item = bytes(item).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedReferenceError("Queue message is not UTF-8 text") from exc

    if isinstance(item, str):
        text = item.strip()
        if text.startswith(("{", '"')):
            try:
                item = json.loads(text)
            except ValueError as exc:
                raise MalformedReferenceError(f"Queue message is not valid JSON: {exc}") from exc
        else:
            item = text

    if isinstance(item, Mapping):
        item = item.get(_FILE_URL_KEY)

    if not isinstance(item, str) or not item.strip():
        raise MalformedReferenceError(f"Queue message has no {_FILE_URL_KEY}")
    return item.strip()


class QueueHandler:
    """Run the indexing pipeline for each queue message."""

    def __init__(self, pipeline: IndexingPipeline) -> None:
        self._pipeline = pipeline

    async def handle(self, item: Any) -> PipelineResult:
        """Index the document named by *item*; any failure is re-raised unchanged."""
        file_url = parse_queue_item(item)
        logger.info("queue_item_received", file_url=file_url)
        try:
            result = await self._pipeline.run(file_url)
        except Exception as exc:
            logger.error("queue_item_failed", file_url=file_url, error=str(exc))
            raise
        logger.info("queue_item_processed", file_url=file_url, chunk_count=result.chunk_count)
        return result
