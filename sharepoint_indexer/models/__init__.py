"""Pydantic data models for the indexing pipeline."""

from sharepoint_indexer.models.document import (
    DocumentReference,
    RawDocument,
    SourceMetadata,
    TextChunk,
)
from sharepoint_indexer.models.index import IndexDocument, IndexingOutcome
from sharepoint_indexer.models.pipeline import PipelineResult, PipelineStage

__all__ = [
    "DocumentReference",
    "IndexDocument",
    "IndexingOutcome",
    "PipelineResult",
    "PipelineStage",
    "RawDocument",
    "SourceMetadata",
    "TextChunk",
]
