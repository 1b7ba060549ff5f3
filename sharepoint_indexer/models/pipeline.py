"""Pipeline stage and result models.

The indexing pipeline is a linear state machine with no back-edges:

    LOCATED → FETCHED → EXTRACTED → CHUNKED → EMBEDDED/ASSEMBLED (per chunk)
    → DELETED → UPLOADED → DONE

Any stage failure moves the run straight to FAILED, a terminal state
surfaced as :class:`~sharepoint_indexer.utils.errors.PipelineError`.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PipelineStage(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Stages of one indexing run, in execution order."""

    LOCATED = "LOCATED"      # URL decomposed into site / library coordinates
    FETCHED = "FETCHED"      # Metadata and bytes downloaded
    EXTRACTED = "EXTRACTED"  # Plain text extracted for the file format
    CHUNKED = "CHUNKED"      # Text split into sentence-respecting chunks
    EMBEDDED = "EMBEDDED"    # Chunk embedding computed (loops per chunk)
    ASSEMBLED = "ASSEMBLED"  # Index document built and validated (per chunk)
    DELETED = "DELETED"      # Prior chunks for the source removed
    UPLOADED = "UPLOADED"    # New chunk set accepted by the index
    DONE = "DONE"
    FAILED = "FAILED"


class PipelineResult(BaseModel):
    """Successful outcome of one indexing run."""

    model_config = ConfigDict(frozen=True)

    reference: str = Field(description="The file URL that was indexed.")
    file_name: str
    chunk_count: int = Field(ge=0)
    deleted_count: int = Field(default=0, ge=0, description="Stale chunks removed before upload.")
    elapsed_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def message(self) -> str:
        return f"Successfully processed {self.file_name} into {self.chunk_count} chunks"
