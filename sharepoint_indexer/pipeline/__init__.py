"""Pipeline orchestration for single-document indexing."""

from sharepoint_indexer.pipeline.orchestrator import IndexingPipeline

__all__ = ["IndexingPipeline"]
