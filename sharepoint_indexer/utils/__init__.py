"""Utility modules for the SharePoint indexer.

- **errors** -- Exception hierarchy rooted at IndexerError; each pipeline
  stage raises its own subclass so callers can branch on the failure kind.
- **logging** -- structlog setup: coloured console output in development,
  JSON in production, plus run-scoped context binding.
"""

from sharepoint_indexer.utils.errors import (
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    IndexerError,
    MalformedReferenceError,
    MissingParameterError,
    NotFoundError,
    PartialUploadError,
    PipelineError,
    ProviderUnavailableError,
    UnsupportedFormatError,
    ValidationError,
)
from sharepoint_indexer.utils.logging import bind_run_context, configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "EmbeddingError",
    "ExtractionError",
    "IndexerError",
    "MalformedReferenceError",
    "MissingParameterError",
    "NotFoundError",
    "PartialUploadError",
    "PipelineError",
    "ProviderUnavailableError",
    "UnsupportedFormatError",
    "ValidationError",
    "bind_run_context",
    "configure_logging",
    "get_logger",
]
