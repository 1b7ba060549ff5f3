"""Custom exception hierarchy for the SharePoint indexer.

All application exceptions inherit from :class:`IndexerError`, which carries
an optional ``provider_name`` so error handlers can identify which external
service (e.g. "graph", "azure_openai", "azure_search") caused the failure.

The hierarchy follows the stages of the indexing pipeline:

    IndexerError  (base -- catch-all for any indexer error)
    +-- MalformedReferenceError  (Locator: document URL cannot be decomposed)
    +-- NotFoundError            (document source: path does not resolve)
    +-- UnsupportedFormatError   (Extractor: unknown format tag)
    +-- ExtractionError          (Extractor: corrupt or unreadable content)
    +-- EmbeddingError           (Embedder: retries exhausted / bad vectors)
    +-- MissingParameterError    (Assembler: required input absent)
    +-- ValidationError          (Validator: index record fails schema checks)
    +-- PartialUploadError       (Synchronizer: some documents were rejected)
    +-- ConfigurationError       (startup / missing setting)
    +-- ProviderUnavailableError (external service down / unreachable)
    +-- PipelineError            (orchestrator wrapper: stage + reference + cause)

Only the Embedder recovers from failures (by retrying); every other stage
raises straight through to the orchestrator, which annotates the error with
the failing stage and re-raises.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sharepoint_indexer.models.pipeline import PipelineStage


class IndexerError(Exception):
    """Base exception for all indexer errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  ``__str__`` prefixes the provider name in brackets for log
    scanning, e.g. ``[graph] File not found``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Locating and fetching
# ---------------------------------------------------------------------------

class MalformedReferenceError(IndexerError):
    """Raised when a document URL lacks a site path or a decodable file path."""

    def __init__(
        self,
        message: str = "Malformed document reference",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(IndexerError):
    """Raised by a document source when a site, drive, or file does not resolve."""

    def __init__(
        self,
        message: str = "Document not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

class UnsupportedFormatError(IndexerError):
    """Raised when no extraction strategy exists for a format tag."""

    def __init__(self, format_tag: str, provider_name: str | None = None) -> None:
        self._format_tag = format_tag
        super().__init__(
            message=f"Unsupported file format: {format_tag}",
            provider_name=provider_name,
        )

    @property
    def format_tag(self) -> str:
        return self._format_tag


class ExtractionError(IndexerError):
    """Raised when a document's structure cannot be parsed (corrupt container, bad markup)."""

    def __init__(
        self,
        message: str = "Text extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Embedding and assembly
# ---------------------------------------------------------------------------

class EmbeddingError(IndexerError):
    """Raised when an embedding cannot be produced (empty result, dimension drift)."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class MissingParameterError(IndexerError):
    """Raised when an index document is assembled without a required input."""

    def __init__(
        self,
        message: str = "Missing required parameters for document creation",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ValidationError(IndexerError):
    """Raised when an index document violates the index schema."""

    def __init__(
        self,
        message: str = "Invalid document",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Index synchronization
# ---------------------------------------------------------------------------

class PartialUploadError(IndexerError):
    """Raised when the index rejects one or more documents of an upsert batch."""

    def __init__(self, failed_count: int, provider_name: str | None = None) -> None:
        self._failed_count = failed_count
        super().__init__(
            message=f"Failed to upload {failed_count} documents",
            provider_name=provider_name,
        )

    @property
    def failed_count(self) -> int:
        return self._failed_count


# ---------------------------------------------------------------------------
# Configuration / external services
# ---------------------------------------------------------------------------

class ConfigurationError(IndexerError):
    """Raised when configuration is invalid or a required setting is missing."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(IndexerError):
    """Raised when an external service is unreachable or returns a server error."""

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

class PipelineError(IndexerError):
    """Terminal pipeline failure annotated with the failing stage and reference.

    The original exception is kept on :attr:`cause` (and chained as
    ``__cause__`` by the orchestrator) so callers can still branch on the
    specific error type.
    """

    def __init__(
        self,
        stage: PipelineStage,
        reference: str,
        cause: BaseException,
    ) -> None:
        self._stage = stage
        self._reference = reference
        self._cause = cause
        provider_name = cause.provider_name if isinstance(cause, IndexerError) else None
        detail = cause.message if isinstance(cause, IndexerError) else str(cause)
        super().__init__(
            message=f"{stage.value} stage failed for {reference}: {detail}",
            provider_name=provider_name,
        )

    @property
    def stage(self) -> PipelineStage:
        return self._stage

    @property
    def reference(self) -> str:
        return self._reference

    @property
    def cause(self) -> BaseException:
        return self._cause
