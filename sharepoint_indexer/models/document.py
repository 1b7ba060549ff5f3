"""Source-side data models: where a document lives and what was fetched.

Defines Pydantic v2 models for the decomposed document reference, the
provenance metadata returned by the document source, the fetched binary,
and the text chunks derived from it.  All models are frozen; a pipeline run
builds them once and passes them forward without mutation.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# DocumentReference: output of the Locator.
# ---------------------------------------------------------------------------
class DocumentReference(BaseModel):
    """A SharePoint file URL decomposed into document-source coordinates.

    Built only by :func:`~sharepoint_indexer.services.locator.parse_reference`;
    a URL that cannot be decomposed raises instead of producing defaults.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="The absolute file URL as given.")
    tenant: str = Field(description='SharePoint tenant, e.g. "contoso" for contoso.sharepoint.com.')
    container_path: str = Field(description="Site path segment following /sites/.")
    relative_file_path: str = Field(
        min_length=1,
        description="Percent-decoded path of the file inside the document library.",
    )


# ---------------------------------------------------------------------------
# SourceMetadata: provenance of the fetched file.
# ---------------------------------------------------------------------------
class SourceMetadata(BaseModel):
    """Provenance metadata for a fetched file, as reported by the document source."""

    model_config = ConfigDict(frozen=True)

    file_id: str = Field(description="Stable identifier of the file in the document source.")
    name: str = Field(description="File name including extension.")
    web_url: str = Field(default="", description="Browser URL of the file.")
    size: int = Field(default=0, ge=0, description="Declared size in bytes.")
    created_at: datetime | None = None
    modified_at: datetime | None = None
    created_by: str | None = None
    modified_by: str | None = None
    mime_type: str | None = None


# ---------------------------------------------------------------------------
# RawDocument: the fetched binary, owned by one pipeline run.
# ---------------------------------------------------------------------------
class RawDocument(BaseModel):
    """A fetched file: its bytes plus provenance metadata.

    Lives only for the duration of one pipeline run and is never persisted.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    extension: str = Field(description='Lower-case extension including the dot, e.g. ".pdf".')
    content: bytes = Field(repr=False)
    size_bytes: int = Field(ge=0)
    metadata: SourceMetadata


# ---------------------------------------------------------------------------
# TextChunk: one ordered slice of the extracted text.
# ---------------------------------------------------------------------------
class TextChunk(BaseModel):
    """An ordered, 1-based chunk of a document's extracted text."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1, description="1-based position of the chunk.")
    total_chunks: int = Field(ge=1, description="Number of chunks produced in the same run.")
    content: str = Field(min_length=1)
