"""Search-index data models.

:class:`IndexDocument` mirrors the search index schema.  Python attributes
are snake_case; the serialized names (``docId``, ``descriptionVector``,
``totalChuncks`` ...) are the index's field names and are produced with
``model_dump(by_alias=True)`` via :meth:`IndexDocument.to_index_record`.
The ``totalChuncks`` spelling is the index schema's and must not be fixed
here without migrating the index.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Serialized field names every record must carry (see validate_index_document).
REQUIRED_INDEX_FIELDS: tuple[str, ...] = (
    "docId",
    "docTitle",
    "description",
    "filename",
    "filetype",
    "lastmodified",
    "chunkindex",
    "totalChuncks",
    "descriptionVector",
    "fileUrl",
)

# Key field of the index and the field deletes are keyed on.
INDEX_KEY_FIELD = "docId"
SOURCE_URL_FIELD = "fileUrl"


class IndexDocument(BaseModel):
    """One chunk of one source document, shaped for the search index."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    doc_id: str = Field(alias="docId", description='"<fileId>-<chunkIndex>", unique per chunk.')
    doc_title: str = Field(alias="docTitle")
    filename: str
    filetype: str = Field(description='Lower-case extension, e.g. ".docx".')
    file_url: str = Field(alias="fileUrl", description="Source file URL; the delete key.")
    last_modified: str = Field(alias="lastmodified", description="ISO-8601 modification time.")
    description: str = Field(description="The chunk's text content.")
    chunk_index: int = Field(alias="chunkindex", ge=1)
    total_chunks: int = Field(alias="totalChuncks", ge=1)
    description_vector: list[float] = Field(alias="descriptionVector", repr=False)
    author: str | None = Field(default=None, description="Last editor (or creator) of the file.")

    def to_index_record(self) -> dict[str, Any]:
        """Return the record as submitted to the index (aliased, ``None`` fields dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class IndexingOutcome(BaseModel):
    """Per-document result of an index upsert or delete."""

    model_config = ConfigDict(frozen=True)

    key: str
    succeeded: bool
    status_code: int | None = None
    error_message: str | None = None
