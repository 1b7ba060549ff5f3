"""Assembly and validation of search-index documents.

:func:`build_index_document` turns one embedded chunk plus its source
metadata into an :class:`IndexDocument`.  :func:`validate_index_document`
re-checks the serialized record against the index schema immediately before
upload, and also accepts plain mappings so records built elsewhere can be
screened the same way.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from numbers import Real
from pathlib import PurePosixPath
from typing import Any

from sharepoint_indexer.models.document import SourceMetadata
from sharepoint_indexer.models.index import REQUIRED_INDEX_FIELDS, IndexDocument
from sharepoint_indexer.utils.errors import MissingParameterError, ValidationError


def build_index_document(
    source_id: str,
    chunk_index: int,
    metadata: SourceMetadata | None,
    content: str,
    embedding: list[float] | None,
    total_chunks: int,
) -> IndexDocument:
    """Assemble the index record for one chunk.

    Parameters
    ----------
    source_id:
        Stable identifier of the source file; the record key is
        ``"<source_id>-<chunk_index>"``.
    chunk_index:
        1-based chunk position.
    metadata:
        Source metadata.  ``web_url`` becomes the ``fileUrl`` the index is
        keyed on for deletes, so callers set it to the reference URL.
    content:
        The chunk text.
    embedding:
        The chunk's vector.
    total_chunks:
        Number of chunks produced by the same run.

    Raises
    ------
    MissingParameterError
        If *source_id*, *metadata*, *content* or *embedding* is absent or
        empty, or the metadata carries no timestamp.
    """
    if not source_id or metadata is None or not content or not embedding:
        raise MissingParameterError()

    timestamp = metadata.modified_at or metadata.created_at
    if timestamp is None:
        raise MissingParameterError(
            message=f"Source metadata for {metadata.name} has no modification time"
        )

    return IndexDocument(
        doc_id=f"{source_id}-{chunk_index}",
        doc_title=metadata.name,
        filename=metadata.name,
        filetype=PurePosixPath(metadata.name).suffix.lower(),
        file_url=metadata.web_url,
        last_modified=_to_iso(timestamp),
        description=content,
        chunk_index=int(chunk_index),
        total_chunks=int(total_chunks),
        description_vector=list(embedding),
        author=metadata.modified_by or metadata.created_by,
    )


def validate_index_document(document: IndexDocument | Mapping[str, Any]) -> None:
    """Check a record against the index schema.

    Raises
    ------
    ValidationError
        If a required field is missing or empty, the vector is not a list,
        a chunk position is not a number, or ``lastmodified`` is not an
        ISO-8601 timestamp.
    """
    record = document.to_index_record() if isinstance(document, IndexDocument) else document

    missing = [field for field in REQUIRED_INDEX_FIELDS if _is_empty(record.get(field))]
    if missing:
        raise ValidationError(f"Invalid document: missing required fields: {', '.join(missing)}")

    if not isinstance(record["descriptionVector"], (list, tuple)):
        raise ValidationError("Invalid document: descriptionVector must be an array")

    for field in ("chunkindex", "totalChuncks"):
        value = record[field]
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ValidationError(f"Invalid document: {field} must be a number")

    if not _is_timestamp(record["lastmodified"]):
        raise ValidationError("Invalid document: lastmodified must be a valid date")


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, Real):
        return value == 0
    return False


def _is_timestamp(value: Any) -> bool:
    if isinstance(value, datetime):
        return True
    if not isinstance(value, str):
        return False
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        datetime.fromisoformat(text)
    except ValueError:
        return False
    return True


def _to_iso(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
