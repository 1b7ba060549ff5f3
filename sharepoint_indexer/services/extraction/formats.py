"""The closed set of file formats the extractor understands."""

from __future__ import annotations

from enum import Enum

from sharepoint_indexer.utils.errors import UnsupportedFormatError


class FileFormat(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Supported formats, valued by their canonical extension tag."""

    TEXT = ".txt"
    WORKBOOK = ".xlsx"
    WORD = ".docx"
    PDF = ".pdf"
    PRESENTATION = ".pptx"
    DELIMITED = ".csv"

    @classmethod
    def from_tag(cls, tag: str) -> FileFormat:
        """Resolve an extension tag (``"PDF"``, ``".pdf"``, ``"pdf"``) to a format.

        Raises
        ------
        UnsupportedFormatError
            If no member matches *tag*.
        """
        normalized = (tag or "").strip().lower()
        if normalized and not normalized.startswith("."):
            normalized = f".{normalized}"
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedFormatError(tag) from None

    @property
    def is_binary(self) -> bool:
        """``True`` for container formats parsed by a third-party library."""
        return self not in (FileFormat.TEXT, FileFormat.DELIMITED)
