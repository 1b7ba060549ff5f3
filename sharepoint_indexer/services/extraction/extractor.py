"""Format-dispatched plain-text extraction.

:class:`TextExtractor` maps an extension tag to a :class:`FileFormat` and
hands the bytes to the matching reader in :mod:`.readers`.  Unknown tags are
rejected before any bytes are inspected.
"""

from __future__ import annotations

import asyncio

import structlog

from sharepoint_indexer.services.extraction import readers
from sharepoint_indexer.services.extraction.formats import FileFormat

logger = structlog.get_logger(logger_name=__name__)


class TextExtractor:
    """Extract plain text from a file's bytes given its extension tag."""

    async def extract(self, format_tag: str, content: bytes) -> str:
        """Return the plain text of *content*.

        Parameters
        ----------
        format_tag:
            File extension, with or without the leading dot, any case.
        content:
            The raw file bytes.  An empty buffer yields ``""``.

        Raises
        ------
        UnsupportedFormatError
            If *format_tag* is not a supported format.
        ExtractionError
            If the file's structure cannot be parsed.
        """
        file_format = FileFormat.from_tag(format_tag)
        if not content:
            logger.info("extraction_skipped_empty", format=file_format.value)
            return ""

        if file_format.is_binary:
            text = await asyncio.to_thread(self.extract_sync, file_format, content)
        else:
            text = self.extract_sync(file_format, content)

        logger.info(
            "extraction_complete",
            format=file_format.value,
            bytes=len(content),
            characters=len(text),
        )
        return text

    @staticmethod
    def extract_sync(file_format: FileFormat, content: bytes) -> str:
        """Blocking extraction for an already-resolved *file_format*."""
        if not content:
            return ""
        match file_format:
            case FileFormat.TEXT:
                return readers.read_text(content)
            case FileFormat.WORKBOOK:
                return readers.read_workbook(content)
            case FileFormat.WORD:
                return readers.read_word(content)
            case FileFormat.PDF:
                return readers.read_pdf(content)
            case FileFormat.PRESENTATION:
                return readers.read_presentation(content)
            case FileFormat.DELIMITED:
                return readers.read_delimited(content)
