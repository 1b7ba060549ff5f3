"""Per-format text readers.

Each reader takes the raw file bytes and returns plain text.  The binary
readers are synchronous and CPU-bound; :class:`TextExtractor` runs them in a
worker thread.  Library failures on a corrupt container are re-raised as
:class:`ExtractionError` with the original exception chained.
"""

from __future__ import annotations

import csv
import io

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import openpyxl
import structlog
from docx import Document
from docx.table import Table
from pptx import Presentation

from sharepoint_indexer.utils.errors import ExtractionError

logger = structlog.get_logger(logger_name=__name__)


def _decode(content: bytes) -> str:
    # utf-8-sig drops a leading BOM; undecodable bytes become U+FFFD.
    return content.decode("utf-8-sig", errors="replace")


def read_text(content: bytes) -> str:
    return _decode(content)


def read_delimited(content: bytes) -> str:
    """One line per CSV record, fields joined by a single space."""
    try:
        records = [" ".join(row) for row in csv.reader(io.StringIO(_decode(content))) if row]
    except csv.Error as exc:
        raise ExtractionError(f"Unreadable CSV content: {exc}") from exc
    return "\n".join(records)


def read_workbook(content: bytes) -> str:
    """One line per non-empty row of every sheet, sheets in workbook order."""
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        raise ExtractionError(f"Unreadable workbook: {exc}") from exc

    lines: list[str] = []
    try:
        for sheet in workbook.worksheets:
            for row in sheet.iter_rows(values_only=True):
                cells = [str(value) for value in row if value is not None and str(value) != ""]
                if cells:
                    lines.append(" ".join(cells))
    finally:
        workbook.close()
    return "\n".join(lines)


def read_word(content: bytes) -> str:
    """Paragraph and table text in document order, formatting dropped."""
    try:
        document = Document(io.BytesIO(content))
    except Exception as exc:
        raise ExtractionError(f"Unreadable Word document: {exc}") from exc

    blocks: list[str] = []
    for block in document.iter_inner_content():
        if isinstance(block, Table):
            blocks.extend(_table_rows(block))
        elif block.text.strip():
            blocks.append(block.text)
    return "\n\n".join(blocks)


def _table_rows(table) -> list[str]:
    """Row text of a python-docx or python-pptx table, cells joined by a space."""
    rows: list[str] = []
    for row in table.rows:
        cells: list[str] = []
        previous = None
        for cell in row.cells:
            # python-docx yields a merged cell once per grid column, all on one
            # <w:tc>; python-pptx flags the covered cells as spanned.
            merged = previous is not None and cell._tc is previous._tc
            previous = cell
            if merged or getattr(cell, "is_spanned", False):
                continue
            text = cell.text.strip()
            if text:
                cells.append(text)
        if cells:
            rows.append(" ".join(cells))
    return rows


def read_pdf(content: bytes) -> str:
    """Page text in page order, pages joined by newlines."""
    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except Exception as exc:
        raise ExtractionError(f"Unreadable PDF: {exc}") from exc

    try:
        pages = [doc[page_num].get_text("text") for page_num in range(len(doc))]
    finally:
        doc.close()

    if not any(page.strip() for page in pages):
        logger.warning("pdf_no_text_extracted", pages=len(pages))
    return "\n".join(pages)


def read_presentation(content: bytes) -> str:
    """Per-slide text labelled ``Slide N:``; slides without text are skipped."""
    try:
        presentation = Presentation(io.BytesIO(content))
    except Exception as exc:
        raise ExtractionError(f"Unreadable presentation: {exc}") from exc

    sections: list[str] = []
    for slide in presentation.slides:
        texts: list[str] = []
        for shape in slide.shapes:
            if shape.has_text_frame and shape.text_frame.text.strip():
                texts.append(shape.text_frame.text.strip())
            elif shape.has_table:
                texts.extend(_table_rows(shape.table))
        if texts:
            sections.append(f"Slide {len(sections) + 1}:\n" + "\n".join(texts))
    return "\n\n".join(sections)
