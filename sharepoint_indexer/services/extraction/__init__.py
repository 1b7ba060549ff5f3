"""Plain-text extraction for the supported document formats.

    .txt   → UTF-8 text
    .xlsx  → openpyxl, one line per row
    .docx  → python-docx, paragraphs and tables
    .pdf   → PyMuPDF, page text in order
    .pptx  → python-pptx, "Slide N:" sections
    .csv   → csv module, one line per record
"""

from sharepoint_indexer.services.extraction.extractor import TextExtractor
from sharepoint_indexer.services.extraction.formats import FileFormat

__all__ = ["FileFormat", "TextExtractor"]
