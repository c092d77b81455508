"""DOCX text extraction from in-memory uploads.

Uses python-docx to walk the document body in order, so paragraphs and
tables come out interleaved exactly as they appear.  DOCX has no reliable
page numbers; the whole body is returned as a single page.
"""
import io
import logging
from typing import List

from .base import DocumentContent, ExtractionError, PageContent

logger = logging.getLogger(__name__)


def _extract_table_data(table) -> List[List[str]]:
    """Convert a python-docx Table object into a list-of-rows."""
    rows: List[List[str]] = []
    try:
        for row in table.rows:
            rows.append([cell.text.strip() for cell in row.cells])
    except Exception as exc:
        logger.warning("Failed to extract table: %s", exc)
    return rows


def extract_docx(data: bytes, filename: str = "") -> DocumentContent:
    """Extract text and tables from DOCX bytes.

    Raises
    ------
    ExtractionError
        If python-docx is missing or the file cannot be opened.
    """
    try:
        import docx  # type: ignore  (python-docx)
        from docx.table import Table  # type: ignore
    except ImportError:
        raise ExtractionError(
            "python-docx is required for DOCX extraction. "
            "Install it with `pip install python-docx`.",
            filename=filename,
        )

    try:
        doc = docx.Document(io.BytesIO(data))
    except Exception as exc:
        raise ExtractionError(f"Failed to open DOCX file {filename}: {exc}", filename=filename) from exc

    texts: List[str] = []
    # Paragraphs and tables interleaved, in document order.
    for block in doc.iter_inner_content():
        if isinstance(block, Table):
            table_data = _extract_table_data(block)
            lines = [" | ".join(c for c in row if c) for row in table_data]
            table_text = "\n".join(line for line in lines if line)
            if table_text:
                texts.append(table_text)
        elif block.text and block.text.strip():
            texts.append(block.text)

    page = PageContent(page_number=1, text="\n".join(texts), source_type="docx")
    return DocumentContent(file_type="docx", pages=[page], source_filename=filename, backend="python-docx")
