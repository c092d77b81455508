"""PDF text extraction from in-memory uploads.

Extraction priority:
  1. pdfplumber  — best for CJK text + tables
  2. PyMuPDF (fitz) — good fallback, handles more PDF types

If the primary backend raises or yields garbled / near-empty text, the
next backend is tried.  A PDF that no backend can open is reported as an
:class:`~src.ingest.base.ExtractionError` so the caller can degrade that
one document to a placeholder.
"""
from __future__ import annotations

import io
import logging
import re
from typing import Callable, List, Optional, Tuple

from .base import DocumentContent, ExtractionError, PageContent

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Back-end availability flags
# ---------------------------------------------------------------------------
_HAS_PDFPLUMBER = False
_HAS_PYMUPDF = False

try:
    import pdfplumber  # type: ignore
    _HAS_PDFPLUMBER = True
except ImportError:
    pass

try:
    import fitz  # PyMuPDF  # type: ignore
    _HAS_PYMUPDF = True
except ImportError:
    pass

# Below this many characters per page a backend result is considered poor
# and the next backend is tried.
_MIN_USEFUL_CHARS_PER_PAGE = 20


# ---------------------------------------------------------------------------
# Garbled-text detection
# ---------------------------------------------------------------------------
# Regex for (cid:XXXX) placeholders that pdfminer emits for unmapped glyphs
_CID_PATTERN = re.compile(r'\(cid:\d+\)')
# Kangxi Radicals range (U+2F00-U+2FDF), often from broken ToUnicode maps
_KANGXI_PATTERN = re.compile(r'[\u2f00-\u2fdf]')


def _is_garbled(text: str) -> bool:
    """Detect if extracted text is garbled (unmappable glyphs).

    Returns True if the text contains a high proportion of:
    - U+FFFD replacement characters
    - (cid:XXXX) pdfminer placeholders
    - Kangxi Radical characters (wrong CMap mapping)
    """
    clean = (text or "").strip()
    if not clean:
        return False

    replacement_chars = clean.count('\ufffd')
    cid_matches = len(_CID_PATTERN.findall(clean))
    kangxi_chars = len(_KANGXI_PATTERN.findall(clean))

    garbled_ratio = (replacement_chars + cid_matches * 8 + kangxi_chars) / len(clean)
    if garbled_ratio > 0.15:
        logger.info(
            "Garbled text detected: %.1f%% (U+FFFD=%d, cid=%d, kangxi=%d / %d chars)",
            garbled_ratio * 100, replacement_chars, cid_matches, kangxi_chars, len(clean),
        )
        return True
    return False


# ---------------------------------------------------------------------------
# pdfplumber extraction
# ---------------------------------------------------------------------------

def _extract_with_pdfplumber(data: bytes, filename: str) -> DocumentContent:
    """Extract text and tables from a PDF using pdfplumber."""
    pages: List[PageContent] = []

    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for idx, pdf_page in enumerate(pdf.pages):
            page_number = idx + 1
            text = pdf_page.extract_text() or ""
            if not text.strip() or _is_garbled(text):
                # relaxed tolerances help with some CJK layouts
                text = pdf_page.extract_text(x_tolerance=5, y_tolerance=5) or ""

            tables: List[List[List[str]]] = []
            try:
                for raw_table in pdf_page.extract_tables() or []:
                    tables.append([
                        [str(cell) if cell is not None else "" for cell in row]
                        for row in raw_table
                    ])
            except Exception as exc:
                logger.warning(
                    "pdfplumber: failed to extract tables from page %d of %s: %s",
                    page_number, filename, exc,
                )

            pages.append(PageContent(page_number=page_number, text=text, tables=tables, source_type="pdf"))

    return DocumentContent(file_type="pdf", pages=pages, source_filename=filename, backend="pdfplumber")


# ---------------------------------------------------------------------------
# PyMuPDF (fitz) extraction
# ---------------------------------------------------------------------------

def _extract_with_pymupdf(data: bytes, filename: str) -> DocumentContent:
    """Extract text from a PDF using PyMuPDF (fitz).

    PyMuPDF often succeeds where pdfplumber fails, especially with
    CIDFont / Type3 fonts and PDFs from some Asian-language tools.
    """
    pages: List[PageContent] = []

    with fitz.open(stream=data, filetype="pdf") as doc:
        for page in doc:
            text = page.get_text("text") or ""
            if not text.strip() or _is_garbled(text):
                # spatially sorted text helps with multi-column layouts
                text = page.get_text("text", sort=True) or ""
            pages.append(PageContent(page_number=page.number + 1, text=text, source_type="pdf"))

    return DocumentContent(file_type="pdf", pages=pages, source_filename=filename, backend="PyMuPDF")


def _available_backends() -> List[Tuple[str, Callable[[bytes, str], DocumentContent]]]:
    backends: List[Tuple[str, Callable[[bytes, str], DocumentContent]]] = []
    if _HAS_PDFPLUMBER:
        backends.append(("pdfplumber", _extract_with_pdfplumber))
    if _HAS_PYMUPDF:
        backends.append(("PyMuPDF", _extract_with_pymupdf))
    return backends


def extract_pdf(data: bytes, filename: str = "") -> DocumentContent:
    """Extract text from PDF bytes, trying each available backend in turn.

    Parameters
    ----------
    data : bytes
        Raw PDF content.
    filename : str
        Used for logging and error messages only.

    Returns
    -------
    DocumentContent
        The first result with useful text, else the best (possibly empty)
        result any backend produced.

    Raises
    ------
    ExtractionError
        If no backend is installed or every backend failed to open the PDF.
    """
    backends = _available_backends()
    if not backends:
        raise ExtractionError(
            "No PDF extraction library available. "
            "Install pdfplumber (`pip install pdfplumber`) or PyMuPDF (`pip install pymupdf`).",
            filename=filename,
        )

    best_result: Optional[DocumentContent] = None
    best_chars = -1
    backend_errors: List[str] = []

    for name, extract_fn in backends:
        try:
            result = extract_fn(data, filename)
        except Exception as exc:
            logger.warning("PDF extraction with %s failed for %s: %s", name, filename, exc)
            backend_errors.append(f"{name}: {exc}")
            continue
        if not result.total_pages:
            backend_errors.append(f"{name}: no pages found")
            continue

        text = result.full_text
        char_count = len(text)
        logger.info("%s: extracted %d chars from %d pages of %s", name, char_count, result.total_pages, filename)

        if char_count / max(result.total_pages, 1) >= _MIN_USEFUL_CHARS_PER_PAGE and not _is_garbled(text):
            return result
        if char_count > best_chars:
            best_chars = char_count
            best_result = result

    if best_result is not None:
        logger.warning("Low text yield for %s (%d chars); the PDF may be image-based", filename, best_chars)
        return best_result

    raise ExtractionError(
        f"All PDF extraction backends failed for {filename or 'document'}: {'; '.join(backend_errors)}",
        filename=filename,
    )
