"""Main dispatcher for text extraction.

Auto-detects file type by extension and delegates to the appropriate
reader module.

Supported formats
-----------------
* **.pdf**  — via :func:`~src.ingest.pdf_reader.extract_pdf`
* **.docx** — via :func:`~src.ingest.docx_reader.extract_docx`
* **.pptx** — via :func:`~src.ingest.pptx_reader.extract_pptx`

Everything else is treated as UTF-8 text.

Usage::

    from src.ingest.reader import read_text

    text = read_text(UploadedFile("rfp.pdf", data))
"""
import logging

from .base import UploadedFile

logger = logging.getLogger(__name__)

# Extensions that need a structured reader; everything else is decoded as text.
_EXTENSION_MAP = {
    "pdf": "pdf",
    "docx": "docx",
    "pptx": "pptx",
}


def read_text(upload: UploadedFile) -> str:
    """Return the plain text of *upload*.

    Raises
    ------
    ExtractionError
        If a structured document (PDF/DOCX/PPTX) cannot be read.
    """
    file_type = _EXTENSION_MAP.get(upload.extension)

    if file_type is None:
        # Invalid byte sequences become U+FFFD rather than failing the file.
        return upload.content.decode("utf-8", errors="replace")

    logger.info("Reading %s document: %s (%d bytes)", file_type.upper(), upload.name, upload.size_bytes)

    if file_type == "pdf":
        from .pdf_reader import extract_pdf
        return extract_pdf(upload.content, upload.name).full_text

    if file_type == "docx":
        from .docx_reader import extract_docx
        return extract_docx(upload.content, upload.name).full_text

    from .pptx_reader import extract_pptx
    return extract_pptx(upload.content, upload.name).full_text
