"""Document extractor: turn one upload into one piece of prompt content.

Two modes:

* ``text``: flatten to plain text (see :mod:`src.ingest.reader`) and
  truncate to a character budget.
* ``encode``: base64 the raw bytes and attach a MIME type; never truncated.

:func:`extract_safely` never raises: a document that cannot be read comes
back as an :class:`ExtractionFailure` so a batch always keeps going.
"""
from __future__ import annotations

import base64
import logging
from types import MappingProxyType
from typing import Mapping, Optional

from .base import (
    EncodedFile,
    ExtractedContent,
    ExtractedText,
    ExtractionError,
    ExtractionFailure,
    ExtractionMode,
    ExtractionResult,
    UploadedFile,
)
from .reader import read_text

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

EXTENSION_MIME_TYPES: Mapping[str, str] = MappingProxyType({
    "pdf": "application/pdf",
    "txt": "text/plain",
    "md": "text/markdown",
    "csv": "text/csv",
    "json": "application/json",
    "html": "text/html",
    "htm": "text/html",
    "xml": "application/xml",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "hwp": "application/x-hwp",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
})


def resolve_mime_type(upload: UploadedFile) -> str:
    """Declared content type, else extension lookup, else a binary default.

    A declared ``application/octet-stream`` is what browsers send when they
    do not know the type, so it does not count as a declaration.
    """
    declared = (upload.declared_mime or "").split(";")[0].strip().lower()
    if declared and declared != DEFAULT_MIME_TYPE:
        return declared
    return EXTENSION_MIME_TYPES.get(upload.extension, DEFAULT_MIME_TYPE)


def truncate_text(text: str, limit: Optional[int]) -> str:
    """Keep the first *limit* characters (code points) of *text*.

    Slicing by code point never splits a multi-byte UTF-8 sequence, and
    truncating an already-truncated string is a no-op.
    """
    if limit is None or limit < 0:
        return text
    return text[:limit]


def extract_content(
    upload: UploadedFile,
    mode: ExtractionMode,
    char_limit: Optional[int] = None,
) -> ExtractedContent:
    """Extract one upload in the requested mode.

    Raises
    ------
    ExtractionError
        If the document cannot be read.
    """
    if mode is ExtractionMode.ENCODE:
        return EncodedFile(
            filename=upload.name,
            mime_type=resolve_mime_type(upload),
            base64_data=base64.b64encode(upload.content).decode("ascii"),
        )
    return ExtractedText(truncate_text(read_text(upload), char_limit))


def extract_safely(
    upload: UploadedFile,
    mode: ExtractionMode,
    char_limit: Optional[int] = None,
) -> ExtractionResult:
    """Like :func:`extract_content`, but failures become ExtractionFailure."""
    try:
        return extract_content(upload, mode, char_limit)
    except ExtractionError as exc:
        logger.warning("Extraction failed for %s: %s", upload.name, exc)
        return ExtractionFailure(filename=upload.name, reason=str(exc))
    except Exception as exc:
        logger.exception("Unexpected error extracting %s", upload.name)
        return ExtractionFailure(filename=upload.name, reason=str(exc))
