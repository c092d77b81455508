"""Document ingestion module: turn uploads into prompt content.

Public API
----------
.. autofunction:: extract_content
.. autofunction:: extract_safely
.. autoclass:: UploadedFile
"""
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
from .extractor import extract_content, extract_safely, resolve_mime_type, truncate_text

__all__ = [
    "EncodedFile",
    "ExtractedContent",
    "ExtractedText",
    "ExtractionError",
    "ExtractionFailure",
    "ExtractionMode",
    "ExtractionResult",
    "UploadedFile",
    "extract_content",
    "extract_safely",
    "resolve_mime_type",
    "truncate_text",
]
