"""Base classes for document ingestion."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class ExtractionMode(str, Enum):
    """How an uploaded file is turned into prompt content."""

    TEXT = "text"  # flatten to plain text (truncated per category)
    ENCODE = "encode"  # inline base64 file data (never truncated)


@dataclass(frozen=True)
class UploadedFile:
    """A named binary blob received with a request; never persisted."""

    name: str
    content: bytes
    declared_mime: Optional[str] = None

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot ('' if none)."""
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[-1].lower()

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExtractedText:
    value: str


@dataclass(frozen=True)
class EncodedFile:
    filename: str
    mime_type: str
    base64_data: str


ExtractedContent = Union[ExtractedText, EncodedFile]


@dataclass(frozen=True)
class ExtractionFailure:
    """Failure variant of a per-file extraction result."""

    filename: str
    reason: str


ExtractionResult = Union[ExtractedText, EncodedFile, ExtractionFailure]


class ExtractionError(Exception):
    """A single document could not be read."""

    def __init__(self, message: str, filename: str = ""):
        super().__init__(message)
        self.filename = filename


@dataclass
class PageContent:
    """Content from a single page/slide."""
    page_number: int
    text: str
    tables: List[List[List[str]]] = field(default_factory=list)  # list of tables, each table is list of rows
    source_type: str = ""  # "pdf", "docx", "pptx"

    @property
    def table_text(self) -> str:
        """Convert tables to readable text format."""
        if not self.tables:
            return ""
        parts = []
        for table in self.tables:
            rows_text = []
            for row in table:
                cells = [str(c).strip() for c in row if c and str(c).strip()]
                if cells:
                    rows_text.append(" | ".join(cells))
            if rows_text:
                parts.append("\n".join(rows_text))
        return "\n\n".join(parts)

    @property
    def combined_text(self) -> str:
        """Return text + table text combined."""
        parts = []
        if self.text and self.text.strip():
            parts.append(self.text.strip())
        tbl = self.table_text
        if tbl:
            parts.append(tbl)
        return "\n\n".join(parts)


@dataclass
class DocumentContent:
    """Full extracted document content."""
    file_type: str
    pages: List[PageContent]
    source_filename: str = ""
    backend: str = ""

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def full_text(self) -> str:
        """Combine all page text and table text into a single string."""
        return "\n\n".join(p.combined_text for p in self.pages if p.combined_text)
