"""Shared fixtures for the Proposal Drafter test suite.

Provides an in-memory fake LLM provider, document builders (PDF via
PyMuPDF, DOCX via python-docx, PPTX via python-pptx) and upload helpers.
"""

import io
from typing import Iterator, List, Optional, Sequence, Union

import pytest

from core.providers.base import ContentPart, LLMConfig, LLMError, LLMProvider
from src.ingest.base import UploadedFile


# ---------------------------------------------------------------------------
# Fake provider
# ---------------------------------------------------------------------------

class FakeProvider(LLMProvider):
    """Yields pre-set chunks; can fail on open or after N chunks."""

    provider_name = "fake"
    default_model = "fake-model"

    def __init__(
        self,
        chunks: Sequence[str] = (),
        *,
        fail_on_open: bool = False,
        fail_after: Optional[int] = None,
    ):
        self.chunks = list(chunks)
        self.fail_on_open = fail_on_open
        self.fail_after = fail_after
        self.calls: List[tuple] = []

    def stream_text(
        self,
        system_prompt: str,
        user_content: Union[str, Sequence[ContentPart]],
        *,
        config: Optional[LLMConfig] = None,
    ) -> Iterator[str]:
        self.calls.append((system_prompt, user_content, config))
        if self.fail_on_open:
            raise LLMError("invalid api key", provider=self.provider_name)
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i == self.fail_after:
                raise LLMError("connection reset by upstream", provider=self.provider_name)
            yield chunk


@pytest.fixture
def fake_provider_cls():
    return FakeProvider


# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------

def build_pdf(*pages: str) -> bytes:
    """Build a text PDF with one page per argument (ASCII text only)."""
    import fitz  # PyMuPDF

    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


def build_docx(paragraphs: Sequence[str], table: Optional[Sequence[Sequence[str]]] = None) -> bytes:
    import docx

    document = docx.Document()
    for para in paragraphs:
        document.add_paragraph(para)
    if table:
        tbl = document.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                tbl.cell(r, c).text = value
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


def build_pptx(slides: Sequence[Sequence[str]]) -> bytes:
    """Build a deck; each slide is (title, body)."""
    from pptx import Presentation

    prs = Presentation()
    for title, body in slides:
        slide = prs.slides.add_slide(prs.slide_layouts[1])
        slide.shapes.title.text = title
        slide.placeholders[1].text = body
    buf = io.BytesIO()
    prs.save(buf)
    return buf.getvalue()


CORRUPTED_PDF = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\nthis is not really a pdf\n%%EOF"


@pytest.fixture
def readable_pdf() -> bytes:
    return build_pdf("Smart factory vision inspection requirement: defect detection accuracy over 99 percent.")


@pytest.fixture
def corrupted_pdf() -> bytes:
    return CORRUPTED_PDF


@pytest.fixture
def make_upload():
    def _make(name: str, content: Union[bytes, str], mime: Optional[str] = None) -> UploadedFile:
        if isinstance(content, str):
            content = content.encode("utf-8")
        return UploadedFile(name=name, content=content, declared_mime=mime)
    return _make


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached per process; reload them around every test."""
    from src.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def pdf_factory():
    return build_pdf


@pytest.fixture
def docx_factory():
    return build_docx


@pytest.fixture
def pptx_factory():
    return build_pptx
