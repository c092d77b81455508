"""Tests for src.ingest -- per-file extraction into prompt content.

Covers MIME resolution, truncation, both extraction modes, the structured
readers (PDF / DOCX / PPTX) and failure isolation in extract_safely.
"""

import base64

import pytest

from src.ingest import (
    EncodedFile,
    ExtractedText,
    ExtractionError,
    ExtractionFailure,
    ExtractionMode,
    UploadedFile,
    extract_content,
    extract_safely,
    resolve_mime_type,
    truncate_text,
)
from src.ingest.base import DocumentContent, PageContent
from src.ingest.pdf_reader import _is_garbled, extract_pdf
from src.ingest.reader import _EXTENSION_MAP, read_text


# ===================================================================
# Uploaded file model
# ===================================================================

class TestUploadedFile:

    def test_extension_lowercased(self):
        assert UploadedFile("RFP.PDF", b"").extension == "pdf"

    def test_extension_uses_last_dot(self):
        assert UploadedFile("archive.tar.gz", b"").extension == "gz"

    def test_no_extension(self):
        assert UploadedFile("README", b"").extension == ""

    def test_size_bytes(self):
        assert UploadedFile("a.txt", b"12345").size_bytes == 5


# ===================================================================
# MIME resolution
# ===================================================================

class TestResolveMimeType:

    def test_declared_type_wins(self):
        upload = UploadedFile("scan.bin", b"", declared_mime="image/png")
        assert resolve_mime_type(upload) == "image/png"

    def test_declared_type_parameters_stripped(self):
        upload = UploadedFile("a.txt", b"", declared_mime="text/plain; charset=utf-8")
        assert resolve_mime_type(upload) == "text/plain"

    def test_extension_lookup(self):
        assert resolve_mime_type(UploadedFile("rfp.pdf", b"")) == "application/pdf"

    def test_octet_stream_declaration_ignored(self):
        upload = UploadedFile("photo.JPG", b"", declared_mime="application/octet-stream")
        assert resolve_mime_type(upload) == "image/jpeg"

    def test_unknown_extension_defaults_to_binary(self):
        assert resolve_mime_type(UploadedFile("data.xyz", b"")) == "application/octet-stream"

    def test_hwp_known(self):
        assert resolve_mime_type(UploadedFile("계획서.hwp", b"")) == "application/x-hwp"


# ===================================================================
# Truncation
# ===================================================================

class TestTruncateText:

    def test_shorter_text_unchanged(self):
        assert truncate_text("abc", 10) == "abc"

    def test_cut_to_limit(self):
        assert truncate_text("abcdef", 3) == "abc"

    def test_idempotent(self):
        once = truncate_text("가나다라마바사", 4)
        assert truncate_text(once, 4) == once

    def test_counts_code_points_not_bytes(self):
        result = truncate_text("가나다라", 2)
        assert result == "가나"
        result.encode("utf-8")  # no split multi-byte sequence

    def test_no_limit(self):
        assert truncate_text("x" * 100, None) == "x" * 100


# ===================================================================
# Extraction modes
# ===================================================================

class TestExtractContent:

    def test_text_mode_decodes_utf8(self):
        upload = UploadedFile("notes.txt", "스마트 팩토리 구축".encode("utf-8"))
        result = extract_content(upload, ExtractionMode.TEXT)
        assert result == ExtractedText("스마트 팩토리 구축")

    def test_text_mode_replaces_invalid_bytes(self):
        upload = UploadedFile("notes.txt", b"ok \xff\xfe end")
        result = extract_content(upload, ExtractionMode.TEXT)
        assert isinstance(result, ExtractedText)
        assert "�" in result.value
        assert result.value.startswith("ok ")
        assert result.value.endswith(" end")

    def test_text_mode_truncates(self):
        upload = UploadedFile("long.txt", b"a" * 500)
        result = extract_content(upload, ExtractionMode.TEXT, char_limit=100)
        assert result.value == "a" * 100

    def test_encode_mode_round_trips_bytes(self):
        data = bytes(range(256))
        upload = UploadedFile("blob.pdf", data)
        result = extract_content(upload, ExtractionMode.ENCODE)
        assert isinstance(result, EncodedFile)
        assert result.filename == "blob.pdf"
        assert result.mime_type == "application/pdf"
        assert base64.b64decode(result.base64_data) == data

    def test_encode_mode_never_truncated(self):
        data = b"x" * 5000
        result = extract_content(UploadedFile("big.pdf", data), ExtractionMode.ENCODE, char_limit=10)
        assert base64.b64decode(result.base64_data) == data

    def test_empty_text_file(self):
        assert extract_content(UploadedFile("empty.txt", b""), ExtractionMode.TEXT) == ExtractedText("")


class TestExtractSafely:

    def test_corrupted_pdf_becomes_failure(self, corrupted_pdf):
        result = extract_safely(UploadedFile("broken.pdf", corrupted_pdf), ExtractionMode.TEXT, 1000)
        assert isinstance(result, ExtractionFailure)
        assert result.filename == "broken.pdf"
        assert result.reason

    def test_corrupted_pdf_raises_from_extract_content(self, corrupted_pdf):
        with pytest.raises(ExtractionError):
            extract_content(UploadedFile("broken.pdf", corrupted_pdf), ExtractionMode.TEXT)

    def test_unexpected_error_becomes_failure(self, monkeypatch):
        import src.ingest.extractor as extractor

        def boom(upload):
            raise RuntimeError("reader crashed")

        monkeypatch.setattr(extractor, "read_text", boom)
        result = extract_safely(UploadedFile("a.txt", b"hi"), ExtractionMode.TEXT)
        assert result == ExtractionFailure(filename="a.txt", reason="reader crashed")

    def test_success_passes_through(self):
        result = extract_safely(UploadedFile("a.txt", b"hello"), ExtractionMode.TEXT)
        assert result == ExtractedText("hello")


# ===================================================================
# Structured readers
# ===================================================================

class TestReaders:

    def test_extension_map(self):
        assert set(_EXTENSION_MAP) == {"pdf", "docx", "pptx"}

    def test_readable_pdf(self, readable_pdf):
        doc = extract_pdf(readable_pdf, "rfp.pdf")
        assert doc.total_pages == 1
        assert "defect detection" in doc.full_text

    def test_multi_page_pdf(self, pdf_factory):
        data = pdf_factory(
            "First page describes the overall project scope in detail.",
            "Second page lists the delivery schedule and milestones.",
        )
        text = read_text(UploadedFile("plan.pdf", data))
        assert text.index("First page") < text.index("Second page")

    def test_corrupted_pdf_raises(self, corrupted_pdf):
        with pytest.raises(ExtractionError):
            extract_pdf(corrupted_pdf, "broken.pdf")

    def test_docx_paragraphs_and_table(self, docx_factory):
        data = docx_factory(
            ["Project overview", "Vision inspection line"],
            table=[["Item", "Value"], ["Accuracy", "99%"]],
        )
        text = read_text(UploadedFile("history.docx", data))
        assert "Project overview" in text
        assert "Vision inspection line" in text
        assert "Accuracy | 99%" in text
        assert text.index("Vision inspection line") < text.index("Accuracy | 99%")

    def test_corrupted_docx_raises(self):
        with pytest.raises(ExtractionError):
            read_text(UploadedFile("broken.docx", b"not a zip archive"))

    def test_pptx_one_page_per_slide(self, pptx_factory):
        from src.ingest.pptx_reader import extract_pptx

        data = pptx_factory([("Overview", "Scope of work"), ("Schedule", "Six months")])
        doc = extract_pptx(data, "deck.pptx")
        assert doc.total_pages == 2
        assert "Overview" in doc.pages[0].text
        assert "Six months" in doc.pages[1].text


# ===================================================================
# Data model and garbled-text detection
# ===================================================================

class TestDocumentContent:

    def test_full_text_skips_empty_pages(self):
        doc = DocumentContent(
            file_type="pdf",
            pages=[
                PageContent(page_number=1, text="one"),
                PageContent(page_number=2, text="  "),
                PageContent(page_number=3, text="three"),
            ],
        )
        assert doc.full_text == "one\n\nthree"

    def test_table_text_joined(self):
        page = PageContent(page_number=1, text="", tables=[[["a", "b"], ["", "c"]]])
        assert page.combined_text == "a | b\nc"


class TestGarbledDetection:

    def test_clean_text(self):
        assert not _is_garbled("정상적인 한국어 텍스트입니다. Normal English text.")

    def test_replacement_chars(self):
        assert _is_garbled("�" * 10 + "abc")

    def test_cid_placeholders(self):
        assert _is_garbled("(cid:123)(cid:456)(cid:789) x")

    def test_empty_not_garbled(self):
        assert not _is_garbled("")
