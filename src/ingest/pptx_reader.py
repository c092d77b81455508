"""PPTX (PowerPoint) text extraction from in-memory uploads.

Uses python-pptx to iterate over slides and extract text from every shape
that carries a text frame (titles, body placeholders, free text boxes,
grouped shapes) as well as table cells and speaker notes.
"""
import io
import logging
from typing import List

from .base import DocumentContent, ExtractionError, PageContent

logger = logging.getLogger(__name__)


def _extract_table_from_shape(shape) -> List[List[str]]:
    """Return rows of cell text from a table shape."""
    rows: List[List[str]] = []
    try:
        for row in shape.table.rows:
            rows.append([cell.text.strip() for cell in row.cells])
    except Exception as exc:
        logger.warning("Failed to extract table from shape: %s", exc)
    return rows


def _collect_texts_from_shape(shape) -> List[str]:
    """Recursively collect text fragments from a shape (including groups)."""
    from pptx.enum.shapes import MSO_SHAPE_TYPE  # type: ignore

    if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
        texts: List[str] = []
        for child_shape in shape.shapes:
            texts.extend(_collect_texts_from_shape(child_shape))
        return texts

    if not shape.has_text_frame:
        return []
    return [p.text.strip() for p in shape.text_frame.paragraphs if p.text.strip()]


def extract_pptx(data: bytes, filename: str = "") -> DocumentContent:
    """Extract text and tables from PPTX bytes, one page per slide.

    Raises
    ------
    ExtractionError
        If python-pptx is missing or the file cannot be opened.
    """
    try:
        from pptx import Presentation  # type: ignore
    except ImportError:
        raise ExtractionError(
            "python-pptx is required for PPTX extraction. "
            "Install it with `pip install python-pptx`.",
            filename=filename,
        )

    try:
        prs = Presentation(io.BytesIO(data))
    except Exception as exc:
        raise ExtractionError(f"Failed to open PPTX file {filename}: {exc}", filename=filename) from exc

    pages: List[PageContent] = []
    for slide_idx, slide in enumerate(prs.slides):
        slide_texts: List[str] = []
        slide_tables: List[List[List[str]]] = []

        for shape in slide.shapes:
            if shape.has_table:
                table_rows = _extract_table_from_shape(shape)
                if table_rows:
                    slide_tables.append(table_rows)
                continue  # table shapes usually don't carry extra text
            slide_texts.extend(_collect_texts_from_shape(shape))

        if slide.has_notes_slide:
            notes_frame = slide.notes_slide.notes_text_frame
            notes_text = notes_frame.text.strip() if notes_frame is not None else ""
            if notes_text:
                slide_texts.append(f"[Speaker Notes]\n{notes_text}")

        pages.append(
            PageContent(
                page_number=slide_idx + 1,
                text="\n".join(slide_texts),
                tables=slide_tables,
                source_type="pptx",
            )
        )

    return DocumentContent(file_type="pptx", pages=pages, source_filename=filename, backend="python-pptx")
