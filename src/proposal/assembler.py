"""Prompt assembly for the generate / revise / image-prompt calls.

The generate payload is laid out as::

    [FilePart ...]          encoded documents, category order then upload order
    TextPart(               one trailing text part:
        기술 분야: ...          domain line
        [RFP heading] ...       rfp entries or the "not provided" marker
        [sample heading] ...    only when files were given
        [task list heading] ...
        [history heading] ...   history files, then the free-text note
        closing instruction
    )

Every uploaded file contributes exactly one entry to its category's text
section (extracted text, an attachment reference, or a failure marker),
so the output is fully determined by the inputs.
"""
from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence, Tuple

from core.providers.base import FilePart, PromptPayload, TextPart
from src.ingest import (
    EncodedFile,
    ExtractionFailure,
    ExtractionMode,
    UploadedFile,
    extract_safely,
    resolve_mime_type,
    truncate_text,
)

from .policy import (
    ATTACHED_FILE_MARKER,
    CATEGORY_ORDER,
    CATEGORY_POLICIES,
    EXTRACTION_FAILED_MARKER,
    IMAGE_PROMPT_DRAFT_LIMIT,
    INLINE_MIME_TYPES,
    REVISION_TYPES,
    Category,
    CategoryPolicy,
)
from .prompts import (
    CLOSING_INSTRUCTION,
    DOMAIN_LINE_TEMPLATE,
    IMAGE_PROMPT_SYSTEM_PROMPT,
    IMAGE_PROMPT_USER_TEMPLATE,
    REVISION_PROMPTS,
    REVISION_USER_TEMPLATE,
    SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)


def _effective_mode(upload: UploadedFile, policy: CategoryPolicy) -> ExtractionMode:
    if policy.mode is ExtractionMode.ENCODE and resolve_mime_type(upload) not in INLINE_MIME_TYPES:
        return ExtractionMode.TEXT
    return policy.mode


def _contribution(upload: UploadedFile, policy: CategoryPolicy) -> Tuple[Optional[FilePart], str]:
    """One upload → (optional file part, text entry)."""
    header = f"[{policy.file_label}{upload.name}]"
    result = extract_safely(upload, _effective_mode(upload, policy), policy.char_limit)

    if isinstance(result, ExtractionFailure):
        return None, f"{header} {EXTRACTION_FAILED_MARKER}"
    if isinstance(result, EncodedFile):
        part = FilePart(filename=result.filename, mime_type=result.mime_type, base64_data=result.base64_data)
        return part, f"{header} {ATTACHED_FILE_MARKER}"
    return None, f"{header}\n{result.value}"


def assemble_proposal_payload(
    technology_domain: str,
    note: str,
    documents: Mapping[Category, Sequence[UploadedFile]],
) -> PromptPayload:
    """Build the draft-generation payload.

    Parameters
    ----------
    technology_domain : str
        Technology field label chosen by the user.
    note : str
        Free-text history note; appended to the history section.
    documents : mapping
        Uploads per :class:`Category`; missing categories count as empty.
    """
    file_parts: List[FilePart] = []
    blocks: List[str] = [DOMAIN_LINE_TEMPLATE.format(domain=technology_domain.strip())]

    for category in CATEGORY_ORDER:
        policy = CATEGORY_POLICIES[category]
        entries: List[str] = []

        for upload in documents.get(category, ()):
            part, entry = _contribution(upload, policy)
            if part is not None:
                file_parts.append(part)
            entries.append(entry)

        if category is Category.HISTORY and note and note.strip():
            entries.append(note.strip())

        if entries:
            blocks.append(policy.heading + "\n" + "\n\n".join(entries))
        elif policy.required:
            blocks.append(f"{policy.heading}\n{policy.empty_marker}")

    blocks.append(CLOSING_INSTRUCTION)

    payload = PromptPayload(
        system_prompt=SYSTEM_PROMPT,
        parts=tuple(file_parts) + (TextPart("\n\n".join(blocks)),),
    )
    logger.info(
        "Assembled proposal payload: %d file part(s), %d text chars",
        len(payload.file_parts), len(payload.text),
    )
    return payload


def assemble_revision_payload(draft: str, revision_type: int) -> PromptPayload:
    """Single-text payload asking for a revision of *draft*.

    Raises
    ------
    ValueError
        If *revision_type* is not one of the fixed revision policies.
    """
    if revision_type not in REVISION_TYPES:
        raise ValueError(f"Unknown revision type: {revision_type!r}")
    text = REVISION_USER_TEMPLATE.format(draft=draft, revision_prompt=REVISION_PROMPTS[revision_type])
    return PromptPayload(system_prompt="", parts=(TextPart(text),))


def assemble_image_prompt_payload(draft: str) -> PromptPayload:
    """Single-text payload asking for image-prompt ideas for *draft*."""
    text = IMAGE_PROMPT_USER_TEMPLATE.format(draft=truncate_text(draft, IMAGE_PROMPT_DRAFT_LIMIT))
    return PromptPayload(system_prompt=IMAGE_PROMPT_SYSTEM_PROMPT, parts=(TextPart(text),))
