"""Fixed assembly policy: document categories and how each is encoded.

Nothing here is caller-configurable; the tables are built once at import
and exposed read-only.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional

from src.ingest.base import ExtractionMode


class Category(str, Enum):
    """Document groupings, in prompt order."""

    RFP = "rfp"  # primary requirement documents
    SAMPLE = "sample"  # example proposals
    TASK_LIST = "task_list"  # completed-task / history lists
    HISTORY = "history"  # supplementary history notes


@dataclass(frozen=True)
class CategoryPolicy:
    mode: ExtractionMode
    char_limit: int
    heading: str
    form_field: str
    file_label: str = ""
    # Empty required categories print a marker instead of disappearing.
    required: bool = False
    empty_marker: Optional[str] = None


CATEGORY_ORDER = (Category.RFP, Category.SAMPLE, Category.TASK_LIST, Category.HISTORY)

CATEGORY_POLICIES: Mapping[Category, CategoryPolicy] = MappingProxyType({
    Category.RFP: CategoryPolicy(
        mode=ExtractionMode.ENCODE,
        char_limit=40000,
        heading="[수요기업 기술자료(RFP)]",
        form_field="rfpFiles",
        required=True,
        empty_marker="(제공된 RFP 없음)",
    ),
    Category.SAMPLE: CategoryPolicy(
        mode=ExtractionMode.ENCODE,
        char_limit=15000,
        heading="[제안서 예시]",
        form_field="sampleFiles",
        file_label="예시: ",
    ),
    Category.TASK_LIST: CategoryPolicy(
        mode=ExtractionMode.TEXT,
        char_limit=20000,
        heading="[아이피랩 수행 과제 리스트]",
        form_field="taskListFiles",
    ),
    Category.HISTORY: CategoryPolicy(
        mode=ExtractionMode.TEXT,
        char_limit=10000,
        heading="[가장 관련이 높은 이력사항]",
        form_field="historyFiles",
    ),
})

# Formats every supported provider ingests natively as inline file data.
# Files of other types in an ENCODE category are flattened to text instead.
INLINE_MIME_TYPES: FrozenSet[str] = frozenset({
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
})

EXTRACTION_FAILED_MARKER = "(추출 실패)"
ATTACHED_FILE_MARKER = "(첨부 파일)"

REVISION_TYPES: FrozenSet[int] = frozenset({1, 2})

# The image-prompt call only needs the gist of the draft.
IMAGE_PROMPT_DRAFT_LIMIT = 6000
