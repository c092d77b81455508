"""Proposal prompt assembly: policy tables, templates and payload builders."""
from .assembler import (
    assemble_image_prompt_payload,
    assemble_proposal_payload,
    assemble_revision_payload,
)
from .policy import CATEGORY_ORDER, CATEGORY_POLICIES, Category, CategoryPolicy

__all__ = [
    "CATEGORY_ORDER",
    "CATEGORY_POLICIES",
    "Category",
    "CategoryPolicy",
    "assemble_image_prompt_payload",
    "assemble_proposal_payload",
    "assemble_revision_payload",
]
