"""Proposal endpoint request/response schemas."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.proposal.policy import REVISION_TYPES


# ---------------------------------------------------------------------------
# Revise
# ---------------------------------------------------------------------------

class ReviseRequest(BaseModel):
    """Body of ``POST /api/revise``.

    ``revisionType`` is kept raw so the endpoint can tell a missing value
    apart from an invalid one.
    """

    model_config = ConfigDict(populate_by_name=True)

    draft: Optional[str] = None
    revision_type: Any = Field(default=None, alias="revisionType")


def coerce_revision_type(value: Any) -> Optional[int]:
    """Return 1 or 2 for ``1``, ``2``, ``"1"``, ``"2"``; otherwise None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str):
        # isdecimal, not isdigit: "²" and "①" are digits int() rejects
        value = int(value.strip()) if value.strip().isdecimal() else None
    if isinstance(value, int) and value in REVISION_TYPES:
        return value
    return None


# ---------------------------------------------------------------------------
# Image prompts
# ---------------------------------------------------------------------------

class ImagePromptRequest(BaseModel):
    """Body of ``POST /api/image-prompts``."""

    draft: Optional[str] = None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    code: str
    message: str
