"""Proposal drafting endpoints: generate, revise, image-prompts.

Each endpoint assembles a prompt, opens a relay to the configured LLM
provider and streams the generated text back as ``text/plain``.  Errors
that happen before the first chunk become JSON error responses; errors
after that abort the stream.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from core.providers.base import LLMConfig, LLMProvider, PromptPayload
from core.providers.registry import get_provider
from core.relay import AssemblyError, ModelRelay, RelayError, RelayStream
from shared.schemas.proposals import (
    ErrorDetail,
    ImagePromptRequest,
    ReviseRequest,
    coerce_revision_type,
)
from src.config.settings import AppSettings, get_settings
from src.ingest.base import UploadedFile
from src.proposal import (
    Category,
    assemble_image_prompt_payload,
    assemble_proposal_payload,
    assemble_revision_payload,
)

logger = logging.getLogger(__name__)
router = APIRouter()

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def _get_provider(settings: AppSettings) -> LLMProvider:
    """Provider for one request (patched in tests)."""
    return get_provider(settings.llm_provider, model=settings.model_id)


def _error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorDetail(code=code, message=message).model_dump(),
    )


async def _relay_response(
    label: str,
    config: LLMConfig,
    builder: Callable[..., PromptPayload],
    *args: Any,
    error_message: str,
) -> StreamingResponse:
    """Assemble, open the upstream stream and wrap it in a StreamingResponse."""
    stream: RelayStream = ModelRelay(_get_provider(get_settings())).session(label, config)
    try:
        payload = await run_in_threadpool(stream.assemble, builder, *args)
        await run_in_threadpool(stream.start, payload)
    except AssemblyError:
        logger.exception("%s: prompt assembly failed", label)
        raise _error(500, "ASSEMBLY_ERROR", error_message)
    except RelayError:
        logger.exception("%s: upstream call failed", label)
        raise _error(500, "UPSTREAM_ERROR", error_message)

    return StreamingResponse(iter(stream), media_type=STREAM_MEDIA_TYPE, headers=STREAM_HEADERS)


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise _error(400, "VALIDATION_ERROR", "요청 본문이 올바른 JSON이 아닙니다.")
    if not isinstance(body, dict):
        raise _error(400, "VALIDATION_ERROR", "요청 본문이 올바른 JSON이 아닙니다.")
    return body


async def _read_uploads(files: Optional[List[UploadFile]], max_bytes: int) -> List[UploadedFile]:
    uploads: List[UploadedFile] = []
    for f in files or []:
        content = await f.read()
        if len(content) > max_bytes:
            raise _error(
                413,
                "FILE_TOO_LARGE",
                f"파일 크기는 {max_bytes // (1024 * 1024)}MB 이하로 업로드해주세요: {f.filename}",
            )
        uploads.append(
            UploadedFile(
                name=f.filename or "upload",
                content=content,
                declared_mime=f.content_type,
            )
        )
    return uploads


# ---------------------------------------------------------------------------
# Generate
# ---------------------------------------------------------------------------

@router.post("/generate")
async def generate(
    technology_domain: str = Form("", alias="technologyDomain"),
    history_text: str = Form("", alias="historyText"),
    rfp_files: Optional[List[UploadFile]] = File(None, alias="rfpFiles"),
    sample_files: Optional[List[UploadFile]] = File(None, alias="sampleFiles"),
    task_list_files: Optional[List[UploadFile]] = File(None, alias="taskListFiles"),
    history_files: Optional[List[UploadFile]] = File(None, alias="historyFiles"),
):
    """Stream a proposal draft built from the uploaded documents."""
    settings = get_settings()
    limit = settings.max_upload_bytes
    documents = {
        Category.RFP: await _read_uploads(rfp_files, limit),
        Category.SAMPLE: await _read_uploads(sample_files, limit),
        Category.TASK_LIST: await _read_uploads(task_list_files, limit),
        Category.HISTORY: await _read_uploads(history_files, limit),
    }
    logger.info(
        "Generate request: domain=%r files=%s",
        technology_domain,
        {c.value: len(files) for c, files in documents.items()},
    )

    return await _relay_response(
        "generate",
        settings.generate_config(),
        assemble_proposal_payload,
        technology_domain,
        history_text,
        documents,
        error_message="제안서 생성 중 오류가 발생했습니다.",
    )


# ---------------------------------------------------------------------------
# Revise
# ---------------------------------------------------------------------------

@router.post("/revise")
async def revise(request: Request):
    """Stream a revision of a draft under one of the fixed revision policies."""
    body = await _json_body(request)
    try:
        req = ReviseRequest.model_validate(body)
    except ValidationError:
        raise _error(400, "VALIDATION_ERROR", "필수 데이터가 누락되었습니다.")

    if not req.draft or req.revision_type in (None, ""):
        raise _error(400, "VALIDATION_ERROR", "필수 데이터가 누락되었습니다.")

    revision_type = coerce_revision_type(req.revision_type)
    if revision_type is None:
        raise _error(400, "INVALID_REVISION_TYPE", "잘못된 수정 타입입니다.")

    return await _relay_response(
        "revise",
        get_settings().revise_config(),
        assemble_revision_payload,
        req.draft,
        revision_type,
        error_message="제안서 수정 중 오류가 발생했습니다.",
    )


# ---------------------------------------------------------------------------
# Image prompts
# ---------------------------------------------------------------------------

@router.post("/image-prompts")
async def image_prompts(request: Request):
    """Stream image-generation prompt suggestions for a draft."""
    body = await _json_body(request)
    try:
        req = ImagePromptRequest.model_validate(body)
    except ValidationError:
        raise _error(400, "VALIDATION_ERROR", "제안서 초안이 누락되었습니다.")

    if not req.draft:
        raise _error(400, "VALIDATION_ERROR", "제안서 초안이 누락되었습니다.")

    return await _relay_response(
        "image-prompts",
        get_settings().image_prompt_config(),
        assemble_image_prompt_payload,
        req.draft,
        error_message="이미지 프롬프트 생성 중 오류가 발생했습니다.",
    )
