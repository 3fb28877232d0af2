"""파일 업로드 → 텍스트 추출 → 검증 게이트 (consumer flow)."""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from polyglai.config import settings
from polyglai.extract import ExtractionError, extract_text
from polyglai.middleware.auth import get_optional_user_id
from polyglai.moderation.gate import ContentValidator, get_validator
from polyglai.types import ExtractTextResponse, SubmissionContext, ValidationOptions

router = APIRouter(tags=["extract"])
logger = logging.getLogger(__name__)


@router.post("/extract-text", response_model=ExtractTextResponse)
async def extract(
    file: UploadFile = File(...),
    language: str = Form("unknown"),
    user_id: str | None = Depends(get_optional_user_id),
    validator: ContentValidator = Depends(get_validator),
):
    """업로드된 파일의 텍스트를 추출하고, 차단 대상이면 텍스트 없이 반환한다."""
    # 한도 + 1 바이트까지만 읽어 초과 여부를 판단
    data = await file.read(settings.extract_max_bytes + 1)
    if len(data) > settings.extract_max_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        text = await run_in_threadpool(extract_text, file.filename or "", file.content_type, data)
    except ExtractionError as e:
        logger.info("Extraction rejected %s: %s", file.filename, e.message)
        raise HTTPException(status_code=e.status_code, detail=e.message)

    validation = validator.validate_content(
        text,
        ValidationOptions(
            context=SubmissionContext.FILE_UPLOAD.value,
            language=language,
            user_id=user_id,
        ),
    )
    if not validation.is_valid:
        return ExtractTextResponse(blocked=True, validation=validation)

    return ExtractTextResponse(text=text, validation=validation)
