"""번역 요청 API (consumer flow).

  POST /translate        — 검증 게이트 → Microsoft Translator
  POST /validate         — 검증 게이트만
  POST /detect-language  — 언어 감지 (미설정 시 문자 범위 기반)
  GET  /languages        — 지원 언어 목록

게이트에서 차단되면 번역 API를 호출하지 않고, 빈 번역 결과와 함께
validation 결과를 반환한다 (클라이언트는 이전 출력을 지우고 메시지를 표시).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from polyglai.middleware.auth import get_optional_user_id
from polyglai.moderation.gate import ContentValidator, get_validator
from polyglai.translator.microsoft import (
    MicrosoftTranslator,
    TranslatorError,
    TranslatorNotConfiguredError,
    fallback_language_detection,
    get_translator,
)
from polyglai.types import (
    SubmissionContext,
    TranslateRequest,
    TranslateResponse,
    ValidateRequest,
    ValidationOptions,
    ValidationResult,
)

router = APIRouter(tags=["translate"])
logger = logging.getLogger(__name__)


class DetectLanguageRequest(BaseModel):
    text: str


@router.post("/translate", response_model=TranslateResponse)
async def translate(
    req: TranslateRequest,
    user_id: str | None = Depends(get_optional_user_id),
    validator: ContentValidator = Depends(get_validator),
    translator: MicrosoftTranslator = Depends(get_translator),
):
    """텍스트를 검증한 뒤 번역 + 로마자 표기를 반환한다."""
    validation = validator.validate_content(
        req.text,
        ValidationOptions(
            context=SubmissionContext.TRANSLATION.value,
            language=req.from_language,
            user_id=user_id,
        ),
    )
    if not validation.is_valid:
        logger.info("Translation blocked: reason=%s", validation.reason.value if validation.reason else None)
        return TranslateResponse(blocked=True, validation=validation)

    try:
        result = await translator.translate_with_transliteration(
            req.text,
            req.from_language,
            req.to_language,
        )
    except TranslatorNotConfiguredError:
        raise HTTPException(status_code=503, detail="Translation service not configured")
    except TranslatorError as e:
        logger.error("Translation failed (%s→%s): %s", req.from_language, req.to_language, e)
        raise HTTPException(status_code=502, detail="Translation failed")

    return TranslateResponse(
        translation=result.translation,
        transliteration=result.transliteration,
        validation=validation,
    )


@router.post("/validate", response_model=ValidationResult)
async def validate(
    req: ValidateRequest,
    user_id: str | None = Depends(get_optional_user_id),
    validator: ContentValidator = Depends(get_validator),
):
    return validator.validate_content(
        req.text,
        ValidationOptions(
            context=req.context,
            language=req.language,
            record_profanity=req.record_profanity,
            user_id=user_id,
        ),
    )


@router.post("/detect-language")
async def detect_language(
    req: DetectLanguageRequest,
    translator: MicrosoftTranslator = Depends(get_translator),
):
    if not req.text.strip():
        raise HTTPException(status_code=400, detail="Text cannot be empty for language detection")

    if not translator.is_configured:
        return {"language": fallback_language_detection(req.text), "source": "fallback"}

    try:
        language = await translator.detect_language(req.text)
    except TranslatorError as e:
        logger.warning("Language detection failed, using fallback: %s", e)
        return {"language": fallback_language_detection(req.text), "source": "fallback"}
    return {"language": language, "source": "microsoft"}


@router.get("/languages")
async def supported_languages(translator: MicrosoftTranslator = Depends(get_translator)):
    if not translator.is_configured:
        raise HTTPException(status_code=503, detail="Translation service not configured")
    return {"languages": await translator.get_supported_languages()}
