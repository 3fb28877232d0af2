"""Validation gate: pass/block decision for a text submission.

  raw text
    -> empty / whitespace only      -> invalid (empty)
    -> longer than max_length       -> invalid (too_long)
    -> classifier: no hit           -> valid
    -> classifier: hit              -> invalid (inappropriate_content)
                                       + usage record handed to the recorder

All outcomes are returned as ValidationResult; nothing here raises for
string input. Recording is dispatched, never awaited.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from polyglai.config import settings
from polyglai.moderation.classifier import ClassificationResult, ContentClassifier, Detection
from polyglai.moderation.lexicon import highest_priority
from polyglai.types import ContentCategory, ValidationOptions, ValidationReason, ValidationResult

if TYPE_CHECKING:
    from polyglai.moderation.recorder import UsageRecorder

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 10_000

EMPTY_TEXT_MESSAGE = "Please enter some text to translate."
TOO_LONG_MESSAGE = "Text is too long. Please reduce the content and try again."

ERROR_MESSAGES: dict[ContentCategory, str] = {
    ContentCategory.VIOLENCE: (
        "Translation blocked: Text contains violent or threatening language that could harm others."
    ),
    ContentCategory.TERRORISM: (
        "Translation blocked: Text contains content related to violence or terrorism."
    ),
    ContentCategory.HATE_SPEECH: (
        "Translation blocked: Text contains hate speech or discriminatory language."
    ),
    ContentCategory.DRUGS: (
        "Translation blocked: Text contains references to illegal substances."
    ),
    ContentCategory.SEXUAL: (
        "Translation blocked: Text contains inappropriate sexual content."
    ),
    ContentCategory.PROFANITY: (
        "Translation blocked: Text contains inappropriate language that violates our community guidelines."
    ),
}


def error_message_for(category: ContentCategory | None) -> str:
    return ERROR_MESSAGES.get(category, ERROR_MESSAGES[ContentCategory.PROFANITY])


def get_error_message(detections: list[Detection]) -> str:
    """Message for the highest-priority category among the detections."""
    return error_message_for(highest_priority(d.category for d in detections))


def is_text_too_long(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> bool:
    return len(text) > max_length


class ContentValidator:
    """Wraps a ContentClassifier with length checks and optional recording."""

    def __init__(
        self,
        classifier: ContentClassifier | None = None,
        recorder: "UsageRecorder | None" = None,
        max_length: int = DEFAULT_MAX_LENGTH,
        enabled: bool = True,
    ):
        self._classifier = classifier or ContentClassifier()
        self.recorder = recorder
        self._max_length = max_length
        self._enabled = enabled

    @property
    def classifier(self) -> ContentClassifier:
        return self._classifier

    def validate_content(self, text: str, options: ValidationOptions | None = None) -> ValidationResult:
        opts = options or ValidationOptions()

        if not text or not text.strip():
            return ValidationResult(
                is_valid=False,
                reason=ValidationReason.EMPTY,
                error_message=EMPTY_TEXT_MESSAGE,
            )

        if is_text_too_long(text, self._max_length):
            return ValidationResult(
                is_valid=False,
                reason=ValidationReason.TOO_LONG,
                error_message=TOO_LONG_MESSAGE,
            )

        # 비활성화 시 길이 검사만 수행
        if not self._enabled:
            return ValidationResult(is_valid=True)

        classification = self._classifier.classify(text)
        if classification.is_clean:
            return ValidationResult(is_valid=True)

        detected = classification.detected_words
        category = classification.top_category

        logger.info(
            "Inappropriate content blocked (%s): %d hits",
            category.value if category else "unknown",
            len(detected),
            extra={"context": opts.context, "language": opts.language},
        )

        if opts.record_profanity:
            self._dispatch_record(text, classification, opts)

        return ValidationResult(
            is_valid=False,
            reason=ValidationReason.INAPPROPRIATE_CONTENT,
            error_message=get_error_message(classification.detections),
            detected_words=detected,
            category=category,
        )

    def _dispatch_record(
        self,
        text: str,
        classification: ClassificationResult,
        opts: ValidationOptions,
    ) -> None:
        if self.recorder is None:
            return
        try:
            self.recorder.dispatch(
                text=text,
                context=opts.context or "translation",
                language=opts.language or "unknown",
                detected_words=classification.detected_words,
                user_id=opts.user_id,
            )
        except Exception:
            # 기록 실패가 검증 결과를 바꾸면 안 된다
            logger.exception("Failed to dispatch profanity record")


# 프로세스 전역 validator (recorder는 app lifespan에서 연결)
content_validator = ContentValidator(
    max_length=settings.max_text_length,
    enabled=settings.moderation_enabled,
)


def validate_content(text: str, options: ValidationOptions | None = None) -> ValidationResult:
    return content_validator.validate_content(text, options)


def get_validator() -> ContentValidator:
    return content_validator
