from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


# --- Enums ---


class ContentCategory(str, Enum):
    VIOLENCE = "violence"          # threats, self-harm
    TERRORISM = "terrorism"        # weapons, explosives, attacks
    HATE_SPEECH = "hate_speech"
    DRUGS = "drugs"
    SEXUAL = "sexual"
    PROFANITY = "profanity"        # generic insults, bullying


class ValidationReason(str, Enum):
    EMPTY = "empty"
    TOO_LONG = "too_long"
    INAPPROPRIATE_CONTENT = "inappropriate_content"


class SubmissionContext(str, Enum):
    """Where a validated text came from (stored on usage records)."""

    TRANSLATION = "translation"
    FILE_UPLOAD = "file_upload"
    VALIDATION = "validation"


# --- Validation ---


class ValidationResult(BaseModel):
    """Outcome of one validate_content() call. Never persisted."""

    is_valid: bool
    reason: ValidationReason | None = None
    error_message: str | None = None
    detected_words: list[str] | None = None
    category: ContentCategory | None = None


class ValidationOptions(BaseModel):
    context: str = SubmissionContext.TRANSLATION.value
    language: str = "unknown"
    record_profanity: bool = True
    user_id: str | None = None


# --- Usage records ---


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class UsageRecord(BaseModel):
    """One detected violation (profanity_records row). Never mutated after insert."""

    id: Any = None
    user_id: str
    text: str
    context: str = SubmissionContext.TRANSLATION.value
    language: str = "unknown"
    detected_words: list[str] = Field(default_factory=list)
    word_count: int = 0
    date: str = ""  # YYYY-MM-DD (UTC)
    timestamp: datetime.datetime = Field(default_factory=_utcnow)

    @classmethod
    def create(
        cls,
        *,
        user_id: str,
        text: str,
        context: str | None = None,
        language: str | None = None,
        detected_words: list[str] | None = None,
        timestamp: datetime.datetime | None = None,
    ) -> "UsageRecord":
        ts = timestamp or _utcnow()
        return cls(
            user_id=user_id,
            text=text,
            context=context or SubmissionContext.TRANSLATION.value,
            language=language or "unknown",
            detected_words=list(detected_words or []),
            word_count=len(text.split(" ")),
            date=ts.date().isoformat(),
            timestamp=ts,
        )

    def to_row(self) -> dict[str, Any]:
        """Column mapping for insert (id is generated by the database)."""
        return {
            "user_id": self.user_id,
            "text": self.text,
            "context": self.context,
            "language": self.language,
            "detected_words": self.detected_words,
            "word_count": self.word_count,
            "date": self.date,
            "timestamp": self.timestamp.isoformat(),
        }


# --- Request / Response ---


class TranslateRequest(BaseModel):
    text: str
    from_language: str = "en"
    to_language: str = "es"

    @field_validator("from_language", "to_language")
    @classmethod
    def normalize_language(cls, v: str) -> str:
        return v.strip().lower()


class TranslateResponse(BaseModel):
    translation: str = ""
    transliteration: str = ""
    blocked: bool = False
    validation: ValidationResult


class ValidateRequest(BaseModel):
    text: str
    context: str = SubmissionContext.VALIDATION.value
    language: str = "unknown"
    record_profanity: bool = True


class ExtractTextResponse(BaseModel):
    text: str = ""
    blocked: bool = False
    validation: ValidationResult


class RecordsPage(BaseModel):
    records: list[UsageRecord]
    next_before: datetime.datetime | None = None
    next_before_id: Any = None


class GlobalStats(BaseModel):
    total_profanity_count: int = 0
    users_with_profanity: int = 0
    language_stats: dict[str, int] = Field(default_factory=dict)
    context_stats: dict[str, int] = Field(default_factory=dict)
    recent_records_count: int = 0


class DailyCount(BaseModel):
    date: str
    count: int


class WeeklyCount(BaseModel):
    week: str
    count: int


class MonthlyCount(BaseModel):
    month: str
    count: int


class Trends(BaseModel):
    daily: list[DailyCount] = Field(default_factory=list)
    weekly: list[WeeklyCount] = Field(default_factory=list)
    monthly: list[MonthlyCount] = Field(default_factory=list)


class UserStats(BaseModel):
    user_id: str
    total_count: int = 0
    daily_count: int = 0
    language_counts: dict[str, int] = Field(default_factory=dict)
    last_detected: datetime.datetime | None = None


class HighRiskUser(BaseModel):
    user_id: str
    count: int
    last_detected: datetime.datetime | None = None
