"""Microsoft Translator Text API v3 client.

  POST /translate      — 번역
  POST /detect         — 언어 감지
  POST /transliterate  — 로마자 표기 (zh-cn, ja, ko)
  GET  /languages      — 지원 언어 목록

Callers must run text through the validation gate first; this module
sends whatever it is given.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from dataclasses import dataclass
from typing import Any

import httpx

from polyglai.config import settings

logger = logging.getLogger(__name__)

_API_VERSION = "3.0"

# App language code → Microsoft language code
_LANGUAGE_CODES: dict[str, str] = {
    "en": "en",
    "es": "es",
    "zh-cn": "zh-Hans",
    "ja": "ja",
    "ko": "ko",
}
_APP_LANGUAGE_CODES: dict[str, str] = {v: k for k, v in _LANGUAGE_CODES.items()}

# App language code → (language, fromScript, toScript)
_TRANSLITERATION: dict[str, tuple[str, str, str]] = {
    "zh-cn": ("zh-Hans", "Hans", "Latn"),
    "ja": ("ja", "Jpan", "Latn"),
    "ko": ("ko", "Kore", "Latn"),
}

# API 미설정 시 사용하는 문자 범위 기반 감지 (순서 중요: 한자 → zh-cn 우선)
_FALLBACK_DETECTION: list[tuple[str, re.Pattern[str]]] = [
    ("en", re.compile(r"^[a-zA-Z\s.,!?'\"()-]+$")),
    ("es", re.compile(r"[ñáéíóúüÑÁÉÍÓÚÜ]")),
    ("zh-cn", re.compile(r"[\u4e00-\u9fff]")),
    ("ja", re.compile(r"[\u3040-\u309f\u30a0-\u30ff\u4e00-\u9faf]")),
    ("ko", re.compile(r"[\uac00-\ud7af\u1100-\u11ff\u3130-\u318f]")),
]


class TranslatorError(Exception):
    """Translator API call failed."""


class TranslatorNotConfiguredError(TranslatorError):
    """Key or region missing."""


@dataclass
class TranslationResult:
    translation: str
    transliteration: str = ""


def to_microsoft_code(code: str) -> str:
    return _LANGUAGE_CODES.get(code.lower(), code)


def to_app_code(code: str) -> str:
    return _APP_LANGUAGE_CODES.get(code, code)


def supports_transliteration(code: str) -> bool:
    return code.lower() in _TRANSLITERATION


def fallback_language_detection(text: str) -> str:
    for lang, pattern in _FALLBACK_DETECTION:
        if pattern.search(text):
            return lang
    return "en"


class MicrosoftTranslator:
    """Async Microsoft Translator client."""

    def __init__(
        self,
        key: str | None = None,
        region: str | None = None,
        endpoint: str | None = None,
        timeout_s: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._key = key if key is not None else settings.azure_translator_key
        self._region = region if region is not None else settings.azure_translator_region
        self._endpoint = (endpoint or settings.azure_translator_endpoint).rstrip("/")
        self._timeout_s = timeout_s or settings.azure_translator_timeout_s
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self._key) and bool(self._region)

    def _headers(self) -> dict[str, str]:
        if not self.is_configured:
            raise TranslatorNotConfiguredError(
                "Microsoft Translator not configured: set AZURE_TRANSLATOR_KEY and AZURE_TRANSLATOR_REGION"
            )
        return {
            "Ocp-Apim-Subscription-Key": self._key,
            "Ocp-Apim-Subscription-Region": self._region,
            "Content-Type": "application/json; charset=UTF-8",
            "X-ClientTraceId": str(uuid.uuid4()),
        }

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str],
        body: list[dict[str, str]] | None = None,
    ) -> Any:
        headers = self._headers()
        params = {"api-version": _API_VERSION, **params}
        url = f"{self._endpoint}{path}"

        start = time.monotonic()
        try:
            if self._client is not None:
                response = await self._client.request(method, url, params=params, json=body, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                    response = await client.request(method, url, params=params, json=body, headers=headers)
        except httpx.HTTPError as e:
            raise TranslatorError(f"Translator request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug("Translator %s %s → %d (%.0fms)", method, path, response.status_code, elapsed_ms)

        if response.status_code >= 400:
            raise TranslatorError(_error_message(response))
        try:
            return response.json()
        except ValueError as e:
            raise TranslatorError("Unexpected response format from Microsoft Translator") from e

    async def translate_text(self, text: str, from_language: str, to_language: str) -> str:
        if not text.strip():
            raise TranslatorError("Text cannot be empty")

        data = await self._request(
            "POST",
            "/translate",
            {"from": to_microsoft_code(from_language), "to": to_microsoft_code(to_language)},
            [{"Text": text}],
        )
        try:
            return data[0]["translations"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise TranslatorError("Unexpected response format from Microsoft Translator") from e

    async def detect_language(self, text: str) -> str:
        if not text.strip():
            raise TranslatorError("Text cannot be empty for language detection")

        data = await self._request("POST", "/detect", {}, [{"Text": text}])
        try:
            detected = data[0]["language"]
        except (KeyError, IndexError, TypeError) as e:
            raise TranslatorError("Unexpected response format from Microsoft Translator detect API") from e
        logger.info("Language detected: %s (score=%s)", detected, data[0].get("score"))
        return to_app_code(detected)

    async def transliterate_text(self, text: str, language: str) -> str:
        """Romanizes ``text``. Unsupported languages return the input unchanged."""
        mapping = _TRANSLITERATION.get(language.lower())
        if mapping is None:
            return text

        lang, from_script, to_script = mapping
        data = await self._request(
            "POST",
            "/transliterate",
            {"language": lang, "fromScript": from_script, "toScript": to_script},
            [{"Text": text}],
        )
        try:
            return data[0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise TranslatorError("Unexpected transliteration response format") from e

    async def translate_with_transliteration(
        self,
        text: str,
        from_language: str,
        to_language: str,
    ) -> TranslationResult:
        if not text:
            return TranslationResult(translation="")

        translation = await self.translate_text(text, from_language, to_language)

        transliteration = ""
        if supports_transliteration(to_language):
            try:
                transliteration = await self.transliterate_text(translation, to_language)
            except TranslatorError:
                # 번역은 성공했으므로 로마자 표기 실패는 무시
                logger.warning("Transliteration failed but translation succeeded", exc_info=True)

        return TranslationResult(translation=translation, transliteration=transliteration)

    async def get_supported_languages(self) -> dict[str, str]:
        try:
            data = await self._request("GET", "/languages", {"scope": "translation"})
        except TranslatorError:
            logger.warning("Failed to get supported languages", exc_info=True)
            return {}
        return {code: info.get("name", code) for code, info in data.get("translation", {}).items()}


def _error_message(response: httpx.Response) -> str:
    try:
        message = response.json().get("error", {}).get("message")
    except ValueError:
        message = None
    return f"Microsoft Translator error: {response.status_code} - {message or response.text}"


_translator: MicrosoftTranslator | None = None


def get_translator() -> MicrosoftTranslator:
    global _translator
    if _translator is None:
        _translator = MicrosoftTranslator()
    return _translator
