"""Rule-based content classifier.

Decides whether a block of text contains disallowed content using
whole-word lexicon matching plus phrase-level threat patterns. No stemming,
no fuzzy matching, no language-specific tokenization.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from polyglai.moderation.lexicon import Lexicon, default_lexicon, highest_priority
from polyglai.types import ContentCategory

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


class DetectionSource(str, Enum):
    LEXICON = "lexicon"
    PATTERN = "pattern"


@dataclass(frozen=True)
class Detection:
    term: str
    category: ContentCategory
    source: DetectionSource


@dataclass
class ClassificationResult:
    detections: list[Detection] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return len(self.detections) == 0

    @property
    def detected_words(self) -> list[str]:
        return [d.term for d in self.detections]

    @property
    def categories(self) -> set[ContentCategory]:
        return {d.category for d in self.detections}

    @property
    def top_category(self) -> ContentCategory | None:
        """Highest-priority category among the detections."""
        return highest_priority(self.categories)


def normalize_text(text: str) -> str:
    """Lowercases, drops punctuation and collapses whitespace."""
    text = _NON_WORD.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


class ContentClassifier:
    """Lexicon + pattern matcher over normalized text."""

    def __init__(self, lexicon: Lexicon | None = None):
        self._lexicon = lexicon if lexicon is not None else default_lexicon()
        self._word_patterns = [
            (word, category, re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE))
            for word, category in self._lexicon.words
        ]

    @property
    def lexicon(self) -> Lexicon:
        return self._lexicon

    def classify(self, text: str) -> ClassificationResult:
        """Runs every lexicon term, then every pattern, and collects the hits.

        Lexicon hits come first in lexicon order, pattern hits after them in
        pattern order. Overlapping hits are kept as-is.
        """
        result = ClassificationResult()
        if not text or not text.strip():
            return result

        normalized = normalize_text(text)

        for word, category, regex in self._word_patterns:
            if regex.search(normalized):
                result.detections.append(
                    Detection(term=word, category=category, source=DetectionSource.LEXICON)
                )

        for pattern in self._lexicon.patterns:
            m = pattern.regex.search(normalized)
            if m:
                result.detections.append(
                    Detection(term=m.group(0), category=pattern.category, source=DetectionSource.PATTERN)
                )

        return result

    def detect(self, text: str) -> list[Detection]:
        return self.classify(text).detections

    def contains_profanity(self, text: str) -> bool:
        if not text or not text.strip():
            return False

        normalized = normalize_text(text)
        if any(regex.search(normalized) for _, _, regex in self._word_patterns):
            return True
        return any(p.regex.search(normalized) for p in self._lexicon.patterns)

    def get_detected_profanity(self, text: str) -> list[str]:
        return self.classify(text).detected_words
