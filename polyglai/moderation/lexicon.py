"""Disallowed-content lexicon and threat patterns.

Every term and pattern is tagged with a ContentCategory when it is defined,
so the validation gate can pick a user-facing message from the categories
that actually matched instead of re-scanning the detected words.

Non-Latin languages are covered by romanized entries only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from polyglai.types import ContentCategory

# Message selection order: the first category present wins.
CATEGORY_PRIORITY: tuple[ContentCategory, ...] = (
    ContentCategory.VIOLENCE,
    ContentCategory.TERRORISM,
    ContentCategory.HATE_SPEECH,
    ContentCategory.DRUGS,
    ContentCategory.SEXUAL,
    ContentCategory.PROFANITY,
)


def highest_priority(categories) -> ContentCategory | None:
    """First category of CATEGORY_PRIORITY present in ``categories``."""
    present = set(categories)
    for category in CATEGORY_PRIORITY:
        if category in present:
            return category
    return None


# --- Profanity per language (generic insults) ---

PROFANITY_WORDS: dict[str, list[str]] = {
    "en": [
        "fuck", "fucking", "shit", "damn", "bitch", "asshole", "bastard",
        "crap", "piss", "motherfucker", "cocksucker", "whore", "slut",
        "cunt", "dick", "pussy", "retard",
    ],
    "es": [
        "puta", "mierda", "joder", "cabrón", "coño", "gilipollas",
        "hijo de puta", "mamada", "pendejo", "chingar", "verga", "culero",
        "pinche", "marica", "estúpido", "idiota",
    ],
    "zh": [
        "cao", "ma de", "sha bi", "ben dan", "hun dan", "wang ba dan",
        "ta ma de", "ni ma",
    ],
    "ja": [
        "kuso", "chikushou", "baka", "aho", "kisama", "teme", "yarou",
        "fuzakeru", "urusai",
    ],
    "ko": [
        "sibal", "ssibal", "gaesaekki", "jotgat", "byeongsin", "michin",
        "nappeun",
    ],
}


# --- Harmful vocabulary by category (all languages) ---

CATEGORY_WORDS: dict[ContentCategory, list[str]] = {
    ContentCategory.VIOLENCE: [
        "kill yourself", "kys", "suicide", "die", "murder", "rape",
        "violence", "harm", "abuse", "torture", "kill", "death", "blood",
        "gore", "mutilate", "destroy", "assault", "fight",
        "matar", "asesinar", "violación", "violencia", "daño", "abuso",
        "tortura", "muerte", "sangre", "destruir", "atacar", "agredir",
        "luchar",
        "qu si", "si", "sha",         # zh: go die, die, kill
        "shine", "koroshi", "shi",    # ja: die, killing, death
        "jugeo", "jukda",             # ko: die
    ],
    ContentCategory.TERRORISM: [
        "terrorist", "bomb", "weapon", "attack", "terrorista",
        "kong bu", "bao zha", "wu qi",  # zh: terror, explode, weapon
        "tero", "bakudan", "buki",      # ja: terror, bomb, weapon
        "poktan", "mugi",               # ko: bomb, weapon
    ],
    ContentCategory.HATE_SPEECH: [
        "nazi", "hitler", "nigger", "faggot",
        "hate", "racism", "discrimination", "supremacy", "genocide",
        "ethnic cleansing",
        "odio", "racismo", "discriminación", "supremacía", "genocidio",
    ],
    ContentCategory.DRUGS: [
        "cocaine", "heroin", "meth", "drugs", "marijuana", "weed", "pot",
        "cocaína", "heroína", "metanfetamina", "drogas", "marihuana",
    ],
    ContentCategory.SEXUAL: [
        "porn", "pornography", "sex", "sexual", "nude", "naked", "breast",
        "penis", "vagina", "masturbate", "orgasm", "erotic",
        "porno", "pornografía", "sexo", "desnudo", "seno", "masturbar",
        "orgasmo", "erótico",
    ],
}


# --- Phrase-level threat patterns ---
# Applied to normalized (lowercased, punctuation-free) text.

THREAT_PATTERNS: list[tuple[ContentCategory, str]] = [
    # Threats
    (ContentCategory.VIOLENCE, r"\b(kill|murder|die|death)\s+(you|yourself|him|her|them)\b"),
    (ContentCategory.VIOLENCE, r"\b(go\s+)?kill\s+yourself\b"),
    (ContentCategory.VIOLENCE, r"\bkys\b"),
    (ContentCategory.VIOLENCE, r"\b(i\s+will|gonna|going\s+to)\s+(kill|murder|hurt)\b"),
    # Hate speech
    (
        ContentCategory.HATE_SPEECH,
        r"\b(all\s+)?(jews|muslims|christians|blacks|whites|asians|latinos|hispanics)"
        r"\s+(are|should)\s+(die|burn|suffer)\b",
    ),
    (ContentCategory.HATE_SPEECH, r"\b(hitler\s+was\s+right|nazi\s+germany|white\s+power|black\s+people\s+are)\b"),
    # Self-harm
    (ContentCategory.VIOLENCE, r"\b(cut\s+yourself|harm\s+yourself|hurt\s+yourself)\b"),
    (ContentCategory.VIOLENCE, r"\b(commit\s+suicide|end\s+your\s+life)\b"),
    # Bullying
    (ContentCategory.PROFANITY, r"\b(you\s+are\s+)?(worthless|useless|stupid|retarded|ugly|fat|disgusting)\b"),
    (ContentCategory.PROFANITY, r"\b(nobody\s+likes\s+you|everyone\s+hates\s+you)\b"),
    # Terrorism / weapons
    (ContentCategory.TERRORISM, r"\b(bomb|terrorist|attack|explosion|weapon|gun|knife)\b"),
    (ContentCategory.TERRORISM, r"\b(make\s+a\s+bomb|build\s+a\s+weapon|plan\s+an\s+attack)\b"),
]


@dataclass(frozen=True)
class ThreatPattern:
    category: ContentCategory
    regex: re.Pattern[str]


@dataclass(frozen=True)
class Lexicon:
    """Immutable set of tagged terms and patterns used by the classifier."""

    words: tuple[tuple[str, ContentCategory], ...]
    patterns: tuple[ThreatPattern, ...] = ()

    @classmethod
    def build(
        cls,
        words: dict[ContentCategory, list[str]] | None = None,
        patterns: list[tuple[ContentCategory, str]] | None = None,
    ) -> "Lexicon":
        """Builds a lexicon from category-tagged word lists and regex sources.

        Terms are lowercased; a term listed twice keeps its first category.
        """
        seen: set[str] = set()
        tagged: list[tuple[str, ContentCategory]] = []
        for category, terms in (words or {}).items():
            for term in terms:
                term = term.lower()
                if term in seen:
                    continue
                seen.add(term)
                tagged.append((term, category))

        compiled = tuple(
            ThreatPattern(category=category, regex=re.compile(source, re.IGNORECASE))
            for category, source in (patterns or [])
        )
        return cls(words=tuple(tagged), patterns=compiled)

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and any(w == term.lower() for w, _ in self.words)

    def category_of(self, term: str) -> ContentCategory | None:
        term = term.lower()
        for word, category in self.words:
            if word == term:
                return category
        return None


def get_profanity_words(language: str) -> list[str]:
    """Returns the generic profanity list for one language code."""
    return PROFANITY_WORDS.get(language, [])


def default_lexicon() -> Lexicon:
    """Production lexicon: per-language profanity first, then category vocabularies."""
    profanity = [word for words in PROFANITY_WORDS.values() for word in words]
    words: dict[ContentCategory, list[str]] = {ContentCategory.PROFANITY: profanity}
    for category, terms in CATEGORY_WORDS.items():
        words[category] = terms
    return Lexicon.build(words=words, patterns=THREAT_PATTERNS)
