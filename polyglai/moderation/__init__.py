"""Content moderation for learner-submitted text.

Provides:
- Tagged lexicon + threat patterns (lexicon)
- Whole-word / pattern classifier (classifier)
- Validation gate returning ValidationResult (gate)
- Background usage recorder for detected violations (recorder)
- Admin aggregations over recorded violations (stats)
"""

from polyglai.moderation.classifier import ContentClassifier, Detection
from polyglai.moderation.gate import ContentValidator, content_validator, validate_content
from polyglai.moderation.lexicon import Lexicon, default_lexicon
from polyglai.moderation.recorder import UsageRecorder

__all__ = [
    "ContentClassifier",
    "ContentValidator",
    "Detection",
    "Lexicon",
    "UsageRecorder",
    "content_validator",
    "default_lexicon",
    "validate_content",
]
