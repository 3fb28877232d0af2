"""External translation collaborators."""

from polyglai.translator.microsoft import MicrosoftTranslator, TranslationResult, TranslatorError

__all__ = ["MicrosoftTranslator", "TranslationResult", "TranslatorError"]
