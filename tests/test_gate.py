"""Validation gate tests."""

from unittest.mock import MagicMock

import pytest

from polyglai.moderation.classifier import ContentClassifier, Detection, DetectionSource
from polyglai.moderation.gate import (
    EMPTY_TEXT_MESSAGE,
    ERROR_MESSAGES,
    TOO_LONG_MESSAGE,
    ContentValidator,
    get_error_message,
    is_text_too_long,
)
from polyglai.types import ContentCategory, ValidationOptions, ValidationReason

NO_RECORD = ValidationOptions(record_profanity=False)


class TestValidateContent:
    def test_clean_text_is_valid(self, validator: ContentValidator):
        result = validator.validate_content("Hello, how are you today?")
        assert result.is_valid
        assert result.reason is None
        assert result.error_message is None
        assert not result.detected_words

    @pytest.mark.parametrize("text", ["", "   ", "\n\t "])
    def test_empty_text(self, validator: ContentValidator, text: str):
        result = validator.validate_content(text)
        assert not result.is_valid
        assert result.reason == ValidationReason.EMPTY
        assert result.error_message == EMPTY_TEXT_MESSAGE

    def test_too_long_regardless_of_content(self, validator: ContentValidator):
        result = validator.validate_content("a" * 10_001)
        assert not result.is_valid
        assert result.reason == ValidationReason.TOO_LONG
        assert result.error_message == TOO_LONG_MESSAGE

    def test_exactly_at_limit_is_checked_normally(self, validator: ContentValidator):
        assert validator.validate_content("a" * 10_000).is_valid

    def test_profanity_scenario(self, validator: ContentValidator):
        result = validator.validate_content("This is a fucking test", NO_RECORD)
        assert not result.is_valid
        assert result.reason == ValidationReason.INAPPROPRIATE_CONTENT
        assert any("fuck" in w for w in result.detected_words)
        assert result.category == ContentCategory.PROFANITY
        assert result.error_message == ERROR_MESSAGES[ContentCategory.PROFANITY]

    @pytest.mark.parametrize("word", ["fuck", "puta", "sibal"])
    def test_standalone_word_blocked(self, validator: ContentValidator, word: str):
        result = validator.validate_content(word, NO_RECORD)
        assert not result.is_valid
        assert word in result.detected_words

    def test_harmful_pattern_blocked(self, validator: ContentValidator):
        result = validator.validate_content("kill yourself", NO_RECORD)
        assert not result.is_valid
        assert result.category == ContentCategory.VIOLENCE
        assert result.error_message == ERROR_MESSAGES[ContentCategory.VIOLENCE]

    def test_word_inside_longer_word_passes(self, validator: ContentValidator):
        assert validator.validate_content("let the storm diedown", NO_RECORD).is_valid

    @pytest.mark.parametrize(
        "text,category",
        [
            ("I will kill you, you bastard", ContentCategory.VIOLENCE),
            ("there is a bomb", ContentCategory.TERRORISM),
            ("racism is wrong", ContentCategory.HATE_SPEECH),
            ("selling cocaine", ContentCategory.DRUGS),
            ("watch porn", ContentCategory.SEXUAL),
            ("you are worthless", ContentCategory.PROFANITY),
        ],
    )
    def test_message_follows_category_priority(self, validator: ContentValidator, text, category):
        result = validator.validate_content(text, NO_RECORD)
        assert result.category == category
        assert result.error_message == ERROR_MESSAGES[category]

    def test_idempotent_without_recording(self, validator: ContentValidator):
        first = validator.validate_content("go to hell you bastard", NO_RECORD)
        second = validator.validate_content("go to hell you bastard", NO_RECORD)
        assert first == second

    def test_disabled_validator_only_checks_length(self):
        v = ContentValidator(enabled=False)
        assert v.validate_content("fuck").is_valid
        assert v.validate_content("").reason == ValidationReason.EMPTY

    def test_length_counts_code_points(self, validator: ContentValidator):
        emoji = "\U0001F600"
        assert validator.validate_content(emoji * 10_000, NO_RECORD).is_valid
        assert validator.validate_content(emoji * 10_001, NO_RECORD).reason == ValidationReason.TOO_LONG

    def test_custom_max_length(self):
        v = ContentValidator(classifier=ContentClassifier(), max_length=5)
        assert v.validate_content("hello!").reason == ValidationReason.TOO_LONG


class TestRecordingDispatch:
    def test_violation_dispatches_record(self, validator: ContentValidator, mock_recorder: MagicMock):
        opts = ValidationOptions(context="web_test", language="en", user_id="user-1")
        result = validator.validate_content("This is a fucking test", opts)

        mock_recorder.dispatch.assert_called_once_with(
            text="This is a fucking test",
            context="web_test",
            language="en",
            detected_words=result.detected_words,
            user_id="user-1",
        )

    def test_default_options_record(self, validator: ContentValidator, mock_recorder: MagicMock):
        validator.validate_content("puta")
        kwargs = mock_recorder.dispatch.call_args.kwargs
        assert kwargs["context"] == "translation"
        assert kwargs["language"] == "unknown"

    def test_record_profanity_false_skips_recorder(self, validator: ContentValidator, mock_recorder: MagicMock):
        result = validator.validate_content("puta", NO_RECORD)
        assert not result.is_valid
        mock_recorder.dispatch.assert_not_called()

    def test_clean_text_not_recorded(self, validator: ContentValidator, mock_recorder: MagicMock):
        validator.validate_content("Good morning, have a nice day!")
        mock_recorder.dispatch.assert_not_called()

    def test_recorder_error_does_not_change_result(self, validator: ContentValidator, mock_recorder: MagicMock):
        mock_recorder.dispatch.side_effect = RuntimeError("queue broken")
        result = validator.validate_content("puta")
        assert not result.is_valid
        assert result.reason == ValidationReason.INAPPROPRIATE_CONTENT

    def test_no_recorder_configured(self):
        v = ContentValidator(recorder=None)
        assert not v.validate_content("puta").is_valid


class TestHelpers:
    def test_is_text_too_long(self):
        assert is_text_too_long("abc", max_length=2)
        assert not is_text_too_long("abc", max_length=3)

    def test_get_error_message_picks_highest_priority(self):
        detections = [
            Detection("weed", ContentCategory.DRUGS, DetectionSource.LEXICON),
            Detection("nazi", ContentCategory.HATE_SPEECH, DetectionSource.LEXICON),
        ]
        assert get_error_message(detections) == ERROR_MESSAGES[ContentCategory.HATE_SPEECH]

    def test_get_error_message_fallback(self):
        assert get_error_message([]) == ERROR_MESSAGES[ContentCategory.PROFANITY]

    def test_validate_message_matches_detections(self, validator: ContentValidator, classifier: ContentClassifier):
        text = "selling cocaine to nazi"
        result = validator.validate_content(text, NO_RECORD)
        assert result.error_message == get_error_message(classifier.detect(text))
        assert result.error_message == ERROR_MESSAGES[ContentCategory.HATE_SPEECH]
