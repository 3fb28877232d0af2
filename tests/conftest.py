"""Test fixtures for the PolyglAI server."""

import datetime
import io
import zipfile
from xml.sax.saxutils import escape

import pytest
from unittest.mock import AsyncMock, MagicMock

from polyglai.moderation.classifier import ContentClassifier
from polyglai.moderation.gate import ContentValidator
from polyglai.moderation.lexicon import Lexicon
from polyglai.types import ContentCategory, UsageRecord


@pytest.fixture
def small_lexicon() -> Lexicon:
    """Tiny lexicon so tests don't depend on the production word list."""
    return Lexicon.build(
        words={
            ContentCategory.PROFANITY: ["darn", "heck"],
            ContentCategory.VIOLENCE: ["smash"],
        },
        patterns=[
            (ContentCategory.VIOLENCE, r"\bsmash\s+you\b"),
        ],
    )


@pytest.fixture
def classifier() -> ContentClassifier:
    """Classifier with the production lexicon."""
    return ContentClassifier()


@pytest.fixture
def mock_recorder() -> MagicMock:
    """Recorder double: dispatch() is a plain (sync) mock."""
    recorder = MagicMock()
    recorder.dispatch = MagicMock(return_value=True)
    recorder.is_running = False
    recorder.pending = 0
    return recorder


@pytest.fixture
def validator(mock_recorder: MagicMock) -> ContentValidator:
    return ContentValidator(recorder=mock_recorder)


@pytest.fixture
def mock_store() -> AsyncMock:
    """ModerationStore double."""
    store = AsyncMock()
    store.insert_record = AsyncMock()
    store.list_records = AsyncMock(return_value=[])
    store.recent_records = AsyncMock(return_value=[])
    store.count_records = AsyncMock(return_value=0)
    store.delete_all_records = AsyncMock()
    return store


def make_record(
    user_id: str,
    when: datetime.datetime,
    language: str = "en",
    context: str = "translation",
    text: str = "some bad words",
) -> UsageRecord:
    return UsageRecord.create(
        user_id=user_id,
        text=text,
        context=context,
        language=language,
        detected_words=["bad"],
        timestamp=when,
    )


@pytest.fixture
def sample_records() -> list[UsageRecord]:
    """Records for 2026-09-30 .. 2026-10-18 plus one outside a 30-day window (newest first)."""
    utc = datetime.timezone.utc
    rows = [
        make_record("user-a", datetime.datetime(2026, 10, 18, 9, 0, tzinfo=utc), language="en"),
        make_record("user-a", datetime.datetime(2026, 10, 11, 9, 0, tzinfo=utc), language="es"),
        make_record("user-b", datetime.datetime(2026, 10, 5, 9, 0, tzinfo=utc), language="ko", context="file_upload"),
        make_record("user-a", datetime.datetime(2026, 10, 4, 9, 0, tzinfo=utc), language="en"),
        make_record("user-b", datetime.datetime(2026, 9, 30, 9, 0, tzinfo=utc), language="ko"),
        make_record("user-c", datetime.datetime(2026, 8, 1, 9, 0, tzinfo=utc), language="ja"),
    ]
    return rows


@pytest.fixture
def record_factory():
    return make_record


_DOCX_CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

_DOCX_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

_DOCX_DOCUMENT_RELS = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships"></Relationships>"""


def make_docx(*paragraphs: str) -> bytes:
    """Minimal WordprocessingML package with one run per paragraph."""
    body = "".join(f"<w:p><w:r><w:t>{escape(p)}</w:t></w:r></w:p>" for p in paragraphs)
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body></w:document>"
    )
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", _DOCX_CONTENT_TYPES)
        zf.writestr("_rels/.rels", _DOCX_RELS)
        zf.writestr("word/_rels/document.xml.rels", _DOCX_DOCUMENT_RELS)
        zf.writestr("word/document.xml", document)
    return buf.getvalue()


@pytest.fixture
def docx_factory():
    return make_docx
