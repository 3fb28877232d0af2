"""Text extraction for uploaded files (.txt, .rtf, .docx, single-page .pdf).

Extracted text is limited to a short passage; anything longer is rejected
rather than truncated.
"""

from __future__ import annotations

import io
import logging
import re

import fitz  # PyMuPDF
import mammoth

from polyglai.config import settings

logger = logging.getLogger(__name__)

_RTF_UNICODE = re.compile(r"\\u(-?\d+)\??")
_RTF_CONTROL = re.compile(r"\\[a-zA-Z]+-?\d*\s?")
_RTF_PAR = re.compile(r"\\par\b\s?")

_DOCX_CONTENT_TYPES = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/docx",
)


class ExtractionError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _kind(filename: str, content_type: str | None) -> str | None:
    name = (filename or "").lower()
    ctype = (content_type or "").lower()
    if name.endswith(".rtf") or ctype == "application/rtf":
        return "rtf"
    if name.endswith(".docx") or ctype in _DOCX_CONTENT_TYPES:
        return "docx"
    if name.endswith(".txt") or ctype == "text/plain":
        return "txt"
    if name.endswith(".pdf") or ctype == "application/pdf":
        return "pdf"
    return None


def rtf_to_text(rtf: str) -> str:
    """Minimal RTF stripper: decodes \\uN escapes, drops control words and groups."""

    def _unicode(m: re.Match[str]) -> str:
        n = int(m.group(1))
        try:
            return chr(n + 65536 if n < 0 else n)
        except ValueError:
            return ""

    text = _RTF_UNICODE.sub(_unicode, rtf)
    text = _RTF_PAR.sub("\n", text)
    text = text.replace("\\\\", "\x00").replace("\\{", "\x01").replace("\\}", "\x02")
    text = _RTF_CONTROL.sub("", text)
    text = text.replace("{", "").replace("}", "")
    return text.replace("\x00", "\\").replace("\x01", "{").replace("\x02", "}")


def decode_text(data: bytes) -> str:
    """UTF-8 first, latin-1 if the bytes are not valid UTF-8."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _docx_text(data: bytes) -> str:
    try:
        result = mammoth.extract_raw_text(io.BytesIO(data))
    except Exception as e:
        logger.exception("DOCX parse failed")
        raise ExtractionError("Failed to parse DOCX", 500) from e
    return result.value or ""


def _pdf_text(data: bytes) -> str:
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            if doc.page_count > 1:
                raise ExtractionError("PDF has more than 1 page", 413)
            if doc.page_count == 0:
                return ""
            return doc[0].get_text()
    except ExtractionError:
        raise
    except Exception as e:
        logger.exception("PDF parse failed")
        raise ExtractionError("Failed to parse PDF", 500) from e


def extract_text(
    filename: str,
    content_type: str | None,
    data: bytes,
    max_chars: int | None = None,
) -> str:
    max_chars = max_chars or settings.extract_max_chars
    kind = _kind(filename, content_type)

    if kind is None:
        raise ExtractionError("Unsupported file type. Upload .txt, .rtf, .docx or .pdf", 400)

    if kind == "rtf":
        text = rtf_to_text(data.decode("latin-1"))
        label = "RTF text"
    elif kind == "docx":
        text = _docx_text(data)
        label = "DOCX text"
    elif kind == "txt":
        text = decode_text(data)
        label = "Text"
    else:
        text = _pdf_text(data)
        label = "PDF text"

    text = text.strip()
    if not text:
        raise ExtractionError(f"No extractable text in {kind.upper()}", 422)
    if len(text) > max_chars:
        raise ExtractionError(f"{label} exceeds {max_chars} characters", 413)

    logger.info("Extracted %d chars from %s (%s)", len(text), filename, kind)
    return text
