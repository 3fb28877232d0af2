"""Structured logging configuration for the PolyglAI moderation server.

Cloud Run → JSON stdout (Cloud Logging auto-parsed by severity)
Local     → Color console + RotatingFileHandler (polyglai.log + error.log)

Moderation fields passed through ``extra=`` (user_id, context, language)
are copied into the JSON payload so violations can be filtered in Cloud
Logging without parsing the message text.
"""

import json
import logging
import os
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

_CONTEXT_FIELDS = ("user_id", "context", "language", "detected_count")


class CloudRunJsonFormatter(logging.Formatter):
    """Google Cloud Logging compatible JSON formatter.

    Outputs one JSON object per line; ``severity`` is the Python level name,
    which Cloud Logging accepts as-is.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = "".join(traceback.format_exception(*record.exc_info))
        return json.dumps(payload, ensure_ascii=False, default=str)


class ColorConsoleFormatter(logging.Formatter):
    """ANSI color console formatter for local development."""

    _COLORS = {
        "DEBUG": "\033[36m",     # cyan
        "INFO": "\033[32m",      # green
        "WARNING": "\033[33m",   # yellow
        "ERROR": "\033[31m",     # red
        "CRITICAL": "\033[1;31m",  # bold red
    }
    _RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self._COLORS.get(record.levelname, self._RESET)
        timestamp = self.formatTime(record, self.datefmt)
        base = f"{timestamp} {color}[{record.levelname}]{self._RESET} {record.name}: {record.getMessage()}"
        context = getattr(record, "context", None)
        if context:
            base += f" (context={context})"
        if record.exc_info and record.exc_info[1] is not None:
            base += "\n" + "".join(traceback.format_exception(*record.exc_info))
        return base


def _rotating_handler(path: Path, max_bytes: int, backup_count: int, level: int | None = None) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    if level is not None:
        handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    return handler


def setup_logging(
    *,
    log_level: str = "INFO",
    log_dir: str = "logs",
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
) -> None:
    """Configure root logger based on environment.

    Cloud Run detection: ``K_SERVICE`` env var is set automatically by Cloud Run.
    """
    is_cloud_run = "K_SERVICE" in os.environ
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if is_cloud_run:
        handler = logging.StreamHandler()
        handler.setFormatter(CloudRunJsonFormatter())
        root.addHandler(handler)
    else:
        console = logging.StreamHandler()
        console.setFormatter(ColorConsoleFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(console)

        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        root.addHandler(_rotating_handler(log_path / "polyglai.log", max_bytes, backup_count))
        root.addHandler(_rotating_handler(log_path / "error.log", max_bytes, backup_count, logging.ERROR))

    # uvicorn / httpx 로그도 root formatter를 사용
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True
    logging.getLogger("httpx").setLevel(logging.WARNING)
