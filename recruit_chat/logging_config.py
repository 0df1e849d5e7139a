"""Centralised logging configuration for the API server.

Usage:
    from logging_config import setup_logging, request_id_var

    # At process startup:
    setup_logging("Server")

    # Per request (done by the middleware in main.py):
    request_id_var.set("3f2a9c1d...")

Modules keep using ``logging.getLogger(__name__)``; the ContextFilter stamps
the role and current request id onto every record.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from contextvars import ContextVar
from pathlib import Path

request_id_var: ContextVar[str] = ContextVar("request_id_var", default="")


class ContextFilter(logging.Filter):
    """Injects ``role`` and ``request_id`` onto each record."""

    def __init__(self, role: str) -> None:
        super().__init__()
        self.role = role

    def filter(self, record: logging.LogRecord) -> bool:
        record.role = self.role  # type: ignore[attr-defined]
        record.request_id = request_id_var.get("")  # type: ignore[attr-defined]
        return True


class ContextFormatter(logging.Formatter):
    """Produces lines like:

    2026-10-19 14:30:00 [Server][INFO] main:80 - Application started
    2026-10-19 14:30:01 [Server][Req 3f2a9c1d][INFO] services.usage:55 - Recorded exchange for token 4 (3/30 used)
    """

    def format(self, record: logging.LogRecord) -> str:
        role = getattr(record, "role", "")
        request_id = getattr(record, "request_id", "")

        parts = [f"[{role}]"] if role else []
        if request_id:
            parts.append(f"[Req {request_id[:8]}]")
        parts.append(f"[{record.levelname}]")

        prefix = "".join(parts)
        timestamp = self.formatTime(record, self.datefmt)
        location = f"{record.name}:{record.lineno}"
        formatted = f"{timestamp} {prefix} {location} - {record.getMessage()}"

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            formatted += "\n" + record.exc_text
        if record.stack_info:
            formatted += "\n" + record.stack_info
        return formatted


STREAM_HANDLER_NAME = "_recruit_chat_stream"
FILE_HANDLER_NAME = "_recruit_chat_file"


def setup_logging(role: str) -> None:
    """Configure the root logger for *role*.

    - Adds a stderr StreamHandler (always).
    - Adds a RotatingFileHandler when ``settings.LOG_FILE`` is set.
    - Tames noisy third-party loggers.
    - Makes uvicorn loggers propagate through root.

    Safe to call multiple times.
    """
    from config import settings

    root = logging.getLogger()

    if any(getattr(h, "name", None) == STREAM_HANDLER_NAME for h in root.handlers):
        return

    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    ctx_filter = ContextFilter(role)
    formatter = ContextFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.name = STREAM_HANDLER_NAME
    stream_handler.addFilter(ctx_filter)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_path),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.name = FILE_HANDLER_NAME
        file_handler.addFilter(ctx_filter)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in ("httpx", "httpcore", "openai", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True
