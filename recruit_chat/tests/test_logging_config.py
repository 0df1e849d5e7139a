"""Tests for the logging configuration."""

from __future__ import annotations

import logging

import pytest

from logging_config import FILE_HANDLER_NAME, STREAM_HANDLER_NAME


@pytest.fixture(autouse=True)
def _clean_root_logger():
    """Remove any handlers we add during tests so they don't leak."""
    root = logging.getLogger()
    before = list(root.handlers)
    root.handlers = [h for h in before if getattr(h, "name", None) not in (STREAM_HANDLER_NAME, FILE_HANDLER_NAME)]
    yield
    root.handlers = before


# ── ContextFilter tests ────────────────────────────────────────────────────


def test_context_filter_stamps_role():
    from logging_config import ContextFilter

    f = ContextFilter("Server")
    record = logging.LogRecord("test", logging.INFO, "", 0, "msg", (), None)
    f.filter(record)
    assert record.role == "Server"  # type: ignore[attr-defined]
    assert record.request_id == ""  # type: ignore[attr-defined]


def test_context_filter_reads_request_id():
    from logging_config import ContextFilter, request_id_var

    f = ContextFilter("Server")
    token = request_id_var.set("req-abc")
    try:
        record = logging.LogRecord("test", logging.INFO, "", 0, "msg", (), None)
        f.filter(record)
        assert record.request_id == "req-abc"  # type: ignore[attr-defined]
    finally:
        request_id_var.reset(token)


def test_context_filter_always_returns_true():
    from logging_config import ContextFilter

    record = logging.LogRecord("test", logging.DEBUG, "", 0, "msg", (), None)
    assert ContextFilter("X").filter(record) is True


# ── ContextFormatter tests ─────────────────────────────────────────────────


def test_formatter_without_request():
    from logging_config import ContextFormatter

    fmt = ContextFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    record = logging.LogRecord("services.usage", logging.INFO, "", 42, "hello", (), None)
    record.role = "Server"  # type: ignore[attr-defined]
    record.request_id = ""  # type: ignore[attr-defined]

    line = fmt.format(record)
    assert "[Server]" in line
    assert "[INFO]" in line
    assert "services.usage:42" in line
    assert "hello" in line
    assert "[Req" not in line


def test_formatter_truncates_request_id():
    from logging_config import ContextFormatter

    fmt = ContextFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    record = logging.LogRecord("api.chat", logging.WARNING, "", 7, "slow", (), None)
    record.role = "Server"  # type: ignore[attr-defined]
    record.request_id = "3f2a9c1d0b7e4a55"  # type: ignore[attr-defined]

    line = fmt.format(record)
    assert "[Req 3f2a9c1d]" in line
    assert "[WARNING]" in line


def test_formatter_includes_exception():
    from logging_config import ContextFormatter

    fmt = ContextFormatter(datefmt="%Y-%m-%d %H:%M:%S")
    try:
        raise ValueError("boom")
    except ValueError:
        import sys
        exc_info = sys.exc_info()

    record = logging.LogRecord("test", logging.ERROR, "", 1, "failed", (), exc_info)
    record.role = "Server"  # type: ignore[attr-defined]
    record.request_id = ""  # type: ignore[attr-defined]

    line = fmt.format(record)
    assert "failed" in line
    assert "ValueError: boom" in line


# ── setup_logging tests ───────────────────────────────────────────────────


def test_setup_logging_adds_stream_handler(monkeypatch, _settings):
    from logging_config import setup_logging

    monkeypatch.setattr(_settings, "LOG_FILE", "")
    setup_logging("Server")

    handler_names = [getattr(h, "name", None) for h in logging.getLogger().handlers]
    assert STREAM_HANDLER_NAME in handler_names
    assert FILE_HANDLER_NAME not in handler_names


def test_setup_logging_idempotent(monkeypatch, _settings):
    from logging_config import setup_logging

    monkeypatch.setattr(_settings, "LOG_FILE", "")
    root = logging.getLogger()
    setup_logging("Server")
    count_before = len(root.handlers)
    setup_logging("Server")
    assert len(root.handlers) == count_before


def test_setup_logging_file_handler(monkeypatch, tmp_path, _settings):
    from logging_config import setup_logging

    log_file = tmp_path / "logs" / "server.log"
    monkeypatch.setattr(_settings, "LOG_FILE", str(log_file))

    setup_logging("Server")
    handler_names = [getattr(h, "name", None) for h in logging.getLogger().handlers]
    assert FILE_HANDLER_NAME in handler_names

    logging.getLogger("test.file_handler").warning("file handler test message")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "file handler test message" in log_file.read_text()


def test_setup_logging_tames_noisy_loggers(monkeypatch, _settings):
    from logging_config import setup_logging

    monkeypatch.setattr(_settings, "LOG_FILE", "")
    setup_logging("Server")

    for name in ("httpx", "httpcore", "openai", "urllib3"):
        assert logging.getLogger(name).level >= logging.WARNING


def test_setup_logging_configures_uvicorn_propagation(monkeypatch, _settings):
    from logging_config import setup_logging

    monkeypatch.setattr(_settings, "LOG_FILE", "")
    setup_logging("Server")

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        assert logging.getLogger(name).propagate is True
