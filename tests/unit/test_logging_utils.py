"""
test_logging_utils.py - Tests for the document context in log records
"""

import logging

from importer.orchestrator import log_config
from importer.utilities.logging_utils import ContextFilter, _log_context


def _record():
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)


def test_context_filter_injects_doc_id():
    _log_context.doc_id = "doc-42"
    try:
        record = _record()
        assert ContextFilter().filter(record) is True
        assert record.doc_id == "doc-42"
    finally:
        _log_context.doc_id = None


def test_context_filter_defaults_when_unset():
    _log_context.doc_id = None
    record = _record()

    ContextFilter().filter(record)

    assert record.doc_id == "N/A"


def test_setup_logging_writes_to_log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        log_config.setup_logging()
        logging.getLogger("importer.test").info("hello from test")
        for handler in root.handlers:
            handler.flush()

        content = (tmp_path / "logs" / "importer.log").read_text(encoding="utf-8")
        assert "hello from test" in content
        assert "[MainProcess:" in content
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
