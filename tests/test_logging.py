"""
Structured logging format.
"""

import logging

from util.logging import StructuredLogger, logger


def test_global_logger_name():
    assert logger.logger.name == "snap_api"


def test_log_operation_format(caplog):
    log = StructuredLogger("snap_api.test")
    with caplog.at_level(logging.INFO, logger="snap_api.test"):
        log.log_operation("index.match", "success", {"identifier": "/images/a.jpg"})

    assert "Operation: index.match, Status: success, Details: {'identifier': '/images/a.jpg'}" in caplog.text


def test_partial_build_logged_as_warning(caplog):
    log = StructuredLogger("snap_api.test")
    with caplog.at_level(logging.INFO, logger="snap_api.test"):
        log.log_index_build(indexed=29, skipped=["/images/b.jpg"], dimension=384, duration_ms=12.5)

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert "partial" in record.getMessage()
    assert "/images/b.jpg" in record.getMessage()


def test_complete_build_logged_as_info(caplog):
    log = StructuredLogger("snap_api.test")
    with caplog.at_level(logging.INFO, logger="snap_api.test"):
        log.log_index_build(indexed=30, skipped=[], dimension=384, duration_ms=12.5)

    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert "'indexed': 30" in record.getMessage()


def test_match_query_is_truncated(caplog):
    log = StructuredLogger("snap_api.test")
    with caplog.at_level(logging.INFO, logger="snap_api.test"):
        log.log_match(["word"] * 40, "/images/a.jpg", 0.123456)

    message = caplog.records[-1].getMessage()
    assert "..." in message
    assert "'score': 0.1235" in message


def test_failed_provider_call_logged_as_error(caplog):
    log = StructuredLogger("snap_api.test")
    with caplog.at_level(logging.INFO, logger="snap_api.test"):
        log.log_provider_call("ollama", "chat", 5.0, status="failed", details={"error": "refused"})

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert "provider.chat" in record.getMessage()
