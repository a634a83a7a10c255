"""Tests for structured logging setup."""

import json
import sys
import logging

from knowledge_ingest import setup_logging
from knowledge_ingest.utils.logging import JSONFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("knowledge_ingest.test", logging.INFO, __file__, 10, "Stored %d chunks", (3,), None)
    record.owner_id = "agent-1"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Stored 3 chunks"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "knowledge_ingest.test"
    assert payload["owner_id"] == "agent-1"


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad input")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    payload = json.loads(JSONFormatter().format(record))

    assert "ValueError: bad input" in payload["exception"]


def test_setup_logging_does_not_stack_handlers():
    logger = setup_logging("knowledge_ingest.tests.setup", level=logging.DEBUG)
    setup_logging("knowledge_ingest.tests.setup", level=logging.DEBUG)

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert isinstance(logger.handlers[0].formatter, JSONFormatter)


def test_setup_logging_plain_text():
    logger = setup_logging("knowledge_ingest.tests.plain", json_format=False)

    assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
