"""Structured Logging — verifies JSON output and handler setup."""

import json
import logging
import sys

import pytest

from reviewer_service.infrastructure.observability import (
    JSONFormatter, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "reviewer_service.services", logging.INFO, __file__, 1,
        "Pull request merged", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_line_has_core_fields():
    entry = json.loads(JSONFormatter().format(_record()))

    assert entry["level"] == "INFO"
    assert entry["logger"] == "reviewer_service.services"
    assert entry["message"] == "Pull request merged"
    assert entry["timestamp"].endswith("+00:00")


def test_identifier_extras_are_surfaced():
    entry = json.loads(JSONFormatter().format(
        _record(pull_request_id="pr-1", replaced_by="u4", user_id=None),
    ))

    assert entry["pull_request_id"] == "pr-1"
    assert entry["replaced_by"] == "u4"
    assert "user_id" not in entry


def test_unknown_extras_are_ignored():
    entry = json.loads(JSONFormatter().format(_record(secret="x")))
    assert "secret" not in entry


def test_exception_is_formatted():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record()
        record.exc_info = sys.exc_info()

    entry = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in entry["exception"]


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_is_idempotent(restore_root_logger):
    setup_logging("DEBUG", "json")
    setup_logging("WARNING", "text")

    root = restore_root_logger
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0].formatter, JSONFormatter)
    assert root.level == logging.WARNING


def test_setup_logging_unknown_level_falls_back_to_info(restore_root_logger):
    setup_logging("chatty", "json")

    assert restore_root_logger.level == logging.INFO
    assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)
