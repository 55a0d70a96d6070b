"""
Tests for structured logging.
"""

import json
import logging

import pytest

from mojiledger.core.transaction import CREATE_COLLECTION
from mojiledger.logging_config import NO_TRACE, get_logger, setup_logging, trace_id_for


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved = (root.level, root.handlers[:])
    yield root
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]


def test_trace_id_is_public_key_prefix(txn):
    assert trace_id_for(txn.identity_hex) == txn.identity_hex[:16]
    assert trace_id_for("") == NO_TRACE


def test_call_site_extra_kept_with_bound_context(caplog):
    log = get_logger("mojiledger.tests.ctx", trace_id="abc", action=CREATE_COLLECTION)

    with caplog.at_level(logging.INFO, logger="mojiledger.tests.ctx"):
        log.info("Collection written", extra={"address": "a1"})

    record = caplog.records[-1]
    assert (record.trace_id, record.action, record.address) == ("abc", CREATE_COLLECTION, "a1")


def test_applied_transition_is_logged_with_counts(caplog, handler, store, txn):
    with caplog.at_level(logging.INFO, logger="mojiledger.processor.handler"):
        handler.apply(txn, store)

    record = next(r for r in caplog.records if r.getMessage() == f"Applied {CREATE_COLLECTION}")
    assert record.trace_id == trace_id_for(txn.identity_hex)
    assert record.written == 4


def test_json_format_to_stderr(root_logger, capsys):
    setup_logging(level="DEBUG", log_format="json")

    get_logger("mojiledger.tests.json", trace_id="abc").info("hello", extra={"address": "a1"})
    logging.getLogger("mojiledger.tests.plain").warning("no adapter")

    captured = capsys.readouterr()
    assert captured.out == ""
    first, second = [json.loads(line) for line in captured.err.splitlines()]
    assert first["level"] == "INFO"
    assert first["logger"] == "mojiledger.tests.json"
    assert (first["message"], first["trace_id"], first["address"]) == ("hello", "abc", "a1")
    assert second["trace_id"] == NO_TRACE


def test_unknown_level_falls_back_to_info(root_logger):
    setup_logging(level="chatty", log_format="text")

    assert root_logger.level == logging.INFO
