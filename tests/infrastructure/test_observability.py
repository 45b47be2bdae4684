"""Structured Logging tests — JSONFormatter output shape.

Tests cover:
    - Base keys always present
    - Gateway extras surfaced only when set
"""

import json
import logging

from record_gateway.infrastructure.observability import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("record_gateway.test", logging.INFO, __file__, 1, "hello", None, None)
    record.__dict__.update(extra)
    return record


def test_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "INFO"
    assert log["logger"] == "record_gateway.test"
    assert log["message"] == "hello"
    assert "timestamp" in log
    assert "tool_name" not in log


def test_gateway_extras():
    log = json.loads(JSONFormatter().format(
        _record(rpc_method="tools/call", tool_name="search_clients", rpc_id=7, duration_ms=1.5),
    ))
    assert log["rpc_method"] == "tools/call"
    assert log["tool_name"] == "search_clients"
    assert log["rpc_id"] == 7
    assert log["duration_ms"] == 1.5


def test_debug_info_extra():
    log = json.loads(JSONFormatter().format(
        _record(error_code="RECORD_STORE_ERROR", debug_info={"query": "SELECT Id FROM Account"}),
    ))
    assert log["debug_info"] == {"query": "SELECT Id FROM Account"}
