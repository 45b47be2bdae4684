"""Error Hierarchy tests — codes, categories, and JSON-RPC mapping.

Tests cover:
    - Unknown method/tool -> -32601 with the name in the message
    - Parse / invalid request -> -32700 / -32600 with prefixed messages
    - Tool-level failures (validation, not found, collaborators) -> -32603
    - Collaborator messages are carried verbatim
"""

from record_gateway.core.errors import (
    ErrorCategory, GatewayError, InvalidRequestError, MessagingError, NotFoundError,
    ParseError, RecordStoreError, ToolValidationError, UnknownMethodError, UnknownToolError,
)


def test_unknown_method_maps_to_method_not_found():
    err = UnknownMethodError("resources/list")
    assert err.to_rpc_error() == {"code": -32601, "message": "Unknown method: resources/list"}


def test_unknown_tool_maps_to_method_not_found():
    err = UnknownToolError("drop_tables")
    assert err.to_rpc_error() == {"code": -32601, "message": "Unknown tool: drop_tables"}


def test_parse_and_invalid_request_codes():
    assert ParseError("Expecting value").to_rpc_error()["code"] == -32700
    assert ParseError("Expecting value").message == "Parse error: Expecting value"
    assert InvalidRequestError("no method").to_rpc_error() == {
        "code": -32600, "message": "Invalid Request: no method",
    }


def test_tool_failures_are_internal_errors():
    errors = [
        ToolValidationError("bad", "field"),
        NotFoundError("Case"),
        RecordStoreError("INVALID_FIELD: No such column", "query", 400),
        MessagingError("550 mailbox unavailable"),
    ]
    assert all(e.rpc_code == -32603 for e in errors)
    assert all(isinstance(e, GatewayError) for e in errors)


def test_not_found_message():
    assert NotFoundError("Client request").message == "Client request not found"


def test_record_store_error_keeps_store_message():
    err = RecordStoreError("INVALID_FIELD: No such column 'Foo__c'", "query", 400)
    assert err.message == "INVALID_FIELD: No such column 'Foo__c'"
    assert err.category is ErrorCategory.RECORD_STORE
    assert err.status_code == 400
