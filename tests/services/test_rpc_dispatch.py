"""RPC Dispatch tests — JSON-RPC envelopes for initialize / tools/list / tools/call.

Tests cover:
    - initialize reports a whitelisted protocol version and the profile identity
    - initialize never touches the record store
    - tools/list returns exactly the profile's tools
    - Unknown method and unknown tool -> -32601
    - Malformed envelopes -> -32600; id echoed when readable
    - Tool failures -> -32603 with the failure message verbatim
    - Exactly one of result / error in every response
"""

import pytest

from record_gateway.core.errors import RecordStoreError
from record_gateway.services.rpc_dispatch import negotiate_protocol_version


def _call(rpc_id, name, arguments=None):
    params = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return {"jsonrpc": "2.0", "id": rpc_id, "method": "tools/call", "params": params}


@pytest.mark.parametrize("requested, expected", [
    ("2025-06-18", "2025-06-18"),
    ("2025-03-26", "2025-03-26"),
    ("1999-01-01", "2024-11-05"),
    (None, "2024-11-05"),
    (20250618, "2024-11-05"),
])
def test_negotiate_protocol_version(requested, expected):
    assert negotiate_protocol_version(requested) == expected


async def test_initialize(make_dispatcher, store):
    response = await make_dispatcher("tax-prep").handle({
        "jsonrpc": "2.0", "id": 1, "method": "initialize",
        "params": {"protocolVersion": "2025-06-18", "clientInfo": {"name": "voice"}},
    })
    assert response == {
        "jsonrpc": "2.0",
        "id": 1,
        "result": {
            "protocolVersion": "2025-06-18",
            "capabilities": {"tools": {}},
            "serverInfo": {
                "name": "tax-prep-mcp-server",
                "version": "1.0.0",
                "description": "MCP Server for tax return signature follow-up in Salesforce",
            },
        },
    }
    assert store.queries == []


async def test_initialize_without_params_uses_default_version(make_dispatcher):
    response = await make_dispatcher().handle({"jsonrpc": "2.0", "id": "a", "method": "initialize"})
    assert response["id"] == "a"
    assert response["result"]["protocolVersion"] == "2024-11-05"


async def test_tools_list(make_dispatcher):
    response = await make_dispatcher("diagnostic").handle(
        {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
    )
    assert [t["name"] for t in response["result"]["tools"]] == ["say_hello"]
    assert "error" not in response


async def test_unknown_method(make_dispatcher):
    response = await make_dispatcher().handle({"jsonrpc": "2.0", "id": 3, "method": "resources/list"})
    assert response == {
        "jsonrpc": "2.0", "id": 3,
        "error": {"code": -32601, "message": "Unknown method: resources/list"},
    }


async def test_unknown_tool(make_dispatcher):
    response = await make_dispatcher().handle(_call(4, "drop_tables", {}))
    assert response["error"] == {"code": -32601, "message": "Unknown tool: drop_tables"}
    assert "result" not in response


async def test_tool_call_success(make_dispatcher):
    response = await make_dispatcher("diagnostic").handle(_call(5, "say_hello", {"name": "Ada"}))
    assert response["result"]["content"][0]["text"] == (
        "Hello, Ada! This is a test from the MCP server."
    )


async def test_tool_call_missing_arguments_treated_as_empty(make_dispatcher, store):
    response = await make_dispatcher().handle(_call(6, "get_client_requests"))
    assert response["result"]["content"][0]["text"].startswith("Found 0 client requests:")
    assert len(store.queries) == 1


async def test_tool_call_validation_error(make_dispatcher):
    response = await make_dispatcher().handle(_call(7, "get_client_request_details", {}))
    assert response["error"] == {
        "code": -32603,
        "message": "Missing required argument(s) for get_client_request_details: requestId",
    }


async def test_tool_call_without_name(make_dispatcher):
    response = await make_dispatcher().handle(
        {"jsonrpc": "2.0", "id": 8, "method": "tools/call", "params": {}},
    )
    assert response["error"]["code"] == -32603
    assert response["error"]["message"].startswith("tools/call requires params.name")


async def test_record_store_message_passed_verbatim(make_dispatcher, store):
    store.fail_with = RecordStoreError("INVALID_SESSION_ID: Session expired or invalid", "query", 401)
    response = await make_dispatcher().handle(_call(9, "search_clients", {"searchTerm": "Ann"}))
    assert response["error"] == {
        "code": -32603, "message": "INVALID_SESSION_ID: Session expired or invalid",
    }


async def test_unexpected_exception_becomes_internal_error(make_dispatcher, store):
    store.fail_with = RuntimeError("boom")
    response = await make_dispatcher().handle(_call(10, "search_clients", {"searchTerm": "Ann"}))
    assert response["error"] == {"code": -32603, "message": "boom"}


@pytest.mark.parametrize("payload", [[1, 2], "tools/list", 42, None])
async def test_non_object_body_is_invalid_request(make_dispatcher, payload):
    response = await make_dispatcher().handle(payload)
    assert response["id"] == 0
    assert response["error"]["code"] == -32600


async def test_missing_method_is_invalid_request_with_id_echoed(make_dispatcher):
    response = await make_dispatcher().handle({"jsonrpc": "2.0", "id": 11})
    assert response["id"] == 11
    assert response["error"]["code"] == -32600
    assert response["error"]["message"].startswith("Invalid Request:")


async def test_absent_id_echoed_as_zero(make_dispatcher):
    response = await make_dispatcher().handle({"jsonrpc": "2.0", "method": "tools/list"})
    assert response["id"] == 0
    assert "result" in response
