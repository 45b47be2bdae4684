"""JSON-RPC endpoint tests — HTTP-level behavior of POST /.

Tests cover:
    - Every response is HTTP 200 with a JSON-RPC envelope
    - Undecodable body -> -32700 with id 0
    - Non-object JSON -> -32600
    - tools/call end-to-end through the fakes
    - OPTIONS on any path -> 200, empty body, including CORS preflights
    - CORS headers present for cross-origin requests
"""

from record_gateway.core.errors import RecordStoreError


async def test_initialize_over_http(client):
    res = await client.post("/", json={
        "jsonrpc": "2.0", "id": 1, "method": "initialize",
        "params": {"protocolVersion": "2025-03-26"},
    })
    assert res.status_code == 200
    body = res.json()
    assert body["result"]["protocolVersion"] == "2025-03-26"
    assert body["result"]["serverInfo"]["name"] == "client-request-mcp-server"


async def test_parse_error(client):
    res = await client.post(
        "/", content=b"{not json", headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == 0
    assert body["error"]["code"] == -32700
    assert body["error"]["message"].startswith("Parse error:")
    assert "result" not in body


async def test_empty_body_is_parse_error(client):
    res = await client.post("/", content=b"")
    assert res.json()["error"]["code"] == -32700


async def test_array_body_is_invalid_request(client):
    res = await client.post("/", json=[{"jsonrpc": "2.0", "id": 1, "method": "tools/list"}])
    assert res.status_code == 200
    assert res.json()["error"]["code"] == -32600


async def test_tools_call_over_http(client_for, store):
    store.on_query("FROM Account", [{"Id": "001000000000001", "Name": "Ann Lee"}])
    client = await client_for("client-requests")
    res = await client.post("/", json={
        "jsonrpc": "2.0", "id": "req-1", "method": "tools/call",
        "params": {"name": "search_clients", "arguments": {"searchTerm": "Ann", "limit": "5"}},
    })
    body = res.json()
    assert body["id"] == "req-1"
    assert body["result"]["content"][0]["text"].startswith("Found 1 matching clients:")
    assert store.queries[0].endswith("LIMIT 5")


async def test_tool_failure_over_http(client, store):
    store.fail_with = RecordStoreError("INVALID_SESSION_ID: Session expired or invalid", "query", 401)
    res = await client.post("/", json={
        "jsonrpc": "2.0", "id": 2, "method": "tools/call",
        "params": {"name": "search_clients", "arguments": {"searchTerm": "Ann"}},
    })
    assert res.status_code == 200
    assert res.json()["error"] == {
        "code": -32603, "message": "INVALID_SESSION_ID: Session expired or invalid",
    }


async def test_diagnostic_profile_hides_other_tools(client_for):
    client = await client_for("diagnostic")
    res = await client.post("/", json={"jsonrpc": "2.0", "id": 3, "method": "tools/list"})
    assert [t["name"] for t in res.json()["result"]["tools"]] == ["say_hello"]


async def test_options_any_path(client):
    res = await client.options("/anything/here")
    assert res.status_code == 200
    assert res.content == b""


async def test_cors_preflight_has_empty_body(client):
    res = await client.options("/", headers={
        "Origin": "https://agent.example.com",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "content-type",
    })
    assert res.status_code == 200
    assert res.content == b""
    assert res.headers["access-control-allow-origin"] == "*"
    assert "POST" in res.headers["access-control-allow-methods"]
    assert res.headers["access-control-allow-headers"] == "content-type"


async def test_cors_headers(client):
    res = await client.post(
        "/", json={"jsonrpc": "2.0", "id": 4, "method": "tools/list"},
        headers={"Origin": "https://agent.example.com"},
    )
    assert res.headers["access-control-allow-origin"] == "*"
