"""Health probe tests."""

from datetime import datetime


async def test_health(client):
    res = await client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["server"] == "client-request-mcp-server"
    datetime.fromisoformat(body["timestamp"])
