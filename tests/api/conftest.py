"""API test fixtures — FastAPI test client with the dispatcher dependency overridden.

Invariants:
    - get_rpc_dispatcher overridden with a dispatcher wired to in-memory fakes
    - The lifespan never runs (ASGITransport sends no lifespan events), so no
      record-store client is ever created

Design Decisions:
    - Profile selected per test through the client_for factory
"""

import pytest
from httpx import ASGITransport, AsyncClient

from record_gateway.api.routes.rpc import get_rpc_dispatcher
from record_gateway.main import app
from record_gateway.services.rpc_dispatch import RpcDispatcher
from record_gateway.services.tool_dispatch import ToolDispatch
from record_gateway.services.tools_registry import get_profile


@pytest.fixture
async def client_for(store, messenger):
    """Factory: FastAPI test client serving the given profile."""
    clients = []

    async def _make(profile_name: str = "client-requests") -> AsyncClient:
        profile = get_profile(profile_name)
        dispatcher = RpcDispatcher(profile, ToolDispatch(profile, store, messenger))
        app.dependency_overrides[get_rpc_dispatcher] = lambda: dispatcher
        c = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(c)
        return c

    yield _make

    for c in clients:
        await c.aclose()
    app.dependency_overrides.clear()


@pytest.fixture
async def client(client_for):
    return await client_for()
