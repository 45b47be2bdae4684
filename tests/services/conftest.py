"""Service test fixtures — dispatchers wired to in-memory collaborators.

Invariants:
    - Every test gets fresh FakeRecordStore / FakeMessenger instances (root conftest)
    - make_dispatcher builds the same object graph the lifespan builds
"""

import pytest

from record_gateway.services.rpc_dispatch import RpcDispatcher
from record_gateway.services.tool_dispatch import ToolDispatch
from record_gateway.services.tools_registry import get_profile


@pytest.fixture
def make_dispatcher(store, messenger):
    def _make(profile_name: str = "client-requests") -> RpcDispatcher:
        profile = get_profile(profile_name)
        tools = ToolDispatch(profile, store, messenger, mail_from="returns@example.com")
        return RpcDispatcher(profile, tools)
    return _make
